"""Storage interface for the catalog tree."""

from abc import ABC, abstractmethod

from moneybox.schemas.catalog import Catalog


class CatalogStorage(ABC):
    """Loads and saves the whole catalog.

    ``save`` must reject the write with ``RevisionConflictError`` when the
    stored ``metadata.revision`` no longer matches the revision the catalog
    was loaded at, then persist the catalog with the revision incremented.
    """

    @abstractmethod
    def load(self) -> Catalog:
        ...

    @abstractmethod
    def save(self, catalog: Catalog) -> Catalog:
        ...
