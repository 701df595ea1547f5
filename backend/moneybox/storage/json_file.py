"""Catalog persisted as a single JSON document on disk."""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from moneybox.core.clock import utcnow_iso
from moneybox.core.errors import RevisionConflictError, StorageError
from moneybox.schemas.catalog import Catalog, Category, Metadata, Product
from moneybox.storage.base import CatalogStorage

logger = logging.getLogger(__name__)


def default_catalog() -> Catalog:
    """Seed written when the data file does not exist yet."""
    return Catalog(
        categories=[
            Category(
                id="savings",
                name="Savings",
                order=1,
                products=[
                    Product(
                        id="cash-isa",
                        name="Cash ISA",
                        description="A tax-free way to save up to £20,000 per year",
                        icon="💰",
                        order=1,
                    ),
                ],
            ),
        ],
        metadata=Metadata(last_updated=utcnow_iso(), version="1.0.0", revision=0),
    )


class JsonFileStorage(CatalogStorage):
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Catalog:
        raw = self._read_raw()
        if raw is None:
            catalog = default_catalog()
            self._write(catalog)
            logger.info("Seeded default catalog at %s", self.path)
            return catalog
        try:
            return Catalog.model_validate(raw)
        except ValidationError as e:
            raise StorageError(f"Catalog file {self.path} has an invalid shape") from e

    def save(self, catalog: Catalog) -> Catalog:
        raw = self._read_raw()
        stored_revision = 0
        if raw is not None:
            stored_revision = (raw.get("metadata") or {}).get("revision", 0)
        if stored_revision != catalog.metadata.revision:
            raise RevisionConflictError(
                "Catalog was modified by another writer; reload and retry"
            )

        saved = catalog.model_copy(deep=True)
        saved.metadata.revision = stored_revision + 1
        saved.metadata.last_updated = utcnow_iso()
        self._write(saved)
        return saved

    def _read_raw(self) -> dict | None:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}") from e
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StorageError(f"Catalog file {self.path} is not valid JSON") from e
        if not isinstance(data, dict):
            raise StorageError(f"Catalog file {self.path} must hold a JSON object")
        return data

    def _write(self, catalog: Catalog) -> None:
        """Write to a sibling temp file then rename over the target."""
        payload = json.dumps(
            catalog.model_dump(by_alias=True, exclude_none=True),
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}") from e
