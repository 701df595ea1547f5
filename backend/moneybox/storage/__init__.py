from moneybox.storage.base import CatalogStorage
from moneybox.storage.json_file import JsonFileStorage, default_catalog

__all__ = ["CatalogStorage", "JsonFileStorage", "default_catalog"]
