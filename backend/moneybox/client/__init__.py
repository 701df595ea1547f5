from moneybox.client.api import ApiError, CatalogClient, DEFAULT_BASE_URL
from moneybox.client.explorer import ExplorerState
from moneybox.client.reorder import move_item, reorder_command

__all__ = [
    "ApiError", "CatalogClient", "DEFAULT_BASE_URL",
    "ExplorerState",
    "move_item", "reorder_command",
]
