"""View state behind the product explorer and its admin panel."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from moneybox.client.api import ApiError, CatalogClient
from moneybox.client.reorder import move_item, reorder_command

logger = logging.getLogger(__name__)

CAROUSEL_WIDTH = 3


@dataclass
class ExplorerState:
    client: CatalogClient
    categories: list[dict[str, Any]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    expanded: set[str] = field(default_factory=set)
    current_index: int = 1
    admin_mode: bool = False
    selection_mode: bool = False
    selected: list[str] = field(default_factory=list)
    error: str | None = None
    message: str | None = None

    # ── Loading ──

    def load(self) -> bool:
        """Fetch the whole catalog. On failure keep the old data and set ``error``."""
        try:
            data = self.client.get_categories()
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Catalog load failed: %s", e)
            self.error = "Failed to load products. Please try again."
            return False
        self.categories = sorted(data.get("categories", []), key=lambda c: c.get("order", 0))
        self.metadata = data.get("metadata", {})
        self.error = None
        if self.categories:
            self.current_index = min(self.current_index, len(self.categories) - 1)
        return True

    def retry(self) -> bool:
        return self.load()

    # ── Product cards ──

    def toggle_product(self, product_id: str) -> bool:
        """Flip one card; other cards keep their state. Returns the new state."""
        if product_id in self.expanded:
            self.expanded.discard(product_id)
            return False
        self.expanded.add(product_id)
        return True

    def is_expanded(self, product_id: str) -> bool:
        return product_id in self.expanded

    # ── Category carousel ──

    def visible_categories(self) -> list[dict[str, Any]]:
        """Previous, current and next category, wrapping at both ends."""
        count = len(self.categories)
        if count <= CAROUSEL_WIDTH:
            return list(self.categories)
        return [
            self.categories[(self.current_index - 1) % count],
            self.categories[self.current_index % count],
            self.categories[(self.current_index + 1) % count],
        ]

    def next_category(self) -> None:
        if self.categories:
            self.current_index = (self.current_index + 1) % len(self.categories)

    def prev_category(self) -> None:
        if self.categories:
            self.current_index = (self.current_index - 1) % len(self.categories)

    # ── Admin panel ──

    def toggle_admin(self) -> bool:
        self.admin_mode = not self.admin_mode
        if not self.admin_mode:
            self.exit_selection_mode()
        return self.admin_mode

    @property
    def drag_enabled(self) -> bool:
        """Drag-reorder and bulk selection never run at the same time."""
        return self.admin_mode and not self.selection_mode

    def enter_selection_mode(self) -> None:
        self.selection_mode = True
        self.selected = []

    def exit_selection_mode(self) -> None:
        self.selection_mode = False
        self.selected = []

    def toggle_selection_mode(self) -> bool:
        if self.selection_mode:
            self.exit_selection_mode()
        else:
            self.enter_selection_mode()
        return self.selection_mode

    def set_selected(self, product_id: str, selected: bool) -> None:
        if not self.selection_mode:
            return
        if selected and product_id not in self.selected:
            self.selected.append(product_id)
        elif not selected and product_id in self.selected:
            self.selected.remove(product_id)

    def select_all(self, category_id: str) -> None:
        if not self.selection_mode:
            return
        category = self._category(category_id)
        self.selected = [p["id"] for p in category.get("products", [])]

    def clear_selection(self) -> None:
        self.selected = []

    # ── Admin mutations ──

    def drop_product(self, category_id: str, from_index: int, to_index: int) -> bool:
        """Finish a drag: recompute orders locally, push them, then refetch."""
        if not self.drag_enabled or from_index == to_index:
            return False
        category = self._category(category_id)
        products = sorted(category.get("products", []), key=lambda p: p.get("order", 0))
        reordered = move_item(products, from_index, to_index)
        return self._run(
            lambda: self.client.reorder_products(category_id, reorder_command(reordered)),
            "Products reordered",
        )

    def bulk_delete(self) -> bool:
        return self._bulk("delete")

    def bulk_update(self, **fields: Any) -> bool:
        return self._bulk("update", fields)

    def bulk_move(self, target_category_id: str) -> bool:
        return self._bulk("move", {"targetCategoryId": target_category_id})

    def _bulk(self, action: str, data: dict | None = None) -> bool:
        if not self.selected:
            return False
        ids = list(self.selected)
        ok = self._run(lambda: self.client.bulk_operation(action, ids, data), None)
        if ok:
            self.clear_selection()
        return ok

    def _run(self, call, success_message: str | None) -> bool:
        """One request per action; errors become a transient message, never retried."""
        try:
            result = call()
        except (ApiError, httpx.HTTPError) as e:
            self.message = getattr(e, "message", None) or str(e)
            return False
        if success_message is None and isinstance(result, dict) and "processed" in result:
            success_message = f"{result['processed']} processed, {result['failed']} failed"
        self.message = success_message
        self.load()
        return True

    def _category(self, category_id: str) -> dict[str, Any]:
        for category in self.categories:
            if category["id"] == category_id:
                return category
        raise KeyError(category_id)
