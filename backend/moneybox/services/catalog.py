"""Catalog mutations: category/product CRUD, reorder and bulk actions.

Every mutation runs as one read-modify-write against the storage under a
process-wide lock, so two requests handled by the same worker cannot
overwrite each other. Writers in other processes are caught by the
storage's revision check instead.
"""

import asyncio
import logging
from typing import Callable, TypeVar

from moneybox.core.clock import epoch_ms, utcnow_iso
from moneybox.core.errors import NotFoundError, ValidationFailed
from moneybox.schemas.catalog import (
    DEFAULT_ICON,
    BulkItemResult,
    BulkRequest,
    BulkResponse,
    Catalog,
    Category,
    CategoryCreate,
    CategoryUpdate,
    Product,
    ProductCreate,
    ProductOrder,
    ProductPatch,
    ProductUpdate,
)
from moneybox.services.sanitize import sanitize_html, sanitize_input
from moneybox.storage.base import CatalogStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def find_category(catalog: Catalog, category_id: str) -> Category | None:
    for category in catalog.categories:
        if category.id == category_id:
            return category
    return None


def find_product(catalog: Catalog, product_id: str) -> tuple[Category, int] | None:
    """Locate a product by id, scanning categories in stored order.

    Returns the owning category and the product's index in it. This is the
    only place that walks every category looking for a product, so swapping
    in an id -> category index later only touches this function.
    """
    for category in catalog.categories:
        for index, product in enumerate(category.products):
            if product.id == product_id:
                return category, index
    return None


def _all_ids(catalog: Catalog) -> set[str]:
    ids = {c.id for c in catalog.categories}
    ids.update(p.id for c in catalog.categories for p in c.products)
    return ids


def new_id(catalog: Catalog, prefix: str) -> str:
    """``<prefix>-<epoch-ms>``, bumped past any id already in the catalog."""
    taken = _all_ids(catalog)
    stamp = epoch_ms()
    while f"{prefix}-{stamp}" in taken:
        stamp += 1
    return f"{prefix}-{stamp}"


def _required_name(value: str) -> str:
    name = sanitize_input(value)
    if not name:
        raise ValidationFailed(
            "Validation failed",
            details=[{"field": "name", "message": "Name is required"}],
        )
    return name


def _apply_patch(product: Product, patch: ProductPatch) -> None:
    """Merge the non-empty fields of ``patch`` over ``product``."""
    if patch.name is not None:
        product.name = _required_name(patch.name)
    if patch.description:
        product.description = sanitize_html(patch.description)
    if patch.icon:
        product.icon = sanitize_input(patch.icon) or product.icon
    product.updated_at = utcnow_iso()


class CatalogService:
    def __init__(self, storage: CatalogStorage):
        self.storage = storage
        self._lock = asyncio.Lock()

    async def _mutate(self, mutator: Callable[[Catalog], T]) -> T:
        async with self._lock:
            catalog = self.storage.load()
            result = mutator(catalog)
            self.storage.save(catalog)
            return result

    # ── Reads ──

    async def get_catalog(self) -> Catalog:
        async with self._lock:
            return self.storage.load()

    async def get_category(self, category_id: str) -> Category:
        catalog = await self.get_catalog()
        category = find_category(catalog, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    # ── Categories ──

    async def create_category(self, body: CategoryCreate) -> Category:
        name = _required_name(body.name)

        def mutator(catalog: Catalog) -> Category:
            category = Category(
                id=new_id(catalog, "category"),
                name=name,
                order=len(catalog.categories) + 1,
                description=sanitize_input(body.description) or None,
                products=[],
            )
            catalog.categories.append(category)
            return category

        category = await self._mutate(mutator)
        logger.info("Created category %s (%s)", category.id, category.name)
        return category

    async def update_category(self, category_id: str, body: CategoryUpdate) -> Category:
        name = _required_name(body.name)

        def mutator(catalog: Catalog) -> Category:
            category = find_category(catalog, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            category.name = name
            if body.description:
                category.description = sanitize_input(body.description)
            category.updated_at = utcnow_iso()
            return category

        category = await self._mutate(mutator)
        logger.info("Updated category %s", category_id)
        return category

    async def delete_category(self, category_id: str) -> None:
        def mutator(catalog: Catalog) -> int:
            category = find_category(catalog, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            catalog.categories.remove(category)
            return len(category.products)

        removed_products = await self._mutate(mutator)
        logger.info(
            "Deleted category %s with %d product(s)", category_id, removed_products
        )

    # ── Products ──

    async def create_product(self, body: ProductCreate) -> Product:
        name = _required_name(body.name)

        def mutator(catalog: Catalog) -> Product:
            category = find_category(catalog, body.category_id)
            if category is None:
                raise NotFoundError("Category not found")
            product = Product(
                id=new_id(catalog, "product"),
                name=name,
                description=sanitize_html(body.description),
                icon=sanitize_input(body.icon) or DEFAULT_ICON,
                order=len(category.products) + 1,
            )
            category.products.append(product)
            return product

        product = await self._mutate(mutator)
        logger.info("Created product %s in %s", product.id, body.category_id)
        return product

    async def update_product(self, product_id: str, body: ProductUpdate) -> Product:
        patch = ProductPatch(name=body.name, description=body.description, icon=body.icon)
        _required_name(body.name)

        def mutator(catalog: Catalog) -> Product:
            located = find_product(catalog, product_id)
            if located is None:
                raise NotFoundError("Product not found")
            category, index = located
            product = category.products[index]
            _apply_patch(product, patch)
            return product

        product = await self._mutate(mutator)
        logger.info("Updated product %s", product_id)
        return product

    async def delete_product(self, product_id: str) -> None:
        def mutator(catalog: Catalog) -> str:
            located = find_product(catalog, product_id)
            if located is None:
                raise NotFoundError("Product not found")
            category, index = located
            category.products.pop(index)
            return category.id

        category_id = await self._mutate(mutator)
        logger.info("Deleted product %s from %s", product_id, category_id)

    # ── Reorder ──

    async def reorder_products(
        self, category_id: str, product_orders: list[ProductOrder]
    ) -> Category:
        """Set the order of the listed products, then sort the category by order.

        Ids that do not belong to the category are skipped and logged.
        """

        def mutator(catalog: Catalog) -> tuple[Category, list[str]]:
            category = find_category(catalog, category_id)
            if category is None:
                raise NotFoundError("Category not found")
            by_id = {p.id: p for p in category.products}
            skipped = []
            for entry in product_orders:
                product = by_id.get(entry.id)
                if product is None:
                    skipped.append(entry.id)
                    continue
                product.order = entry.order
            category.products.sort(key=lambda p: p.order)
            return category, skipped

        category, skipped = await self._mutate(mutator)
        if skipped:
            logger.warning(
                "Reorder of %s skipped unknown product ids: %s", category_id, skipped
            )
        else:
            logger.info("Reordered %d product(s) in %s", len(product_orders), category_id)
        return category

    # ── Bulk ──

    async def bulk(self, request: BulkRequest) -> BulkResponse:
        """Apply one action to each product id independently.

        Items fail individually (missing product, bad name) without stopping
        the batch. Only a missing move target rejects the whole request.
        """
        data = request.data
        if request.action == "move" and (data is None or not data.target_category_id):
            raise ValidationFailed(
                "Validation failed",
                details=[{"field": "data.targetCategoryId",
                          "message": "Target category is required for move"}],
            )
        if request.action == "update" and (
            data is None or not data.model_dump(exclude_none=True, exclude={"target_category_id"})
        ):
            raise ValidationFailed(
                "Validation failed",
                details=[{"field": "data", "message": "No fields to update"}],
            )

        async with self._lock:
            catalog = self.storage.load()
            target = None
            if request.action == "move":
                target = find_category(catalog, data.target_category_id)
                if target is None:
                    raise NotFoundError("Target category not found")

            results = [
                self._bulk_item(catalog, request.action, product_id, data, target)
                for product_id in request.product_ids
            ]
            processed = sum(1 for r in results if r.success)
            if processed:
                self.storage.save(catalog)

        failed = len(results) - processed
        for r in results:
            if not r.success:
                logger.warning("Bulk %s failed for %s: %s", request.action, r.id, r.error)
        logger.info("Bulk %s: processed=%d failed=%d", request.action, processed, failed)
        return BulkResponse(
            action=request.action, processed=processed, failed=failed, results=results
        )

    @staticmethod
    def _bulk_item(catalog, action, product_id, data, target) -> BulkItemResult:
        located = find_product(catalog, product_id)
        if located is None:
            return BulkItemResult(id=product_id, success=False, error="Product not found")
        category, index = located

        if action == "delete":
            category.products.pop(index)
        elif action == "update":
            try:
                _apply_patch(category.products[index], data)
            except ValidationFailed as e:
                return BulkItemResult(id=product_id, success=False, error=e.message)
        elif action == "move" and category is not target:
            product = category.products.pop(index)
            product.order = len(target.products) + 1
            product.updated_at = utcnow_iso()
            target.products.append(product)
        return BulkItemResult(id=product_id, success=True)
