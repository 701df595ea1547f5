"""Category CRUD and product reorder endpoints."""

from fastapi import APIRouter, Depends, status

from moneybox.core.deps import get_catalog_service, rate_limit
from moneybox.schemas.catalog import (
    Catalog,
    Category,
    CategoryCreate,
    CategoryUpdate,
    ReorderRequest,
)
from moneybox.services.catalog import CatalogService

router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
    dependencies=[Depends(rate_limit("general"))],
)
write_limit = [Depends(rate_limit("write"))]


@router.get("", response_model=Catalog, response_model_exclude_none=True)
async def list_categories(service: CatalogService = Depends(get_catalog_service)):
    """Full catalog tree: every category with its embedded products."""
    return await service.get_catalog()


@router.get("/{category_id}", response_model=Category, response_model_exclude_none=True)
async def get_category(
    category_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.get_category(category_id)


@router.post(
    "",
    response_model=Category,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_limit,
)
async def create_category(
    body: CategoryCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    """Append a category; its order is the current category count + 1."""
    return await service.create_category(body)


@router.put(
    "/{category_id}",
    response_model=Category,
    response_model_exclude_none=True,
    dependencies=write_limit,
)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_category(category_id, body)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=write_limit,
)
async def delete_category(
    category_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete a category together with all of its products."""
    await service.delete_category(category_id)


@router.put(
    "/{category_id}/products/reorder",
    response_model=Category,
    response_model_exclude_none=True,
    dependencies=write_limit,
)
async def reorder_products(
    category_id: str,
    body: ReorderRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Apply client-computed orders, then sort the category's products by order."""
    return await service.reorder_products(category_id, body.product_orders)
