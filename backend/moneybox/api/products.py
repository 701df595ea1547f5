from fastapi import APIRouter, Depends, status

from moneybox.core.deps import get_catalog_service, rate_limit
from moneybox.schemas.catalog import (
    BulkRequest,
    BulkResponse,
    Product,
    ProductCreate,
    ProductUpdate,
)
from moneybox.services.catalog import CatalogService

router = APIRouter(
    prefix="/api/products",
    tags=["products"],
    dependencies=[Depends(rate_limit("general", "write"))],
)


@router.post(
    "",
    response_model=Product,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.create_product(body)


@router.post("/bulk", response_model=BulkResponse)
async def bulk_products(
    body: BulkRequest,
    service: CatalogService = Depends(get_catalog_service),
):
    """Delete, update or move many products; failures are reported per id."""
    return await service.bulk(body)


@router.put("/{product_id}", response_model=Product, response_model_exclude_none=True)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_product(product_id, body)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    await service.delete_product(product_id)
