from moneybox.schemas.catalog import (
    Catalog, Category, Product, Metadata,
    CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate, ProductPatch,
    ProductOrder, ReorderRequest,
    BulkData, BulkRequest, BulkItemResult, BulkResponse,
)
from moneybox.schemas.image import ImageUpload, ImageInfo, ImageListResponse

__all__ = [
    "Catalog", "Category", "Product", "Metadata",
    "CategoryCreate", "CategoryUpdate", "ProductCreate", "ProductUpdate", "ProductPatch",
    "ProductOrder", "ReorderRequest",
    "BulkData", "BulkRequest", "BulkItemResult", "BulkResponse",
    "ImageUpload", "ImageInfo", "ImageListResponse",
]
