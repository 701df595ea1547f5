"""Catalog schemas: persisted tree and API request/response bodies.

Field names are camelCase on the wire (``categoryId``, ``updatedAt``,
``lastUpdated``) to stay compatible with the admin frontend.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_ICON = "📦"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredModel(CamelModel):
    """Persisted node; keys this version does not know about are kept on save."""
    model_config = ConfigDict(extra="allow")


# ── Persisted tree ──

class Product(StoredModel):
    id: str
    name: str
    description: str = ""
    icon: str = DEFAULT_ICON
    order: int = 0
    updated_at: str | None = None


class Category(StoredModel):
    id: str
    name: str
    order: int = 0
    description: str | None = None
    products: list[Product] = Field(default_factory=list)
    updated_at: str | None = None


class Metadata(StoredModel):
    last_updated: str | None = None
    version: str = "1.0.0"
    revision: int = 0


class Catalog(StoredModel):
    categories: list[Category] = Field(default_factory=list)
    metadata: Metadata = Field(default_factory=Metadata)


# ── Category requests ──

class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class CategoryUpdate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


# ── Product requests ──

class ProductCreate(CamelModel):
    category_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    icon: str | None = Field(None, max_length=500)


class ProductUpdate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    icon: str | None = Field(None, max_length=500)


class ProductPatch(CamelModel):
    """Partial product fields applied by a bulk ``update``."""
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=5000)
    icon: str | None = Field(None, max_length=500)


# ── Reorder ──

class ProductOrder(CamelModel):
    id: str = Field(..., min_length=1)
    order: int = Field(..., ge=0)


class ReorderRequest(CamelModel):
    product_orders: list[ProductOrder]


# ── Bulk ──

class BulkData(ProductPatch):
    target_category_id: str | None = None


class BulkRequest(CamelModel):
    action: Literal["delete", "update", "move"]
    product_ids: list[str] = Field(..., min_length=1)
    data: BulkData | None = None


class BulkItemResult(CamelModel):
    id: str
    success: bool
    error: str | None = None


class BulkResponse(CamelModel):
    action: str
    processed: int
    failed: int
    results: list[BulkItemResult]
