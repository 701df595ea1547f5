"""Image store schemas."""

from pydantic import Field

from moneybox.schemas.catalog import CamelModel


class ImageUpload(CamelModel):
    image_data: str = Field(..., min_length=1, description="data:<mime>;base64,<payload>")
    name: str | None = Field(None, max_length=255)
    type: str | None = Field(None, max_length=100)


class ImageInfo(CamelModel):
    id: str
    filename: str
    original_name: str | None = None
    url: str
    size: int
    type: str | None = None
    uploaded_at: str


class ImageListResponse(CamelModel):
    images: list[ImageInfo]
    total: int
