"""Image upload, gallery listing, fetch and delete."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse

from moneybox.core.deps import get_image_store, rate_limit
from moneybox.services.images import CONTENT_TYPES, ImageStore
from moneybox.schemas.image import ImageInfo, ImageListResponse, ImageUpload

router = APIRouter(
    prefix="/api/images",
    tags=["images"],
    dependencies=[Depends(rate_limit("general"))],
)
write_limit = [Depends(rate_limit("write"))]


@router.post(
    "/upload",
    response_model=ImageInfo,
    status_code=status.HTTP_201_CREATED,
    dependencies=write_limit,
)
async def upload_image(body: ImageUpload, store: ImageStore = Depends(get_image_store)):
    """Decode a base64 data URI and store it under a generated file name."""
    return store.upload(body.image_data, name=body.name, declared_type=body.type)


@router.get("", response_model=ImageListResponse)
async def list_images(store: ImageStore = Depends(get_image_store)):
    images = store.list_images()
    return ImageListResponse(images=images, total=len(images))


@router.get("/{filename:path}")
async def get_image(filename: str, store: ImageStore = Depends(get_image_store)):
    path = store.resolve(filename)
    return FileResponse(path, media_type=CONTENT_TYPES.get(path.suffix.lower()))


@router.delete(
    "/{filename:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=write_limit,
)
async def delete_image(filename: str, store: ImageStore = Depends(get_image_store)):
    store.delete(filename)
