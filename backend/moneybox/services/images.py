"""Uploaded images kept as flat files in one directory."""

import base64
import binascii
import logging
import re
import uuid
from pathlib import Path

from moneybox.core.clock import epoch_ms, iso_from_epoch_ms
from moneybox.core.errors import NotFoundError, PayloadTooLarge, ValidationFailed
from moneybox.schemas.image import ImageInfo

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


def is_safe_filename(filename: str) -> bool:
    if not filename or filename in {".", ".."}:
        return False
    return not any(bad in filename for bad in ("..", "/", "\\", "\x00"))


class ImageStore:
    def __init__(self, directory: str | Path, max_bytes: int, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def upload(
        self, image_data: str, name: str | None = None, declared_type: str | None = None
    ) -> ImageInfo:
        match = _DATA_URI.match(image_data.strip())
        if not match:
            raise ValidationFailed("Invalid image data: expected a base64 data URI")

        mime = match.group("mime").lower()
        ext = ALLOWED_TYPES.get(mime)
        if ext is None:
            raise ValidationFailed(
                f"File type not allowed. Use: {', '.join(sorted(ALLOWED_TYPES))}"
            )
        # image/jpg and image/jpeg name the same format
        if declared_type and ALLOWED_TYPES.get(declared_type.strip().lower()) != ext:
            raise ValidationFailed("Image type does not match image data")

        payload = match.group("payload")
        # Reject before decoding; base64 inflates by 4/3
        if len(payload) * 3 // 4 > self.max_bytes:
            raise PayloadTooLarge(f"File too large. Max {self.max_bytes // (1024 * 1024)}MB")
        try:
            content = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationFailed("Invalid image data: payload is not valid base64")
        if not content:
            raise ValidationFailed("Invalid image data: empty payload")
        if len(content) > self.max_bytes:
            raise PayloadTooLarge(f"File too large. Max {self.max_bytes // (1024 * 1024)}MB")

        self.ensure_dir()
        stamp = epoch_ms()
        filename = f"{stamp}_{uuid.uuid4().hex[:8]}.{ext}"
        with open(self.directory / filename, "wb") as f:
            f.write(content)

        logger.info("Stored image %s (%d bytes, %s)", filename, len(content), mime)
        return ImageInfo(
            id=Path(filename).stem,
            filename=filename,
            original_name=name,
            url=f"{self.url_prefix}/{filename}",
            size=len(content),
            type=mime,
            uploaded_at=iso_from_epoch_ms(stamp),
        )

    def list_images(self) -> list[ImageInfo]:
        if not self.directory.is_dir():
            return []
        images = [
            self._describe(path)
            for path in self.directory.iterdir()
            if path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS
        ]
        images.sort(key=lambda i: i.uploaded_at, reverse=True)
        return images

    def resolve(self, filename: str) -> Path:
        """Path for an existing image; rejects names that could leave the directory."""
        if not is_safe_filename(filename):
            logger.warning("Rejected image name with path traversal: %r", filename)
            raise ValidationFailed("Invalid filename")
        path = (self.directory / filename).resolve()
        if path.parent != self.directory.resolve():
            logger.warning("Rejected image name outside upload dir: %r", filename)
            raise ValidationFailed("Invalid filename")
        if not path.is_file():
            raise NotFoundError("Image not found")
        return path

    def delete(self, filename: str) -> None:
        path = self.resolve(filename)
        path.unlink()
        logger.info("Deleted image %s", filename)

    def _describe(self, path: Path) -> ImageInfo:
        stem = path.stem
        prefix = stem.split("_", 1)[0]
        if prefix.isdigit():
            uploaded_at = iso_from_epoch_ms(int(prefix))
        else:
            uploaded_at = iso_from_epoch_ms(int(path.stat().st_mtime * 1000))
        return ImageInfo(
            id=stem,
            filename=path.name,
            url=f"{self.url_prefix}/{path.name}",
            size=path.stat().st_size,
            type=CONTENT_TYPES.get(path.suffix.lower()),
            uploaded_at=uploaded_at,
        )
