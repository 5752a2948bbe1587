"""
Binary asset store for fanwork uploads.

Files are written under a root directory with random hex names. The
locator handed back to callers is just that file name, so a stored file
can only be served if the locator matches the generated pattern.
"""

import io
import re
import secrets
from pathlib import Path

from PIL import Image

from fanhub.config import settings
from fanhub.core.errors import NotFoundError, ValidationError
from fanhub.core.logging import get_logger

logger = get_logger(__name__)

IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

DOCUMENT_TYPES: dict[str, str] = {
    "text/plain": "txt",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}

ALLOWED_TYPES: dict[str, str] = {**IMAGE_TYPES, **DOCUMENT_TYPES}
EXTENSION_TYPES: dict[str, str] = {ext: ctype for ctype, ext in ALLOWED_TYPES.items()}

# Pillow format names for each accepted image type
PIL_FORMATS: dict[str, str] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}

LOCATOR_RE = re.compile(r"^[0-9a-f]{32}\.(?:jpg|png|gif|webp|txt|pdf|doc|docx)$")


def is_image_type(content_type: str) -> bool:
    return content_type in IMAGE_TYPES


def content_type_for(locator: str) -> str:
    """Media type of a stored file, derived from its locator."""
    ext = locator.rsplit(".", 1)[-1]
    return EXTENSION_TYPES.get(ext, "application/octet-stream")


def _verify_image(data: bytes, content_type: str) -> None:
    """Check the bytes really are an image of the declared type."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            detected = img.format
            img.verify()
    except Exception as e:
        raise ValidationError("File is not a valid image") from e

    if detected != PIL_FORMATS[content_type]:
        raise ValidationError(f"File content does not match declared type {content_type}")


class LocalAssetStore:
    """Stores uploaded bytes on the local filesystem."""

    def __init__(self, root: str | Path, max_size: int | None = None) -> None:
        self.root = Path(root)
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE

    def store(self, data: bytes, content_type: str) -> str:
        """
        Validate and persist an upload.

        Args:
            data: File contents
            content_type: Declared media type

        Returns:
            Opaque locator for serve()

        Raises:
            ValidationError: Empty, too large, disallowed type, or not a real image
        """
        content_type = (content_type or "").split(";", 1)[0].strip().lower()
        if content_type not in ALLOWED_TYPES:
            raise ValidationError(f"File type {content_type or 'unknown'} is not allowed")
        if not data:
            raise ValidationError("File is empty")
        if len(data) > self.max_size:
            raise ValidationError(f"File size exceeds maximum of {self.max_size} bytes")
        if is_image_type(content_type):
            _verify_image(data, content_type)

        locator = f"{secrets.token_hex(16)}.{ALLOWED_TYPES[content_type]}"
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / locator).write_bytes(data)

        logger.info("asset_stored", locator=locator, content_type=content_type, size=len(data))
        return locator

    def path_for(self, locator: str) -> Path:
        """
        Resolve a locator to its file.

        Raises:
            NotFoundError: Malformed locator or no such file
        """
        if not LOCATOR_RE.match(locator):
            raise NotFoundError("File not found")
        path = self.root / locator
        if not path.is_file():
            raise NotFoundError("File not found")
        return path

    def serve(self, locator: str) -> bytes:
        """Return the bytes stored under `locator`."""
        return self.path_for(locator).read_bytes()

    def url_for(self, locator: str) -> str:
        return f"{settings.UPLOAD_BASE_URL.rstrip('/')}/{locator}"


def get_asset_store() -> LocalAssetStore:
    """Asset store rooted at the configured upload path."""
    return LocalAssetStore(settings.UPLOAD_PATH)
