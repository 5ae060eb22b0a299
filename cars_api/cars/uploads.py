"""Image upload checks and storage for car pictures."""

import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile

from cars_api.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"jpeg", "jpg", "png", "gif"}


class ImageRejected(ValueError):
    pass


def read_image(upload: UploadFile | None, max_bytes: int | None = None) -> tuple[bytes, str]:
    """Check an uploaded file and return (content, extension).

    Nothing is written to disk here, so a rejected file leaves no trace.
    """
    if upload is None or not upload.filename:
        raise ImageRejected("No file selected.")

    max_bytes = max_bytes or settings.max_upload_bytes
    extension = Path(upload.filename).suffix.lower()
    media_type, _, subtype = (upload.content_type or "").lower().partition("/")
    if (
        extension.lstrip(".") not in ALLOWED_IMAGE_TYPES
        or media_type != "image"
        or subtype not in ALLOWED_IMAGE_TYPES
    ):
        raise ImageRejected("Only image files (jpeg, jpg, png, gif) are allowed.")

    content = upload.file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise ImageRejected(f"File too large (max {max_bytes // (1024 * 1024)} MB).")
    if not content:
        raise ImageRejected("Uploaded file is empty.")
    return content, extension


def save_image(content: bytes, extension: str, upload_dir: str | Path | None = None) -> str:
    """Write the image under a collision-resistant name and return that name."""
    directory = Path(upload_dir or settings.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    name = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}"
    (directory / name).write_bytes(content)
    logger.info(f"Stored image {name} ({len(content)} bytes)")
    return name


def image_url_for(name: str) -> str:
    return f"{settings.upload_url_prefix.rstrip('/')}/{name}"
