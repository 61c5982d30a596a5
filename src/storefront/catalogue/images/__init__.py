"""Image store factory plus upload and cleanup helpers used by product commands.

The fake store is used unless STOREFRONT_IMAGE_STORE=cloudinary.

Uploads arrive as a JSON array of ``{"filename": ..., "content": <base64>}``
objects. An upload batch is all-or-nothing; deletes are best-effort.
"""

import base64
import binascii
import json

import structlog
from protean.exceptions import ValidationError

from storefront.catalogue.images.fake_adapter import FakeImageStore
from storefront.catalogue.images.port import ImageStore, ImageStoreError
from storefront.config import get_settings
from storefront.errors import ExternalDependencyError

logger = structlog.get_logger(__name__)

_current_store: ImageStore | None = None


def get_image_store() -> ImageStore:
    """Return the current image store, building it from settings on first use."""
    global _current_store
    if _current_store is None:
        settings = get_settings()
        if settings.image_store == "cloudinary":
            from storefront.catalogue.images.cloudinary_adapter import CloudinaryImageStore

            _current_store = CloudinaryImageStore(
                cloud_name=settings.cloudinary_cloud_name,
                api_key=settings.cloudinary_api_key,
                api_secret=settings.cloudinary_api_secret,
                folder=settings.cloudinary_folder,
                timeout=settings.image_timeout_seconds,
            )
        else:
            _current_store = FakeImageStore()
    return _current_store


def set_image_store(store: ImageStore) -> None:
    global _current_store
    _current_store = store


def reset_image_store() -> None:
    global _current_store
    _current_store = None


def parse_uploads(payload: str | None) -> list[tuple[str, bytes]]:
    """Decode the JSON upload payload into (filename, bytes) pairs."""
    if not payload:
        return []
    try:
        entries = json.loads(payload)
        return [(entry["filename"], base64.b64decode(entry["content"], validate=True)) for entry in entries]
    except (json.JSONDecodeError, KeyError, TypeError, binascii.Error) as exc:
        raise ValidationError({"images": ["Images must be a list of base64 encoded files"]}) from exc


def upload_images(uploads: list[tuple[str, bytes]]) -> list[str]:
    """Store every upload or none of them."""
    store = get_image_store()
    urls: list[str] = []
    for filename, content in uploads:
        try:
            urls.append(store.store(content, filename))
        except ImageStoreError as exc:
            logger.error("image_upload_failed", filename=filename, error=str(exc))
            discard_images(urls)
            raise ExternalDependencyError("image_upload_failed", str(exc)) from exc
    return urls


def discard_images(urls) -> None:
    """Delete stored images, logging and skipping any that fail."""
    store = get_image_store()
    for url in urls:
        try:
            store.delete(url)
        except ImageStoreError as exc:
            logger.warning("image_delete_failed", url=url, error=str(exc))
