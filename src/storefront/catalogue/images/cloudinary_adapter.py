"""Cloudinary adapter using the signed REST upload API over requests."""

import hashlib
import time
import uuid
from pathlib import PurePosixPath
from urllib.parse import urlparse

import requests
import structlog

from storefront.catalogue.images.port import ImageStore, ImageStoreError

logger = structlog.get_logger(__name__)


def sign(params: dict, api_secret: str) -> str:
    """SHA-1 over the sorted ``key=value`` pairs followed by the API secret."""
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()


def public_id_from_url(url: str, folder: str) -> str:
    """``.../upload/v123/<folder>/abc.jpg`` -> ``<folder>/abc``."""
    stem = PurePosixPath(urlparse(url).path).stem
    return f"{folder}/{stem}" if folder else stem


class CloudinaryImageStore(ImageStore):
    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "storefront",
        base_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/{cloud_name}/image"
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self.session = session or requests.Session()

    def _signed(self, params: dict) -> dict:
        params = {**params, "timestamp": int(time.time())}
        return {**params, "api_key": self.api_key, "signature": sign(params, self.api_secret)}

    def _post(self, action: str, data: dict, files=None) -> dict:
        try:
            response = self.session.post(f"{self.endpoint}/{action}", data=data, files=files, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            logger.warning("cloudinary_request_failed", action=action, error=str(exc))
            raise ImageStoreError(f"Cloudinary {action} failed: {exc}") from exc
        except ValueError as exc:
            raise ImageStoreError("Cloudinary returned a malformed response") from exc

    def store(self, content: bytes, filename: str) -> str:
        data = self._signed({"folder": self.folder, "public_id": uuid.uuid4().hex})
        body = self._post("upload", data, files={"file": (filename, content)})
        try:
            return body["secure_url"]
        except KeyError as exc:
            raise ImageStoreError("Cloudinary upload response has no secure_url") from exc

    def delete(self, url: str) -> None:
        body = self._post("destroy", self._signed({"public_id": public_id_from_url(url, self.folder)}))
        if body.get("result") not in ("ok", "not found"):
            raise ImageStoreError(f"Cloudinary could not delete {url}: {body.get('result')}")
