"""In-memory image store that records uploads and deletions for tests."""

from uuid import uuid4

from storefront.catalogue.images.port import ImageStore, ImageStoreError


class FakeImageStore(ImageStore):
    def __init__(self) -> None:
        self.stored: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_on_store_call: int | None = None
        self.fail_on_delete = False
        self._store_calls = 0

    def configure(self, fail_on_store_call: int | None = None, fail_on_delete: bool = False) -> None:
        """Make the Nth upload (1-based) or every delete fail."""
        self.fail_on_store_call = fail_on_store_call
        self.fail_on_delete = fail_on_delete

    def store(self, content: bytes, filename: str) -> str:
        self._store_calls += 1
        if self.fail_on_store_call is not None and self._store_calls == self.fail_on_store_call:
            raise ImageStoreError(f"Upload of {filename} failed")

        url = f"https://images.storefront.test/{uuid4().hex[:12]}/{filename}"
        self.stored[url] = content
        return url

    def delete(self, url: str) -> None:
        if self.fail_on_delete:
            raise ImageStoreError(f"Delete of {url} failed")
        self.stored.pop(url, None)
        self.deleted.append(url)
