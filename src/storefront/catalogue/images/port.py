"""Image store port (abstract interface).

Product photos live outside the domain store. The catalogue only keeps the
URLs returned by ``store`` and hands them back to ``delete`` on cleanup.
"""

from abc import ABC, abstractmethod


class ImageStoreError(Exception):
    """An upload or delete could not be completed."""


class ImageStore(ABC):
    @abstractmethod
    def store(self, content: bytes, filename: str) -> str:
        """Upload image bytes and return their public URL."""
        ...

    @abstractmethod
    def delete(self, url: str) -> None:
        """Remove a previously stored image."""
        ...
