"""Email channel port: customer-facing order emails."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Send a plain-text email.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
