"""Chat channel port: operator alerts posted to a shop chat."""

from abc import ABC, abstractmethod


class ChatPort(ABC):
    @abstractmethod
    def send(self, message: str) -> dict:
        """Post a message to the operator chat.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
