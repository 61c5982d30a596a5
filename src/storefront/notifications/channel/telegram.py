"""Telegram bot adapter posting operator alerts through the Bot API."""

import requests
import structlog

from storefront.notifications.channel.chat_port import ChatPort

logger = structlog.get_logger(__name__)


class TelegramChatAdapter(ChatPort):
    def __init__(
        self,
        api_url: str,
        bot_token: str,
        chat_id: str,
        timeout: float = 5.0,
        session: requests.Session | None = None,
    ):
        self.url = f"{api_url.rstrip('/')}/bot{bot_token}/sendMessage"
        self.chat_id = chat_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, message: str) -> dict:
        try:
            response = self.session.post(
                self.url,
                json={"chat_id": self.chat_id, "text": message, "parse_mode": "HTML"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            result = response.json().get("result", {})
        except (requests.RequestException, ValueError) as exc:
            logger.warning("telegram_send_failed", error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        return {"message_id": str(result.get("message_id", "")), "status": "sent"}
