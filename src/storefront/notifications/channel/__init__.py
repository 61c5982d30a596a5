"""Channel adapter registry.

Fake adapters are used unless STOREFRONT_NOTIFIER=live, in which case the
chat channel posts to Telegram and the email channel goes through SMTP.
"""

from storefront.config import get_settings

CHAT = "chat"
EMAIL = "email"

_channel_instances: dict[str, object] = {}


def _build(channel_type: str):
    settings = get_settings()
    live = settings.notifier == "live"

    if channel_type == CHAT:
        if live:
            from storefront.notifications.channel.telegram import TelegramChatAdapter

            return TelegramChatAdapter(
                api_url=settings.telegram_api_url,
                bot_token=settings.telegram_bot_token,
                chat_id=settings.telegram_chat_id,
                timeout=settings.notify_timeout_seconds,
            )
        from storefront.notifications.channel.fake_chat import FakeChatAdapter

        return FakeChatAdapter()

    if channel_type == EMAIL:
        if live:
            from storefront.notifications.channel.smtp_email import SmtpEmailAdapter

            return SmtpEmailAdapter(
                host=settings.smtp_host,
                port=settings.smtp_port,
                sender=settings.smtp_sender,
                username=settings.smtp_username,
                password=settings.smtp_password,
                timeout=settings.notify_timeout_seconds,
            )
        from storefront.notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()

    raise ValueError(f"Unknown channel type: {channel_type}")


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        _channel_instances[channel_type] = _build(channel_type)
    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
