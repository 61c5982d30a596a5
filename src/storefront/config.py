"""Runtime settings for the storefront.

Values come from environment variables prefixed with ``STOREFRONT_`` (or a
local ``.env`` file). Adapters read the settings when they are first built,
so tests that change the environment must call ``get_settings.cache_clear()``.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        extra="ignore",
    )

    currency: str = "INR"

    # Logging
    environment: str = "development"  # development | test | staging | production
    log_level: str = ""  # overrides the per-environment default
    log_dir: str = ""  # rotating file output, off when empty

    # Payment processor
    payment_gateway: str = "fake"  # fake | razorpay
    payment_gateway_url: str = "https://api.razorpay.com/v1"
    payment_key_id: str = ""
    payment_key_secret: str = "storefront-dev-secret"
    payment_timeout_seconds: float = 10.0
    test_payment_marker: str = "pay_test_"

    # Product images
    image_store: str = "fake"  # fake | cloudinary
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cloudinary_folder: str = "storefront"
    image_timeout_seconds: float = 30.0

    # Commodity rate provider
    rate_provider: str = "fake"  # fake | goldapi
    rate_provider_url: str = "https://www.goldapi.io/api/XAG/INR"
    rate_provider_token: str = ""
    rate_timeout_seconds: float = 10.0
    default_rate_per_gram: float = 152.0

    # Auth collaborator
    jwt_secret: str = "storefront-dev-jwt"
    jwt_algorithm: str = "HS256"

    # Notifications
    notifier: str = "fake"  # fake | live
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_url: str = "https://api.telegram.org"
    notify_timeout_seconds: float = 5.0
    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_sender: str = "orders@storefront.local"


@lru_cache
def get_settings() -> Settings:
    return Settings()
