"""Gold API rate provider.

Gold API quotes XAG/INR per troy ounce; the adapter converts the quote to a
per-gram price rounded to two decimals.
"""

import requests
import structlog

from storefront.pricing.provider.port import TROY_OUNCE_GRAMS, RateProvider, RateProviderError

logger = structlog.get_logger(__name__)


class GoldApiProvider(RateProvider):
    def __init__(self, url: str, token: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_rate_per_gram(self) -> float:
        try:
            response = self.session.get(
                self.url,
                headers={"x-access-token": self.token, "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            price_per_ounce = float(response.json()["price"])
        except requests.RequestException as exc:
            logger.warning("goldapi_request_failed", url=self.url, error=str(exc))
            raise RateProviderError(f"Gold API request failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("goldapi_payload_invalid", url=self.url, error=str(exc))
            raise RateProviderError("Gold API returned an unusable quote") from exc

        if price_per_ounce <= 0:
            raise RateProviderError("Gold API returned a non-positive quote")

        return round(price_per_ounce / TROY_OUNCE_GRAMS, 2)
