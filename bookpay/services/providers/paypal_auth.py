"""PayPal OAuth client-credentials exchange.

Tokens are fetched fresh for every order operation unless caching is enabled,
in which case they are reused until shortly before `expires_in` runs out.
"""

import time

import httpx

from bookpay.common.config import settings
from bookpay.common.credentials import Credentials
from bookpay.common.errors import TokenExchangeFailed
from bookpay.common.logging import logger
from bookpay.common.metrics import token_exchanges_total
from bookpay.services.providers.base import basic_auth_header, send

# Refresh this many seconds before PayPal's stated expiry.
EXPIRY_SKEW_SECONDS = 60


class PaypalTokenBroker:
    """Exchanges PayPal client credentials for short-lived bearer tokens."""

    def __init__(self, credentials: Credentials, client: httpx.AsyncClient, cache_enabled: bool = False) -> None:
        self.credentials = credentials
        self.client = client
        self.cache_enabled = cache_enabled
        self._cache: dict[str, tuple[str, float]] = {}

    def invalidate(self) -> None:
        """Drop any cached token, e.g. after PayPal rejects it."""

        self._cache.pop(self.credentials.paypal_client_id, None)

    def _cached(self) -> str | None:
        entry = self._cache.get(self.credentials.paypal_client_id)
        if entry is None:
            return None
        token, expires_at = entry
        if time.monotonic() >= expires_at:
            self.invalidate()
            return None
        return token

    async def fetch_access_token(self, force_refresh: bool = False) -> str:
        client_id, client_secret = self.credentials.require_paypal()
        if self.cache_enabled and not force_refresh:
            token = self._cached()
            if token:
                token_exchanges_total.labels(service=settings.service_name, outcome="cached").inc()
                return token

        request = self.client.build_request(
            "POST",
            f"{self.credentials.paypal_base_url}/v1/oauth2/token",
            content="grant_type=client_credentials",
            headers={
                "Authorization": basic_auth_header(client_id, client_secret),
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )
        try:
            _, body = await send(self.client, request, failure=TokenExchangeFailed)
        except TokenExchangeFailed:
            token_exchanges_total.labels(service=settings.service_name, outcome="failed").inc()
            raise
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            token_exchanges_total.labels(service=settings.service_name, outcome="failed").inc()
            raise TokenExchangeFailed("PayPal token response missing access_token", details=body)

        token_exchanges_total.labels(service=settings.service_name, outcome="fetched").inc()
        if self.cache_enabled:
            expires_in = body.get("expires_in")
            lifetime = float(expires_in) if isinstance(expires_in, (int, float)) else 0.0
            if lifetime > EXPIRY_SKEW_SECONDS:
                self._cache[client_id] = (token, time.monotonic() + lifetime - EXPIRY_SKEW_SECONDS)
            else:
                logger.info("paypal token not cached expires_in=%s", expires_in)
        return token
