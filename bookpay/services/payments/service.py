"""Payment operations across the three providers.

Every operation runs through `run`, which converts whatever the adapter raises
into a `Failure` so no provider error can escape to the HTTP layer.
"""

import inspect
import time
from typing import Any, Callable

import httpx

from bookpay.common.config import settings
from bookpay.common.credentials import Credentials
from bookpay.common.errors import Failure, Ok, PaymentError, Result
from bookpay.common.logging import logger, order_id_ctx, provider_ctx
from bookpay.common.metrics import provider_latency_seconds, provider_requests_total
from bookpay.common.tracing import tracer
from bookpay.services.providers.paypal import PaypalAdapter
from bookpay.services.providers.paypal_auth import PaypalTokenBroker
from bookpay.services.providers.razorpay import RazorpayAdapter
from bookpay.services.providers.stripe import StripeAdapter


class PaymentGatewayService:
    """Owns the outbound HTTP client and the provider adapters built on it."""

    def __init__(
        self,
        credentials: Credentials,
        client: httpx.AsyncClient | None = None,
        token_cache: bool | None = None,
    ) -> None:
        self.credentials = credentials
        self.token_cache = settings.paypal_token_cache if token_cache is None else token_cache
        self._wire(client or self._new_client())

    @staticmethod
    def _new_client() -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.provider_timeout_seconds)

    def _wire(self, client: httpx.AsyncClient) -> None:
        self.client = client
        self.paypal_tokens = PaypalTokenBroker(self.credentials, client, cache_enabled=self.token_cache)
        self.razorpay = RazorpayAdapter(self.credentials, client)
        self.stripe = StripeAdapter(self.credentials, client)
        self.paypal = PaypalAdapter(self.credentials, client, self.paypal_tokens)

    def start(self) -> None:
        """Reopen the HTTP client if a previous app lifespan closed it."""

        if self.client.is_closed:
            self._wire(self._new_client())

    async def aclose(self) -> None:
        await self.client.aclose()

    async def run(self, provider: str, operation: str, call: Callable[[], Any]) -> Result:
        """Execute one adapter call and return `Ok(value)` or `Failure`."""

        provider_ctx.set(provider)
        order_id_ctx.set("")
        start = time.perf_counter()
        outcome = "success"
        try:
            with tracer.start_as_current_span(f"{provider}.{operation}"):
                value = call()
                if inspect.isawaitable(value):
                    value = await value
            return Ok(value=value)
        except PaymentError as exc:
            outcome = exc.kind
            if exc.status_code < 500:
                logger.warning("%s %s rejected kind=%s: %s", provider, operation, exc.kind, exc.message)
            else:
                logger.error(
                    "%s %s failed kind=%s: %s details=%s",
                    provider,
                    operation,
                    exc.kind,
                    exc.message,
                    exc.details,
                )
            return Failure.from_error(exc)
        except Exception as exc:
            outcome = "internal_error"
            logger.exception("%s %s crashed: %s", provider, operation, exc)
            return Failure(kind="internal_error", message=str(exc) or type(exc).__name__, details=str(exc) or None)
        finally:
            provider_requests_total.labels(
                service=settings.service_name,
                provider=provider,
                operation=operation,
                outcome=outcome,
            ).inc()
            provider_latency_seconds.labels(
                service=settings.service_name,
                provider=provider,
                operation=operation,
            ).observe(max(0.0, time.perf_counter() - start))

    async def create_razorpay_order(self, amount: Any, currency: str) -> Result:
        return await self.run("razorpay", "create_order", lambda: self.razorpay.create_order(amount, currency))

    async def verify_razorpay_payment(self, razor: Any, booking: Any) -> Result:
        return await self.run("razorpay", "verify_payment", lambda: self.razorpay.verify_payment(razor, booking))

    async def create_stripe_session(self, booking: Any, amount: Any, currency: str, origin: str | None) -> Result:
        return await self.run(
            "stripe",
            "create_session",
            lambda: self.stripe.create_session(booking, amount, currency, origin),
        )

    async def create_paypal_order(self, amount: Any, currency: str) -> Result:
        return await self.run("paypal", "create_order", lambda: self.paypal.create_order(amount, currency))

    async def capture_paypal_order(self, order_id: Any) -> Result:
        return await self.run("paypal", "capture_order", lambda: self.paypal.capture_order(order_id))
