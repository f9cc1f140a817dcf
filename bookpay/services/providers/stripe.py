"""Stripe adapter: hosted Checkout Session creation."""

import json
from typing import Any
from urllib.parse import urlencode

import httpx

from bookpay.common.amounts import parse_amount, to_minor_units
from bookpay.common.config import settings
from bookpay.common.credentials import Credentials
from bookpay.common.errors import ProviderRequestFailed
from bookpay.common.logging import logger, order_id_ctx
from bookpay.services.providers.base import error_message, send


def encode_form(params: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    """Flatten nested dicts/lists into Stripe's bracketed form fields.

    `{"line_items": [{"quantity": 1}]}` becomes `[("line_items[0][quantity]", "1")]`.
    """

    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if isinstance(value, dict):
            pairs.extend(encode_form(value, name))
        elif isinstance(value, list):
            pairs.extend(encode_form({str(i): item for i, item in enumerate(value)}, name))
        elif isinstance(value, bool):
            pairs.append((name, "true" if value else "false"))
        elif value is not None:
            pairs.append((name, str(value)))
    return pairs


def product_name(booking: dict) -> str:
    """Line-item label: the booked service names, else the customer name."""

    services = booking.get("services")
    if isinstance(services, list):
        names = [str(s.get("name", "")) if isinstance(s, dict) else str(s) for s in services]
        return f"Booking: {', '.join(names)}"
    return f"Booking: {booking.get('name') or 'Customer'}"


class StripeAdapter:
    """Card/checkout gateway: completion is confirmed by Stripe's redirect, not here."""

    def __init__(self, credentials: Credentials, client: httpx.AsyncClient, api_url: str | None = None) -> None:
        self.credentials = credentials
        self.client = client
        self.api_url = (api_url or settings.stripe_api_url).rstrip("/")

    async def create_session(
        self,
        booking: Any,
        amount: Any,
        currency: str = "INR",
        origin: str | None = None,
    ) -> dict:
        if not isinstance(booking, dict):
            booking = {}
        unit_amount = to_minor_units(parse_amount(amount))
        secret_key = self.credentials.require_stripe()
        origin = (origin or settings.default_origin).rstrip("/")

        params = {
            "payment_method_types": ["card"],
            "mode": "payment",
            "line_items": [
                {
                    "price_data": {
                        "currency": currency.lower(),
                        "product_data": {"name": product_name(booking)},
                        "unit_amount": unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "success_url": f"{origin}/success.html",
            "cancel_url": f"{origin}/failure.html",
            "metadata": {"booking": json.dumps(booking)},
        }
        request = self.client.build_request(
            "POST",
            f"{self.api_url}/v1/checkout/sessions",
            content=urlencode(encode_form(params)),
            headers={
                "Authorization": f"Bearer {secret_key}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
        )
        try:
            _, session = await send(self.client, request)
        except ProviderRequestFailed as exc:
            exc.details = error_message(exc.details, "message")
            raise
        session_id = session.get("id") if isinstance(session, dict) else None
        if not session_id:
            raise ProviderRequestFailed("Stripe response missing session id", details=session)
        order_id_ctx.set(session_id)
        logger.info("stripe session created unit_amount=%s currency=%s", unit_amount, currency.lower())
        return {"id": session_id}
