"""Razorpay adapter: order creation and checkout signature verification."""

import time
from typing import Any
from uuid import uuid4

import httpx

from bookpay.common.amounts import parse_amount, to_minor_units
from bookpay.common.config import settings
from bookpay.common.credentials import Credentials
from bookpay.common.errors import MissingVerificationFields, ProviderRequestFailed, SignatureMismatch
from bookpay.common.logging import logger, order_id_ctx
from bookpay.common.metrics import signature_mismatch_total
from bookpay.common.signatures import verify_signature
from bookpay.services.providers.base import basic_auth_header, error_message, send

VERIFICATION_FIELDS = ("razorpay_payment_id", "razorpay_order_id", "razorpay_signature")


def new_receipt() -> str:
    """Receipt id unique per call and within Razorpay's 40 character limit."""

    return f"booking_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


class RazorpayAdapter:
    """Regional gateway: orders are created server side, payments verified by HMAC."""

    def __init__(self, credentials: Credentials, client: httpx.AsyncClient, api_url: str | None = None) -> None:
        self.credentials = credentials
        self.client = client
        self.api_url = (api_url or settings.razorpay_api_url).rstrip("/")

    async def create_order(self, amount: Any, currency: str = "INR") -> dict:
        """Create an auto-captured order; `amount` is in rupees, the order in paise."""

        amount_minor = to_minor_units(parse_amount(amount))
        key_id, key_secret = self.credentials.require_razorpay()
        request = self.client.build_request(
            "POST",
            f"{self.api_url}/v1/orders",
            headers={"Authorization": basic_auth_header(key_id, key_secret)},
            json={
                "amount": amount_minor,
                "currency": currency,
                "receipt": new_receipt(),
                "payment_capture": 1,
            },
        )
        try:
            _, order = await send(self.client, request)
        except ProviderRequestFailed as exc:
            exc.details = error_message(exc.details, "description")
            raise
        if isinstance(order, dict) and order.get("id"):
            order_id_ctx.set(str(order["id"]))
        logger.info("razorpay order created amount=%s currency=%s", amount_minor, currency)
        return order

    def verify_payment(self, razor: Any, booking: Any = None) -> dict:
        """Check the checkout callback signature.

        Recording the booking after a successful match is left to the caller.
        """

        if not isinstance(razor, dict) or not all(razor.get(field) for field in VERIFICATION_FIELDS):
            raise MissingVerificationFields("Missing razor payload")
        order_id = str(razor["razorpay_order_id"])
        payment_id = str(razor["razorpay_payment_id"])
        received = str(razor["razorpay_signature"])
        order_id_ctx.set(order_id)
        secret = self.credentials.require_razorpay_secret()

        if not verify_signature(order_id, payment_id, received, secret):
            signature_mismatch_total.labels(service=settings.service_name).inc()
            logger.warning(
                "razorpay signature mismatch order_id=%s payment_id=%s received=%s",
                order_id,
                payment_id,
                received,
            )
            raise SignatureMismatch("signature_mismatch")
        logger.info("razorpay verification ok order_id=%s booking_attached=%s", order_id, booking is not None)
        return {"success": True}
