"""API request schemas for the payment endpoints.

Fields are deliberately loose: amount and id checks happen in the adapters so
every endpoint answers with its own error shape instead of FastAPI's 422.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OrderCreateRequest(BaseModel):
    """Body of `/create-razorpay-order` and `/create-paypal-order`."""

    amount: Any = None
    currency: str | None = None


class StripeSessionRequest(BaseModel):
    """Body of `/create-stripe-session`."""

    booking: Any = None
    amount: Any = None
    currency: str | None = None


class RazorpayVerifyRequest(BaseModel):
    """Checkout callback fields plus the booking they paid for."""

    razor: Any = None
    booking: Any = None


class PaypalCaptureRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: Any = Field(default=None, alias="orderId")
