"""PayPal adapter: two-step order create + capture on the Orders v2 API."""

from typing import Any
from urllib.parse import quote

import httpx

from bookpay.common.amounts import major_unit_string, parse_amount
from bookpay.common.credentials import Credentials
from bookpay.common.errors import MissingOrderId, ProviderRequestFailed
from bookpay.common.logging import logger, order_id_ctx
from bookpay.services.providers.base import send
from bookpay.services.providers.paypal_auth import PaypalTokenBroker


class PaypalAdapter:
    """Wallet gateway. Amounts stay in major units as decimal strings."""

    def __init__(self, credentials: Credentials, client: httpx.AsyncClient, tokens: PaypalTokenBroker) -> None:
        self.credentials = credentials
        self.client = client
        self.tokens = tokens

    async def _post(self, path: str, payload: dict) -> Any:
        token = await self.tokens.fetch_access_token()
        request = self.client.build_request(
            "POST",
            f"{self.credentials.paypal_base_url}{path}",
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
        )
        try:
            _, body = await send(self.client, request)
        except ProviderRequestFailed as exc:
            if exc.upstream_status == 401:
                # Revoked or expired token; make the next call exchange again.
                self.tokens.invalidate()
            raise
        return body

    async def create_order(self, amount: Any, currency: str = "INR") -> dict:
        parse_amount(amount)
        value = major_unit_string(amount)
        order = await self._post(
            "/v2/checkout/orders",
            {
                "intent": "CAPTURE",
                "purchase_units": [{"amount": {"currency_code": currency, "value": value}}],
            },
        )
        order_id = order.get("id") if isinstance(order, dict) else None
        if not order_id:
            raise ProviderRequestFailed("PayPal response missing order id", details=order)
        order_id_ctx.set(str(order_id))
        logger.info("paypal order created value=%s currency=%s", value, currency)
        return {"orderId": order_id, "order": order}

    async def capture_order(self, order_id: Any) -> dict:
        if order_id is None or str(order_id).strip() == "":
            raise MissingOrderId("Missing orderId")
        order_id = str(order_id)
        order_id_ctx.set(order_id)
        capture = await self._post(f"/v2/checkout/orders/{quote(order_id, safe='')}/capture", {})
        logger.info("paypal order captured status=%s", capture.get("status") if isinstance(capture, dict) else None)
        return {"success": True, "capture": capture}
