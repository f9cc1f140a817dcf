"""Shared fixtures: credentials and an in-process stand-in for the three providers."""

import json
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from bookpay.common.credentials import Credentials
from bookpay.services.payments.service import PaymentGatewayService

RAZORPAY_SECRET = "rzp_test_secret"


class FakeProviders:
    """Routes outbound requests by host/path and records every call."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.failures: dict[str, tuple[int, object]] = {}
        self.tokens_issued = 0

    def fail(self, path: str, status_code: int, body: object) -> None:
        self.failures[path] = (status_code, body)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.calls]

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.calls[index].content)

    def form_body(self, index: int = -1) -> dict:
        return {key: values[0] for key, values in parse_qs(self.calls[index].content.decode()).items()}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path in self.failures:
            status_code, body = self.failures[path]
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        if request.url.host == "api.razorpay.com" and path == "/v1/orders":
            body = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "id": "order_Rzp123",
                    "entity": "order",
                    "amount": body["amount"],
                    "currency": body["currency"],
                    "receipt": body["receipt"],
                    "status": "created",
                },
            )
        if request.url.host == "api.stripe.com" and path == "/v1/checkout/sessions":
            return httpx.Response(200, json={"id": "cs_test_123", "object": "checkout.session"})
        if path == "/v1/oauth2/token":
            self.tokens_issued += 1
            return httpx.Response(
                200,
                json={"access_token": f"A21-token-{self.tokens_issued}", "token_type": "Bearer", "expires_in": 32400},
            )
        if path == "/v2/checkout/orders":
            return httpx.Response(201, json={"id": "5O190127TN364715T", "status": "CREATED"})
        if path.startswith("/v2/checkout/orders/") and path.endswith("/capture"):
            order_id = path.split("/")[4]
            return httpx.Response(201, json={"id": order_id, "status": "COMPLETED"})
        return httpx.Response(404, json={"error": "unexpected call", "path": path})


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret=RAZORPAY_SECRET,
        stripe_secret_key="sk_test_123",
        paypal_client_id="paypal-client",
        paypal_client_secret="paypal-secret",
    )


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def http_client(providers: FakeProviders) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(providers.handler))


@pytest.fixture
def service(credentials: Credentials, http_client: httpx.AsyncClient) -> PaymentGatewayService:
    return PaymentGatewayService(credentials, client=http_client, token_cache=False)


@pytest.fixture
def api(service: PaymentGatewayService):
    from bookpay.services.payments.main import app, get_service

    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
