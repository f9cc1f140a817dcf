"""Shared outbound-call plumbing for provider adapters."""

import base64
from typing import Any

import httpx

from bookpay.common.errors import PaymentError, ProviderRequestFailed


def basic_auth_header(username: str, password: str) -> str:
    """`Authorization` value for HTTP Basic auth."""

    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def response_body(response: httpx.Response) -> Any:
    """Provider response payload: parsed JSON when possible, raw text otherwise."""

    try:
        return response.json()
    except ValueError:
        return response.text or None


def error_message(body: Any, field: str) -> Any:
    """Pull `body["error"][field]` out of a provider error, falling back to the whole body."""

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return body["error"].get(field) or body
    return body


async def send(
    client: httpx.AsyncClient,
    request: httpx.Request,
    failure: type[PaymentError] = ProviderRequestFailed,
) -> tuple[httpx.Response, Any]:
    """Send one request; transport errors and non-2xx responses raise `failure`."""

    try:
        response = await client.send(request)
    except httpx.HTTPError as exc:
        raise failure(f"{request.method} {request.url.path} failed", details=str(exc) or type(exc).__name__) from exc
    body = response_body(response)
    if response.is_error:
        raise failure(
            f"{request.method} {request.url.path} returned {response.status_code}",
            details=body,
            upstream_status=response.status_code,
        )
    return response, body
