"""PayPal OAuth token exchange, with and without caching."""

import asyncio
import base64

import pytest

from bookpay.common.credentials import Credentials
from bookpay.common.errors import CredentialsMissing, TokenExchangeFailed
from bookpay.services.providers.paypal_auth import PaypalTokenBroker


def test_token_exchange_uses_basic_auth_and_form_body(credentials, http_client, providers):
    broker = PaypalTokenBroker(credentials, http_client)

    token = asyncio.run(broker.fetch_access_token())

    assert token == "A21-token-1"
    request = providers.calls[0]
    assert str(request.url) == "https://api-m.sandbox.paypal.com/v1/oauth2/token"
    expected = base64.b64encode(b"paypal-client:paypal-secret").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert request.content == b"grant_type=client_credentials"


def test_every_call_exchanges_when_cache_disabled(credentials, http_client, providers):
    broker = PaypalTokenBroker(credentials, http_client)

    async def twice():
        return await broker.fetch_access_token(), await broker.fetch_access_token()

    assert asyncio.run(twice()) == ("A21-token-1", "A21-token-2")
    assert providers.tokens_issued == 2


def test_cache_reuses_until_forced_or_invalidated(credentials, http_client, providers):
    broker = PaypalTokenBroker(credentials, http_client, cache_enabled=True)

    async def scenario():
        first = await broker.fetch_access_token()
        cached = await broker.fetch_access_token()
        forced = await broker.fetch_access_token(force_refresh=True)
        broker.invalidate()
        after_invalidate = await broker.fetch_access_token()
        return first, cached, forced, after_invalidate

    assert asyncio.run(scenario()) == ("A21-token-1", "A21-token-1", "A21-token-2", "A21-token-3")


def test_missing_credentials_skip_network(http_client, providers):
    broker = PaypalTokenBroker(Credentials(), http_client)

    with pytest.raises(CredentialsMissing):
        asyncio.run(broker.fetch_access_token())
    assert providers.calls == []


def test_rejected_exchange_carries_provider_body(credentials, http_client, providers):
    providers.fail("/v1/oauth2/token", 401, {"error": "invalid_client", "error_description": "Client Authentication failed"})
    broker = PaypalTokenBroker(credentials, http_client)

    with pytest.raises(TokenExchangeFailed) as exc_info:
        asyncio.run(broker.fetch_access_token())
    assert exc_info.value.details == {"error": "invalid_client", "error_description": "Client Authentication failed"}


def test_response_without_token_fails(credentials, http_client, providers):
    providers.fail("/v1/oauth2/token", 200, {"token_type": "Bearer"})
    broker = PaypalTokenBroker(credentials, http_client)

    with pytest.raises(TokenExchangeFailed):
        asyncio.run(broker.fetch_access_token())
