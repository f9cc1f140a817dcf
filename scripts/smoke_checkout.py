"""Concurrent smoke check against a running bookpay service.

Hits `/health` and then creates orders on the selected providers, printing the
status code and latency of each call. Use sandbox credentials only.
"""

import argparse
import asyncio
import statistics
import time
from uuid import uuid4

import httpx

ORDER_ROUTES = {
    "razorpay": "/create-razorpay-order",
    "stripe": "/create-stripe-session",
    "paypal": "/create-paypal-order",
}


async def send_one(client: httpx.AsyncClient, base_url: str, provider: str, amount: float, currency: str):
    """Create one order and return (provider, status_code, latency_ms)."""

    started = time.perf_counter()
    payload = {"amount": amount, "currency": currency}
    if provider == "stripe":
        payload["booking"] = {"name": "Smoke Test", "services": [{"name": "Consultation"}]}
    try:
        resp = await client.post(
            f"{base_url}{ORDER_ROUTES[provider]}",
            json=payload,
            headers={"x-correlation-id": str(uuid4())},
        )
        latency = (time.perf_counter() - started) * 1000
        return provider, resp.status_code, latency
    except httpx.HTTPError:
        latency = (time.perf_counter() - started) * 1000
        return provider, 599, latency


async def run(base_url: str, providers: list[str], rounds: int, amount: float, currency: str) -> int:
    """Check health, then run `rounds` order creations per provider concurrently."""

    async with httpx.AsyncClient(timeout=30.0) as client:
        health = await client.get(f"{base_url}/health")
        print(f"health={health.status_code} {health.text}")
        tasks = [
            asyncio.create_task(send_one(client, base_url, provider, amount, currency))
            for provider in providers
            for _ in range(rounds)
        ]
        results = [await task for task in asyncio.as_completed(tasks)]

    failures = 0
    for provider in providers:
        rows = [(code, latency) for name, code, latency in results if name == provider]
        ok = sum(1 for code, _ in rows if 200 <= code < 300)
        failures += len(rows) - ok
        lats = [latency for _, latency in rows]
        codes = sorted({code for code, _ in rows})
        print(f"{provider}: ok={ok}/{len(rows)} codes={codes} avg_ms={statistics.mean(lats):.2f}")
    return 1 if failures or health.status_code != 200 else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--provider", action="append", choices=sorted(ORDER_ROUTES), default=None)
    parser.add_argument("--rounds", type=int, default=1)
    parser.add_argument("--amount", type=float, default=500.0)
    parser.add_argument("--currency", default="INR")
    args = parser.parse_args()
    providers = args.provider or sorted(ORDER_ROUTES)
    raise SystemExit(asyncio.run(run(args.base_url, providers, args.rounds, args.amount, args.currency)))
