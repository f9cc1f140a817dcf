"""HTTP surface for booking payments.

Routes map one-to-one onto `PaymentGatewayService` operations; this module only
translates `Ok`/`Failure` results into the JSON shapes the checkout page reads.
"""

from contextlib import asynccontextmanager
from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookpay.common.config import settings
from bookpay.common.credentials import Credentials
from bookpay.common.errors import Failure, Result
from bookpay.common.logging import configure_logging, logger, trace_id_ctx
from bookpay.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from bookpay.common.startup import log_startup_config, warn_missing_credentials
from bookpay.common.tracing import instrument_app, setup_tracing
from bookpay.services.payments.schemas import (
    OrderCreateRequest,
    PaypalCaptureRequest,
    RazorpayVerifyRequest,
    StripeSessionRequest,
)
from bookpay.services.payments.service import PaymentGatewayService

configure_logging()
setup_tracing(settings.service_name)
log_startup_config(
    settings.service_name,
    [
        "SERVICE_NAME",
        "RAZORPAY_KEY_ID",
        "RAZORPAY_KEY_SECRET",
        "STRIPE_SECRET_KEY",
        "PAYPAL_CLIENT_ID",
        "PAYPAL_CLIENT_SECRET",
        "PAYPAL_MODE",
        "PAYPAL_TOKEN_CACHE",
        "PROVIDER_TIMEOUT_SECONDS",
    ],
)
credentials = Credentials.from_settings(settings)
warn_missing_credentials(credentials)
service = PaymentGatewayService(credentials)

INVALID_AMOUNT_RUPEES = "Invalid amount. Send amount in rupees (number)."


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Open the shared provider HTTP client for this lifespan and close it on shutdown."""

    service.start()
    yield
    await service.aclose()


app = FastAPI(title="Bookpay Payments", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)
instrument_app(app)


def get_service() -> PaymentGatewayService:
    return service


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    """Tag the request with a trace id and record count/latency."""

    trace_id_ctx.set(request.headers.get("x-correlation-id") or str(uuid4()))
    start = perf_counter()
    route = request.url.path
    method = request.method
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        route_obj = request.scope.get("route")
        if route_obj is not None and getattr(route_obj, "path", None):
            route = route_obj.path
        return response
    finally:
        elapsed = max(0.0, perf_counter() - start)
        http_request_duration_seconds.labels(
            service=settings.service_name,
            route=route,
            method=method,
        ).observe(elapsed)
        http_requests_total.labels(
            service=settings.service_name,
            route=route,
            method=method,
            status_code=str(status_code),
        ).inc()


@app.exception_handler(RequestValidationError)
async def malformed_body(_: Request, exc: RequestValidationError):
    logger.warning("malformed request body: %s", exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def to_response(
    result: Result,
    failure_label: str,
    invalid_amount: str | None = None,
    success_flag: bool = False,
):
    """Render a service result in the endpoint's wire shape.

    4xx bodies carry the failure message as `error`; 5xx bodies carry
    `failure_label` plus the provider details. Endpoints with `success_flag`
    also add `success: false`.
    """

    if not isinstance(result, Failure):
        return result.value
    body: dict = {"success": False} if success_flag else {}
    if result.status_code < 500:
        message = result.message
        if invalid_amount and result.kind == "validation_error":
            message = invalid_amount
        body["error"] = message
    else:
        body["error"] = failure_label
        body["details"] = result.details if result.details is not None else result.message
    return JSONResponse(status_code=result.status_code, content=body)


@app.post("/create-razorpay-order")
async def create_razorpay_order(req: OrderCreateRequest, svc: PaymentGatewayService = Depends(get_service)):
    """Create a Razorpay order; `amount` is in rupees, the returned order in paise."""

    result = await svc.create_razorpay_order(req.amount, req.currency or "INR")
    return to_response(result, "Razorpay order creation failed", invalid_amount=INVALID_AMOUNT_RUPEES)


@app.post("/verify-razorpay-payment")
async def verify_razorpay_payment(req: RazorpayVerifyRequest, svc: PaymentGatewayService = Depends(get_service)):
    """Verify the checkout callback signature; `{success: true}` on match."""

    result = await svc.verify_razorpay_payment(req.razor, req.booking)
    return to_response(result, "verify failed", success_flag=True)


@app.post("/create-stripe-session")
async def create_stripe_session(
    req: StripeSessionRequest,
    request: Request,
    svc: PaymentGatewayService = Depends(get_service),
):
    """Create a Stripe Checkout session redirecting back to the caller's origin."""

    result = await svc.create_stripe_session(
        req.booking,
        req.amount,
        req.currency or "INR",
        request.headers.get("origin"),
    )
    return to_response(result, "Stripe session creation failed", invalid_amount=INVALID_AMOUNT_RUPEES)


@app.post("/create-paypal-order")
async def create_paypal_order(req: OrderCreateRequest, svc: PaymentGatewayService = Depends(get_service)):
    """Create a PayPal order for capture; returns `{orderId, order}`."""

    result = await svc.create_paypal_order(req.amount, req.currency or "INR")
    return to_response(result, "PayPal create order failed", invalid_amount="Invalid amount")


@app.post("/capture-paypal-payment")
async def capture_paypal_payment(req: PaypalCaptureRequest, svc: PaymentGatewayService = Depends(get_service)):
    """Capture an approved PayPal order."""

    result = await svc.capture_paypal_order(req.order_id)
    return to_response(result, "PayPal capture failed", success_flag=True)


@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""

    return metrics_response()


@app.get("/health")
def health():
    """Container health probe endpoint."""

    return {"ok": True}
