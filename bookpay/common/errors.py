"""Payment error taxonomy and the internal result type.

Adapters raise `PaymentError` subclasses; `PaymentGatewayService.run` turns
every outcome into `Ok` or `Failure` so the HTTP layer only maps shapes.
"""

from typing import Any, Literal

from pydantic import BaseModel


class PaymentError(Exception):
    """Base class for expected adapter failures."""

    kind = "payment_error"
    status_code = 500

    def __init__(self, message: str, details: Any = None, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.upstream_status = upstream_status


class ValidationError(PaymentError):
    """Bad or missing client input."""

    kind = "validation_error"
    status_code = 400


class InvalidAmount(ValidationError):
    pass


class MissingVerificationFields(ValidationError):
    kind = "missing_verification_fields"


class MissingOrderId(ValidationError):
    kind = "missing_order_id"


class SignatureMismatch(PaymentError):
    """Computed signature differs from the one reported by the client."""

    kind = "signature_mismatch"
    status_code = 400


class CredentialsMissing(PaymentError):
    kind = "credentials_missing"


class TokenExchangeFailed(PaymentError):
    kind = "token_exchange_failed"


class ProviderRequestFailed(PaymentError):
    kind = "provider_request_failed"


class Ok(BaseModel):
    ok: Literal[True] = True
    value: Any = None


class Failure(BaseModel):
    ok: Literal[False] = False
    kind: str
    message: str
    status_code: int = 500
    details: Any = None

    @classmethod
    def from_error(cls, exc: PaymentError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message, status_code=exc.status_code, details=exc.details)


Result = Ok | Failure
