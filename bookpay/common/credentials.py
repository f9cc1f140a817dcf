"""Immutable provider credentials, built once from settings and injected into adapters."""

from pydantic import BaseModel, ConfigDict

from bookpay.common.config import CommonSettings
from bookpay.common.errors import CredentialsMissing

PAYPAL_LIVE_URL = "https://api-m.paypal.com"
PAYPAL_SANDBOX_URL = "https://api-m.sandbox.paypal.com"


class Credentials(BaseModel):
    """Per-provider key material plus the PayPal base URL for the selected mode."""

    model_config = ConfigDict(frozen=True)

    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    stripe_secret_key: str = ""
    paypal_client_id: str = ""
    paypal_client_secret: str = ""
    paypal_mode: str = "sandbox"

    @classmethod
    def from_settings(cls, settings: CommonSettings) -> "Credentials":
        return cls(
            razorpay_key_id=settings.razorpay_key_id,
            razorpay_key_secret=settings.razorpay_key_secret,
            stripe_secret_key=settings.stripe_secret_key,
            paypal_client_id=settings.paypal_client_id,
            paypal_client_secret=settings.paypal_client_secret,
            paypal_mode=settings.paypal_mode,
        )

    @property
    def paypal_base_url(self) -> str:
        return PAYPAL_LIVE_URL if self.paypal_mode == "live" else PAYPAL_SANDBOX_URL

    def require_razorpay(self) -> tuple[str, str]:
        if not self.razorpay_key_id or not self.razorpay_key_secret:
            raise CredentialsMissing("Razorpay credentials missing")
        return self.razorpay_key_id, self.razorpay_key_secret

    def require_razorpay_secret(self) -> str:
        if not self.razorpay_key_secret:
            raise CredentialsMissing("Razorpay credentials missing")
        return self.razorpay_key_secret

    def require_stripe(self) -> str:
        if not self.stripe_secret_key:
            raise CredentialsMissing("Stripe credentials missing")
        return self.stripe_secret_key

    def require_paypal(self) -> tuple[str, str]:
        if not self.paypal_client_id or not self.paypal_client_secret:
            raise CredentialsMissing("PayPal credentials missing")
        return self.paypal_client_id, self.paypal_client_secret

    def missing_providers(self) -> list[str]:
        """Names of providers whose operations will fail with `CredentialsMissing`."""

        missing = []
        if not self.razorpay_key_id or not self.razorpay_key_secret:
            missing.append("razorpay")
        if not self.stripe_secret_key:
            missing.append("stripe")
        if not self.paypal_client_id or not self.paypal_client_secret:
            missing.append("paypal")
        return missing
