"""Central environment-driven settings for the payment service.

The process loads this once at startup. Provider keys and runtime behavior are
controlled by environment variables (see `.env.example`).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class CommonSettings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "bookpay"
    log_level: str = "INFO"
    otel_exporter_otlp_endpoint: str = ""
    cors_allow_origins: str = "*"
    default_origin: str = "http://localhost:3000"
    provider_timeout_seconds: float = 20.0

    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_api_url: str = "https://api.razorpay.com"
    stripe_secret_key: str = ""
    stripe_api_url: str = "https://api.stripe.com"
    paypal_client_id: str = ""
    paypal_client_secret: str = ""
    paypal_mode: str = "sandbox"
    paypal_token_cache: bool = False
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)


settings = CommonSettings()
