"""Startup-time helpers for safe config logging and credential checks."""

import os

from bookpay.common.credentials import Credentials
from bookpay.common.logging import logger


def _safe_env(name: str) -> str:
    """Return env value with simple redaction for secret-like variable names."""

    value = os.getenv(name)
    if value is None:
        return "<unset>"
    if any(secret in name for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN", "CLIENT_ID"]):
        return "<redacted>"
    return value


def log_startup_config(service_name: str, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    config = {"service": service_name}
    for key in keys:
        config[key] = _safe_env(key)
    logger.info("startup_config=%s", config)


def warn_missing_credentials(credentials: Credentials) -> list[str]:
    """Warn once per provider that cannot serve requests; the service still starts."""

    missing = credentials.missing_providers()
    for provider in missing:
        logger.warning("credentials missing provider=%s; its endpoints will return 500", provider)
    return missing
