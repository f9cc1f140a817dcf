"""HMAC signature check for Razorpay checkout callbacks."""

import hashlib
import hmac


def expected_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of `order_id|payment_id`, the message Razorpay signs."""

    message = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_signature(order_id: str, payment_id: str, received_signature: str, secret: str) -> bool:
    """Return True only for an exact, case-sensitive match of the hex digest."""

    generated = expected_signature(order_id, payment_id, secret)
    return hmac.compare_digest(generated.encode("utf-8"), received_signature.encode("utf-8"))
