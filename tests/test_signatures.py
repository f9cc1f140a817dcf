"""Unit tests for the Razorpay HMAC signature check."""

import hashlib
import hmac

from bookpay.common.signatures import expected_signature, verify_signature


def test_signature_matches_provider_signing():
    """A signature produced the way Razorpay signs must verify."""

    signed = hmac.new(b"secret", b"order_1|pay_1", hashlib.sha256).hexdigest()

    assert expected_signature("order_1", "pay_1", "secret") == signed
    assert verify_signature("order_1", "pay_1", signed, "secret")


def test_single_character_change_fails():
    signature = expected_signature("order_1", "pay_1", "secret")
    tampered = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    assert verify_signature("order_1", "pay_1", tampered, "secret") is False


def test_comparison_is_case_sensitive():
    signature = expected_signature("order_1", "pay_1", "secret")

    assert verify_signature("order_1", "pay_1", signature.upper(), "secret") is False


def test_field_order_matters():
    """The message is `order_id|payment_id`, never the reverse."""

    signature = expected_signature("pay_1", "order_1", "secret")

    assert verify_signature("order_1", "pay_1", signature, "secret") is False


def test_wrong_secret_fails():
    signature = expected_signature("order_1", "pay_1", "other")

    assert verify_signature("order_1", "pay_1", signature, "secret") is False
