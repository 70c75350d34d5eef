"""
HMAC-SHA256 signing and verification for webhook payloads.

The signed message is ``"{timestamp}.{raw_body}"`` and the header carries
``sha256=<hex digest>``.
"""

import hashlib
import hmac
import re

from generate_metadata.constants import SIGNATURE_PREFIX

_SIGNATURE_PATTERN = re.compile(rf"^{re.escape(SIGNATURE_PREFIX)}(.+)$", re.DOTALL)


def _to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode()


def create_hmac_sha256(secret: str | bytes, message: str | bytes) -> str:
    """
    Create an HMAC-SHA256 signature.

    Args:
        secret: Shared secret
        message: Message to sign

    Returns:
        Hex-encoded digest (64 characters)
    """
    return hmac.new(_to_bytes(secret), _to_bytes(message), hashlib.sha256).hexdigest()


def sign_payload(secret: str | bytes, timestamp: str, raw_body: str | bytes) -> str:
    """Build the ``sha256=...`` header value for a timestamp and raw body."""
    message = _to_bytes(timestamp) + b"." + _to_bytes(raw_body)
    return f"{SIGNATURE_PREFIX}{create_hmac_sha256(secret, message)}"


def verify_hmac_signature(
    secret: str | bytes,
    signature: str,
    timestamp: str,
    raw_body: str | bytes,
) -> bool:
    """
    Verify a webhook signature against the raw request body.

    ``raw_body`` must be the body exactly as received, before any JSON
    parsing. Headers without the ``sha256=`` prefix are rejected without
    computing a digest. No timestamp window is enforced here.

    Args:
        secret: Shared secret
        signature: Header value in ``sha256=<hex>`` format
        timestamp: Timestamp header value
        raw_body: Raw request body

    Returns:
        True if the signature matches
    """
    match = _SIGNATURE_PATTERN.match(signature)
    if not match:
        return False

    message = _to_bytes(timestamp) + b"." + _to_bytes(raw_body)
    expected = create_hmac_sha256(secret, message)
    return hmac.compare_digest(expected.encode(), match.group(1).encode())
