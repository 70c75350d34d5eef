"""
Webhook Authentication

Authenticates inbound update notifications. Two credentials are accepted:

- HMAC: ``X-Webhook-Signature: sha256=<hex>`` plus ``X-Webhook-Timestamp``,
  computed over ``"{timestamp}.{raw_body}"``.
- Bearer: ``Authorization: Bearer <secret>``.

HMAC is tried first whenever both of its headers are present; if it fails
the bearer token is checked as a fallback.
"""

import hmac
import logging
from collections.abc import Mapping

from generate_metadata.constants import AUTHORIZATION_HEADER, BEARER_PREFIX, SIGNATURE_HEADER, TIMESTAMP_HEADER
from generate_metadata.utils.crypto import verify_hmac_signature

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX) :]


def verify_bearer_token(secret: str, authorization: str | None) -> bool:
    token = extract_bearer_token(authorization)
    if token is None:
        return False
    return hmac.compare_digest(token.encode(), secret.encode())


class WebhookAuthenticator:
    """Checks webhook credentials against one shared secret."""

    def __init__(self, secret: str):
        self.secret = secret

    def verify_hmac(self, headers: Mapping[str, str], raw_body: bytes | str) -> bool:
        signature = headers.get(SIGNATURE_HEADER)
        timestamp = headers.get(TIMESTAMP_HEADER)
        if not signature or not timestamp:
            return False
        try:
            return verify_hmac_signature(self.secret, signature, timestamp, raw_body)
        except (TypeError, ValueError) as e:
            logger.warning(f"Webhook HMAC verification error: {e}")
            return False

    def authenticate(self, headers: Mapping[str, str], raw_body: bytes | str) -> bool:
        """
        Authenticate a request.

        Args:
            headers: Request headers (case-insensitive mapping, lowercase keys)
            raw_body: Body exactly as received, before JSON parsing

        Returns:
            True if the HMAC signature or the bearer token is valid
        """
        if self.verify_hmac(headers, raw_body):
            return True

        if headers.get(SIGNATURE_HEADER) and headers.get(TIMESTAMP_HEADER):
            logger.debug("Webhook HMAC signature invalid, falling back to bearer token")

        return verify_bearer_token(self.secret, headers.get(AUTHORIZATION_HEADER))
