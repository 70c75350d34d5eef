"""
Custom Exception Classes for generate-metadata

This module defines the exceptions raised by the webhook endpoint so that
every failure maps onto one consistent JSON error body.
"""

from typing import Any

from fastapi import status


class GenerateMetadataError(Exception):
    """Base exception class for all library errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the webhook error body."""
        body: dict[str, Any] = {"ok": False, "error": self.message}
        if self.details:
            body["metadata"] = self.details
        return body


# ============================================================================
# Webhook Request Exceptions
# ============================================================================


class InvalidPayloadError(GenerateMetadataError):
    """Raised when a webhook body cannot be parsed or validated"""

    def __init__(self, message: str = "Invalid payload", reason: str | None = None):
        details = {"message": reason} if reason else {}
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class UnauthorizedError(GenerateMetadataError):
    """Raised when neither the HMAC signature nor the bearer token authenticates"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED)


class RouteNotFoundError(GenerateMetadataError):
    """Raised when a request does not match the webhook route"""

    def __init__(self, method: str | None = None, path: str | None = None):
        super().__init__(message="Not found", status_code=status.HTTP_404_NOT_FOUND)
        self.method = method
        self.path = path


# ============================================================================
# Server-side Exceptions
# ============================================================================


class WebhookSecretNotConfiguredError(GenerateMetadataError):
    """Raised for every request when the webhook endpoint was built without a secret"""

    def __init__(self, setting_name: str = "Webhook secret"):
        super().__init__(
            message=f"{setting_name} is not configured",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class RevalidationError(GenerateMetadataError):
    """Raised when clearing the cache or the revalidation hook fails"""

    def __init__(self, reason: str):
        super().__init__(
            message="Failed to revalidate",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"message": reason},
        )
