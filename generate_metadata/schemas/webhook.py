"""
Webhook payload and response schemas.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookSite(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hostname: str | None = None
    dsn: str | None = None


class WebhookPayload(BaseModel):
    """
    Body of an inbound update notification.

    Only ``_type`` is required, so event types added later can still be
    accepted and ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event_type: str = Field(..., alias="_type")
    path: str | None = None
    metadata_revision_id: str | None = Field(None, alias="metadataRevisionId")
    metadata: dict[str, Any] | None = None
    site: WebhookSite | None = None
    timestamp: str | int | None = None


class RevalidateResult(BaseModel):
    revalidated: bool
    path: str | None = None


class WebhookResponse(BaseModel):
    """Success body: ``{"ok": true, "metadata": {"revalidated": ..., "path": ...}}``."""

    ok: bool = True
    metadata: RevalidateResult


class RevalidateRequest(BaseModel):
    """Arguments of the server-function style revalidation call."""

    model_config = ConfigDict(extra="ignore")

    path: str = Field(..., min_length=1)
    authorization: str | None = None
