"""
Schemas exchanged with a metadata transport.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from generate_metadata.schemas.metadata import MetadataApiResponse


class MetadataGetLatestArgs(BaseModel):
    """Arguments for one ``get-latest`` call. ``path`` is already normalized."""

    dsn: str
    path: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)


class MetadataGetLatestResponse(BaseModel):
    """Data-or-error result of a ``get-latest`` call."""

    data: MetadataApiResponse | None = None
    error: Any | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None


class ProxyRequest(BaseModel):
    """Payload sent through a server-function proxy."""

    type: Literal["metadataGetLatest"]
    args: MetadataGetLatestArgs
