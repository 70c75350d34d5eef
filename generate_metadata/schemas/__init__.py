from generate_metadata.schemas.metadata import (
    CustomTag,
    MetadataApiResponse,
    MetadataDocument,
    MetadataImage,
    OpenGraph,
    Twitter,
)
from generate_metadata.schemas.transport import (
    MetadataGetLatestArgs,
    MetadataGetLatestResponse,
    ProxyRequest,
)
from generate_metadata.schemas.webhook import (
    RevalidateRequest,
    RevalidateResult,
    WebhookPayload,
    WebhookResponse,
    WebhookSite,
)

__all__ = [
    "CustomTag",
    "MetadataApiResponse",
    "MetadataDocument",
    "MetadataGetLatestArgs",
    "MetadataGetLatestResponse",
    "MetadataImage",
    "OpenGraph",
    "ProxyRequest",
    "RevalidateRequest",
    "RevalidateResult",
    "Twitter",
    "WebhookPayload",
    "WebhookResponse",
    "WebhookSite",
]
