"""
generate-metadata

Fetches page-level SEO metadata from the generate-metadata service, caches it
per path, merges it with caller fallback/override metadata and exposes a
webhook endpoint that invalidates the cache.
"""

from generate_metadata.adapters import HeadAdapter, MetadataAdapter
from generate_metadata.config import Settings, settings
from generate_metadata.core import GenerateMetadataCore
from generate_metadata.exceptions import GenerateMetadataError
from generate_metadata.routes.revalidate import RevalidateApp
from generate_metadata.schemas.metadata import MetadataDocument
from generate_metadata.services.transport import HttpxTransport, MetadataTransport, ProxyTransport
from generate_metadata.utils.normalize_pathname import normalize_pathname

__version__ = "0.1.0"

__all__ = [
    "GenerateMetadataCore",
    "GenerateMetadataError",
    "HeadAdapter",
    "HttpxTransport",
    "MetadataAdapter",
    "MetadataDocument",
    "MetadataTransport",
    "ProxyTransport",
    "RevalidateApp",
    "Settings",
    "normalize_pathname",
    "settings",
]
