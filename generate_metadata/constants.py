"""
Shared constants for the metadata client and webhook protocol.
"""

# Remote API
PRODUCTION_API_BASE_URL = "https://www.generate-metadata.com/api/openapi"
LOCAL_API_BASE_URL = "http://localhost:3000/api/openapi"
GET_LATEST_METADATA_PATH = "/v1/{dsn}/metadata/get-latest"

# Cache key used for root/layout-level metadata (no path supplied).
# Normalized paths always start with "/", so this can never collide.
ROOT_CACHE_KEY = "__root__"

# Webhook wire contract
SIGNATURE_HEADER = "x-webhook-signature"
TIMESTAMP_HEADER = "x-webhook-timestamp"
AUTHORIZATION_HEADER = "authorization"
SIGNATURE_PREFIX = "sha256="
BEARER_PREFIX = "Bearer "

METADATA_UPDATE_EVENT = "metadata_update"

DEFAULT_REVALIDATE_BASE_PATH = "/api/generate-metadata/revalidate"

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

# Robots directive synthesized from ``noindex: true``
NOINDEX_ROBOTS = "noindex,nofollow"
