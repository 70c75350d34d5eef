"""
Metadata Resolver

Resolves the generated metadata for a path:

1. Development mode: without a DSN an empty document is returned and
   neither the cache nor the network is touched.
2. Cache lookup on the normalized path.
3. Transport call on a miss. Successful documents are cached; any failure
   (raised exception, error value, missing data) yields ``None`` and is
   logged, never raised.

Concurrent misses for the same path each issue their own call; the last
one to finish overwrites the entry with equivalent data.
"""

import logging

from generate_metadata.schemas.metadata import MetadataDocument
from generate_metadata.schemas.transport import MetadataGetLatestArgs
from generate_metadata.services.cache_service import MetadataCache, cache_key
from generate_metadata.services.transport import MetadataTransport
from generate_metadata.utils.debug import create_debug
from generate_metadata.utils.normalize_pathname import normalize_pathname

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolve metadata documents through a cache in front of a transport."""

    def __init__(
        self,
        *,
        dsn: str | None,
        transport: MetadataTransport,
        cache: MetadataCache,
        api_key: str | None = None,
        debug: bool = False,
    ):
        self.dsn = dsn
        self.api_key = api_key
        self.transport = transport
        self.cache = cache
        self._debug = create_debug("resolver", debug)

    @property
    def development_mode(self) -> bool:
        return not self.dsn

    def build_args(self, normalized_path: str | None, api_key: str | None = None) -> MetadataGetLatestArgs:
        """Build transport arguments; the auth header is only sent when a key is configured."""
        key = api_key if api_key is not None else self.api_key
        headers = {"Authorization": f"Bearer {key}"} if key else {}
        return MetadataGetLatestArgs(dsn=self.dsn, path=normalized_path, headers=headers)

    async def resolve(self, path: str | None = None, api_key: str | None = None) -> MetadataDocument | None:
        """
        Resolve metadata for ``path``.

        Args:
            path: Route path in any spelling; ``None`` requests root metadata
            api_key: Per-call API key, overriding the configured one

        Returns:
            The metadata document, an empty document in development mode,
            or None when the remote call failed
        """
        if self.development_mode:
            self._debug("No DSN configured, returning empty metadata for %s", path)
            return MetadataDocument()

        normalized = normalize_pathname(path)
        key = cache_key(normalized)

        cached = self.cache.get(key)
        if cached is not None:
            self._debug("Cache hit for %s", key)
            return cached

        args = self.build_args(normalized, api_key)
        self._debug("Fetching metadata for %s", key)

        try:
            response = await self.transport.metadata_get_latest(args)
        except Exception as e:
            logger.warning(f"Failed to fetch metadata for {normalized}: {e}")
            return None

        if response.error is not None or response.data is None:
            logger.warning(f"Failed to fetch metadata for {normalized}: {response.error}")
            return None

        document = response.data.metadata or MetadataDocument()
        self.cache.set(key, document)
        return document
