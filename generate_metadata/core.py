"""
Shared client core.

Owns one cache, one resolver and the webhook factory. Framework adapters
compose a core and only add their conversion and revalidation hook, so the
core has no dependency on any rendering framework.
"""

import logging

from generate_metadata.config import Settings
from generate_metadata.constants import DEFAULT_REVALIDATE_BASE_PATH
from generate_metadata.routes.revalidate import PathRewrite, RevalidateApp, RevalidateHook
from generate_metadata.schemas.metadata import MetadataDocument
from generate_metadata.services.cache_service import MetadataCache, cache_key
from generate_metadata.services.metadata_service import MetadataResolver
from generate_metadata.services.transport import HttpxTransport, MetadataTransport
from generate_metadata.utils.debug import create_debug
from generate_metadata.utils.normalize_pathname import normalize_pathname

logger = logging.getLogger(__name__)


class GenerateMetadataCore:
    """
    Metadata resolver, cache and webhook factory for one site.

    Each instance owns a fresh cache; building a new core is the way to drop
    everything cached in a process.

    Args:
        dsn: Site identifier; None enables development mode
        api_key: Bearer credential sent with outbound requests
        transport: Transport implementation (defaults to :class:`HttpxTransport`)
        debug: Enable diagnostic logging
    """

    def __init__(
        self,
        dsn: str | None = None,
        api_key: str | None = None,
        *,
        transport: MetadataTransport | None = None,
        debug: bool = False,
    ):
        self.dsn = dsn
        self.api_key = api_key
        self.debug = debug
        self.transport = transport or HttpxTransport()
        self.cache = MetadataCache()
        self.resolver = MetadataResolver(
            dsn=dsn,
            api_key=api_key,
            transport=self.transport,
            cache=self.cache,
            debug=debug,
        )
        self._debug = create_debug("core", debug)

        if self.resolver.development_mode:
            logger.info("generate-metadata: no DSN configured, running in development mode")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "GenerateMetadataCore":
        kwargs.setdefault(
            "transport",
            HttpxTransport(base_url=settings.base_url, timeout=settings.request_timeout),
        )
        return cls(dsn=settings.dsn, api_key=settings.api_key, debug=settings.debug, **kwargs)

    async def get_metadata(self, path: str | None = None, api_key: str | None = None) -> MetadataDocument | None:
        """Resolve the generated metadata for a path (None for root)."""
        return await self.resolver.resolve(path, api_key)

    def clear_cache(self, path: str | None = None) -> None:
        """Drop the entry for ``path``, or every entry when path is None."""
        normalized = normalize_pathname(path)
        if normalized is None:
            self._debug("Clearing entire metadata cache")
            self.cache.clear()
            return
        self._debug("Clearing metadata cache for %s", normalized)
        self.cache.delete(cache_key(normalized))

    def create_revalidate_app(
        self,
        *,
        webhook_secret: str | None,
        revalidate: RevalidateHook | None = None,
        path_rewrite: PathRewrite | None = None,
        base_path: str = DEFAULT_REVALIDATE_BASE_PATH,
    ) -> RevalidateApp:
        """
        Build the revalidation webhook for this core.

        The cache entry is always cleared before ``revalidate`` is called.
        """
        return RevalidateApp(
            webhook_secret=webhook_secret,
            clear_cache=self.clear_cache,
            revalidate=revalidate,
            path_rewrite=path_rewrite,
            base_path=base_path,
            debug=self.debug,
        )
