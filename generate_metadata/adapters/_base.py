"""
Shared adapter plumbing: core construction, the revalidation hook and the
webhook factory. Subclasses only add conversion and merging.
"""

from typing import Any

from generate_metadata.config import Settings
from generate_metadata.constants import DEFAULT_REVALIDATE_BASE_PATH
from generate_metadata.core import GenerateMetadataCore
from generate_metadata.routes.revalidate import PathRewrite, RevalidateApp, RevalidateHook
from generate_metadata.schemas.metadata import MetadataImage
from generate_metadata.services.transport import MetadataTransport
from generate_metadata.utils.callables import call_maybe_async
from generate_metadata.utils.normalize_pathname import normalize_pathname


def icon_sizes(image: MetadataImage) -> str | None:
    """``"<width>x<height>"`` when both dimensions are known."""
    if image.width is None or image.height is None:
        return None
    return f"{image.width}x{image.height}"


def without_none(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


class BaseAdapter:
    """
    Base class for framework adapters.

    Args:
        dsn: Site identifier; None enables development mode
        api_key: Bearer credential sent with outbound requests
        transport: Transport implementation (defaults to the direct httpx transport)
        debug: Enable diagnostic logging
        revalidate_path: Framework hook called with the normalized path after
            a cache entry was cleared (None means every page)
        webhook_secret: Default secret for the revalidation endpoints
    """

    def __init__(
        self,
        dsn: str | None = None,
        api_key: str | None = None,
        *,
        transport: MetadataTransport | None = None,
        debug: bool = False,
        revalidate_path: RevalidateHook | None = None,
        webhook_secret: str | None = None,
        core: GenerateMetadataCore | None = None,
    ):
        self.core = core or GenerateMetadataCore(dsn, api_key, transport=transport, debug=debug)
        self.revalidate_path = revalidate_path
        self.webhook_secret = webhook_secret

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: MetadataTransport | None = None, **kwargs):
        core_kwargs = {"transport": transport} if transport is not None else {}
        kwargs.setdefault("webhook_secret", settings.webhook_secret)
        return cls(core=GenerateMetadataCore.from_settings(settings, **core_kwargs), **kwargs)

    @property
    def cache(self):
        return self.core.cache

    async def revalidate(self, path: str | None) -> None:
        """Invoke the framework hook with the normalized path."""
        if self.revalidate_path is not None:
            await call_maybe_async(self.revalidate_path, normalize_pathname(path))

    def revalidate_webhook_handler(
        self,
        *,
        webhook_secret: str | None = None,
        revalidate_path: RevalidateHook | None = None,
        path_rewrite: PathRewrite | None = None,
        base_path: str = DEFAULT_REVALIDATE_BASE_PATH,
    ) -> RevalidateApp:
        """
        Build the revalidation webhook.

        ``webhook_secret`` defaults to the adapter's secret; without either the
        endpoint answers 500. ``revalidate_path`` replaces the adapter-level
        hook for this handler.
        """
        return self.core.create_revalidate_app(
            webhook_secret=webhook_secret if webhook_secret is not None else self.webhook_secret,
            revalidate=revalidate_path if revalidate_path is not None else self.revalidate,
            path_rewrite=path_rewrite,
            base_path=base_path,
        )
