"""
Object-strategy adapter.

Renders a metadata document as a nested dict (``title``, ``description``,
``icons``, ``open_graph``, ``twitter``, ``robots``, ``other``) and merges it
with caller fallback/override dicts by deep merge.
"""

import logging
from collections.abc import Callable
from typing import Any, TypedDict

from generate_metadata.adapters._base import BaseAdapter, icon_sizes, without_none
from generate_metadata.constants import NOINDEX_ROBOTS
from generate_metadata.schemas.metadata import MetadataDocument, MetadataImage, OpenGraph, Twitter
from generate_metadata.services.merge_service import deep_merge
from generate_metadata.utils.callables import call_maybe_async

logger = logging.getLogger(__name__)

Metadata = dict[str, Any]


class MetadataOptions(TypedDict, total=False):
    path: str | None
    fallback: Metadata
    override: Metadata


def _image(image: MetadataImage) -> Metadata:
    return without_none(url=image.url, alt=image.alt, width=image.width, height=image.height)


def _icon(rel: str, image: MetadataImage) -> Metadata:
    return without_none(rel=rel, url=image.url, type=image.mime_type, sizes=icon_sizes(image))


# ============== Open Graph ==============


def _og_images(open_graph: OpenGraph, out: Metadata) -> None:
    if not open_graph.images:
        return
    out.setdefault("images", []).extend(_image(image) for image in open_graph.images)


OPEN_GRAPH_FIELDS: dict[str, Callable[[OpenGraph, Metadata], None]] = {
    "title": lambda og, out: out.__setitem__("title", og.title),
    "description": lambda og, out: out.__setitem__("description", og.description),
    "locale": lambda og, out: out.__setitem__("locale", og.locale),
    "site_name": lambda og, out: out.__setitem__("site_name", og.site_name),
    "type": lambda og, out: out.__setitem__("type", og.type),
    # Singular image first, then the plural list, in one collection
    "image": lambda og, out: out.setdefault("images", []).append(_image(og.image)),
    "images": _og_images,
}


# ============== Twitter ==============


def _twitter_image(twitter: Twitter, out: Metadata) -> None:
    # Cards carry a single image
    if twitter.primary_image is not None:
        out["images"] = [_image(twitter.primary_image)]


TWITTER_FIELDS: dict[str, Callable[[Twitter, Metadata], None]] = {
    "card": lambda tw, out: out.__setitem__("card", tw.card),
    "title": lambda tw, out: out.__setitem__("title", tw.title),
    "description": lambda tw, out: out.__setitem__("description", tw.description),
    "image": _twitter_image,
    "images": _twitter_image,
}


# ============== Document ==============


def _nested(fields: dict[str, Callable[[Any, Metadata], None]], model) -> Metadata:
    out: Metadata = {}
    for name in type(model).model_fields:
        if getattr(model, name) is not None:
            fields[name](model, out)
    return out


def _icons(rel: str, attribute: str) -> Callable[[MetadataDocument, Metadata], None]:
    def handler(document: MetadataDocument, out: Metadata) -> None:
        out.setdefault("icons", []).extend(_icon(rel, image) for image in getattr(document, attribute))

    return handler


def _custom_tags(document: MetadataDocument, out: Metadata) -> None:
    if document.custom_tags:
        out.setdefault("other", {}).update({tag.name: tag.content for tag in document.custom_tags})


def _noindex(document: MetadataDocument, out: Metadata) -> None:
    if document.noindex:
        out["robots"] = NOINDEX_ROBOTS


METADATA_FIELDS: dict[str, Callable[[MetadataDocument, Metadata], None]] = {
    "title": lambda doc, out: out.__setitem__("title", doc.title),
    "description": lambda doc, out: out.__setitem__("description", doc.description),
    "favicon": lambda doc, out: out.setdefault("icons", []).append(_icon("icon", doc.favicon)),
    "icon": _icons("icon", "icon"),
    "apple_touch_icon": _icons("apple-touch-icon", "apple_touch_icon"),
    "open_graph": lambda doc, out: out.__setitem__("open_graph", _nested(OPEN_GRAPH_FIELDS, doc.open_graph)),
    "twitter": lambda doc, out: out.__setitem__("twitter", _nested(TWITTER_FIELDS, doc.twitter)),
    "noindex": _noindex,
    "custom_tags": _custom_tags,
}


def convert_to_metadata(document: MetadataDocument | None) -> Metadata:
    """Render a metadata document as a nested metadata dict."""
    if document is None:
        return {}
    return _nested(METADATA_FIELDS, document)


def merge_metadata(fallback: Metadata | None, generated: Metadata, override: Metadata | None) -> Metadata:
    """Deep merge: override > generated > fallback."""
    return deep_merge(fallback, generated, override)


def generate_metadata_status(status: str, message: str | None = None) -> dict[str, str]:
    """Entries for the ``other`` key describing the generation status of a page."""
    metadata = {"generate-metadata:status": status}
    if message:
        metadata["generate-metadata:message"] = message
    return metadata


class MetadataAdapter(BaseAdapter):
    """
    Metadata client for frameworks consuming a nested metadata dict.

    Example:
        >>> client = MetadataAdapter(dsn="my-site", api_key="...")
        >>> page_metadata = client.get_metadata(lambda slug: {"path": f"/blog/{slug}"})
        >>> await page_metadata("hello")
    """

    merge_metadata = staticmethod(merge_metadata)
    convert_to_metadata = staticmethod(convert_to_metadata)
    generate_metadata_status = staticmethod(generate_metadata_status)

    def get_metadata(self, factory: Callable[..., MetadataOptions | Any]) -> Callable[..., Any]:
        """
        Build an async metadata function for a page.

        The returned coroutine function forwards its arguments to ``factory``
        (sync or async), which returns ``{"path", "fallback", "override"}``.
        It never raises because of the remote service: on any failure the
        caller's fallback is returned.
        """

        async def generate_metadata(*args: Any, **kwargs: Any) -> Metadata:
            try:
                options: MetadataOptions = await call_maybe_async(factory, *args, **kwargs) or {}
            except Exception as e:
                logger.warning(f"Metadata factory failed: {e}")
                return {}
            return await self._generate(options.get("path"), options)

        return generate_metadata

    def get_root_metadata(self, factory: Callable[..., MetadataOptions | Any] | None = None) -> Callable[..., Any]:
        """Like :meth:`get_metadata` for root/layout metadata, which has no path."""

        async def generate_root_metadata(*args: Any, **kwargs: Any) -> Metadata:
            options: MetadataOptions = {}
            if factory is not None:
                try:
                    options = await call_maybe_async(factory, *args, **kwargs) or {}
                except Exception as e:
                    logger.warning(f"Root metadata factory failed: {e}")
                    return {}
            return await self._generate(None, options)

        return generate_root_metadata

    async def _generate(self, path: str | None, options: MetadataOptions) -> Metadata:
        fallback = options.get("fallback")
        override = options.get("override")
        try:
            document = await self.core.get_metadata(path)
            return merge_metadata(fallback, convert_to_metadata(document), override)
        except Exception as e:
            logger.warning(f"Failed to generate metadata for {path!r}: {e}")
            return merge_metadata(fallback, {}, None)
