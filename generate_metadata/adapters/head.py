"""
Tag-list adapter.

Renders a metadata document as ``{"meta": [...], "links": [...]}`` where
every entry is one tag record, and merges caller fallback/override heads
with the tag-list strategy (one record per tag identity, highest priority
wins).
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from generate_metadata.adapters._base import BaseAdapter, icon_sizes, without_none
from generate_metadata.constants import NOINDEX_ROBOTS
from generate_metadata.exceptions import InvalidPayloadError, RevalidationError, UnauthorizedError
from generate_metadata.schemas.metadata import MetadataDocument, MetadataImage, OpenGraph, Twitter
from generate_metadata.schemas.webhook import RevalidateRequest
from generate_metadata.services.merge_service import merge_head
from generate_metadata.services.webhook_service import verify_bearer_token
from generate_metadata.utils.callables import call_maybe_async

logger = logging.getLogger(__name__)

Head = dict[str, list[dict[str, Any]]]
TagRecord = dict[str, Any]
HeadOptions = dict[str, Any]
TransformResult = Callable[[Head, Any], Head | Awaitable[Head]]


def _meta(key: str, value: str, content: str) -> TagRecord:
    return {key: value, "content": content}


def _link(rel: str, image: MetadataImage) -> TagRecord:
    return without_none(rel=rel, href=image.url, type=image.mime_type, sizes=icon_sizes(image))


def _og_image(image: MetadataImage) -> list[TagRecord]:
    records = [_meta("property", "og:image", image.url)]
    if image.alt:
        records.append(_meta("property", "og:image:alt", image.alt))
    return records


def _og_text(tag: str) -> Callable[[OpenGraph, list[TagRecord]], None]:
    attribute = tag.removeprefix("og:")

    def handler(open_graph: OpenGraph, meta: list[TagRecord]) -> None:
        meta.append(_meta("property", tag, getattr(open_graph, attribute)))

    return handler


OPEN_GRAPH_TAGS: dict[str, Callable[[OpenGraph, list[TagRecord]], None]] = {
    "title": _og_text("og:title"),
    "description": _og_text("og:description"),
    "locale": _og_text("og:locale"),
    "site_name": _og_text("og:site_name"),
    "type": _og_text("og:type"),
    "image": lambda og, meta: meta.extend(_og_image(og.image)),
    "images": lambda og, meta: meta.extend(record for image in og.images for record in _og_image(image)),
}


def _twitter_image(twitter: Twitter, meta: list[TagRecord]) -> None:
    meta.append(_meta("name", "twitter:image", twitter.image.url))


def _twitter_images(twitter: Twitter, meta: list[TagRecord]) -> None:
    # Cards carry a single image
    if twitter.image is None and twitter.images:
        meta.append(_meta("name", "twitter:image", twitter.images[0].url))


TWITTER_TAGS: dict[str, Callable[[Twitter, list[TagRecord]], None]] = {
    "card": lambda tw, meta: meta.append(_meta("name", "twitter:card", tw.card)),
    "title": lambda tw, meta: meta.append(_meta("name", "twitter:title", tw.title)),
    "description": lambda tw, meta: meta.append(_meta("name", "twitter:description", tw.description)),
    "image": _twitter_image,
    "images": _twitter_images,
}


def _nested_tags(handlers: dict[str, Callable[[Any, list[TagRecord]], None]], model, meta: list[TagRecord]) -> None:
    for name in type(model).model_fields:
        if getattr(model, name) is not None:
            handlers[name](model, meta)


def _title(document: MetadataDocument, head: Head) -> None:
    head["meta"].append(_meta("name", "title", document.title))
    head["meta"].append({"title": document.title})


def _icons(rel: str, attribute: str) -> Callable[[MetadataDocument, Head], None]:
    def handler(document: MetadataDocument, head: Head) -> None:
        head["links"].extend(_link(rel, image) for image in getattr(document, attribute))

    return handler


def _noindex(document: MetadataDocument, head: Head) -> None:
    if document.noindex:
        head["meta"].append(_meta("name", "robots", NOINDEX_ROBOTS))


HEAD_FIELDS: dict[str, Callable[[MetadataDocument, Head], None]] = {
    "title": _title,
    "description": lambda doc, head: head["meta"].append(_meta("name", "description", doc.description)),
    "favicon": lambda doc, head: head["links"].append(_link("icon", doc.favicon)),
    "icon": _icons("icon", "icon"),
    "apple_touch_icon": _icons("apple-touch-icon", "apple_touch_icon"),
    "open_graph": lambda doc, head: _nested_tags(OPEN_GRAPH_TAGS, doc.open_graph, head["meta"]),
    "twitter": lambda doc, head: _nested_tags(TWITTER_TAGS, doc.twitter, head["meta"]),
    "noindex": _noindex,
    "custom_tags": lambda doc, head: head["meta"].extend(_meta("name", tag.name, tag.content) for tag in doc.custom_tags),
}


def convert_to_head(document: MetadataDocument | None) -> Head:
    """Render a metadata document as meta and link records; empty lists are omitted."""
    if document is None:
        return {}
    head: Head = {"meta": [], "links": []}
    for name in MetadataDocument.model_fields:
        if getattr(document, name) is not None:
            HEAD_FIELDS[name](document, head)
    return {key: records for key, records in head.items() if records}


class HeadAdapter(BaseAdapter):
    """
    Metadata client for frameworks consuming a list of head tags.

    Example:
        >>> client = HeadAdapter(dsn="my-site")
        >>> head = client.get_head({"path": "/blog/hello"}, fallback={"meta": [{"title": "Blog"}]})
        >>> await head()
    """

    convert_to_head = staticmethod(convert_to_head)
    merge_head = staticmethod(merge_head)

    def get_head(
        self,
        options: HeadOptions | Callable[[], HeadOptions | Awaitable[HeadOptions]],
        *,
        fallback: Head | None = None,
        override: Head | None = None,
        transform_result: TransformResult | None = None,
    ) -> Callable[..., Awaitable[Head]]:
        """
        Build an async ``head(ctx)`` function for a route.

        Args:
            options: ``{"path": ...}`` or a (sync or async) callable returning it
            fallback: Head used for anything the generated metadata does not set
            override: Head that always wins
            transform_result: Optional ``(head, ctx)`` post-processor, also
                applied to the fallback-only head after a failure
        """

        async def head(ctx: Any = None) -> Head:
            try:
                resolved = await call_maybe_async(options) if callable(options) else options
                path = (resolved or {}).get("path")
                document = await self.core.get_metadata(path)
                result = merge_head(fallback, convert_to_head(document), override)
            except Exception as e:
                logger.warning(f"Failed to get head metadata: {e}")
                result = merge_head(fallback)

            if transform_result is not None:
                result = await call_maybe_async(transform_result, result, ctx)
            return result

        return head

    def revalidate_function(self, secret: str | None = None) -> Callable[[Any], Awaitable[dict[str, Any]]]:
        """
        Build a server-function style revalidation callable.

        The callable takes ``{"path": ..., "authorization": ...}``. When a
        secret is set (here or on the adapter) the authorization must be
        ``Bearer <secret>``.
        """
        secret = secret if secret is not None else self.webhook_secret

        async def revalidate(data: Any) -> dict[str, Any]:
            try:
                request = RevalidateRequest.model_validate(data)
            except ValidationError as e:
                raise InvalidPayloadError(reason=str(e)) from e

            if secret:
                if request.authorization is None:
                    raise UnauthorizedError("Missing authorization header")
                if not verify_bearer_token(secret, request.authorization):
                    raise UnauthorizedError("Invalid authorization token")

            try:
                self.core.clear_cache(request.path)
                await self.revalidate(request.path)
            except Exception as e:
                logger.exception(f"Error revalidating {request.path!r}")
                raise RevalidationError(str(e)) from e

            logger.info(f"Revalidated {request.path}")
            return {"success": True, "message": f"Revalidated {request.path}"}

        return revalidate
