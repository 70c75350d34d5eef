"""
Revalidation Webhook

One handler serves every HTTP verb. It:

1. fails closed with 500 when no webhook secret was configured,
2. authenticates (HMAC over the raw body, then bearer token), 401 otherwise,
3. matches ``POST <base_path>``, 404 otherwise,
4. validates the payload, 400 without side effects when malformed,
5. for ``metadata_update`` events, normalizes (and optionally rewrites) the
   path, clears the cache entry and calls the revalidation hook.

Other event types are acknowledged with 200 and ignored.
"""

import logging
from collections.abc import Awaitable, Callable
from functools import cached_property

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from generate_metadata.constants import DEFAULT_REVALIDATE_BASE_PATH, HTTP_METHODS, METADATA_UPDATE_EVENT
from generate_metadata.exception_handlers import create_error_response, register_exception_handlers
from generate_metadata.exceptions import (
    GenerateMetadataError,
    InvalidPayloadError,
    RevalidationError,
    RouteNotFoundError,
    UnauthorizedError,
    WebhookSecretNotConfiguredError,
)
from generate_metadata.schemas.webhook import RevalidateResult, WebhookPayload, WebhookResponse
from generate_metadata.services.webhook_service import WebhookAuthenticator
from generate_metadata.utils.callables import call_maybe_async
from generate_metadata.utils.debug import create_debug
from generate_metadata.utils.normalize_pathname import normalize_pathname

logger = logging.getLogger(__name__)

RevalidateHook = Callable[[str | None], None | Awaitable[None]]
PathRewrite = Callable[[str | None], str | None | Awaitable[str | None]]
ClearCache = Callable[[str | None], None]


class RevalidateApp:
    """Webhook endpoint that invalidates cached metadata."""

    def __init__(
        self,
        *,
        webhook_secret: str | None,
        clear_cache: ClearCache,
        revalidate: RevalidateHook | None = None,
        path_rewrite: PathRewrite | None = None,
        base_path: str = DEFAULT_REVALIDATE_BASE_PATH,
        debug: bool = False,
    ):
        self.webhook_secret = webhook_secret
        self.clear_cache = clear_cache
        self.revalidate = revalidate
        self.path_rewrite = path_rewrite
        self.base_path = normalize_pathname(base_path) or "/"
        self._authenticator = WebhookAuthenticator(webhook_secret) if webhook_secret else None
        self._debug = create_debug("revalidate", debug)

    def match_route(self, request: Request) -> bool:
        """Whether the request targets ``POST <base_path>``."""
        route = request.url.path
        root_path = request.scope.get("root_path", "")
        if root_path and route.startswith(root_path):
            route = route[len(root_path) :]

        self._debug("[revalidate] %s %s -> %s", request.method, request.url.path, route)
        return request.method == "POST" and normalize_pathname(route) == self.base_path

    async def handle(self, request: Request) -> JSONResponse:
        """Entry point wired to every HTTP verb."""
        try:
            return await self._dispatch(request)
        except GenerateMetadataError as exc:
            if exc.status_code >= 500:
                logger.error(f"Revalidation webhook failed: {exc.message} {exc.details or ''}".rstrip())
            else:
                logger.warning(f"Revalidation webhook rejected ({exc.status_code}): {exc.message}")
            return create_error_response(exc)

    async def _dispatch(self, request: Request) -> JSONResponse:
        if self._authenticator is None:
            raise WebhookSecretNotConfiguredError()

        # Raw body must be captured before parsing for HMAC verification
        raw_body = await request.body()

        if not self._authenticator.authenticate(request.headers, raw_body):
            raise UnauthorizedError()

        if not self.match_route(request):
            raise RouteNotFoundError(method=request.method, path=request.url.path)

        try:
            payload = WebhookPayload.model_validate_json(raw_body)
        except ValidationError as e:
            raise InvalidPayloadError(reason=str(e)) from e

        if payload.event_type != METADATA_UPDATE_EVENT:
            logger.info(f"Ignoring webhook event of type {payload.event_type!r}")
            result = RevalidateResult(revalidated=False, path=None)
            return JSONResponse(status_code=status.HTTP_200_OK, content=WebhookResponse(metadata=result).model_dump())

        path = await self.resolve_path(payload.path)

        try:
            self.clear_cache(path)
            if self.revalidate is not None:
                await call_maybe_async(self.revalidate, path)
        except Exception as e:
            logger.exception(f"Error revalidating {path!r}")
            raise RevalidationError(str(e)) from e

        logger.info(f"Revalidated metadata for {path if path is not None else 'all paths'}")
        result = RevalidateResult(revalidated=True, path=path)
        return JSONResponse(status_code=status.HTTP_200_OK, content=WebhookResponse(metadata=result).model_dump())

    async def resolve_path(self, path: str | None) -> str | None:
        """
        Normalize the payload path and apply the optional rewrite.

        A rewrite result is normalized again. A rewrite returning None keeps
        the normalized original path; only a missing payload path means
        "everything".
        """
        normalized = normalize_pathname(path)
        if self.path_rewrite is None:
            return normalized

        try:
            rewritten = await call_maybe_async(self.path_rewrite, normalized)
        except Exception as e:
            logger.exception(f"Path rewrite failed for {normalized!r}")
            raise RevalidationError(str(e)) from e

        if rewritten is None:
            return normalized
        return normalize_pathname(rewritten) or normalized

    @cached_property
    def router(self) -> APIRouter:
        """Router serving the handler at ``base_path`` for every verb."""
        router = APIRouter(tags=["Metadata"])
        router.add_api_route(
            self.base_path,
            self.handle,
            methods=HTTP_METHODS,
            include_in_schema=False,
        )
        return router

    @cached_property
    def app(self) -> FastAPI:
        """Standalone application sending every path to the handler."""
        app = FastAPI(title="generate-metadata revalidate", docs_url=None, redoc_url=None, openapi_url=None)
        app.add_api_route(
            "/{route_path:path}",
            self.handle,
            methods=HTTP_METHODS,
            include_in_schema=False,
        )
        register_exception_handlers(app)
        return app
