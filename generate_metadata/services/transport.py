"""
Metadata transports

A transport performs the actual ``get-latest`` call. The resolver only
depends on :class:`MetadataTransport`; two implementations are provided:

- :class:`HttpxTransport` calls the remote API directly over HTTP.
- :class:`ProxyTransport` forwards the call through an injected server
  function (an RPC boundary owned by the host framework), which executes it
  with :func:`serve_proxy_request` on the server side.

Transports report failures in the ``error`` field of the response instead
of raising.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from generate_metadata.config import settings
from generate_metadata.constants import GET_LATEST_METADATA_PATH
from generate_metadata.schemas.metadata import MetadataApiResponse
from generate_metadata.schemas.transport import MetadataGetLatestArgs, MetadataGetLatestResponse, ProxyRequest

logger = logging.getLogger(__name__)

# Longest response body kept in an error value
MAX_ERROR_BODY = 1000

ServerFunction = Callable[[dict[str, Any]], Awaitable[Any]]


class MetadataTransport(Protocol):
    async def metadata_get_latest(self, args: MetadataGetLatestArgs) -> MetadataGetLatestResponse: ...


class HttpxTransport:
    """Direct transport: ``GET {base_url}/v1/{dsn}/metadata/get-latest?path=...``."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self._client = client

    def build_url(self, dsn: str) -> str:
        return self.base_url + GET_LATEST_METADATA_PATH.format(dsn=quote(dsn, safe=""))

    async def metadata_get_latest(self, args: MetadataGetLatestArgs) -> MetadataGetLatestResponse:
        url = self.build_url(args.dsn)
        params = {"path": args.path} if args.path is not None else {}

        try:
            if self._client is not None:
                response = await self._client.get(url, params=params, headers=args.headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(url, params=params, headers=args.headers, timeout=self.timeout)
        except httpx.TimeoutException:
            return MetadataGetLatestResponse(error={"message": "Request timed out"})
        except httpx.RequestError as e:
            return MetadataGetLatestResponse(error={"message": f"Request error: {str(e)}"})

        if not response.is_success:
            return MetadataGetLatestResponse(
                error={"status": response.status_code, "message": response.text[:MAX_ERROR_BODY]}
            )

        try:
            data = MetadataApiResponse.model_validate(response.json())
        except ValueError as e:
            # Covers both JSON decoding and schema validation failures
            return MetadataGetLatestResponse(error={"message": f"Malformed response: {str(e)}"})

        return MetadataGetLatestResponse(data=data)


class ProxyTransport:
    """
    Proxied transport for frameworks that route network calls through a
    server function.

    ``server_fn`` receives ``{"type": "metadataGetLatest", "args": {...}}``
    and must return a ``{"data": ..., "error": ...}`` mapping, typically the
    result of :func:`serve_proxy_request`.
    """

    def __init__(self, server_fn: ServerFunction):
        self.server_fn = server_fn

    async def metadata_get_latest(self, args: MetadataGetLatestArgs) -> MetadataGetLatestResponse:
        request = ProxyRequest(type="metadataGetLatest", args=args)
        result = await self.server_fn(request.model_dump())
        if isinstance(result, MetadataGetLatestResponse):
            return result
        try:
            return MetadataGetLatestResponse.model_validate(result)
        except ValidationError as e:
            return MetadataGetLatestResponse(error={"message": f"Malformed proxy response: {str(e)}"})


def validate_proxy_request(data: Any) -> ProxyRequest:
    """
    Validate a payload received by the server function.

    Raises:
        pydantic.ValidationError: If the payload is not a known proxy call
    """
    return ProxyRequest.model_validate(data)


async def serve_proxy_request(data: Any, transport: MetadataTransport | None = None) -> dict[str, Any]:
    """
    Server-side half of :class:`ProxyTransport`.

    Validates the payload and runs it against a direct transport, returning a
    JSON-serializable ``{"data": ..., "error": ...}`` mapping.
    """
    request = validate_proxy_request(data)
    transport = transport or HttpxTransport()
    logger.debug(f"Serving proxied metadata request for path {request.args.path!r}")
    response = await transport.metadata_get_latest(request.args)
    return response.model_dump(mode="json", by_alias=True, exclude_none=True)
