"""
httpx transports for fetch_retry_get.

A transport performs exactly one GET and hands back a Response for any
completed exchange, whatever its status. Network-level failures
(httpx.TransportError and friends) propagate unchanged so the retry client
can surface the original object.
"""
import json
import logging
from typing import Any, Optional

import httpx

from .types import ResolvedOptions, Response

logger = logging.getLogger("fetch_retry_get.transport")

DEFAULT_TIMEOUT_SECONDS = 30.0


def _decode_body(response: httpx.Response, options: ResolvedOptions) -> Any:
    """Body as text, or decoded JSON when options.json is set and it parses."""
    text = response.text
    if not options.json:
        return text
    try:
        return json.loads(text)
    except ValueError:
        logger.debug(
            f"_decode_body: body of {response.request.url} is not JSON, returning text"
        )
        return text


def _to_response(response: httpx.Response, options: ResolvedOptions) -> Response:
    return Response(
        status_code=response.status_code,
        body=_decode_body(response, options),
        headers=dict(response.headers),
    )


def _timeout(options: ResolvedOptions, fallback: Optional[float]) -> Optional[float]:
    return options.timeout if options.timeout is not None else fallback


class HttpxTransport:
    """
    Async GET transport backed by httpx.AsyncClient.

    When no client is injected, a short-lived client is opened per call and
    closed before returning.

    Example:
        async with httpx.AsyncClient() as http:
            client = RetryGetClient(transport=HttpxTransport(http))
            body = await client.get("https://example.com", {"max_attempts": 3})
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        **client_kwargs: Any,
    ) -> None:
        """
        Create a new HttpxTransport.

        Args:
            client: Optional httpx.AsyncClient; the caller owns its lifetime
            timeout: Default timeout when options.timeout is not set
            **client_kwargs: Extra httpx.AsyncClient arguments for per-call clients
        """
        self._client = client
        self._timeout = timeout
        self._client_kwargs = client_kwargs

    async def get(self, url: str, options: ResolvedOptions) -> Response:
        """Perform one GET."""
        timeout = _timeout(options, self._timeout)
        logger.debug(f"HttpxTransport.get: url={url}, timeout={timeout}")

        if self._client is not None:
            response = await self._client.get(url, headers=options.headers, timeout=timeout)
            return _to_response(response, options)

        async with httpx.AsyncClient(**self._client_kwargs) as client:
            response = await client.get(url, headers=options.headers, timeout=timeout)
            return _to_response(response, options)


class SyncHttpxTransport:
    """Sync GET transport backed by httpx.Client."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        **client_kwargs: Any,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._client_kwargs = client_kwargs

    def get(self, url: str, options: ResolvedOptions) -> Response:
        """Perform one GET."""
        timeout = _timeout(options, self._timeout)
        logger.debug(f"SyncHttpxTransport.get: url={url}, timeout={timeout}")

        if self._client is not None:
            response = self._client.get(url, headers=options.headers, timeout=timeout)
            return _to_response(response, options)

        with httpx.Client(**self._client_kwargs) as client:
            response = client.get(url, headers=options.headers, timeout=timeout)
            return _to_response(response, options)
