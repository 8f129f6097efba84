"""Remote fetch: download JSON from the remote config location."""

from __future__ import annotations

import json
import socket
from typing import Any, Protocol

import httpx

from docclerk.errors import (
    DnsError,
    FetchTimeoutError,
    NotFoundError,
    ParseError,
    RemoteError,
    TransportError,
)

DEFAULT_TIMEOUT = 30.0

# Substrings resolvers put in DNS failure messages.
_DNS_MARKERS = (
    "name resolution",
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "no address associated",
)


class Fetcher(Protocol):
    async def fetch(self, url: str) -> str: ...


def _is_dns_failure(exc: BaseException) -> bool:
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        text = str(current).lower()
        if any(marker in text for marker in _DNS_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def classify_http_error(exc: httpx.HTTPError, url: str) -> RemoteError:
    """Map an httpx failure onto the remote error taxonomy."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        if status == 404:
            return NotFoundError(f"Not Found: {url}", url=url)
        return TransportError(f"HTTP {status} fetching {url}", url=url)
    if isinstance(exc, httpx.TimeoutException):
        return FetchTimeoutError(f"Timed out fetching {url}", url=url)
    if isinstance(exc, httpx.ConnectError) and _is_dns_failure(exc):
        return DnsError(f"Cannot resolve host for {url}: {exc}", url=url)
    return TransportError(f"Error fetching {url}: {exc}", url=url)


class HttpFetcher:
    """Fetch remote files over HTTP(S) with httpx.

    A client can be injected (e.g. one built on ``httpx.MockTransport``);
    otherwise a short-lived client is opened per request.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def _get(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise classify_http_error(exc, url) from exc
        return response.text

    async def fetch(self, url: str) -> str:
        if self._client is not None:
            return await self._get(self._client, url)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._get(client, url)


async def get_remote_json(fetcher: Fetcher, url: str) -> Any:
    """Fetch *url* and parse it as JSON.

    Raises
    ------
    RemoteError
        On transport failures.
    ParseError
        If the body is not valid JSON.
    """
    body = await fetcher.fetch(url)
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        msg = f"Error parsing remote json: {body[:200]!r}, Error: {exc}, url: {url}"
        raise ParseError(msg) from exc


def describe_remote_error(err: Exception, remote_config: str) -> str:
    """Return a human-readable diagnostic for a failed sync cycle."""
    if isinstance(err, NotFoundError):
        return (
            "Could not locate the remote config directory, so there is no "
            "known place to pull docs from. Reinstalling should fix this.\n\n"
            f"Url attempted: {remote_config}config.json"
        )
    if isinstance(err, DnsError):
        return (
            "DNS resolution failed while contacting the remote docs. "
            "Are you connected to the internet?"
        )
    if isinstance(err, FetchTimeoutError):
        return (
            "Connection timed out while fetching the remote index. "
            "How's that internet connection looking?"
        )
    if isinstance(err, ParseError):
        return f"Index data could not be parsed:\n{err}"
    return f"Unexpected error while requesting the remote index:\n{err}"
