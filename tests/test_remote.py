"""Tests for docclerk.sync.remote — HTTP fetch and error classification."""

from __future__ import annotations

import socket

import httpx
import pytest
from conftest import REMOTE, FakeFetcher

from docclerk.errors import (
    DnsError,
    FetchTimeoutError,
    NotFoundError,
    ParseError,
    TransportError,
)
from docclerk.sync.remote import (
    HttpFetcher,
    classify_http_error,
    describe_remote_error,
    get_remote_json,
)


def _fetcher(transport: httpx.MockTransport) -> HttpFetcher:
    return HttpFetcher(httpx.AsyncClient(transport=transport))


@pytest.mark.asyncio
class TestHttpFetcher:
    async def test_returns_body(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text='{"a": 1}'))
        assert await _fetcher(transport).fetch(f"{REMOTE}index.json") == '{"a": 1}'

    async def test_not_found(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404, text="Not Found"))
        with pytest.raises(NotFoundError) as excinfo:
            await _fetcher(transport).fetch(f"{REMOTE}config.json")
        assert excinfo.value.url == f"{REMOTE}config.json"

    async def test_server_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        with pytest.raises(TransportError, match="HTTP 500"):
            await _fetcher(transport).fetch(f"{REMOTE}config.json")

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(FetchTimeoutError):
            await _fetcher(httpx.MockTransport(handler)).fetch(f"{REMOTE}config.json")

    async def test_dns_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[Errno -3] Temporary failure in name resolution")

        with pytest.raises(DnsError):
            await _fetcher(httpx.MockTransport(handler)).fetch(f"{REMOTE}config.json")

    async def test_connection_refused(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("[Errno 111] Connection refused")

        with pytest.raises(TransportError):
            await _fetcher(httpx.MockTransport(handler)).fetch(f"{REMOTE}config.json")


class TestClassifyHttpError:
    def test_gaierror_cause(self) -> None:
        exc = httpx.ConnectError("connect failed")
        exc.__cause__ = socket.gaierror(-2, "unknown")
        assert isinstance(classify_http_error(exc, "u"), DnsError)

    def test_generic(self) -> None:
        exc = httpx.ReadError("reset")
        err = classify_http_error(exc, "u")
        assert type(err) is TransportError


@pytest.mark.asyncio
class TestGetRemoteJson:
    async def test_parses(self) -> None:
        fetcher = FakeFetcher({"u": '{"docIndexSize": 10}'})
        assert await get_remote_json(fetcher, "u") == {"docIndexSize": 10}

    async def test_parse_error_distinct_from_transport(self) -> None:
        fetcher = FakeFetcher({"u": "<html>oops</html>"})
        with pytest.raises(ParseError, match="Error parsing remote json"):
            await get_remote_json(fetcher, "u")


class TestDescribeRemoteError:
    def test_messages_are_distinct(self) -> None:
        errors = [
            NotFoundError("nf"),
            DnsError("dns"),
            FetchTimeoutError("timeout"),
            TransportError("boom"),
        ]
        messages = {describe_remote_error(err, REMOTE) for err in errors}
        assert len(messages) == 4

    def test_not_found_mentions_url(self) -> None:
        message = describe_remote_error(NotFoundError("nf"), REMOTE)
        assert f"{REMOTE}config.json" in message

    def test_dns_mentions_internet(self) -> None:
        assert "internet" in describe_remote_error(DnsError("dns"), REMOTE)
