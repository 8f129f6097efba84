"""Shared test fixtures for docclerk."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from docclerk.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path

REMOTE = "https://docs.example.org/config/"


def write_file(path: Path, content: str = "") -> Path:
    """Create parent dirs and write content to a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class FakeFetcher:
    """In-memory fetcher: url -> body, or an exception to raise.

    *delays* (seconds) control completion order of concurrent fetches.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.responses = responses or {}
        self.delays = delays or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return str(response)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings with temp/static roots under *tmp_path*."""
    return Settings(
        temp_root=tmp_path / "temp",
        static_root=tmp_path / "static",
        remote_config_url=REMOTE,
    )
