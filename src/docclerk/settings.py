"""Settings: documentation roots, remote location and update policy.

Read from a YAML file (``docclerk.yml`` by default)::

    temp_root: .docclerk/temp
    static_root: .docclerk/static
    remote_config_url: https://example.org/docs/config/
    update_interval_ms: 3600000
    update_remotely: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import yaml

Location = Literal["temp", "static"]
LOCATIONS: tuple[Location, ...] = ("temp", "static")

DEFAULT_CONFIG_NAME = "docclerk.yml"

# Always wait at least an hour between unforced remote checks.
DEFAULT_UPDATE_INTERVAL_MS = 3_600_000


@dataclass(frozen=True)
class LocationPaths:
    """Filesystem layout of one build location."""

    root: Path
    docs: Path
    autodocs: Path
    index: Path


@dataclass(frozen=True)
class ClerkPaths:
    """All paths the indexer reads and writes."""

    temp: LocationPaths
    static: LocationPaths
    local_index: Path
    remote_config: str

    def location(self, name: Location) -> LocationPaths:
        return self.temp if name == "temp" else self.static


@dataclass(frozen=True)
class Settings:
    temp_root: Path
    static_root: Path
    remote_config_url: str = ""
    update_interval_ms: int = DEFAULT_UPDATE_INTERVAL_MS
    update_remotely: bool = True

    def paths(self) -> ClerkPaths:
        temp = LocationPaths(
            root=self.temp_root,
            docs=self.temp_root / "docs",
            autodocs=self.temp_root / "autodocs",
            index=self.temp_root / "index.json",
        )
        static = LocationPaths(
            root=self.static_root,
            docs=self.static_root / "docs",
            autodocs=self.static_root / "autodocs",
            index=self.static_root / "config" / "index.json",
        )
        remote = self.remote_config_url
        if remote and not remote.endswith("/"):
            remote += "/"
        return ClerkPaths(
            temp=temp,
            static=static,
            local_index=self.temp_root / "local-index.json",
            remote_config=remote,
        )


def _resolve(base: Path, value: Any, default: str) -> Path:
    path = Path(str(value)) if value else Path(default)
    return path if path.is_absolute() else base / path


def parse_settings(raw: dict[str, Any], base_dir: Path) -> Settings:
    """Validate a raw settings mapping.

    Raises
    ------
    ValueError
        If a value has the wrong type.
    """
    interval = raw.get("update_interval_ms", DEFAULT_UPDATE_INTERVAL_MS)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
        msg = f"update_interval_ms must be a positive integer, got {interval!r}"
        raise ValueError(msg)

    update_remotely = raw.get("update_remotely", True)
    if not isinstance(update_remotely, bool):
        msg = f"update_remotely must be true or false, got {update_remotely!r}"
        raise ValueError(msg)

    return Settings(
        temp_root=_resolve(base_dir, raw.get("temp_root"), ".docclerk/temp"),
        static_root=_resolve(base_dir, raw.get("static_root"), ".docclerk/static"),
        remote_config_url=str(raw.get("remote_config_url") or ""),
        update_interval_ms=interval,
        update_remotely=update_remotely,
    )


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from *config_path* (default ``./docclerk.yml``).

    A missing file yields the defaults, with roots relative to the
    current directory.
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
    base_dir = config_path.parent

    if not config_path.is_file():
        return parse_settings({}, base_dir)

    data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        msg = f"{config_path} must contain a mapping"
        raise ValueError(msg)
    return parse_settings(data, base_dir)
