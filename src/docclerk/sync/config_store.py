"""Config store: remote, local and static key-value settings.

The remote side is the ``config.json`` published next to the remote index;
the local and static sides are small YAML files the indexer updates after
each write (``docIndexSize``, ``docIndexLastWrite``, ``autodocsSize``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import yaml

from docclerk.errors import ParseError
from docclerk.sync.remote import get_remote_json

if TYPE_CHECKING:
    from pathlib import Path

    from docclerk.settings import ClerkPaths
    from docclerk.sync.remote import Fetcher

# Keys shared with the published remote config.
DOC_INDEX_SIZE = "docIndexSize"
DOC_INDEX_LAST_WRITE = "docIndexLastWrite"
AUTODOCS_SIZE = "autodocsSize"

SETTINGS_FILENAME = "settings.yml"


class ConfigStore(Protocol):
    async def get_remote(self) -> dict[str, Any]: ...

    def get_local(self) -> dict[str, Any]: ...

    def set_local(self, key: str, value: Any) -> None: ...

    def set_static(self, key: str, value: Any) -> None: ...


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        msg = f"Error parsing settings file {path}: {exc}"
        raise ParseError(msg) from exc
    return data if isinstance(data, dict) else {}


def _update_yaml(path: Path, key: str, value: Any) -> None:
    data = _read_yaml(path)
    data[key] = value
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=True), encoding="utf-8")


class FileConfigStore:
    """Config store backed by YAML files and the remote ``config.json``."""

    def __init__(self, paths: ClerkPaths, fetcher: Fetcher) -> None:
        self._paths = paths
        self._fetcher = fetcher
        self.local_path = paths.temp.root / SETTINGS_FILENAME
        self.static_path = paths.static.root / "config" / SETTINGS_FILENAME

    async def get_remote(self) -> dict[str, Any]:
        url = f"{self._paths.remote_config}config.json"
        data = await get_remote_json(self._fetcher, url)
        if not isinstance(data, dict):
            msg = f"Remote config at {url} is not a JSON object"
            raise ParseError(msg)
        return data

    def get_local(self) -> dict[str, Any]:
        return _read_yaml(self.local_path)

    def set_local(self, key: str, value: Any) -> None:
        _update_yaml(self.local_path, key, value)

    def set_static(self, key: str, value: Any) -> None:
        _update_yaml(self.static_path, key, value)
