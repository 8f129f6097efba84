"""Per-library ``config.json`` reader."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from docclerk.errors import FilesystemError, ParseError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class LibraryConfig:
    """Classification rules for one library."""

    methods: tuple[str, ...] = ()
    properties: tuple[str, ...] = ()
    docs: tuple[str, ...] = ()
    doc_sequence: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Any) -> LibraryConfig:
        """Build from parsed ``config.json`` content.

        Raises
        ------
        ParseError
            If *raw* is not an object or a field has the wrong shape.
        """
        if not isinstance(raw, dict):
            msg = f"Library config must be a JSON object, got {type(raw).__name__}"
            raise ParseError(msg)

        def _paths(name: str) -> tuple[str, ...]:
            value = raw.get(name) or []
            if not isinstance(value, list):
                msg = f"Library config field {name!r} must be a list"
                raise ParseError(msg)
            return tuple(str(item) for item in value)

        sequence = raw.get("docSequence") or {}
        if not isinstance(sequence, dict):
            msg = "Library config field 'docSequence' must be an object"
            raise ParseError(msg)

        return cls(
            methods=_paths("methods"),
            properties=_paths("properties"),
            docs=_paths("docs"),
            doc_sequence={str(k): v for k, v in sequence.items() if isinstance(v, int)},
        )


def _read_config(path: Path) -> LibraryConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = f"Cannot parse {path}: {exc}"
        raise ParseError(msg) from exc
    return LibraryConfig.from_dict(raw)


def read_configs(directory: Path) -> dict[str, LibraryConfig]:
    """Collect every ``config.json`` under *directory*, keyed by library.

    The library name is the directory that holds the file.  A config that
    fails to parse is logged and left out; it never aborts the read.
    A missing *directory* yields an empty mapping.
    """
    configs: dict[str, LibraryConfig] = {}
    if not directory.is_dir():
        return configs

    try:
        found = sorted(directory.rglob(CONFIG_FILENAME))
    except OSError as exc:
        msg = f"Failed to walk {directory}: {exc}"
        raise FilesystemError(msg) from exc

    for path in found:
        if not path.is_file() or path.parent == directory:
            continue
        lib = path.parent.name
        try:
            configs[lib] = _read_config(path)
        except ParseError as exc:
            logger.warning("Ignoring config for %s: %s", lib, exc)
            configs.pop(lib, None)
    return configs
