"""Autodocs registry: libraries registered for remote doc generation."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from docclerk.sync.config_store import AUTODOCS_SIZE

if TYPE_CHECKING:
    from pathlib import Path

    from docclerk.sync.config_store import ConfigStore

logger = logging.getLogger(__name__)


class AutodocsRegistry:
    """The ``autodocs.json`` manifest kept in the temp root."""

    def __init__(self, path: Path, config_store: ConfigStore) -> None:
        self.path = path
        self._config_store = config_store

    def config(self) -> dict[str, Any]:
        """Return the registered libraries, ``{}`` if none are known yet."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Cannot read autodocs manifest %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, manifest: dict[str, Any]) -> None:
        """Persist a freshly fetched manifest and record its size."""
        text = json.dumps(manifest, separators=(",", ":"), ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")
        self._config_store.set_local(AUTODOCS_SIZE, len(text.encode("utf-8")))
