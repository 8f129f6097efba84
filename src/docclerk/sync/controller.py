"""Synchronization controller: decide when to refresh, fetch, rebuild, persist."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from docclerk.errors import ClerkError, FilesystemError, ParseError, RemoteError
from docclerk.index.builder import build
from docclerk.index.nodes import IndexNode
from docclerk.sync.autodocs import AutodocsRegistry
from docclerk.sync.config_store import (
    AUTODOCS_SIZE,
    DOC_INDEX_LAST_WRITE,
    DOC_INDEX_SIZE,
    FileConfigStore,
)
from docclerk.sync.remote import HttpFetcher, describe_remote_error, get_remote_json
from docclerk.sync.store import IndexStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from docclerk.index.builder import BuildResult
    from docclerk.settings import Settings
    from docclerk.sync.config_store import ConfigStore
    from docclerk.sync.remote import Fetcher

logger = logging.getLogger(__name__)

UPDATED_MESSAGE = "Successfully updated index."

AUTODOCS_FILE = "autodocs.json"
INDEX_FILE = "index.json"

# Errors that fail a sync cycle without being fatal to the host.
SYNC_ERRORS = (RemoteError, ParseError)


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of one :meth:`Indexer.update` call."""

    checked: bool
    fetched: tuple[str, ...] = field(default_factory=tuple)
    rebuilt: bool = False
    message: str = UPDATED_MESSAGE


def _as_size(data: dict[str, Any], key: str, default: float) -> float:
    """Read a size counter; unparseable values never compare equal."""
    value = data.get(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")


def _dump(index: IndexNode) -> str:
    return json.dumps(index.to_dict(), separators=(",", ":"), ensure_ascii=False)


def _read_index(path: Path) -> IndexNode:
    """Read a persisted index, falling back to an empty one."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("No usable index at %s: %s", path, exc)
        return IndexNode()
    if not isinstance(data, dict):
        return IndexNode()
    return IndexNode.from_dict(data)


class Indexer:
    """Builds, reconciles and serves the documentation index.

    Collaborators default to the file/HTTP implementations and can all
    be injected.  *compare_docs* is called after every successful
    rebuild; its failures are logged and never interrupt the cycle.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        fetcher: Fetcher | None = None,
        config_store: ConfigStore | None = None,
        autodocs: AutodocsRegistry | None = None,
        store: IndexStore | None = None,
        compare_docs: Callable[[], object] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.paths = settings.paths()
        self.update_interval_ms = settings.update_interval_ms
        self.update_remotely = settings.update_remotely
        self.fetcher: Fetcher = fetcher or HttpFetcher()
        self.config_store: ConfigStore = config_store or FileConfigStore(self.paths, self.fetcher)
        self.autodocs = autodocs or AutodocsRegistry(
            self.paths.temp.root / "autodocs.json", self.config_store
        )
        self.store = store or IndexStore()
        self.compare_docs = compare_docs
        self._clock = clock
        self._task: asyncio.Task[None] | None = None

    # -- lifecycle ---------------------------------------------------------

    async def start(self, *, update_remotely: bool | None = None) -> Indexer:
        """Start the periodic update loop when remote updates are enabled."""
        if update_remotely is not None:
            self.update_remotely = update_remotely
        if self.update_remotely and self._task is None:
            self._task = asyncio.create_task(self._run_periodic())
        return self

    async def stop(self) -> None:
        """Cancel the periodic loop, if running."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run_periodic(self) -> None:
        while True:
            try:
                await self.update()
            except FilesystemError:
                raise
            except (ClerkError, OSError) as exc:
                logger.warning("Index update failed, retrying next tick: %s", exc)
            await asyncio.sleep(self.update_interval_ms / 1000)

    # -- build and persistence --------------------------------------------

    async def build(self) -> BuildResult:
        """Build both locations from the docs currently on disk."""
        return await build(self.paths, self.autodocs.config().keys())

    def _ensure_loaded(self) -> None:
        if self.store.loaded:
            return
        local = _read_index(self.paths.local_index)
        remote_path = self.paths.temp.index if self.update_remotely else self.paths.static.index
        self.store.replace(remote=_read_index(remote_path), local=local)

    def write(
        self,
        remote_index: IndexNode | None = None,
        local_index: IndexNode | None = None,
        *,
        static: bool = False,
    ) -> Indexer:
        """Persist indexes to disk and refresh the merged index.

        *remote_index* goes to the temp index file, or to the published
        static index when *static* is true; its write time and size are
        recorded in the matching config store.  *local_index* goes to
        the local index file.
        """
        self._ensure_loaded()
        if remote_index is not None:
            text = _dump(remote_index)
            target = self.paths.static.index if static else self.paths.temp.index
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
            setter = self.config_store.set_static if static else self.config_store.set_local
            setter(DOC_INDEX_LAST_WRITE, datetime.now(tz=timezone.utc).isoformat())
            setter(DOC_INDEX_SIZE, len(text.encode("utf-8")))
        if local_index is not None:
            self.paths.local_index.parent.mkdir(parents=True, exist_ok=True)
            self.paths.local_index.write_text(_dump(local_index), encoding="utf-8")
        self.store.replace(remote=remote_index, local=local_index)
        return self

    def index(self) -> IndexNode:
        """Return the merged index, loading it from disk on first use."""
        self._ensure_loaded()
        return self.store.merged

    # -- synchronization ---------------------------------------------------

    def since_update_ms(self) -> float | None:
        """Milliseconds since the temp index was last written, ``None`` if unknown."""
        try:
            mtime = self.paths.temp.index.stat().st_mtime
        except OSError:
            return None
        return (self._clock() - mtime) * 1000

    def is_due(self, *, force: bool = False) -> bool:
        since = self.since_update_ms()
        return force or since is None or since > self.update_interval_ms

    async def _fetch_json(self, name: str) -> dict[str, Any]:
        data = await get_remote_json(self.fetcher, f"{self.paths.remote_config}{name}")
        if not isinstance(data, dict):
            msg = f"Remote {name} is not a JSON object"
            raise ParseError(msg)
        return data

    def _report(self, err: Exception) -> None:
        logger.info("Update failed: %s", describe_remote_error(err, self.paths.remote_config))

    async def _rebuild(self) -> None:
        result = await self.build()
        self.write(local_index=result.temp)
        logger.info("Rebuilt index: %d librar(ies)", self.store.stats()["merged"])
        if self.compare_docs is not None:
            try:
                self.compare_docs()
            except Exception as exc:
                logger.warning("compare_docs hook failed: %s", exc)

    async def update(self, *, force: bool = False) -> UpdateResult:
        """Run one synchronization cycle.

        Does nothing unless the temp index is older than the update
        interval, missing, or *force* is set.  Otherwise the remote config
        is checked and ``autodocs.json`` / ``index.json`` are fetched
        concurrently when their published sizes differ from the local
        ones.  Nothing is written until every fetch has finished without
        error; any fetch at all then triggers a full rebuild.

        Raises
        ------
        RemoteError, ParseError
            If the remote config or any fetch fails.  When several fetches
            fail, the one that finished last is raised.
        """
        if not self.is_due(force=force):
            logger.debug("Index is fresh, skipping remote check")
            return UpdateResult(checked=False, message="Index is up to date.")

        try:
            remote = await self.config_store.get_remote()
            local = self.config_store.get_local()
        except SYNC_ERRORS as exc:
            self._report(exc)
            raise

        names: list[str] = []
        if force or _as_size(local, AUTODOCS_SIZE, 0) != _as_size(remote, AUTODOCS_SIZE, -1):
            names.append(AUTODOCS_FILE)
        if force or _as_size(local, DOC_INDEX_SIZE, 0) != _as_size(remote, DOC_INDEX_SIZE, -1):
            names.append(INDEX_FILE)
        logger.info("Fetching %s", ", ".join(names) if names else "nothing, remote unchanged")

        tasks = {name: asyncio.create_task(self._fetch_json(name)) for name in names}
        last_error: Exception | None = None
        try:
            for finished in asyncio.as_completed(list(tasks.values())):
                try:
                    await finished
                except SYNC_ERRORS as exc:
                    if last_error is not None:
                        logger.debug("Discarding earlier fetch error: %s", last_error)
                    last_error = exc
        finally:
            # No fetch task outlives the cycle, whatever ended it.
            for task in tasks.values():
                task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
        if last_error is not None:
            self._report(last_error)
            raise last_error

        if AUTODOCS_FILE in tasks:
            self.autodocs.write(tasks[AUTODOCS_FILE].result())
        if INDEX_FILE in tasks:
            self.write(IndexNode.from_dict(tasks[INDEX_FILE].result()))
        if tasks:
            await self._rebuild()
        return UpdateResult(checked=True, fetched=tuple(names), rebuilt=bool(tasks))
