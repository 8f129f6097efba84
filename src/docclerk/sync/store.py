"""In-memory holder for the remote, local and merged indexes."""

from __future__ import annotations

from docclerk.index.merge import merge
from docclerk.index.nodes import IndexNode


class IndexStore:
    """Cached indexes served to readers.

    Readers only ever see a fully merged index: :meth:`replace` computes
    the new merge first and swaps all three references together.
    """

    def __init__(self) -> None:
        self._remote: IndexNode | None = None
        self._local: IndexNode | None = None
        self._merged: IndexNode | None = None

    @property
    def loaded(self) -> bool:
        return self._merged is not None

    @property
    def merged(self) -> IndexNode:
        """The current merged index, empty before the first load."""
        return self._merged if self._merged is not None else IndexNode()

    def replace(
        self,
        *,
        remote: IndexNode | None = None,
        local: IndexNode | None = None,
    ) -> IndexNode:
        """Swap in a new remote and/or local index and re-merge.

        A side that is not given keeps its cached value.
        """
        new_remote = remote if remote is not None else self._remote or IndexNode()
        new_local = local if local is not None else self._local or IndexNode()
        merged = merge(new_remote, new_local)
        self._remote, self._local, self._merged = new_remote, new_local, merged
        return merged

    def stats(self) -> dict[str, int]:
        """Return library counts per cached index."""
        return {
            "remote": len(self._remote.children) if self._remote else 0,
            "local": len(self._local.children) if self._local else 0,
            "merged": len(self._merged.children) if self._merged else 0,
        }
