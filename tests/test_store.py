"""Tests for docclerk.sync.store — the cached index holder."""

from __future__ import annotations

from docclerk.index.nodes import IndexNode, NodeClass
from docclerk.sync.store import IndexStore


def _index(*libs: str) -> IndexNode:
    return IndexNode(children={lib: IndexNode(node_class=NodeClass.LIB) for lib in libs})


class TestIndexStore:
    def test_empty(self) -> None:
        store = IndexStore()
        assert not store.loaded
        assert store.merged == IndexNode()
        assert store.stats() == {"remote": 0, "local": 0, "merged": 0}

    def test_replace_merges(self) -> None:
        store = IndexStore()
        merged = store.replace(remote=_index("a"), local=_index("a", "b"))
        assert store.loaded
        assert store.merged is merged
        assert set(merged.children) == {"a", "b"}
        assert store.stats() == {"remote": 1, "local": 2, "merged": 2}

    def test_replace_keeps_other_side(self) -> None:
        store = IndexStore()
        store.replace(remote=_index("a"), local=_index("b"))
        store.replace(local=_index("c", "d"))
        assert set(store.merged.children) == {"a", "c", "d"}
        assert store.stats() == {"remote": 1, "local": 2, "merged": 3}

    def test_previous_merge_untouched_by_replace(self) -> None:
        store = IndexStore()
        before = store.replace(remote=_index("a"))
        store.replace(local=_index("b"))
        assert set(before.children) == {"a"}
