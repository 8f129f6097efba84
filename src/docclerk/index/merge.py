"""Merge engine: reconcile an official index with a local one."""

from __future__ import annotations

from docclerk.index.nodes import IndexNode, NodeClass


def merge(official: IndexNode, local: IndexNode) -> IndexNode:
    """Merge *local* under *official* without mutating either.

    Every top-level entry of *official* is kept.  An entry of *local* is
    taken only when *official* lacks the key or only knows it as an
    ``unbuilt-lib`` placeholder.  Child nodes are shared with the inputs,
    not copied.
    """
    result = IndexNode(children=dict(official.children))
    for key, node in local.children.items():
        existing = result.children.get(key)
        if existing is None or existing.node_class is NodeClass.UNBUILT_LIB:
            result.children[key] = node
    return result
