"""Node classification: library configs, library roots and autodoc placeholders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docclerk.index.nodes import IndexNode, NodeClass

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from docclerk.index.configs import LibraryConfig

PATH_SEP = "/"


def _is_intermediate(key: str, entries: Iterable[str]) -> bool:
    """True if *key* is a non-final segment of any entry, like ``foo`` in ``foo/bar``."""
    for entry in entries:
        parts = entry.split(PATH_SEP)
        if key in parts and parts.index(key) != len(parts) - 1:
            return True
    return False


def classify_node(key: str, path: str, node: IndexNode, config: LibraryConfig) -> None:
    """Assign a class to *node* from *config*.

    *path* is the ``/``-joined path from the library root down to *key*.
    Rules are tried in order and the first match wins: method, property,
    doc, then object.  A node matching nothing keeps its current class.
    """
    if path in config.methods:
        node.node_class = NodeClass.METHOD
        return
    if path in config.properties:
        node.node_class = NodeClass.PROPERTY
        return

    for doc in config.docs:
        # Both directions are tested: the doc entry covers this subtree, or
        # this key names the start of a doc entry.
        if path.startswith(doc) or doc.startswith(key):
            seq = config.doc_sequence.get(path)
            if seq is not None:
                node.seq = seq
            node.node_class = NodeClass.DOC
            return

    if _is_intermediate(key, (*config.methods, *config.properties)):
        node.node_class = NodeClass.OBJECT


def apply_configs(index: IndexNode, configs: Mapping[str, LibraryConfig]) -> IndexNode:
    """Classify every node of each configured library, in place.

    Libraries missing from either *index* or *configs* are left alone.
    Returns *index* for chaining.
    """
    for lib, config in configs.items():
        lib_node = index.children.get(lib)
        if lib_node is None:
            continue
        for segments, node in lib_node.walk():
            classify_node(segments[-1], PATH_SEP.join(segments), node, config)
    return index


def apply_libs(index: IndexNode) -> IndexNode:
    """Mark every top-level entry as a library."""
    for node in index.children.values():
        node.node_class = NodeClass.LIB
    return index


def apply_autodocs(index: IndexNode, autodocs: Iterable[str]) -> IndexNode:
    """Add an ``unbuilt-lib`` placeholder for each autodoc library not in *index*."""
    for name in autodocs:
        if name not in index.children:
            index.children[name] = IndexNode(node_class=NodeClass.UNBUILT_LIB)
    return index
