"""Index node model: a tagged tree of documentation entries.

In memory a node keeps its children, its optional content payload and its
classification in separate fields.  The reserved ``__``-prefixed keys only
exist in the JSON form, which is what gets persisted to disk and published
remotely::

    {"mylib": {"__class": "lib", "intro": {"__basic": 50, "__type": "manual"}}}
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class SourceType(str, enum.Enum):
    """Which documentation tree a content node came from."""

    MANUAL = "manual"
    AUTO = "auto"


class NodeClass(str, enum.Enum):
    """Semantic class assigned during classification."""

    LIB = "lib"
    UNBUILT_LIB = "unbuilt-lib"
    METHOD = "method"
    PROPERTY = "property"
    DOC = "doc"
    OBJECT = "object"


# Content variants recognised in file names, e.g. ``foo.install.md``.
VARIANTS = ("basic", "install", "detail")

_RESERVED_PREFIX = "__"


@dataclass
class Content:
    """Byte sizes of the content variants of one entry."""

    source_type: SourceType | None
    basic: int | None = None
    install: int | None = None
    detail: int | None = None

    def set_variant(self, variant: str, size: int) -> None:
        if variant not in VARIANTS:
            msg = f"Unknown content variant: {variant!r}"
            raise ValueError(msg)
        setattr(self, variant, size)


@dataclass
class IndexNode:
    """One entry of the index, optionally with children."""

    children: dict[str, IndexNode] = field(default_factory=dict)
    content: Content | None = None
    node_class: NodeClass | None = None
    seq: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def child(self, key: str) -> IndexNode:
        """Return the child at *key*, creating an empty one if needed."""
        node = self.children.get(key)
        if node is None:
            node = IndexNode()
            self.children[key] = node
        return node

    def get(self, *segments: str) -> IndexNode | None:
        """Descend through *segments*; ``None`` if any is missing."""
        node: IndexNode | None = self
        for segment in segments:
            if node is None:
                return None
            node = node.children.get(segment)
        return node

    def walk(self, prefix: tuple[str, ...] = ()) -> list[tuple[tuple[str, ...], IndexNode]]:
        """Return ``(path, node)`` for every descendant, depth first."""
        found: list[tuple[tuple[str, ...], IndexNode]] = []
        for key, node in self.children.items():
            path = (*prefix, key)
            found.append((path, node))
            found.extend(node.walk(path))
        return found

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible wire form."""
        data: dict[str, Any] = {}
        if self.content is not None:
            for variant in VARIANTS:
                size = getattr(self.content, variant)
                if size is not None:
                    data[f"__{variant}"] = size
            if self.content.source_type is not None:
                data["__type"] = self.content.source_type.value
        if self.node_class is not None:
            data["__class"] = self.node_class.value
        if self.seq is not None:
            data["__seq"] = self.seq
        for key, value in self.extra.items():
            data.setdefault(key, value)
        for key, node in self.children.items():
            data[key] = node.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IndexNode:
        """Parse the wire form.

        Entries that are not understood (unknown reserved keys or classes,
        non-object children) are kept in :attr:`extra` and written back
        unchanged by :meth:`to_dict`.
        """
        node = cls()
        extra = dict(data)
        sizes = {v: data.get(f"__{v}") for v in VARIANTS}
        if any(_is_size(size) for size in sizes.values()):
            node.content = Content(source_type=None)
            for variant, size in sizes.items():
                if _is_size(size):
                    node.content.set_variant(variant, size)
                    del extra[f"__{variant}"]
            raw_type = data.get("__type")
            if raw_type is not None:
                try:
                    node.content.source_type = SourceType(raw_type)
                    del extra["__type"]
                except ValueError:
                    pass

        raw_class = data.get("__class")
        if raw_class is not None:
            try:
                node.node_class = NodeClass(raw_class)
                del extra["__class"]
            except ValueError:
                node.node_class = None

        if _is_size(data.get("__seq")):
            node.seq = data["__seq"]
            del extra["__seq"]

        for key, value in data.items():
            if key.startswith(_RESERVED_PREFIX) or not isinstance(value, dict):
                continue
            node.children[key] = cls.from_dict(value)
            del extra[key]
        node.extra = extra
        return node


def _is_size(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
