"""Tree indexer: turn a documentation directory into an index tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docclerk.errors import FilesystemError
from docclerk.index.nodes import Content, IndexNode, SourceType

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Variant suffixes recognised before the ``.md`` extension.
_SPECIAL_VARIANTS = frozenset({"install", "detail"})


def split_doc_name(filename: str) -> tuple[str, str]:
    """Split a Markdown file name into ``(key, variant)``.

    The extension is dropped, and a trailing ``.install`` or ``.detail``
    component becomes the variant::

        >>> split_doc_name("foo.install.md")
        ('foo', 'install')
        >>> split_doc_name("foo.md")
        ('foo', 'basic')
        >>> split_doc_name("install.md")
        ('install', 'basic')
    """
    parts = filename.split(".")
    parts.pop()
    variant = "basic"
    if len(parts) > 1 and parts[-1] in _SPECIAL_VARIANTS:
        variant = parts.pop()
    return ".".join(parts), variant


def _add_file(index: IndexNode, segments: list[str], size: int, source_type: SourceType) -> None:
    node = index
    for segment in segments[:-1]:
        node = node.child(segment)

    filename = segments[-1]
    if ".md" not in filename:
        node.child(filename)
        return

    key, variant = split_doc_name(filename)
    entry = node.child(key)
    if entry.content is None:
        entry.content = Content(source_type=source_type)
    entry.content.set_variant(variant, size)
    # Last file processed wins; walk order is not guaranteed.
    entry.content.source_type = source_type


def build_dir(directory: Path, source_type: SourceType) -> IndexNode:
    """Walk *directory* and build an index tree of its documentation files.

    Files whose name contains ``.json`` are skipped (library configs are
    read separately by :func:`docclerk.index.configs.read_configs`).
    Markdown files become content nodes sized by variant; any other file
    only ensures a container node exists.

    Parameters
    ----------
    directory:
        Documentation root, e.g. ``<temp>/docs``.
    source_type:
        Tag recorded on every content node found under *directory*.

    Returns
    -------
    IndexNode
        Root node of the tree.  Empty when *directory* does not exist.

    Raises
    ------
    FilesystemError
        If the walk itself fails.
    """
    index = IndexNode()
    if not directory.is_dir():
        logger.debug("Docs directory %s does not exist, empty index", directory)
        return index

    try:
        files = [path for path in directory.rglob("*") if path.is_file()]
        for path in files:
            if ".json" in path.name:
                continue
            segments = list(path.relative_to(directory).parts)
            _add_file(index, segments, path.stat().st_size, source_type)
    except OSError as exc:
        msg = f"Failed to walk {directory}: {exc}"
        raise FilesystemError(msg) from exc

    logger.debug("Indexed %d file(s) under %s", len(files), directory)
    return index
