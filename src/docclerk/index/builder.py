"""Location builder: assemble a classified index from docs and autodocs trees."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docclerk.index.classify import apply_autodocs, apply_configs, apply_libs
from docclerk.index.configs import read_configs
from docclerk.index.merge import merge
from docclerk.index.nodes import SourceType
from docclerk.index.tree import build_dir

if TYPE_CHECKING:
    from collections.abc import Iterable

    from docclerk.index.nodes import IndexNode
    from docclerk.settings import ClerkPaths, Location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Indexes produced by one full build."""

    static: IndexNode
    temp: IndexNode


async def build_location(
    paths: ClerkPaths,
    location: Location,
    autodocs: Iterable[str] = (),
) -> IndexNode:
    """Build the index for one location.

    The manual tree, the auto tree and their configs are read
    concurrently; classification starts only once all four are in.
    Manual docs win over generated ones on conflict.  In the ``temp``
    location, registered autodoc libraries that have not been generated
    yet are added as ``unbuilt-lib`` placeholders.
    """
    loc = paths.location(location)
    manual, manual_configs, auto, auto_configs = await asyncio.gather(
        asyncio.to_thread(build_dir, loc.docs, SourceType.MANUAL),
        asyncio.to_thread(read_configs, loc.docs),
        asyncio.to_thread(build_dir, loc.autodocs, SourceType.AUTO),
        asyncio.to_thread(read_configs, loc.autodocs),
    )

    manual = apply_libs(apply_configs(manual, manual_configs))
    auto = apply_libs(apply_configs(auto, auto_configs))
    if location == "temp":
        auto = apply_autodocs(auto, autodocs)

    index = merge(manual, auto)
    logger.debug("Built %s index with %d librar(ies)", location, len(index.children))
    return index


async def build(paths: ClerkPaths, autodocs: Iterable[str] = ()) -> BuildResult:
    """Build the temp and static locations concurrently."""
    names = list(autodocs)
    temp, static = await asyncio.gather(
        build_location(paths, "temp", names),
        build_location(paths, "static", names),
    )
    return BuildResult(static=static, temp=temp)
