"""Tests for docclerk.index.builder — location builds and the end-to-end merge."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from conftest import write_file

from docclerk.index.builder import build, build_location
from docclerk.index.merge import merge
from docclerk.index.nodes import NodeClass, SourceType

if TYPE_CHECKING:
    from docclerk.settings import Settings


@pytest.mark.asyncio
class TestBuildLocation:
    async def test_empty_location(self, settings: Settings) -> None:
        index = await build_location(settings.paths(), "static")
        assert index.to_dict() == {}

    async def test_manual_and_auto_merged(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.static.docs / "mylib" / "intro.md", "x" * 5)
        write_file(paths.static.autodocs / "mylib" / "intro.md", "x" * 9)
        write_file(paths.static.autodocs / "genlib" / "run.md", "x" * 3)

        index = await build_location(paths, "static")

        intro = index.get("mylib", "intro")
        assert intro is not None
        assert intro.content is not None
        assert intro.content.basic == 5
        assert intro.content.source_type is SourceType.MANUAL
        genlib = index.get("genlib")
        assert genlib is not None
        assert genlib.node_class is NodeClass.LIB
        run = genlib.get("run")
        assert run is not None
        assert run.content is not None
        assert run.content.source_type is SourceType.AUTO

    async def test_autodoc_placeholders_only_in_temp(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.temp.autodocs / "built" / "run.md", "x")

        temp = await build_location(paths, "temp", ["built", "pending"])
        static = await build_location(paths, "static", ["built", "pending"])

        pending = temp.get("pending")
        assert pending is not None
        assert pending.node_class is NodeClass.UNBUILT_LIB
        built = temp.get("built")
        assert built is not None
        assert built.node_class is NodeClass.LIB
        assert static.get("pending") is None

    async def test_manual_library_replaces_placeholder(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.temp.docs / "pending" / "intro.md", "x" * 4)

        temp = await build_location(paths, "temp", ["pending"])

        pending = temp.get("pending")
        assert pending is not None
        assert pending.node_class is NodeClass.LIB
        assert pending.get("intro") is not None

    async def test_configs_applied(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.temp.docs / "mylib" / "foo.md", "x")
        write_file(paths.temp.docs / "mylib" / "config.json", json.dumps({"methods": ["foo"]}))
        write_file(paths.temp.autodocs / "gen" / "bar.md", "x")
        write_file(paths.temp.autodocs / "gen" / "config.json", json.dumps({"properties": ["bar"]}))

        index = await build_location(paths, "temp")

        foo = index.get("mylib", "foo")
        bar = index.get("gen", "bar")
        assert foo is not None
        assert foo.node_class is NodeClass.METHOD
        assert bar is not None
        assert bar.node_class is NodeClass.PROPERTY


@pytest.mark.asyncio
class TestBuild:
    async def test_end_to_end_static_over_temp(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.temp.docs / "mylib" / "intro.md", "t" * 50)
        write_file(paths.static.docs / "mylib" / "intro.md", "s" * 50)
        write_file(paths.static.docs / "mylib" / "foo.md", "s" * 10)
        write_file(paths.static.docs / "mylib" / "config.json", json.dumps({"methods": ["foo"]}))

        result = await build(paths)
        merged = merge(result.static, result.temp)

        mylib = merged.get("mylib")
        assert mylib is not None
        assert mylib is result.static.get("mylib")
        assert mylib.node_class is NodeClass.LIB
        data = merged.to_dict()["mylib"]
        assert data["foo"]["__class"] == "method"
        assert data["foo"]["__basic"] == 10
        assert data["intro"]["__basic"] == 50

    async def test_local_only_library_survives(self, settings: Settings) -> None:
        paths = settings.paths()
        write_file(paths.temp.docs / "wip" / "intro.md", "x")
        write_file(paths.static.docs / "mylib" / "intro.md", "x")

        result = await build(paths)
        merged = merge(result.static, result.temp)

        assert set(merged.children) == {"wip", "mylib"}
