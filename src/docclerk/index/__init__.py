"""Index domain — tree building, classification and merging."""

from docclerk.index.builder import BuildResult, build, build_location
from docclerk.index.classify import apply_autodocs, apply_configs, apply_libs, classify_node
from docclerk.index.configs import LibraryConfig, read_configs
from docclerk.index.merge import merge
from docclerk.index.nodes import Content, IndexNode, NodeClass, SourceType
from docclerk.index.tree import build_dir, split_doc_name

__all__ = [
    "BuildResult",
    "Content",
    "IndexNode",
    "LibraryConfig",
    "NodeClass",
    "SourceType",
    "apply_autodocs",
    "apply_configs",
    "apply_libs",
    "build",
    "build_dir",
    "build_location",
    "classify_node",
    "merge",
    "read_configs",
    "split_doc_name",
]
