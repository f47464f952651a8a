"""
typegraph

Deduplicated, typed cross-reference graph over the declared types of a code base.
"""

from typegraph.domain.models import GraphSnapshot, LinkKind, ScanMode, TypeLink, TypeNode
from typegraph.graph import GraphAccumulator, TypeGraphBuilder

__version__ = "0.1.0"

__all__ = [
    "GraphAccumulator",
    "GraphSnapshot",
    "LinkKind",
    "ScanMode",
    "TypeGraphBuilder",
    "TypeLink",
    "TypeNode",
]
