"""
Graph Construction Layer

Identity registry, node table, edge set and the two-phase builder.
"""

from .accumulator import GraphAccumulator
from .builder import TypeGraphBuilder
from .edge_set import EdgeSet
from .node_table import NodeTable, format_short_name
from .registry import IdentityRegistry

__all__ = [
    # Builder
    "TypeGraphBuilder",
    "GraphAccumulator",
    # Stores
    "IdentityRegistry",
    "NodeTable",
    "EdgeSet",
    "format_short_name",
]
