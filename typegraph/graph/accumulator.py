"""
Graph Accumulator

Per-run owner of the identity registry, node table and edge set. One
accumulator is created per build and passed into the builder; nothing is kept
at module level, so independent runs can share a process.
"""

from typegraph.domain.models import GraphSnapshot, LinkKind, TypeIdentity

from .edge_set import EdgeSet
from .node_table import NodeTable
from .registry import IdentityRegistry


class GraphAccumulator:
    """Mutable graph state of a single run."""

    def __init__(self):
        self.registry = IdentityRegistry()
        self.nodes = NodeTable()
        self.edges = EdgeSet()

    def register_type(
        self,
        full_name: str,
        short_name: str,
        owning_module: str,
        source_location: str,
    ) -> TypeIdentity | None:
        """
        Ensure an identity for full_name and record its node.

        Returns None (and records nothing) for an empty name.
        """
        if not full_name or not full_name.strip():
            return None
        identity = self.registry.ensure(full_name)
        self.nodes.insert(identity, full_name, short_name, owning_module, source_location)
        return identity

    def link(self, source: TypeIdentity, target_name: str, kind: LinkKind) -> bool:
        """
        Record an edge to a known target.

        Targets that are not registered are dropped, never fabricated.
        """
        target = self.registry.lookup(target_name)
        if target is None or target not in self.nodes:
            return False
        return self.edges.add(source, target, kind)

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(nodes=self.nodes.values(), links=self.edges.values())

    def stats(self) -> dict[str, int]:
        return {
            "nodes": len(self.nodes),
            "links": len(self.edges),
            "reference_links": self.edges.count(LinkKind.REFERENCE),
            "inheritance_links": self.edges.count(LinkKind.INHERITANCE),
        }
