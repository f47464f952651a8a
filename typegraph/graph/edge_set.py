"""
Edge Set

Deduplicated, kind-tagged directed edges. The (source, target, kind) triple is
the only dedup key and is backed by a hash index.
"""

from collections import Counter

from typegraph.domain.models import LinkKind, TypeIdentity, TypeLink

EdgeKey = tuple[TypeIdentity, TypeIdentity, LinkKind]


class EdgeSet:
    """Insertion-ordered, append-only store of TypeLink records."""

    def __init__(self):
        self._links: list[TypeLink] = []
        self._index: set[EdgeKey] = set()
        self._by_kind: Counter[LinkKind] = Counter()

    def add(self, source: TypeIdentity, target: TypeIdentity, kind: LinkKind) -> bool:
        """
        Record an edge.

        Self edges and already-recorded triples are silently ignored.

        Returns:
            True if a new edge was recorded
        """
        if source == target:
            return False

        key = (source, target, kind)
        if key in self._index:
            return False

        self._index.add(key)
        self._links.append(TypeLink(source=source, target=target, link_type=kind))
        self._by_kind[kind] += 1
        return True

    def values(self) -> list[TypeLink]:
        return list(self._links)

    def count(self, kind: LinkKind | None = None) -> int:
        if kind is None:
            return len(self._links)
        return self._by_kind[kind]

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._links)
