"""
Node Table

One descriptive record per type identity. The first declaration seen wins:
later sightings of the same identity (e.g. a type re-declared under a
conditional import block, or a duplicate module name in a sibling project)
never overwrite it.
"""

from collections.abc import Iterable

from typegraph.domain.models import TypeIdentity, TypeNode


def format_short_name(simple_name: str, type_arguments: Iterable[str] = ()) -> str:
    """
    Display name of a type.

    Examples:
        format_short_name("Repo") -> "Repo"
        format_short_name("Repo", ["K", "V"]) -> "Repo<K,V>"
    """
    args = list(type_arguments)
    if not args:
        return simple_name
    return f"{simple_name}<{','.join(args)}>"


class NodeTable:
    """Insertion-ordered, append-only store of TypeNode records."""

    def __init__(self):
        self._nodes: dict[TypeIdentity, TypeNode] = {}

    def insert(
        self,
        identity: TypeIdentity,
        full_name: str,
        short_name: str,
        owning_module: str,
        source_location: str,
    ) -> bool:
        """
        Store a record for identity unless one already exists.

        Returns:
            True if a new record was stored, False for a no-op re-insertion
        """
        if identity in self._nodes:
            return False

        self._nodes[identity] = TypeNode.create(
            id=identity,
            name=full_name,
            short_name=short_name,
            project=owning_module,
            file_path=source_location,
        )
        return True

    def get(self, identity: TypeIdentity) -> TypeNode | None:
        return self._nodes.get(identity)

    def values(self) -> list[TypeNode]:
        return list(self._nodes.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
