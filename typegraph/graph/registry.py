"""
Identity Registry

Single source of truth for "have we seen this type before".
"""

from collections.abc import Iterator

from typegraph.domain.models import TypeIdentity


class IdentityRegistry:
    """
    Maps fully-qualified type names to dense, zero-based identities.

    Identities are handed out in first-seen order and never reused or removed.
    Not safe for concurrent mutation.
    """

    def __init__(self):
        self._ids: dict[str, TypeIdentity] = {}

    def ensure(self, full_name: str) -> TypeIdentity:
        """Return the identity for full_name, allocating the next one if new."""
        identity = self._ids.get(full_name)
        if identity is None:
            identity = len(self._ids)
            self._ids[full_name] = identity
        return identity

    def lookup(self, full_name: str) -> TypeIdentity | None:
        """Non-allocating query."""
        return self._ids.get(full_name)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)
