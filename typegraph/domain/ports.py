"""
Type Graph Ports

Interfaces the graph builder consumes. The builder never inspects source syntax:
everything language-specific sits behind SymbolResolverPort.
"""

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from .models import GraphSnapshot

# Resolver-defined handle for one named type; opaque to the builder
TypeDescriptor = Any


@runtime_checkable
class SymbolResolverPort(Protocol):
    """
    Symbol resolution over loaded modules.

    Answers "which named types does this unit declare" and "which declared type
    does this reference or base type resolve to".
    """

    @abstractmethod
    def declared_types(self, source_unit: Any) -> Sequence[TypeDescriptor]:
        """All named types declared in a source unit, in declaration order."""
        ...

    @abstractmethod
    def fully_qualified_name(self, type_: TypeDescriptor) -> str:
        """Globally unique name; empty string when it cannot be determined."""
        ...

    @abstractmethod
    def simple_name(self, type_: TypeDescriptor) -> str: ...

    @abstractmethod
    def display_name(self, type_: TypeDescriptor) -> str:
        """Minimally qualified display form, used for type arguments."""
        ...

    @abstractmethod
    def is_generic(self, type_: TypeDescriptor) -> bool: ...

    @abstractmethod
    def type_arguments(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]: ...

    @abstractmethod
    def referenced_types(self, type_: TypeDescriptor, scope: frozenset[Path]) -> Sequence[TypeDescriptor]:
        """
        Named types referenced inside the type's declaration.

        Args:
            type_: Declared type whose body is scanned
            scope: Source roots of the known modules; only types declared in
                one of these modules are returned

        Returns:
            Distinct referenced types, first-seen order
        """
        ...

    @abstractmethod
    def direct_base_type(self, type_: TypeDescriptor) -> TypeDescriptor | None:
        """Direct base type, or None when the type has no base at all."""
        ...

    @abstractmethod
    def is_root_type(self, type_: TypeDescriptor) -> bool:
        """True for the universal root type every other type derives from."""
        ...

    @abstractmethod
    def owning_module(self, type_: TypeDescriptor) -> str: ...

    @abstractmethod
    def declaring_source_location(self, type_: TypeDescriptor) -> str: ...


@runtime_checkable
class ArtifactWriterPort(Protocol):
    """Persists a finished graph."""

    @abstractmethod
    def write(self, snapshot: GraphSnapshot, path: Path) -> Path:
        """Write the snapshot and return the path actually written."""
        ...
