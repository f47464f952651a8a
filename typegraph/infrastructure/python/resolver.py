"""
Python Symbol Resolver

SymbolResolverPort over a loaded Workspace, built on the standard ast module.

Resolution strategy:
1. Enclosing class scopes (nested classes referenced by bare name)
2. Module bindings (top-level classes, absolute/relative imports, aliases)
3. Star imports
4. Builtins ("object" is the universal root type)
Qualified names that are not declared directly are chased through package
re-exports (`from .models import User` in `app/__init__.py`) up to
max_alias_depth hops.
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from typegraph.infrastructure.logging import get_logger

from .visitors import (
    DeclarationCollector,
    ModuleScope,
    ModuleScopeCollector,
    ReferenceCollector,
    dotted_name,
    subscript_names,
)
from .workspace import SourceUnit, Workspace

logger = get_logger(__name__)

ROOT_TYPE_NAME = "builtins.object"

GENERIC_MARKERS = frozenset(
    {
        "typing.Generic",
        "typing.Protocol",
        "typing_extensions.Generic",
        "typing_extensions.Protocol",
    }
)


class TypeSymbolKind(str, Enum):
    CLASS = "class"  # declared in a loaded module
    EXTERNAL = "external"  # library/stdlib type or unresolvable base
    ROOT = "root"  # builtins.object
    TYPE_PARAMETER = "type_parameter"


@dataclass(frozen=True)
class TypeSymbol:
    """Resolver handle for one type."""

    fqn: str
    name: str
    kind: TypeSymbolKind = TypeSymbolKind.CLASS
    project: str = ""
    file_path: str = ""
    source_root: Path | None = None
    module_name: str = ""
    enclosing: tuple[str, ...] = ()  # fqns of enclosing classes, outermost first
    type_params: tuple[str, ...] = ()
    node: ast.ClassDef | None = field(default=None, compare=False, repr=False)

    @property
    def is_named_type(self) -> bool:
        return self.kind == TypeSymbolKind.CLASS


ROOT_TYPE = TypeSymbol(fqn=ROOT_TYPE_NAME, name="object", kind=TypeSymbolKind.ROOT)


class PythonSymbolResolver:
    """
    Indexes every class of a Workspace up front, then answers resolver queries.

    Example:
        workspace = PythonWorkspaceLoader().load("path/to/repo")
        resolver = PythonSymbolResolver(workspace)
        for unit in workspace.units:
            for type_ in resolver.declared_types(unit):
                print(resolver.fully_qualified_name(type_))
    """

    def __init__(self, workspace: Workspace, max_alias_depth: int = 8):
        self.max_alias_depth = max_alias_depth
        self._types: dict[str, TypeSymbol] = {}
        self._by_unit: dict[Path, list[TypeSymbol]] = {}
        self._scopes: dict[str, ModuleScope] = {}

        for unit in workspace.units:
            self._index_unit(unit)

        logger.debug("resolver_indexed", types=len(self._types), modules=len(self._scopes))

    # ============================================================
    # Indexing
    # ============================================================

    def _index_unit(self, unit: SourceUnit) -> None:
        scope = ModuleScopeCollector(unit.module_name, unit.is_package).collect(unit.tree)
        existing = self._scopes.get(unit.module_name)
        if existing is None:
            self._scopes[unit.module_name] = scope
        else:
            # Same dotted module in two projects: first binding wins
            for name, target in scope.bindings.items():
                existing.bindings.setdefault(name, target)
            existing.star_imports.extend(m for m in scope.star_imports if m not in existing.star_imports)
            existing.type_vars |= scope.type_vars

        symbols = []
        for decl in DeclarationCollector().collect(unit.tree):
            symbol = TypeSymbol(
                fqn=f"{unit.module_name}.{decl.qualname}",
                name=decl.node.name,
                project=unit.project,
                file_path=str(unit.path),
                source_root=unit.source_root,
                module_name=unit.module_name,
                enclosing=tuple(f"{unit.module_name}.{q}" for q in decl.enclosing),
                type_params=self._type_params(decl.node, unit.module_name),
                node=decl.node,
            )
            self._types.setdefault(symbol.fqn, symbol)
            symbols.append(symbol)

        self._by_unit[unit.path] = symbols

    def _type_params(self, node: ast.ClassDef, module_name: str) -> tuple[str, ...]:
        # PEP 695: class Repo[K, V]: ...
        declared = [p.name for p in getattr(node, "type_params", None) or []]
        if declared:
            return tuple(declared)

        type_vars = self._scopes[module_name].type_vars
        implicit: list[str] = []
        for base in node.bases:
            if not isinstance(base, ast.Subscript):
                continue
            names = subscript_names(base.slice)
            target = dotted_name(base.value)
            if target and self._qualify(target, module_name) in GENERIC_MARKERS:
                return tuple(names)
            implicit.extend(n for n in names if n in type_vars and n not in implicit)
        return tuple(implicit)

    # ============================================================
    # Name resolution
    # ============================================================

    def _qualify(self, dotted: str, module_name: str, class_scopes: Sequence[str] = ()) -> str | None:
        """Qualified name a dotted expression refers to, or None if unbound."""
        for class_fqn in reversed(class_scopes):
            candidate = f"{class_fqn}.{dotted}"
            if candidate in self._types:
                return candidate

        head, _, rest = dotted.partition(".")
        scope = self._scopes.get(module_name)
        if scope is not None:
            target = scope.bindings.get(head)
            if target is not None:
                return f"{target}.{rest}" if rest else target
            for star_module in scope.star_imports:
                if self._lookup(f"{star_module}.{head}") is not None:
                    return f"{star_module}.{dotted}"

        if hasattr(builtins, head):
            return f"builtins.{dotted}"
        return None

    def _lookup(self, qualified: str, depth: int = 0) -> TypeSymbol | None:
        """Declared type for a qualified name, following re-exports."""
        symbol = self._types.get(qualified)
        if symbol is not None:
            return symbol
        if qualified == ROOT_TYPE_NAME:
            return ROOT_TYPE
        if depth >= self.max_alias_depth:
            return None

        parts = qualified.split(".")
        for i in range(len(parts) - 1, 0, -1):
            scope = self._scopes.get(".".join(parts[:i]))
            if scope is None:
                continue
            target = scope.bindings.get(parts[i])
            if target is None or target == ".".join(parts[: i + 1]):
                return None
            return self._lookup(".".join([target, *parts[i + 1 :]]), depth + 1)
        return None

    def _class_scopes(self, type_: TypeSymbol) -> tuple[str, ...]:
        return (*type_.enclosing, type_.fqn)

    # ============================================================
    # SymbolResolverPort
    # ============================================================

    def declared_types(self, source_unit: SourceUnit) -> list[TypeSymbol]:
        return list(self._by_unit.get(source_unit.path, []))

    def fully_qualified_name(self, type_: TypeSymbol) -> str:
        return type_.fqn

    def simple_name(self, type_: TypeSymbol) -> str:
        return type_.name

    def display_name(self, type_: TypeSymbol) -> str:
        return type_.name

    def is_generic(self, type_: TypeSymbol) -> bool:
        return bool(type_.type_params)

    def type_arguments(self, type_: TypeSymbol) -> list[TypeSymbol]:
        return [
            TypeSymbol(fqn=f"{type_.fqn}.{param}", name=param, kind=TypeSymbolKind.TYPE_PARAMETER)
            for param in type_.type_params
        ]

    def referenced_types(self, type_: TypeSymbol, scope: frozenset[Path]) -> list[TypeSymbol]:
        if type_.node is None:
            return []

        class_scopes = self._class_scopes(type_)
        seen: set[str] = set()
        found: list[TypeSymbol] = []
        for dotted in ReferenceCollector().collect(type_.node):
            qualified = self._qualify(dotted, type_.module_name, class_scopes)
            if qualified is None:
                continue
            symbol = self._lookup(qualified)
            if symbol is None or not symbol.is_named_type:
                continue
            # Exact module membership, not a path-prefix match
            if symbol.source_root not in scope:
                continue
            if symbol.fqn == type_.fqn or symbol.fqn in seen:
                continue
            seen.add(symbol.fqn)
            found.append(symbol)
        return found

    def direct_base_type(self, type_: TypeSymbol) -> TypeSymbol | None:
        if type_.node is None:
            return None

        for base in type_.node.bases:
            expr = base.value if isinstance(base, ast.Subscript) else base
            dotted = dotted_name(expr)
            qualified = self._qualify(dotted, type_.module_name, type_.enclosing) if dotted else None
            if qualified in GENERIC_MARKERS:
                continue
            if qualified is not None:
                symbol = self._lookup(qualified)
                if symbol is not None:
                    return symbol
            return TypeSymbol(
                fqn=qualified or ast.unparse(expr),
                name=(dotted or ast.unparse(expr)).rsplit(".", 1)[-1],
                kind=TypeSymbolKind.EXTERNAL,
            )

        # No explicit base: implicitly derives from object
        return ROOT_TYPE

    def is_root_type(self, type_: TypeSymbol) -> bool:
        return type_.kind == TypeSymbolKind.ROOT

    def owning_module(self, type_: TypeSymbol) -> str:
        return type_.project

    def declaring_source_location(self, type_: TypeSymbol) -> str:
        return type_.file_path
