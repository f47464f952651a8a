"""
Type Graph Builder

Walks modules of source units and fills a GraphAccumulator.

Phase 1: Registration   - every declared type becomes a node
Phase 2: Link Discovery - references and/or direct base types become edges

Phase 1 always completes for a module before Phase 2 starts for it, so
intra-module references resolve regardless of file order.
"""

from collections.abc import Sequence
from pathlib import Path

from typegraph.domain.models import LinkKind, ModuleUnit, ScanMode
from typegraph.domain.ports import SymbolResolverPort, TypeDescriptor
from typegraph.infrastructure.logging import get_logger

from .accumulator import GraphAccumulator
from .node_table import format_short_name

logger = get_logger(__name__)


class TypeGraphBuilder:
    """
    Builds the type cross-reference graph.

    Entry points:
    - scan_workspace(modules): solution-level input, scope = all module roots
    - scan_module(module): single project input, scope = that module's root

    Example:
        builder = TypeGraphBuilder(resolver, ScanMode.FULL)
        accumulator = builder.scan_workspace(workspace.modules)
        snapshot = accumulator.snapshot()
    """

    def __init__(
        self,
        resolver: SymbolResolverPort,
        mode: ScanMode = ScanMode.FULL,
        accumulator: GraphAccumulator | None = None,
        eager_registration: bool = False,
    ):
        self.resolver = resolver
        self.mode = mode
        self.accumulator = accumulator if accumulator is not None else GraphAccumulator()
        self.eager_registration = eager_registration
        self.skipped_modules: list[str] = []

    # ============================================================
    # Entry points
    # ============================================================

    def scan_workspace(self, modules: Sequence[ModuleUnit]) -> GraphAccumulator:
        """Scan every module; references may target any module's types."""
        scope = frozenset(m.source_root for m in modules)

        if self.eager_registration:
            declared = [self._register_module(m) for m in modules]
            for module, types in zip(modules, declared):
                if types:
                    self._discover_links(module, types, scope)
        else:
            for module in modules:
                self.scan_module(module, scope)

        logger.info("workspace_scanned", modules=len(modules), mode=self.mode.value, **self.accumulator.stats())
        return self.accumulator

    def scan_module(self, module: ModuleUnit, scope: frozenset[Path] | None = None) -> GraphAccumulator:
        """Run both phases for one module."""
        if scope is None:
            scope = frozenset({module.source_root})

        declared = self._register_module(module)
        if declared:
            self._discover_links(module, declared, scope)
        return self.accumulator

    # ============================================================
    # Phase 1: Registration
    # ============================================================

    def _register_module(self, module: ModuleUnit) -> list[TypeDescriptor]:
        """Register every declared type of the module; return them in order."""
        declared: list[TypeDescriptor] = []

        for unit in module.source_units:
            types = self.resolver.declared_types(unit)
            logger.debug("unit_registered", module=module.name, unit=str(unit), types=len(types))
            for type_ in types:
                if self._register_type(type_) is not None:
                    declared.append(type_)

        if not declared:
            logger.warning("module_skipped", module=module.name, reason="no declared types")
            self.skipped_modules.append(module.name)

        return declared

    def _register_type(self, type_: TypeDescriptor) -> int | None:
        full_name = self.resolver.fully_qualified_name(type_)
        if not full_name:
            logger.debug("type_skipped", reason="empty fully-qualified name")
            return None

        return self.accumulator.register_type(
            full_name=full_name,
            short_name=self._short_name(type_),
            owning_module=self.resolver.owning_module(type_),
            source_location=self.resolver.declaring_source_location(type_),
        )

    def _short_name(self, type_: TypeDescriptor) -> str:
        simple = self.resolver.simple_name(type_) or self.resolver.fully_qualified_name(type_)
        if not self.resolver.is_generic(type_):
            return simple
        args = [self.resolver.display_name(arg) for arg in self.resolver.type_arguments(type_)]
        return format_short_name(simple, args)

    # ============================================================
    # Phase 2: Link Discovery
    # ============================================================

    def _discover_links(
        self,
        module: ModuleUnit,
        declared: Sequence[TypeDescriptor],
        scope: frozenset[Path],
    ) -> None:
        before = len(self.accumulator.edges)

        for type_ in declared:
            full_name = self.resolver.fully_qualified_name(type_)
            node_id = self.accumulator.registry.lookup(full_name)
            if node_id is None:
                logger.warning("type_not_registered", type=full_name, module=module.name)
                continue

            if self.mode.scans_references:
                self._scan_references(type_, full_name, node_id, scope)
            if self.mode.scans_inheritance:
                self._scan_inheritance(type_, node_id)

        logger.info(
            "module_scanned",
            module=module.name,
            types=len(declared),
            new_links=len(self.accumulator.edges) - before,
        )

    def _scan_references(
        self,
        type_: TypeDescriptor,
        full_name: str,
        node_id: int,
        scope: frozenset[Path],
    ) -> None:
        for ref in self.resolver.referenced_types(type_, scope):
            ref_name = self.resolver.fully_qualified_name(ref)
            if not ref_name or ref_name == full_name:
                continue
            self.accumulator.link(node_id, ref_name, LinkKind.REFERENCE)

    def _scan_inheritance(self, type_: TypeDescriptor, node_id: int) -> None:
        # Direct base only: ancestors produce their own edges when scanned
        base = self.resolver.direct_base_type(type_)
        if base is None or self.resolver.is_root_type(base):
            return

        base_name = self.resolver.fully_qualified_name(base)
        if not base_name:
            return
        self.accumulator.link(node_id, base_name, LinkKind.INHERITANCE)
