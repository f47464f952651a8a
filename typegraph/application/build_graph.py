"""
Build Type Graph UseCase

input path -> workspace -> resolver -> builder -> artifact
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from typegraph.domain.models import GraphSnapshot, ScanMode
from typegraph.domain.ports import ArtifactWriterPort
from typegraph.graph import GraphAccumulator, TypeGraphBuilder
from typegraph.infrastructure.artifact import JsonArtifactWriter, artifact_path
from typegraph.infrastructure.config import TypeGraphSettings, get_settings
from typegraph.infrastructure.logging import get_logger
from typegraph.infrastructure.python import PythonSymbolResolver, PythonWorkspaceLoader

logger = get_logger(__name__)


@dataclass
class BuildReport:
    """Outcome of one graph build."""

    workspace: str
    mode: ScanMode
    modules: int
    units: int
    nodes: int
    reference_links: int
    inheritance_links: int
    artifact_path: Path | None = None
    skipped_modules: list[str] = field(default_factory=list)
    skipped_units: int = 0
    duration_seconds: float = 0.0

    @property
    def links(self) -> int:
        return self.reference_links + self.inheritance_links


def build_snapshot(
    input_path: str | Path,
    mode: ScanMode,
    settings: TypeGraphSettings | None = None,
) -> tuple[GraphSnapshot, BuildReport]:
    """Load, resolve and build without writing anything."""
    settings = settings or get_settings()
    started = time.perf_counter()

    loader = PythonWorkspaceLoader(exclude_dirs=settings.exclude_dirs, strict_parsing=settings.strict_parsing)
    workspace = loader.load(input_path)
    resolver = PythonSymbolResolver(workspace, max_alias_depth=settings.max_alias_depth)

    builder = TypeGraphBuilder(
        resolver,
        mode=mode,
        accumulator=GraphAccumulator(),
        eager_registration=settings.eager_registration,
    )
    accumulator = builder.scan_workspace(workspace.modules)
    stats = accumulator.stats()

    report = BuildReport(
        workspace=workspace.name,
        mode=mode,
        modules=len(workspace.modules),
        units=workspace.unit_count(),
        nodes=stats["nodes"],
        reference_links=stats["reference_links"],
        inheritance_links=stats["inheritance_links"],
        skipped_modules=list(builder.skipped_modules),
        skipped_units=len(loader.skipped_units),
        duration_seconds=time.perf_counter() - started,
    )
    return accumulator.snapshot(), report


def build_type_graph(
    input_path: str | Path,
    mode: ScanMode,
    settings: TypeGraphSettings | None = None,
    output_dir: str | Path | None = None,
    writer: ArtifactWriterPort | None = None,
) -> BuildReport:
    """
    Build the graph for input_path and write the artifact.

    Raises:
        InputNotFoundError: input_path does not exist
        EmptyWorkspaceError: no Python source unit found (nothing is written)
        ResolverError: a module failed to load
        ArtifactWriteError: the artifact could not be written
    """
    settings = settings or get_settings()
    snapshot, report = build_snapshot(input_path, mode, settings)

    writer = writer or JsonArtifactWriter(indent=settings.artifact_indent)
    target = artifact_path(input_path, mode, output_dir if output_dir is not None else settings.output_dir)
    report.artifact_path = writer.write(snapshot, target)

    logger.info(
        "build_completed",
        workspace=report.workspace,
        mode=mode.value,
        nodes=report.nodes,
        links=report.links,
        duration_s=round(report.duration_seconds, 3),
    )
    return report
