"""Application use cases."""

from .build_graph import BuildReport, build_snapshot, build_type_graph

__all__ = ["BuildReport", "build_snapshot", "build_type_graph"]
