"""
Type Graph Domain

Models and ports shared by the graph builder and its collaborators.
"""

from .models import (
    GraphSnapshot,
    LinkKind,
    ModuleUnit,
    ScanMode,
    TypeIdentity,
    TypeLink,
    TypeNode,
)
from .ports import ArtifactWriterPort, SymbolResolverPort, TypeDescriptor

__all__ = [
    # Models
    "GraphSnapshot",
    "LinkKind",
    "ModuleUnit",
    "ScanMode",
    "TypeIdentity",
    "TypeLink",
    "TypeNode",
    # Ports
    "ArtifactWriterPort",
    "SymbolResolverPort",
    "TypeDescriptor",
]
