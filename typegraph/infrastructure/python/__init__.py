"""
Python source collaborators: workspace loading and ast-based symbol resolution.
"""

from .resolver import ROOT_TYPE, PythonSymbolResolver, TypeSymbol, TypeSymbolKind
from .workspace import PythonWorkspaceLoader, SourceUnit, Workspace

__all__ = [
    "PythonSymbolResolver",
    "PythonWorkspaceLoader",
    "ROOT_TYPE",
    "SourceUnit",
    "TypeSymbol",
    "TypeSymbolKind",
    "Workspace",
]
