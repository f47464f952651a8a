"""
Custom exceptions for typegraph.

Hierarchy:
- TypeGraphError (base)
  - InputError (bad or empty input)
    - InputNotFoundError
    - EmptyWorkspaceError
  - ResolverError (analysis environment failures)
    - WorkspaceLoadError
    - SourceParseError
  - ArtifactError (artifact I/O failures)
    - ArtifactWriteError
    - ArtifactReadError

Resolution gaps (unknown base type, reference into a library) are not errors:
the builder skips the edge and continues.
"""

from __future__ import annotations


class TypeGraphError(Exception):
    """Base exception for all typegraph errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


# ============================================================================
# Input Errors
# ============================================================================


class InputError(TypeGraphError):
    """Base class for input errors."""

    pass


class InputNotFoundError(InputError):
    """Input path does not exist."""

    def __init__(self, path: str):
        super().__init__("Input path not found", {"path": path})
        self.path = path


class EmptyWorkspaceError(InputError):
    """Input contains no module with any source unit."""

    def __init__(self, path: str):
        super().__init__("No Python source units found", {"path": path})
        self.path = path


# ============================================================================
# Resolver Errors
# ============================================================================


class ResolverError(TypeGraphError):
    """Base class for symbol resolution environment failures."""

    pass


class WorkspaceLoadError(ResolverError):
    """A module could not be loaded."""

    def __init__(self, message: str, module: str | None = None, path: str | None = None):
        context = {}
        if module:
            context["module"] = module
        if path:
            context["path"] = path
        super().__init__(message, context)
        self.module = module
        self.path = path


class SourceParseError(ResolverError):
    """A source unit has invalid syntax (strict parsing only)."""

    def __init__(self, path: str, lineno: int | None = None, detail: str | None = None):
        context: dict = {"path": path}
        if lineno is not None:
            context["line"] = lineno
        if detail:
            context["detail"] = detail
        super().__init__("Failed to parse source unit", context)
        self.path = path
        self.lineno = lineno


# ============================================================================
# Artifact Errors
# ============================================================================


class ArtifactError(TypeGraphError):
    """Base class for artifact I/O failures."""

    pass


class ArtifactWriteError(ArtifactError):
    """Artifact could not be written."""

    def __init__(self, path: str, reason: str):
        super().__init__("Failed to write graph artifact", {"path": path, "reason": reason})
        self.path = path


class ArtifactReadError(ArtifactError):
    """Artifact could not be read or failed validation."""

    def __init__(self, path: str, reason: str):
        super().__init__("Failed to read graph artifact", {"path": path, "reason": reason})
        self.path = path
