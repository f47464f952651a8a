"""
Python Workspace Loader

Turns an input path into ordered modules of parsed source units.

Input shapes:
- a single .py file             -> one module, one unit
- a directory with a project marker (pyproject.toml, setup.py, setup.cfg)
                                -> that project, plus any nested projects
- a directory holding projects  -> one module per project (solution input)
- any other directory           -> one module rooted at the directory
"""

from __future__ import annotations

import ast
import os
import tomllib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from typegraph.domain.models import ModuleUnit
from typegraph.infrastructure.config import DEFAULT_EXCLUDE_DIRS
from typegraph.infrastructure.exceptions import (
    EmptyWorkspaceError,
    InputNotFoundError,
    SourceParseError,
    WorkspaceLoadError,
)
from typegraph.infrastructure.logging import get_logger

logger = get_logger(__name__)

PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")


@dataclass
class SourceUnit:
    """One parsed Python file."""

    path: Path
    module_name: str  # dotted import path, e.g. "pkg.sub.mod"
    project: str
    source_root: Path
    tree: ast.Module = field(repr=False)
    is_package: bool = False  # __init__.py

    def __str__(self) -> str:
        return str(self.path)


@dataclass
class Workspace:
    """All modules loaded from one input path."""

    name: str
    root: Path
    modules: list[ModuleUnit] = field(default_factory=list)

    @property
    def units(self) -> Iterator[SourceUnit]:
        for module in self.modules:
            yield from module.source_units

    def unit_count(self) -> int:
        return sum(len(m) for m in self.modules)


def module_name_for(path: Path, import_root: Path) -> tuple[str, bool]:
    """
    Dotted module name of a file relative to its import root.

    Examples:
        pkg/mod.py      -> ("pkg.mod", False)
        pkg/__init__.py -> ("pkg", True)
    """
    parts = list(path.relative_to(import_root).with_suffix("").parts)
    is_package = bool(parts) and parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    if not parts:
        # __init__.py directly under the import root
        parts = [import_root.name]
    return ".".join(parts), is_package


def import_root_for(directory: Path) -> Path:
    """
    Directory that dotted module names are relative to.

    Walks up from directory while it is a package, so a package given as input
    keeps its own name as the first segment.

    Example:
        repo/shop/__init__.py, repo/shop/models.py
        import_root_for(repo/shop) -> repo   (shop/models.py -> "shop.models")
    """
    root = directory
    while (root / "__init__.py").is_file() and root.parent != root:
        root = root.parent
    return root


def project_name_for(project_dir: Path) -> str:
    """[project].name from pyproject.toml, falling back to the directory name."""
    pyproject = project_dir / "pyproject.toml"
    if pyproject.is_file():
        try:
            with pyproject.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("pyproject_unreadable", path=str(pyproject), error=str(e))
        else:
            name = data.get("project", {}).get("name")
            if isinstance(name, str) and name.strip():
                return name.strip()
    return project_dir.name


class PythonWorkspaceLoader:
    """
    Loads Python projects into ModuleUnits of SourceUnits.

    Modules are ordered by path; units within a module are sorted by path so
    identity assignment is reproducible for the same input.
    """

    def __init__(
        self,
        exclude_dirs: tuple[str, ...] | list[str] = DEFAULT_EXCLUDE_DIRS,
        strict_parsing: bool = False,
    ):
        self.exclude_dirs = frozenset(exclude_dirs)
        self.strict_parsing = strict_parsing
        self.skipped_units: list[Path] = []

    def load(self, path: str | Path) -> Workspace:
        input_path = Path(path).expanduser()
        if not input_path.exists():
            raise InputNotFoundError(str(input_path))
        input_path = input_path.resolve()

        if input_path.is_file():
            if input_path.suffix != ".py":
                raise WorkspaceLoadError("Unsupported input file (expected a .py file)", path=str(input_path))
            modules = [self._load_file_module(input_path)]
            root = input_path.parent
        else:
            project_dirs = self.discover_projects(input_path)
            modules = [self._load_project(d, set(project_dirs) - {d}) for d in project_dirs]
            root = input_path

        if not any(m.source_units for m in modules):
            raise EmptyWorkspaceError(str(input_path))

        workspace = Workspace(name=input_path.name, root=root, modules=modules)
        logger.info(
            "workspace_loaded",
            workspace=workspace.name,
            modules=len(modules),
            units=workspace.unit_count(),
            skipped_units=len(self.skipped_units),
        )
        return workspace

    # ============================================================
    # Discovery
    # ============================================================

    def discover_projects(self, root: Path) -> list[Path]:
        """Directories holding a project marker; [root] when there are none."""
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            if any(marker in filenames for marker in PROJECT_MARKERS):
                found.append(Path(dirpath))

        if not found:
            return [root]
        return sorted(found)

    def _iter_source_files(self, source_root: Path, nested_projects: set[Path]) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(source_root):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if d not in self.exclude_dirs and (current / d) not in nested_projects
            )
            for filename in sorted(filenames):
                if filename.endswith(".py"):
                    yield current / filename

    # ============================================================
    # Loading
    # ============================================================

    def _load_project(self, project_dir: Path, nested_projects: set[Path]) -> ModuleUnit:
        name = project_name_for(project_dir)
        source_root = project_dir / "src" if (project_dir / "src").is_dir() else project_dir

        import_root = import_root_for(source_root)
        module = ModuleUnit(name=name, source_root=source_root)
        for file_path in self._iter_source_files(source_root, nested_projects):
            unit = self._load_unit(file_path, source_root, name, import_root)
            if unit is not None:
                module.source_units.append(unit)

        logger.debug("module_loaded", module=name, source_root=str(source_root), units=len(module))
        return module

    def _load_file_module(self, file_path: Path) -> ModuleUnit:
        source_root = file_path.parent
        name = file_path.stem
        module = ModuleUnit(name=name, source_root=source_root)
        unit = self._load_unit(file_path, source_root, name, import_root_for(source_root))
        if unit is not None:
            module.source_units.append(unit)
        return module

    def _load_unit(
        self,
        file_path: Path,
        source_root: Path,
        project: str,
        import_root: Path,
    ) -> SourceUnit | None:
        try:
            source = file_path.read_bytes()
        except OSError as e:
            raise WorkspaceLoadError(f"Cannot read source unit: {e}", module=project, path=str(file_path)) from e

        try:
            tree = ast.parse(source, filename=str(file_path))
        except (SyntaxError, ValueError) as e:
            lineno = getattr(e, "lineno", None)
            if self.strict_parsing:
                raise SourceParseError(str(file_path), lineno, str(e)) from e
            logger.warning("unit_skipped", path=str(file_path), line=lineno, reason=str(e))
            self.skipped_units.append(file_path)
            return None

        module_name, is_package = module_name_for(file_path, import_root)
        return SourceUnit(
            path=file_path,
            module_name=module_name,
            project=project,
            source_root=source_root,
            tree=tree,
            is_package=is_package,
        )
