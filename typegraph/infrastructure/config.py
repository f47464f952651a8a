"""
Centralized configuration for typegraph.

Usage:
    from typegraph.infrastructure.config import get_settings

    settings = get_settings()
    loader = PythonWorkspaceLoader(exclude_dirs=settings.exclude_dirs)

Every field can be overridden from the environment with the TYPEGRAPH_ prefix,
e.g. TYPEGRAPH_LOG_LEVEL=DEBUG or TYPEGRAPH_EAGER_REGISTRATION=true.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from typegraph.domain.models import ScanMode

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    ".git",
    ".hg",
    ".tox",
    ".nox",
    ".venv",
    "venv",
    "env",
    "__pycache__",
    "node_modules",
    "build",
    "dist",
    ".mypy_cache",
    ".pytest_cache",
)


class TypeGraphSettings(BaseSettings):
    """Runtime settings for graph builds."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TYPEGRAPH_",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    """Root log level"""

    log_json: bool = Field(default=False)
    """Emit JSON log lines instead of console output"""

    # Build
    default_mode: ScanMode = Field(default=ScanMode.FULL)
    """Scan mode used when the CLI does not pass one"""

    eager_registration: bool = Field(default=False)
    """Register every module's types before linking any module"""

    strict_parsing: bool = Field(default=False)
    """Abort on a source unit with a syntax error instead of skipping it"""

    exclude_dirs: tuple[str, ...] = Field(default=DEFAULT_EXCLUDE_DIRS)
    """Directory names never descended into while collecting source units"""

    max_alias_depth: int = Field(default=8, ge=0, le=64)
    """Maximum re-export hops followed when resolving an imported name"""

    # Output
    output_dir: Path = Field(default=Path("."))
    """Directory the artifact is written to"""

    artifact_indent: int = Field(default=2, ge=0, le=8)
    """JSON indentation of the artifact (0 writes a single line)"""


@lru_cache(maxsize=1)
def get_settings() -> TypeGraphSettings:
    """Process-wide settings loaded from the environment."""
    return TypeGraphSettings()
