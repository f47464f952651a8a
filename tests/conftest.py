"""
Global test configuration and fixtures
"""

import os
import textwrap
from pathlib import Path

import pytest

from typegraph.infrastructure.config import get_settings


@pytest.fixture
def write_tree(tmp_path):
    """
    Write a source tree under tmp_path.

    Example:
        root = write_tree({"pkg/__init__.py": "", "pkg/a.py": "class A: ..."})
    """

    def _write(files: dict[str, str], root: Path | None = None) -> Path:
        base = root or tmp_path
        for relative, content in files.items():
            target = base / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return base

    return _write


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Settings come from defaults only, never from the developer's environment."""
    for key in list(os.environ):
        if key.startswith("TYPEGRAPH_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# Pytest hooks
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real source trees)")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
