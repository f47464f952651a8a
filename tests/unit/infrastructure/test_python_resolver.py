"""
Test Python Symbol Resolver

Resolution of declarations, references and base types over small source trees.
"""

import sys

import pytest

from typegraph.domain.ports import SymbolResolverPort
from typegraph.infrastructure.python import (
    ROOT_TYPE,
    PythonSymbolResolver,
    PythonWorkspaceLoader,
    TypeSymbolKind,
)


@pytest.fixture
def load(write_tree):
    """Write files, load them as one workspace and index it."""

    def _load(files: dict[str, str]):
        root = write_tree(files)
        workspace = PythonWorkspaceLoader().load(root)
        return workspace, PythonSymbolResolver(workspace)

    return _load


def types_by_name(workspace, resolver) -> dict:
    return {resolver.fully_qualified_name(t): t for unit in workspace.units for t in resolver.declared_types(unit)}


def scope_of(workspace) -> frozenset:
    return frozenset(m.source_root for m in workspace.modules)


def ref_names(resolver, type_, scope) -> list[str]:
    return [resolver.fully_qualified_name(r) for r in resolver.referenced_types(type_, scope)]


def test_implements_port(load):
    _, resolver = load({"app/a.py": "class A: ..."})

    assert isinstance(resolver, SymbolResolverPort)


class TestDeclarations:
    def test_fully_qualified_names_follow_module_paths(self, load):
        workspace, resolver = load(
            {
                "app/__init__.py": "class Root: ...",
                "app/models/user.py": """
                    class User:
                        class Meta: ...
                    """,
            }
        )

        types = types_by_name(workspace, resolver)

        assert set(types) == {"app.Root", "app.models.user.User", "app.models.user.User.Meta"}
        meta = types["app.models.user.User.Meta"]
        assert resolver.simple_name(meta) == "Meta"
        assert resolver.owning_module(meta) == workspace.modules[0].name
        assert resolver.declaring_source_location(meta).endswith("user.py")

    def test_declared_types_are_in_source_order(self, load):
        workspace, resolver = load({"m.py": "class B: ...\nclass A: ...\nclass C: ..."})
        unit = next(workspace.units)

        assert [resolver.simple_name(t) for t in resolver.declared_types(unit)] == ["B", "A", "C"]


class TestGenerics:
    def test_generic_base_parameters(self, load):
        workspace, resolver = load(
            {
                "m.py": """
                    from typing import Generic, TypeVar

                    K = TypeVar("K")
                    V = TypeVar("V")

                    class Repo(Generic[K, V]): ...
                    class Plain: ...
                    """
            }
        )
        types = types_by_name(workspace, resolver)

        repo = types["m.Repo"]
        assert resolver.is_generic(repo)
        assert [resolver.display_name(a) for a in resolver.type_arguments(repo)] == ["K", "V"]
        assert not resolver.is_generic(types["m.Plain"])

    def test_implicit_parameters_from_subscripted_base(self, load):
        workspace, resolver = load(
            {
                "m.py": """
                    from typing import Generic, TypeVar

                    T = TypeVar("T")

                    class Box(Generic[T]): ...
                    class LabeledBox(Box[T]): ...
                    class IntBox(Box[int]): ...
                    """
            }
        )
        types = types_by_name(workspace, resolver)

        assert [a.name for a in resolver.type_arguments(types["m.LabeledBox"])] == ["T"]
        assert not resolver.is_generic(types["m.IntBox"])

    @pytest.mark.skipif(sys.version_info < (3, 12), reason="PEP 695 syntax needs Python 3.12")
    def test_pep695_type_parameters(self, load):
        workspace, resolver = load({"m.py": "class Pair[A, B]:\n    first: A\n    second: B\n"})
        pair = types_by_name(workspace, resolver)["m.Pair"]

        assert [a.name for a in resolver.type_arguments(pair)] == ["A", "B"]


class TestReferences:
    def test_same_module_and_imported_references(self, load):
        workspace, resolver = load(
            {
                "app/__init__.py": "",
                "app/models.py": """
                    class User: ...
                    class Order: ...
                    """,
                "app/service.py": """
                    from collections import OrderedDict
                    from app.models import User
                    from . import models

                    class Cache: ...

                    class Service:
                        cache: Cache
                        index: OrderedDict

                        def find(self, user: User) -> "models.Order":
                            return None
                    """,
            }
        )
        types = types_by_name(workspace, resolver)

        refs = ref_names(resolver, types["app.service.Service"], scope_of(workspace))

        assert refs == ["app.service.Cache", "app.models.User", "app.models.Order"]

    def test_self_references_and_duplicates_are_dropped(self, load):
        workspace, resolver = load(
            {
                "m.py": """
                    class Node:
                        children: list["Node"]
                        parent: "Node | None"
                        peer: Peer
                        other: Peer

                    class Peer: ...
                    """
            }
        )
        node = types_by_name(workspace, resolver)["m.Node"]

        assert ref_names(resolver, node, scope_of(workspace)) == ["m.Peer"]

    def test_reexported_names_are_followed(self, load):
        workspace, resolver = load(
            {
                "app/__init__.py": "from .core import Engine as Engine",
                "app/core/__init__.py": "from .engine import Engine",
                "app/core/engine.py": "class Engine: ...",
                "app/cli.py": """
                    import app

                    class Runner:
                        engine: app.Engine
                    """,
            }
        )
        runner = types_by_name(workspace, resolver)["app.cli.Runner"]

        assert ref_names(resolver, runner, scope_of(workspace)) == ["app.core.engine.Engine"]

    def test_alias_chasing_respects_depth_limit(self, write_tree):
        root = write_tree(
            {
                "app/__init__.py": "from .core import Engine",
                "app/core/__init__.py": "from .engine import Engine",
                "app/core/engine.py": "class Engine: ...",
                "app/cli.py": "import app\n\nclass Runner:\n    engine: app.Engine\n",
            }
        )
        workspace = PythonWorkspaceLoader().load(root)
        resolver = PythonSymbolResolver(workspace, max_alias_depth=1)
        runner = types_by_name(workspace, resolver)["app.cli.Runner"]

        assert ref_names(resolver, runner, scope_of(workspace)) == []

    def test_nested_class_by_bare_name(self, load):
        workspace, resolver = load(
            {
                "m.py": """
                    class Outer:
                        class Config: ...
                        config: Config
                    """
            }
        )
        outer = types_by_name(workspace, resolver)["m.Outer"]

        assert ref_names(resolver, outer, scope_of(workspace)) == ["m.Outer.Config"]

    def test_star_imports(self, load):
        workspace, resolver = load(
            {
                "shapes.py": "class Circle: ...",
                "canvas.py": "from shapes import *\n\nclass Canvas:\n    item: Circle\n",
            }
        )
        canvas = types_by_name(workspace, resolver)["canvas.Canvas"]

        assert ref_names(resolver, canvas, scope_of(workspace)) == ["shapes.Circle"]

    def test_scope_uses_exact_module_membership(self, write_tree, tmp_path):
        write_tree(
            {
                "core/pyproject.toml": '[project]\nname = "core"\n',
                "core/core_pkg/base.py": "class Base: ...",
                "core_ext/pyproject.toml": '[project]\nname = "core-ext"\n',
                "core_ext/ext_pkg/plugin.py": "from core_pkg.base import Base\n\nclass Plugin:\n    base: Base\n",
            }
        )
        workspace = PythonWorkspaceLoader().load(tmp_path)
        resolver = PythonSymbolResolver(workspace)
        plugin = types_by_name(workspace, resolver)["ext_pkg.plugin.Plugin"]
        core, ext = workspace.modules

        assert ref_names(resolver, plugin, frozenset({core.source_root, ext.source_root})) == ["core_pkg.base.Base"]
        # "core_ext" starts with "core" but is a different module
        assert ref_names(resolver, plugin, frozenset({ext.source_root})) == []


class TestBaseTypes:
    @pytest.fixture
    def resolved(self, load):
        workspace, resolver = load(
            {
                "m.py": """
                    from typing import Generic, Protocol, TypeVar
                    import enum

                    T = TypeVar("T")

                    class Plain: ...
                    class Explicit(object): ...
                    class Base(Generic[T]): ...
                    class Derived(Base[int]): ...
                    class Mixed(Generic[T], Base[T]): ...
                    class Color(enum.Enum): ...
                    class Proto(Protocol): ...
                    class Failure(Exception): ...
                    """
            }
        )
        return types_by_name(workspace, resolver), resolver

    @pytest.mark.parametrize("name", ["m.Plain", "m.Explicit", "m.Base", "m.Proto"])
    def test_root_base(self, resolved, name):
        types, resolver = resolved

        base = resolver.direct_base_type(types[name])

        assert base is ROOT_TYPE
        assert resolver.is_root_type(base)

    @pytest.mark.parametrize("name", ["m.Derived", "m.Mixed"])
    def test_declared_base(self, resolved, name):
        types, resolver = resolved

        base = resolver.direct_base_type(types[name])

        assert resolver.fully_qualified_name(base) == "m.Base"
        assert not resolver.is_root_type(base)

    @pytest.mark.parametrize(
        "name,expected",
        [("m.Color", "enum.Enum"), ("m.Failure", "builtins.Exception")],
    )
    def test_external_base(self, resolved, name, expected):
        types, resolver = resolved

        base = resolver.direct_base_type(types[name])

        assert base.kind == TypeSymbolKind.EXTERNAL
        assert resolver.fully_qualified_name(base) == expected
