"""
Test Python Workspace Loader
"""

import pytest

from typegraph.infrastructure.exceptions import (
    EmptyWorkspaceError,
    InputNotFoundError,
    SourceParseError,
    WorkspaceLoadError,
)
from typegraph.infrastructure.python import PythonWorkspaceLoader
from typegraph.infrastructure.python.workspace import import_root_for, module_name_for, project_name_for


def unit_names(module) -> list[str]:
    return [u.module_name for u in module.source_units]


class TestInputShapes:
    def test_single_file(self, write_tree, tmp_path):
        write_tree({"solo.py": "class Solo: ..."})

        workspace = PythonWorkspaceLoader().load(tmp_path / "solo.py")

        assert workspace.name == "solo.py"
        assert [m.name for m in workspace.modules] == ["solo"]
        assert unit_names(workspace.modules[0]) == ["solo"]
        assert workspace.modules[0].source_root == tmp_path.resolve()

    def test_plain_directory_is_one_module(self, write_tree):
        root = write_tree(
            {
                "pkg/__init__.py": "",
                "pkg/b.py": "class B: ...",
                "pkg/a.py": "class A: ...",
                "tool.py": "",
                "README.md": "not python",
            }
        )

        workspace = PythonWorkspaceLoader().load(root)

        assert len(workspace.modules) == 1
        module = workspace.modules[0]
        assert module.name == root.name
        # directory walk order, files sorted within each directory
        assert unit_names(module) == ["tool", "pkg", "pkg.a", "pkg.b"]
        assert workspace.unit_count() == 4

    def test_project_with_src_layout(self, write_tree, tmp_path):
        write_tree(
            {
                "proj/pyproject.toml": '[project]\nname = "proj-core"\n',
                "proj/src/pkg/__init__.py": "",
                "proj/src/pkg/models.py": "class User: ...",
                "proj/tests/test_models.py": "",
            }
        )

        workspace = PythonWorkspaceLoader().load(tmp_path / "proj")

        module = workspace.modules[0]
        assert module.name == "proj-core"
        assert module.source_root == (tmp_path / "proj" / "src").resolve()
        assert unit_names(module) == ["pkg", "pkg.models"]
        assert all(u.project == "proj-core" for u in module.source_units)

    def test_solution_directory_yields_module_per_project(self, write_tree, tmp_path):
        write_tree(
            {
                "web/setup.py": "",
                "web/web_app/views.py": "class View: ...",
                "api/setup.cfg": "[metadata]\nname = api\n",
                "api/api_app/handlers.py": "class Handler: ...",
            }
        )

        workspace = PythonWorkspaceLoader().load(tmp_path)

        assert [m.name for m in workspace.modules] == ["api", "web"]
        # setup.py itself is a source unit of its project
        assert unit_names(workspace.modules[1]) == ["setup", "web_app.views"]

    def test_nested_project_is_not_part_of_its_parent(self, write_tree, tmp_path):
        write_tree(
            {
                "pyproject.toml": '[project]\nname = "outer"\n',
                "outer_pkg/core.py": "class Core: ...",
                "plugins/inner/pyproject.toml": '[project]\nname = "inner"\n',
                "plugins/inner/inner_pkg/ext.py": "class Ext: ...",
            }
        )

        workspace = PythonWorkspaceLoader().load(tmp_path)

        outer, inner = workspace.modules
        assert outer.name == "outer"
        assert unit_names(outer) == ["outer_pkg.core"]
        assert inner.name == "inner"
        assert unit_names(inner) == ["inner_pkg.ext"]

    def test_excluded_directories_are_not_descended(self, write_tree):
        root = write_tree(
            {
                "app.py": "class App: ...",
                ".venv/lib/site.py": "class Site: ...",
                "__pycache__/app.py": "",
                "build/lib/app.py": "",
            }
        )

        workspace = PythonWorkspaceLoader().load(root)

        assert unit_names(workspace.modules[0]) == ["app"]

    def test_custom_exclude_dirs(self, write_tree):
        root = write_tree({"app.py": "", "generated/schema.py": ""})

        workspace = PythonWorkspaceLoader(exclude_dirs=("generated",)).load(root)

        assert unit_names(workspace.modules[0]) == ["app"]


class TestErrors:
    def test_missing_path(self, tmp_path):
        with pytest.raises(InputNotFoundError) as exc_info:
            PythonWorkspaceLoader().load(tmp_path / "nope")

        assert exc_info.value.context["path"].endswith("nope")

    def test_directory_without_sources(self, write_tree):
        root = write_tree({"README.md": "# docs", "data/config.yaml": "a: 1"})

        with pytest.raises(EmptyWorkspaceError):
            PythonWorkspaceLoader().load(root)

    def test_non_python_file(self, write_tree, tmp_path):
        write_tree({"notes.txt": "hello"})

        with pytest.raises(WorkspaceLoadError):
            PythonWorkspaceLoader().load(tmp_path / "notes.txt")


class TestSyntaxErrors:
    @pytest.fixture
    def root(self, write_tree):
        return write_tree({"good.py": "class Good: ...", "broken.py": "class Broken(:\n"})

    def test_broken_unit_is_skipped(self, root):
        loader = PythonWorkspaceLoader()

        workspace = loader.load(root)

        assert unit_names(workspace.modules[0]) == ["good"]
        assert [p.name for p in loader.skipped_units] == ["broken.py"]

    def test_strict_parsing_raises(self, root):
        with pytest.raises(SourceParseError) as exc_info:
            PythonWorkspaceLoader(strict_parsing=True).load(root)

        assert exc_info.value.path.endswith("broken.py")
        assert exc_info.value.lineno == 1

    def test_only_broken_units_is_an_empty_workspace(self, write_tree):
        root = write_tree({"broken.py": "def (:\n"})

        with pytest.raises(EmptyWorkspaceError):
            PythonWorkspaceLoader().load(root)


@pytest.mark.parametrize(
    "relative,expected",
    [
        ("mod.py", ("mod", False)),
        ("pkg/mod.py", ("pkg.mod", False)),
        ("pkg/sub/__init__.py", ("pkg.sub", True)),
    ],
)
def test_module_name_for(tmp_path, relative, expected):
    assert module_name_for(tmp_path / relative, tmp_path) == expected


def test_module_name_for_root_init(tmp_path):
    assert module_name_for(tmp_path / "__init__.py", tmp_path) == (tmp_path.name, True)


class TestProjectName:
    def test_from_pyproject(self, write_tree, tmp_path):
        write_tree({"pyproject.toml": '[project]\nname = " billing "\n'})

        assert project_name_for(tmp_path) == "billing"

    @pytest.mark.parametrize(
        "content",
        [
            "[tool.black]\nline-length = 100\n",  # no [project] table
            "[project\nname = ",  # invalid TOML
        ],
    )
    def test_falls_back_to_directory_name(self, write_tree, tmp_path, content):
        write_tree({"pyproject.toml": content})

        assert project_name_for(tmp_path) == tmp_path.name

    def test_without_pyproject(self, tmp_path):
        assert project_name_for(tmp_path) == tmp_path.name


class TestPackageInput:
    def test_package_directory_keeps_its_name(self, write_tree, tmp_path):
        write_tree({"shop/__init__.py": "", "shop/models.py": "", "shop/api/__init__.py": "", "shop/api/views.py": ""})

        workspace = PythonWorkspaceLoader().load(tmp_path / "shop")

        module = workspace.modules[0]
        assert unit_names(module) == ["shop", "shop.models", "shop.api", "shop.api.views"]
        # the scope root stays the input directory
        assert module.source_root == (tmp_path / "shop").resolve()

    def test_file_inside_package(self, write_tree, tmp_path):
        write_tree({"shop/__init__.py": "", "shop/models.py": "class Customer: ..."})

        workspace = PythonWorkspaceLoader().load(tmp_path / "shop" / "models.py")

        assert unit_names(workspace.modules[0]) == ["shop.models"]

    def test_src_layout_is_not_walked_past(self, write_tree, tmp_path):
        write_tree({"proj/pyproject.toml": "", "proj/src/pkg/__init__.py": "", "proj/src/pkg/a.py": ""})

        workspace = PythonWorkspaceLoader().load(tmp_path / "proj")

        assert unit_names(workspace.modules[0]) == ["pkg", "pkg.a"]

    @pytest.mark.parametrize(
        "files,start,expected",
        [
            ({"plain/a.py": ""}, "plain", "plain"),
            ({"pkg/__init__.py": ""}, "pkg", ""),
            ({"pkg/__init__.py": "", "pkg/sub/__init__.py": ""}, "pkg/sub", ""),
        ],
    )
    def test_import_root_for(self, write_tree, tmp_path, files, start, expected):
        write_tree(files)

        assert import_root_for(tmp_path / start) == tmp_path / expected
