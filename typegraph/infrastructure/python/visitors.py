"""
AST visitors for Python symbol resolution.

- DeclarationCollector: named (non-local) class declarations of a module
- ModuleScopeCollector: import/class bindings and TypeVar names of a module
- ReferenceCollector:   dotted names loaded inside one class declaration
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field

TYPE_VAR_FACTORIES = frozenset({"TypeVar", "ParamSpec", "TypeVarTuple"})


def dotted_name(node: ast.expr) -> str | None:
    """
    "a.b.c" for a Name/Attribute chain, None for anything else.

    Examples:
        Name(id="Foo")                    -> "Foo"
        Attribute(Name("models"), "User") -> "models.User"
        Call(...)                         -> None
    """
    parts: list[str] = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    parts.append(node.id)
    return ".".join(reversed(parts))


def subscript_names(slice_node: ast.expr) -> list[str]:
    """Plain names inside a subscript: Generic[K, V] -> ["K", "V"]."""
    elements = slice_node.elts if isinstance(slice_node, ast.Tuple) else [slice_node]
    names = []
    for element in elements:
        if isinstance(element, ast.Starred):
            element = element.value
        if isinstance(element, ast.Name):
            names.append(element.id)
    return names


def resolve_relative_module(module_name: str, is_package: bool, level: int, target: str | None) -> str:
    """
    Absolute module path of a (possibly relative) "from ... import".

    Examples:
        ("app.api.views", False, 1, "models") -> "app.api.models"
        ("app.api", True, 1, "models")        -> "app.api.models"
        ("app.api.views", False, 2, None)     -> "app"
    """
    if level == 0:
        return target or ""

    parts = module_name.split(".")
    if not is_package:
        parts = parts[:-1]
    if level > 1:
        parts = parts[: max(len(parts) - (level - 1), 0)]

    base = ".".join(parts)
    if target:
        return f"{base}.{target}" if base else target
    return base


# ============================================================
# Declarations
# ============================================================


@dataclass(frozen=True)
class ClassDeclaration:
    qualname: str
    enclosing: tuple[str, ...]  # qualnames of enclosing classes, outermost first
    node: ast.ClassDef = field(compare=False, repr=False)


class DeclarationCollector(ast.NodeVisitor):
    """Classes at module level, nested in classes, or under if/try/with blocks."""

    def __init__(self):
        self.declarations: list[ClassDeclaration] = []
        self._stack: list[str] = []

    def collect(self, tree: ast.Module) -> list[ClassDeclaration]:
        self.visit(tree)
        return self.declarations

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        qualname = ".".join([*self._stack, node.name])
        enclosing = tuple(".".join(self._stack[: i + 1]) for i in range(len(self._stack)))
        self.declarations.append(ClassDeclaration(qualname, enclosing, node))

        self._stack.append(node.name)
        for stmt in node.body:
            self.visit(stmt)
        self._stack.pop()

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        # Local classes are not named types
        return

    visit_AsyncFunctionDef = visit_FunctionDef
    visit_Lambda = visit_FunctionDef


# ============================================================
# Module scope
# ============================================================


@dataclass
class ModuleScope:
    """Names bound in a module, mapped to qualified targets."""

    bindings: dict[str, str] = field(default_factory=dict)
    star_imports: list[str] = field(default_factory=list)
    type_vars: set[str] = field(default_factory=set)


class ModuleScopeCollector(ast.NodeVisitor):
    """
    Collects the module's name bindings.

    Top-level imports and classes win; imports nested in functions or class
    bodies (lazy imports) only fill names the top level leaves unbound.
    """

    def __init__(self, module_name: str, is_package: bool = False):
        self.module_name = module_name
        self.is_package = is_package
        self.scope = ModuleScope()
        self._local: dict[str, str] = {}
        self._depth = 0

    def collect(self, tree: ast.Module) -> ModuleScope:
        self.visit(tree)
        for name, target in self._local.items():
            self.scope.bindings.setdefault(name, target)
        return self.scope

    def _bind(self, name: str, target: str) -> None:
        if self._depth == 0:
            self.scope.bindings[name] = target
        else:
            self._local.setdefault(name, target)

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self._bind(alias.asname, alias.name)
            else:
                head = alias.name.split(".")[0]
                self._bind(head, head)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        base = resolve_relative_module(self.module_name, self.is_package, node.level, node.module)
        if not base:
            return
        for alias in node.names:
            if alias.name == "*":
                if self._depth == 0 and base not in self.scope.star_imports:
                    self.scope.star_imports.append(base)
                continue
            self._bind(alias.asname or alias.name, f"{base}.{alias.name}")

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if self._depth == 0:
            self._bind(node.name, f"{self.module_name}.{node.name}")
        self._nested(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._nested(node)

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Assign(self, node: ast.Assign) -> None:
        if self._depth != 0 or len(node.targets) != 1 or not isinstance(node.targets[0], ast.Name):
            return
        if isinstance(node.value, ast.Call):
            factory = dotted_name(node.value.func)
            if factory and factory.rsplit(".", 1)[-1] in TYPE_VAR_FACTORIES:
                self.scope.type_vars.add(node.targets[0].id)

    def _nested(self, node: ast.AST) -> None:
        self._depth += 1
        self.generic_visit(node)
        self._depth -= 1


# ============================================================
# References
# ============================================================


def _parse_annotation(text: str) -> ast.expr | None:
    try:
        return ast.parse(text.strip(), mode="eval").body
    except (SyntaxError, ValueError):
        return None


class ReferenceCollector(ast.NodeVisitor):
    """
    Dotted names loaded anywhere inside one class declaration.

    Covers bases, keywords, decorators, the body, method bodies and string
    (forward reference) annotations. Nested class declarations are skipped:
    they are declared types of their own. Classes defined inside methods are
    local, so their names count toward the enclosing class.
    """

    def __init__(self):
        self.names: list[str] = []
        self._function_depth = 0

    def collect(self, class_node: ast.ClassDef) -> list[str]:
        for decorator in class_node.decorator_list:
            self.visit(decorator)
        for base in class_node.bases:
            self.visit(base)
        for keyword in class_node.keywords:
            self.visit(keyword)
        for stmt in class_node.body:
            self.visit(stmt)
        return self.names

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if self._function_depth == 0:
            return
        self.generic_visit(node)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        for decorator in node.decorator_list:
            self.visit(decorator)
        self.visit(node.args)
        if node.returns is not None:
            self._visit_annotation(node.returns)

        self._function_depth += 1
        for stmt in node.body:
            self.visit(stmt)
        self._function_depth -= 1

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_arg(self, node: ast.arg) -> None:
        if node.annotation is not None:
            self._visit_annotation(node.annotation)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        self._visit_annotation(node.annotation)
        if node.value is not None:
            self.visit(node.value)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Load):
            self.names.append(node.id)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        if isinstance(node.ctx, ast.Load):
            dotted = dotted_name(node)
            if dotted is not None:
                self.names.append(dotted)
        self.generic_visit(node)

    def _visit_annotation(self, annotation: ast.expr) -> None:
        self.visit(annotation)
        for sub in ast.walk(annotation):
            if isinstance(sub, ast.Constant) and isinstance(sub.value, str):
                parsed = _parse_annotation(sub.value)
                if parsed is not None:
                    self.visit(parsed)
