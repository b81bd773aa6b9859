from __future__ import annotations

import ast
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import libcst as cst

from typeforge.introspection.contract import (
    DATE_TYPE_KINDS,
    FieldDescriptor,
    FieldShape,
    PrimitiveKind,
    TypeShape,
)

logger = logging.getLogger(__name__)

_PRIMITIVE_NAMES: dict[str, PrimitiveKind] = {
    "str": PrimitiveKind.STRING,
    "bool": PrimitiveKind.BOOLEAN,
    "int": PrimitiveKind.INTEGER,
    "float": PrimitiveKind.FLOAT,
    "Decimal": PrimitiveKind.DECIMAL,
    "UUID": PrimitiveKind.UUID,
    "bytes": PrimitiveKind.UNKNOWN,
    "object": PrimitiveKind.UNKNOWN,
    "Any": PrimitiveKind.UNKNOWN,
}
_ARRAY_NAMES = frozenset(
    {
        "list",
        "List",
        "set",
        "Set",
        "frozenset",
        "FrozenSet",
        "tuple",
        "Tuple",
        "Sequence",
        "MutableSequence",
        "AbstractSet",
        "MutableSet",
        "Iterable",
        "Collection",
    }
)
_MAPPING_NAMES = frozenset(
    {"dict", "Dict", "Mapping", "MutableMapping", "DefaultDict", "OrderedDict"}
)
_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_UNKNOWN = TypeShape(FieldShape.PRIMITIVE, PrimitiveKind.UNKNOWN)
_EMPTY_MODULE = cst.Module(body=[])


@dataclass(frozen=True)
class ParseFailureWitness:
    path: Path
    error: str


@dataclass(frozen=True)
class ClassDeclaration:
    name: str
    path: Path
    bases: tuple[str, ...]
    type_params: frozenset[str]
    fields: tuple[tuple[str, cst.BaseExpression], ...]


@dataclass(frozen=True)
class SourceIndex:
    classes: Mapping[str, ClassDeclaration] = field(default_factory=dict)
    enums: Mapping[str, tuple[object, ...]] = field(default_factory=dict)
    type_vars: Mapping[Path, frozenset[str]] = field(default_factory=dict)
    parse_failures: tuple[ParseFailureWitness, ...] = ()


def iter_python_paths(paths: Iterable[str | Path], *, exclude_dirs: Iterable[str] = ()) -> list[Path]:
    """Expand input paths to python files, pruning excluded directories early."""
    excluded = set(exclude_dirs)
    out: list[Path] = []
    for p in paths:
        path = Path(p)
        if path.is_dir():
            for root, dirnames, filenames in os.walk(path, topdown=True):
                dirnames[:] = sorted(d for d in dirnames if d not in excluded)
                for filename in sorted(filenames):
                    if filename.endswith(".py"):
                        out.append(Path(root) / filename)
        else:
            out.append(path)
    return sorted(set(out))


def _code(node: cst.CSTNode) -> str:
    return _EMPTY_MODULE.code_for_node(node)


def _terminal_name(node: cst.BaseExpression) -> str | None:
    if isinstance(node, cst.Name):
        return node.value
    if isinstance(node, cst.Attribute):
        return node.attr.value
    if isinstance(node, cst.Subscript):
        return _terminal_name(node.value)
    return None


def _subscript_args(node: cst.Subscript) -> list[cst.BaseExpression]:
    return [element.slice.value for element in node.slice if isinstance(element.slice, cst.Index)]


def _union_members(node: cst.BaseExpression) -> list[cst.BaseExpression]:
    if isinstance(node, cst.BinaryOperation) and isinstance(node.operator, cst.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    if isinstance(node, cst.Subscript) and _terminal_name(node) == "Union":
        members: list[cst.BaseExpression] = []
        for arg in _subscript_args(node):
            members.extend(_union_members(arg))
        return members
    return [node]


def _literal(node: cst.BaseExpression) -> object:
    code = _code(node)
    try:
        return ast.literal_eval(code)
    except (ValueError, SyntaxError):
        return code


def _parse_text(text: str) -> cst.BaseExpression | None:
    try:
        return cst.parse_expression(text)
    except cst.ParserSyntaxError:
        return None


def _unwrap(node: cst.BaseExpression) -> cst.BaseExpression:
    while True:
        if isinstance(node, cst.SimpleString):
            parsed = _parse_text(str(node.evaluated_value))
            if parsed is None:
                return node
            node = parsed
            continue
        if isinstance(node, cst.Subscript) and _terminal_name(node) in ("Optional", "Annotated"):
            node = _subscript_args(node)[0]
            continue
        members = [m for m in _union_members(node) if _terminal_name(m) != "None"]
        if len(members) == 1 and members[0] is not node:
            node = members[0]
            continue
        return node


def _array_element(node: cst.BaseExpression) -> tuple[bool, cst.BaseExpression | None]:
    name = _terminal_name(node)
    if name not in _ARRAY_NAMES:
        return False, None
    if not isinstance(node, cst.Subscript):
        return True, None
    args = _subscript_args(node)
    if name in ("tuple", "Tuple"):
        if len(args) == 2 and isinstance(args[1], cst.Ellipsis):
            return True, args[0]
        if args and len({_code(arg) for arg in args}) == 1:
            return True, args[0]
        return False, None
    return True, args[0] if args else None


@dataclass(frozen=True)
class _Scope:
    enums: Mapping[str, tuple[object, ...]] = field(default_factory=dict)
    type_params: frozenset[str] = frozenset()


def _shape(node: cst.BaseExpression | None, scope: _Scope) -> TypeShape:
    if node is None:
        return _UNKNOWN
    node = _unwrap(node)
    if isinstance(node, cst.BinaryOperation) or (
        isinstance(node, cst.Subscript) and _terminal_name(node) == "Union"
    ):
        return _UNKNOWN
    name = _terminal_name(node)
    if name is None or name == "None":
        return _UNKNOWN
    if isinstance(node, cst.Subscript) and name == "Literal":
        return TypeShape(
            FieldShape.ENUM,
            enum_values=tuple(_literal(arg) for arg in _subscript_args(node)),
        )
    if name in scope.type_params:
        return TypeShape(FieldShape.TYPE_PARAMETER)
    if name in _ARRAY_NAMES:
        return _UNKNOWN
    if name in _MAPPING_NAMES:
        return TypeShape(FieldShape.CLASS)
    if name in _PRIMITIVE_NAMES:
        return TypeShape(FieldShape.PRIMITIVE, _PRIMITIVE_NAMES[name])
    if name in DATE_TYPE_KINDS:
        return TypeShape(FieldShape.CLASS, referenced_type_name=name)
    if name in scope.enums:
        return TypeShape(
            FieldShape.ENUM, referenced_type_name=name, enum_values=scope.enums[name]
        )
    return TypeShape(FieldShape.CLASS, referenced_type_name=name)


def describe_expression(
    name: str, annotation: cst.BaseExpression, scope: _Scope | None = None
) -> FieldDescriptor:
    scope = scope or _Scope()
    is_array, element = _array_element(_unwrap(annotation))
    if is_array:
        return FieldDescriptor.array(name, _shape(element, scope))
    return FieldDescriptor.scalar(name, _shape(annotation, scope))


def describe_text(name: str, text: str) -> FieldDescriptor:
    """Classify an annotation given as source text, with no symbol table."""
    annotation = _parse_text(text)
    if annotation is None:
        return FieldDescriptor.scalar(name, _UNKNOWN)
    return describe_expression(name, annotation)


def _is_class_var(annotation: cst.BaseExpression) -> bool:
    return _terminal_name(annotation) == "ClassVar"


def _is_type_var_call(node: cst.BaseExpression) -> bool:
    return isinstance(node, cst.Call) and _terminal_name(node.func) in ("TypeVar", "ParamSpec")


def _enum_values(node: cst.ClassDef, *, auto_names: bool = False) -> tuple[object, ...]:
    """Member values as ``Enum`` would assign them.

    ``auto()`` counts on from the last integer value, or yields the
    lower-cased member name for ``StrEnum``.
    """
    values: list[object] = []
    next_auto = 1
    for statement in node.body.body:
        if not isinstance(statement, cst.SimpleStatementLine):
            continue
        for small in statement.body:
            if not isinstance(small, cst.Assign) or len(small.targets) != 1:
                continue
            target = small.targets[0].target
            if not isinstance(target, cst.Name) or target.value.startswith("_"):
                continue
            if isinstance(small.value, cst.Call) and _terminal_name(small.value.func) == "auto":
                value: object = target.value.lower() if auto_names else next_auto
            else:
                value = _literal(small.value)
            if isinstance(value, int) and not isinstance(value, bool):
                next_auto = value + 1
            values.append(value)
    return tuple(values)


def _class_declaration(node: cst.ClassDef, path: Path) -> ClassDeclaration:
    bases: list[str] = []
    type_params: set[str] = set()
    for arg in node.bases:
        base_name = _terminal_name(arg.value)
        if base_name is None:
            continue
        bases.append(base_name)
        if isinstance(arg.value, cst.Subscript):
            for param in _subscript_args(arg.value):
                if isinstance(param, cst.Name):
                    type_params.add(param.value)
    pep695 = getattr(node, "type_parameters", None)
    if pep695 is not None:
        for param in pep695.params:
            type_params.add(param.param.name.value)
    fields: list[tuple[str, cst.BaseExpression]] = []
    for statement in node.body.body:
        if not isinstance(statement, cst.SimpleStatementLine):
            continue
        for small in statement.body:
            if not isinstance(small, cst.AnnAssign) or not isinstance(small.target, cst.Name):
                continue
            if _is_class_var(small.annotation.annotation):
                continue
            fields.append((small.target.value, small.annotation.annotation))
    return ClassDeclaration(
        name=node.name.value,
        path=path,
        bases=tuple(bases),
        type_params=frozenset(type_params),
        fields=tuple(fields),
    )


def build_source_index(paths: Sequence[Path]) -> SourceIndex:
    classes: dict[str, ClassDeclaration] = {}
    enums: dict[str, tuple[object, ...]] = {}
    type_vars: dict[Path, frozenset[str]] = {}
    failures: list[ParseFailureWitness] = []
    for path in paths:
        try:
            module = cst.parse_module(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, cst.ParserSyntaxError) as exc:
            logger.warning("skipping %s: %s", path, exc)
            failures.append(ParseFailureWitness(path=path, error=str(exc)))
            continue
        declared_vars: set[str] = set()
        for statement in module.body:
            if isinstance(statement, cst.ClassDef):
                name = statement.name.value
                bases = {_terminal_name(arg.value) for arg in statement.bases}
                if bases & _ENUM_BASES:
                    enums.setdefault(
                        name, _enum_values(statement, auto_names="StrEnum" in bases)
                    )
                else:
                    classes.setdefault(name, _class_declaration(statement, path))
                continue
            if not isinstance(statement, cst.SimpleStatementLine):
                continue
            for small in statement.body:
                if isinstance(small, cst.Assign) and _is_type_var_call(small.value):
                    for target in small.targets:
                        if isinstance(target.target, cst.Name):
                            declared_vars.add(target.target.value)
        type_vars[path] = frozenset(declared_vars)
    return SourceIndex(
        classes=classes,
        enums=enums,
        type_vars=type_vars,
        parse_failures=tuple(failures),
    )


class SourceSchemaProvider:
    """Schema provider that statically analyzes Python source files.

    Nothing is imported: classes, enums and ``TypeVar`` declarations are
    read from the syntax tree of every ``.py`` file under ``paths``. The
    index is built on first use and cached on the instance.
    """

    def __init__(self, paths: Iterable[str | Path], *, exclude_dirs: Iterable[str] = ()) -> None:
        self._paths = list(paths)
        self._exclude_dirs = tuple(exclude_dirs)
        self._index: SourceIndex | None = None

    @property
    def index(self) -> SourceIndex:
        if self._index is None:
            files = iter_python_paths(self._paths, exclude_dirs=self._exclude_dirs)
            logger.debug("indexing %d source files", len(files))
            self._index = build_source_index(files)
        return self._index

    def fields(self, type_name: str) -> Sequence[FieldDescriptor]:
        index = self.index
        declaration = index.classes.get(type_name)
        if declaration is None:
            logger.warning("no class named %s in scanned sources; it has no fields", type_name)
            return []
        collected: dict[str, tuple[cst.BaseExpression, _Scope]] = {}
        self._collect(declaration, collected, seen=set())
        return [
            describe_expression(name, annotation, scope)
            for name, (annotation, scope) in collected.items()
        ]

    def _collect(
        self,
        declaration: ClassDeclaration,
        collected: dict[str, tuple[cst.BaseExpression, _Scope]],
        *,
        seen: set[str],
    ) -> None:
        seen.add(declaration.name)
        index = self.index
        for base in declaration.bases:
            parent = index.classes.get(base)
            if parent is not None and parent.name not in seen:
                self._collect(parent, collected, seen=seen)
        scope = _Scope(
            enums=index.enums,
            type_params=declaration.type_params | index.type_vars.get(declaration.path, frozenset()),
        )
        for name, annotation in declaration.fields:
            collected[name] = (annotation, scope)
