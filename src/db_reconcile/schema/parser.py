"""Source-model parser: read ``@table`` classes from Python source.

The source is parsed with ``ast`` and never imported, so model files may
reference names that are not installed.  Field comments come from trailing
``#`` comments, collected with ``tokenize``.

Usage:
    from db_reconcile.schema.parser import load_models

    tables = load_models("models.py")
    tables["user"].fields[0].column
    # 'id'
"""

import ast
import io
import tokenize
from pathlib import Path

from db_reconcile.schema.models import FieldSpec, TableSpec
from db_reconcile.schema.naming import to_snake_case

TAG_DEFAULT = "default"
TAG_PRIMARY_KEY = "pk"
TAG_AUTO_INCREMENT = "autoincrement"
TAG_INDEX = "index"
TAG_UNIQUE = "unique"
TAG_SIZE = "size"
TAG_COLUMN = "column"
TAG_IGNORE = "-"

TABLE_DECORATOR = "table"
COLUMN_MARKER = "column"


class ParseError(ValueError):
    """Raised for malformed model source or annotation options."""

    pass


# ------------------------------------------------------------------
# Annotation options
# ------------------------------------------------------------------


def parse_tag(spec: FieldSpec, tag: str) -> None:
    """Apply a comma-separated option string to *spec* in place.

    Raises:
        ParseError: On an unknown option, a ``column``/``size`` option
            without a parameter, or a size that is not an unsigned integer.

    Example:
        >>> spec = FieldSpec(name="name", type="str")
        >>> parse_tag(spec, "size:32,index:idx_name")
        >>> spec.size, spec.raw_indexes
        (32, ['idx_name'])
    """
    if not tag:
        return
    for opt in tag.split(","):
        key, sep, value = opt.partition(":")
        if key == TAG_DEFAULT:
            if sep:
                spec.default = value
        elif key == TAG_PRIMARY_KEY:
            spec.primary_key = True
        elif key == TAG_AUTO_INCREMENT:
            spec.auto_increment = True
        elif key == TAG_INDEX:
            spec.raw_indexes.append(value)
        elif key == TAG_UNIQUE:
            spec.unique = True
        elif key == TAG_IGNORE:
            spec.ignore = True
        elif key == TAG_COLUMN:
            if not sep:
                raise ParseError("`column' option must specify the parameter")
            spec.column = value
        elif key == TAG_SIZE:
            if not sep:
                raise ParseError("`size' option must specify the parameter")
            if not (value.isascii() and value.isdigit()):
                raise ParseError(f"invalid size: {value!r}")
            spec.size = int(value)
        else:
            raise ParseError(f"unknown option: `{opt}'")


# ------------------------------------------------------------------
# Type annotations
# ------------------------------------------------------------------


def _dotted_tail(node: ast.expr) -> str | None:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _union_members(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]


def _is_none(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


def _optional_of(members: list[ast.expr]) -> str:
    others = [m for m in members if not _is_none(m)]
    if len(others) != 1 or len(others) == len(members):
        raise ParseError(f"unsupported union type: {' | '.join(ast.unparse(m) for m in members)}")
    return f"Optional[{type_name(others[0])}]"


def type_name(node: ast.expr) -> str:
    """Render an annotation expression as a type token.

    Module prefixes are dropped, and every spelling of an optional type
    (``X | None``, ``Union[X, None]``, ``typing.Optional[X]``) becomes
    ``Optional[X]``.

    Examples:
        >>> type_name(ast.parse("int | None", mode="eval").body)
        'Optional[int]'
        >>> type_name(ast.parse("datetime.datetime", mode="eval").body)
        'datetime'
    """
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        try:
            return type_name(ast.parse(node.value, mode="eval").body)
        except SyntaxError as e:
            raise ParseError(f"invalid string annotation: {node.value!r}") from e

    name = _dotted_tail(node)
    if name is not None:
        return name

    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _optional_of(_union_members(node))

    if isinstance(node, ast.Subscript):
        generic = _dotted_tail(node.value)
        if generic == "Optional":
            return f"Optional[{type_name(node.slice)}]"
        if generic == "Union" and isinstance(node.slice, ast.Tuple):
            return _optional_of(list(node.slice.elts))

    raise ParseError(f"unsupported type annotation: {ast.unparse(node)}")


def _is_class_var(node: ast.expr) -> bool:
    if isinstance(node, ast.Subscript):
        node = node.value
    return _dotted_tail(node) == "ClassVar"


# ------------------------------------------------------------------
# Classes and fields
# ------------------------------------------------------------------


def _literal(node: ast.expr, what: str) -> str:
    try:
        value = ast.literal_eval(node)
    except ValueError as e:
        raise ParseError(f"{what} must be a string literal") from e
    if not isinstance(value, str):
        raise ParseError(f"{what} must be a string literal")
    return value


def _table_annotation(cls: ast.ClassDef) -> tuple[str, str] | None:
    """Return ``(table_name, option)`` for a ``@table`` class, else None."""
    for decorator in cls.decorator_list:
        call = decorator if isinstance(decorator, ast.Call) else None
        target = call.func if call else decorator
        if _dotted_tail(target) != TABLE_DECORATOR:
            continue

        name, option = "", ""
        if call is not None:
            if len(call.args) > 1:
                raise ParseError(f"{cls.name}: @table takes at most one positional argument")
            if call.args:
                name = _literal(call.args[0], "table name")
            for keyword in call.keywords:
                if keyword.arg == "name":
                    name = _literal(keyword.value, "table name")
                elif keyword.arg == "option":
                    option = _literal(keyword.value, "table option")
                else:
                    raise ParseError(f"{cls.name}: unknown @table argument {keyword.arg!r}")
        return name or to_snake_case(cls.name), option
    return None


def _field_tag(stmt: ast.AnnAssign) -> str:
    if stmt.value is None:
        return ""
    value = stmt.value
    if isinstance(value, ast.Call) and _dotted_tail(value.func) == COLUMN_MARKER:
        if value.keywords or len(value.args) > 1:
            raise ParseError("column() takes a single option string")
        if not value.args:
            return ""
        return _literal(value.args[0], "column options")
    raise ParseError("field value must be column(...)")


def _collect_comments(source: str) -> dict[int, str]:
    comments: dict[int, str] = {}
    for tok in tokenize.generate_tokens(io.StringIO(source).readline):
        if tok.type == tokenize.COMMENT:
            comments[tok.start[0]] = tok.string.lstrip("#").strip()
    return comments


def _field_comment(stmt: ast.AnnAssign, comments: dict[int, str]) -> str:
    for line in range(stmt.lineno, (stmt.end_lineno or stmt.lineno) + 1):
        if line in comments:
            return comments[line]
    return ""


def _is_excluded(spec: FieldSpec) -> bool:
    """Private names are not columns, except a ``_`` field given a column name."""
    if not spec.name.startswith("_"):
        return False
    return not (spec.name == "_" and spec.column != spec.name)


def _parse_class(cls: ast.ClassDef, comments: dict[int, str]) -> list[FieldSpec]:
    fields: list[FieldSpec] = []
    for stmt in cls.body:
        if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
            continue
        if _is_class_var(stmt.annotation):
            continue

        name = stmt.target.id
        try:
            spec = FieldSpec(name=name, type=type_name(stmt.annotation))
            parse_tag(spec, _field_tag(stmt))
        except ParseError as e:
            raise ParseError(f"{cls.name}.{name} (line {stmt.lineno}): {e}") from e
        spec.comment = _field_comment(stmt, comments)

        if spec.ignore or _is_excluded(spec):
            continue
        fields.append(spec)
    return fields


def parse_models(source: str | bytes, filename: str = "<unknown>") -> dict[str, TableSpec]:
    """Parse ``@table`` classes from Python source text.

    Args:
        source: Python source code.
        filename: Name used in error messages.

    Returns:
        Dict mapping table name to ``TableSpec``.  Classes with no
        remaining fields after exclusions are omitted.

    Raises:
        ParseError: On a syntax error, an unsupported annotation, or an
            invalid ``column()`` option string.

    Example:
        >>> tables = parse_models('''
        ... @table
        ... class UserProfile:
        ...     id: int = column("pk")
        ... ''')
        >>> list(tables)
        ['user_profile']
    """
    if isinstance(source, bytes):
        source = source.decode("utf-8")

    try:
        tree = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise ParseError(f"{filename}: {e}") from e
    comments = _collect_comments(source)

    tables: dict[str, TableSpec] = {}
    for node in tree.body:
        if not isinstance(node, ast.ClassDef):
            continue
        annotation = _table_annotation(node)
        if annotation is None:
            continue
        name, option = annotation
        if name in tables:
            raise ParseError(f"{filename}: table {name!r} declared more than once")

        fields = _parse_class(node, comments)
        if fields:
            tables[name] = TableSpec(name=name, fields=fields, option=option)
    return tables


def load_models(path: str | Path) -> dict[str, TableSpec]:
    """Read and parse a model source file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the source is malformed.
    """
    model_path = Path(path)
    if not model_path.exists():
        raise FileNotFoundError(f"Model source not found: {model_path}")
    return parse_models(model_path.read_text(), filename=str(model_path))
