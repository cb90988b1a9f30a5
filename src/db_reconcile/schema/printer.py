"""Code printer: render a live catalog as ``@table`` model source.

This is the reverse direction of the parser.  Each field uses the
canonical type spelling from the catalog projection, so printing a catalog
and parsing the output yields a desired model with no differences.

Usage:
    from db_reconcile.schema.printer import format_models

    async with SchemaIntrospector(url) as introspector:
        catalog = await introspector.read_catalog()
    Path("models.py").write_text(format_models(catalog))
"""

import keyword
from typing import TextIO

from db_reconcile.schema.models import ColumnSchema, LiveCatalog
from db_reconcile.schema.naming import to_snake_case, to_upper_camel_case
from db_reconcile.schema.projection import column_tags, field_types

_BUILTIN_TYPES = {"int", "str", "bool", "float", "datetime"}


def _base_type(type_name: str) -> str:
    if type_name.startswith("Optional[") and type_name.endswith("]"):
        return type_name[len("Optional["):-1]
    return type_name


def _class_name(table_name: str) -> str:
    name = to_upper_camel_case(table_name)
    if not name.isidentifier() or keyword.iskeyword(name):
        name = "Table" + name
    return name


def _field_name(column_name: str) -> str:
    name = to_snake_case(column_name)
    # Private names are skipped by the parser
    if not name.isidentifier() or keyword.iskeyword(name) or name.startswith("_"):
        name = "f_" + name
    return name


def _string_literal(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _field_line(column: ColumnSchema) -> str:
    name = _field_name(column.column_name)
    tags = column_tags(column)
    if name != column.column_name:
        tags.append(f"column:{column.column_name}")

    line = f"    {name}: {field_types(column)[0]}"
    if tags:
        line += f" = column({_string_literal(','.join(tags))})"
    if column.column_comment:
        line += f"  # {column.column_comment}"
    return line


def _class_source(table_name: str, columns: list[ColumnSchema]) -> str:
    class_name = _class_name(table_name)
    decorator = "@table"
    if to_snake_case(class_name) != table_name:
        decorator = f'@table("{table_name}")'
    lines = [decorator, f"class {class_name}:"]
    lines.extend(_field_line(column) for column in columns)
    return "\n".join(lines)


def _header(catalog: LiveCatalog) -> str:
    type_names = {
        field_types(column)[0]
        for columns in catalog.tables.values()
        for column in columns
    }
    declared = {"column", "table"} | {
        _base_type(t) for t in type_names if _base_type(t) not in _BUILTIN_TYPES
    }

    lines: list[str] = []
    if has_datetime_column(catalog):
        lines.append("from datetime import datetime")
    if any(t.startswith("Optional[") for t in type_names):
        lines.append("from typing import Optional")
    if lines:
        lines.append("")
    lines.append(f"from db_reconcile.declare import {', '.join(sorted(declared))}")
    return "\n".join(lines)


def has_datetime_column(catalog: LiveCatalog) -> bool:
    """True if any column in the catalog is a ``datetime``."""
    return any(
        column.data_type == "datetime"
        for columns in catalog.tables.values()
        for column in columns
    )


def format_models(catalog: LiveCatalog) -> str:
    """Render every table in *catalog* as model source, sorted by table name.

    Raises:
        UnknownDataTypeError: If a column has an unmapped data type.

    Example:
        >>> catalog = LiveCatalog.from_columns([
        ...     ColumnSchema(table_name="user", column_name="id", data_type="int",
        ...                  column_key="PRI", index_name="PRIMARY",
        ...                  extra="auto_increment"),
        ... ])
        >>> print(format_models(catalog))
        from db_reconcile.declare import column, table
        <BLANKLINE>
        <BLANKLINE>
        @table
        class User:
            id: int = column("pk,autoincrement")
        <BLANKLINE>
    """
    blocks = [_header(catalog)]
    for name in sorted(catalog.tables):
        blocks.append(_class_source(name, catalog.tables[name]))
    return "\n\n\n".join(blocks) + "\n"


def fprint(output: TextIO, catalog: LiveCatalog) -> None:
    """Write ``format_models(catalog)`` to *output*."""
    output.write(format_models(catalog))
