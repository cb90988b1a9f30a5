"""Statement synthesizer: render classified changes as literal DDL.

Every function here is pure string building on top of a ``Dialect``; the
differ decides *what* to emit and this module decides *how* it reads.

Usage:
    from db_reconcile.dialect import MySQLDialect
    from db_reconcile.schema.ddl import column_sql

    column_sql(MySQLDialect(), field)
    # '`name` VARCHAR(32) NOT NULL'
"""

from db_reconcile.dialect.base import Dialect
from db_reconcile.schema.models import FieldSpec, IndexSpec, TableSpec
from db_reconcile.schema.types import is_same_type


def format_default(dialect: Dialect, type_name: str, default: str) -> str:
    """Quote string-typed defaults; pass every other literal through verbatim."""
    if is_same_type(type_name, "str") or is_same_type(type_name, "Optional[str]"):
        return dialect.quote_string(default)
    return default


def column_sql(dialect: Dialect, field: FieldSpec) -> str:
    """Render one column definition.

    Clause order: name, type, NOT NULL, DEFAULT, PRIMARY KEY,
    auto-increment keyword, COMMENT.
    """
    col_type, nullable = dialect.column_type(field.type, field.size, field.auto_increment)
    parts = [dialect.quote(field.column), col_type]
    if not nullable:
        parts.append("NOT NULL")
    if field.default:
        parts.extend(["DEFAULT", format_default(dialect, field.type, field.default)])
    if field.primary_key:
        parts.append("PRIMARY KEY")
    if field.auto_increment and dialect.auto_increment():
        parts.append(dialect.auto_increment())
    if field.comment:
        parts.extend(["COMMENT", dialect.quote_string(field.comment)])
    return " ".join(parts)


def create_table_sql(dialect: Dialect, table: TableSpec) -> str:
    """Render ``CREATE TABLE`` with every field and the raw option suffix."""
    columns = ",\n  ".join(column_sql(dialect, f) for f in table.fields)
    query = f"CREATE TABLE {dialect.quote(table.name)} (\n  {columns}\n)"
    if table.option:
        query += " " + table.option
    return query


def drop_table_sql(dialect: Dialect, table_name: str) -> str:
    return f"DROP TABLE {dialect.quote(table_name)}"


def add_column_sql(dialect: Dialect, table_name: str, field: FieldSpec) -> str:
    return f"ALTER TABLE {dialect.quote(table_name)} ADD {column_sql(dialect, field)}"


def drop_column_sql(dialect: Dialect, table_name: str, field: FieldSpec) -> str:
    return f"ALTER TABLE {dialect.quote(table_name)} DROP {dialect.quote(field.column)}"


def modify_column_sql(dialect: Dialect, table_name: str, old: FieldSpec, new: FieldSpec) -> str:
    """Render a MODIFY, dropping the primary key first when the field loses it."""
    specs: list[str] = []
    if old.primary_key and not new.primary_key:
        specs.append("DROP PRIMARY KEY")
    specs.append(f"MODIFY {column_sql(dialect, new)}")
    return f"ALTER TABLE {dialect.quote(table_name)} {', '.join(specs)}"


def create_index_sql(dialect: Dialect, table_name: str, index: IndexSpec) -> str:
    columns = ",".join(dialect.quote(c) for c in index.columns)
    unique = "UNIQUE " if index.unique else ""
    return (
        f"CREATE {unique}INDEX {dialect.quote(index.name)} "
        f"ON {dialect.quote(table_name)} ({columns})"
    )


def drop_index_sql(dialect: Dialect, table_name: str, index: IndexSpec) -> str:
    return f"DROP INDEX {dialect.quote(index.name)} ON {dialect.quote(table_name)}"
