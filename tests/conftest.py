"""Shared fixtures: an in-memory catalog builder and a recording client."""

from contextlib import asynccontextmanager

import pytest

from db_reconcile.schema.models import ColumnSchema, LiveCatalog, TableSpec

# canonical base token -> (data_type, unsigned)
_DATA_TYPES = {
    "int8": ("tinyint", False),
    "bool": ("tinyint", False),
    "uint8": ("tinyint", True),
    "int16": ("smallint", False),
    "uint16": ("smallint", True),
    "int": ("int", False),
    "int32": ("int", False),
    "uint": ("int", True),
    "uint32": ("int", True),
    "int64": ("bigint", False),
    "uint64": ("bigint", True),
    "float": ("double", False),
    "float32": ("double", False),
    "float64": ("double", False),
    "str": ("varchar", False),
    "datetime": ("datetime", False),
}

_NULL_WRAPPERS = {
    "NullBool": "bool",
    "NullInt64": "int64",
    "NullString": "str",
    "NullFloat64": "float64",
}


def _storage(type_name: str) -> tuple[str, bool, bool]:
    """Return ``(data_type, unsigned, nullable)`` for a field type token."""
    nullable = False
    if type_name.startswith("Optional[") and type_name.endswith("]"):
        type_name, nullable = type_name[len("Optional["):-1], True
    elif type_name in _NULL_WRAPPERS:
        type_name, nullable = _NULL_WRAPPERS[type_name], True
    data_type, unsigned = _DATA_TYPES[type_name]
    return data_type, unsigned, nullable


def build_catalog(tables: dict[str, TableSpec], database: str = "app") -> LiveCatalog:
    """Materialize the catalog a MySQL server would report for *tables*.

    Each field may carry at most one index or unique flag, matching what
    the catalog reader records per column.
    """
    columns: list[ColumnSchema] = []
    for table in tables.values():
        for position, field in enumerate(table.fields, start=1):
            data_type, unsigned, nullable = _storage(field.type)
            index_name, non_unique, column_key = "", False, ""
            if field.primary_key:
                index_name, column_key = "PRIMARY", "PRI"
            elif field.unique:
                index_name, column_key = field.column, "UNI"
            elif field.raw_indexes:
                index_name, non_unique, column_key = field.indexes()[0], True, "MUL"
            columns.append(
                ColumnSchema(
                    table_name=table.name,
                    column_name=field.column,
                    ordinal_position=position,
                    column_default=field.default or None,
                    is_nullable=nullable,
                    data_type=data_type,
                    character_maximum_length=field.size if data_type == "varchar" else None,
                    column_type=data_type + (" unsigned" if unsigned else ""),
                    column_key=column_key,
                    extra="auto_increment" if field.auto_increment else "",
                    column_comment=field.comment,
                    non_unique=non_unique,
                    index_name=index_name,
                )
            )
    return LiveCatalog.from_columns(columns, database=database)


class RecordingClient:
    """In-memory ``DatabaseClient`` that records executed statements.

    Statements containing *fail_on* raise ``RuntimeError``.  Statements
    are only moved to ``committed`` when the transaction exits cleanly.
    """

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.executed: list[str] = []
        self.committed: list[str] = []
        self.rolled_back = False
        self.closed = False

    async def execute(self, sql: str, params: dict | None = None) -> None:
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError(f"statement failed: {sql}")
        self.executed.append(sql)

    @asynccontextmanager
    async def transaction(self):
        pending_start = len(self.executed)
        try:
            yield self
        except Exception:
            self.rolled_back = True
            raise
        self.committed.extend(self.executed[pending_start:])

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def catalog_from():
    """Return the ``build_catalog`` helper."""
    return build_catalog


@pytest.fixture
def recording_client() -> RecordingClient:
    return RecordingClient()


@pytest.fixture
def failing_client_factory():
    """Return a factory for clients that fail on a given statement fragment."""
    return RecordingClient
