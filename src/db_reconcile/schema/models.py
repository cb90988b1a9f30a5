"""Pydantic models for the desired model, the live catalog, and index plans.

This module contains:
- Field/table models: FieldSpec, TableSpec
- Catalog snapshot models: ColumnSchema, LiveCatalog
- Index descriptor: IndexSpec

``FieldSpec`` is shared by both sides of a comparison: the parser builds
desired fields from model source, and the projection builds observed fields
from ``ColumnSchema`` records.
"""

from pydantic import BaseModel, Field, model_validator

from db_reconcile.schema.naming import to_snake_case
from db_reconcile.schema.types import is_same_type

DEFAULT_VARCHAR_SIZE = 255


# ============================================================================
# Field / Table Models
# ============================================================================


class FieldSpec(BaseModel):
    """One column, desired or observed.

    ``column`` defaults to the snake-cased ``name``.  An empty entry in
    ``raw_indexes`` means "an index named after the column".

    Example:
        >>> f = FieldSpec(name="UserID", type="int", raw_indexes=[""])
        >>> f.column
        'user_id'
        >>> f.indexes()
        ['user_id']
    """

    name: str
    type: str
    column: str = ""
    comment: str = ""
    raw_indexes: list[str] = Field(default_factory=list)
    unique: bool = False
    primary_key: bool = False
    auto_increment: bool = False
    ignore: bool = False
    default: str = ""
    size: int = DEFAULT_VARCHAR_SIZE

    @model_validator(mode="after")
    def _default_column(self) -> "FieldSpec":
        if not self.column:
            self.column = to_snake_case(self.name)
        return self

    def indexes(self) -> list[str]:
        """Index names this field participates in, empty tokens resolved to the column."""
        return [name or self.column for name in self.raw_indexes]

    def unique_indexes(self) -> list[str]:
        """Unique index names for this field (the column itself when ``unique``)."""
        if not self.unique:
            return []
        return [self.column]

    def is_different(self, other: "FieldSpec | None") -> bool:
        """True if *other* needs a MODIFY (or ADD) to become this field.

        Index membership and ``unique`` are deliberately not compared; those
        are reconciled by the index differ.
        """
        if other is None:
            return True
        return (
            not is_same_type(self.type, other.type)
            or self.default != other.default
            or self.size != other.size
            or self.column != other.column
            or self.comment != other.comment
            or self.auto_increment != other.auto_increment
            or self.primary_key != other.primary_key
        )


class TableSpec(BaseModel):
    """A desired table: ordered fields plus a raw CREATE TABLE option suffix."""

    name: str
    fields: list[FieldSpec] = Field(default_factory=list)
    option: str = ""


class IndexSpec(BaseModel):
    """A named index accumulated from per-field index associations."""

    name: str
    columns: list[str] = Field(default_factory=list)
    unique: bool = False


# ============================================================================
# Catalog Snapshot Models
# ============================================================================


class ColumnSchema(BaseModel):
    """One row of ``information_schema.COLUMNS`` joined with its index info.

    Example:
        >>> col = ColumnSchema(table_name="user", column_name="id", data_type="int")
        >>> col.is_unsigned
        False
    """

    table_name: str
    column_name: str
    ordinal_position: int = 0
    column_default: str | None = None
    is_nullable: bool = False
    data_type: str
    character_maximum_length: int | None = None
    character_octet_length: int | None = None
    numeric_precision: int | None = None
    numeric_scale: int | None = None
    column_type: str = ""
    column_key: str = ""  # PRI, UNI, MUL or empty
    extra: str = ""
    column_comment: str = ""
    non_unique: bool = False
    index_name: str = ""

    @property
    def is_unsigned(self) -> bool:
        return "unsigned" in self.column_type.lower()

    @property
    def has_primary_key(self) -> bool:
        return self.column_key == "PRI" and self.index_name.upper() == "PRIMARY"

    @property
    def has_auto_increment(self) -> bool:
        return self.extra == "auto_increment"

    @property
    def has_index(self) -> bool:
        return bool(self.index_name) and not self.has_primary_key and self.non_unique

    @property
    def has_unique_key(self) -> bool:
        return bool(self.index_name) and not self.has_primary_key and not self.non_unique

    @property
    def has_size(self) -> bool:
        return self.data_type == "varchar" and self.character_maximum_length is not None


class LiveCatalog(BaseModel):
    """Materialized snapshot of one database's columns, grouped by table.

    Columns within a table are kept in ordinal position order.
    """

    database: str = ""
    tables: dict[str, list[ColumnSchema]] = Field(default_factory=dict)

    @classmethod
    def from_columns(cls, columns: list[ColumnSchema], database: str = "") -> "LiveCatalog":
        """Group flat column records by table name, preserving input order."""
        tables: dict[str, list[ColumnSchema]] = {}
        for column in columns:
            tables.setdefault(column.table_name, []).append(column)
        return cls(database=database, tables=tables)
