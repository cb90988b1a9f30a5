"""Catalog projection: turn introspected ``ColumnSchema`` rows into ``FieldSpec``s.

The projected type is always the canonical spelling of the equivalence
class that matches the column's data type, signedness and nullability, so
the same projection serves comparison and source printing.

The catalog's type surface is assumed closed: a data type missing from
``_TYPE_TABLE`` raises ``UnknownDataTypeError``.
"""

from db_reconcile.schema.models import ColumnSchema, FieldSpec
from db_reconcile.schema.types import equivalent_types


class UnknownDataTypeError(RuntimeError):
    """Raised when a live column uses a data type with no field mapping."""

    pass


# data_type -> (signed not null, signed nullable, unsigned not null, unsigned nullable)
_TYPE_TABLE: dict[str, tuple[str, str, str, str]] = {
    "tinyint": ("int8", "Optional[int8]", "uint8", "Optional[uint8]"),
    "smallint": ("int16", "Optional[int16]", "uint16", "Optional[uint16]"),
    "mediumint": ("int", "Optional[int]", "uint", "Optional[uint]"),
    "int": ("int", "Optional[int]", "uint", "Optional[uint]"),
    "bigint": ("int64", "Optional[int64]", "uint64", "Optional[uint64]"),
    "varchar": ("str", "Optional[str]", "str", "Optional[str]"),
    "text": ("str", "Optional[str]", "str", "Optional[str]"),
    "mediumtext": ("str", "Optional[str]", "str", "Optional[str]"),
    "longtext": ("str", "Optional[str]", "str", "Optional[str]"),
    "datetime": ("datetime", "Optional[datetime]", "datetime", "Optional[datetime]"),
    "double": ("float", "Optional[float]", "float", "Optional[float]"),
}


def field_types(column: ColumnSchema) -> tuple[str, ...]:
    """Return every type spelling accepted for *column*, canonical first.

    Raises:
        UnknownDataTypeError: If the data type is not mapped.

    Examples:
        >>> field_types(ColumnSchema(table_name="t", column_name="c",
        ...                          data_type="tinyint", is_nullable=True))
        ('Optional[int8]', 'Optional[bool]', 'NullBool')
    """
    try:
        signed, signed_null, unsigned, unsigned_null = _TYPE_TABLE[column.data_type]
    except KeyError:
        raise UnknownDataTypeError(
            f"Unexpected data type {column.data_type!r} "
            f"for {column.table_name}.{column.column_name}"
        ) from None

    if column.is_unsigned:
        name = unsigned_null if column.is_nullable else unsigned
    else:
        name = signed_null if column.is_nullable else signed
    return equivalent_types(name)


def column_tags(column: ColumnSchema) -> list[str]:
    """Render the annotation options implied by *column*, in printing order.

    ``column:`` is not included; field naming is decided by the caller.
    """
    tags: list[str] = []
    if column.column_default is not None:
        tags.append(f"default:{column.column_default}")
    if column.has_primary_key:
        tags.append("pk")
    if column.has_auto_increment:
        tags.append("autoincrement")
    if column.has_index:
        if column.index_name == column.column_name:
            tags.append("index")
        else:
            tags.append(f"index:{column.index_name}")
    if column.has_unique_key:
        tags.append("unique")
    if column.has_size and column.character_maximum_length != 255:
        tags.append(f"size:{column.character_maximum_length}")
    return tags


def project_column(column: ColumnSchema) -> FieldSpec:
    """Project one live column into a ``FieldSpec``.

    Example:
        >>> spec = project_column(ColumnSchema(
        ...     table_name="user", column_name="name", data_type="varchar",
        ...     character_maximum_length=32))
        >>> (spec.type, spec.size)
        ('str', 32)
    """
    spec = FieldSpec(
        name=column.column_name,
        type=field_types(column)[0],
        column=column.column_name,
        comment=column.column_comment,
        default=column.column_default or "",
        primary_key=column.has_primary_key,
        auto_increment=column.has_auto_increment,
        unique=column.has_unique_key,
    )
    if column.has_index:
        spec.raw_indexes.append("" if column.index_name == column.column_name else column.index_name)
    if column.has_size:
        spec.size = column.character_maximum_length
    return spec


def project_table(columns: list[ColumnSchema]) -> list[FieldSpec]:
    """Project a table's columns in ordinal order."""
    return [project_column(column) for column in columns]
