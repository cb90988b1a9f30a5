"""Runtime helpers for writing table models.

Model files are read statically by ``db_reconcile.schema.parser`` and never
imported by the reconciler, but importing them should still work.  This
module provides the decorator, the field marker and the type aliases a
model file refers to.

Usage:
    from datetime import datetime
    from typing import Optional

    from db_reconcile.declare import NullString, column, int64, table

    @table(option="ENGINE=InnoDB DEFAULT CHARSET=utf8mb4")
    class User:
        id: int64 = column("pk,autoincrement")
        name: str = column("size:32")  # display name
        email: NullString = column("unique")
        created_at: datetime
        nickname: Optional[str]
"""

from dataclasses import dataclass
from typing import Any, NewType, Optional

# Fixed-width integer and float spellings
int8 = NewType("int8", int)
uint8 = NewType("uint8", int)
int16 = NewType("int16", int)
uint16 = NewType("uint16", int)
int32 = NewType("int32", int)
uint = NewType("uint", int)
uint32 = NewType("uint32", int)
int64 = NewType("int64", int)
uint64 = NewType("uint64", int)
float32 = NewType("float32", float)
float64 = NewType("float64", float)

# Dedicated nullable wrappers
NullBool = Optional[bool]
NullInt64 = Optional[int64]
NullString = Optional[str]
NullFloat64 = Optional[float64]


@dataclass(frozen=True)
class ColumnTag:
    """Value left on the class attribute by ``column()``."""

    tag: str = ""


def column(tag: str = "") -> Any:
    """Attach annotation options to a field.

    Options are comma separated: ``default:<literal>``, ``pk``,
    ``autoincrement``, ``index[:<name>]``, ``unique``, ``-`` (ignore),
    ``column:<name>``, ``size:<n>``.
    """
    return ColumnTag(tag)


def table(cls: Any = None, /, name: str = "", option: str = "") -> Any:
    """Mark a class as a table model.

    Usable bare (``@table``), with a table name (``@table("users")``), or
    with keywords (``@table(name="users", option="ENGINE=InnoDB")``).
    """
    if isinstance(cls, str):
        name, cls = cls, None

    def mark(target: type) -> type:
        target.__table_name__ = name
        target.__table_option__ = option
        return target

    if cls is None:
        return mark
    return mark(cls)


__all__ = [
    "ColumnTag",
    "NullBool",
    "NullFloat64",
    "NullInt64",
    "NullString",
    "column",
    "float32",
    "float64",
    "int16",
    "int32",
    "int64",
    "int8",
    "table",
    "uint",
    "uint16",
    "uint32",
    "uint64",
    "uint8",
]
