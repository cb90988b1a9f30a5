"""MySQL dialect.

Identifiers are quoted with backticks, string literals with single quotes,
and field type tokens map onto MySQL column types.  ``Optional[...]`` and
``Null*`` tokens render as nullable columns.
"""


class UnsupportedTypeError(ValueError):
    """Raised when a field type token has no MySQL column type."""

    pass


# field type token -> base SQL type; None means VARCHAR(size)
_SQL_TYPES: dict[str, str | None] = {
    "int8": "TINYINT",
    "bool": "TINYINT",
    "uint8": "TINYINT UNSIGNED",
    "int16": "SMALLINT",
    "uint16": "SMALLINT UNSIGNED",
    "int": "INT",
    "int32": "INT",
    "uint": "INT UNSIGNED",
    "uint32": "INT UNSIGNED",
    "int64": "BIGINT",
    "uint64": "BIGINT UNSIGNED",
    "float": "DOUBLE",
    "float32": "DOUBLE",
    "float64": "DOUBLE",
    "str": None,
    "datetime": "DATETIME",
}

_NULLABLE_WRAPPERS: dict[str, str] = {
    "NullBool": "bool",
    "NullInt64": "int64",
    "NullString": "str",
    "NullFloat64": "float64",
}


def _unwrap_nullable(name: str) -> tuple[str, bool]:
    """Split ``Optional[X]`` / ``NullX`` into ``(X, True)``."""
    if name.startswith("Optional[") and name.endswith("]"):
        return name[len("Optional["):-1], True
    if name in _NULLABLE_WRAPPERS:
        return _NULLABLE_WRAPPERS[name], True
    return name, False


class MySQLDialect:
    """MySQL implementation of the ``Dialect`` protocol.

    Example:
        >>> d = MySQLDialect()
        >>> d.quote("user")
        '`user`'
        >>> d.column_type("Optional[str]", 32, False)
        ('VARCHAR(32)', True)
    """

    def quote(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def quote_string(self, value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def column_type(self, name: str, size: int, auto_increment: bool) -> tuple[str, bool]:
        base, nullable = _unwrap_nullable(name)
        if base not in _SQL_TYPES:
            raise UnsupportedTypeError(f"Unsupported field type for MySQL: {name!r}")
        sql_type = _SQL_TYPES[base]
        if sql_type is None:
            sql_type = f"VARCHAR({size})"
        return sql_type, nullable

    def auto_increment(self) -> str:
        return "AUTO_INCREMENT"
