"""Dialect protocol definition.

Defines the narrow capability interface the differ needs from a SQL
dialect.  Nothing outside ``db_reconcile.dialect`` knows how identifiers are
quoted or how a field type becomes a column type.

Usage:
    from db_reconcile.dialect.base import Dialect

    def render(d: Dialect, column: str) -> str:
        return f"ALTER TABLE t DROP {d.quote(column)}"
"""

from typing import Protocol


class Dialect(Protocol):
    """SQL dialect interface consumed by the statement synthesizer."""

    def quote(self, name: str) -> str:
        """Quote an identifier (table, column or index name)."""
        ...

    def quote_string(self, value: str) -> str:
        """Quote a string literal."""
        ...

    def column_type(self, name: str, size: int, auto_increment: bool) -> tuple[str, bool]:
        """Render a field type token as a column type.

        Args:
            name: Field type token, e.g. ``"Optional[int]"``.
            size: Declared size, used by variable-length string types.
            auto_increment: Whether the column auto-increments.

        Returns:
            Tuple of ``(sql_type, nullable)``.
        """
        ...

    def auto_increment(self) -> str:
        """Keyword appended to auto-increment columns; may be empty."""
        ...
