"""SQL dialect adapters.

Provides the ``Dialect`` Protocol used by the statement synthesizer and the
MySQL implementation.

Usage:
    from db_reconcile.dialect import Dialect, MySQLDialect
"""

from db_reconcile.dialect.base import Dialect
from db_reconcile.dialect.mysql import MySQLDialect, UnsupportedTypeError

__all__ = [
    "Dialect",
    "MySQLDialect",
    "UnsupportedTypeError",
]
