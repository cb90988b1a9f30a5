"""Database adapters package.

Provides the ``DatabaseClient`` Protocol and the async MySQL adapter used
to execute reconciliation statements.

Usage:
    from db_reconcile.adapters import DatabaseClient, AsyncMySQLAdapter
"""

from db_reconcile.adapters.base import DatabaseClient, StatementExecutor
from db_reconcile.adapters.mysql import AsyncMySQLAdapter

__all__ = [
    "DatabaseClient",
    "StatementExecutor",
    "AsyncMySQLAdapter",
]
