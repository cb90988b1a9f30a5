"""Database client protocol definitions.

Defines the ``DatabaseClient`` Protocol the orchestrator executes DDL
through, and the ``StatementExecutor`` handed out by its transactions.
All methods are ``async def``.

Usage:
    from db_reconcile.adapters.base import DatabaseClient

    async def apply(client: DatabaseClient, statements: list[str]) -> None:
        async with client.transaction() as tx:
            for statement in statements:
                await tx.execute(statement)
        await client.close()
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol


class StatementExecutor(Protocol):
    """Executes statements inside one open transaction."""

    async def execute(self, sql: str) -> None:
        """Execute a single statement within the transaction."""
        ...


class DatabaseClient(Protocol):
    """Database client interface that all adapters must implement."""

    async def execute(self, sql: str, params: dict | None = None) -> None:
        """Execute a raw SQL statement in its own transaction.

        Args:
            sql: Raw SQL statement to execute.
            params: Optional dict of named parameters for the statement.

        Example:
            await client.execute("DROP TABLE `legacy`")
        """
        ...

    def transaction(self) -> AbstractAsyncContextManager[StatementExecutor]:
        """Open a transaction scope.

        The transaction commits when the ``async with`` block exits normally
        and rolls back when it raises.  Note that MySQL commits most DDL
        implicitly, so rollback only covers what the storage engine allows.

        Example:
            async with client.transaction() as tx:
                await tx.execute("ALTER TABLE `user` ADD `email` VARCHAR(255) NOT NULL")
        """
        ...

    async def close(self) -> None:
        """Close the connection pool and release resources."""
        ...
