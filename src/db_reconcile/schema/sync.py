"""Schema reconciliation: diff desired models against a database and apply.

``diff`` and ``sync`` work on an already materialized ``LiveCatalog``;
``diff_database`` and ``sync_database`` wire the model parser, the catalog
introspector and the MySQL adapter together for the common case.

Usage:
    from db_reconcile.schema.sync import diff_database, sync_database

    # Preview
    statements = await diff_database("models.py", "mysql://root@localhost/app")
    for statement in statements:
        print(statement + ";")

    # Apply
    applied = await sync_database("models.py", "mysql://root@localhost/app")
"""

import logging
from pathlib import Path

from db_reconcile.adapters.base import DatabaseClient
from db_reconcile.adapters.mysql import AsyncMySQLAdapter
from db_reconcile.dialect.base import Dialect
from db_reconcile.dialect.mysql import MySQLDialect
from db_reconcile.schema.introspector import SchemaIntrospector
from db_reconcile.schema.models import LiveCatalog, TableSpec
from db_reconcile.schema.parser import load_models
from db_reconcile.schema.planner import generate_migration_plan

logger = logging.getLogger(__name__)


def diff(
    desired: dict[str, TableSpec],
    catalog: LiveCatalog,
    dialect: Dialect | None = None,
) -> list[str]:
    """Return the statements that turn *catalog* into *desired*.

    An empty list means the database already matches the models.
    """
    plan = generate_migration_plan(desired, catalog, dialect or MySQLDialect())
    return plan.statements


async def sync(
    desired: dict[str, TableSpec],
    catalog: LiveCatalog,
    client: DatabaseClient,
    dialect: Dialect | None = None,
) -> list[str]:
    """Compute the statements for *desired* and execute them in order.

    All statements run inside a single ``client.transaction()``.  The first
    failing statement aborts the transaction and its exception propagates;
    the remaining statements are not executed.

    Args:
        desired: Mapping of table name to desired ``TableSpec``.
        catalog: Live catalog snapshot of the target database.
        client: Database client the statements run through.
        dialect: Dialect used to render statements (MySQL by default).

    Returns:
        The statements that were executed.
    """
    statements = diff(desired, catalog, dialect)
    if not statements:
        logger.info("Schema is up to date")
        return statements

    async with client.transaction() as tx:
        for statement in statements:
            await tx.execute(statement)

    logger.info("Applied %d statement(s)", len(statements))
    return statements


async def read_catalog(
    database_url: str,
    excluded_tables: set[str] | None = None,
) -> LiveCatalog:
    """Open an introspector on *database_url* and read its catalog."""
    async with SchemaIntrospector(database_url, excluded_tables=excluded_tables) as introspector:
        return await introspector.read_catalog()


async def diff_database(
    source: str | Path,
    database_url: str,
    excluded_tables: set[str] | None = None,
) -> list[str]:
    """Parse the model file *source* and diff it against *database_url*.

    Raises:
        FileNotFoundError: If the model file does not exist.
        ParseError: If the model file is malformed.
    """
    desired = load_models(source)
    catalog = await read_catalog(database_url, excluded_tables)
    return diff(desired, catalog)


async def sync_database(
    source: str | Path,
    database_url: str,
    excluded_tables: set[str] | None = None,
) -> list[str]:
    """Parse the model file *source* and apply it to *database_url*.

    Returns:
        The statements that were executed.
    """
    desired = load_models(source)
    catalog = await read_catalog(database_url, excluded_tables)

    adapter = AsyncMySQLAdapter(database_url)
    try:
        return await sync(desired, catalog, adapter)
    finally:
        await adapter.close()
