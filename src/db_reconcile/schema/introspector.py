"""MySQL catalog reader via information_schema.

This module queries the live database and materializes a ``LiveCatalog``:
- The current database name (``SELECT DATABASE()``)
- Index membership per column (``information_schema.STATISTICS``)
- Every column with its type facets, key, extra flags and comment
  (``information_schema.COLUMNS``), ordered by table then ordinal position

Uses SQLAlchemy's async engine with the ``aiomysql`` driver.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from db_reconcile.adapters.mysql import create_async_engine_pooled
from db_reconcile.schema.models import ColumnSchema, LiveCatalog

logger = logging.getLogger(__name__)

EXCLUDED_TABLES_DEFAULT: frozenset[str] = frozenset()

_INDEX_QUERY = """
    SELECT
        TABLE_NAME,
        COLUMN_NAME,
        NON_UNIQUE,
        INDEX_NAME
    FROM information_schema.STATISTICS
    WHERE TABLE_SCHEMA = :schema
    ORDER BY TABLE_NAME, INDEX_NAME <> 'PRIMARY', INDEX_NAME, SEQ_IN_INDEX
"""

_COLUMN_QUERY = """
    SELECT
        TABLE_NAME,
        COLUMN_NAME,
        ORDINAL_POSITION,
        COLUMN_DEFAULT,
        IS_NULLABLE,
        DATA_TYPE,
        CHARACTER_MAXIMUM_LENGTH,
        CHARACTER_OCTET_LENGTH,
        NUMERIC_PRECISION,
        NUMERIC_SCALE,
        COLUMN_TYPE,
        COLUMN_KEY,
        EXTRA,
        COLUMN_COMMENT
    FROM information_schema.COLUMNS
    WHERE TABLE_SCHEMA = :schema
    ORDER BY TABLE_NAME, ORDINAL_POSITION
"""


class SchemaIntrospector:
    """Introspects a MySQL database into a ``LiveCatalog`` snapshot.

    Usage:
        async with SchemaIntrospector(database_url) as introspector:
            catalog = await introspector.read_catalog()

    Args:
        database_url: MySQL connection URL.
        excluded_tables: Table names to leave out of the catalog.  Defaults
            to ``EXCLUDED_TABLES_DEFAULT`` when None.
        **engine_kwargs: Forwarded to ``create_async_engine_pooled``.
    """

    def __init__(
        self,
        database_url: str,
        excluded_tables: set[str] | None = None,
        **engine_kwargs,
    ):
        self._database_url = database_url
        self._excluded_tables = set(
            EXCLUDED_TABLES_DEFAULT if excluded_tables is None else excluded_tables
        )
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None

    async def __aenter__(self) -> "SchemaIntrospector":
        """Async context manager entry - creates the engine."""
        self._engine = create_async_engine_pooled(
            self._database_url, pool_size=1, max_overflow=0, **self._engine_kwargs
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - disposes the engine."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None

    def _require_engine(self) -> AsyncEngine:
        if not self._engine:
            raise RuntimeError("Introspector not connected. Use async with statement.")
        return self._engine

    async def test_connection(self) -> None:
        """Run ``SELECT 1``; raises if the database is unreachable."""
        async with self._require_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def read_catalog(self) -> LiveCatalog:
        """Read every column of the current database.

        Returns:
            ``LiveCatalog`` with columns grouped by table in ordinal order
            and index membership joined in.
        """
        async with self._require_engine().connect() as conn:
            database = await self._get_current_database(conn)
            index_map = await self._get_index_map(conn, database)
            columns = await self._get_columns(conn, database, index_map)

        catalog = LiveCatalog.from_columns(columns, database=database)
        logger.debug("Read %d table(s) from %s", len(catalog.tables), database)
        return catalog

    async def _get_current_database(self, conn: AsyncConnection) -> str:
        result = await conn.execute(text("SELECT DATABASE()"))
        return result.scalar() or ""

    async def _get_index_map(
        self, conn: AsyncConnection, database: str
    ) -> dict[tuple[str, str], tuple[bool, str]]:
        """Map ``(table, column)`` to ``(non_unique, index_name)``.

        A column in several indexes keeps the primary key if it has one,
        otherwise the first index by name.
        """
        result = await conn.execute(text(_INDEX_QUERY), {"schema": database})
        index_map: dict[tuple[str, str], tuple[bool, str]] = {}
        for table_name, column_name, non_unique, index_name in result.fetchall():
            index_map.setdefault((table_name, column_name), (bool(non_unique), index_name))
        return index_map

    async def _get_columns(
        self,
        conn: AsyncConnection,
        database: str,
        index_map: dict[tuple[str, str], tuple[bool, str]],
    ) -> list[ColumnSchema]:
        result = await conn.execute(text(_COLUMN_QUERY), {"schema": database})
        columns: list[ColumnSchema] = []
        for row in result.fetchall():
            (
                table_name,
                column_name,
                ordinal_position,
                column_default,
                is_nullable,
                data_type,
                char_max_length,
                char_octet_length,
                numeric_precision,
                numeric_scale,
                column_type,
                column_key,
                extra,
                column_comment,
            ) = row
            if table_name in self._excluded_tables:
                continue

            non_unique, index_name = index_map.get((table_name, column_name), (False, ""))
            columns.append(
                ColumnSchema(
                    table_name=table_name,
                    column_name=column_name,
                    ordinal_position=ordinal_position,
                    column_default=column_default,
                    is_nullable=(str(is_nullable).upper() == "YES"),
                    data_type=data_type.lower(),
                    character_maximum_length=char_max_length,
                    character_octet_length=char_octet_length,
                    numeric_precision=numeric_precision,
                    numeric_scale=numeric_scale,
                    column_type=column_type,
                    column_key=column_key or "",
                    extra=extra or "",
                    column_comment=column_comment or "",
                    non_unique=non_unique,
                    index_name=index_name,
                )
            )
        return columns
