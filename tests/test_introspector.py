"""Tests for the MySQL catalog reader."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from db_reconcile.schema.introspector import SchemaIntrospector


def _result(scalar=None, rows=None) -> MagicMock:
    result = MagicMock()
    result.scalar.return_value = scalar
    result.fetchall.return_value = rows or []
    return result


INDEX_ROWS = [
    # PRIMARY sorts first for each table
    ("user", "id", 0, "PRIMARY"),
    ("user", "email", 0, "email"),
    ("user", "email", 1, "idx_email_name"),
    ("user", "name", 1, "idx_email_name"),
]

COLUMN_ROWS = [
    ("user", "id", 1, None, "NO", "int", None, None, 10, 0,
     "int(10) unsigned", "PRI", "auto_increment", ""),
    ("user", "email", 2, None, "YES", "varchar", 128, 512, None, None,
     "varchar(128)", "UNI", "", "contact"),
    ("user", "name", 3, "anon", "NO", "VARCHAR", 255, 1020, None, None,
     "varchar(255)", "MUL", "", ""),
    ("schema_migrations", "version", 1, None, "NO", "bigint", None, None, 19, 0,
     "bigint(20)", "PRI", "", ""),
]


@pytest.fixture
def mock_conn() -> AsyncMock:
    conn = AsyncMock()
    conn.execute.side_effect = [
        _result(scalar="app"),
        _result(rows=INDEX_ROWS),
        _result(rows=COLUMN_ROWS),
    ]
    return conn


@pytest.fixture
def mock_engine(mock_conn: AsyncMock) -> MagicMock:
    ctx = MagicMock()
    ctx.__aenter__ = AsyncMock(return_value=mock_conn)
    ctx.__aexit__ = AsyncMock(return_value=None)
    engine = MagicMock()
    engine.connect.return_value = ctx
    engine.dispose = AsyncMock()
    return engine


class TestAsyncContextManager:
    """Verify engine lifecycle."""

    async def test_aenter_creates_single_connection_engine(self, mock_engine) -> None:
        """__aenter__ builds a one-connection engine with forwarded options."""
        with patch(
            "db_reconcile.schema.introspector.create_async_engine_pooled",
            return_value=mock_engine,
        ) as mock_create:
            async with SchemaIntrospector("mysql://localhost/app", echo=True) as introspector:
                assert introspector._engine is mock_engine

        mock_create.assert_called_once_with(
            "mysql://localhost/app", pool_size=1, max_overflow=0, echo=True
        )
        mock_engine.dispose.assert_awaited_once()
        assert introspector._engine is None

    async def test_read_outside_context_raises(self) -> None:
        """Using the introspector without async with is an error."""
        with pytest.raises(RuntimeError, match="not connected"):
            await SchemaIntrospector("mysql://localhost/app").read_catalog()

    async def test_aexit_noop_without_engine(self) -> None:
        """__aexit__ is safe when never entered."""
        introspector = SchemaIntrospector("mysql://localhost/app")
        await introspector.__aexit__(None, None, None)
        assert introspector._engine is None


class TestReadCatalog:
    """Verify catalog materialization from information_schema rows."""

    async def _read(self, engine, **kwargs):
        introspector = SchemaIntrospector("mysql://localhost/app", **kwargs)
        introspector._engine = engine
        return await introspector.read_catalog()

    async def test_database_and_grouping(self, mock_engine) -> None:
        """Columns are grouped by table in ordinal order."""
        catalog = await self._read(mock_engine)

        assert catalog.database == "app"
        assert set(catalog.tables) == {"user", "schema_migrations"}
        assert [c.column_name for c in catalog.tables["user"]] == ["id", "email", "name"]

    async def test_column_attributes(self, mock_engine) -> None:
        """Row values map onto ColumnSchema fields."""
        catalog = await self._read(mock_engine)
        id_col, email, name = catalog.tables["user"]

        assert id_col.has_primary_key
        assert id_col.has_auto_increment
        assert id_col.is_unsigned
        assert not id_col.is_nullable

        assert email.is_nullable
        assert email.character_maximum_length == 128
        assert email.column_comment == "contact"

        assert name.column_default == "anon"
        assert name.data_type == "varchar"

    async def test_first_index_wins(self, mock_engine) -> None:
        """A column in several indexes keeps the first one reported."""
        catalog = await self._read(mock_engine)
        _, email, name = catalog.tables["user"]

        assert email.index_name == "email"
        assert email.has_unique_key
        assert name.index_name == "idx_email_name"
        assert name.has_index

    async def test_excluded_tables(self, mock_engine) -> None:
        """Excluded tables are left out of the catalog."""
        catalog = await self._read(mock_engine, excluded_tables={"schema_migrations"})
        assert list(catalog.tables) == ["user"]

    async def test_queries_bound_to_current_schema(self, mock_engine, mock_conn) -> None:
        """Both information_schema queries filter on the current database."""
        await self._read(mock_engine)

        calls = mock_conn.execute.await_args_list
        assert "SELECT DATABASE()" in calls[0].args[0].text
        assert "information_schema.STATISTICS" in calls[1].args[0].text
        assert calls[1].args[1] == {"schema": "app"}
        assert "information_schema.COLUMNS" in calls[2].args[0].text
        assert calls[2].args[1] == {"schema": "app"}

    async def test_driver_errors_propagate(self, mock_engine, mock_conn) -> None:
        """Query failures are not swallowed."""
        mock_conn.execute.side_effect = ConnectionError("gone away")
        with pytest.raises(ConnectionError, match="gone away"):
            await self._read(mock_engine)


class TestTestConnection:
    """Verify test_connection()."""

    async def test_runs_select_one(self, mock_engine, mock_conn) -> None:
        """test_connection() executes SELECT 1."""
        mock_conn.execute.side_effect = None
        introspector = SchemaIntrospector("mysql://localhost/app")
        introspector._engine = mock_engine

        await introspector.test_connection()

        assert mock_conn.execute.await_args.args[0].text == "SELECT 1"
