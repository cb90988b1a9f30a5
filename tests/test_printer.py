"""Tests for rendering a live catalog as model source."""

import io

import pytest

from db_reconcile.schema.models import ColumnSchema, LiveCatalog
from db_reconcile.schema.parser import parse_models
from db_reconcile.schema.printer import fprint, format_models, has_datetime_column
from db_reconcile.schema.projection import UnknownDataTypeError
from db_reconcile.schema.sync import diff


def _col(table: str, column: str, data_type: str, **kwargs) -> ColumnSchema:
    return ColumnSchema(table_name=table, column_name=column, data_type=data_type, **kwargs)


@pytest.fixture
def catalog() -> LiveCatalog:
    return LiveCatalog.from_columns(
        [
            _col("user", "id", "int", column_type="int(10) unsigned", column_key="PRI",
                 index_name="PRIMARY", extra="auto_increment"),
            _col("user", "name", "varchar", character_maximum_length=32,
                 column_comment="display name"),
            _col("user", "email", "varchar", is_nullable=True, character_maximum_length=255,
                 column_key="UNI", index_name="email"),
            _col("user", "created_at", "datetime"),
            _col("user", "HTTPStatus", "tinyint", is_nullable=True),
            _col("blog_post", "id", "bigint", column_key="PRI", index_name="PRIMARY"),
            _col("Legacy", "id", "int"),
        ],
        database="app",
    )


EXPECTED = '''\
from datetime import datetime
from typing import Optional

from db_reconcile.declare import column, int64, int8, table, uint


@table("Legacy")
class Legacy:
    id: int


@table
class BlogPost:
    id: int64 = column("pk")


@table
class User:
    id: uint = column("pk,autoincrement")
    name: str = column("size:32")  # display name
    email: Optional[str] = column("unique")
    created_at: datetime
    http_status: Optional[int8] = column("column:HTTPStatus")
'''


class TestFormatModels:
    """Verify generated source."""

    def test_full_output(self, catalog: LiveCatalog) -> None:
        """Tables are sorted and each field carries its tags."""
        assert format_models(catalog) == EXPECTED

    def test_minimal_header(self) -> None:
        """Without datetime or Optional columns only declare is imported."""
        source = format_models(LiveCatalog.from_columns([_col("user", "id", "int")]))
        assert source.splitlines()[0] == "from db_reconcile.declare import column, table"
        assert "datetime" not in source
        assert "Optional" not in source

    def test_default_and_named_index(self) -> None:
        """Defaults and named indexes become tags."""
        source = format_models(LiveCatalog.from_columns([
            _col("t", "state", "varchar", character_maximum_length=255, column_default="new",
                 index_name="idx_state", non_unique=True),
        ]))
        assert '    state: str = column("default:new,index:idx_state")' in source

    def test_quotes_in_tags_escaped(self) -> None:
        """Tag text is emitted as a valid string literal."""
        source = format_models(LiveCatalog.from_columns([
            _col("t", "label", "varchar", character_maximum_length=255, column_default='say "hi"'),
        ]))
        tables = parse_models(source)
        assert tables["t"].fields[0].default == 'say "hi"'

    def test_unknown_type(self) -> None:
        """Unmapped column types cannot be printed."""
        with pytest.raises(UnknownDataTypeError):
            format_models(LiveCatalog.from_columns([_col("t", "shape", "geometry")]))

    def test_fprint_writes_to_stream(self, catalog: LiveCatalog) -> None:
        """fprint() writes the same text to a stream."""
        out = io.StringIO()
        fprint(out, catalog)
        assert out.getvalue() == EXPECTED


class TestRoundTrip:
    """Printed source parses back to a model matching the catalog."""

    def test_printed_models_diff_clean(self, catalog: LiveCatalog) -> None:
        """Diffing the reparsed source against its catalog yields nothing."""
        desired = parse_models(format_models(catalog))
        assert set(desired) == {"Legacy", "blog_post", "user"}
        assert diff(desired, catalog) == []

    def test_reserved_names_diff_clean(self) -> None:
        """Private and keyword column names survive printing and parsing."""
        catalog = LiveCatalog.from_columns([
            _col("t", "id", "int", column_key="PRI", index_name="PRIMARY"),
            _col("t", "_meta", "int"),
            _col("t", "from", "int"),
            _col("none", "id", "int"),
        ])
        source = format_models(catalog)

        assert '    f__meta: int = column("column:_meta")' in source
        assert '    f_from: int = column("column:from")' in source
        assert '@table("none")\nclass TableNone:' in source

        desired = parse_models(source)
        assert [f.column for f in desired["t"].fields] == ["id", "_meta", "from"]
        assert diff(desired, catalog) == []


class TestHasDatetimeColumn:
    """Verify datetime detection."""

    def test_detects_datetime(self, catalog: LiveCatalog) -> None:
        assert has_datetime_column(catalog)

    def test_no_datetime(self) -> None:
        assert not has_datetime_column(LiveCatalog.from_columns([_col("t", "id", "int")]))
