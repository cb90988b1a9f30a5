"""Table-level differ: build an ordered migration plan for a whole schema.

For each desired table (sorted by name) the planner either creates it or
diffs it against the live columns; live tables that no desired table
claimed are dropped at the end, also sorted by name.

Usage:
    from db_reconcile.dialect import MySQLDialect
    from db_reconcile.schema.planner import generate_migration_plan

    plan = generate_migration_plan(desired_tables, catalog, MySQLDialect())
    for statement in plan.statements:
        print(statement)
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from db_reconcile.dialect.base import Dialect
from db_reconcile.schema import ddl
from db_reconcile.schema.comparator import IndexChanges, compare_fields, compare_indexes
from db_reconcile.schema.models import FieldSpec, LiveCatalog, TableSpec
from db_reconcile.schema.projection import project_table

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Plan data classes
# ------------------------------------------------------------------


@dataclass
class TablePlan:
    """Statements for one desired table.

    Attributes:
        table: Table name.
        action: ``"create"`` for a table missing from the live catalog,
            ``"alter"`` for one that exists.
        statements: DDL in execution order.
    """

    table: str
    action: Literal["create", "alter"]
    statements: list[str] = field(default_factory=list)


@dataclass
class MigrationPlan:
    """Ordered reconciliation plan for a whole schema.

    Attributes:
        tables: Per-table plans for desired tables that need changes,
            sorted by table name.
        drop_tables: Live tables with no desired counterpart, sorted.
    """

    tables: list[TablePlan] = field(default_factory=list)
    drop_tables: list[str] = field(default_factory=list)
    drop_statements: list[str] = field(default_factory=list)

    @property
    def statements(self) -> list[str]:
        """Every statement in execution order."""
        result = [s for t in self.tables for s in t.statements]
        result.extend(self.drop_statements)
        return result

    @property
    def has_changes(self) -> bool:
        return bool(self.tables or self.drop_tables)

    @property
    def statement_count(self) -> int:
        return sum(len(t.statements) for t in self.tables) + len(self.drop_statements)


# ------------------------------------------------------------------
# Per-table statement builders
# ------------------------------------------------------------------


def _index_statements(dialect: Dialect, table_name: str, changes: IndexChanges) -> list[str]:
    statements = [ddl.drop_index_sql(dialect, table_name, index) for index in changes.dropped.values()]
    statements.extend(ddl.create_index_sql(dialect, table_name, index) for index in changes.added.values())
    return statements


def _create_table_statements(dialect: Dialect, table: TableSpec) -> list[str]:
    statements = [ddl.create_table_sql(dialect, table)]
    statements.extend(_index_statements(dialect, table.name, compare_indexes([], table.fields)))
    return statements


def _alter_table_statements(
    dialect: Dialect, table: TableSpec, old_fields: list[FieldSpec]
) -> list[str]:
    statements: list[str] = []
    for change in compare_fields(old_fields, table.fields):
        if change.is_added:
            statements.append(ddl.add_column_sql(dialect, table.name, change.new))
        elif change.is_dropped:
            statements.append(ddl.drop_column_sql(dialect, table.name, change.old))
        else:
            statements.append(ddl.modify_column_sql(dialect, table.name, change.old, change.new))
    statements.extend(_index_statements(dialect, table.name, compare_indexes(old_fields, table.fields)))
    return statements


# ------------------------------------------------------------------
# Plan generation
# ------------------------------------------------------------------


def generate_migration_plan(
    desired: dict[str, TableSpec],
    catalog: LiveCatalog,
    dialect: Dialect,
) -> MigrationPlan:
    """Compare desired tables with a live catalog and plan the DDL.

    Pure logic -- the catalog is a materialized snapshot and nothing here
    touches the database.

    Args:
        desired: Mapping of table name to desired ``TableSpec``.
        catalog: Live catalog snapshot from ``SchemaIntrospector``.
        dialect: Dialect used to render statements.

    Returns:
        ``MigrationPlan`` whose ``statements`` are ready to execute in order.

    Raises:
        UnknownDataTypeError: If a live column has an unmapped data type.
        UnsupportedTypeError: If a desired field type cannot be rendered.

    Example:
        plan = generate_migration_plan(tables, catalog, MySQLDialect())
        if plan.has_changes:
            print("\\n".join(plan.statements))
    """
    plan = MigrationPlan()
    pending_desired = dict(desired)
    pending_live = dict(catalog.tables)

    for name in sorted(pending_desired):
        table = pending_desired.pop(name)
        columns = pending_live.pop(name, None)

        if columns is None:
            logger.debug("Table %s missing from database, creating", name)
            statements = _create_table_statements(dialect, table)
            plan.tables.append(TablePlan(table=name, action="create", statements=statements))
            continue

        statements = _alter_table_statements(dialect, table, project_table(columns))
        logger.debug("Table %s exists, %d change(s)", name, len(statements))
        if statements:
            plan.tables.append(TablePlan(table=name, action="alter", statements=statements))

    for name in sorted(pending_live):
        logger.debug("Table %s has no model, dropping", name)
        plan.drop_tables.append(name)
        plan.drop_statements.append(ddl.drop_table_sql(dialect, name))

    return plan
