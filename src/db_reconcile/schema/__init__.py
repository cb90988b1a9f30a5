"""Model parsing, catalog introspection, diffing, and reconciliation.

Provides the source-model parser (``parse_models``, ``load_models``), live
catalog introspection (``SchemaIntrospector``), the migration planner
(``generate_migration_plan``), the reconciliation entry points (``diff``,
``sync``), and the catalog-to-source printer (``format_models``).

Usage:
    from db_reconcile.schema import load_models, SchemaIntrospector
    from db_reconcile.schema import diff, sync, format_models
"""

from db_reconcile.schema.comparator import (
    FieldChange,
    IndexChanges,
    compare_fields,
    compare_indexes,
)
from db_reconcile.schema.introspector import SchemaIntrospector
from db_reconcile.schema.models import (
    ColumnSchema,
    FieldSpec,
    IndexSpec,
    LiveCatalog,
    TableSpec,
)
from db_reconcile.schema.parser import ParseError, load_models, parse_models
from db_reconcile.schema.planner import MigrationPlan, TablePlan, generate_migration_plan
from db_reconcile.schema.printer import format_models, fprint
from db_reconcile.schema.projection import UnknownDataTypeError, project_table
from db_reconcile.schema.sync import diff, diff_database, sync, sync_database
from db_reconcile.schema.types import canonical_type, equivalent_types, is_same_type

__all__ = [
    "parse_models",
    "load_models",
    "ParseError",
    "SchemaIntrospector",
    "ColumnSchema",
    "FieldSpec",
    "IndexSpec",
    "LiveCatalog",
    "TableSpec",
    "UnknownDataTypeError",
    "project_table",
    "FieldChange",
    "IndexChanges",
    "compare_fields",
    "compare_indexes",
    "MigrationPlan",
    "TablePlan",
    "generate_migration_plan",
    "diff",
    "sync",
    "diff_database",
    "sync_database",
    "format_models",
    "fprint",
    "canonical_type",
    "equivalent_types",
    "is_same_type",
]
