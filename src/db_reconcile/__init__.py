"""db-reconcile: Declarative MySQL schema reconciliation.

Reads ``@table`` model classes, compares them with the live MySQL catalog,
and emits (or applies) the DDL that brings the database in line with the
models.  Also prints a live catalog back as model source.

Usage:
    from db_reconcile import load_models, SchemaIntrospector, diff, sync
    from db_reconcile import AsyncMySQLAdapter, get_adapter
    from db_reconcile import load_db_config, DatabaseProfile, DatabaseConfig
"""

__version__ = "0.1.0"

# Adapters
from db_reconcile.adapters.base import DatabaseClient, StatementExecutor
from db_reconcile.adapters.mysql import AsyncMySQLAdapter

# Config
from db_reconcile.config.loader import load_db_config
from db_reconcile.config.models import DatabaseConfig, DatabaseProfile

# Dialect
from db_reconcile.dialect import Dialect, MySQLDialect, UnsupportedTypeError

# Factory
from db_reconcile.factory import (
    ProfileNotFoundError,
    get_adapter,
    resolve_url,
)

# Schema
from db_reconcile.schema.introspector import SchemaIntrospector
from db_reconcile.schema.models import LiveCatalog, TableSpec
from db_reconcile.schema.parser import ParseError, load_models, parse_models
from db_reconcile.schema.planner import MigrationPlan, generate_migration_plan
from db_reconcile.schema.printer import format_models, fprint
from db_reconcile.schema.projection import UnknownDataTypeError
from db_reconcile.schema.sync import diff, diff_database, sync, sync_database

__all__ = [
    # Adapters
    "DatabaseClient",
    "StatementExecutor",
    "AsyncMySQLAdapter",
    # Config
    "load_db_config",
    "DatabaseProfile",
    "DatabaseConfig",
    # Dialect
    "Dialect",
    "MySQLDialect",
    "UnsupportedTypeError",
    # Factory
    "get_adapter",
    "ProfileNotFoundError",
    "resolve_url",
    # Schema
    "SchemaIntrospector",
    "LiveCatalog",
    "TableSpec",
    "ParseError",
    "load_models",
    "parse_models",
    "MigrationPlan",
    "generate_migration_plan",
    "format_models",
    "fprint",
    "UnknownDataTypeError",
    "diff",
    "diff_database",
    "sync",
    "sync_database",
]
