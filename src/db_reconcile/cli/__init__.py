"""CLI module for declarative MySQL schema reconciliation.

Compares ``@table`` model classes against a live MySQL database and prints
or applies the DDL that brings the database in line with the models.

Usage:
    DB_PROFILE=local db-reconcile diff
    db-reconcile --profile local sync --confirm
    db-reconcile --url mysql://root@localhost/app --source app/models.py diff
    db-reconcile --profile local dump --output models.py
    db-reconcile profiles

Commands:
    diff      - Print the statements needed to reconcile the database
    sync      - Show the plan and apply it with --confirm
    dump      - Print the live schema as model source
    profiles  - List available profiles
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from db_reconcile.config.loader import load_db_config
from db_reconcile.config.models import DatabaseConfig
from db_reconcile.dialect import MySQLDialect, UnsupportedTypeError
from db_reconcile.factory import (
    ProfileNotFoundError,
    get_active_profile_name,
    get_adapter,
    resolve_database_url,
)
from db_reconcile.schema.models import LiveCatalog, TableSpec
from db_reconcile.schema.parser import ParseError, load_models
from db_reconcile.schema.planner import MigrationPlan, generate_migration_plan
from db_reconcile.schema.printer import format_models
from db_reconcile.schema.projection import UnknownDataTypeError
from db_reconcile.schema.sync import read_catalog, sync

console = Console()

# Errors reported as a one-line message with exit code 1
_USER_ERRORS = (
    FileNotFoundError,
    KeyError,
    ProfileNotFoundError,
    ParseError,
    UnknownDataTypeError,
    UnsupportedTypeError,
)


# ============================================================================
# Settings resolution (CLI-internal helpers)
# ============================================================================


@dataclass
class _Target:
    """Resolved connection URL, model file and exclusions for a command."""

    database_url: str
    source: Path
    excluded_tables: set[str]


def _config_path(args: argparse.Namespace) -> Path | None:
    config = getattr(args, "config", None)
    return Path(config) if config else None


def _load_optional_config(args: argparse.Namespace) -> DatabaseConfig | None:
    """Load db.toml, tolerating a missing default file when --url is given."""
    try:
        return load_db_config(_config_path(args))
    except FileNotFoundError:
        if getattr(args, "url", None) and _config_path(args) is None:
            return None
        raise


def _resolve_target(args: argparse.Namespace) -> _Target:
    """Resolve connection and model settings from arguments and db.toml.

    Raises:
        FileNotFoundError: If db.toml is required but missing.
        ProfileNotFoundError: If neither --url, --profile nor the
            profile environment variable is set.
        KeyError: If the profile is not in db.toml.
    """
    config = _load_optional_config(args)
    database_url = resolve_database_url(
        profile_name=getattr(args, "profile", None),
        database_url=getattr(args, "url", None),
        env_prefix=getattr(args, "env_prefix", ""),
        config_path=_config_path(args),
    )

    source = getattr(args, "source", None)
    if not source:
        source = config.schema_file if config else "models.py"
    excluded = set(config.excluded_tables) if config else set()

    return _Target(database_url=database_url, source=Path(source), excluded_tables=excluded)


def _error_message(e: Exception) -> str:
    # KeyError wraps its message in quotes
    if isinstance(e, KeyError) and e.args:
        return str(e.args[0])
    return str(e)


async def _load_plan(target: _Target) -> tuple[dict[str, TableSpec], LiveCatalog, MigrationPlan]:
    desired = load_models(target.source)
    catalog = await read_catalog(target.database_url, target.excluded_tables)
    plan = generate_migration_plan(desired, catalog, MySQLDialect())
    return desired, catalog, plan


def _print_plan(plan: MigrationPlan) -> None:
    summary = Table(title="Schema Changes", show_header=True, header_style="bold")
    summary.add_column("Table", style="dim")
    summary.add_column("Action")
    summary.add_column("Statements", justify="right")

    for table_plan in plan.tables:
        action = (
            "[bold green]CREATE[/bold green]"
            if table_plan.action == "create"
            else "[bold yellow]ALTER[/bold yellow]"
        )
        summary.add_row(table_plan.table, action, str(len(table_plan.statements)))
    for table_name in plan.drop_tables:
        summary.add_row(table_name, "[bold red]DROP[/bold red]", "1")
    console.print(summary)

    console.print()
    for statement in plan.statements:
        console.print(f"{statement};", markup=False, highlight=False, soft_wrap=True)


# ============================================================================
# Async command implementations
# ============================================================================


async def _async_diff(args: argparse.Namespace) -> int:
    """Async implementation for diff command.

    Returns:
        0 on success (with or without changes), 1 on failure.
    """
    try:
        target = _resolve_target(args)
        _, _, plan = await _load_plan(target)
    except _USER_ERRORS as e:
        console.print(f"[red]Error: {_error_message(e)}[/red]")
        return 1
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Connection failed: {e}")
        return 1

    if not plan.has_changes:
        console.print("[bold green]v[/bold green] Schema is up to date")
        return 0

    _print_plan(plan)
    return 0


async def _async_sync(args: argparse.Namespace) -> int:
    """Async implementation for sync command.

    Shows the plan; statements are applied only when ``--confirm`` is
    given.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        target = _resolve_target(args)
        desired, catalog, plan = await _load_plan(target)
    except _USER_ERRORS as e:
        console.print(f"[red]Error: {_error_message(e)}[/red]")
        return 1
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Connection failed: {e}")
        return 1

    if not plan.has_changes:
        console.print("[bold green]v[/bold green] Schema is up to date")
        return 0

    _print_plan(plan)

    if not args.confirm:
        console.print()
        console.print(
            "[dim]To apply these statements, add[/dim] [cyan]--confirm[/cyan] "
            "[dim]flag.[/dim]"
        )
        return 0

    console.print()
    console.print("[bold]Applying changes...[/bold]")

    adapter = await get_adapter(database_url=target.database_url)
    try:
        applied = await sync(desired, catalog, adapter)
    except Exception as e:
        console.print(f"\n[bold red]x[/bold red] Sync failed: {e}")
        return 1
    finally:
        await adapter.close()

    console.print(
        f"[bold green]v[/bold green] Applied {len(applied)} statement(s)."
    )
    return 0


async def _async_dump(args: argparse.Namespace) -> int:
    """Async implementation for dump command.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        target = _resolve_target(args)
        catalog = await read_catalog(target.database_url, target.excluded_tables)
    except _USER_ERRORS as e:
        console.print(f"[red]Error: {_error_message(e)}[/red]")
        return 1
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] Connection failed: {e}")
        return 1

    try:
        source = format_models(catalog)
    except UnknownDataTypeError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.output:
        Path(args.output).write_text(source)
        console.print(
            f"[bold green]v[/bold green] Wrote {len(catalog.tables)} table(s) "
            f"to [cyan]{args.output}[/cyan]"
        )
    else:
        sys.stdout.write(source)
    return 0


# ============================================================================
# Sync command wrappers (cmd_profiles reads local files only)
# ============================================================================


def cmd_diff(args: argparse.Namespace) -> int:
    """Print the statements needed to reconcile the database.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_diff(args))


def cmd_sync(args: argparse.Namespace) -> int:
    """Show the reconciliation plan and apply it with ``--confirm``.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_sync(args))


def cmd_dump(args: argparse.Namespace) -> int:
    """Print the live schema as model source.

    Wraps the async implementation with ``asyncio.run()``.
    """
    return asyncio.run(_async_dump(args))


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if db.toml not found.
    """
    try:
        config = load_db_config(_config_path(args))
    except FileNotFoundError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    try:
        current = get_active_profile_name(env_prefix=getattr(args, "env_prefix", ""))
    except ProfileNotFoundError:
        current = None

    table = Table(
        title="Database Profiles", show_header=True, header_style="bold"
    )
    table.add_column("", width=2)
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        marker = "[bold green]*[/bold green]" if name == current else " "
        name_style = "bold cyan" if name == current else ""
        table.add_row(
            marker,
            f"[{name_style}]{name}[/{name_style}]" if name_style else name,
            profile.provider,
            profile.description or "",
        )

    console.print(table)

    if current:
        console.print("\n[bold green]*[/bold green] = active profile")

    return 0


# ============================================================================
# Main entry point
# ============================================================================


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )
    # Keep driver chatter out of debug output
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("aiomysql").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Build the ``db-reconcile`` argument parser."""
    parser = argparse.ArgumentParser(
        prog="db-reconcile",
        description="Reconcile a MySQL database with declarative table models",
    )

    # Global options
    parser.add_argument(
        "--env-prefix",
        default="",
        help=(
            "Prefix for environment variable lookup "
            "(e.g., --env-prefix APP_ reads APP_DB_PROFILE)"
        ),
    )
    parser.add_argument(
        "--profile",
        "-p",
        default=None,
        help="Profile name from db.toml (default: DB_PROFILE env var)",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Database URL; overrides any profile",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to db.toml (default: ./db.toml)",
    )
    parser.add_argument(
        "--source",
        "-s",
        default=None,
        help="Model source file (default: [schema] file in db.toml, or models.py)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # diff command
    p_diff = subparsers.add_parser(
        "diff",
        help="Print the statements needed to reconcile the database",
    )
    p_diff.set_defaults(func=cmd_diff)

    # sync command
    p_sync = subparsers.add_parser(
        "sync",
        help="Reconcile the database with the models",
    )
    p_sync.add_argument(
        "--confirm",
        action="store_true",
        help="Actually apply the statements",
    )
    p_sync.set_defaults(func=cmd_sync)

    # dump command
    p_dump = subparsers.add_parser(
        "dump",
        help="Print the live schema as model source",
    )
    p_dump.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write to this file instead of stdout",
    )
    p_dump.set_defaults(func=cmd_dump)

    # profiles command
    p_profiles = subparsers.add_parser(
        "profiles",
        help="List available profiles",
    )
    p_profiles.set_defaults(func=cmd_profiles)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
