"""
CLI Entry Point for Seed Migration

Usage:
    seed-migrate run
    seed-migrate run --input-dir <dir> --output-dir <dir> --on-error skip
    seed-migrate inspect <file.ts> --format json
    seed-migrate config show
"""

import json
import logging
import sys

import click
import yaml
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from seed_migration import __version__

console = Console()
err_console = Console(stderr=True)


def get_config(ctx):
    """Load configuration from the directory chosen on the command line."""
    from seed_migration.config_loader import ConfigLoader

    loader = ConfigLoader(ctx.obj.get("config_path") if ctx.obj else None)
    try:
        return loader.load_config()
    except (ValueError, TypeError, yaml.YAMLError) as e:
        _fail(f"Configuration error: {e}")


def _fail(message: str):
    err_console.print(f"[bold red]✗ ERROR:[/bold red] {message}")
    sys.exit(1)


@click.group()
@click.option(
    "--config-dir", "-c",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Path to configuration directory"
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_dir: str, verbose: bool):
    """Seed Migration.

    Convert TypeScript data files (`export const xxx = [...]`) into a MySQL
    schema script and an insert script for seeding the dashboard database.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_dir) if config_dir else None

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# =============================================================================
# MIGRATION COMMANDS
# =============================================================================

@cli.command()
@click.option("--input-dir", "-i", type=click.Path(file_okay=False), default=None,
              help="Directory containing the source data files")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), default=None,
              help="Directory the generated scripts are written to")
@click.option("--extension", "-e", default=None, help="Source file extension (default .ts)")
@click.option("--on-error", type=click.Choice(["fail_fast", "skip"]), default=None,
              help="What to do when a source file cannot be converted")
@click.pass_context
def run(ctx, input_dir: str, output_dir: str, extension: str, on_error: str):
    """Generate schema.sql and inserts.sql from the data files."""
    from seed_migration.errors import MigrationError
    from seed_migration.migration import run_migration

    config = get_config(ctx)
    try:
        config = config.with_overrides(
            input_dir=input_dir,
            output_dir=output_dir,
            file_extension=extension,
            on_error=on_error,
        )
    except ValueError as e:
        _fail(str(e))

    console.print(f"\n[bold blue]Reading {config.file_extension} files from:[/bold blue] {config.input_dir}")

    try:
        result = run_migration(
            config, progress=lambda path: console.print(f"  Processing: {path.name}")
        )
    except MigrationError as e:
        _fail(str(e))

    for table in result.tables:
        console.print(
            f"[green]✓[/green] {table.schema.table_name}: "
            f"{len(table.schema.columns)} columns, {table.schema.record_count} rows"
        )

    if result.failures:
        fail_table = Table(title="Skipped Files")
        fail_table.add_column("File", style="cyan")
        fail_table.add_column("Error", style="red")
        for failure in result.failures:
            fail_table.add_row(failure.file_name, failure.message)
        console.print(fail_table)

    status = "[green]Migration complete![/green]" if result.ok else \
        f"[yellow]Migration finished with {len(result.failures)} skipped file(s)[/yellow]"
    console.print(Panel(
        f"{status}\n\n"
        f"- {result.schema_path}\n"
        f"- {result.inserts_path}",
        title="Output"
    ))

    if not result.ok:
        sys.exit(1)


# =============================================================================
# ANALYSIS COMMANDS
# =============================================================================

@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "yaml", "table"]),
    default="table",
    help="Output format"
)
@click.pass_context
def inspect(ctx, source: str, format: str):
    """Show the schema inferred for a single data file without writing anything."""
    from seed_migration.errors import MigrationError
    from seed_migration.migration import inspect_file

    config = get_config(ctx)
    try:
        schema = inspect_file(source, config)
    except MigrationError as e:
        _fail(str(e))

    # Plain echo for machine-readable formats so long paths are never wrapped
    if format == "json":
        click.echo(json.dumps(schema.to_dict(), indent=2))
        return
    if format == "yaml":
        click.echo(yaml.dump(schema.to_dict(), default_flow_style=False, sort_keys=False))
        return

    table = Table(title=f"{schema.table_name} ({schema.record_count} records)")
    table.add_column("Column", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Key", justify="center", style="green")
    for column in schema.columns:
        table.add_row(column.name, column.sql_type.value, "PK" if column.is_primary_key else "")
    console.print(table)


# =============================================================================
# CONFIGURATION COMMANDS
# =============================================================================

@cli.group()
def config():
    """Manage migration configuration."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Display current configuration settings."""
    settings = get_config(ctx)

    table = Table(title="Migration Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)


if __name__ == "__main__":
    cli()
