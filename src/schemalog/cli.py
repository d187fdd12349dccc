"""
Command-line interface for schemalog.
"""

import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DatabaseSettings, LoggingConfig, SchemalogConfig, configure_logging
from .database import BUILTIN_PROFILES
from .diff import DiffKind, DiffOutputControl, load_diff
from .exceptions import ConfigurationError, SchemalogError
from .generator import GenerationChain, GenerationResult


console = Console()


def handle_errors(func):
    """Decorator to handle errors gracefully in CLI commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SchemalogError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            sys.exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted by user[/yellow]")
            sys.exit(0)
        except Exception as e:
            console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
            if "--debug" in sys.argv:
                import traceback
                traceback.print_exc()
            sys.exit(1)
    return wrapper


def _load_config(config: Optional[str]) -> SchemalogConfig:
    if config:
        return SchemalogConfig.from_yaml(config)
    return SchemalogConfig()


@click.group()
@click.version_option(__version__)
@click.option(
    "--debug", is_flag=True, help="Enable debug mode"
)
@click.pass_context
def main(ctx, debug):
    """schemalog: generate changelog changes from a schema diff."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    if debug:
        configure_logging(LoggingConfig(level="DEBUG"))


@main.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default="schemalog.yaml",
    help="Output configuration file path",
)
@click.option(
    "--dialect",
    default="generic",
    help="Dialect for both reference and comparison databases",
)
@handle_errors
def init(output: str, dialect: str):
    """Initialize a new schemalog configuration file."""
    if Path(output).exists():
        if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
            return

    config = SchemalogConfig(
        reference=DatabaseSettings(dialect=dialect),
        comparison=DatabaseSettings(dialect=dialect),
    )
    config.validate_config()
    config.to_yaml(output)
    console.print(f"[green]✓[/green] Configuration file created: {output}")


@main.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    required=True,
    help="Configuration file path",
)
@handle_errors
def validate_config(config: str):
    """Validate configuration file."""
    console.print(f"Validating configuration: {config}")

    try:
        schemalog_config = SchemalogConfig.from_yaml(config)
        schemalog_config.validate_config()
    except ConfigurationError as e:
        console.print(f"[red]✗[/red] Configuration error: {escape(str(e))}")
        sys.exit(1)

    console.print("[green]✓[/green] Configuration is valid")
    _display_config_summary(schemalog_config)


@main.command()
@click.option(
    "--diff",
    "-d",
    "diff_path",
    type=click.Path(exists=True),
    required=True,
    help="Diff document path",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="Write the generated changes to this file instead of stdout",
)
@click.option("--include-catalog", is_flag=True, help="Always qualify with catalog")
@click.option("--include-schema", is_flag=True, help="Always qualify with schema")
@click.option(
    "--catalogs-as-schemas", is_flag=True, help="Treat catalogs as schemas"
)
@handle_errors
def generate(
    diff_path: str,
    config: Optional[str],
    output: Optional[str],
    include_catalog: bool,
    include_schema: bool,
    catalogs_as_schemas: bool,
):
    """Generate changes from a diff document."""
    schemalog_config = _load_config(config)
    if config:
        configure_logging(schemalog_config.logging)

    diff = load_diff(
        diff_path,
        reference=schemalog_config.reference if config else None,
        comparison=schemalog_config.comparison if config else None,
    )

    settings = schemalog_config.output
    control = DiffOutputControl(
        include_catalog=include_catalog or settings.include_catalog,
        include_schema=include_schema or settings.include_schema,
        consider_catalogs_as_schemas=(
            catalogs_as_schemas or settings.consider_catalogs_as_schemas
        ),
    )

    result = GenerationChain().run(diff, control)
    document = yaml.safe_dump(
        {"changes": [{c.change_type: c.to_dict()} for c in result.changes]},
        default_flow_style=False,
        sort_keys=False,
    )

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(document)
        console.print(
            f"[green]✓[/green] Wrote {result.change_count} changes to {output}"
        )
        _display_generation_summary(result)
    else:
        click.echo(document, nl=False)


@main.command()
@click.option(
    "--dialect",
    default="generic",
    help="Dialect of the comparison database",
)
@handle_errors
def order(dialect: str):
    """Show the order in which object kinds are processed."""
    database = DatabaseSettings(dialect=dialect).to_database()
    chain = GenerationChain()

    table = Table(title=f"Generation order ({database.dialect})")
    table.add_column("Diff kind", style="cyan")
    table.add_column("Object kinds")
    for diff_kind in DiffKind:
        kinds = chain.kind_order(diff_kind, database)
        table.add_row(diff_kind.value, " → ".join(kind.value for kind in kinds))
    console.print(table)


@main.command()
@handle_errors
def dialects():
    """List built-in dialect profiles."""
    table = Table(title="Built-in dialects")
    table.add_column("Dialect", style="cyan")
    table.add_column("Catalogs")
    table.add_column("Schemas")
    table.add_column("FK indexes")
    table.add_column("Default schema")
    for name in sorted(BUILTIN_PROFILES):
        profile = BUILTIN_PROFILES[name]
        table.add_row(
            name,
            "yes" if profile.supports_catalogs else "no",
            "yes" if profile.supports_schemas else "no",
            "yes" if profile.creates_indexes_for_foreign_keys else "no",
            profile.default_schema_name or "-",
        )
    console.print(table)


def _display_config_summary(config: SchemalogConfig) -> None:
    """Display a summary of the configuration."""
    table = Table(title="Configuration Summary")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Reference dialect", config.reference.to_database().dialect)
    table.add_row("Comparison dialect", config.comparison.to_database().dialect)
    table.add_row("Include catalog", str(config.output.include_catalog))
    table.add_row("Include schema", str(config.output.include_schema))
    table.add_row(
        "Catalogs as schemas", str(config.output.consider_catalogs_as_schemas)
    )
    table.add_row("Log level", config.logging.level)

    console.print(table)


def _display_generation_summary(result: GenerationResult) -> None:
    """Display change counts by change type."""
    table = Table(title="Generated changes")
    table.add_column("Change", style="cyan")
    table.add_column("Count", justify="right")
    for change_type, count in result.count_by_type().items():
        table.add_row(change_type, str(count))
    console.print(table)

    if result.skipped:
        console.print(
            f"[yellow]{len(result.skipped)} objects already handled by other changes[/yellow]"
        )
    if result.unsupported:
        console.print(
            f"[yellow]{len(result.unsupported)} objects have no generator[/yellow]"
        )


if __name__ == "__main__":
    main()
