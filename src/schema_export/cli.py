"""
Command-line interface for schema_export.

Provides export, tables and describe commands for documenting a database
schema as one text file per table.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from schema_export import __version__
from schema_export.config import build_config
from schema_export.descriptor import TableDescriptorBuilder
from schema_export.exporter import SchemaExporter
from schema_export.metadata import EXTRACTORS, MetadataExtractor, create_extractor
from schema_export.models import ExportConfig
from schema_export.output import ReportRenderer

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def connection_options(func):
    """Options shared by every command that talks to the database."""
    options = [
        click.option(
            "--config",
            "config_file",
            type=click.Path(exists=True, path_type=Path),
            default=None,
            help="YAML configuration file",
        ),
        click.option(
            "--engine",
            type=click.Choice(sorted(EXTRACTORS)),
            default=None,
            help="Database engine (default: db2)",
        ),
        click.option(
            "--connection",
            type=str,
            default=None,
            help="Connection string for the engine's driver",
        ),
        click.option(
            "--schema",
            type=str,
            default=None,
            help="Schema to document",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config(**kwargs) -> ExportConfig:
    """Build the run configuration, exiting on invalid input."""
    try:
        return build_config(**kwargs)
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


def _connect(config: ExportConfig) -> MetadataExtractor:
    """Create the configured extractor and connect it, exiting when no connection is configured."""
    extractor = create_extractor(config.engine, config.connection_string)
    try:
        extractor.connect()
    except RuntimeError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    return extractor


@click.group()
@click.version_option(version=__version__, prog_name="schema-export")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """
    Schema Export - Database structure documentation for LLM ingestion

    Writes one descriptive text file per table with its columns, primary key
    and foreign keys.
    """
    setup_logging(verbose)


@cli.command()
@connection_options
@click.option(
    "--output_dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Output directory (default: output)",
)
@click.option(
    "--foreign_keys/--no_foreign_keys",
    "include_foreign_keys",
    default=None,
    help="Include foreign keys in the documents (default: yes)",
)
def export(
    config_file: Optional[Path],
    engine: Optional[str],
    connection: Optional[str],
    schema: Optional[str],
    output_dir: Optional[Path],
    include_foreign_keys: Optional[bool],
) -> None:
    """
    Export every table of a schema to <output_dir>/<TABLE>.txt.

    Examples:

        # Export using a config file
        schema-export export --config export.yaml

        # Export an Oracle schema without foreign keys
        schema-export export --engine oracle \\
            --connection "user/pwd@localhost:1521/ORCL" \\
            --schema CORE --output_dir docs --no_foreign_keys
    """
    config = _load_config(
        config_file=config_file,
        engine=engine,
        connection_string=connection,
        schema=schema,
        output_dir=output_dir,
        include_foreign_keys=include_foreign_keys,
    )

    console.print("[bold blue]Schema Export[/bold blue]")
    console.print(f"Engine: {config.engine}")
    console.print(f"Schema: {config.schema}")
    console.print(f"Output: {config.output_dir}")

    extractor = _connect(config)
    exporter = SchemaExporter(extractor, config)

    with extractor, Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Exporting tables...", total=None)

        def on_table(index: int, total: int, table_name: str) -> None:
            progress.update(task, total=total, completed=index - 1, description=f"Exporting {table_name}")

        try:
            result = exporter.export_all(progress_callback=on_table)
        except OSError as e:
            console.print(f"[red]Error creating output directory: {escape(str(e))}[/red]")
            sys.exit(1)

        progress.update(task, completed=result.total, description="Done")

    summary = Table(title="Export Summary")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")

    summary.add_row("Tables Exported", str(result.success_count))
    summary.add_row("Errors", str(result.error_count))
    summary.add_row("Output Directory", str(result.output_dir.resolve()))

    console.print(summary)

    if result.failed:
        console.print("\n[yellow]Tables with errors:[/yellow]")
        for table_name, message in result.failed.items():
            console.print(f"[yellow]  {table_name}: {escape(message)}[/yellow]")


@cli.command()
@connection_options
def tables(
    config_file: Optional[Path],
    engine: Optional[str],
    connection: Optional[str],
    schema: Optional[str],
) -> None:
    """List the base tables of a schema."""
    config = _load_config(
        config_file=config_file,
        engine=engine,
        connection_string=connection,
        schema=schema,
    )

    with _connect(config) as extractor:
        table_names = extractor.list_tables(config.schema)

    for table_name in table_names:
        console.print(table_name)
    console.print(f"\n[green]{len(table_names)} tables in {config.schema}[/green]")


@cli.command()
@connection_options
@click.argument("table_name")
@click.option("--text", is_flag=True, help="Print the rendered document instead of a column table")
def describe(
    config_file: Optional[Path],
    engine: Optional[str],
    connection: Optional[str],
    schema: Optional[str],
    table_name: str,
    text: bool,
) -> None:
    """
    Show the structure of a single table.

    Example:

        schema-export describe --config export.yaml CUSTOMER
    """
    config = _load_config(
        config_file=config_file,
        engine=engine,
        connection_string=connection,
        schema=schema,
    )

    with _connect(config) as extractor:
        builder = TableDescriptorBuilder(extractor, include_foreign_keys=config.include_foreign_keys)
        table = builder.build(config.schema, table_name.upper())

    if text:
        click.echo(ReportRenderer(type_formatter=extractor.format_type).render(table), nl=False)
        return

    columns_table = Table(title=f"{table.full_name}")
    columns_table.add_column("Column", style="cyan")
    columns_table.add_column("Type", style="green")
    columns_table.add_column("Nullable", style="yellow")
    columns_table.add_column("Default", style="magenta")
    columns_table.add_column("Key", style="blue")

    for col in table.columns:
        keys = []
        if col.name in table.primary_key_columns:
            keys.append("PK")
        if table.foreign_keys_for(col.name):
            keys.append("FK")
        columns_table.add_row(
            col.name,
            extractor.format_type(col),
            "YES" if col.nullable else "NO",
            extractor.format_default(col.default_value, col.type_name),
            ", ".join(keys) if keys else "-",
        )

    console.print(columns_table)

    if table.foreign_keys:
        fk_table = Table(title="Foreign Keys")
        fk_table.add_column("Name", style="cyan")
        fk_table.add_column("Columns", style="green")
        fk_table.add_column("References", style="yellow")
        fk_table.add_column("On Delete", style="magenta")

        for fk in table.foreign_keys:
            fk_table.add_row(
                fk.name,
                ", ".join(fk.source_columns),
                f"{fk.target_table}({', '.join(fk.target_columns)})",
                fk.on_delete,
            )

        console.print(fk_table)


if __name__ == "__main__":
    cli()
