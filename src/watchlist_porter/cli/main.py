"""Main CLI entry point."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import click

from .. import __version__
from ..config import Config, ConfigManager
from ..core.interfaces import (
    IBulkImporter,
    IExportFormatter,
    IPreviewBuilder,
    IWatchlistStore,
)
from ..core.models import DuplicateStrategy, ImportResult, PreviewItem
from ..infrastructure import Container, setup_logging
from ..utils import (
    ConfigurationError,
    SchemaValidationError,
    WatchlistPorterError,
    detect_format,
    parse_import_content,
    render_export,
)

_STRATEGIES = [strategy.value for strategy in DuplicateStrategy]


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(version=__version__, prog_name="watchlist-porter")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Watchlist Porter - Import and export watchlists matched against TMDb."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config

    # Skip configuration loading for commands that don't need it
    if ctx.invoked_subcommand == "init":
        return

    try:
        config_manager = ConfigManager(config)
        app_config = config_manager.load_config()

        if verbose:
            app_config.logging.level = "DEBUG"
        setup_logging(app_config.logging)

        container = Container(config_manager)
        container.configure_default_services()

        ctx.obj["config"] = app_config
        ctx.obj["config_manager"] = config_manager
        ctx.obj["container"] = container

    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Initialization error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path.cwd() / "config" / "config.yaml",
    help="Output path for configuration file",
)
def init(output: Path) -> None:
    """Initialize configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                return

        ConfigManager.create_default_config(output)
        click.echo(f"Configuration file created at: {output}")
        click.echo("Please edit the configuration file with your TMDb API key and preferences.")

    except Exception as e:
        click.echo(f"Failed to create configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "-f",
    "file_format",
    type=click.Choice(["auto", "csv", "json"]),
    default="auto",
    help="Import file format",
)
@click.option(
    "--rating-scale",
    type=click.Choice(["5", "10", "100"]),
    help="Scale of ratings in the file (overrides config)",
)
@click.option(
    "--skip-unmatched/--keep-unmatched",
    default=None,
    help="Skip rows without catalog matches (overrides config)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write preview items to this file instead of stdout",
)
@click.pass_context
def preview(
    ctx: click.Context,
    file: Path,
    file_format: str,
    rating_scale: Optional[str],
    skip_unmatched: Optional[bool],
    output: Optional[Path],
) -> None:
    """Match an import file against the catalog and write preview items."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]

    try:
        content = file.read_text(encoding="utf-8")
        fmt = detect_format(file, content) if file_format == "auto" else file_format
        scale = int(rating_scale) if rating_scale else config.importing.rating_scale
        rows = parse_import_content(content, fmt, rating_scale=scale)

        items = asyncio.run(_run_preview(container, rows, skip_unmatched))
    except WatchlistPorterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    payload = json.dumps([item.to_wire() for item in items], indent=2, ensure_ascii=False)
    if output:
        output.write_text(payload, encoding="utf-8")
        click.echo(f"Preview written to: {output}")
    else:
        click.echo(payload)

    _display_preview_summary(items, err=output is None)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--strategy",
    "-s",
    type=click.Choice(_STRATEGIES),
    help="Default strategy for unresolved duplicates (overrides request and config)",
)
@click.option(
    "--skip-unmatched/--keep-unmatched",
    default=None,
    help="Skip items without catalog matches (overrides request and config)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the import result as JSON")
@click.pass_context
def commit(
    ctx: click.Context,
    file: Path,
    strategy: Optional[str],
    skip_unmatched: Optional[bool],
    as_json: bool,
) -> None:
    """Commit preview items (or a bulk import request) to the watchlist."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]

    try:
        data = json.loads(file.read_text(encoding="utf-8"))
    except ValueError as e:
        click.echo(f"Error: {file} is not valid JSON: {e}", err=True)
        sys.exit(1)

    request = _build_request(data, config, strategy, skip_unmatched)

    try:
        result = asyncio.run(_run_commit(container, request))
    except SchemaValidationError as e:
        click.echo(f"Invalid import request: {e.model_name}", err=True)
        for error in e.errors:
            click.echo(f"  ✗ {error}", err=True)
        sys.exit(1)
    except WatchlistPorterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.to_wire(), indent=2, ensure_ascii=False))
    else:
        _display_import_result(result)


@cli.command()
@click.option(
    "--format",
    "-f",
    "file_format",
    type=click.Choice(["json", "csv"]),
    help="Export format (overrides config)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the export to this file instead of stdout",
)
@click.pass_context
def export(ctx: click.Context, file_format: Optional[str], output: Optional[Path]) -> None:
    """Export the watchlist as JSON or CSV."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]

    try:
        response = asyncio.run(_run_export(container))
        rendered = render_export(response, file_format or config.export.format)
    except WatchlistPorterError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output:
        output.write_text(rendered, encoding="utf-8")
        click.echo(f"Exported {response.total_entries} entries to: {output}")
    else:
        click.echo(rendered)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show configuration and store status."""
    config: Config = ctx.obj["config"]
    container: Container = ctx.obj["container"]
    config_manager: ConfigManager = ctx.obj["config_manager"]

    click.echo("Watchlist Porter Status")
    click.echo("=" * 40)

    click.echo(f"Config File: {config_manager.config_path}")
    click.echo(f"TMDb Configured: {'✓' if _has_api_key(config.catalog.api_key) else '✗'}")
    click.echo(f"Store Backend: {config.store.backend}")
    if config.store.backend == "json":
        click.echo(f"Store File: {config.store.path}")
    elif config.store.backend == "http":
        click.echo(f"Store URL: {config.store.url}")
    click.echo(f"Owner: {config.store.owner_id}")
    click.echo(f"Rating Scale: {config.importing.rating_scale}")
    click.echo(f"Default Duplicate Strategy: {config.importing.default_duplicate_strategy.value}")

    try:
        count = asyncio.run(_count_entries(container))
        click.echo(f"Watchlist Entries: {count}")
    except WatchlistPorterError as e:
        click.echo(f"Store Status: ✗ {e}")


def _has_api_key(api_key: str) -> bool:
    """Check for an API key that is set and not an unexpanded ${VAR}."""
    return bool(api_key) and not api_key.startswith("${")


def _build_request(
    data: Any,
    config: Config,
    strategy: Optional[str],
    skip_unmatched: Optional[bool],
) -> Any:
    """Apply command line and config defaults to a commit payload."""
    if isinstance(data, list):
        data = {
            "items": data,
            "skipUnmatched": config.importing.skip_unmatched,
            "defaultDuplicateStrategy": config.importing.default_duplicate_strategy.value,
        }
    if not isinstance(data, dict):
        # Let request validation report the shape problem
        return data

    data = dict(data)
    if strategy:
        data.pop("default_duplicate_strategy", None)
        data["defaultDuplicateStrategy"] = strategy
    if skip_unmatched is not None:
        data.pop("skip_unmatched", None)
        data["skipUnmatched"] = skip_unmatched
    return data


async def _run_preview(
    container: Container, rows: List[Any], skip_unmatched: Optional[bool]
) -> List[PreviewItem]:
    """Build preview items."""
    try:
        builder = container.get(IPreviewBuilder)  # type: ignore
        return await builder.build_preview(rows, skip_unmatched=skip_unmatched)
    finally:
        await container.aclose()


async def _run_commit(container: Container, request: Any) -> ImportResult:
    """Commit a bulk import request."""
    try:
        importer = container.get(IBulkImporter)  # type: ignore
        return await importer.commit(request)
    finally:
        await container.aclose()


async def _run_export(container: Container) -> Any:
    """Export the watchlist."""
    try:
        formatter = container.get(IExportFormatter)  # type: ignore
        return await formatter.export_watchlist()
    finally:
        await container.aclose()


async def _count_entries(container: Container) -> int:
    """Count stored entries."""
    try:
        store = container.get(IWatchlistStore)  # type: ignore
        return len(await store.list_entries())
    finally:
        await container.aclose()


def _display_preview_summary(items: List[PreviewItem], err: bool = False) -> None:
    """Display preview summary.

    Args:
        items: Preview items.
        err: Write to stderr, keeping stdout for the JSON payload.
    """
    matched = sum(1 for item in items if item.match_candidates)
    duplicates = sum(1 for item in items if item.has_existing_entry)
    skipped = [item for item in items if item.should_skip]

    click.echo("", err=err)
    click.echo("PREVIEW SUMMARY", err=err)
    click.echo("=" * 40, err=err)
    click.echo(f"Rows: {len(items)}", err=err)
    click.echo(f"Matched: {matched}", err=err)
    click.echo(f"Already on watchlist: {duplicates}", err=err)
    click.echo(f"Skipped: {len(skipped)}", err=err)
    for item in skipped:
        click.echo(f"  ⊘ {item.original_title or '<untitled>'}: {item.error}", err=err)


def _display_import_result(result: ImportResult) -> None:
    """Display import result.

    Args:
        result: Import result to display.
    """
    click.echo("IMPORT SUMMARY")
    click.echo("=" * 40)
    click.echo(f"✓ Imported: {result.imported}")
    click.echo(f"    Merged: {result.merged}")
    click.echo(f"    Overwritten: {result.overwritten}")
    click.echo(f"⊘ Skipped: {result.skipped}")
    click.echo(f"✗ Failed: {result.failed}")

    for error in result.errors:
        click.echo(f"  ✗ [{error.item_index}] {error.title}: {error.error}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
