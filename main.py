#!/usr/bin/env python3
"""
FeedDeck - Feed Ingestion Core
==============================

Main application entry point with CLI interface for management and testing.

Usage:
    python main.py --help                          # Show all commands
    python main.py check-config                    # Validate configuration
    python main.py init-db                         # Initialize database
    python main.py add-column --user U --column C  # Register a profile column
    python main.py add-source --user U --column C rss https://example.com/feed
    python main.py preview-feed reddit /r/python   # Fetch a feed without saving
    python main.py refresh-column --user U --column C
    python main.py scheduled-refresh --secret S    # Run a scheduled refresh
    python main.py show-sources --user U --column C
"""

import sys
import time
import logging
from pathlib import Path
from urllib.parse import urlparse

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from feeddeck.config.settings import get_settings
from feeddeck.database.schema import DatabaseSchema
from feeddeck.database.connection import get_db_manager
from feeddeck.database.models import (
    Column,
    GoogleNewsOptions,
    Profile,
    ProfileTier,
    Source,
    SourceOptions,
    SourceType,
    StackoverflowOptions,
)
from feeddeck.utils.logging import configure_application_logging
from feeddeck.utils.exceptions import FeedDeckError

console = Console()
logger = logging.getLogger(__name__)

SOURCE_TYPES = [t.value for t in SourceType]


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """FeedDeck - feed ingestion and refresh for multi-platform decks."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
    )


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking FeedDeck Configuration[/bold blue]")

    try:
        settings = get_settings()

        table = Table(title="Configuration Status")
        table.add_column("Component", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Details")

        checks = [
            ("Database", _check_database_config),
            ("Logging", _check_logging_config),
            ("Refresh", _check_refresh_config),
            ("Scheduler Auth", _check_auth_config),
            ("Sources", _check_sources_config),
        ]

        all_passed = True
        for name, check_func in checks:
            status, details = check_func(settings)
            table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
            if not status:
                all_passed = False

        console.print(table)

        if all_passed:
            console.print("[bold green]✅ All configuration checks passed![/bold green]")
            sys.exit(0)
        else:
            console.print("[bold red]❌ Configuration validation failed[/bold red]")
            sys.exit(1)

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option("--reset", is_flag=True, help="Drop existing tables first")
def init_db(reset):
    """Initialize database with schema."""
    console.print("[bold blue]🗄️ Initializing FeedDeck Database[/bold blue]")

    try:
        settings = get_settings()
        Path(settings.database.path).parent.mkdir(parents=True, exist_ok=True)

        schema = DatabaseSchema(settings.database.path)
        if reset:
            schema.drop_tables()
            console.print("[yellow]⚠️ Existing tables dropped[/yellow]")
        schema.create_tables()

        if not schema.verify_schema():
            console.print("[bold red]❌ Database schema verification failed[/bold red]")
            sys.exit(1)

        console.print("[bold green]✅ Database initialized successfully![/bold green]")

        info = _db(settings).get_database_info()

        info_table = Table(title="Database Information")
        info_table.add_column("Property", style="cyan")
        info_table.add_column("Value", style="green")

        info_table.add_row("Database Path", settings.database.path)
        info_table.add_row("Size", f"{info['database_size_mb']:.2f} MB")
        info_table.add_row("Page Size", f"{info['page_size']} bytes")
        for table_name, count in info["table_counts"].items():
            info_table.add_row(f"Rows in {table_name}", str(count))

        console.print(info_table)

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Database initialization error: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--user', 'user_id', required=True, help='Profile ID')
@click.option('--column', 'column_id', required=True, help='Column ID')
@click.option('--name', default='', help='Column display name')
@click.option('--premium', is_flag=True, help='Create the profile on the premium tier')
def add_column(user_id, column_id, name, premium):
    """Register a profile and one of its columns."""
    from feeddeck.storage import ProfileRepository, ColumnRepository

    try:
        settings = get_settings()
        db = _db(settings)
        profiles = ProfileRepository(db)
        now = int(time.time())

        profile = profiles.get_profile(user_id)
        if profile is None:
            profile = Profile(
                id=user_id,
                tier=ProfileTier.PREMIUM if premium else ProfileTier.FREE,
                created_at=now,
                updated_at=now,
            )
            profiles.upsert_profile(profile)
            console.print(f"✅ Created profile {profile}")

        ColumnRepository(db).upsert_column(
            Column(id=column_id, user_id=user_id, name=name)
        )
        console.print(f"[bold green]✅ Column {column_id} ready for {user_id}[/bold green]")

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Error adding column: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.argument('source_type', type=click.Choice(SOURCE_TYPES))
@click.argument('value')
@click.option('--limit', default=10, help='Number of items to display')
def preview_feed(source_type, value, limit):
    """Resolve and fetch a feed without saving anything."""
    from feeddeck.processing.pipeline import RefreshPipeline

    console.print(f"[bold blue]📡 Previewing {source_type} feed: {value}[/bold blue]")

    try:
        settings = get_settings()
        source = _build_source(source_type, value, "preview", "preview")
        pipeline = RefreshPipeline(_db(settings), settings)

        resolved, items = pipeline.preview(source)

        console.print(f"Title: [green]{resolved.title}[/green]")
        console.print(f"Link:  {resolved.link or '-'}")
        console.print(f"Icon:  {resolved.icon or '-'}")
        _print_items(items, limit)

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Preview failed: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--user', 'user_id', required=True, help='Profile ID')
@click.option('--column', 'column_id', required=True, help='Column ID')
@click.argument('source_type', type=click.Choice(SOURCE_TYPES))
@click.argument('value')
def add_source(user_id, column_id, source_type, value):
    """Create a source in a column and ingest its current items."""
    from feeddeck.processing.pipeline import RefreshPipeline
    from feeddeck.storage import ColumnRepository

    try:
        settings = get_settings()
        db = _db(settings)

        if not ColumnRepository(db).is_owner(column_id, user_id):
            console.print(f"[bold red]❌ Column {column_id} not found for {user_id}[/bold red]")
            sys.exit(1)

        source = _build_source(source_type, value, user_id, column_id)
        result = RefreshPipeline(db, settings).refresh_source(source)

        console.print(f"[bold green]✅ Added {result.source.title}[/bold green]")
        console.print(f"Source ID: [cyan]{result.source.id}[/cyan]")
        console.print(f"Items saved: {result.items_count}")

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Error adding source: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--user', 'user_id', required=True, help='Profile ID')
@click.option('--column', 'column_id', required=True, help='Column ID')
def refresh_column(user_id, column_id):
    """Refresh every source of a column now."""
    from feeddeck.api.handlers import handle_manual_refresh

    console.print(f"[bold blue]🔄 Refreshing column {column_id}[/bold blue]")

    settings = get_settings()
    response = handle_manual_refresh(
        user_id, {"columnId": column_id}, _db(settings), settings
    )
    body = response.body

    if response.status_code != 200:
        console.print(f"[bold red]❌ {response.status_code}: {body['error']}[/bold red]")
        sys.exit(1)

    console.print(
        f"[bold green]✅ Updated {body['updatedCount']}/{body['totalSources']} sources[/bold green]"
    )
    _print_errors(body.get("errors", []))


@cli.command()
@click.option('--batch', type=click.IntRange(min=1), default=None, help='Maximum number of profiles')
@click.option('--max', 'max_sources', type=click.IntRange(min=1), default=None, help='Maximum number of sources')
@click.option('--secret', envvar='FEEDDECK_AUTH__CRON_SECRET', help='Scheduler secret')
def scheduled_refresh(batch, max_sources, secret):
    """Run one scheduled refresh over stale sources."""
    from feeddeck.api.handlers import handle_scheduled_refresh

    console.print("[bold blue]⏰ Running scheduled refresh[/bold blue]")

    settings = get_settings()
    params = {"batch": batch, "max": max_sources}
    response = handle_scheduled_refresh(secret, params, _db(settings), settings)
    body = response.body

    if response.status_code != 200:
        console.print(f"[bold red]❌ {response.status_code}: {body['error']}[/bold red]")
        sys.exit(1)

    table = Table(title="Scheduled Refresh")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Profiles", str(body["profilesProcessed"]))
    table.add_row("Sources refreshed", str(body["sourcesProcessed"]))
    table.add_row("Errors", str(body["errors"]))
    console.print(table)

    _print_errors(body.get("errorDetails", []))


@cli.command()
@click.option('--user', 'user_id', required=True, help='Profile ID')
@click.option('--column', 'column_id', required=True, help='Column ID')
def show_sources(user_id, column_id):
    """Show the sources of a column."""
    from feeddeck.storage import SourceRepository, ItemRepository

    try:
        settings = get_settings()
        db = _db(settings)
        sources = SourceRepository(db).get_sources_for_column(column_id, user_id)
        items = ItemRepository(db)

        if not sources:
            console.print("[yellow]📭 No sources in this column[/yellow]")
            return

        table = Table(title=f"Sources in {column_id}")
        table.add_column("Type", style="cyan")
        table.add_column("Title")
        table.add_column("Items", style="green")
        table.add_column("Last Refresh")

        for source in sources:
            table.add_row(
                source.type.value,
                source.title[:50],
                str(items.count_items(source.id)),
                _format_time(source.updated_at),
            )

        console.print(table)

    except FeedDeckError as e:
        console.print(f"[bold red]❌ Error showing sources: {e}[/bold red]")
        sys.exit(1)


def _db(settings):
    return get_db_manager(settings.database.path, settings.database.pool_size)


def _build_source(source_type: str, value: str, user_id: str, column_id: str) -> Source:
    """Build an unsaved source whose options carry ``value``.

    Stack Overflow and Google News take a URL when ``value`` has a scheme,
    a tag or search query otherwise.
    """
    is_url = bool(urlparse(value).scheme)
    options = SourceOptions()

    if source_type == SourceType.STACKOVERFLOW.value:
        options.stackoverflow = (
            StackoverflowOptions(type="url", url=value)
            if is_url
            else StackoverflowOptions(type="tag", tag=value)
        )
    elif source_type == SourceType.GOOGLENEWS.value:
        options.googlenews = (
            GoogleNewsOptions(type="url", url=value)
            if is_url
            else GoogleNewsOptions(type="search", search=value)
        )
    else:
        setattr(options, source_type, value)

    return Source(
        user_id=user_id,
        column_id=column_id,
        type=SourceType(source_type),
        options=options,
    )


def _print_items(items, limit: int) -> None:
    if not items:
        console.print("[yellow]📭 No items admitted[/yellow]")
        return

    table = Table(title=f"Items ({len(items)} admitted)")
    table.add_column("Published", style="cyan")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Media", style="green")

    for item in items[:limit]:
        table.add_row(
            _format_time(item.published_at),
            item.title[:60],
            item.author or "-",
            "✅" if item.media else "",
        )

    console.print(table)


def _print_errors(errors) -> None:
    if not errors:
        return

    table = Table(title="Failed Sources")
    table.add_column("Source", style="cyan")
    table.add_column("Error", style="red")
    for error in errors:
        table.add_row(error["sourceId"], error["error"])
    console.print(table)


def _format_time(timestamp: int) -> str:
    if not timestamp:
        return "never"
    return time.strftime("%Y-%m-%d %H:%M", time.gmtime(timestamp))


# Helper functions for configuration checks
def _check_database_config(settings) -> tuple:
    """Check database configuration."""
    try:
        db_path = Path(settings.database.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Path: {settings.database.path}, Pool: {settings.database.pool_size}"
    except OSError as e:
        return False, str(e)


def _check_logging_config(settings) -> tuple:
    """Check logging configuration."""
    try:
        if settings.logging.file_path:
            log_path = Path(settings.logging.file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


def _check_refresh_config(settings) -> tuple:
    """Check refresh limits."""
    refresh = settings.refresh
    return True, (
        f"Max items: {refresh.max_items}, Buffer: {refresh.time_buffer}s, "
        f"Stale after: {refresh.staleness_seconds}s"
    )


def _check_auth_config(settings) -> tuple:
    """Check scheduler credentials."""
    credentials = settings.auth.accepted_credentials()
    if not credentials:
        return False, "No cron secret or service key set, scheduled runs are rejected"
    return True, f"{len(credentials)} credential(s) configured"


def _check_sources_config(settings) -> tuple:
    """Check platform adapter configuration."""
    from feeddeck.feeds import ADAPTERS

    youtube_icons = "on" if settings.sources.youtube_api_key else "off"
    deprecated = ", ".join(settings.refresh.deprecated_source_types) or "none"
    return True, (
        f"Adapters: {len(ADAPTERS)}, Deprecated: {deprecated}, "
        f"YouTube icons: {youtube_icons}"
    )


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 FeedDeck interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ Unexpected error: {e}[/bold red]")
        sys.exit(1)
