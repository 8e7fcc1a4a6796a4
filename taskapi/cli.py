"""Command line interface for the Task API."""

import asyncio
import sys
from typing import Optional

import click

from taskapi.core.exceptions import ConfigurationException
from taskapi.infrastructure.database.init_db import (
    check_database_health,
    get_database_info,
    init_database,
    load_yaml_data,
)
from taskapi.infrastructure.database.session import close_db_connections
from taskapi.settings import get_settings
from taskapi.utils.logging import setup_logging
from taskapi.utils.masking import mask_secret


async def _run_with_db(coro):
    """Await a database coroutine and release the engine afterwards."""
    try:
        return await coro
    finally:
        await close_db_connections()


@click.group()
def cli():
    """Task API CLI."""
    setup_logging()


@cli.command()
def init_db():
    """Create database tables."""
    click.echo("Initializing database...")
    asyncio.run(_run_with_db(init_database()))
    click.echo("Database initialized successfully!")


@cli.command()
@click.option("--file", "file_path", default=None, help="YAML file with a 'tasks' list")
def load_yaml(file_path: Optional[str]):
    """Import tasks from a YAML file, skipping titles that already exist."""
    click.echo("Loading tasks from YAML...")
    try:
        created = asyncio.run(_run_with_db(load_yaml_data(file_path)))
    except ConfigurationException as exc:
        click.echo(f"✗ {exc.message}", err=True)
        sys.exit(1)
    click.echo(f"Created {created} tasks")


@cli.command()
def check_db():
    """Check database connectivity and health."""
    click.echo("Checking database health...")

    async def check():
        if not await check_database_health():
            click.echo("✗ Database connection failed")
            return 1

        click.echo("✓ Database connection is healthy")
        info = await get_database_info()
        click.echo("\nDatabase statistics:")
        for table, count in info.get("tables", {}).items():
            click.echo(f"  - {table}: {count} records")
        return 0

    sys.exit(asyncio.run(_run_with_db(check())))


@cli.command()
def show_config():
    """Display current configuration settings with secrets masked."""
    settings = get_settings()

    click.echo("Current configuration:")
    click.echo(f"  Environment: {settings.environment}")
    click.echo(f"  Debug: {settings.debug}")
    click.echo(f"  Listen: {settings.host}:{settings.port}")
    click.echo(f"  Database URL: {settings.database_url}")
    click.echo(f"  Redis URL: {settings.redis_url}")
    click.echo(f"  API key: {mask_secret(settings.api_key)}")
    click.echo(f"  Allowed origins: {', '.join(settings.allowed_origins)}")
    click.echo(
        f"  Rate limit: {settings.rate_limit_max} per {settings.rate_limit_window_seconds}s"
        f" ({'enabled' if settings.rate_limit_enabled else 'disabled'})"
    )
    click.echo(f"  Runner: {settings.runner_command} {' '.join(settings.runner_prefix_args)}")
    click.echo(f"  Runner working dir: {settings.runner_working_dir}")
    click.echo(f"  GitHub token: {mask_secret(settings.github_token) or 'not set'}")
    click.echo(f"  Max output chars: {settings.max_output_chars}")
    click.echo(f"  Tasks seed file: {settings.tasks_seed_file}")


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to settings)")
@click.option("--port", default=None, type=int, help="Port (defaults to settings)")
def serve(host: Optional[str], port: Optional[int]):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "taskapi.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
