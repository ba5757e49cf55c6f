"""CLI interface for reviewpool.

This module provides a command-line interface for managing the reviewpool
service, including initialization, server management, and status checks.
"""
import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from . import __version__
from .core.config.settings import ReviewPoolConfig, init_config
from .core.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def cli():
    """reviewpool - pull request reviewer assignment service.

    Picks reviewers from the author's team when a pull request is opened and
    keeps review slots filled as reviewers are swapped or deactivated.
    """
    pass


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="reviewpool.yaml",
    help="Path to configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Force overwrite existing config")
def init(config_path: str, force: bool):
    """Initialize reviewpool configuration.

    Creates a default configuration file with recommended settings.
    """
    config_file = Path(config_path)

    if config_file.exists() and not force:
        click.echo(f"Configuration file already exists: {config_path}")
        click.echo("Use --force to overwrite")
        return

    try:
        config = ReviewPoolConfig.create_default_config(config_file)

        click.echo(f"Created configuration file: {config_path}")
        click.echo("\nDefault configuration:")
        click.echo(f"  API Server: {config.api_host}:{config.api_port}")
        click.echo(f"  Database: {config.get_database_url()}")
        click.echo(f"  Reviewers per PR: {config.max_reviewers}")
        click.echo(f"\nEdit {config_path} to customize settings.")

    except Exception as e:
        click.echo(f"Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--host", help="Override API host")
@click.option("--port", type=int, help="Override API port")
def start(config: str, host: str, port: int):
    """Start the reviewpool API server."""
    try:
        app_config = init_config(config) if config else init_config()

        # Override with CLI options
        if host:
            app_config.api_host = host
        if port:
            app_config.api_port = port

        setup_logging(app_config.log_level, app_config.log_file)

        click.echo("Starting reviewpool...")
        click.echo(f"   API: http://{app_config.api_host}:{app_config.api_port}")
        click.echo("\nPress Ctrl+C to stop\n")

        uvicorn.run(
            "reviewpool.api.app:create_app",
            factory=True,
            host=app_config.api_host,
            port=app_config.api_port,
            log_level=app_config.log_level.lower(),
        )

    except KeyboardInterrupt:
        click.echo("\n\nStopping reviewpool...")
    except Exception as e:
        click.echo(f"Error starting server: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def status(config: str):
    """Check reviewpool system status.

    Displays configuration and database information.
    """
    try:
        app_config = init_config(config) if config else init_config()

        click.echo("reviewpool Status")
        click.echo("=" * 50)
        click.echo(f"Configuration: {config or 'default'}")
        click.echo(f"Database URL: {app_config.get_database_url()}")
        click.echo(f"API Server: {app_config.api_host}:{app_config.api_port}")
        click.echo(f"Reviewers per PR: {app_config.max_reviewers}")
        click.echo(f"Log Level: {app_config.log_level}")

        from .core.storage.database import init_db
        from .core.storage.repositories import PullRequestRepository, UserRepository
        from .core.models import PRStatus

        db = init_db(app_config.get_database_url())

        async def get_counts():
            await db.create_tables()
            try:
                async with db.session() as session:
                    pull_requests = PullRequestRepository(session)
                    total = await pull_requests.count()
                    open_count = await pull_requests.count(PRStatus.OPEN.value)
                    users = await UserRepository(session).count()
                    return total, open_count, users
            finally:
                await db.close()

        total, open_count, users = asyncio.run(get_counts())
        click.echo("\nDatabase connection successful")
        click.echo(f"\nPull requests: {total} total, {open_count} open")
        click.echo(f"Users: {users}")

    except Exception as e:
        click.echo(f"Error checking status: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--limit", "-n", type=int, default=20, help="Number of pull requests to show")
@click.option(
    "--status-filter",
    type=click.Choice(["open", "merged"], case_sensitive=False),
    help="Filter by status",
)
def prs(config: str, limit: int, status_filter: str):
    """List recent pull requests and their reviewers."""
    try:
        app_config = init_config(config) if config else init_config()

        from .core.storage.database import init_db
        from .core.storage.repositories import PullRequestRepository

        db = init_db(app_config.get_database_url())

        async def get_recent():
            await db.create_tables()
            try:
                async with db.session() as session:
                    return await PullRequestRepository(session).list_recent(
                        limit=limit,
                        status=status_filter.upper() if status_filter else None,
                    )
            finally:
                await db.close()

        pull_requests = asyncio.run(get_recent())

        if not pull_requests:
            click.echo("No pull requests found")
            return

        click.echo(f"\nRecent Pull Requests (showing {len(pull_requests)}):")
        click.echo("=" * 80)

        for pr in pull_requests:
            click.echo(f"\n{pr.pull_request_id} - {pr.pull_request_name} [{pr.status}]")
            click.echo(f"   Author: {pr.author_id}")
            click.echo(f"   Created: {pr.created_at.strftime('%Y-%m-%d %H:%M:%S')}")
            reviewers = ", ".join(pr.assigned_reviewers) or "(none)"
            click.echo(f"   Reviewers: {reviewers}")

    except Exception as e:
        click.echo(f"Error listing pull requests: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
