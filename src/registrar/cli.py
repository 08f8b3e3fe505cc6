#!/usr/bin/env python3
"""
Main CLI entry point for Registrar backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from registrar import __version__
from registrar.config import settings
from registrar.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="registrar")
def cli() -> None:
    """Registrar CLI - run the server and manage the database."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, help="Host to bind to")
@click.option(
    "--port",
    default=settings.api_port,
    type=int,
    help="Port to bind to (default: $PORT or 4000)",
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the Registrar API server."""
    configure_logging(debug=(log_level == "debug"), log_level=log_level)

    logger.info("Starting Registrar API server", host=host, port=port, reload=reload)

    # The app reads its settings at import time
    os.environ.setdefault("REGISTRAR_LOG_LEVEL", log_level)
    if log_level == "debug":
        os.environ["REGISTRAR_DEBUG"] = "true"

    try:
        uvicorn.run(
            "registrar.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
@click.option("--database-url", default=None, help="Override REGISTRAR_DATABASE_URL")
def init_db(database_url: str | None) -> None:
    """Create the database tables."""
    from registrar.database import Database

    configure_logging()

    async def do_init():
        database = Database(database_url)
        await database.connect()
        try:
            await database.create_schema()
        finally:
            await database.close()

    try:
        asyncio.run(do_init())
    except Exception as e:
        logger.error("Failed to create schema", error=str(e))
        click.echo(f"✗ Error creating schema: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database schema created")


@cli.command()
@click.option("--database-url", default=None, help="Override REGISTRAR_DATABASE_URL")
def seed(database_url: str | None) -> None:
    """Seed the database with sample departments and students."""
    from registrar.database import Database
    from registrar.database.seed_data import seed_sample_data

    configure_logging()

    async def do_seed() -> dict[str, int]:
        database = Database(database_url)
        await database.connect()
        try:
            await database.create_schema()
            async with database.session() as session:
                return await seed_sample_data(session)
        finally:
            await database.close()

    try:
        created = asyncio.run(do_seed())
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)

    click.echo(
        f"✓ Database seeded ({created['departments']} departments, "
        f"{created['students']} students created)"
    )


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
