"""Click CLI for running and preparing the API."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from mpoly.config import get_settings
from mpoly.services.auth_service import AuthService
from mpoly.store import Collection, DocumentStore


@click.group()
def cli() -> None:
    """Mpoly API: serve, seed demo data, and hash passwords."""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST setting).")
@click.option("--port", default=None, type=int, help="Port (default: PORT setting).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "mpoly.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command()
@click.option(
    "--data-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the data files (default: DATA_DIR setting).",
)
@click.option("--force", is_flag=True, help="Overwrite existing data files.")
@click.option(
    "--password",
    default=None,
    help="Password for every demo account (default: password123).",
)
def seed(data_dir: Path | None, force: bool, password: str | None) -> None:
    """Write demo users.xml and records.xml."""
    from mpoly.seed import DEMO_PASSWORD, seed_store

    settings = get_settings()
    store = DocumentStore(
        data_dir or settings.data_dir,
        users_file=settings.users_file,
        records_file=settings.records_file,
    )

    existing = [store.path_for(c) for c in Collection if store.exists(c)]
    if existing and not force:
        for path in existing:
            click.echo(f"Refusing to overwrite {path} (use --force).", err=True)
        sys.exit(1)

    asyncio.run(seed_store(store, password or DEMO_PASSWORD))
    for collection in Collection:
        click.echo(f"Wrote {store.path_for(collection)}")


@cli.command("hash-password")
@click.argument("password")
def hash_password(password: str) -> None:
    """Print a bcrypt hash suitable for a users.xml <password> field."""
    click.echo(AuthService.hash_password(password))
