import asyncio
import json
import typer
from typing import List, Optional
from pathlib import Path
from .config import AppConfig, DatabaseConfig
from .exceptions import MetalizeException
from .inspector import Metalize
from .logger import setup_logger

app = typer.Typer(help="Relational catalog metadata reader")

def _load_config(config: Path) -> AppConfig:
    try:
        app_config = AppConfig.from_yaml(config)
    except MetalizeException as e:
        typer.echo(f"Error loading config: {e}", err=True)
        raise typer.Exit(code=1)
    setup_logger(app_config.log_level.upper())
    return app_config

def _open(db_config: DatabaseConfig) -> Metalize:
    return Metalize(
        dialect=db_config.dialect,
        connection_config=db_config.connection,
        alias=db_config.alias,
    )

async def _check(db_config: DatabaseConfig):
    metalize = _open(db_config)
    try:
        return await metalize.check_health()
    finally:
        if not metalize.is_closed:
            await metalize.end_connection()

async def _read(db_config: DatabaseConfig, tables: List[str], sequences: List[str]):
    async with _open(db_config) as metalize:
        return await metalize.read(tables=tables, sequences=sequences)

@app.command()
def check_conn(
    config: Path = typer.Option(..., "--config", "-c", help="Path to configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """
    Connectivity health check for every configured database.
    """
    app_config = _load_config(config)
    typer.echo(f"Starting connectivity check for {len(app_config.databases)} databases...")

    failed = False
    for db_config in app_config.databases:
        typer.echo(f"Checking {db_config.alias} ({db_config.dialect.value})...")

        try:
            health = asyncio.run(_check(db_config))
        except MetalizeException as e:
            failed = True
            typer.secho(f"⚠️ Error processing {db_config.alias}: {e}", fg=typer.colors.YELLOW)
            if verbose:
                raise
            continue

        if health.status == "success":
            typer.secho(f"✅ {db_config.alias}: Connection Successful ({health.latency_ms}ms)", fg=typer.colors.GREEN)
        else:
            failed = True
            typer.secho(f"❌ {db_config.alias}: {health.status.value}. Error: {health.error_message}", fg=typer.colors.RED)

    if failed:
        raise typer.Exit(code=1)

@app.command()
def read(
    config: Path = typer.Option(..., "--config", "-c", help="Path to configuration file"),
    db: str = typer.Option(..., "--db", help="Database alias from the config file"),
    table: Optional[List[str]] = typer.Option(None, "--table", "-t", help="Table name, optionally schema-qualified (repeatable)"),
    sequence: Optional[List[str]] = typer.Option(None, "--sequence", "-s", help="Sequence name, optionally schema-qualified (repeatable)"),
):
    """
    Reads table and sequence metadata and prints it as JSON.
    Missing objects are printed as null.
    """
    app_config = _load_config(config)
    try:
        db_config = app_config.get_db_config(db)
        result = asyncio.run(_read(db_config, table or [], sequence or []))
    except Exception as e:
        typer.secho(f"❌ Read failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result.to_dict(), indent=2, default=str))

if __name__ == "__main__":
    app()
