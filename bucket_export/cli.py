# cli.py
from __future__ import annotations

import logging
from typing import Optional, List

import typer
import click

from .config import load_config
from .core import client_from_credentials, list_buckets, check_region
from .download import download_bucket
from .errors import ConfigError, BucketExportError, describe_error, setup_logging

app = typer.Typer(
    add_completion=False,
    help="Cloud Object Storage bucket export CLI",
    context_settings={"help_option_names": ["-h", "--help"]},
)

log = logging.getLogger("bucket_export.cli")

# ---------------- Helpers ----------------
def _error(message: str) -> None:
    typer.echo(f"{typer.style('error', fg=typer.colors.RED)} {message}", err=True)

def _success(message: str) -> None:
    typer.echo(f"{typer.style('success', fg=typer.colors.GREEN)} {message}")

def pick_bucket(buckets: List[str]) -> str:
    """Show a numbered bucket list and return the one the user picks."""
    typer.echo(f"Choose a bucket to export: {typer.style('(enter a number)', dim=True)}")
    for i, name in enumerate(buckets, start=1):
        typer.echo(f"  {i}) {name}")
    choice = click.prompt("Bucket", type=click.IntRange(1, len(buckets)), default=1)
    return buckets[choice - 1]

# ---------------- Root options (global) ----------------
@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """
    Set up logging once for every command.
    """
    level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level=level)

# ---------------- EXPORT ----------------
@app.command("export")
def cmd_export(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
):
    """Download every object of an interactively chosen bucket."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=1)
    creds = cfg.credentials

    typer.echo("Authenticating...")
    try:
        buckets = list_buckets(creds, cfg.client)
    except Exception as e:
        log.debug("Listing buckets failed", exc_info=True)
        _error(describe_error(e))
        raise typer.Exit(code=1)

    if not buckets:
        typer.echo("No buckets found for these credentials.")
        return

    bucket = pick_bucket(buckets)

    typer.echo("Checking bucket...")
    if not check_region(creds, bucket, cfg.client):
        _error(f"The selected bucket is not in the region `{creds.region}`.")
        raise typer.Exit(code=1)

    typer.echo(f"Exporting {bucket}...")
    try:
        s3 = client_from_credentials(creds, cfg.client)
        download_bucket(
            s3,
            bucket,
            cfg.export.output_root,
            max_workers=cfg.export.max_workers,
            progress=cfg.export.progress,
        )
    except BucketExportError as e:
        _error(str(e))
        raise typer.Exit(code=1)
    except Exception as e:
        log.debug("Export of %s failed", bucket, exc_info=True)
        _error(describe_error(e))
        raise typer.Exit(code=1)

    _success("Export complete.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
