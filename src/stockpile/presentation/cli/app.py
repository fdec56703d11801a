"""Stockpile CLI application using Typer.

This module provides command-line utilities for the Stockpile backend:
secret generation for deployment configuration and log cleanup.
"""

import secrets
from pathlib import Path

import typer
from rich.console import Console

from stockpile.domain.shared.time import format_timestamp
from stockpile.infrastructure.maintenance import (
    append_cleanup_history,
    cleanup_logs,
)

app = typer.Typer(
    name="stockpile",
    help="Stockpile - inventory API CLI",
    no_args_is_help=True,
)
console = Console()

DEFAULT_LOG_DIR = Path("logs")


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

logs_app = typer.Typer(
    name="logs",
    help="Log file maintenance",
    no_args_is_help=True,
)
app.add_typer(logs_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Stockpile configuration.

    Generates the two required token signing secrets:
    - JWT_SECRET: signs access tokens
    - JWT_REFRESH_SECRET: signs refresh tokens

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Stockpile Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # 64 random bytes per secret; the two must differ
    for name in ("JWT_SECRET", "JWT_REFRESH_SECRET"):
        console.print(
            f"[cyan]{name}[/cyan]={secrets.token_urlsafe(64)}",
            soft_wrap=True,
        )

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env or "
        "config/.env.dev file.[/dim]\n"
    )


@logs_app.command("cleanup")
def cleanup(
    log_dir: Path = typer.Option(
        DEFAULT_LOG_DIR,
        "--log-dir",
        envvar="LOG_DIR",
        help="Directory containing the log files to delete",
    ),
) -> None:
    """Delete all *.log files below the log directory.

    A summary line is appended to cleanup_history.log in the same directory.
    """
    console.print(f"Starting log cleanup process at {format_timestamp()}")
    console.print(f"Target directory: {log_dir.resolve()}")

    result = cleanup_logs(log_dir)
    if result.directory_missing:
        console.print(
            f"[yellow]Logger directory does not exist: {result.log_dir}[/yellow]"
        )
        return

    for deleted in result.deleted:
        console.print(f"Deleted: {deleted.path} (Size: {deleted.size} bytes)")
    for path, error in result.errors:
        console.print(f"[red]Error deleting file {path}: {error}[/red]")

    freed = result.bytes_freed
    console.print("\n[bold]=== Log Cleanup Summary ===[/bold]")
    console.print(f"Files deleted: {result.files_deleted}")
    console.print(
        f"Total space freed: {freed / 1024:.2f} KB ({freed / (1024 * 1024):.2f} MB)"
    )
    console.print(f"Cleanup completed at: {format_timestamp()}")

    try:
        append_cleanup_history(result)
    except OSError as e:
        console.print(
            f"[yellow]Warning: Could not write to cleanup history log: {e}[/yellow]"
        )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
