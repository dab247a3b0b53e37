#!/usr/bin/env python3
"""
serialdl CLI - Incremental downloader for online serials
"""

import typer
from pathlib import Path
from typing import Optional
from rich.console import Console

from . import settings
from .cli.commands import configure_logging, download_command

console = Console()

app = typer.Typer(
    name="serialdl",
    help="📚 Incremental periodic downloader for online serials",
    add_completion=False,
)

@app.command()
def download(
    url: str = typer.Argument(..., help="The main page (e.g. table of contents) of the content to download"),
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Custom output path (defaults to the title)"),
    time_limit: int = typer.Option(settings.DEFAULT_TIME_LIMIT_MS, "--time-limit", "-t", min=1, help="Minimum ms per request. Can't be zero."),
    connections: int = typer.Option(settings.DEFAULT_CONNECTIONS, "--connections", "-c", min=0, help="Concurrent connections limit. Zero indicates no limit."),
    incremental: bool = typer.Option(False, "--incremental", "-i", help="Auto-detect previously downloaded chapters and only download new ones"),
    timeout: float = typer.Option(settings.REQUEST_TIMEOUT, "--timeout", help="HTTP timeout in seconds"),
    user_agent: Optional[str] = typer.Option(None, "--user-agent", help="User-Agent header sent with every request"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    📥 Download a serial into a single HTML file

    Useful on slow connections, going offline, or because online content
    has a tendency to disappear.
    """
    configure_logging(verbose)
    download_command(url, path, time_limit, connections, incremental, timeout, user_agent)

@app.command()
def version():
    """Show version information"""
    console.print(f"📚 [bold blue]serialdl v{settings.VERSION}[/bold blue] - Incremental downloader for online serials")

def main():
    """Entry point for the CLI"""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n👋 [yellow]Interrupted, rerun with --incremental to resume[/yellow]")

if __name__ == "__main__":
    main()
