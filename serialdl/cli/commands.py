"""
CLI commands for serialdl
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.logging import RichHandler
from rich.panel import Panel

from .. import settings
from ..downloader import Downloader
from ..errors import IO_EXIT_CODE, SerialDLError
from ..extractors.royalroad import RoyalRoadExtractor
from ..fetch import Fetcher, build_session
from ..models import DownloadOptions
from .progress import CLIProgressTracker, console


def configure_logging(verbose: bool = False):
    """Route log records through the shared rich console"""
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("serialdl").setLevel(logging.DEBUG if verbose else logging.INFO)


def download_command(
    url: str,
    path: Optional[Path] = None,
    time_limit: int = settings.DEFAULT_TIME_LIMIT_MS,
    connections: int = settings.DEFAULT_CONNECTIONS,
    incremental: bool = False,
    timeout: float = settings.REQUEST_TIMEOUT,
    user_agent: Optional[str] = None,
):
    """
    Main download command - validates options and runs one download
    """
    fields = dict(
        url=url,
        path=path,
        time_limit_ms=time_limit,
        connections=connections,
        incremental=incremental,
        timeout=timeout,
    )
    if user_agent:
        fields["user_agent"] = user_agent

    try:
        options = DownloadOptions(**fields)
    except ValidationError as e:
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            console.print(f"❌ [red]Invalid option {location}:[/red] {error['msg']}")
        raise typer.Exit(code=1)

    summary_table = f"""[bold]URL:[/bold] {options.url}
[bold]Interval:[/bold] {options.time_limit_ms} ms
[bold]Connections:[/bold] {options.connections or 'unlimited'}
[bold]Incremental:[/bold] {'yes' if options.incremental else 'no'}"""
    console.print(Panel(
        summary_table,
        title="[bold blue]📋 Download Configuration",
        border_style="blue",
        padding=(1, 2)
    ))

    tracker = CLIProgressTracker()
    fetcher = Fetcher(build_session(options.user_agent), timeout=options.timeout)
    downloader = Downloader(options, RoyalRoadExtractor(), fetcher=fetcher, listener=tracker)

    try:
        summary = downloader.run()
    except SerialDLError as e:
        tracker.show_error(e.kind.capitalize(), str(e))
        raise typer.Exit(code=e.exit_code)
    except OSError as e:
        tracker.show_error("I/O", str(e))
        raise typer.Exit(code=IO_EXIT_CODE)
    finally:
        tracker.stop()
        fetcher.close()

    tracker.complete(summary)
    console.print(f"\n🎉 [bold green]Success![/bold green] Saved to [bold]{summary.path.resolve()}[/bold]")
