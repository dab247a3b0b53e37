"""
Rich-based progress tracking for CLI mode
"""

from pathlib import Path
from typing import Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from ..downloader import DownloadListener
from ..items import DownloadSummary, UnitLocator

console = Console()


class CLIProgressTracker(DownloadListener):
    """
    Progress bar over the units of a serial, fed by the downloader
    """

    def __init__(self, console: Console = console):
        self.console = console
        self.progress: Optional[Progress] = None
        self.download_task = None
        self.units_saved = 0

    def on_start(self, path: Path, total: int, pending: int):
        """Start the download phase"""
        if pending == 0:
            self.console.print(f"✅ [green]Nothing new to download, {total} chapters already saved[/green]")
            return

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
        )
        self.progress.start()
        self.download_task = self.progress.add_task(
            f"📥 Downloading {pending} of {total} chapters",
            total=pending,
        )

    def on_unit_saved(self, locator: UnitLocator, total: int, title: str):
        """Advance after each chapter is appended"""
        self.units_saved += 1
        if self.download_task is not None:
            self.progress.update(
                self.download_task,
                advance=1,
                description=f"📥 {locator.ordinal + 1}/{total}: {title}",
            )

    def stop(self):
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
            self.download_task = None

    def complete(self, summary: DownloadSummary):
        """Stop the bar and show the final summary"""
        self.stop()

        table = Table(show_header=False, show_edge=False, pad_edge=False)
        table.add_column("", style="bold green")
        table.add_column("", style="white")

        table.add_row("📄 Chapters downloaded:", str(summary.units_downloaded))
        table.add_row("⏭️  Already saved:", str(summary.units_skipped))
        table.add_row("📚 Chapters listed:", str(summary.units_total))
        if summary.backup_path is not None:
            table.add_row("💾 Backup:", str(summary.backup_path))

        panel = Panel(
            Align.center(table),
            title="[bold green]✨ Download Completed Successfully!",
            border_style="green"
        )
        self.console.print(panel)

    def show_error(self, kind: str, error: str):
        """Show error message"""
        self.stop()
        self.console.print(f"❌ [bold red]{kind} error:[/bold red] {error}")
