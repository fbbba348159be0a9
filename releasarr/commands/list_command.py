"""
List command - Display the releases of every *arr widget
"""

import logging

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from releasarr.utils import format_episode_info
from releasarr.widgets import ReleasesWidget, Widget

logger = logging.getLogger(__name__)
console = Console()


def list_command(widgets: list[Widget]) -> bool:
    """
    Execute the list command logic

    Returns:
        True when every widget updated successfully
    """
    release_widgets = [w for w in widgets if isinstance(w, ReleasesWidget)]
    if not release_widgets:
        console.print("[yellow]No Sonarr or Radarr widget configured[/yellow]")
        return True

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching releases...", total=None)
        for widget in release_widgets:
            progress.update(task, description=f"Fetching {widget.title}...")
            widget.update()
        progress.update(task, completed=True)

    success = True
    for widget in release_widgets:
        if widget.error is not None:
            console.print(f"[red]{widget.title}:[/red] {widget.error}")
            success = False
            continue

        if not widget.releases:
            console.print(f"[yellow]{widget.title}: nothing releasing[/yellow]")
            continue

        table = Table(title=f"{widget.title} ({len(widget.releases)})")
        table.add_column("Service", style="cyan")
        table.add_column("Release", style="green")
        table.add_column("Date", style="blue")
        table.add_column("Grabbed", style="magenta")
        table.add_column("Link", style="dim")

        for release in widget.releases:
            table.add_row(
                release.service,
                format_episode_info(
                    release.title,
                    release.season_number,
                    release.episode_number,
                    release.episode_title,
                ),
                release.air_date,
                "✓" if release.grabbed else "-",
                release.url or "-",
            )

        console.print(table)

    return success
