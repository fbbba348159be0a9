"""
Feeds command - Display the feeds subscribed to in FreshRSS
"""

import logging

from rich.console import Console
from rich.table import Table

from releasarr.config import Config
from releasarr.exceptions import ReleasarrError
from releasarr.freshrss import FreshRSSClient

logger = logging.getLogger(__name__)
console = Console()


def feeds_command(config: Config) -> bool:
    """List FreshRSS subscriptions for every freshrss widget"""
    widgets = [w for w in config.widgets if w.type == "freshrss"]
    if not widgets:
        console.print("[yellow]No FreshRSS widget configured[/yellow]")
        return True

    success = True
    for widget in widgets:
        try:
            with FreshRSSClient(
                widget.freshrss_url,
                widget.freshrss_user,
                widget.freshrss_api_pass,
                skip_ssl=widget.skip_ssl,
            ) as client:
                feeds = client.get_feeds()
        except ReleasarrError as e:
            console.print(f"[red]FreshRSS error:[/red] {e}")
            logger.debug("FreshRSS feed listing failed", exc_info=True)
            success = False
            continue

        table = Table(title=f"FreshRSS feeds of {widget.freshrss_user} ({len(feeds)})")
        table.add_column("ID", style="cyan")
        table.add_column("Title", style="green")
        table.add_column("URL", style="dim")
        for feed in feeds:
            table.add_row(str(feed.id), feed.title, feed.url)
        console.print(table)

    return success
