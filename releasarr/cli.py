"""
Command Line Interface (CLI) with Click
"""

import logging
import sys
import time

import click
import schedule
from rich.console import Console

from releasarr.cli_config import load_config_from_args, setup_context
from releasarr.commands import (
    feeds_command,
    list_command,
    render_command,
    render_widgets,
    test_command,
    write_output,
)
from releasarr.config import Config
from releasarr.utils import setup_logging
from releasarr.widgets import Widget

logger = logging.getLogger(__name__)
console = Console()


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="RELEASARR_CONFIG",
    help="YAML configuration file",
)
@click.option("--sonarr-url", envvar="SONARR_URL", help="Sonarr URL")
@click.option("--sonarr-api-key", envvar="SONARR_API_KEY", help="Sonarr API key")
@click.option("--radarr-url", envvar="RADARR_URL", help="Radarr URL")
@click.option("--radarr-api-key", envvar="RADARR_API_KEY", help="Radarr API key")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
)
@click.pass_context
def cli(ctx, config, sonarr_url, sonarr_api_key, radarr_url, radarr_api_key, log_level):
    """Releasarr - Today's Sonarr and Radarr releases as dashboard widgets"""

    # Setup logging
    setup_logging(log_level)

    # Load and validate configuration
    cfg = load_config_from_args(
        config, sonarr_url, sonarr_api_key, radarr_url, radarr_api_key, log_level
    )

    # Setup context
    ctx.ensure_object(dict)
    ctx.obj.update(setup_context(cfg))


@cli.command("list")
@click.pass_context
def list_releases(ctx):
    """List today's releases of every Sonarr/Radarr widget"""
    widgets: list[Widget] = ctx.obj["widgets"]
    if not list_command(widgets):
        sys.exit(1)


@cli.command()
@click.option("--output", "-o", type=click.Path(), help="Write HTML to this file")
@click.pass_context
def render(ctx, output):
    """Render every widget to HTML"""
    widgets: list[Widget] = ctx.obj["widgets"]
    if not render_command(widgets, output):
        sys.exit(1)


@cli.command()
@click.pass_context
def test(ctx):
    """Test connection to every configured service"""
    config: Config = ctx.obj["config"]
    if not test_command(config):
        sys.exit(1)


@cli.command()
@click.pass_context
def feeds(ctx):
    """List the feeds subscribed to in FreshRSS"""
    config: Config = ctx.obj["config"]
    if not feeds_command(config):
        sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o", type=click.Path(), required=True, help="HTML file to keep updated"
)
@click.pass_context
def watch(ctx, output):
    """Refresh widgets as their cache duration expires"""
    widgets: list[Widget] = ctx.obj["widgets"]

    console.print("[bold cyan]Releasarr - Watch Mode[/bold cyan]")
    for widget in widgets:
        console.print(f"  {widget.title}: every {int(widget.cache_duration)} seconds")
    console.print("Press Ctrl+C to stop\n")

    def refresh_page():
        """Update stale widgets and rewrite the page"""
        try:
            html = render_widgets(widgets, force=False)
            write_output(html, output)
            console.print(
                f"[dim]Page refreshed at {time.strftime('%Y-%m-%d %H:%M:%S')}[/dim]"
            )
        except Exception as e:
            console.print(f"[red]Error during refresh:[/red] {e}")
            logger.exception("Error during scheduled refresh")

    # The shortest cache duration drives the loop; each widget checks its own
    interval = max(1, int(min((w.cache_duration for w in widgets), default=300)))
    schedule.every(interval).seconds.do(refresh_page)

    # Run immediately on start
    console.print("[yellow]Running initial refresh...[/yellow]")
    refresh_page()

    # Keep running
    try:
        while True:
            schedule.run_pending()
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Watch mode stopped by user[/yellow]")
        sys.exit(0)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
