"""
Render command - Produce the HTML of every widget
"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console

from releasarr.rendering import render_page
from releasarr.widgets import Widget

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def render_widgets(
    widgets: list[Widget], now: datetime | None = None, force: bool = True
) -> str:
    """Update widgets that need it and render them into one page"""
    fragments = []
    for widget in widgets:
        if force or widget.requires_update(now):
            widget.update(now)
        fragments.append(widget.render())
    return render_page(fragments)


def write_output(html: str, output: str | None) -> None:
    if output:
        Path(output).write_text(html, encoding="utf-8")
        logger.info(f"Wrote {len(html)} bytes to {output}")
    else:
        print(html)


def render_command(widgets: list[Widget], output: str | None = None) -> bool:
    """
    Execute the render command logic

    Returns:
        True when every widget has content to show
    """
    html = render_widgets(widgets)
    write_output(html, output)

    failed = [w for w in widgets if w.error is not None]
    for widget in failed:
        console.print(f"[red]{widget.title}:[/red] {widget.error}")
    return not failed
