"""
Commands module for Releasarr CLI
"""

from .feeds_command import feeds_command
from .list_command import list_command
from .render_command import render_command, render_widgets, write_output
from .test_command import test_command

__all__ = [
    "feeds_command",
    "list_command",
    "render_command",
    "render_widgets",
    "test_command",
    "write_output",
]
