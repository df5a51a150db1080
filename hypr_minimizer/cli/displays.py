"""
Minimized Window Display Module

Rich-formatted listing of minimized windows for the ``list`` command.
"""

import json
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.picker import get_app_icon
from ..models.window import MinimizedWindow


def display_minimized(windows: List[MinimizedWindow], console: Optional[Console] = None) -> None:
    """
    Display minimized windows in a table, oldest first.

    Args:
        windows: Minimized windows from the state store
        console: Rich console (optional, creates new if not provided)
    """
    if console is None:
        console = Console()

    if not windows:
        console.print("[dim]No minimized windows[/dim]")
        return

    table = Table(title=f"Minimized Windows ({len(windows)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Address", style="cyan")
    table.add_column("Class")
    table.add_column("Title")
    table.add_column("Workspace", justify="center")
    table.add_column("Minimized", style="dim")

    for index, window in enumerate(windows, start=1):
        minimized = datetime.fromtimestamp(window.minimized_at / 1e9).strftime("%H:%M:%S")
        table.add_row(
            str(index),
            window.address,
            f"{get_app_icon(window.class_name)} {escape(window.class_name)}",
            escape(window.title) if window.title else "[dim](no title)[/dim]",
            window.original_workspace,
            minimized,
        )

    console.print(table)


def format_minimized_json(windows: List[MinimizedWindow]) -> str:
    """Format minimized windows as a JSON list."""
    return json.dumps([w.to_dict() for w in windows], indent=2, ensure_ascii=False)
