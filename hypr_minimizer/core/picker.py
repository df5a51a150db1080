"""dmenu-style picker integration.

Each minimized window becomes one picker line ending in a bracketed
address token, e.g.::

    󰈹 firefox - Mozilla Firefox [0x55d1e2c3a4b0]

The token is parsed back from the selected line, so titles never need to
be matched.
"""

import logging
import re
import subprocess
from typing import List, Sequence

from ..models.window import MinimizedWindow, MinimizedWindowSet
from .errors import MalformedSelection, PickerCancelled, PickerUnavailable


logger = logging.getLogger(__name__)

# Class substring -> Nerd Font glyph; first match wins
APP_ICONS = [
    ("firefox", ""),      # nf-fa-firefox
    ("alacritty", ""),    # nf-fa-terminal
    ("discord", "󰙯"),   # nf-md-discord
    ("steam", ""),        # nf-fa-steam
    ("chromium", ""),     # nf-fa-chrome
    ("code", "󰨞"),      # nf-md-microsoft_visual_studio_code
    ("spotify", ""),      # nf-fa-spotify
    ("ghostty", ""),      # nf-oct-terminal
    ("kitty", ""),        # nf-fa-terminal
]
DEFAULT_ICON = "󰖲"  # nf-md-window_maximize

ADDRESS_TOKEN = re.compile(r"\[(?P<address>0x[0-9a-fA-F]+)\]\s*$")


def get_app_icon(class_name: str) -> str:
    """Get Nerd Font icon for a window class."""
    lower = class_name.lower()
    for name, icon in APP_ICONS:
        if name in lower:
            return icon
    return DEFAULT_ICON


def _single_line(text: str) -> str:
    return " ".join(text.split())


class PickerAdapter:
    """Runs the picker and maps lines back to window addresses."""

    def __init__(self, command: Sequence[str], timeout: float = 120.0):
        """Initialize picker adapter.

        Args:
            command: Picker command line, e.g. ["walker", "--dmenu"]
            timeout: Seconds before an unanswered picker counts as cancelled
        """
        self.command = list(command)
        self.timeout = timeout

    def format_line(self, window: MinimizedWindow) -> str:
        icon = get_app_icon(window.class_name)
        class_name = _single_line(window.class_name) or "unknown"
        title = _single_line(window.title) or "(no title)"
        return f"{icon} {class_name} - {title} [{window.address}]"

    def format(self, windows: MinimizedWindowSet) -> List[str]:
        """One display line per window, oldest first."""
        return [self.format_line(w) for w in windows.windows]

    def invoke(self, lines: Sequence[str]) -> str:
        """Show the picker and return the selected line.

        Raises:
            PickerCancelled: On empty output, non-zero exit or timeout
            PickerUnavailable: If the picker cannot be started
        """
        try:
            result = subprocess.run(
                self.command,
                input="\n".join(lines) + "\n",
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise PickerCancelled(f"Picker timed out after {self.timeout:.0f}s")
        except OSError as e:
            raise PickerUnavailable(self.command, str(e))

        logger.debug(f"Subprocess call: {' '.join(self.command)} -> {result.returncode}")

        selection = result.stdout.strip()
        if result.returncode != 0 or not selection:
            raise PickerCancelled()
        # Some pickers echo multiple lines; only the first is the choice
        return selection.splitlines()[0]

    def parse_selection(self, line: str) -> str:
        """Recover the window address from a picker line.

        Raises:
            MalformedSelection: If the line carries no address token
        """
        match = ADDRESS_TOKEN.search(line)
        if not match:
            raise MalformedSelection(line)
        return match.group("address")

    def choose(self, windows: MinimizedWindowSet) -> str:
        """Let the user pick a window and return its address."""
        return self.parse_selection(self.invoke(self.format(windows)))
