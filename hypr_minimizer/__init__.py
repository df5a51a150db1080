"""hypr-minimizer - Minimize and restore windows on Hyprland.

This package provides:
- Minimize of the focused window into a hidden special workspace
- Restore by address, via a dmenu-style picker, most recent, or all at once
- A session-scoped record of minimized windows safe under concurrent invocations
- Waybar-compatible status output
"""

__version__ = "0.2.0"
__author__ = "hypr-minimizer contributors"
__license__ = "MIT"

__all__ = ["__version__", "__author__", "__license__"]
