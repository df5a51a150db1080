"""Fake Hyprland client for isolated testing.

Provides window and workspace bookkeeping with the same interface as
HyprlandClient, without running hyprctl.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from hypr_minimizer.core.errors import NoFocusedWindow, WindowManagerRejected
from hypr_minimizer.models.window import Workspace, WindowHandle


@dataclass
class FakeWindow:
    """Fake Hyprland client window."""
    address: str
    class_name: str = "kitty"
    title: str = "Terminal"
    workspace_id: int = 1
    workspace_name: str = "1"

    def to_handle(self) -> WindowHandle:
        """Convert to the parsed hyprctl form."""
        return WindowHandle.model_validate({
            "address": self.address,
            "class": self.class_name,
            "title": self.title,
            "workspace": {"id": self.workspace_id, "name": self.workspace_name},
        })


class FakeHyprland:
    """Stand-in for HyprlandClient."""

    def __init__(self):
        """Initialize fake Hyprland with workspaces 1 and 2."""
        self.windows: Dict[str, FakeWindow] = {}
        self.workspaces: List[Workspace] = [
            Workspace(id=1, name="1"),
            Workspace(id=2, name="2"),
        ]
        self.active_workspace = Workspace(id=1, name="1")
        self.focused: Optional[str] = None

        # Dispatch commands issued, e.g. "movetoworkspacesilent special:minimum,address:0x1"
        self.commands: List[str] = []
        # Every method call, for "never touches Hyprland" assertions
        self.calls: List[str] = []
        # Substrings of dispatch commands that Hyprland should refuse
        self.reject: Set[str] = set()
        self.reject_queries = False

    def add_window(
        self,
        address: str,
        class_name: str = "kitty",
        title: str = "Terminal",
        workspace: Optional[Workspace] = None,
        focus: bool = False,
    ) -> FakeWindow:
        """Map a new window."""
        if workspace is None:
            workspace = self.active_workspace
        window = FakeWindow(address, class_name, title, workspace.id, workspace.name)
        self.windows[address] = window
        if focus:
            self.focused = address
        return window

    def _dispatch(self, dispatcher: str, argument: str) -> None:
        command = f"{dispatcher} {argument}"
        self.commands.append(command)
        if any(pattern in command for pattern in self.reject):
            raise WindowManagerRejected(
                ["hyprctl", "dispatch", dispatcher, argument],
                stdout="Dispatcher refused",
                reason="returned an error payload",
            )

    def _query(self, name: str) -> None:
        self.calls.append(name)
        if self.reject_queries:
            raise WindowManagerRejected(["hyprctl", name, "-j"], stderr="socket error", reason="exited with status 1")

    def get_focused_window(self) -> WindowHandle:
        self._query("get_focused_window")
        if self.focused is None or self.focused not in self.windows:
            raise NoFocusedWindow()
        return self.windows[self.focused].to_handle()

    def get_active_workspace(self) -> Workspace:
        self._query("get_active_workspace")
        return self.active_workspace

    def list_windows(self) -> List[WindowHandle]:
        self._query("list_windows")
        return [w.to_handle() for w in self.windows.values()]

    def list_workspaces(self) -> List[Workspace]:
        self._query("list_workspaces")
        return list(self.workspaces)

    def window_exists(self, address: str) -> bool:
        self._query("window_exists")
        return address in self.windows

    def workspace_exists(self, selector: str) -> bool:
        self._query("workspace_exists")
        if selector.isdigit() and int(selector) >= 1:
            return True
        return any(ws.selector == selector for ws in self.workspaces)

    def move_window_to_special(self, address: str, special_name: str) -> None:
        self.calls.append("move_window_to_special")
        self._dispatch("movetoworkspacesilent", f"special:{special_name},address:{address}")
        window = self.windows.get(address)
        if window is not None:
            window.workspace_id = -98
            window.workspace_name = f"special:{special_name}"
        if self.focused == address:
            self.focused = None

    def move_window_to_workspace(self, address: str, workspace: str) -> None:
        self.calls.append("move_window_to_workspace")
        self._dispatch("movetoworkspacesilent", f"{workspace},address:{address}")
        window = self.windows.get(address)
        if window is None:
            raise WindowManagerRejected(
                ["hyprctl", "dispatch", "movetoworkspacesilent", f"{workspace},address:{address}"],
                stdout="No such window found",
                reason="returned an error payload",
            )
        window.workspace_name = workspace
        window.workspace_id = int(workspace) if workspace.isdigit() else -1337

    def focus_window(self, address: str) -> None:
        self.calls.append("focus_window")
        self._dispatch("focuswindow", f"address:{address}")
        if address not in self.windows:
            raise WindowManagerRejected(
                ["hyprctl", "dispatch", "focuswindow", f"address:{address}"],
                stdout="No such window found",
                reason="returned an error payload",
            )
        self.focused = address
