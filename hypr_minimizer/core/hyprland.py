"""hyprctl client for querying and driving Hyprland.

This module wraps the ``hyprctl`` command line:
- Focused window (activewindow -j)
- Active workspace (activeworkspace -j)
- Clients and workspaces (clients -j, workspaces -j)
- Dispatching moves and focus changes (dispatch ...)

Every call is a single synchronous subprocess bounded by a timeout. Nothing
is retried; a failed invocation raises WindowManagerRejected with the
command, stdout and stderr attached.
"""

import json
import logging
import subprocess
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from ..models.window import Workspace, WindowHandle
from .errors import NoFocusedWindow, WindowManagerRejected


logger = logging.getLogger(__name__)

DISPATCH_OK = "ok"


class HyprlandClient:
    """Synchronous wrapper around hyprctl."""

    def __init__(self, hyprctl: str = "hyprctl", timeout: float = 3.0):
        """Initialize Hyprland client.

        Args:
            hyprctl: hyprctl executable name or path
            timeout: Seconds before a single invocation is abandoned
        """
        self.hyprctl = hyprctl
        self.timeout = timeout

    def _run(self, args: Sequence[str]) -> str:
        """Run hyprctl with arguments and return stdout.

        Raises:
            WindowManagerRejected: On non-zero exit, timeout or missing binary
        """
        cmd = [self.hyprctl, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise WindowManagerRejected(
                cmd,
                stdout=_decode(e.stdout),
                stderr=_decode(e.stderr),
                reason=f"timed out after {self.timeout:.1f}s",
            )
        except OSError as e:
            raise WindowManagerRejected(cmd, stderr=str(e), reason="could not be executed")

        logger.debug(f"Subprocess call: {' '.join(cmd)} -> {result.returncode}")
        if result.stdout:
            logger.debug(f"  stdout: {result.stdout[:200]}")
        if result.stderr:
            logger.debug(f"  stderr: {result.stderr[:200]}")

        if result.returncode != 0:
            raise WindowManagerRejected(
                cmd,
                stdout=result.stdout,
                stderr=result.stderr,
                reason=f"exited with status {result.returncode}",
            )
        return result.stdout

    def _query(self, request: str) -> Any:
        """Run a JSON query (``hyprctl <request> -j``)."""
        args = [request, "-j"]
        output = self._run(args)
        try:
            return json.loads(output)
        except json.JSONDecodeError:
            raise WindowManagerRejected(
                [self.hyprctl, *args],
                stdout=output,
                reason="returned invalid JSON",
            )

    def dispatch(self, dispatcher: str, argument: str) -> None:
        """Run ``hyprctl dispatch <dispatcher> <argument>``.

        hyprctl exits 0 even for refused dispatches, so anything other than
        an ``ok`` reply counts as a rejection.

        Raises:
            WindowManagerRejected: If the dispatch is refused
        """
        args = ["dispatch", dispatcher, argument]
        output = self._run(args)
        if output.strip() != DISPATCH_OK:
            raise WindowManagerRejected(
                [self.hyprctl, *args],
                stdout=output,
                reason="returned an error payload",
            )

    def get_focused_window(self) -> WindowHandle:
        """Get the focused window.

        Raises:
            NoFocusedWindow: If no window has focus
            WindowManagerRejected: If the query fails
        """
        # Without focus, activewindow -j prints "Invalid" or an empty object
        output = self._run(["activewindow", "-j"])
        try:
            data = json.loads(output)
        except json.JSONDecodeError:
            raise NoFocusedWindow()
        if not isinstance(data, dict) or not data.get("address"):
            raise NoFocusedWindow()
        try:
            return WindowHandle.model_validate(data)
        except ValidationError as e:
            raise WindowManagerRejected(
                [self.hyprctl, "activewindow", "-j"],
                stdout=json.dumps(data),
                reason=f"returned an unexpected window ({e.error_count()} errors)",
            )

    def get_active_workspace(self) -> Workspace:
        """Get the focused workspace.

        Raises:
            WindowManagerRejected: If the query fails
        """
        data = self._query("activeworkspace")
        try:
            return Workspace.model_validate(data)
        except ValidationError:
            raise WindowManagerRejected(
                [self.hyprctl, "activeworkspace", "-j"],
                stdout=json.dumps(data),
                reason="returned an unexpected workspace",
            )

    def list_windows(self) -> List[WindowHandle]:
        """Get all client windows.

        Raises:
            WindowManagerRejected: If the query fails
        """
        data = self._query("clients")
        if not isinstance(data, list):
            raise WindowManagerRejected(
                [self.hyprctl, "clients", "-j"],
                stdout=json.dumps(data),
                reason="returned an unexpected client list",
            )
        windows = []
        for item in data:
            try:
                windows.append(WindowHandle.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Skipping unparsable client entry: {e}")
        return windows

    def list_workspaces(self) -> List[Workspace]:
        """Get all existing workspaces.

        Raises:
            WindowManagerRejected: If the query fails
        """
        data = self._query("workspaces")
        if not isinstance(data, list):
            raise WindowManagerRejected(
                [self.hyprctl, "workspaces", "-j"],
                stdout=json.dumps(data),
                reason="returned an unexpected workspace list",
            )
        workspaces = []
        for item in data:
            try:
                workspaces.append(Workspace.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Skipping unparsable workspace entry: {e}")
        return workspaces

    def window_exists(self, address: str) -> bool:
        """Check whether a window with the address is still mapped."""
        return any(w.address == address for w in self.list_windows())

    def workspace_exists(self, selector: str) -> bool:
        """Check whether a workspace selector can be moved to.

        Numbered workspaces are created on demand, so they always resolve.
        Named workspaces are destroyed once empty and must still be present.
        """
        if selector.isdigit() and int(selector) >= 1:
            return True
        return any(ws.selector == selector for ws in self.list_workspaces())

    def move_window_to_special(self, address: str, special_name: str) -> None:
        """Hide a window in ``special:<special_name>`` without following it."""
        self.dispatch(
            "movetoworkspacesilent",
            f"special:{special_name},address:{address}",
        )

    def move_window_to_workspace(self, address: str, workspace: str) -> None:
        """Move a window to a workspace selector without following it."""
        self.dispatch("movetoworkspacesilent", f"{workspace},address:{address}")

    def focus_window(self, address: str) -> None:
        """Focus a window, switching to its workspace."""
        self.dispatch("focuswindow", f"address:{address}")


def _decode(value: Optional[Any]) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
