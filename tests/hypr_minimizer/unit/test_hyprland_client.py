"""Unit tests for the hyprctl client."""

import json
import subprocess
from unittest.mock import Mock, patch

import pytest

from hypr_minimizer.core.errors import NoFocusedWindow, WindowManagerRejected
from hypr_minimizer.core.hyprland import HyprlandClient


def completed(stdout="", returncode=0, stderr=""):
    return Mock(stdout=stdout, stderr=stderr, returncode=returncode)


class TestQueries:
    """Test JSON queries."""

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_get_focused_window(self, mock_run):
        mock_run.return_value = completed(json.dumps({
            "address": "0x55d1e2c3a4b0",
            "class": "firefox",
            "title": "Mozilla Firefox",
            "workspace": {"id": 2, "name": "2"},
        }))

        window = HyprlandClient().get_focused_window()

        assert window.address == "0x55d1e2c3a4b0"
        assert window.workspace.selector == "2"
        args, kwargs = mock_run.call_args
        assert args[0] == ["hyprctl", "activewindow", "-j"]
        assert kwargs["timeout"] == 3.0

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_no_focused_window(self, mock_run):
        """Hyprland answers an empty object when nothing has focus."""
        mock_run.return_value = completed("{}")

        with pytest.raises(NoFocusedWindow):
            HyprlandClient().get_focused_window()

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_invalid_reply_means_no_focus(self, mock_run):
        """Hyprland answers "Invalid" when the focused window just closed."""
        mock_run.return_value = completed("Invalid\n")

        with pytest.raises(NoFocusedWindow):
            HyprlandClient().get_focused_window()

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_invalid_json(self, mock_run):
        mock_run.return_value = completed("HYPRLAND_INSTANCE_SIGNATURE not set")

        with pytest.raises(WindowManagerRejected) as exc_info:
            HyprlandClient().get_active_workspace()
        assert exc_info.value.reason == "returned invalid JSON"

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_get_active_workspace(self, mock_run):
        mock_run.return_value = completed(json.dumps({"id": -1337, "name": "music", "monitor": "DP-1"}))

        workspace = HyprlandClient().get_active_workspace()

        assert workspace.selector == "name:music"

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_list_windows_skips_bad_entries(self, mock_run):
        mock_run.return_value = completed(json.dumps([
            {"address": "0x1", "class": "kitty", "title": "a"},
            {"title": "no address"},
        ]))

        windows = HyprlandClient().list_windows()

        assert [w.address for w in windows] == ["0x1"]

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_window_exists(self, mock_run):
        mock_run.return_value = completed(json.dumps([{"address": "0x1"}]))
        client = HyprlandClient()

        assert client.window_exists("0x1")
        assert not client.window_exists("0x2")

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_numbered_workspace_always_exists(self, mock_run):
        """Numbered workspaces are created on demand; no query needed."""
        assert HyprlandClient().workspace_exists("7")
        mock_run.assert_not_called()

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_named_workspace_must_be_listed(self, mock_run):
        mock_run.return_value = completed(json.dumps([
            {"id": 1, "name": "1"},
            {"id": -1337, "name": "music"},
        ]))
        client = HyprlandClient()

        assert client.workspace_exists("name:music")
        assert not client.workspace_exists("name:gone")


class TestDispatch:
    """Test dispatch commands."""

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_move_to_special(self, mock_run):
        mock_run.return_value = completed("ok\n")

        HyprlandClient().move_window_to_special("0x1", "minimum")

        assert mock_run.call_args[0][0] == [
            "hyprctl", "dispatch", "movetoworkspacesilent", "special:minimum,address:0x1",
        ]

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_move_to_workspace_and_focus(self, mock_run):
        mock_run.return_value = completed("ok")
        client = HyprlandClient()

        client.move_window_to_workspace("0x1", "name:music")
        client.focus_window("0x1")

        commands = [call[0][0] for call in mock_run.call_args_list]
        assert commands == [
            ["hyprctl", "dispatch", "movetoworkspacesilent", "name:music,address:0x1"],
            ["hyprctl", "dispatch", "focuswindow", "address:0x1"],
        ]

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_error_payload_is_rejection(self, mock_run):
        """hyprctl exits 0 even when the dispatcher refuses."""
        mock_run.return_value = completed("No such window found")

        with pytest.raises(WindowManagerRejected) as exc_info:
            HyprlandClient().focus_window("0xdead")

        error = exc_info.value
        assert error.stdout == "No such window found"
        assert "focuswindow" in error.diagnostic()
        assert "No such window found" in error.diagnostic()

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_nonzero_exit(self, mock_run):
        mock_run.return_value = completed("", returncode=1, stderr="Couldn't connect to socket")

        with pytest.raises(WindowManagerRejected) as exc_info:
            HyprlandClient().focus_window("0x1")

        assert exc_info.value.reason == "exited with status 1"
        assert exc_info.value.stderr == "Couldn't connect to socket"

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="hyprctl", timeout=0.5)

        with pytest.raises(WindowManagerRejected) as exc_info:
            HyprlandClient(timeout=0.5).focus_window("0x1")

        assert "timed out" in exc_info.value.reason

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("hyprctl")

        with pytest.raises(WindowManagerRejected) as exc_info:
            HyprlandClient().get_active_workspace()

        assert exc_info.value.reason == "could not be executed"

    @patch('hypr_minimizer.core.hyprland.subprocess.run')
    def test_custom_executable(self, mock_run):
        mock_run.return_value = completed("ok")

        HyprlandClient(hyprctl="/usr/bin/hyprctl").focus_window("0x1")

        assert mock_run.call_args[0][0][0] == "/usr/bin/hyprctl"
