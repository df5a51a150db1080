"""Exception taxonomy for hypr-minimizer.

Exceptions are raised at the adapter seams (Hyprland client, state store,
picker) and classified into two families:

- benign: nothing to do, reported through the exit code only
- error: the operation was refused or could not run, always logged

The ``loggable`` flag decides whether the CLI writes a diagnostics entry.
"""

from typing import Optional, Sequence


class MinimizerError(Exception):
    """Base class for all hypr-minimizer failures."""

    benign: bool = False
    loggable: bool = True

    def diagnostic(self) -> str:
        """Single-line description written to the diagnostics log."""
        return str(self)


class NoFocusedWindow(MinimizerError):
    """Raised when Hyprland reports no focused window."""

    benign = True
    loggable = False

    def __init__(self, message: str = "No focused window to minimize"):
        super().__init__(message)


class NothingToRestore(MinimizerError):
    """Raised when a restore is requested but no window is minimized."""

    benign = True
    loggable = False

    def __init__(self, message: str = "No minimized windows"):
        super().__init__(message)


class NotMinimized(MinimizerError):
    """Raised when an address is not present in the minimized set."""

    benign = True
    loggable = False

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Window {address} is not minimized")


class DuplicateAddress(MinimizerError):
    """Raised when appending a window that is already tracked."""

    benign = True

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Window {address} is already minimized")


class PickerCancelled(MinimizerError):
    """Raised when the picker returns no selection."""

    benign = True
    loggable = False

    def __init__(self, message: str = "Picker cancelled"):
        super().__init__(message)


class PickerUnavailable(MinimizerError):
    """Raised when the picker executable cannot be started."""

    def __init__(self, command: Sequence[str], reason: str):
        self.command = list(command)
        self.reason = reason
        super().__init__(f"Picker {' '.join(self.command)!r} unavailable: {reason}")


class MalformedSelection(MinimizerError):
    """Raised when a picker line does not carry a window address."""

    benign = True

    def __init__(self, line: str):
        self.line = line
        super().__init__(f"Could not recover a window address from selection {line!r}")


class WindowManagerRejected(MinimizerError):
    """Raised when a hyprctl invocation fails or returns an error payload."""

    def __init__(
        self,
        command: Sequence[str],
        stdout: str = "",
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        self.command = list(command)
        self.stdout = (stdout or "").strip()
        self.stderr = (stderr or "").strip()
        self.reason = reason or "command rejected"
        super().__init__(f"hyprctl {self.reason}: {' '.join(self.command)}")

    def diagnostic(self) -> str:
        return (
            f"{self.reason}: command={' '.join(self.command)} "
            f"stdout={self.stdout!r} stderr={self.stderr!r}"
        )


class StateStoreError(MinimizerError):
    """Raised when the state file cannot be written."""


class StateLockTimeout(StateStoreError):
    """Raised when the state file lock cannot be acquired in time."""

    def __init__(self, lock_path: str, timeout: float):
        self.lock_path = lock_path
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:.1f}s waiting for state lock {lock_path}")


class ConfigError(MinimizerError):
    """Raised when the configuration file or environment is invalid."""
