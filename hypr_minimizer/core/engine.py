"""
Minimize Engine

Minimize/restore state machine on top of the Hyprland client, the state
store and the picker.

A window moves Visible -> Minimized only after Hyprland confirms the hide,
and Minimized -> Visible as soon as its record is removed. A failed restore
therefore leaves the window untracked and is reported as a rejection.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..models.window import MinimizedWindow, StatusPayload, Workspace, WindowHandle
from .config import MinimizerConfig
from .errors import (
    DuplicateAddress,
    MalformedSelection,
    MinimizerError,
    NoFocusedWindow,
    NotMinimized,
    NothingToRestore,
    PickerCancelled,
    PickerUnavailable,
    StateStoreError,
    WindowManagerRejected,
)
from .hyprland import HyprlandClient
from .picker import PickerAdapter
from .state_store import StateStore


logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Discriminant of every engine operation."""

    SUCCESS = "success"
    NOTHING_TO_MINIMIZE = "nothing_to_minimize"
    NOTHING_TO_RESTORE = "nothing_to_restore"
    NOT_MINIMIZED = "not_minimized"
    PICKER_CANCELLED = "picker_cancelled"
    MALFORMED_SELECTION = "malformed_selection"
    REJECTED = "rejected"
    ERROR = "error"

    @property
    def is_benign(self) -> bool:
        """Nothing-to-do outcomes of a keybinding fired without a target."""
        return self in BENIGN_OUTCOMES


BENIGN_OUTCOMES = frozenset({
    Outcome.NOTHING_TO_MINIMIZE,
    Outcome.NOTHING_TO_RESTORE,
    Outcome.NOT_MINIMIZED,
    Outcome.PICKER_CANCELLED,
    Outcome.MALFORMED_SELECTION,
})


@dataclass
class OperationResult:
    """Result of an engine operation"""
    outcome: Outcome
    message: str = ""
    windows: List[MinimizedWindow] = field(default_factory=list)
    failures: List[MinimizerError] = field(default_factory=list)
    status: Optional[StatusPayload] = None

    @property
    def success(self) -> bool:
        return self.outcome is Outcome.SUCCESS


def _nothing_to_restore() -> OperationResult:
    e = NothingToRestore()
    logger.info(str(e))
    return OperationResult(Outcome.NOTHING_TO_RESTORE, str(e))


class MinimizeEngine:
    """Minimize and restore Hyprland windows.

    Example:
        >>> engine = MinimizeEngine.from_config(load_config())
        >>> engine.minimize().outcome
        <Outcome.SUCCESS: 'success'>
    """

    def __init__(
        self,
        client: HyprlandClient,
        store: StateStore,
        picker: Optional[PickerAdapter] = None,
        special_workspace: str = "minimum",
        restore_target: str = "original",
        ignored_classes: Optional[List[str]] = None,
    ):
        """Initialize minimize engine.

        Args:
            client: Hyprland client
            store: Minimized-window state store
            picker: Picker used by interactive restore
            special_workspace: Name of the special workspace holding hidden windows
            restore_target: "original" (window's own workspace) or "current"
            ignored_classes: Window classes that are never minimized
        """
        self.client = client
        self.store = store
        self.picker = picker
        self.special_workspace = special_workspace
        self.restore_target = restore_target
        self.ignored_classes = {c.lower() for c in (ignored_classes or [])}

    @classmethod
    def from_config(cls, config: MinimizerConfig) -> "MinimizeEngine":
        return cls(
            client=HyprlandClient(hyprctl=config.hyprctl, timeout=config.command_timeout),
            store=StateStore(
                config.state_file,
                lock_file=config.lock_file,
                lock_timeout=config.lock_timeout,
            ),
            picker=PickerAdapter(config.picker_command, timeout=config.picker_timeout),
            special_workspace=config.special_workspace,
            restore_target=config.restore_target,
            ignored_classes=config.ignored_classes,
        )

    # ------------------------------------------------------------------
    # Minimize
    # ------------------------------------------------------------------

    def minimize(self) -> OperationResult:
        """Hide the focused window in the special workspace."""
        try:
            window = self.client.get_focused_window()
        except NoFocusedWindow as e:
            logger.info(str(e))
            return OperationResult(Outcome.NOTHING_TO_MINIMIZE, str(e))
        except WindowManagerRejected as e:
            return OperationResult(Outcome.REJECTED, "Could not query the focused window", failures=[e])

        if window.class_name.lower() in self.ignored_classes:
            message = f"Window class {window.class_name!r} is never minimized"
            logger.info(message)
            return OperationResult(Outcome.NOTHING_TO_MINIMIZE, message)

        if window.workspace is not None and window.workspace.is_special:
            message = f"Window {window.address} is already on {window.workspace.name}"
            logger.info(message)
            return OperationResult(Outcome.NOTHING_TO_MINIMIZE, message)

        try:
            origin = self._origin_workspace(window)
        except WindowManagerRejected as e:
            return OperationResult(Outcome.REJECTED, "Could not query the active workspace", failures=[e])

        record = MinimizedWindow.from_window(window, origin, time.time_ns())

        try:
            self.client.move_window_to_special(window.address, self.special_workspace)
        except WindowManagerRejected as e:
            return OperationResult(
                Outcome.REJECTED,
                f"Hyprland refused to minimize {window.class_name or window.address}",
                failures=[e],
            )

        try:
            stored = self.store.append(record)
        except DuplicateAddress as e:
            logger.warning(f"minimize: {e}; keeping existing record")
            return OperationResult(Outcome.SUCCESS, str(e), windows=[record])
        except StateStoreError as e:
            failures: List[MinimizerError] = [e]
            self._undo_minimize(record, failures)
            return OperationResult(
                Outcome.ERROR,
                f"Could not record minimized window {window.address}",
                failures=failures,
            )

        logger.info(f"Minimized {stored.address} ({stored.class_name}) from workspace {stored.original_workspace}")
        return OperationResult(
            Outcome.SUCCESS,
            f"Minimized {stored.class_name or stored.address}",
            windows=[stored],
        )

    def _origin_workspace(self, window: WindowHandle) -> Workspace:
        if window.workspace is not None:
            return window.workspace
        return self.client.get_active_workspace()

    def _undo_minimize(self, record: MinimizedWindow, failures: List[MinimizerError]) -> None:
        """Bring back a window whose record could not be stored."""
        try:
            self.client.move_window_to_workspace(record.address, record.original_workspace)
            self.client.focus_window(record.address)
        except WindowManagerRejected as e:
            failures.append(e)

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    def restore(self, address: str) -> OperationResult:
        """Restore one minimized window by address."""
        try:
            record = self.store.remove(address)
        except NotMinimized as e:
            logger.info(str(e))
            return OperationResult(Outcome.NOT_MINIMIZED, str(e))
        except StateStoreError as e:
            return OperationResult(Outcome.ERROR, "Could not update minimized windows", failures=[e])

        try:
            target = self._restore_record(record)
        except WindowManagerRejected as e:
            return OperationResult(
                Outcome.REJECTED,
                f"Hyprland refused to restore {record.class_name or record.address}; minimize it again if needed",
                windows=[record],
                failures=[e],
            )

        return OperationResult(
            Outcome.SUCCESS,
            f"Restored {record.class_name or record.address} to workspace {target}",
            windows=[record],
        )

    def restore_interactive(self) -> OperationResult:
        """Let the user pick a minimized window and restore it."""
        windows = self.store.load()
        if not len(windows):
            return _nothing_to_restore()

        if self.picker is None:
            return OperationResult(Outcome.ERROR, "No picker configured")

        try:
            address = self.picker.choose(windows)
        except PickerCancelled as e:
            logger.info(str(e))
            return OperationResult(Outcome.PICKER_CANCELLED, str(e))
        except MalformedSelection as e:
            return OperationResult(Outcome.MALFORMED_SELECTION, str(e), failures=[e])
        except PickerUnavailable as e:
            return OperationResult(Outcome.ERROR, str(e), failures=[e])

        return self.restore(address)

    def restore_last(self) -> OperationResult:
        """Restore the most recently minimized window."""
        latest = self.store.peek_latest()
        if latest is None:
            return _nothing_to_restore()
        return self.restore(latest.address)

    def restore_all(self) -> OperationResult:
        """Restore every minimized window, oldest first.

        Each window is attempted independently; one rejection does not stop
        the batch. The last successfully restored window ends up focused.
        """
        try:
            drained = self.store.drain()
        except StateStoreError as e:
            return OperationResult(Outcome.ERROR, "Could not update minimized windows", failures=[e])

        if not drained:
            return _nothing_to_restore()

        restored: List[MinimizedWindow] = []
        failures: List[MinimizerError] = []
        for record in drained:
            try:
                self._restore_record(record)
            except WindowManagerRejected as e:
                logger.info(f"restore-all: {record.address} failed, continuing")
                failures.append(e)
            else:
                restored.append(record)

        message = f"Restored {len(restored)} of {len(drained)} window(s)"
        if failures:
            return OperationResult(Outcome.REJECTED, message, windows=restored, failures=failures)
        return OperationResult(Outcome.SUCCESS, message, windows=restored)

    def _restore_record(self, record: MinimizedWindow) -> str:
        """Move a removed record's window back and focus it.

        Returns:
            Workspace selector the window was moved to

        Raises:
            WindowManagerRejected: If the move or focus is refused
        """
        target = self._resolve_target(record)
        self.client.move_window_to_workspace(record.address, target)
        self.client.focus_window(record.address)
        logger.info(f"Restored {record.address} to workspace {target}")
        return target

    def _resolve_target(self, record: MinimizedWindow) -> str:
        """Pick the workspace a window is restored to.

        The original workspace is used when the window is still mapped and
        the workspace resolves; anything else falls back to the active one.
        """
        if self.restore_target == "original":
            try:
                if (
                    self.client.window_exists(record.address)
                    and self.client.workspace_exists(record.original_workspace)
                ):
                    return record.original_workspace
                logger.info(
                    f"Workspace {record.original_workspace} does not resolve for "
                    f"{record.address}, using the active workspace"
                )
            except WindowManagerRejected as e:
                logger.info(f"Could not resolve original workspace ({e}), using the active workspace")
        return self.client.get_active_workspace().selector

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def status(self) -> OperationResult:
        """Summarize minimized windows without touching Hyprland."""
        windows = self.store.load().windows
        return OperationResult(
            Outcome.SUCCESS,
            f"{len(windows)} minimized window(s)",
            windows=windows,
            status=StatusPayload.for_windows(windows),
        )
