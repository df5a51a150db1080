"""
Minimized Window State Store

Owns the on-disk record of minimized windows (``windows.json``).

Architecture:
    - Missing file is an empty set; corrupt content self-heals to empty
    - Every mutation is read-modify-write under an advisory flock
    - Writes use temp file + fsync + rename, so readers never see partial JSON
"""

import fcntl
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from ..models.window import MinimizedWindow, MinimizedWindowSet
from .errors import StateLockTimeout, StateStoreError


logger = logging.getLogger(__name__)

LOCK_POLL_INTERVAL = 0.05


class StateStore:
    """Single owner of the minimized-window state file.

    Example:
        >>> store = StateStore(Path("/tmp/minimize-state/windows.json"))
        >>> store.append(window)
        >>> store.remove(window.address)
    """

    def __init__(
        self,
        state_file: Path,
        lock_file: Optional[Path] = None,
        lock_timeout: float = 5.0,
    ):
        """Initialize state store.

        Args:
            state_file: Path to windows.json
            lock_file: Advisory lock path (default: windows.lock next to state_file)
            lock_timeout: Seconds to wait for the lock before giving up
        """
        self.state_file = state_file
        self.lock_file = lock_file or state_file.with_suffix(".lock")
        self.lock_timeout = lock_timeout

    def load(self) -> MinimizedWindowSet:
        """Read the minimized set.

        Never raises for content problems: a missing file is an empty set,
        and unreadable or malformed content is logged and treated as empty.
        """
        try:
            content = self.state_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return MinimizedWindowSet()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"State file {self.state_file} unreadable, treating as empty: {e}")
            return MinimizedWindowSet()

        if not content.strip():
            return MinimizedWindowSet()

        try:
            return MinimizedWindowSet.from_json(content)
        except ValueError as e:
            logger.error(
                f"State file {self.state_file} is corrupt, treating as empty: "
                f"{str(e).splitlines()[0] if str(e) else type(e).__name__}"
            )
            return MinimizedWindowSet()

    def save(self, windows: MinimizedWindowSet) -> None:
        """Replace the state file with the given set atomically.

        Raises:
            StateStoreError: If the file cannot be written
        """
        directory = self.state_file.parent
        temp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=directory,
                prefix=".windows_",
                suffix=".json.tmp",
            )
            try:
                os.write(fd, windows.to_json().encode("utf-8"))
                os.write(fd, b"\n")
                os.fsync(fd)
            finally:
                os.close(fd)

            os.replace(temp_path, self.state_file)
            temp_path = None
            logger.debug(f"State saved: {len(windows)} window(s) -> {self.state_file}")
        except OSError as e:
            raise StateStoreError(f"Failed to write state file {self.state_file}: {e}")
        finally:
            if temp_path is not None:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the advisory lock for a read-modify-write cycle.

        The lock file is never unlinked; removing it would let two writers
        lock different inodes.

        Raises:
            StateLockTimeout: If the lock is not acquired within lock_timeout
            StateStoreError: If the lock file cannot be opened
        """
        try:
            self.lock_file.parent.mkdir(parents=True, exist_ok=True)
            lock_fd = open(self.lock_file, "a")
        except OSError as e:
            raise StateStoreError(f"Failed to open lock file {self.lock_file}: {e}")

        try:
            deadline = time.monotonic() + self.lock_timeout
            while True:
                try:
                    fcntl.flock(lock_fd.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    if time.monotonic() >= deadline:
                        raise StateLockTimeout(str(self.lock_file), self.lock_timeout)
                    time.sleep(LOCK_POLL_INTERVAL)
            try:
                yield
            finally:
                fcntl.flock(lock_fd.fileno(), fcntl.LOCK_UN)
        finally:
            lock_fd.close()

    def append(self, window: MinimizedWindow) -> MinimizedWindow:
        """Add a window to the set.

        The ordering token is bumped past the newest record if needed, so
        ``minimized_at`` stays strictly increasing.

        Returns:
            The stored record

        Raises:
            DuplicateAddress: If the address is already tracked
        """
        with self.locked():
            current = self.load()
            stored = window.model_copy(
                update={"minimized_at": current.next_token(window.minimized_at)}
            )
            current.add(stored)
            self.save(current)
        logger.debug(f"Appended {stored.address} ({len(current)} minimized)")
        return stored

    def remove(self, address: str) -> MinimizedWindow:
        """Remove a window from the set.

        Returns:
            The removed record

        Raises:
            NotMinimized: If the address is not tracked
        """
        with self.locked():
            current = self.load()
            removed = current.pop(address)
            self.save(current)
        logger.debug(f"Removed {address} ({len(current)} minimized)")
        return removed

    def drain(self) -> List[MinimizedWindow]:
        """Remove and return every window, oldest first."""
        with self.locked():
            current = self.load()
            drained = current.clear()
            if drained:
                self.save(current)
        logger.debug(f"Drained {len(drained)} window(s)")
        return drained

    def peek_latest(self) -> Optional[MinimizedWindow]:
        """Most recently minimized window, without removing it."""
        return self.load().latest()
