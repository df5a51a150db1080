"""Shared fixtures for hypr-minimizer tests.

Every test gets an isolated state directory, diagnostics log and config
home; nothing touches /tmp/minimize-state or a running Hyprland.
"""

import logging

import pytest

from hypr_minimizer.core.engine import MinimizeEngine
from hypr_minimizer.core.state_store import StateStore
from tests.hypr_minimizer.mocks.hyprland import FakeHyprland
from tests.hypr_minimizer.mocks.picker import ScriptedPicker


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point config and log locations at tmp_path and reset package logging."""
    for name in (
        "HYPR_MINIMIZER_STATE_DIR",
        "HYPR_MINIMIZER_SPECIAL_WORKSPACE",
        "HYPR_MINIMIZER_PICKER",
        "HYPR_MINIMIZER_RESTORE_TARGET",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HYPR_MINIMIZER_LOG_FILE", str(tmp_path / "hypr-minimizer.log"))

    yield

    logger = logging.getLogger("hypr_minimizer")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def log_file(tmp_path):
    """Diagnostics log path used by the CLI in tests."""
    return tmp_path / "hypr-minimizer.log"


@pytest.fixture
def state_dir(tmp_path):
    """Volatile state directory."""
    return tmp_path / "minimize-state"


@pytest.fixture
def store(state_dir):
    """State store with a short lock timeout."""
    return StateStore(
        state_dir / "windows.json",
        lock_file=state_dir / "windows.lock",
        lock_timeout=0.2,
    )


@pytest.fixture
def hyprland():
    """Fake Hyprland with workspaces 1 and 2, workspace 1 active."""
    return FakeHyprland()


@pytest.fixture
def picker():
    """Picker that cancels unless told otherwise."""
    return ScriptedPicker()


@pytest.fixture
def engine(hyprland, store, picker):
    """Engine wired to the fakes."""
    return MinimizeEngine(
        client=hyprland,
        store=store,
        picker=picker,
        special_workspace="minimum",
        restore_target="original",
        ignored_classes=["walker"],
    )
