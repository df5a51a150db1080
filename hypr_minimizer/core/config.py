"""Configuration management for hypr-minimizer.

Settings are resolved from, lowest to highest priority:

- built-in defaults
- ``$XDG_CONFIG_HOME/hypr-minimizer/config.json`` (or an explicit path)
- ``HYPR_MINIMIZER_*`` environment variables

State and log paths default to ``/tmp`` so they vanish on reboot.
"""

import json
import os
import shlex
from pathlib import Path
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError


DEFAULT_STATE_DIR = Path("/tmp/minimize-state")
DEFAULT_LOG_FILE = Path("/tmp/hypr-minimizer.log")
DEFAULT_PICKER_COMMAND = ["walker", "--dmenu", "-p", "Restore window:"]

# Environment variable -> config field
ENV_OVERRIDES: Dict[str, str] = {
    "HYPR_MINIMIZER_STATE_DIR": "state_dir",
    "HYPR_MINIMIZER_LOG_FILE": "log_file",
    "HYPR_MINIMIZER_SPECIAL_WORKSPACE": "special_workspace",
    "HYPR_MINIMIZER_PICKER": "picker_command",
    "HYPR_MINIMIZER_RESTORE_TARGET": "restore_target",
}


class MinimizerConfig(BaseModel):
    """Runtime configuration for the minimizer."""

    state_dir: Path = Field(
        default=DEFAULT_STATE_DIR,
        description="Directory holding windows.json (volatile, cleared on reboot)",
    )

    log_file: Path = Field(
        default=DEFAULT_LOG_FILE,
        description="Append-only diagnostics log (failures only)",
    )

    special_workspace: str = Field(
        default="minimum",
        description="Name of the special workspace used to park windows",
        min_length=1,
    )

    picker_command: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PICKER_COMMAND),
        description="dmenu-style picker command (reads lines on stdin, prints the choice)",
        min_length=1,
    )

    hyprctl: str = Field(
        default="hyprctl",
        description="hyprctl executable",
        min_length=1,
    )

    restore_target: Literal["original", "current"] = Field(
        default="original",
        description="Restore to the window's original workspace or the active one",
    )

    ignored_classes: List[str] = Field(
        default_factory=lambda: ["walker"],
        description="Window classes that are never minimized (case-insensitive)",
    )

    command_timeout: float = Field(
        default=3.0,
        description="Seconds before a hyprctl call is abandoned",
        gt=0,
    )

    picker_timeout: float = Field(
        default=120.0,
        description="Seconds before the picker is abandoned",
        gt=0,
    )

    lock_timeout: float = Field(
        default=5.0,
        description="Seconds to wait for the state file lock",
        gt=0,
    )

    @field_validator("special_workspace")
    @classmethod
    def validate_special_workspace(cls, v: str) -> str:
        """Accept both 'minimum' and 'special:minimum'."""
        if v.startswith("special:"):
            v = v[len("special:"):]
        if not v or any(c in v for c in ", \t\n"):
            raise ValueError("special_workspace must be a non-empty name without commas or whitespace")
        return v

    @field_validator("picker_command", mode="before")
    @classmethod
    def split_picker_command(cls, v):
        """Allow the picker command to be given as a shell-style string."""
        if isinstance(v, str):
            return shlex.split(v)
        return v

    @field_validator("ignored_classes")
    @classmethod
    def normalize_ignored_classes(cls, v: List[str]) -> List[str]:
        return [c.lower() for c in v]

    @property
    def state_file(self) -> Path:
        return self.state_dir / "windows.json"

    @property
    def lock_file(self) -> Path:
        return self.state_dir / "windows.lock"


def default_config_path() -> Path:
    """Path of the optional JSON config file."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "hypr-minimizer" / "config.json"


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> MinimizerConfig:
    """Load configuration from file and environment.

    Args:
        config_file: Explicit config path (default: XDG location, optional)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated MinimizerConfig

    Raises:
        ConfigError: If an explicit file is missing, or any source is invalid
    """
    if environ is None:
        environ = os.environ

    explicit = config_file is not None
    if config_file is None:
        config_file = default_config_path()

    data: Dict[str, object] = {}
    if config_file.exists():
        try:
            with config_file.open("r") as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"Failed to load config {config_file}: {e}")
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config {config_file} must contain a JSON object")
        data.update(loaded)
    elif explicit:
        raise ConfigError(f"Config file not found: {config_file}")

    data.update(_environment_overrides(environ))

    try:
        return MinimizerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def fallback_config(environ: Optional[Mapping[str, str]] = None) -> MinimizerConfig:
    """Configuration used when the config file is unusable.

    Environment overrides still apply so state and diagnostics land where
    the session expects them; invalid overrides fall back to defaults.
    """
    if environ is None:
        environ = os.environ
    try:
        return MinimizerConfig.model_validate(_environment_overrides(environ))
    except ValidationError:
        return MinimizerConfig()


def _environment_overrides(environ: Mapping[str, str]) -> Dict[str, object]:
    return {
        field_name: environ[env_name]
        for env_name, field_name in ENV_OVERRIDES.items()
        if environ.get(env_name)
    }
