"""
Window Models

Pydantic models for Hyprland windows, workspaces and the minimized-window record.
"""

import json
import time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.errors import DuplicateAddress, NotMinimized


SPECIAL_PREFIX = "special:"
STATUS_ICON = "󰘸"  # nf-md-window_minimize


class Workspace(BaseModel):
    """A Hyprland workspace as reported by ``hyprctl activeworkspace -j``."""

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Workspace id (negative for named and special workspaces)")
    name: str = Field(default="", description="Workspace name")

    @property
    def is_special(self) -> bool:
        """True for special (scratchpad-like) workspaces."""
        return self.name.startswith(SPECIAL_PREFIX)

    @property
    def selector(self) -> str:
        """Workspace argument accepted by ``hyprctl dispatch``.

        Non-positive ids must be addressed by name, otherwise Hyprland reads
        them as relative moves.
        """
        if self.is_special:
            return self.name
        if self.id >= 1:
            return str(self.id)
        if self.name:
            return f"name:{self.name}"
        return str(self.id)


class WindowHandle(BaseModel):
    """A client window as reported by ``hyprctl activewindow -j`` / ``clients -j``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    address: str = Field(..., min_length=1, description="Hyprland window address")
    class_name: str = Field(default="", alias="class", description="Window class")
    title: str = Field(default="", description="Window title")
    workspace: Optional[Workspace] = Field(default=None, description="Workspace holding the window")


class MinimizedWindow(BaseModel):
    """One window hidden in the special workspace."""

    model_config = ConfigDict(populate_by_name=True)

    address: str = Field(
        ...,
        description="Hyprland window address",
        pattern=r"^0x[0-9a-fA-F]+$",
    )

    original_workspace: str = Field(
        ...,
        description="Workspace selector the window occupied before minimizing",
        min_length=1,
    )

    class_name: str = Field(default="", alias="class", description="Window class (display only)")

    title: str = Field(default="", description="Window title (display only)")

    minimized_at: int = Field(
        ...,
        description="Monotonic ordering token (nanoseconds since epoch)",
        ge=0,
    )

    @classmethod
    def from_window(
        cls,
        window: WindowHandle,
        workspace: Workspace,
        minimized_at: int,
    ) -> "MinimizedWindow":
        """Build a record from focused-window metadata."""
        return cls(
            address=window.address,
            original_workspace=workspace.selector,
            class_name=window.class_name,
            title=window.title,
            minimized_at=minimized_at,
        )

    def to_dict(self) -> dict:
        """Convert to the persisted JSON object."""
        return self.model_dump(by_alias=True)


class MinimizedWindowSet(BaseModel):
    """Ordered collection of minimized windows, oldest first."""

    windows: List[MinimizedWindow] = Field(default_factory=list)

    @field_validator("windows")
    @classmethod
    def validate_unique_addresses(cls, v: List[MinimizedWindow]) -> List[MinimizedWindow]:
        """Ensure no address is recorded twice."""
        seen = set()
        for window in v:
            if window.address in seen:
                raise ValueError(f"Duplicate window address: {window.address}")
            seen.add(window.address)
        return v

    def __len__(self) -> int:
        return len(self.windows)

    def contains(self, address: str) -> bool:
        return any(w.address == address for w in self.windows)

    def add(self, window: MinimizedWindow) -> None:
        """Append a window, keeping addresses unique.

        Raises:
            DuplicateAddress: If the address is already tracked
        """
        if self.contains(window.address):
            raise DuplicateAddress(window.address)
        self.windows.append(window)

    def pop(self, address: str) -> MinimizedWindow:
        """Remove and return the window with the given address.

        Raises:
            NotMinimized: If the address is not tracked
        """
        for index, window in enumerate(self.windows):
            if window.address == address:
                return self.windows.pop(index)
        raise NotMinimized(address)

    def clear(self) -> List[MinimizedWindow]:
        """Remove and return every window in insertion order."""
        drained = list(self.windows)
        self.windows = []
        return drained

    def latest(self) -> Optional[MinimizedWindow]:
        """Window with the highest ``minimized_at`` token."""
        if not self.windows:
            return None
        return max(self.windows, key=lambda w: w.minimized_at)

    def next_token(self, now: Optional[int] = None) -> int:
        """Ordering token strictly greater than every recorded one."""
        if now is None:
            now = time.time_ns()
        latest = self.latest()
        if latest is not None and now <= latest.minimized_at:
            return latest.minimized_at + 1
        return now

    def to_json(self) -> str:
        """Serialize to the persisted JSON list."""
        return json.dumps([w.to_dict() for w in self.windows], indent=2, ensure_ascii=False)

    @classmethod
    def from_json(cls, content: str) -> "MinimizedWindowSet":
        """Parse the persisted JSON list.

        Raises:
            ValueError: If the content is not a valid list of records
                (``pydantic.ValidationError`` and ``json.JSONDecodeError``
                are both ``ValueError`` subclasses)
        """
        data = json.loads(content)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON list, got {type(data).__name__}")
        return cls(windows=[MinimizedWindow.model_validate(item) for item in data])


class StatusPayload(BaseModel):
    """Waybar custom-module payload for the ``show`` command."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    tooltip: str
    css_class: str = Field(alias="class")
    alt: str
    count: int = Field(ge=0)

    @classmethod
    def for_windows(cls, windows: List[MinimizedWindow]) -> "StatusPayload":
        count = len(windows)
        if count == 0:
            return cls(
                text=STATUS_ICON,
                tooltip="No minimized windows",
                css_class="empty",
                alt="empty",
                count=0,
            )

        noun = "window" if count == 1 else "windows"
        lines = [f"{count} minimized {noun}"]
        lines.extend(f"{w.class_name} - {w.title}" for w in windows)
        return cls(
            text=f"{STATUS_ICON} {count}",
            tooltip="\n".join(lines),
            css_class="has-windows",
            alt="has-windows",
            count=count,
        )

    def to_json(self) -> str:
        """Single-line JSON for Waybar ``return-type: json``."""
        return json.dumps(self.model_dump(by_alias=True), ensure_ascii=False)
