"""Data models for hypr-minimizer."""

from .window import (
    MinimizedWindow,
    MinimizedWindowSet,
    StatusPayload,
    Workspace,
    WindowHandle,
)

__all__ = [
    "MinimizedWindow",
    "MinimizedWindowSet",
    "StatusPayload",
    "Workspace",
    "WindowHandle",
]
