"""Terminal UI package with lazy Textual imports."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from j2j_studio.tui.app import StudioApp

__all__ = ["StudioApp"]


def __getattr__(name: str):
    """Load the Textual app only when it is asked for."""
    if name == "app":
        return importlib.import_module("j2j_studio.tui.app")
    if name == "StudioApp":
        module = importlib.import_module("j2j_studio.tui.app")
        return module.StudioApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
