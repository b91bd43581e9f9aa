"""Top-level package for the responsive conference schedule viewer."""

from __future__ import annotations

from .interaction import InteractionController, OverlayState
from .view import ScheduleView, select_mode

__all__ = [
    "__version__",
    "InteractionController",
    "OverlayState",
    "ScheduleView",
    "select_mode",
]

__version__ = "0.1.0"
