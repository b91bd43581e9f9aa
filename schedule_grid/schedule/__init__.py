"""Schedule data: records, timeline normalization, formatting and loading."""

from .formatting import NO_DETAILS, format_details
from .model import (
    Day,
    PanelDetails,
    Person,
    Presentation,
    PresentationDetails,
    Schedule,
    ScheduleFormatError,
    ScheduleLoadError,
    Session,
    TextDetails,
    parse_schedule,
)
from .source import ScheduleSource
from .timeline import Timeline, build_position_map, normalize_timeline

__all__ = [
    "Day",
    "NO_DETAILS",
    "PanelDetails",
    "Person",
    "Presentation",
    "PresentationDetails",
    "Schedule",
    "ScheduleFormatError",
    "ScheduleLoadError",
    "ScheduleSource",
    "Session",
    "TextDetails",
    "Timeline",
    "build_position_map",
    "format_details",
    "normalize_timeline",
    "parse_schedule",
]
