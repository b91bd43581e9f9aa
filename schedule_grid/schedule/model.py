"""Immutable schedule records and parsing of the input document."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

LOGGER = logging.getLogger(__name__)

TIME_TOKEN_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
DETAILS_TYPES = ("text", "presentations", "panel")


class ScheduleLoadError(RuntimeError):
    """Raised when the schedule document cannot be fetched or read."""


class ScheduleFormatError(ScheduleLoadError):
    """Raised when the schedule document does not match the expected shape."""


def canonical_time(value: object) -> str:
    """Return ``value`` as a zero-padded ``HH:MM`` token.

    Tokens such as ``"9:05"`` are padded so that lexicographic order matches
    chronological order.
    """

    match = TIME_TOKEN_RE.match(str(value).strip())
    if not match:
        raise ScheduleFormatError(f"Invalid time token: {value!r}. Expected HH:MM.")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 24 or minute > 59 or (hour == 24 and minute):
        raise ScheduleFormatError(f"Time token out of range: {value!r}")
    return f"{hour:02d}:{minute:02d}"


@dataclass(frozen=True)
class Day:
    ordinal: int
    title: str
    start_column: int
    column_span: int = 1

    @classmethod
    def placeholder(cls, ordinal: int) -> "Day":
        return cls(ordinal=ordinal, title=f"Day {ordinal}", start_column=ordinal + 1)


@dataclass(frozen=True)
class Presentation:
    topic: str
    presenter: str = ""
    affiliation: str = ""


@dataclass(frozen=True)
class Person:
    name: str
    affiliation: str = ""


@dataclass(frozen=True)
class TextDetails:
    text: str


@dataclass(frozen=True)
class PresentationDetails:
    presentations: Tuple[Presentation, ...] = ()


@dataclass(frozen=True)
class PanelDetails:
    moderator: Optional[Person] = None
    panelists: Tuple[Person, ...] = ()


SessionDetails = Union[TextDetails, PresentationDetails, PanelDetails]


@dataclass(frozen=True)
class Session:
    """A single schedule entry belonging to exactly one day."""

    session_id: str
    day: int
    start: str
    end: str
    title: str
    category: str = "session"
    column: Optional[int] = None
    column_span: Optional[int] = None
    details: Optional[SessionDetails] = None


@dataclass(frozen=True)
class Schedule:
    days: Mapping[int, Day] = field(default_factory=dict)
    time_labels: Tuple[str, ...] = ()
    sessions: Tuple[Session, ...] = ()

    def day(self, ordinal: int) -> Day:
        """Return the descriptor for ``ordinal``, or a generated placeholder."""

        found = self.days.get(ordinal)
        if found is not None:
            return found
        LOGGER.warning("Day %d has no descriptor; using placeholder title", ordinal)
        return Day.placeholder(ordinal)

    def day_ordinals(self) -> List[int]:
        """Ordinals of declared days plus any referenced only by sessions."""

        ordinals = set(self.days)
        ordinals.update(session.day for session in self.sessions)
        return sorted(ordinals)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_schedule(payload: Any) -> Schedule:
    """Build a :class:`Schedule` from the decoded JSON document."""

    if not isinstance(payload, Mapping):
        raise ScheduleFormatError("Schedule document must be a JSON object.")

    days = _parse_days(payload.get("days", {}))
    raw_labels = payload.get("time_slots", payload.get("time_labels", []))
    if not isinstance(raw_labels, list):
        raise ScheduleFormatError("'time_slots' must be a list of HH:MM strings.")
    labels = tuple(canonical_time(label) for label in raw_labels)

    raw_sessions = payload.get("sessions", [])
    if not isinstance(raw_sessions, list):
        raise ScheduleFormatError("'sessions' must be a list.")
    sessions = tuple(
        _parse_session(record, index) for index, record in enumerate(raw_sessions)
    )
    return Schedule(days=days, time_labels=labels, sessions=sessions)


def _parse_days(raw: Any) -> dict[int, Day]:
    entries: Iterable[tuple[Any, Any]]
    if isinstance(raw, list):
        entries = ((index + 1, item) for index, item in enumerate(raw))
    elif isinstance(raw, Mapping):
        entries = raw.items()
    else:
        raise ScheduleFormatError("'days' must be an object or a list.")

    days: dict[int, Day] = {}
    for key, value in entries:
        ordinal = _as_int(key, "day key")
        if isinstance(value, str):
            days[ordinal] = Day(ordinal=ordinal, title=value, start_column=ordinal + 1)
            continue
        if not isinstance(value, Mapping):
            raise ScheduleFormatError(f"Day {ordinal} descriptor must be an object.")
        days[ordinal] = Day(
            ordinal=ordinal,
            title=str(value.get("title") or f"Day {ordinal}"),
            start_column=_as_int(value.get("start_column", ordinal + 1), "start_column"),
            column_span=max(1, _as_int(value.get("column_span", 1), "column_span")),
        )
    return days


def _parse_session(record: Any, index: int) -> Session:
    if not isinstance(record, Mapping):
        raise ScheduleFormatError(f"Session #{index} must be an object.")

    for key in ("day", "start", "end"):
        if key not in record:
            raise ScheduleFormatError(f"Session #{index} is missing {key!r}.")

    column = record.get("column")
    span = record.get("column_span")
    return Session(
        session_id=str(record.get("id", index)),
        day=_as_int(record["day"], "day"),
        start=canonical_time(record["start"]),
        end=canonical_time(record["end"]),
        title=str(record.get("title") or "Untitled Session"),
        category=str(record.get("type") or record.get("category") or "session"),
        column=_as_int(column, "column") if column is not None else None,
        column_span=max(1, _as_int(span, "column_span")) if span is not None else None,
        details=parse_details(record.get("details_type"), record.get("details")),
    )


def parse_details(details_type: Any, payload: Any) -> Optional[SessionDetails]:
    """Decode a details payload according to its ``details_type`` tag."""

    if isinstance(payload, Mapping) and "details_type" in payload:
        details_type = payload["details_type"]
        payload = payload.get("content")

    if payload is None:
        return None
    if details_type is None:
        details_type = "text"
    if details_type not in DETAILS_TYPES:
        raise ScheduleFormatError(f"Unknown details_type: {details_type!r}")

    if details_type == "text":
        return TextDetails(text=str(payload))

    if details_type == "presentations":
        if not isinstance(payload, Sequence) or isinstance(payload, str):
            raise ScheduleFormatError("'presentations' details must be a list.")
        return PresentationDetails(
            presentations=tuple(
                Presentation(
                    topic=str(_field(item, "topic")),
                    presenter=str(_field(item, "presenter")),
                    affiliation=str(_field(item, "affiliation")),
                )
                for item in payload
            )
        )

    if not isinstance(payload, Mapping):
        raise ScheduleFormatError("'panel' details must be an object.")
    moderator = payload.get("moderator")
    panelists = payload.get("panelists") or []
    if not isinstance(panelists, Sequence) or isinstance(panelists, str):
        raise ScheduleFormatError("'panelists' must be a list.")
    return PanelDetails(
        moderator=_person(moderator) if moderator else None,
        panelists=tuple(_person(item) for item in panelists),
    )


def _person(raw: Any) -> Person:
    if isinstance(raw, str):
        return Person(name=raw)
    return Person(name=str(_field(raw, "name")), affiliation=str(_field(raw, "affiliation")))


def _field(raw: Any, key: str) -> Any:
    if not isinstance(raw, Mapping):
        raise ScheduleFormatError(f"Expected an object with {key!r}, got {raw!r}")
    value = raw.get(key)
    return "" if value is None else value


def _as_int(value: Any, label: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ScheduleFormatError(f"Invalid {label}: {value!r}") from exc


__all__ = [
    "Day",
    "PanelDetails",
    "Person",
    "Presentation",
    "PresentationDetails",
    "Schedule",
    "ScheduleFormatError",
    "ScheduleLoadError",
    "Session",
    "SessionDetails",
    "TextDetails",
    "canonical_time",
    "parse_details",
    "parse_schedule",
]
