"""Normalization of time points into the discrete axis used for layout."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Iterable, Mapping, Optional, Tuple

from .model import Schedule, Session

# Row 1 holds the day headers; the first time point lands on row 2.
HEADER_ROWS: Final[int] = 1
FIRST_TIME_ROW: Final[int] = HEADER_ROWS + 1


def normalize_timeline(
    labels: Iterable[str],
    sessions: Iterable[Session] = (),
) -> Tuple[str, ...]:
    """Return the sorted union of ``labels`` and every session boundary.

    Tokens are zero-padded ``HH:MM`` strings, so plain string ordering is
    chronological. Normalizing an already normalized timeline is a no-op.
    """

    points = set(labels)
    for session in sessions:
        points.add(session.start)
        points.add(session.end)
    return tuple(sorted(points))


def build_position_map(points: Iterable[str]) -> dict[str, int]:
    return {point: index + FIRST_TIME_ROW for index, point in enumerate(points)}


@dataclass(frozen=True)
class Timeline:
    """Ordered time points and their axis positions."""

    points: Tuple[str, ...] = ()
    positions: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_points(cls, labels: Iterable[str], sessions: Iterable[Session] = ()) -> "Timeline":
        points = normalize_timeline(labels, sessions)
        return cls(points=points, positions=build_position_map(points))

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "Timeline":
        return cls.from_points(schedule.time_labels, schedule.sessions)

    def position(self, point: str) -> Optional[int]:
        return self.positions.get(point)

    @property
    def last_row(self) -> int:
        return FIRST_TIME_ROW + len(self.points) - 1

    def __len__(self) -> int:
        return len(self.points)


__all__ = [
    "FIRST_TIME_ROW",
    "HEADER_ROWS",
    "Timeline",
    "build_position_map",
    "normalize_timeline",
]
