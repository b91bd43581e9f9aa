"""Projection of schedule data onto grid cells or list positions."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..schedule.formatting import format_details
from ..schedule.model import Schedule, Session
from ..schedule.timeline import HEADER_ROWS, Timeline
from .layout import RenderMode

LOGGER = logging.getLogger(__name__)

Formatter = Callable[[Session], str]

DAY_LABEL = "day-label"
TIME_LABEL = "time-label"
SESSION = "session"
DAY_HEADER = "day-header"


@dataclass(frozen=True)
class GridPlacement:
    """Grid coordinates, 1-based like CSS grid lines."""

    column: int
    column_span: int
    row: int
    row_span: int

    @property
    def last_column(self) -> int:
        return self.column + self.column_span - 1

    @property
    def last_row(self) -> int:
        return self.row + self.row_span - 1


@dataclass(frozen=True)
class Element:
    kind: str
    text: str
    placement: Optional[GridPlacement] = None
    session: Optional[Session] = None
    detail_text: str = ""
    day: Optional[int] = None

    @property
    def is_session(self) -> bool:
        return self.kind == SESSION

    @property
    def css_class(self) -> str:
        if self.session is not None:
            return f"{self.kind} type-{self.session.category}"
        return self.kind


@dataclass
class Rendering:
    """Output of a projector: ordered elements tagged with their mode."""

    mode: RenderMode
    elements: List[Element] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)

    def sessions(self) -> List[Element]:
        return [element for element in self.elements if element.is_session]

    def find_session(self, session_id: str) -> Optional[Element]:
        for element in self.sessions():
            if element.session is not None and element.session.session_id == session_id:
                return element
        return None


class Projector(ABC):
    mode: RenderMode

    def __init__(self, formatter: Formatter = format_details) -> None:
        self.formatter = formatter

    @abstractmethod
    def build(self, schedule: Schedule, timeline: Timeline) -> Rendering:
        """Lay out ``schedule`` for this projector's mode."""

    def _session_element(
        self,
        session: Session,
        placement: Optional[GridPlacement] = None,
    ) -> Element:
        return Element(
            kind=SESSION,
            text=session.title,
            placement=placement,
            session=session,
            detail_text=self.formatter(session),
            day=session.day,
        )


class GridProjector(Projector):
    mode = RenderMode.GRID

    def build(self, schedule: Schedule, timeline: Timeline) -> Rendering:
        rendering = Rendering(mode=self.mode)

        for ordinal in schedule.day_ordinals():
            day = schedule.day(ordinal)
            rendering.elements.append(
                Element(
                    kind=DAY_LABEL,
                    text=day.title,
                    placement=GridPlacement(day.start_column, day.column_span, HEADER_ROWS, 1),
                    day=ordinal,
                )
            )

        for point in timeline.points:
            rendering.elements.append(
                Element(
                    kind=TIME_LABEL,
                    text=point,
                    placement=GridPlacement(1, 1, timeline.positions[point], 1),
                )
            )

        for session in schedule.sessions:
            placement = self._place(schedule, timeline, session, rendering)
            if placement is not None:
                rendering.elements.append(self._session_element(session, placement))

        return rendering

    def _place(
        self,
        schedule: Schedule,
        timeline: Timeline,
        session: Session,
        rendering: Rendering,
    ) -> Optional[GridPlacement]:
        start_row = timeline.position(session.start)
        end_row = timeline.position(session.end)
        if start_row is None or end_row is None:
            return self._skip(
                rendering,
                f"Session {session.session_id!r} references a time outside the timeline "
                f"({session.start}-{session.end}); skipped",
            )
        if end_row <= start_row:
            return self._skip(
                rendering,
                f"Session {session.session_id!r} ends at or before it starts "
                f"({session.start}-{session.end}); skipped",
            )

        day = schedule.day(session.day)
        column = session.column if session.column is not None else day.start_column
        span = session.column_span or (day.column_span if session.column is None else 1)
        return GridPlacement(column, span, start_row, end_row - start_row)

    @staticmethod
    def _skip(rendering: Rendering, message: str) -> None:
        LOGGER.warning(message)
        rendering.diagnostics.append(message)
        return None


class ListProjector(Projector):
    mode = RenderMode.LIST

    def build(self, schedule: Schedule, timeline: Timeline) -> Rendering:
        rendering = Rendering(mode=self.mode)

        grouped: Dict[int, List[Session]] = defaultdict(list)
        for session in schedule.sessions:
            grouped[session.day].append(session)

        for ordinal in schedule.day_ordinals():
            day = schedule.day(ordinal)
            rendering.elements.append(Element(kind=DAY_HEADER, text=day.title, day=ordinal))
            # sorted() is stable, so equal times keep their input order
            for session in sorted(grouped[ordinal], key=lambda s: (s.start, s.end)):
                rendering.elements.append(self._session_element(session))

        return rendering


def projector_for(mode: RenderMode, formatter: Formatter = format_details) -> Projector:
    if mode is RenderMode.LIST:
        return ListProjector(formatter)
    return GridProjector(formatter)


__all__ = [
    "DAY_HEADER",
    "DAY_LABEL",
    "Element",
    "GridPlacement",
    "GridProjector",
    "ListProjector",
    "Projector",
    "Rendering",
    "SESSION",
    "TIME_LABEL",
    "projector_for",
]
