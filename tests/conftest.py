from __future__ import annotations

from typing import Any

import pytest

from schedule_grid.interaction import InteractionController
from schedule_grid.rendering.surface import ScheduleSurface
from schedule_grid.schedule.model import Schedule, parse_schedule
from schedule_grid.view import ScheduleView


def schedule_document() -> dict[str, Any]:
    return {
        "days": {
            "1": {"title": "Monday", "start_column": 2, "column_span": 2},
            "2": {"title": "Tuesday", "start_column": 4, "column_span": 1},
        },
        "time_slots": ["09:00", "10:00", "11:00"],
        "sessions": [
            {
                "id": "keynote",
                "day": 1,
                "start": "09:00",
                "end": "10:00",
                "type": "keynote",
                "title": "Opening Keynote",
                "details_type": "text",
                "details": "Welcome to the conference.",
            },
            {
                "id": "talks",
                "day": 1,
                "start": "10:00",
                "end": "11:00",
                "column": 3,
                "column_span": 1,
                "type": "talk",
                "title": "Morning Talks",
                "details_type": "presentations",
                "details": [
                    {"topic": "Parsing", "presenter": "Ada", "affiliation": "Lab"},
                    {"topic": "Layout", "presenter": "Grace", "affiliation": "Navy"},
                ],
            },
            {
                "id": "panel",
                "day": 2,
                "start": "09:30",
                "end": "10:45",
                "type": "panel",
                "title": "Community Panel",
                "details_type": "panel",
                "details": {
                    "moderator": {"name": "Lin", "affiliation": "PSF"},
                    "panelists": [{"name": "Sam", "affiliation": "Org"}],
                },
            },
            {
                "id": "coffee",
                "day": 2,
                "start": "09:00",
                "end": "09:30",
                "type": "break",
                "title": "Coffee",
            },
        ],
    }


@pytest.fixture
def schedule_payload() -> dict[str, Any]:
    return schedule_document()


@pytest.fixture
def schedule(schedule_payload: dict[str, Any]) -> Schedule:
    return parse_schedule(schedule_payload)


@pytest.fixture
def surface() -> ScheduleSurface:
    return ScheduleSurface()


@pytest.fixture
def view(schedule: Schedule, surface: ScheduleSurface) -> ScheduleView:
    return ScheduleView(schedule, surface)


@pytest.fixture
def controller(view: ScheduleView) -> InteractionController:
    ctrl = InteractionController(view)
    ctrl.handle_resize(1200, 900)
    return ctrl
