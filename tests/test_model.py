from __future__ import annotations

import logging

import pytest

from schedule_grid.schedule.model import (
    Day,
    PanelDetails,
    Person,
    Presentation,
    PresentationDetails,
    Schedule,
    ScheduleFormatError,
    ScheduleLoadError,
    TextDetails,
    canonical_time,
    parse_details,
    parse_schedule,
)


def test_parse_schedule_reads_days_slots_and_sessions() -> None:
    schedule = parse_schedule(
        {
            "days": {"1": {"title": "Mon", "start_column": 2, "column_span": 3}},
            "time_slots": ["9:00", "10:00"],
            "sessions": [
                {
                    "id": 7,
                    "day": 1,
                    "start": "9:30",
                    "end": "10:00",
                    "column": 3,
                    "type": "talk",
                    "title": "Intro",
                    "details_type": "text",
                    "details": "Hello",
                }
            ],
        }
    )

    assert schedule.days == {1: Day(ordinal=1, title="Mon", start_column=2, column_span=3)}
    assert schedule.time_labels == ("09:00", "10:00")
    session = schedule.sessions[0]
    assert session.session_id == "7"
    assert session.start == "09:30"
    assert session.column == 3
    assert session.column_span is None
    assert session.category == "talk"
    assert session.details == TextDetails(text="Hello")


def test_days_may_be_a_plain_list_of_titles() -> None:
    schedule = parse_schedule({"days": ["Mon", "Tue"], "sessions": []})

    assert schedule.days[2] == Day(ordinal=2, title="Tue", start_column=3, column_span=1)


def test_missing_day_descriptor_falls_back_to_placeholder(caplog: pytest.LogCaptureFixture) -> None:
    schedule = Schedule()

    with caplog.at_level(logging.WARNING):
        day = schedule.day(3)

    assert day.title == "Day 3"
    assert day.start_column == 4
    assert "Day 3" in caplog.text


@pytest.mark.parametrize(
    "value, expected",
    [("9:05", "09:05"), ("09:05", "09:05"), (" 23:59 ", "23:59"), ("24:00", "24:00")],
)
def test_canonical_time(value: str, expected: str) -> None:
    assert canonical_time(value) == expected


@pytest.mark.parametrize("value", ["noon", "9", "25:00", "10:60", "24:30", ""])
def test_canonical_time_rejects_invalid_tokens(value: str) -> None:
    with pytest.raises(ScheduleFormatError):
        canonical_time(value)


def test_presentations_details() -> None:
    details = parse_details(
        "presentations",
        [{"topic": "A", "presenter": "B", "affiliation": "C"}, {"topic": "D"}],
    )

    assert details == PresentationDetails(
        presentations=(Presentation("A", "B", "C"), Presentation("D", "", ""))
    )


def test_panel_details() -> None:
    details = parse_details(
        "panel",
        {"moderator": {"name": "M", "affiliation": "X"}, "panelists": [{"name": "P"}]},
    )

    assert details == PanelDetails(moderator=Person("M", "X"), panelists=(Person("P", ""),))


def test_details_object_may_carry_its_own_tag() -> None:
    details = parse_details(None, {"details_type": "text", "content": "Inline"})

    assert details == TextDetails("Inline")


def test_unknown_details_type_is_a_format_error() -> None:
    with pytest.raises(ScheduleFormatError, match="details_type"):
        parse_details("video", "x")


def test_session_without_start_is_rejected() -> None:
    with pytest.raises(ScheduleFormatError, match="'start'"):
        parse_schedule({"sessions": [{"day": 1, "end": "10:00"}]})


def test_format_error_is_a_load_error() -> None:
    with pytest.raises(ScheduleLoadError):
        parse_schedule(["not", "an", "object"])


def test_panelists_must_be_a_list() -> None:
    with pytest.raises(ScheduleFormatError, match="panelists"):
        parse_details("panel", {"moderator": "M", "panelists": 5})


@pytest.mark.parametrize("value", [float("inf"), float("nan"), "two", None])
def test_non_integer_day_is_a_format_error(value: object) -> None:
    with pytest.raises(ScheduleFormatError, match="day"):
        parse_schedule({"sessions": [{"day": value, "start": "09:00", "end": "10:00"}]})
