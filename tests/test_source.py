from __future__ import annotations

import io
import json
import urllib.error
from pathlib import Path
from typing import Any
from unittest import mock

import pytest

from schedule_grid.schedule.model import ScheduleFormatError, ScheduleLoadError
from schedule_grid.schedule.source import ScheduleSource


def test_fetch_local_file(tmp_path: Path, schedule_payload: dict[str, Any]) -> None:
    path = tmp_path / "schedule.json"
    path.write_text(json.dumps(schedule_payload), encoding="utf-8")

    schedule = ScheduleSource(path).fetch()

    assert len(schedule.sessions) == 4
    assert schedule.days[1].title == "Monday"


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(ScheduleLoadError, match="Unable to read"):
        ScheduleSource(tmp_path / "missing.json").fetch()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ScheduleLoadError, match="not valid JSON"):
        ScheduleSource(path).fetch()


def test_wrong_shape_raises_format_error(tmp_path: Path) -> None:
    path = tmp_path / "shape.json"
    path.write_text(json.dumps({"sessions": {"a": 1}}), encoding="utf-8")

    with pytest.raises(ScheduleFormatError):
        ScheduleSource(path).fetch()


def test_fetch_remote_uses_opener_once(schedule_payload: dict[str, Any]) -> None:
    body = json.dumps(schedule_payload).encode("utf-8")
    opener = mock.MagicMock()
    opener.return_value.__enter__.return_value = io.BytesIO(body)

    source = ScheduleSource("https://example.org/schedule.json", timeout=3.0, opener=opener)
    schedule = source.fetch()

    assert source.is_remote
    assert [s.session_id for s in schedule.sessions] == ["keynote", "talks", "panel", "coffee"]
    opener.assert_called_once_with("https://example.org/schedule.json", timeout=3.0)


def test_remote_failure_is_not_retried() -> None:
    opener = mock.Mock(side_effect=urllib.error.URLError("offline"))

    with pytest.raises(ScheduleLoadError, match="Unable to fetch"):
        ScheduleSource("http://example.org/s.json", opener=opener).fetch()

    assert opener.call_count == 1


def test_invalid_utf8_file_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"sessions": [], "title": "\xff\xfe"}')

    with pytest.raises(ScheduleLoadError, match="Unable to read"):
        ScheduleSource(path).fetch()


def test_infinite_day_raises_format_error(tmp_path: Path) -> None:
    path = tmp_path / "inf.json"
    path.write_text(
        '{"sessions": [{"day": Infinity, "start": "09:00", "end": "10:00"}]}', encoding="utf-8"
    )

    with pytest.raises(ScheduleFormatError, match="day"):
        ScheduleSource(path).fetch()
