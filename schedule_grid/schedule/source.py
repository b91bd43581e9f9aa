"""One-shot retrieval of the schedule document from a file or URL."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Any, Callable

from .model import Schedule, ScheduleLoadError, parse_schedule

LOGGER = logging.getLogger(__name__)

Opener = Callable[..., Any]


class ScheduleSource:
    """Load and parse the schedule document exactly once per call.

    Failures are not retried: any network, IO or decoding problem surfaces as
    :class:`ScheduleLoadError`.
    """

    def __init__(
        self,
        location: str | Path,
        *,
        timeout: float = 10.0,
        opener: Opener = urllib.request.urlopen,
    ) -> None:
        self.location = str(location)
        self.timeout = timeout
        self._opener = opener

    @property
    def is_remote(self) -> bool:
        return urllib.parse.urlparse(self.location).scheme in ("http", "https")

    def fetch(self) -> Schedule:
        raw = self._read_remote() if self.is_remote else self._read_local()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ScheduleLoadError(f"Schedule at {self.location} is not valid JSON: {exc}") from exc

        schedule = parse_schedule(payload)
        LOGGER.info(
            "Loaded %d sessions across %d days from %s",
            len(schedule.sessions),
            len(schedule.day_ordinals()),
            self.location,
        )
        return schedule

    def _read_local(self) -> str:
        path = Path(self.location)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ScheduleLoadError(f"Unable to read schedule file {path}: {exc}") from exc

    def _read_remote(self) -> str:
        try:
            with self._opener(self.location, timeout=self.timeout) as response:
                return response.read().decode("utf-8")
        except (OSError, urllib.error.URLError, UnicodeDecodeError) as exc:
            raise ScheduleLoadError(f"Unable to fetch schedule from {self.location}: {exc}") from exc


__all__ = ["ScheduleSource"]
