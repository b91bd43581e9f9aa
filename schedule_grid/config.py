"""Environment-driven settings for the schedule viewer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

from .rendering.layout import DEFAULT_LAYOUT

__all__ = ["ConfigError", "ViewSettings", "load_env_file", "resolve_view_settings"]

DEFAULT_SOURCE = "schedule.json"


class ConfigError(RuntimeError):
    """Raised when configuration values are malformed."""


@dataclass(frozen=True)
class ViewSettings:
    source: str = DEFAULT_SOURCE
    breakpoint: int = DEFAULT_LAYOUT.breakpoint
    width: int = 1280
    height: int = 900
    timeout: float = 10.0


def load_env_file(env_file: str | Path | None = None) -> None:
    """Load environment variables from ``env_file`` if provided.

    When ``env_file`` is :data:`None`, the loader looks for a ``.env`` file in the
    current working directory. Existing environment variables are never overwritten.
    """

    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if not path.is_file():
        return

    for key, value in _iter_env_entries(path):
        os.environ.setdefault(key, value)


def resolve_view_settings(environ: Mapping[str, str] | None = None) -> ViewSettings:
    """Build :class:`ViewSettings` from ``SCHEDULE_*`` variables."""

    env = os.environ if environ is None else environ
    defaults = ViewSettings()
    return ViewSettings(
        source=env.get("SCHEDULE_SOURCE") or defaults.source,
        breakpoint=_env_int(env, "SCHEDULE_BREAKPOINT", defaults.breakpoint),
        width=_env_int(env, "SCHEDULE_VIEWPORT_WIDTH", defaults.width),
        height=_env_int(env, "SCHEDULE_VIEWPORT_HEIGHT", defaults.height),
        timeout=_env_float(env, "SCHEDULE_FETCH_TIMEOUT", defaults.timeout),
    )


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from exc


def _iter_env_entries(path: Path) -> Iterable[tuple[str, str]]:
    for raw_line in path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ConfigError(
                f"Invalid line in {path.name!r}: {raw_line!r}. Expected KEY=VALUE format."
            )
        key, raw_value = line.split("=", 1)
        key = key.strip()
        value = raw_value.strip().strip('"').strip("'")
        if not key:
            raise ConfigError(f"Environment variable key is missing in line: {raw_line!r}")
        yield key, value
