"""Command line entry point for rendering schedule snapshots."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from PIL import Image

from .config import ConfigError, load_env_file, resolve_view_settings
from .interaction import InteractionController
from .rendering.layout import Size
from .rendering.surface import ScheduleSurface
from .schedule.model import ScheduleLoadError
from .schedule.source import ScheduleSource
from .view import ScheduleView

LOGGER = logging.getLogger(__name__)
LOADING_MESSAGE = "Loading schedule…"
ERROR_MESSAGE = "The schedule could not be loaded. Please try again later."
DEFAULT_OUTPUT = Path("schedule.png")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a conference schedule snapshot")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional path to a .env file loaded before the app starts.",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Schedule JSON file path or http(s) URL (defaults to SCHEDULE_SOURCE).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help="Where to write the PNG snapshot.",
    )

    viewport_group = parser.add_argument_group("Viewport options")
    viewport_group.add_argument("--width", type=int, default=None, help="Viewport width.")
    viewport_group.add_argument("--height", type=int, default=None, help="Viewport height.")
    viewport_group.add_argument(
        "--breakpoint",
        type=int,
        default=None,
        help="Widths at or below this use the list layout.",
    )
    viewport_group.add_argument(
        "--scroll",
        type=float,
        default=0.0,
        help="Vertical scroll offset applied before interactions.",
    )

    interaction_group = parser.add_argument_group("Interaction options")
    interaction_group.add_argument(
        "--activate",
        action="append",
        default=[],
        metavar="SESSION_ID",
        help="Activate a session by id; repeat to replay several clicks in order.",
    )
    interaction_group.add_argument(
        "--escape",
        action="store_true",
        help="Press Escape after the activations.",
    )
    interaction_group.add_argument(
        "--overlay-scroll",
        type=float,
        default=0.0,
        help="Scroll the open overlay's content by this many units.",
    )
    return parser


@dataclass
class AppSettings:
    source: str
    output: Path
    width: int
    height: int
    breakpoint: int
    timeout: float
    scroll: float = 0.0
    activate: List[str] = field(default_factory=list)
    overlay_scroll: float = 0.0
    escape: bool = False


class AppRuntime:
    """Owns the data load, the view and the interaction controller."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        source_factory: Callable[..., ScheduleSource] = ScheduleSource,
        surface_factory: Callable[[], ScheduleSurface] = ScheduleSurface,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self.source_factory = source_factory
        self.logger = logger or LOGGER
        self.surface = surface_factory()
        self.view: ScheduleView | None = None
        self.controller: InteractionController | None = None
        self.error: str | None = None

    @property
    def loaded(self) -> bool:
        return self.view is not None

    def start(self) -> bool:
        """Fetch the schedule once; nothing is laid out until this resolves."""

        source = self.source_factory(self.settings.source, timeout=self.settings.timeout)
        try:
            schedule = source.fetch()
        except ScheduleLoadError as exc:
            self.logger.error("Failed to load schedule: %s", exc)
            self.error = str(exc)
            return False

        self.view = ScheduleView(schedule, self.surface, breakpoint=self.settings.breakpoint)
        self.controller = InteractionController(self.view)
        self.controller.handle_resize(self.settings.width, self.settings.height)
        if self.settings.scroll:
            self.controller.handle_scroll(self.settings.scroll)

        rendering = self.view.rendering
        if rendering is not None and rendering.diagnostics:
            self.logger.warning("%d sessions could not be placed", len(rendering.diagnostics))
        return True

    def activate(self, session_id: str) -> bool:
        if self.view is None or self.view.rendering is None or self.controller is None:
            raise RuntimeError("Runtime has not been started")
        element = self.view.rendering.find_session(session_id)
        if element is None:
            self.logger.warning("No rendered session with id %r", session_id)
            return False
        self.controller.activate(element)
        return True

    def scroll_overlay(self, dy: float) -> float:
        if self.controller is None:
            return 0.0
        return self.controller.scroll_overlay(dy)

    def escape(self) -> None:
        if self.controller is not None:
            self.controller.escape()

    def snapshot(self) -> Image.Image:
        viewport = Size(self.settings.width, self.settings.height)
        if self.controller is None:
            message = ERROR_MESSAGE if self.error is not None else LOADING_MESSAGE
            return self.surface.render_message(message, viewport)
        return self.surface.draw(self.controller.overlay)


def resolve_settings(args: argparse.Namespace) -> AppSettings:
    load_env_file(args.env_file)
    env_settings = resolve_view_settings()
    return AppSettings(
        source=args.source or env_settings.source,
        output=args.output,
        width=args.width if args.width is not None else env_settings.width,
        height=args.height if args.height is not None else env_settings.height,
        breakpoint=args.breakpoint if args.breakpoint is not None else env_settings.breakpoint,
        timeout=env_settings.timeout,
        scroll=args.scroll,
        activate=list(args.activate),
        overlay_scroll=args.overlay_scroll,
        escape=args.escape,
    )


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    source_factory: Callable[..., ScheduleSource] = ScheduleSource,
) -> int:
    logging.basicConfig(level=logging.INFO)
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = resolve_settings(args)
    except ConfigError as exc:
        parser.error(str(exc))

    runtime = AppRuntime(settings=settings, source_factory=source_factory)
    ok = runtime.start()
    if ok:
        for session_id in settings.activate:
            runtime.activate(session_id)
        if settings.overlay_scroll:
            runtime.scroll_overlay(settings.overlay_scroll)
        if settings.escape:
            runtime.escape()

    settings.output.parent.mkdir(parents=True, exist_ok=True)
    runtime.snapshot().save(settings.output)
    LOGGER.info("Wrote snapshot to %s", settings.output)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
