#!/usr/bin/env python3
"""Generate grid and list previews of the bundled sample schedule."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from schedule_grid.app import AppRuntime, AppSettings


PREVIEWS_DIR = PROJECT_ROOT / "previews"
SAMPLE_SCHEDULE = PROJECT_ROOT / "samples" / "schedule.json"
VIEWPORTS = {
    "grid": (1280, 720),
    "list": (420, 800),
}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--source",
        type=str,
        default=str(SAMPLE_SCHEDULE),
        help="Schedule document to render (defaults to samples/schedule.json).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=PREVIEWS_DIR,
        help="Directory for the preview PNGs.",
    )
    parser.add_argument(
        "--activate",
        type=str,
        default="lightning",
        help="Session id whose overlay is opened in each preview.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    for name, (width, height) in VIEWPORTS.items():
        output_path = args.output_dir / f"schedule_{name}.png"
        settings = AppSettings(
            source=args.source,
            output=output_path,
            width=width,
            height=height,
            breakpoint=800,
            timeout=10.0,
        )
        runtime = AppRuntime(settings=settings)
        if runtime.start() and args.activate:
            runtime.activate(args.activate)
        runtime.snapshot().save(output_path)
        print(f"Wrote {name} preview to {output_path}")


if __name__ == "__main__":
    main()
