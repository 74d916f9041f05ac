from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from eventline.errors import TimelineError
from eventline.interaction import PointerEvent
from eventline.io import ChartOptions, load_dataset, load_options
from eventline.layout import MARGIN_TOP
from eventline.timeline import CanvasMount, Timeline


LOGGER = logging.getLogger("eventline")
DEFAULT_CONTAINER_WIDTH = 760


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="eventline")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a JSON dataset to a PNG timeline.")
    render.add_argument("dataset", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--config", type=Path, default=None, help="TOML options file ([timeline], [style]).")
    render.add_argument(
        "--width",
        type=int,
        default=None,
        help=f"Container width in px. Default: options file, then {DEFAULT_CONTAINER_WIDTH}.",
    )
    render.add_argument("--height", type=int, default=None, help="Plot height in px, header excluded.")
    scrub = render.add_mutually_exclusive_group()
    scrub.add_argument("--pointer-x", type=float, default=None, help="Scrub to this frame x before saving.")
    scrub.add_argument("--leave", action="store_true", help="Save the chart in its pointer-left state.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        if args.command == "render":
            return _render(args)
    except TimelineError as exc:
        LOGGER.error("%s", exc)
        return 2
    return 1


def _render(args: argparse.Namespace) -> int:
    options = load_options(args.config) if args.config is not None else ChartOptions()
    dataset = load_dataset(args.dataset)
    width = args.width if args.width is not None else (options.width or DEFAULT_CONTAINER_WIDTH)
    timeline = (
        Timeline(CanvasMount(parent_width=width))
        .data(dataset["data"])
        .metrics(dataset["metrics"])
        .snapshots(dataset["snapshots"])
        .style(options.style)
    )
    height = args.height if args.height is not None else options.height
    if height is not None:
        timeline.height(height)
    if dataset["events"] is not None:
        timeline.events(dataset["events"])
    chart = timeline.render()

    if args.leave:
        chart.pointer_leave()
    elif args.pointer_x is not None:
        middle = MARGIN_TOP + chart.layout.panel_height / 2.0
        chart.handle(PointerEvent(event_type="pointer_move", x=args.pointer_x, y=middle))
    out = chart.to_png(args.out)
    LOGGER.info("wrote %s (selected index %d)", out, chart.selected_index)
    return 0


if __name__ == "__main__":
    sys.exit(main())
