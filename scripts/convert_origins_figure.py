#!/usr/bin/env python3
"""Convert a Habbo Origins figure string into a modern figure string.

The origins figure data and the modern color map are cached in the cache
directory on first use.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import requests

from colormap import load_color_map
from figure_errors import FigureDataError, FigureError, UsageError
from figure_remap import decode_figure, validate_figure_string
from gamedata_cache import FetchConfig, load_or_fetch, log
from origins_figuredata import load_origins_figuredata


DEFAULT_ORIGINS_URL = "http://origins-gamedata.habbo.com/figuredata/1"
DEFAULT_MODERN_URL = "https://www.habbo.com/gamedata/figuredata/1"
ORIGINS_FIGUREDATA_FILE = "origins-figuredata.json"
COLOR_MAP_FILE = "colormap.json"
CACHE_DIR_ENV = "ORIGINS_FIGURE_CACHE_DIR"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convert-origins-figure",
        description="Convert a 25-digit Habbo Origins figure string to a modern figure string.",
    )
    parser.add_argument("figure", nargs="?", help="Origins figure string (25 digits).")
    parser.add_argument("-q", "--quiet", action="store_true", help="Quiet output.")
    parser.add_argument(
        "--cache-dir",
        default=os.getenv(CACHE_DIR_ENV) or ".",
        help=f"Directory for cached figure data (default: ${CACHE_DIR_ENV} or the working directory).",
    )
    parser.add_argument("--origins-url", default=DEFAULT_ORIGINS_URL, help="Origins figure data URL.")
    parser.add_argument("--modern-url", default=DEFAULT_MODERN_URL, help="Modern figure data XML URL.")
    parser.add_argument("--timeout", type=float, default=30.0, help="HTTP timeout.")
    parser.add_argument("--retries", type=int, default=2, help="Retry count for network requests.")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Use color id 0 when a legacy color has no modern equivalent instead of failing.",
    )
    return parser


def run(args: argparse.Namespace, session: requests.Session) -> str:
    if args.figure is None:
        raise UsageError("no figure string given")
    validate_figure_string(args.figure)

    cfg = FetchConfig(
        timeout_seconds=max(5.0, args.timeout),
        retries=max(0, args.retries),
        verbose=not args.quiet,
    )
    cache_dir = Path(args.cache_dir)

    color_map = load_color_map(cache_dir / COLOR_MAP_FILE, session, cfg, url=args.modern_url)

    origins_path = cache_dir / ORIGINS_FIGUREDATA_FILE
    raw = load_or_fetch(origins_path, args.origins_url, session, cfg, label="Origins figure data")
    try:
        figure_data = load_origins_figuredata(raw)
    except FigureDataError as exc:
        raise FigureDataError(f"{exc} (delete {origins_path} to download it again)") from exc
    log(f"[Origins] part_sets={figure_data.count()}", enabled=cfg.verbose)

    figure = decode_figure(args.figure, figure_data, color_map, lenient=args.lenient)
    return str(figure)


def main(argv: Sequence[str], session: Optional[requests.Session] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        result = run(args, session or requests.Session())
    except UsageError:
        parser.print_usage(sys.stderr)
        return 1
    except (FigureError, RuntimeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(result)
    return 0


def entry_point() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
