#!/usr/bin/env python3
"""Reverse color map: part type -> lowercase hex color -> modern color id.

The map is built from the modern figure data XML and persisted as JSON so
later runs skip the download.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Dict, Union

import requests

from figure_errors import FigureDataError
from gamedata_cache import FetchConfig, fetch_bytes, log, write_atomic


ColorMap = Dict[str, Dict[str, int]]


def parse_color_map(data: bytes) -> ColorMap:
    try:
        raw: Any = json.loads(data.decode("utf-8"))
    except ValueError as exc:
        raise FigureDataError(f"color map is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise FigureDataError("color map: expected an object of part types")

    color_map: ColorMap = {}
    for part_type, colors in raw.items():
        if not isinstance(colors, dict):
            raise FigureDataError(f"color map: {part_type} is not an object")
        mapped: Dict[str, int] = {}
        for hex_color, color_id in colors.items():
            if isinstance(color_id, bool) or not isinstance(color_id, int):
                raise FigureDataError(f"color map: {part_type}/{hex_color} is not an integer id")
            mapped[hex_color.lower()] = color_id
        color_map[part_type] = mapped
    return color_map


def build_color_map(xml_data: Union[str, bytes]) -> ColorMap:
    try:
        root = ET.fromstring(xml_data)
    except ET.ParseError as exc:
        raise FigureDataError(f"modern figure data is not valid XML: {exc}") from exc

    palettes: Dict[str, Dict[str, int]] = {}
    for palette in root.iter("palette"):
        palette_id = (palette.get("id") or "").strip()
        colors: Dict[str, int] = {}
        for color in palette.iter("color"):
            value = (color.text or "").strip().lower()
            try:
                color_id = int(color.get("id") or "")
            except ValueError as exc:
                raise FigureDataError(f"palette {palette_id}: bad color id {color.get('id')!r}") from exc
            if value:
                colors[value] = color_id
        palettes[palette_id] = colors

    color_map: ColorMap = {}
    for set_type in root.iter("settype"):
        part_type = (set_type.get("type") or "").strip()
        if not part_type:
            continue
        palette_id = (set_type.get("paletteid") or "").strip()
        color_map[part_type] = dict(palettes.get(palette_id, {}))
    return color_map


def write_color_map(path: Path, color_map: ColorMap) -> None:
    write_atomic(path, (json.dumps(color_map, sort_keys=True) + "\n").encode("utf-8"))


def load_color_map(path: Path, session: requests.Session, cfg: FetchConfig, *, url: str) -> ColorMap:
    if path.exists() and path.stat().st_size > 0:
        log(f"[Colors] using cached {path}", enabled=cfg.verbose)
        try:
            return parse_color_map(path.read_bytes())
        except FigureDataError as exc:
            raise FigureDataError(f"{exc} (delete {path} to rebuild it)") from exc

    log("[Colors] loading modern figure data", enabled=cfg.verbose)
    xml_bytes = fetch_bytes(session, url, cfg, label="Modern figure data")
    color_map = build_color_map(xml_bytes)
    write_color_map(path, color_map)
    log(f"[Colors] part_types={len(color_map)} written to {path}", enabled=cfg.verbose)
    return color_map
