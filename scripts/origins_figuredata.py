#!/usr/bin/env python3
"""Repair and load the Habbo Origins figure data export.

The origins export is JSON-like, but keyed objects are written with array
brackets (``["M":["hr":[...]]]``). ``repair_origins_figuredata`` rewrites
those bracket pairs to braces in place so ``json.loads`` can read the payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from figure_errors import FigureDataError


MAX_DEPTH = 8
GENDER_KEYS = ("M", "F")

OPEN_ARRAY = ord("[")
CLOSE_ARRAY = ord("]")
OPEN_OBJECT = ord("{")
CLOSE_OBJECT = ord("}")
COLON = ord(":")


@dataclass
class FigurePartSet:
    type: str
    id: int
    parts: Dict[str, str] = field(default_factory=dict)
    colors: List[str] = field(default_factory=list)


@dataclass
class FigureData:
    male: Dict[str, List[FigurePartSet]] = field(default_factory=dict)
    female: Dict[str, List[FigurePartSet]] = field(default_factory=dict)

    def groupings(self) -> List[Dict[str, List[FigurePartSet]]]:
        return [self.male, self.female]

    def count(self) -> int:
        return sum(len(sets) for grouping in self.groupings() for sets in grouping.values())


def repair_origins_figuredata(buf: bytearray) -> None:
    """Convert array-encoded objects in ``buf`` to real JSON objects, in place.

    A single scan keeps a stack of open brackets. Any ``:`` seen directly
    inside a ``[`` frame marks that frame as an object, and when the frame is
    closed both of its brackets are overwritten with braces. Arrays without
    a colon are left alone.

    The scan is not string aware: every ``[``, ``]``, ``{``, ``}`` and ``:``
    in the buffer is taken as structure. The origins export never has these
    characters inside string values, but any payload that does will be
    rewritten incorrectly.

    Braces are tracked as frames that are never rewritten, so running the
    repair over already repaired output changes nothing.
    """
    stack: List[List[Any]] = []
    for i, ch in enumerate(buf):
        if ch == OPEN_ARRAY or ch == OPEN_OBJECT:
            if len(stack) >= MAX_DEPTH:
                raise FigureDataError(f"figure data nests deeper than {MAX_DEPTH} levels at offset {i}")
            stack.append([i, False, ch == OPEN_ARRAY])
        elif ch == COLON:
            # colons at the top level belong to an already valid object
            if stack:
                stack[-1][1] = True
        elif ch == CLOSE_ARRAY or ch == CLOSE_OBJECT:
            if not stack:
                raise FigureDataError(f"unbalanced {chr(ch)!r} in figure data at offset {i}")
            start, is_object, is_array = stack.pop()
            if is_array and is_object:
                buf[start] = OPEN_OBJECT
                buf[i] = CLOSE_OBJECT

    if stack:
        raise FigureDataError(f"unclosed bracket in figure data at offset {stack[-1][0]}")


def parse_part_set(part_type: str, raw: Any) -> FigurePartSet:
    if not isinstance(raw, dict):
        raise ValueError(f"{part_type}: part set is not an object")

    set_id = raw.get("s")
    if isinstance(set_id, bool) or not isinstance(set_id, int):
        raise ValueError(f"{part_type}: part set id {set_id!r} is not an integer")

    parts = raw.get("p") or {}
    if not isinstance(parts, dict):
        raise ValueError(f"{part_type}/{set_id}: parts is not an object")

    colors = raw.get("c")
    if not isinstance(colors, list) or not all(isinstance(c, str) for c in colors):
        raise ValueError(f"{part_type}/{set_id}: colors is not a list of strings")

    return FigurePartSet(
        type=part_type,
        id=set_id,
        parts={str(k): str(v) for k, v in parts.items()},
        colors=list(colors),
    )


def parse_grouping(gender: str, raw: Any) -> Dict[str, List[FigurePartSet]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"{gender}: expected an object of part types")

    grouping: Dict[str, List[FigurePartSet]] = {}
    for part_type, sets in raw.items():
        if not isinstance(sets, list):
            raise ValueError(f"{gender}/{part_type}: expected a list of part sets")
        grouping[part_type] = [parse_part_set(part_type, item) for item in sets]
    return grouping


def load_origins_figuredata(data: Union[bytes, bytearray]) -> FigureData:
    """Repair ``data`` and decode it into a :class:`FigureData` catalog.

    The caller's buffer is copied before the in-place repair.
    """
    buf = bytearray(data)
    try:
        repair_origins_figuredata(buf)
        payload = json.loads(buf.decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("top level is not an object")
        return FigureData(
            male=parse_grouping("M", payload.get("M")),
            female=parse_grouping("F", payload.get("F")),
        )
    except ValueError as exc:
        # covers FigureDataError, json.JSONDecodeError and UnicodeDecodeError
        raise FigureDataError(f"unexpected origins figure data structure: {exc}") from exc


def index_part_sets(figure_data: FigureData) -> Dict[int, FigurePartSet]:
    """Flatten both genders into one ``id -> part set`` index.

    Male sets are indexed before female sets, each in payload order. When an
    id appears more than once the last one wins.
    """
    index: Dict[int, FigurePartSet] = {}
    for grouping in figure_data.groupings():
        for sets in grouping.values():
            for part_set in sets:
                index[part_set.id] = part_set
    return index
