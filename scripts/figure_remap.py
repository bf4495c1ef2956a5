#!/usr/bin/env python3
"""Decode a 25-digit origins figure string into a modern figure.

Each of the five 5-digit slots is a 3-digit part set id followed by a 2-digit,
1-based index into that set's legacy colors. Part ids are kept; colors are
resolved to modern color ids through a :data:`colormap.ColorMap`. Hair sets
that were drawn with a built-in hat in origins also get the matching modern
hat part.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping

from colormap import ColorMap
from figure_errors import FigureLookupError, FigureValidationError
from origins_figuredata import FigureData, index_part_sets


FIGURE_LENGTH = 25
SLOT_LENGTH = 5
SET_ID_LENGTH = 3

HAIR = "hr"
HAT = "ha"

HAIR_TO_HAT: Mapping[int, int] = MappingProxyType(
    {
        # male
        120: 1001,
        130: 1010,
        140: 1004,
        150: 1003,
        160: 1004,
        175: 1006,
        176: 1007,
        177: 1008,
        178: 1009,
        800: 1012,
        801: 1011,
        802: 1013,
        # female
        525: 1002,
        535: 1003,
        565: 1004,
        570: 1005,
        580: 1007,
        585: 1006,
        590: 1008,
        595: 1009,
        810: 1012,
        811: 1013,
    }
)


@dataclass
class FigurePart:
    type: str
    id: int
    colors: List[int] = field(default_factory=list)

    def __str__(self) -> str:
        return "-".join([self.type, str(self.id), *(str(c) for c in self.colors)])


@dataclass
class Figure:
    parts: List[FigurePart] = field(default_factory=list)

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


def validate_figure_string(figure_string: str) -> None:
    if len(figure_string) != FIGURE_LENGTH:
        raise FigureValidationError(f"invalid figure string, must be {FIGURE_LENGTH} characters in length")
    if any(c < "0" or c > "9" for c in figure_string):
        raise FigureValidationError("invalid figure string, must consist only of numbers")


def decode_figure(
    figure_string: str,
    figure_data: FigureData,
    color_map: ColorMap,
    *,
    hair_to_hat: Mapping[int, int] = HAIR_TO_HAT,
    lenient: bool = False,
) -> Figure:
    """Convert ``figure_string`` to a modern :class:`Figure`.

    Unknown set ids and out of range color indices (including ``00``) raise
    :class:`FigureLookupError`. A legacy color missing from ``color_map`` also
    raises, unless ``lenient`` is set, in which case color id 0 is used.
    """
    validate_figure_string(figure_string)
    sets = index_part_sets(figure_data)
    figure = Figure()

    for start in range(0, FIGURE_LENGTH, SLOT_LENGTH):
        slot = figure_string[start:start + SLOT_LENGTH]
        set_id = int(slot[:SET_ID_LENGTH])
        color_index = int(slot[SET_ID_LENGTH:])

        part_set = sets.get(set_id)
        if part_set is None:
            raise FigureLookupError(f"slot {start // SLOT_LENGTH + 1}: unknown part set {set_id}")
        if not 1 <= color_index <= len(part_set.colors):
            raise FigureLookupError(
                f"slot {start // SLOT_LENGTH + 1}: color index {color_index} out of range "
                f"for {part_set.type}/{set_id} ({len(part_set.colors)} colors)"
            )

        legacy_color = part_set.colors[color_index - 1].lower()
        color_id = color_map.get(part_set.type, {}).get(legacy_color)
        if color_id is None:
            if not lenient:
                raise FigureLookupError(f"no modern color for {part_set.type} #{legacy_color}")
            color_id = 0

        figure.parts.append(FigurePart(type=part_set.type, id=set_id, colors=[color_id]))

        if part_set.type == HAIR:
            hat_id = hair_to_hat.get(set_id)
            if hat_id is not None:
                figure.parts.append(FigurePart(type=HAT, id=hat_id, colors=[color_id]))

    return figure
