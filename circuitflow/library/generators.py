"""Parametric footprints — DIP packages, pin headers and the junction pad."""

from __future__ import annotations

import math

from circuitflow.vector import Vector2

from .models import Footprint, PinTemplate


PITCH = 25.4
PADDING = 25.4

JUNCTION_FOOTPRINT_ID = "JUNCTION"

JUNCTION_FOOTPRINT = Footprint(
    id=JUNCTION_FOOTPRINT_ID,
    name="Junction",
    width=25.4,
    height=25.4,
    # centred so the pad position does not depend on rotation
    pins=(PinTemplate(id="p1", name="J", local_pos=Vector2(12.7, 12.7)),),
    shape="circle",
)


def generate_dip_footprint(pin_count: int) -> Footprint:
    """Dual in-line package with pins numbered counter-clockwise from pin 1."""
    row_spacing = 152.4 if pin_count >= 24 else 76.2
    per_row = math.ceil(pin_count / 2)

    pins: list[PinTemplate] = []
    for i in range(per_row):
        pins.append(PinTemplate(
            id=f"p{i + 1}", name=f"{i + 1}",
            local_pos=Vector2(PADDING, PADDING + i * PITCH),
        ))
    for i in range(per_row):
        index = per_row + i
        if index >= pin_count:
            break
        pins.append(PinTemplate(
            id=f"p{index + 1}", name=f"{index + 1}",
            local_pos=Vector2(PADDING + row_spacing, PADDING + (per_row - 1 - i) * PITCH),
        ))

    return Footprint(
        id=f"dip_{pin_count}",
        name=f"DIP-{pin_count} IC",
        width=row_spacing + PADDING * 2,
        height=(per_row - 1) * PITCH + PADDING * 2,
        pins=tuple(pins),
    )


def generate_header_footprint(pin_count: int) -> Footprint:
    """Single-row 0.1" pin header."""
    pins = tuple(
        PinTemplate(id=f"p{i + 1}", name=f"{i + 1}", local_pos=Vector2(PADDING, PADDING + i * PITCH))
        for i in range(pin_count)
    )
    return Footprint(
        id=f"header_{pin_count}",
        name=f"{pin_count}-Pin Header",
        width=PADDING * 2,
        height=(pin_count - 1) * PITCH + PADDING * 2,
        pins=pins,
    )
