"""Pin resolution — component-local pin offsets to board-global coordinates.

Positions are computed on demand from the snapshot passed in; nothing
here caches across edits.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterator

from circuitflow.library import Footprint, PinTemplate, get_footprint
from circuitflow.vector import Vector2

from .models import Board, Component, PinRef

log = logging.getLogger("circuitflow.board.transform")


@dataclass(frozen=True)
class ResolvedPin:
    """A pin reference resolved against the current snapshot."""

    ref: PinRef
    template: PinTemplate
    position: Vector2


def normalize_rotation(rotation_deg: float) -> float:
    """Fold any angle into [0, 360)."""
    r = rotation_deg % 360.0
    return 0.0 if r == 360.0 else r


def footprint_for(component: Component) -> Footprint | None:
    return get_footprint(component.footprint_id)


def global_pos(
    component: Component,
    pin: PinTemplate,
    footprint: Footprint | None,
) -> Vector2:
    """Rotate a pin about its footprint centre and translate onto the board.

    With no footprint the component position is returned unchanged; the
    caller treats that as a best-effort value during transient states.
    """
    if footprint is None:
        return component.position

    cx, cy = footprint.width / 2, footprint.height / 2
    lx = pin.local_pos.x - cx
    ly = pin.local_pos.y - cy

    rotation = normalize_rotation(component.rotation)
    if rotation == 0.0:
        nx, ny = lx, ly
    else:
        rad = math.radians(rotation)
        cos_r = math.cos(rad)
        sin_r = math.sin(rad)
        nx = lx * cos_r - ly * sin_r
        ny = lx * sin_r + ly * cos_r

    return Vector2(
        component.position.x + nx + cx,
        component.position.y + ny + cy,
    )


def position_for_pin_target(
    footprint: Footprint | None,
    target: Vector2,
    rotation_deg: float,
) -> Vector2:
    """Component position that puts the footprint's first pin on ``target``."""
    if footprint is None or not footprint.pins:
        return target
    cx, cy = footprint.width / 2, footprint.height / 2
    first = footprint.pins[0]
    lx = first.local_pos.x - cx
    ly = first.local_pos.y - cy
    rad = math.radians(normalize_rotation(rotation_deg))
    nx = lx * math.cos(rad) - ly * math.sin(rad)
    ny = lx * math.sin(rad) + ly * math.cos(rad)
    return Vector2(target.x - (nx + cx), target.y - (ny + cy))


def resolve_pin(board: Board, ref: PinRef) -> Vector2 | None:
    """Global position of a pin, or None if the component or pin is gone."""
    component = board.find_component(ref.component_id)
    if component is None:
        return None
    footprint = footprint_for(component)
    if footprint is None:
        log.debug("Component '%s': unknown footprint '%s'", component.id, component.footprint_id)
        return None
    template = footprint.pin(ref.pin_id)
    if template is None:
        return None
    return global_pos(component, template, footprint)


def component_pins(component: Component) -> list[ResolvedPin]:
    """All pins of one component, resolved.  Empty if its footprint is unknown."""
    footprint = footprint_for(component)
    if footprint is None:
        return []
    return [
        ResolvedPin(
            ref=PinRef(component.id, p.id),
            template=p,
            position=global_pos(component, p, footprint),
        )
        for p in footprint.pins
    ]


def iter_pins(board: Board) -> Iterator[ResolvedPin]:
    for component in board.components:
        yield from component_pins(component)
