"""Continuity maintenance — keep traces tangent-consistent through junctions.

A junction with exactly two attached traces is a pass-through joint.  In
``smooth`` mode the sibling trace's tangent offset at the junction is set
to the exact negation of the edited trace's, so the pair reads as one
curve.  ``linear`` keeps the pair collinear: the sibling points exactly
opposite the edited tangent but keeps its own length.  ``independent``
leaves both alone.  The edited trace's own offset is never rewritten.
Pins of ordinary parts never propagate, and nodes with any other number
of traces are left untouched.

Each call is one pass over the full trace collection and returns a new
Board; the input snapshot is never modified.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable

from circuitflow.board.models import Board, ContinuityMode, Junction, PinRef, Trace
from circuitflow.board.transform import component_pins, resolve_pin
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.geometry.bezier import auto_offsets
from circuitflow.vector import Vector2

log = logging.getLogger("circuitflow.editing.continuity")


@dataclass(frozen=True)
class NodeEdit:
    """A node whose near-side tangent changed, and the trace that drove it.

    With no driver, the first attached trace in collection order drives.
    """

    node: PinRef
    driver_id: str | None = None


def effective_offset(
    board: Board,
    trace: Trace,
    node: PinRef,
    rules: BoardRules = BOARD_RULES,
) -> Vector2 | None:
    """The tangent offset a trace actually uses at ``node`` (manual or auto)."""
    manual = trace.offset_at(node)
    if manual is not None:
        return manual
    start = resolve_pin(board, trace.from_pin)
    end = resolve_pin(board, trace.to_pin)
    if start is None or end is None:
        return None
    c1_auto, c2_auto = auto_offsets(start, end, rules)
    return c1_auto if trace.from_pin == node else c2_auto


def _collinear(driver: Vector2, sibling: Vector2 | None) -> Vector2 | None:
    """``driver`` rescaled to the sibling's current tangent length.

    None when the driver has no direction.  A sibling with no length
    takes the driver's.
    """
    length = math.hypot(driver.x, driver.y)
    if length == 0.0:
        return None
    target = math.hypot(sibling.x, sibling.y) if sibling is not None else 0.0
    if target == 0.0:
        return driver
    return driver * (target / length)


def propagate_continuity(
    board: Board,
    edits: Iterable[NodeEdit],
    rules: BoardRules = BOARD_RULES,
) -> Board:
    """Apply the junction continuity rule at every edited node."""
    updated: dict[str, Trace] = {}
    seen: set[PinRef] = set()

    def current(t: Trace) -> Trace:
        return updated.get(t.id, t)

    for edit in edits:
        if edit.node in seen:
            continue
        seen.add(edit.node)

        junction = board.find_component(edit.node.component_id)
        if not isinstance(junction, Junction):
            continue
        if junction.continuity == ContinuityMode.INDEPENDENT:
            continue

        attached = [current(t) for t in board.traces if t.touches(edit.node)]
        if len(attached) != 2:
            log.debug("Junction '%s' has %d traces, continuity not applied",
                      junction.id, len(attached))
            continue

        driver, sibling = attached
        if edit.driver_id is not None and sibling.id == edit.driver_id:
            driver, sibling = sibling, driver

        offset = effective_offset(board, driver, edit.node, rules)
        if offset is None:
            continue
        if junction.continuity == ContinuityMode.LINEAR:
            offset = _collinear(offset, effective_offset(board, sibling, edit.node, rules))
            if offset is None:
                continue
        updated[sibling.id] = sibling.with_offset_at(edit.node, -offset)

    if not updated:
        return board
    return board.with_traces(updated.get(t.id, t) for t in board.traces)


# ── Edits that drive continuity ────────────────────────────────────


def move_component(
    board: Board,
    component_id: str,
    position: Vector2,
    rules: BoardRules = BOARD_RULES,
) -> Board:
    """Move a component and re-apply continuity at each of its pins.

    Locked components stay put.
    """
    component = board.component(component_id)
    if component.locked:
        log.debug("Component '%s' is locked, move ignored", component_id)
        return board
    moved = board.replace_component(replace(component, position=position))
    edits = [NodeEdit(pin.ref) for pin in component_pins(moved.component(component_id))]
    return propagate_continuity(moved, edits, rules)


def drag_handle(
    board: Board,
    trace_id: str,
    handle: int,
    target: Vector2,
    rules: BoardRules = BOARD_RULES,
) -> Board:
    """Drag control point 1 or 2 of a trace to ``target``.

    The offset is stored relative to the near-side pin, then mirrored onto
    the sibling trace if that pin is a smooth two-trace junction.
    """
    if handle not in (1, 2):
        raise ValueError(f"handle must be 1 or 2, got {handle}")
    trace = board.trace(trace_id)
    node = trace.from_pin if handle == 1 else trace.to_pin
    node_pos = resolve_pin(board, node)
    if node_pos is None:
        log.debug("Trace '%s': handle %d pin %s unresolved, drag ignored", trace_id, handle, node)
        return board

    offset = target - node_pos
    dragged = replace(trace, c1_offset=offset) if handle == 1 else replace(trace, c2_offset=offset)
    board = board.with_traces(dragged if t.id == trace_id else t for t in board.traces)
    return propagate_continuity(board, [NodeEdit(node, trace_id)], rules)
