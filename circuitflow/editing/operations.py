"""Board edit operations — placement, routing, rotation, split/merge, delete.

Every operation takes a snapshot and returns a new one.  Operations that
change the traces at a junction finish with a continuity pass there.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import replace
from typing import Iterable

from circuitflow.board.models import Board, ContinuityMode, Junction, Part, PinRef, Trace
from circuitflow.board.transform import normalize_rotation, position_for_pin_target
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.library import JUNCTION_FOOTPRINT, get_footprint
from circuitflow.vector import Vector2

from .continuity import NodeEdit, propagate_continuity

log = logging.getLogger("circuitflow.editing.operations")


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def snap(value: float, rules: BoardRules = BOARD_RULES, junction: bool = False) -> float:
    """Round to the snap grid (half grid for junctions), halves rounding up."""
    grid = rules.junction_snap if junction else rules.snap_unit
    return math.floor(value / grid + 0.5) * grid


def snap_point(point: Vector2, rules: BoardRules = BOARD_RULES, junction: bool = False) -> Vector2:
    return Vector2(snap(point.x, rules, junction), snap(point.y, rules, junction))


# ── Placement and routing ──────────────────────────────────────────


def add_part(
    board: Board,
    footprint_id: str,
    at: Vector2,
    rules: BoardRules = BOARD_RULES,
    *,
    part_id: str | None = None,
    rotation: float = 0.0,
    name: str | None = None,
) -> tuple[Board, str]:
    """Place a part so its first pin lands on the snapped point ``at``."""
    footprint = get_footprint(footprint_id)
    if footprint is None:
        raise KeyError(f"Unknown footprint '{footprint_id}'")
    pid = part_id or _new_id("comp")
    if name is None:
        name = footprint.name.split(" ")[0][:3].upper() + str(len(board.components) + 1)
    part = Part(
        id=pid,
        footprint_id=footprint_id,
        position=position_for_pin_target(footprint, snap_point(at, rules), rotation),
        rotation=normalize_rotation(rotation),
        name=name,
    )
    return board.with_components((*board.components, part)), pid


def add_junction(
    board: Board,
    at: Vector2,
    rules: BoardRules = BOARD_RULES,
    *,
    junction_id: str | None = None,
) -> tuple[Board, Junction]:
    """Drop a smooth junction whose pad sits on the half-grid point nearest ``at``."""
    jid = junction_id or _new_id("junc")
    junction = Junction(
        id=jid,
        position=position_for_pin_target(JUNCTION_FOOTPRINT, snap_point(at, rules, junction=True), 0.0),
        name=f"J{len(board.components) + 1}",
    )
    return board.with_components((*board.components, junction)), junction


def add_trace(
    board: Board,
    from_pin: PinRef,
    to_pin: PinRef,
    rules: BoardRules = BOARD_RULES,
    *,
    trace_id: str | None = None,
) -> tuple[Board, str]:
    if from_pin == to_pin:
        raise ValueError(f"Cannot route pin {from_pin} to itself")
    tid = trace_id or _new_id("trace")
    trace = Trace(
        id=tid,
        from_pin=from_pin,
        to_pin=to_pin,
        width=rules.default_trace_width,
        color=rules.default_trace_color,
    )
    return board.with_traces((*board.traces, trace)), tid


# ── Rotation ───────────────────────────────────────────────────────


def rotate_components(
    board: Board,
    component_ids: Iterable[str],
    step: float = 90.0,
) -> Board:
    """Rotate parts by ``step`` degrees.  Junctions and locked parts are skipped.

    Only part pins move, so no junction tangents need updating.
    """
    ids = set(component_ids)
    rotated = False
    components = []
    for c in board.components:
        if c.id in ids and isinstance(c, Part) and not c.locked:
            c = replace(c, rotation=normalize_rotation(c.rotation + step))
            rotated = True
        components.append(c)
    if not rotated:
        return board
    return board.with_components(components)


# ── Junction editing ───────────────────────────────────────────────


def set_continuity(
    board: Board,
    junction_id: str,
    mode: ContinuityMode,
    rules: BoardRules = BOARD_RULES,
) -> Board:
    junction = board.component(junction_id)
    if not isinstance(junction, Junction):
        raise TypeError(f"Component '{junction_id}' is not a junction")
    board = board.replace_component(replace(junction, continuity=ContinuityMode(mode)))
    return propagate_continuity(board, [NodeEdit(junction.pin)], rules)


def split_trace(
    board: Board,
    trace_id: str,
    at: Vector2,
    rules: BoardRules = BOARD_RULES,
    *,
    junction_id: str | None = None,
) -> tuple[Board, str]:
    """Replace a trace by two traces meeting at a new smooth junction.

    The outer tangent offsets are kept; the inner ones are made continuous.
    Returns the new board and the junction id.
    """
    trace = board.trace(trace_id)
    board, junction = add_junction(board, at, rules, junction_id=junction_id)
    first = Trace(
        id=_new_id("trace"), from_pin=trace.from_pin, to_pin=junction.pin,
        width=trace.width, color=trace.color, c1_offset=trace.c1_offset,
    )
    second = Trace(
        id=_new_id("trace"), from_pin=junction.pin, to_pin=trace.to_pin,
        width=trace.width, color=trace.color, c2_offset=trace.c2_offset,
    )
    traces = [t for t in board.traces if t.id != trace_id] + [first, second]
    board = board.with_traces(traces)
    return propagate_continuity(board, [NodeEdit(junction.pin, first.id)], rules), junction.id


def merge_junction(board: Board, junction_id: str) -> tuple[Board, str | None]:
    """Remove a junction, joining its two traces into one.

    Returns the new board and the merged trace id, or None when the
    junction did not have exactly two traces (it is then just deleted
    along with its traces).
    """
    junction = board.component(junction_id)
    if not isinstance(junction, Junction):
        raise TypeError(f"Component '{junction_id}' is not a junction")
    node = junction.pin
    attached = board.traces_at(node)
    if len(attached) != 2:
        return _remove(board, {junction_id}, set()), None

    t1, t2 = attached
    start, end = t1.other_end(node), t2.other_end(node)
    merged = Trace(
        id=_new_id("trace_merged"),
        from_pin=start,
        to_pin=end,
        width=max(t1.width, t2.width),
        color=t1.color,
        c1_offset=t1.offset_at(start),
        c2_offset=t2.offset_at(end),
    )
    traces = [t for t in board.traces if t.id not in (t1.id, t2.id)] + [merged]
    components = [c for c in board.components if c.id != junction_id]
    return Board(components=tuple(components), traces=tuple(traces)), merged.id


# ── Deletion ───────────────────────────────────────────────────────


def _remove(board: Board, component_ids: set[str], trace_ids: set[str]) -> Board:
    components = [c for c in board.components if c.id not in component_ids]
    traces = [
        t for t in board.traces
        if t.id not in trace_ids
        and t.from_pin.component_id not in component_ids
        and t.to_pin.component_id not in component_ids
    ]
    return Board(components=tuple(components), traces=tuple(traces))


def delete(board: Board, ids: Iterable[str]) -> Board:
    """Delete components and traces by id, plus traces left without an endpoint.

    Deleting a lone junction that splices two traces merges them instead.
    """
    ids = set(ids)
    if len(ids) == 1:
        (only,) = ids
        if isinstance(board.find_component(only), Junction):
            merged, _ = merge_junction(board, only)
            return merged
    component_ids = {c.id for c in board.components if c.id in ids}
    trace_ids = {t.id for t in board.traces if t.id in ids}
    unknown = ids - component_ids - trace_ids
    if unknown:
        log.debug("delete: ignoring unknown ids %s", sorted(unknown))
    return _remove(board, component_ids, trace_ids)
