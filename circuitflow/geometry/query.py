"""Spatial queries used by the interaction layer — trace/pin picking and marquee."""

from __future__ import annotations

from shapely.geometry import LineString, Point, box as shapely_box

from circuitflow.board.models import Board, Part, PinRef, Trace
from circuitflow.board.transform import footprint_for, iter_pins, ResolvedPin
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.vector import Vector2

from .bezier import trace_curve

HIT_SAMPLES = 21


def trace_polyline(board: Board, trace: Trace, samples: int, rules: BoardRules = BOARD_RULES) -> LineString | None:
    curve = trace_curve(board, trace, rules)
    if curve is None:
        return None
    return LineString([p.as_tuple() for p in curve.sample(samples)])


def trace_at(
    board: Board,
    point: Vector2,
    tolerance: float | None = None,
    rules: BoardRules = BOARD_RULES,
) -> Trace | None:
    """Topmost (last drawn) trace passing within ``tolerance`` of ``point``."""
    tol = rules.trace_hit_tolerance if tolerance is None else tolerance
    p = Point(point.x, point.y)
    for trace in reversed(board.traces):
        line = trace_polyline(board, trace, HIT_SAMPLES, rules)
        if line is not None and line.distance(p) < tol:
            return trace
    return None


def pin_at(
    board: Board,
    point: Vector2,
    tolerance: float | None = None,
    exclude: PinRef | None = None,
    rules: BoardRules = BOARD_RULES,
) -> ResolvedPin | None:
    """Nearest pin strictly within ``tolerance`` of ``point``."""
    tol = rules.pin_hit_tolerance if tolerance is None else tolerance
    best: ResolvedPin | None = None
    best_dist = float("inf")
    for pin in iter_pins(board):
        if pin.ref == exclude:
            continue
        d = pin.position.distance_to(point)
        if d < tol and d < best_dist:
            best, best_dist = pin, d
    return best


def components_in_rect(board: Board, corner_a: Vector2, corner_b: Vector2) -> list[str]:
    """Ids of parts whose whole footprint box lies inside the marquee."""
    marquee = shapely_box(
        min(corner_a.x, corner_b.x), min(corner_a.y, corner_b.y),
        max(corner_a.x, corner_b.x), max(corner_a.y, corner_b.y),
    )
    hits: list[str] = []
    for c in board.components:
        if not isinstance(c, Part):
            continue
        fp = footprint_for(c)
        if fp is None:
            continue
        body = shapely_box(c.position.x, c.position.y, c.position.x + fp.width, c.position.y + fp.height)
        if marquee.covers(body):
            hits.append(c.id)
    return hits
