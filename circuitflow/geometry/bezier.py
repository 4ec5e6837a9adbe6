"""Cubic trace curves — control points, sampling and path descriptors.

Every consumer (DRC, hit-testing, G-code and SVG export) goes through
this module for trace shape; nobody else evaluates the Bezier basis.

Sampling is uniform in the curve parameter, not in arc length, so tight
bends get fewer samples per unit of length than straight runs.
"""

from __future__ import annotations

from dataclasses import dataclass

from circuitflow.board.models import Board, Trace
from circuitflow.board.transform import resolve_pin
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.vector import Vector2


@dataclass(frozen=True)
class CubicBezier:
    """Opaque path descriptor handed to renderers and exporters."""

    start: Vector2
    c1: Vector2
    c2: Vector2
    end: Vector2

    def point(self, t: float) -> Vector2:
        return _bezier_point(t, self.start, self.c1, self.c2, self.end)

    def sample(self, count: int) -> list[Vector2]:
        """``count`` points at uniform parameter steps, both endpoints included."""
        if count < 2:
            return [self.start]
        last = count - 1
        return [self.point(i / last) for i in range(count)]

    def svg_path(self) -> str:
        """SVG path data, e.g. ``M 0 0 C 45 0, 55 0, 100 0``."""
        return (
            f"M {_num(self.start.x)} {_num(self.start.y)} "
            f"C {_num(self.c1.x)} {_num(self.c1.y)}, "
            f"{_num(self.c2.x)} {_num(self.c2.y)}, "
            f"{_num(self.end.x)} {_num(self.end.y)}"
        )


def _sign(v: float) -> float:
    if v > 0:
        return 1.0
    if v < 0:
        return -1.0
    return 0.0


def _num(v: float) -> str:
    s = f"{v:.4f}".rstrip("0").rstrip(".")
    return "0" if s == "-0" else s


def control_points(
    start: Vector2,
    end: Vector2,
    trace: Trace | None = None,
    rules: BoardRules = BOARD_RULES,
) -> tuple[Vector2, Vector2]:
    """Derive (c1, c2) for a trace between two pin positions.

    Manual offsets win when present.  Otherwise the tangent follows the
    dominant axis between the pins with length
    ``max(|delta| * auto_tension_factor, min_tension)``.
    """
    dx = end.x - start.x
    dy = end.y - start.y

    if abs(dx) >= abs(dy):
        tension = _sign(dx) * max(abs(dx) * rules.auto_tension_factor, rules.min_tension)
        auto = Vector2(tension, 0.0)
    else:
        tension = _sign(dy) * max(abs(dy) * rules.auto_tension_factor, rules.min_tension)
        auto = Vector2(0.0, tension)

    c1_offset = trace.c1_offset if trace is not None else None
    c2_offset = trace.c2_offset if trace is not None else None

    c1 = start + c1_offset if c1_offset is not None else start + auto
    c2 = end + c2_offset if c2_offset is not None else end - auto
    return c1, c2


def auto_offsets(
    start: Vector2,
    end: Vector2,
    rules: BoardRules = BOARD_RULES,
) -> tuple[Vector2, Vector2]:
    """Tangent offsets (relative to each pin) the auto rule would produce."""
    c1, c2 = control_points(start, end, None, rules)
    return c1 - start, c2 - end


def _bezier_point(t: float, p0: Vector2, p1: Vector2, p2: Vector2, p3: Vector2) -> Vector2:
    mt = 1.0 - t
    mt2 = mt * mt
    mt3 = mt2 * mt
    t2 = t * t
    t3 = t2 * t
    return Vector2(
        mt3 * p0.x + 3 * mt2 * t * p1.x + 3 * mt * t2 * p2.x + t3 * p3.x,
        mt3 * p0.y + 3 * mt2 * t * p1.y + 3 * mt * t2 * p2.y + t3 * p3.y,
    )


def point_at(
    t: float,
    start: Vector2,
    end: Vector2,
    trace: Trace | None = None,
    rules: BoardRules = BOARD_RULES,
) -> Vector2:
    """Point on the trace curve at parameter ``t`` in [0, 1]."""
    c1, c2 = control_points(start, end, trace, rules)
    return _bezier_point(t, start, c1, c2, end)


def path_descriptor(
    start: Vector2,
    end: Vector2,
    trace: Trace | None = None,
    rules: BoardRules = BOARD_RULES,
) -> CubicBezier:
    c1, c2 = control_points(start, end, trace, rules)
    return CubicBezier(start=start, c1=c1, c2=c2, end=end)


def trace_curve(
    board: Board,
    trace: Trace,
    rules: BoardRules = BOARD_RULES,
) -> CubicBezier | None:
    """Resolve a trace's endpoints on ``board``.  None if either dangles."""
    start = resolve_pin(board, trace.from_pin)
    end = resolve_pin(board, trace.to_pin)
    if start is None or end is None:
        return None
    return path_descriptor(start, end, trace, rules)
