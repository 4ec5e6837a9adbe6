"""Clearance checker — sampled trace-to-trace and trace-to-pad spacing.

Each trace is sampled at a fixed number of uniform parameter steps and
every sample pair is tested against the clearance radius derived from the
snap unit.  Trace pairs are O(T²·N²) and trace-pad checks O(T·P·N); the
engine targets boards with at most a few hundred traces.
"""

from __future__ import annotations

import logging

from circuitflow.board.models import Board
from circuitflow.board.transform import iter_pins
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.geometry.bezier import trace_curve
from circuitflow.vector import Vector2

from .models import DrcResult, DrcStatus, TraceSamples

log = logging.getLogger("circuitflow.drc.checker")


def too_close(a: Vector2, b: Vector2, min_distance: float) -> bool:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy < min_distance * min_distance


def sample_traces(
    board: Board,
    rules: BoardRules = BOARD_RULES,
) -> tuple[list[TraceSamples], list[str]]:
    """Sample every resolvable trace.  Returns (samples, dangling trace ids)."""
    samples: list[TraceSamples] = []
    dangling: list[str] = []
    for trace in board.traces:
        curve = trace_curve(board, trace, rules)
        if curve is None:
            log.debug("Trace '%s': endpoint %s or %s unresolved, skipped",
                      trace.id, trace.from_pin, trace.to_pin)
            dangling.append(trace.id)
            continue
        samples.append(TraceSamples(
            trace_id=trace.id,
            from_pin=trace.from_pin,
            to_pin=trace.to_pin,
            points=tuple(curve.sample(rules.drc_samples)),
        ))
    return samples, dangling


def _first_collision(
    a: tuple[Vector2, ...],
    b: tuple[Vector2, ...],
    clearance: float,
) -> tuple[Vector2, Vector2] | None:
    for pa in a:
        for pb in b:
            if too_close(pa, pb, clearance):
                return pa, pb
    return None


def run_drc(board: Board, rules: BoardRules = BOARD_RULES) -> DrcResult:
    """Check every trace against every other trace and every foreign pad.

    Traces sharing an endpoint pin never violate each other.  Each
    offending trace pair or trace-pad pair contributes at most one
    marker; markers beyond ``rules.max_markers`` are dropped while the
    traces involved are still reported invalid.
    """
    clearance = rules.clearance
    traces, dangling = sample_traces(board, rules)

    invalid: set[str] = set()
    markers: list[Vector2] = []
    violations = 0

    def _mark(where: Vector2) -> None:
        nonlocal violations
        violations += 1
        if len(markers) < rules.max_markers:
            markers.append(where)

    # ── Trace vs trace ──
    for i in range(len(traces)):
        a = traces[i]
        for j in range(i + 1, len(traces)):
            b = traces[j]
            if a.shares_endpoint(b):
                continue
            hit = _first_collision(a.points, b.points, clearance)
            if hit is None:
                continue
            invalid.add(a.trace_id)
            invalid.add(b.trace_id)
            pa, pb = hit
            _mark(Vector2((pa.x + pb.x) / 2, (pa.y + pb.y) / 2))

    # ── Trace vs foreign pad ──
    pins = list(iter_pins(board))
    for t in traces:
        for pin in pins:
            if pin.ref == t.from_pin or pin.ref == t.to_pin:
                continue
            for pt in t.points:
                if too_close(pt, pin.position, clearance):
                    invalid.add(t.trace_id)
                    _mark(pt)
                    break

    if invalid:
        status = DrcStatus.FAIL
    elif board.traces:
        status = DrcStatus.PASS
    else:
        status = DrcStatus.NONE

    log.info(
        "DRC %s: %d traces checked, %d invalid, %d violations (%d marked)",
        status.value, len(traces), len(invalid), violations, len(markers),
    )
    return DrcResult(
        invalid_trace_ids=frozenset(invalid),
        markers=tuple(markers),
        status=status,
        violation_count=violations,
        skipped_trace_ids=tuple(dangling),
    )
