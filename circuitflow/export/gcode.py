"""
Generate GRBL G-code for isolation milling of a board.

Two passes: a drill plunge at every pad of every part (junctions are
splice points, not holes), then one milling pass per trace following the
curve model's polyline.  Traces with a dangling endpoint are skipped.

The output is a list of G-code lines, ready to be joined with newlines.
"""

from __future__ import annotations

import logging

from circuitflow.board.models import Board, Part
from circuitflow.board.transform import component_pins
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.geometry.bezier import trace_curve

log = logging.getLogger("circuitflow.export.gcode")

# ── Machine defaults ───────────────────────────────────────────────

Z_LIFT = 5.0            # mm, clearance height at program start
Z_SAFE = 2.0            # mm, travel height
Z_CUT = -0.1            # mm, plunge depth for drilling and milling
FEED_RATE = 200         # mm/min
SPINDLE_RPM = 1000
CURVE_STEPS = 15        # straight segments per trace
MM_PER_UNIT = 0.1       # 25.4 board units = 0.1" = 2.54 mm


def export_grbl(
    board: Board,
    rules: BoardRules = BOARD_RULES,
    *,
    z_lift: float = Z_LIFT,
    z_safe: float = Z_SAFE,
    z_cut: float = Z_CUT,
    feed_rate: float = FEED_RATE,
    steps: int = CURVE_STEPS,
    scale: float = MM_PER_UNIT,
) -> list[str]:
    """Build G-code lines for drilling pads and milling traces.

    Parameters
    ----------
    board : Board
        Snapshot to export.
    z_lift, z_safe, z_cut : float
        Start-of-program lift, travel and cutting heights (mm).
    feed_rate : float
        Plunge and cutting feed (mm/min).
    steps : int
        Straight segments each trace curve is subdivided into.
    scale : float
        Board units → mm.

    Returns
    -------
    list[str]
        G-code lines (without trailing newlines).
    """

    def xy(p) -> str:
        return f"X{p.x * scale:.3f} Y{p.y * scale:.3f}"

    lines: list[str] = [
        "(CircuitFlow GRBL Export)",
        "G21 (Units: Metric)",
        "G90 (Absolute Positioning)",
        f"G0 Z{z_lift:g} (Lift Tool)",
        f"M3 S{SPINDLE_RPM} (Spindle On)",
        "G4 P1 (Wait 1s)",
        "",
    ]

    # ── Drill pads ──
    lines.append("(Drilling Pads)")
    pad_count = 0
    for component in board.components:
        if not isinstance(component, Part):
            continue
        for pin in component_pins(component):
            lines.append(f"G0 {xy(pin.position)}")
            lines.append(f"G1 Z{z_cut} F{feed_rate}")
            lines.append(f"G0 Z{z_safe}")
            pad_count += 1

    # ── Mill traces ──
    lines.append("")
    lines.append("(Milling Traces)")
    milled = 0
    for trace in board.traces:
        curve = trace_curve(board, trace, rules)
        if curve is None:
            log.debug("Trace '%s' has a dangling endpoint, not milled", trace.id)
            continue
        points = curve.sample(steps + 1)
        lines.append(f"(Trace {trace.id})")
        lines.append(f"G0 {xy(points[0])}")
        lines.append(f"G1 Z{z_cut} F{feed_rate}")
        for p in points[1:]:
            lines.append(f"G1 {xy(p)}")
        lines.append(f"G0 Z{z_safe}")
        milled += 1

    lines.append("")
    lines.append("M5 (Spindle Off)")
    lines.append("G0 X0 Y0 (Return Home)")
    lines.append("M30 (End Program)")

    log.info("Generated GRBL G-code: %d pads, %d traces, %d lines", pad_count, milled, len(lines))
    return lines
