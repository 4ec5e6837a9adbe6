"""Shared board constants for the editor engine.

Every stage derives its tolerances from the grid/snap unit defined here:
the DRC clearance, the drag-snap granularity, the curve auto-tension and
the sampling density.  Change a value here and the curve model, the
clearance checker and the exporters stay in sync automatically.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardRules:
    """Design rules and editor tolerances.

    All distances are in board units (0.1" pitch = 25.4 units).
    """

    snap_unit: float = 25.4
    """Grid/snap unit.  Parts snap to it, junctions to half of it."""

    clearance_factor: float = 0.45
    """Clearance as a fraction of the snap unit."""

    drc_samples: int = 15
    """Points sampled per trace curve by the clearance checker."""

    max_markers: int = 30
    """Upper bound on violation markers reported by one DRC run."""

    drc_settle_s: float = 0.8
    """Quiet period after the last edit before DRC runs."""

    auto_tension_factor: float = 0.45
    """Auto tangent length as a fraction of the dominant-axis delta."""

    min_tension: float = 30.0
    """Floor on the auto tangent length so close pins still curve."""

    junction_snap_divisor: int = 2

    trace_hit_tolerance: float = 25.0
    pin_hit_tolerance: float = 15.0

    default_trace_width: float = 8.0
    default_trace_color: str = "#FCD34D"

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def clearance(self) -> float:
        """Minimum distance between unconnected conductive samples."""
        return self.snap_unit * self.clearance_factor

    @property
    def junction_snap(self) -> float:
        return self.snap_unit / self.junction_snap_divisor


# Module-level singleton, importable everywhere.
BOARD_RULES = BoardRules()
