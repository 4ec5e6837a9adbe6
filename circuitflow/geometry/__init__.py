"""Geometry — trace curve model and spatial queries.

Submodules:
  bezier   Control points, point_at, sampling, CubicBezier path descriptor.
  query    Shapely-backed trace/pin picking and marquee selection.
"""

from .bezier import (
    CubicBezier, auto_offsets, control_points, path_descriptor, point_at, trace_curve,
)
from .query import components_in_rect, pin_at, trace_at, trace_polyline

__all__ = [
    # Curve model
    "CubicBezier", "auto_offsets", "control_points", "path_descriptor", "point_at", "trace_curve",
    # Queries
    "components_in_rect", "pin_at", "trace_at", "trace_polyline",
]
