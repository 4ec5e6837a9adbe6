"""Export — GRBL G-code and static SVG, both driven by the trace curve model."""

from .gcode import export_grbl
from .svg import export_svg

__all__ = ["export_grbl", "export_svg"]
