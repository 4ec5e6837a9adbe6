"""Editing — continuity maintenance and snapshot-producing board edits.

Submodules:
  continuity  Junction tangent mirroring; move_component, drag_handle.
  operations  Snapping, placement, routing, rotation, split/merge, delete.
"""

from .continuity import (
    NodeEdit, drag_handle, effective_offset, move_component, propagate_continuity,
)
from .operations import (
    add_junction, add_part, add_trace, delete, merge_junction, rotate_components,
    set_continuity, snap, snap_point, split_trace,
)

__all__ = [
    # Continuity
    "NodeEdit", "drag_handle", "effective_offset", "move_component", "propagate_continuity",
    # Operations
    "add_junction", "add_part", "add_trace", "delete", "merge_junction",
    "rotate_components", "set_continuity", "snap", "snap_point", "split_trace",
]
