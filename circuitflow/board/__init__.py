"""Board — placed components, traces, snapshots, pin transforms and persistence.

Submodules:
  models         Vector-based dataclasses: Part/Junction, PinRef, Trace, Board.
  transform      Component-local → board-global pin positions.
  store          Atomically published current snapshot + change listeners.
  parsing        Load boundary (parse_board, ProjectFormatError).
  serialization  JSON conversion (board_to_dict).
"""

from .models import (
    Board, Component, ContinuityMode, Junction, Part, PinRef, Trace,
)
from .transform import (
    ResolvedPin, component_pins, footprint_for, global_pos, iter_pins,
    normalize_rotation, position_for_pin_target, resolve_pin,
)
from .store import BoardStore
from .parsing import ProjectFormatError, parse_board
from .serialization import board_to_dict

__all__ = [
    # Models
    "Board", "Component", "ContinuityMode", "Junction", "Part", "PinRef", "Trace",
    # Transform
    "ResolvedPin", "component_pins", "footprint_for", "global_pos", "iter_pins",
    "normalize_rotation", "position_for_pin_target", "resolve_pin",
    # Store
    "BoardStore",
    # Parsing / Serialization
    "ProjectFormatError", "parse_board", "board_to_dict",
]
