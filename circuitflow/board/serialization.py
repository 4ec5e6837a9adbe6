"""Project serialization — Board to a JSON-safe dict."""

from __future__ import annotations

from datetime import datetime, timezone

from circuitflow.vector import Vector2

from .models import Board, Junction, PinRef
from .parsing import PROJECT_FORMAT, PROJECT_VERSION


def board_to_dict(board: Board, *, timestamp: bool = True) -> dict:
    """Serialize a Board to a JSON-safe project dict."""
    data = {
        "format": PROJECT_FORMAT,
        "version": PROJECT_VERSION,
        "components": [_component_to_dict(c) for c in board.components],
        "traces": [
            {
                "id": t.id,
                "from": _pin_ref_to_dict(t.from_pin),
                "to": _pin_ref_to_dict(t.to_pin),
                "width": t.width,
                "color": t.color,
                **({"c1_offset": _vector_to_dict(t.c1_offset)} if t.c1_offset is not None else {}),
                **({"c2_offset": _vector_to_dict(t.c2_offset)} if t.c2_offset is not None else {}),
            }
            for t in board.traces
        ],
    }
    if timestamp:
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
    return data


def _component_to_dict(c) -> dict:
    if isinstance(c, Junction):
        return {
            "id": c.id,
            "kind": "junction",
            "name": c.name,
            "position": _vector_to_dict(c.position),
            "continuity": c.continuity.value,
            "locked": c.locked,
        }
    return {
        "id": c.id,
        "kind": "part",
        "footprint_id": c.footprint_id,
        "name": c.name,
        "position": _vector_to_dict(c.position),
        "rotation": c.rotation,
        **({"value": c.value} if c.value is not None else {}),
        "locked": c.locked,
    }


def _pin_ref_to_dict(ref: PinRef) -> dict:
    return {"component": ref.component_id, "pin": ref.pin_id}


def _vector_to_dict(v: Vector2) -> dict:
    return {"x": v.x, "y": v.y}
