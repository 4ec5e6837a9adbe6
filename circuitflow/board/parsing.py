"""Project parsing — convert raw dicts/JSON into a Board.

This is the load boundary: only structural checks happen here.  Dangling
pin references are accepted; the engine degrades gracefully around them.
Files written by the legacy browser editor (camelCase keys, string pin
ids, ``PIN``/``JUNCTION`` footprint ids for junctions) load as well.
"""

from __future__ import annotations

from circuitflow.config import BOARD_RULES
from circuitflow.library import JUNCTION_FOOTPRINT_ID
from circuitflow.vector import Vector2

from .models import Board, Component, ContinuityMode, Junction, Part, PinRef, Trace

PROJECT_FORMAT = "CircuitFlow JSON"
PROJECT_VERSION = "1.0"

_LEGACY_JUNCTION_IDS = {JUNCTION_FOOTPRINT_ID, "PIN"}


class ProjectFormatError(Exception):
    """Raised when project data is missing required structure."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid project file: {reason}")


def parse_board(data: dict) -> Board:
    """Parse a project dict into a Board snapshot."""
    if not isinstance(data, dict):
        raise ProjectFormatError("expected a JSON object at the top level")
    if not isinstance(data.get("components"), list) or not isinstance(data.get("traces"), list):
        raise ProjectFormatError("missing components or traces")

    components = [_parse_component(c, i) for i, c in enumerate(data["components"])]
    component_ids = [c.id for c in components]
    traces = [_parse_trace(t, i, component_ids) for i, t in enumerate(data["traces"])]
    return Board(components=tuple(components), traces=tuple(traces))


# ── Entries ────────────────────────────────────────────────────────


def _parse_component(data: dict, index: int) -> Component:
    try:
        cid = str(data["id"])
        position = _parse_vector(data["position"])
        footprint_id = data.get("footprint_id", data.get("footprintId"))
        kind = data.get("kind")
        if kind == "junction" or (kind is None and footprint_id in _LEGACY_JUNCTION_IDS):
            mode = data.get("continuity", data.get("junctionType")) or ContinuityMode.SMOOTH.value
            return Junction(
                id=cid,
                position=position,
                continuity=ContinuityMode(mode),
                name=_text(data.get("name"), ""),
                locked=bool(data.get("locked", False)),
            )
        if footprint_id is None:
            raise KeyError("footprint_id")
        return Part(
            id=cid,
            footprint_id=str(footprint_id),
            position=position,
            rotation=float(data.get("rotation", 0.0)),
            name=_text(data.get("name"), ""),
            value=_text(data.get("value"), None),
            locked=bool(data.get("locked", False)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectFormatError(f"component #{index}: missing/invalid field {exc}") from exc


def _parse_trace(data: dict, index: int, component_ids: list[str]) -> Trace:
    try:
        return Trace(
            id=str(data["id"]),
            from_pin=_parse_pin_ref(_first(data, "from", "fromPinId"), component_ids),
            to_pin=_parse_pin_ref(_first(data, "to", "toPinId"), component_ids),
            width=float(data.get("width", BOARD_RULES.default_trace_width)),
            color=_text(data.get("color"), BOARD_RULES.default_trace_color),
            c1_offset=_parse_optional_vector(data.get("c1_offset", data.get("c1Offset"))),
            c2_offset=_parse_optional_vector(data.get("c2_offset", data.get("c2Offset"))),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectFormatError(f"trace #{index}: missing/invalid field {exc}") from exc


def _first(data: dict, *keys: str):
    for key in keys:
        if key in data:
            return data[key]
    raise KeyError(keys[0])


def _parse_pin_ref(value, component_ids: list[str]) -> PinRef:
    """Structured ``{"component", "pin"}`` refs, or legacy ``"<component>_<pin>"`` strings.

    Legacy strings are matched against the loaded component ids (longest
    first) so ids that themselves contain underscores resolve correctly.
    """
    if isinstance(value, dict):
        return PinRef(str(value["component"]), str(value["pin"]))
    if isinstance(value, str):
        for cid in sorted(component_ids, key=len, reverse=True):
            prefix = cid + "_"
            if value.startswith(prefix) and len(value) > len(prefix):
                return PinRef(cid, value[len(prefix):])
        cid, sep, pid = value.rpartition("_")
        if not sep or not cid:
            raise ValueError(f"unparseable pin reference '{value}'")
        return PinRef(cid, pid)
    raise TypeError(f"pin reference must be an object or string, got {type(value).__name__}")


def _text(value, default: str | None) -> str | None:
    """Scalar text field: numbers are stringified, objects and lists rejected."""
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        raise TypeError(f"expected text, got {type(value).__name__}")
    return str(value)


def _parse_vector(value) -> Vector2:
    if isinstance(value, dict):
        return Vector2(float(value["x"]), float(value["y"]))
    x, y = value
    return Vector2(float(x), float(y))


def _parse_optional_vector(value) -> Vector2 | None:
    return None if value is None else _parse_vector(value)
