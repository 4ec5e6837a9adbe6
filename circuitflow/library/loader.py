"""Footprint loader — reads library/footprints/*.json, parses and validates them."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from circuitflow.vector import Vector2

from .models import Footprint, PinTemplate


FOOTPRINTS_DIR = Path(__file__).resolve().parent / "footprints"

PIN_TYPES = {"io", "power", "ground"}
SHAPES = {"rect", "circle"}
VALUE_KINDS = {"resistance", "capacitance", "inductance", "voltage"}


@dataclass
class ValidationError:
    footprint_id: str
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.footprint_id}] {self.field}: {self.message}"


@dataclass
class LibraryResult:
    """Result of loading the footprint library — footprints + any validation errors."""
    footprints: list[Footprint]
    errors: list[ValidationError]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0


# ── Validation ─────────────────────────────────────────────────────

def _validate_footprint(fp: Footprint) -> list[ValidationError]:
    errs: list[ValidationError] = []
    fid = fp.id

    if fp.width <= 0:
        errs.append(ValidationError(fid, "width", "Must be > 0"))
    if fp.height <= 0:
        errs.append(ValidationError(fid, "height", "Must be > 0"))
    if fp.shape not in SHAPES:
        errs.append(ValidationError(fid, "shape", f"Unknown shape '{fp.shape}', expected 'rect' or 'circle'"))
    if fp.value_kind is not None and fp.value_kind not in VALUE_KINDS:
        errs.append(ValidationError(fid, "value_kind", f"Unknown value kind '{fp.value_kind}'"))

    seen: set[str] = set()
    for pin in fp.pins:
        if pin.id in seen:
            errs.append(ValidationError(fid, f"pins.{pin.id}", "Duplicate pin ID"))
        seen.add(pin.id)
        if pin.type not in PIN_TYPES:
            errs.append(ValidationError(fid, f"pins.{pin.id}.type", f"Unknown pin type '{pin.type}'"))
        if not (0 <= pin.local_pos.x <= fp.width and 0 <= pin.local_pos.y <= fp.height):
            errs.append(ValidationError(fid, f"pins.{pin.id}.position", "Outside the footprint outline"))

    return errs


# ── Parsing ────────────────────────────────────────────────────────

def _parse_pin(data: dict) -> PinTemplate:
    x, y = data["position"]
    return PinTemplate(
        id=str(data["id"]),
        name=data.get("name", str(data["id"])),
        local_pos=Vector2(float(x), float(y)),
        type=data.get("type", "io"),
        decoration=data.get("decoration"),
    )


def parse_footprint(data: dict) -> Footprint:
    return Footprint(
        id=data["id"],
        name=data["name"],
        width=float(data["width"]),
        height=float(data["height"]),
        pins=tuple(_parse_pin(p) for p in data["pins"]),
        value_kind=data.get("value_kind"),
        shape=data.get("shape", "rect"),
    )


# ── Public API ─────────────────────────────────────────────────────

def load_library(footprints_dir: Path | None = None) -> LibraryResult:
    """Load all footprints/*.json files, parse and validate.

    Footprints that fail to parse are skipped (error recorded).
    Footprints that parse but have validation issues are still included.
    """
    d = footprints_dir or FOOTPRINTS_DIR
    footprints: list[Footprint] = []
    errors: list[ValidationError] = []

    json_files = sorted(d.glob("*.json"))
    if not json_files:
        errors.append(ValidationError("_library", "files", f"No .json files found in {d}"))
        return LibraryResult(footprints=footprints, errors=errors)

    for path in json_files:
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            errors.append(ValidationError(path.stem, "json", f"Parse error: {exc}"))
            continue
        except OSError as exc:
            errors.append(ValidationError(path.stem, "file", f"Read error: {exc}"))
            continue

        try:
            fp = parse_footprint(raw)
        except (KeyError, TypeError, ValueError) as exc:
            errors.append(ValidationError(
                raw.get("id", path.stem), "parse", f"Missing/invalid field: {exc}"))
            continue

        errors.extend(_validate_footprint(fp))
        footprints.append(fp)

    id_counts: dict[str, int] = {}
    for fp in footprints:
        id_counts[fp.id] = id_counts.get(fp.id, 0) + 1
    for fid, count in id_counts.items():
        if count > 1:
            errors.append(ValidationError(fid, "id", f"Duplicate footprint ID (appears {count} times)"))

    return LibraryResult(footprints=footprints, errors=errors)


@lru_cache(maxsize=1)
def builtin_footprints() -> dict[str, Footprint]:
    """The bundled footprint library, keyed by id.  Loaded once."""
    return {fp.id: fp for fp in load_library().footprints}
