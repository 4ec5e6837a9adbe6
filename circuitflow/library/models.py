"""Footprint dataclasses — immutable templates for placeable parts."""

from __future__ import annotations

from dataclasses import dataclass

from circuitflow.vector import Vector2


@dataclass(frozen=True)
class PinTemplate:
    id: str
    name: str
    local_pos: Vector2                  # relative to the footprint's top-left
    type: str = "io"                    # "io" | "power" | "ground"
    decoration: str | None = None       # "plus" | "notch" (labeling only)


@dataclass(frozen=True)
class Footprint:
    """Outline and pin layout shared by every placed instance."""

    id: str
    name: str
    width: float
    height: float
    pins: tuple[PinTemplate, ...]
    value_kind: str | None = None       # "resistance" | "capacitance" | "inductance" | "voltage"
    shape: str = "rect"                 # "rect" | "circle"

    @property
    def center(self) -> Vector2:
        return Vector2(self.width / 2, self.height / 2)

    def pin(self, pin_id: str) -> PinTemplate | None:
        return next((p for p in self.pins if p.id == pin_id), None)
