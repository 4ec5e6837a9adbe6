"""Board dataclasses — placed components, traces and the board snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable

from circuitflow.config import BOARD_RULES
from circuitflow.library import JUNCTION_FOOTPRINT_ID
from circuitflow.vector import Vector2


class ContinuityMode(str, Enum):
    """How a junction treats the tangents of the two traces it splices."""

    SMOOTH = "smooth"               # mirror tangents so the pair reads as one curve
    LINEAR = "linear"               # opposite direction, sibling keeps its own tangent length
    INDEPENDENT = "independent"     # leave each trace's tangent alone


@dataclass(frozen=True)
class PinRef:
    """Global pin identity: a component id plus a footprint-local pin id."""

    component_id: str
    pin_id: str

    def __str__(self) -> str:
        return f"{self.component_id}:{self.pin_id}"


# ── Components ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Part:
    """A footprint placed on the board.

    ``position`` is the board-global top-left of the unrotated bounding box.
    """

    id: str
    footprint_id: str
    position: Vector2
    rotation: float = 0.0           # degrees, normalized before use
    name: str = ""
    value: str | None = None        # free text, e.g. "10k"
    locked: bool = False


@dataclass(frozen=True)
class Junction:
    """Synthetic single-pin splice point between traces."""

    id: str
    position: Vector2
    continuity: ContinuityMode = ContinuityMode.SMOOTH
    name: str = ""
    locked: bool = False

    PIN_ID = "p1"

    @property
    def footprint_id(self) -> str:
        return JUNCTION_FOOTPRINT_ID

    @property
    def rotation(self) -> float:
        return 0.0

    @property
    def pin(self) -> PinRef:
        return PinRef(self.id, self.PIN_ID)


Component = Part | Junction


# ── Traces ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Trace:
    """A routed curve between two pins.

    The manual tangent offsets are relative to the *from* / *to* pin
    respectively, so the curve keeps its shape when an endpoint moves.
    """

    id: str
    from_pin: PinRef
    to_pin: PinRef
    width: float = BOARD_RULES.default_trace_width
    color: str = BOARD_RULES.default_trace_color
    c1_offset: Vector2 | None = None
    c2_offset: Vector2 | None = None

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"Trace '{self.id}': width must be > 0, got {self.width}")

    def touches(self, ref: PinRef) -> bool:
        return self.from_pin == ref or self.to_pin == ref

    def offset_at(self, ref: PinRef) -> Vector2 | None:
        """Manual tangent offset on the side of ``ref`` (from-side wins for loops)."""
        if self.from_pin == ref:
            return self.c1_offset
        if self.to_pin == ref:
            return self.c2_offset
        return None

    def with_offset_at(self, ref: PinRef, offset: Vector2 | None) -> Trace:
        if self.from_pin == ref:
            return replace(self, c1_offset=offset)
        if self.to_pin == ref:
            return replace(self, c2_offset=offset)
        return self

    def other_end(self, ref: PinRef) -> PinRef:
        return self.to_pin if self.from_pin == ref else self.from_pin


# ── Board snapshot ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Board:
    """Immutable snapshot of everything on the board.

    Edits build a new snapshot; nothing mutates one that has been published.
    """

    components: tuple[Component, ...] = ()
    traces: tuple[Trace, ...] = ()
    _component_index: dict = field(default=None, init=False, repr=False, compare=False)
    _trace_index: dict = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "traces", tuple(self.traces))
        object.__setattr__(self, "_component_index", {c.id: c for c in self.components})
        object.__setattr__(self, "_trace_index", {t.id: t for t in self.traces})

    def component(self, component_id: str) -> Component:
        return self._component_index[component_id]

    def trace(self, trace_id: str) -> Trace:
        return self._trace_index[trace_id]

    def find_component(self, component_id: str) -> Component | None:
        return self._component_index.get(component_id)

    def has_trace(self, trace_id: str) -> bool:
        return trace_id in self._trace_index

    def traces_at(self, ref: PinRef) -> list[Trace]:
        return [t for t in self.traces if t.touches(ref)]

    def with_components(self, components: Iterable[Component]) -> Board:
        return Board(components=tuple(components), traces=self.traces)

    def with_traces(self, traces: Iterable[Trace]) -> Board:
        return Board(components=self.components, traces=tuple(traces))

    def replace_component(self, updated: Component) -> Board:
        return self.with_components(
            updated if c.id == updated.id else c for c in self.components
        )
