"""DRC result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from circuitflow.board.models import PinRef
from circuitflow.vector import Vector2


class DrcStatus(str, Enum):
    FAIL = "fail"       # at least one trace violates clearance
    PASS = "pass"       # traces exist and none violate
    NONE = "none"       # nothing to check


@dataclass(frozen=True)
class TraceSamples:
    """A trace's endpoints and its sampled polyline for one DRC run."""

    trace_id: str
    from_pin: PinRef
    to_pin: PinRef
    points: tuple[Vector2, ...]

    def shares_endpoint(self, other: TraceSamples) -> bool:
        return bool({self.from_pin, self.to_pin} & {other.from_pin, other.to_pin})


@dataclass(frozen=True)
class DrcResult:
    """Outcome of one clearance check over a board snapshot."""

    invalid_trace_ids: frozenset[str] = frozenset()
    markers: tuple[Vector2, ...] = ()
    status: DrcStatus = DrcStatus.NONE
    violation_count: int = 0        # includes violations past the marker cap
    skipped_trace_ids: tuple[str, ...] = field(default=())   # dangling endpoints

    @property
    def ok(self) -> bool:
        return self.status != DrcStatus.FAIL

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "invalid_trace_ids": sorted(self.invalid_trace_ids),
            "markers": [{"x": m.x, "y": m.y} for m in self.markers],
            "violation_count": self.violation_count,
            "skipped_trace_ids": list(self.skipped_trace_ids),
        }
