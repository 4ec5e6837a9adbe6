"""Board test fixtures — small hand-built boards for engine tests.

Junction pads are centred, so ``junction("a", x, y)`` puts the pad
exactly at (x, y).  Traces between bare junctions with auto tangents are
straight segments, which keeps clearance arithmetic easy to reason about.

  - make_parallel_board(gap): two horizontal 280-unit traces ``gap`` apart
  - make_crossing_board():    a horizontal and a vertical trace crossing at (140, 0)
  - make_chain_board():       resistor → smooth junction → resistor
"""

from __future__ import annotations

from circuitflow.board import Board, ContinuityMode, Junction, Part, PinRef, Trace
from circuitflow.vector import Vector2

HALF_PAD = 12.7


def junction(jid: str, x: float, y: float, mode: ContinuityMode = ContinuityMode.SMOOTH) -> Junction:
    """A junction whose pad sits at (x, y)."""
    return Junction(id=jid, position=Vector2(x - HALF_PAD, y - HALF_PAD), continuity=mode)


def pin(component_id: str, pin_id: str = "p1") -> PinRef:
    return PinRef(component_id, pin_id)


def trace(tid: str, a: str, b: str, **kwargs) -> Trace:
    """Trace between the pads of two junctions."""
    return Trace(id=tid, from_pin=pin(a), to_pin=pin(b), **kwargs)


def make_parallel_board(gap: float) -> Board:
    return Board(
        components=(
            junction("a1", 0, 0), junction("a2", 280, 0),
            junction("b1", 0, gap), junction("b2", 280, gap),
        ),
        traces=(trace("t1", "a1", "a2"), trace("t2", "b1", "b2")),
    )


def make_crossing_board() -> Board:
    return Board(
        components=(
            junction("h1", 0, 0), junction("h2", 280, 0),
            junction("v1", 140, -140), junction("v2", 140, 140),
        ),
        traces=(trace("h", "h1", "h2"), trace("v", "v1", "v2")),
    )


def make_chain_board(mode: ContinuityMode = ContinuityMode.SMOOTH) -> Board:
    """r1 pin 2 → junction j → r2 pin 1.

    Resistor pins sit 25.4 in from the left/right edges at mid height, so
    with r1 at (0, 0) its pin 2 is at (127, 25.4); the junction pad is at
    (254, 25.4) and r2 at (381, 0) has pin 1 at (406.4, 25.4).
    """
    return Board(
        components=(
            Part(id="r1", footprint_id="resistor", position=Vector2(0, 0), name="R1"),
            junction("j", 254, 25.4, mode),
            Part(id="r2", footprint_id="resistor", position=Vector2(381, 0), name="R2"),
        ),
        traces=(
            Trace(id="ta", from_pin=PinRef("r1", "2"), to_pin=pin("j")),
            Trace(id="tb", from_pin=pin("j"), to_pin=PinRef("r2", "1")),
        ),
    )
