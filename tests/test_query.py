"""Tests for spatial queries — trace and pin picking, marquee selection."""

from __future__ import annotations

import unittest

from circuitflow.board import PinRef
from circuitflow.geometry import components_in_rect, pin_at, trace_at, trace_polyline
from circuitflow.vector import Vector2

from tests.board_fixture import make_chain_board, make_crossing_board


class TestTraceAt(unittest.TestCase):

    def setUp(self):
        self.board = make_crossing_board()

    def test_topmost_trace_wins(self):
        self.assertEqual(trace_at(self.board, Vector2(140.0, 0.0)).id, "v")

    def test_near_single_trace(self):
        self.assertEqual(trace_at(self.board, Vector2(70.0, 5.0)).id, "h")

    def test_miss(self):
        self.assertIsNone(trace_at(self.board, Vector2(70.0, 100.0)))
        self.assertIsNone(trace_at(self.board, Vector2(70.0, 5.0), tolerance=2.0))

    def test_polyline(self):
        line = trace_polyline(self.board, self.board.trace("h"), 21)
        self.assertEqual(len(line.coords), 21)
        self.assertAlmostEqual(line.length, 280.0, places=6)


class TestPinAt(unittest.TestCase):

    def test_nearest_pin(self):
        hit = pin_at(make_chain_board(), Vector2(128.0, 26.0))
        self.assertEqual(hit.ref, PinRef("r1", "2"))

    def test_exclude(self):
        self.assertIsNone(pin_at(make_chain_board(), Vector2(128.0, 26.0), exclude=PinRef("r1", "2")))

    def test_junction_pad(self):
        hit = pin_at(make_chain_board(), Vector2(250.0, 25.0))
        self.assertEqual(hit.ref, PinRef("j", "p1"))


class TestComponentsInRect(unittest.TestCase):

    def test_whole_footprint_inside(self):
        board = make_chain_board()
        self.assertEqual(components_in_rect(board, Vector2(-1.0, -1.0), Vector2(160.0, 60.0)), ["r1"])
        # corner order does not matter
        self.assertEqual(components_in_rect(board, Vector2(160.0, 60.0), Vector2(-1.0, -1.0)), ["r1"])

    def test_partial_overlap_not_selected(self):
        self.assertEqual(components_in_rect(make_chain_board(), Vector2(0.0, 0.0), Vector2(100.0, 60.0)), [])

    def test_junctions_never_selected(self):
        ids = components_in_rect(make_chain_board(), Vector2(-10.0, -10.0), Vector2(600.0, 100.0))
        self.assertEqual(ids, ["r1", "r2"])


if __name__ == "__main__":
    unittest.main()
