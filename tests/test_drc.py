"""Tests for the clearance checker.

Validates:
  - Parallel traces closer than the clearance radius are flagged, wider ones pass
  - Traces sharing an endpoint pin are never flagged against each other
  - One marker per offending trace pair, at the midpoint of the first collision
  - Trace-to-pad violations (own endpoint pads excluded)
  - Marker cap keeps the first markers while every offending trace stays invalid
  - Status values and dangling-trace handling
"""

from __future__ import annotations

import unittest

from circuitflow.board import Board, Part, PinRef, Trace
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.drc import DrcStatus, run_drc, sample_traces, too_close
from circuitflow.vector import Vector2

from tests.board_fixture import (
    junction, make_chain_board, make_crossing_board, make_parallel_board, trace,
)


class TestTooClose(unittest.TestCase):

    def test_strict_inequality(self):
        self.assertTrue(too_close(Vector2(0, 0), Vector2(0, 9.99), 10.0))
        self.assertFalse(too_close(Vector2(0, 0), Vector2(0, 10.0), 10.0))

    def test_clearance_constant(self):
        self.assertAlmostEqual(BOARD_RULES.clearance, 11.43)


class TestTraceVsTrace(unittest.TestCase):

    def test_parallel_too_close(self):
        result = run_drc(make_parallel_board(10))
        self.assertEqual(result.status, DrcStatus.FAIL)
        self.assertEqual(result.invalid_trace_ids, frozenset({"t1", "t2"}))
        # first marker is the trace pair, at the midpoint of the first sample pair
        self.assertAlmostEqual(result.markers[0].x, 0.0)
        self.assertAlmostEqual(result.markers[0].y, 5.0)

    def test_parallel_far_enough(self):
        result = run_drc(make_parallel_board(15))
        self.assertEqual(result.status, DrcStatus.PASS)
        self.assertEqual(result.invalid_trace_ids, frozenset())
        self.assertEqual(result.markers, ())
        self.assertTrue(result.ok)

    def test_crossing_gives_one_marker(self):
        result = run_drc(make_crossing_board())
        self.assertEqual(result.invalid_trace_ids, frozenset({"h", "v"}))
        self.assertEqual(len(result.markers), 1)
        self.assertEqual(result.violation_count, 1)
        self.assertAlmostEqual(result.markers[0].x, 140.0, places=6)
        self.assertAlmostEqual(result.markers[0].y, 0.0, places=6)

    def test_shared_endpoint_is_never_a_violation(self):
        board = Board(
            components=(junction("hub", 0, 0), junction("e", 280, 0), junction("s", 0, 280)),
            traces=(trace("east", "hub", "e"), trace("south", "hub", "s")),
        )
        result = run_drc(board)
        self.assertEqual(result.status, DrcStatus.PASS)
        self.assertEqual(result.violation_count, 0)

    def test_check_is_symmetric_in_trace_order(self):
        board = make_crossing_board()
        reversed_board = board.with_traces(reversed(board.traces))
        self.assertEqual(run_drc(board).invalid_trace_ids, run_drc(reversed_board).invalid_trace_ids)


class TestTraceVsPad(unittest.TestCase):

    def test_foreign_pad_too_close(self):
        board = Board(
            components=(junction("a", 0, 0), junction("b", 280, 0), junction("lone", 140, 8)),
            traces=(trace("t", "a", "b"),),
        )
        result = run_drc(board)
        self.assertEqual(result.invalid_trace_ids, frozenset({"t"}))
        self.assertEqual(result.violation_count, 1)
        # marker sits on the trace sample, not on the pad
        self.assertAlmostEqual(result.markers[0].x, 140.0, places=6)
        self.assertAlmostEqual(result.markers[0].y, 0.0, places=6)

    def test_own_endpoint_pads_excluded(self):
        board = Board(
            components=(junction("a", 0, 0), junction("b", 30, 0)),
            traces=(trace("t", "a", "b"),),
        )
        self.assertEqual(run_drc(board).status, DrcStatus.PASS)

    def test_part_pads_are_checked(self):
        # resistor pin 1 lands at (125.4, 5.4), 5.4 below the trace
        board = Board(
            components=(
                junction("a", 0, 0), junction("b", 280, 0),
                Part(id="r", footprint_id="resistor", position=Vector2(100.0, -20.0)),
            ),
            traces=(trace("t", "a", "b"),),
        )
        result = run_drc(board)
        self.assertIn("t", result.invalid_trace_ids)
        self.assertEqual(result.status, DrcStatus.FAIL)


class TestMarkerCap(unittest.TestCase):

    def setUp(self):
        # nine traces 2 units apart: every pair up to 10 apart collides
        components = []
        traces = []
        for k in range(9):
            components += [junction(f"l{k}", 0, 2 * k), junction(f"r{k}", 280, 2 * k)]
            traces.append(trace(f"t{k}", f"l{k}", f"r{k}"))
        self.board = Board(components=tuple(components), traces=tuple(traces))

    def test_cap_keeps_first_markers(self):
        result = run_drc(self.board)
        self.assertEqual(len(result.markers), BOARD_RULES.max_markers)
        self.assertGreater(result.violation_count, BOARD_RULES.max_markers)
        self.assertAlmostEqual(result.markers[0].x, 0.0)
        self.assertAlmostEqual(result.markers[0].y, 1.0)

    def test_all_offending_traces_invalid_past_cap(self):
        result = run_drc(self.board, BoardRules(max_markers=2))
        self.assertEqual(len(result.markers), 2)
        self.assertEqual(result.invalid_trace_ids, frozenset(f"t{k}" for k in range(9)))


class TestStatus(unittest.TestCase):

    def test_empty_board(self):
        result = run_drc(Board())
        self.assertEqual(result.status, DrcStatus.NONE)
        self.assertEqual(result.to_dict()["status"], "none")

    def test_components_without_traces(self):
        board = Board(components=(junction("a", 0, 0), junction("b", 5, 0)))
        self.assertEqual(run_drc(board).status, DrcStatus.NONE)

    def test_dangling_trace_is_skipped(self):
        board = Board(
            components=(junction("a", 0, 0),),
            traces=(Trace(id="t", from_pin=PinRef("a", "p1"), to_pin=PinRef("gone", "p1")),),
        )
        result = run_drc(board)
        self.assertEqual(result.status, DrcStatus.PASS)
        self.assertEqual(result.skipped_trace_ids, ("t",))

    def test_to_dict(self):
        d = run_drc(make_crossing_board()).to_dict()
        self.assertEqual(d["status"], "fail")
        self.assertEqual(d["invalid_trace_ids"], ["h", "v"])
        self.assertEqual(len(d["markers"]), 1)
        self.assertEqual(set(d["markers"][0]), {"x", "y"})


class TestSampling(unittest.TestCase):

    def test_shared_endpoint_detection(self):
        samples, _ = sample_traces(make_chain_board())
        ta, tb = samples
        self.assertTrue(ta.shares_endpoint(tb))
        parallel, _ = sample_traces(make_parallel_board(15))
        self.assertFalse(parallel[0].shares_endpoint(parallel[1]))

    def test_samples_per_trace(self):
        samples, dangling = sample_traces(make_parallel_board(15))
        self.assertEqual(dangling, [])
        self.assertEqual([s.trace_id for s in samples], ["t1", "t2"])
        self.assertTrue(all(len(s.points) == BOARD_RULES.drc_samples for s in samples))


if __name__ == "__main__":
    unittest.main()
