"""Tests for the GRBL G-code and SVG exporters."""

from __future__ import annotations

import unittest

from circuitflow.board import Board, Part, PinRef, Trace
from circuitflow.export import export_grbl, export_svg
from circuitflow.vector import Vector2

from tests.board_fixture import make_chain_board


class TestGrblExport(unittest.TestCase):

    def setUp(self):
        self.lines = export_grbl(make_chain_board())

    def test_header_and_footer(self):
        self.assertEqual(self.lines[0], "(CircuitFlow GRBL Export)")
        self.assertIn("G21 (Units: Metric)", self.lines)
        self.assertIn("G90 (Absolute Positioning)", self.lines)
        self.assertIn("M5 (Spindle Off)", self.lines)
        self.assertEqual(self.lines[-1], "M30 (End Program)")

    def test_drills_part_pads_only(self):
        drill = self.lines[self.lines.index("(Drilling Pads)"):self.lines.index("(Milling Traces)")]
        plunges = [ln for ln in drill if ln.startswith("G1 Z")]
        # two resistors, two pads each; the junction is not drilled
        self.assertEqual(len(plunges), 4)
        self.assertIn("G0 X12.700 Y2.540", drill)

    def test_mills_each_trace(self):
        start = self.lines.index("(Trace ta)")
        self.assertEqual(self.lines[start + 1], "G0 X12.700 Y2.540")
        self.assertEqual(self.lines[start + 2], "G1 Z-0.1 F200")
        cuts = self.lines[start + 3:start + 18]
        self.assertTrue(all(ln.startswith("G1 X") for ln in cuts))
        self.assertEqual(cuts[-1], "G1 X25.400 Y2.540")
        self.assertEqual(self.lines[start + 18], "G0 Z2.0")
        self.assertIn("(Trace tb)", self.lines)

    def test_lift_height(self):
        self.assertIn("G0 Z5 (Lift Tool)", self.lines)
        lines = export_grbl(make_chain_board(), z_lift=8.5, z_safe=3.0)
        self.assertIn("G0 Z8.5 (Lift Tool)", lines)
        self.assertNotIn("G0 Z2.0", lines)
        self.assertIn("G0 Z3.0", lines)

    def test_dangling_trace_skipped(self):
        board = make_chain_board()
        board = board.with_traces((*board.traces, Trace(
            id="lost", from_pin=PinRef("r1", "1"), to_pin=PinRef("gone", "p1"))))
        self.assertNotIn("(Trace lost)", export_grbl(board))


class TestSvgExport(unittest.TestCase):

    def test_document(self):
        svg = export_svg(make_chain_board())
        self.assertTrue(svg.startswith("<svg"))
        self.assertTrue(svg.endswith("</svg>"))
        self.assertEqual(svg.count("<path "), 2)
        self.assertIn('d="M 127 25.4 C ', svg)
        # junctions have no outline and no pad circle
        self.assertEqual(svg.count("<circle "), 4)
        self.assertEqual(svg.count("<rect "), 3)
        self.assertIn(">R1</text>", svg)

    def test_pad_colors_follow_pin_type(self):
        board = Board(components=(
            Part(id="n", footprint_id="arduino_nano", position=Vector2(0.0, 0.0), name="NANO"),
        ))
        svg = export_svg(board)
        self.assertEqual(svg.count('stroke="#ef4444"'), 3)
        self.assertEqual(svg.count('stroke="#3b82f6"'), 2)

    def test_empty_board(self):
        svg = export_svg(Board())
        self.assertIn('width="700"', svg)
        self.assertIn('viewBox="-100 -100 700 700"', svg)

    def test_labels_are_escaped(self):
        board = Board(components=(
            Part(id="r", footprint_id="resistor", position=Vector2(0.0, 0.0), name="R<1>"),
        ))
        self.assertIn("R&lt;1&gt;", export_svg(board))


if __name__ == "__main__":
    unittest.main()
