"""Tests for pin transforms — footprint-local pin offsets to board coordinates.

Validates:
  - Rotation about the footprint centre (0°, 90°, 180°, 360° periodicity)
  - Unknown footprints fall back to the component position
  - Pin resolution against a board, including dangling references
  - Placing a part so its first pin lands on a target point
"""

from __future__ import annotations

import unittest

from circuitflow.board import (
    Board, Junction, Part, PinRef, component_pins, global_pos,
    normalize_rotation, position_for_pin_target, resolve_pin,
)
from circuitflow.library import Footprint, PinTemplate, get_footprint
from circuitflow.vector import Vector2


SQUARE = Footprint(
    id="square",
    name="Square",
    width=50.0,
    height=50.0,
    pins=(PinTemplate(id="a", name="A", local_pos=Vector2(10.0, 10.0)),),
)


def _part(rotation: float = 0.0, position: Vector2 = Vector2(0.0, 0.0)) -> Part:
    return Part(id="c1", footprint_id="square", position=position, rotation=rotation)


class TestGlobalPos(unittest.TestCase):

    def assertVecAlmostEqual(self, a: Vector2, b: Vector2, places: int = 7):
        self.assertAlmostEqual(a.x, b.x, places=places)
        self.assertAlmostEqual(a.y, b.y, places=places)

    def test_unrotated_pin_is_translated(self):
        p = global_pos(_part(), SQUARE.pins[0], SQUARE)
        self.assertEqual(p, Vector2(10.0, 10.0))

    def test_quarter_turn_rotates_about_centre(self):
        p = global_pos(_part(90), SQUARE.pins[0], SQUARE)
        self.assertVecAlmostEqual(p, Vector2(40.0, 10.0))

    def test_half_turn(self):
        p = global_pos(_part(180), SQUARE.pins[0], SQUARE)
        self.assertVecAlmostEqual(p, Vector2(40.0, 40.0))

    def test_translation_is_added_after_rotation(self):
        p = global_pos(_part(90, Vector2(100.0, 200.0)), SQUARE.pins[0], SQUARE)
        self.assertVecAlmostEqual(p, Vector2(140.0, 210.0))

    def test_rotation_is_periodic(self):
        pin = SQUARE.pins[0]
        for r in (0, 90, 135, 270):
            with self.subTest(rotation=r):
                self.assertVecAlmostEqual(
                    global_pos(_part(r), pin, SQUARE),
                    global_pos(_part(r + 360), pin, SQUARE),
                )

    def test_negative_rotation(self):
        pin = SQUARE.pins[0]
        self.assertVecAlmostEqual(
            global_pos(_part(-90), pin, SQUARE),
            global_pos(_part(270), pin, SQUARE),
        )

    def test_centre_pin_is_rotation_invariant(self):
        centre = PinTemplate(id="c", name="C", local_pos=Vector2(25.0, 25.0))
        for r in (0, 45, 90, 180):
            with self.subTest(rotation=r):
                self.assertVecAlmostEqual(global_pos(_part(r), centre, SQUARE), Vector2(25.0, 25.0))

    def test_unknown_footprint_returns_position(self):
        part = _part(90, Vector2(7.0, 8.0))
        self.assertEqual(global_pos(part, SQUARE.pins[0], None), Vector2(7.0, 8.0))


class TestNormalizeRotation(unittest.TestCase):

    def test_values(self):
        self.assertEqual(normalize_rotation(0), 0.0)
        self.assertEqual(normalize_rotation(360), 0.0)
        self.assertEqual(normalize_rotation(450), 90.0)
        self.assertEqual(normalize_rotation(-90), 270.0)


class TestResolvePin(unittest.TestCase):

    def setUp(self):
        self.board = Board(components=(
            Part(id="r1", footprint_id="resistor", position=Vector2(100.0, 100.0)),
            Part(id="r2", footprint_id="resistor", position=Vector2(100.0, 100.0), rotation=180),
            Part(id="ghost", footprint_id="no_such_footprint", position=Vector2(5.0, 5.0)),
            Junction(id="j", position=Vector2(0.0, 0.0)),
        ))

    def test_library_pin(self):
        p = resolve_pin(self.board, PinRef("r1", "1"))
        self.assertAlmostEqual(p.x, 125.4)
        self.assertAlmostEqual(p.y, 125.4)

    def test_rotated_library_pin(self):
        p = resolve_pin(self.board, PinRef("r2", "1"))
        self.assertAlmostEqual(p.x, 227.0)
        self.assertAlmostEqual(p.y, 125.4)

    def test_junction_pad_is_centred(self):
        p = resolve_pin(self.board, PinRef("j", "p1"))
        self.assertEqual(p, Vector2(12.7, 12.7))

    def test_dangling_references_resolve_to_none(self):
        self.assertIsNone(resolve_pin(self.board, PinRef("missing", "1")))
        self.assertIsNone(resolve_pin(self.board, PinRef("r1", "99")))
        self.assertIsNone(resolve_pin(self.board, PinRef("ghost", "1")))

    def test_component_pins(self):
        pins = component_pins(self.board.component("r1"))
        self.assertEqual([p.ref for p in pins], [PinRef("r1", "1"), PinRef("r1", "2")])
        self.assertEqual(component_pins(self.board.component("ghost")), [])


class TestPositionForPinTarget(unittest.TestCase):

    def test_first_pin_lands_on_target(self):
        fp = get_footprint("resistor")
        target = Vector2(254.0, 254.0)
        for r in (0, 90, 180, 270):
            with self.subTest(rotation=r):
                position = position_for_pin_target(fp, target, r)
                part = Part(id="r", footprint_id="resistor", position=position, rotation=r)
                p = global_pos(part, fp.pins[0], fp)
                self.assertAlmostEqual(p.x, target.x)
                self.assertAlmostEqual(p.y, target.y)

    def test_unknown_footprint_uses_target(self):
        self.assertEqual(position_for_pin_target(None, Vector2(1.0, 2.0), 90), Vector2(1.0, 2.0))


if __name__ == "__main__":
    unittest.main()
