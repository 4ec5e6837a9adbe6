"""Static SVG export of the board: part outlines, labels, pads and traces."""

from __future__ import annotations

import logging
from xml.sax.saxutils import escape, quoteattr

from circuitflow.board.models import Board, Part
from circuitflow.board.transform import component_pins, footprint_for, resolve_pin
from circuitflow.config import BOARD_RULES, BoardRules
from circuitflow.geometry.bezier import trace_curve

log = logging.getLogger("circuitflow.export.svg")

PADDING = 100.0
EMPTY_EXTENT = 500.0
PAD_RADIUS = 8

PIN_COLORS = {
    "power": "#ef4444",
    "ground": "#3b82f6",
}
DEFAULT_PIN_COLOR = "#FCD34D"
SILK_COLOR = "#10b981"


def _bounds(board: Board) -> tuple[float, float, float, float]:
    xs: list[float] = []
    ys: list[float] = []
    for c in board.components:
        if not isinstance(c, Part):
            continue
        fp = footprint_for(c)
        if fp is None:
            continue
        xs += [c.position.x, c.position.x + fp.width]
        ys += [c.position.y, c.position.y + fp.height]
    for t in board.traces:
        start = resolve_pin(board, t.from_pin)
        end = resolve_pin(board, t.to_pin)
        if start is None or end is None:
            continue
        xs += [start.x, end.x]
        ys += [start.y, end.y]
    if not xs:
        return 0.0, 0.0, 0.0, 0.0
    return min(xs), min(ys), max(xs), max(ys)


def export_svg(board: Board, rules: BoardRules = BOARD_RULES) -> str:
    """Render the board as a standalone SVG document string."""
    min_x, min_y, max_x, max_y = _bounds(board)
    width = (max_x - min_x or EMPTY_EXTENT) + PADDING * 2
    height = (max_y - min_y or EMPTY_EXTENT) + PADDING * 2

    body: list[str] = []
    for t in board.traces:
        curve = trace_curve(board, t, rules)
        if curve is None:
            continue
        body.append(
            f'<path d="{curve.svg_path()}" stroke={quoteattr(t.color)} '
            f'stroke-width="{t.width:g}" fill="none" stroke-linecap="round" />'
        )

    for c in board.components:
        if not isinstance(c, Part):
            continue
        fp = footprint_for(c)
        if fp is None:
            continue
        body.append(
            f'<g transform="translate({c.position.x:g} {c.position.y:g}) '
            f'rotate({c.rotation:g} {fp.width / 2:g} {fp.height / 2:g})">'
        )
        body.append(
            f'<rect width="{fp.width:g}" height="{fp.height:g}" fill="none" '
            f'stroke="{SILK_COLOR}" stroke-width="2" rx="4" />'
        )
        body.append(
            f'<text x="{fp.width / 2:g}" y="-10" text-anchor="middle" fill="#888" '
            f'font-family="monospace" font-size="12">{escape(c.name)}</text>'
        )
        body.append("</g>")
        for pin in component_pins(c):
            color = PIN_COLORS.get(pin.template.type, DEFAULT_PIN_COLOR)
            body.append(
                f'<circle cx="{pin.position.x:g}" cy="{pin.position.y:g}" r="{PAD_RADIUS}" '
                f'fill="#18181b" stroke="{color}" stroke-width="1.5" />'
            )

    view_x = min_x - PADDING
    view_y = min_y - PADDING
    svg = "\n".join([
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
        f'viewBox="{view_x:g} {view_y:g} {width:g} {height:g}">',
        f'<rect x="{view_x:g}" y="{view_y:g}" width="{width:g}" height="{height:g}" fill="#050C07" />',
        *body,
        "</svg>",
    ])
    log.info("Generated SVG: %d traces, %d components, %d bytes",
             len(board.traces), len(board.components), len(svg))
    return svg
