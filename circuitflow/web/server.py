"""
FastAPI web server — JSON API over the board engine.

One board is held in a module-level ``BoardStore``; every edit endpoint
builds a new snapshot and publishes it, which reschedules the debounced
DRC run.  ``POST /api/drc`` is the manual refresh.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field

from circuitflow.board import (
    Board, BoardStore, ContinuityMode, PinRef, ProjectFormatError,
    board_to_dict, parse_board,
)
from circuitflow.drc import DrcResult, DrcScheduler, run_drc
from circuitflow.editing import (
    add_part, add_trace, delete, drag_handle, move_component,
    rotate_components, set_continuity, split_trace,
)
from circuitflow.export import export_grbl, export_svg
from circuitflow.library import Footprint, builtin_footprints
from circuitflow.vector import Vector2

log = logging.getLogger("circuitflow.web.server")

# ── Board state (persists across requests) ─────────────────────────

store = BoardStore()
_scheduler: DrcScheduler | None = None   # created once the event loop runs


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    global _scheduler
    _scheduler = DrcScheduler.for_store(store)
    _scheduler.on_result(
        lambda r: log.info("Background DRC: %s (%d invalid traces)",
                           r.status.value, len(r.invalid_trace_ids))
    )
    try:
        yield
    finally:
        _scheduler.close()
        _scheduler = None


# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="CircuitFlow", lifespan=_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Models ─────────────────────────────────────────────────────────

class PointRequest(BaseModel):
    x: float
    y: float


class HandleRequest(BaseModel):
    handle: int
    x: float
    y: float


class IdsRequest(BaseModel):
    ids: list[str]


class RotateRequest(BaseModel):
    ids: list[str]
    step: float = 90.0


class AddPartRequest(BaseModel):
    footprint_id: str
    x: float
    y: float
    rotation: float = 0.0
    name: str | None = None


class PinRefModel(BaseModel):
    component: str
    pin: str

    def to_ref(self) -> PinRef:
        return PinRef(self.component, self.pin)


class AddTraceRequest(BaseModel):
    from_pin: PinRefModel = Field(alias="from")
    to_pin: PinRefModel = Field(alias="to")


class ContinuityRequest(BaseModel):
    mode: ContinuityMode


# ── Helpers ────────────────────────────────────────────────────────

def _board_payload(board: Board | None = None) -> dict:
    board = store.current if board is None else board
    return {**board_to_dict(board, timestamp=False), "revision": store.revision}


def _apply(edit: Callable[[Board], Board]) -> Board:
    """Run an edit against the current board and publish the result."""
    try:
        return store.update(edit)
    except KeyError as e:
        raise HTTPException(404, f"Not found: {e.args[0] if e.args else e}")
    except (ValueError, TypeError) as e:
        raise HTTPException(400, str(e))


def _footprint_to_dict(fp: Footprint) -> dict:
    return {
        "id": fp.id,
        "name": fp.name,
        "width": fp.width,
        "height": fp.height,
        "shape": fp.shape,
        "value_kind": fp.value_kind,
        "pins": [
            {"id": p.id, "name": p.name, "position": [p.local_pos.x, p.local_pos.y], "type": p.type}
            for p in fp.pins
        ],
    }


# ── Routes ─────────────────────────────────────────────────────────
# Edit routes are ``async def`` so store listeners (and the scheduler's
# call_later) run on the event loop thread.

@app.get("/api/board")
async def get_board():
    return _board_payload()


@app.put("/api/board")
async def load_board(data: dict[str, Any]):
    try:
        board = parse_board(data)
    except ProjectFormatError as e:
        log.warning("Rejected project load: %s", e.reason)
        raise HTTPException(400, str(e))
    store.publish(board)
    log.info("Loaded board: %d components, %d traces", len(board.components), len(board.traces))
    return _board_payload()


@app.post("/api/drc")
async def refresh_drc():
    result: DrcResult | None = None
    if _scheduler is not None:
        result = _scheduler.run_now()
    if result is None:
        result = run_drc(store.current)
    return result.to_dict()


@app.get("/api/drc")
async def last_drc():
    """Most recent background result, running one if none exists yet."""
    if _scheduler is not None and _scheduler.last_result is not None:
        return _scheduler.last_result.to_dict()
    return run_drc(store.current).to_dict()


@app.post("/api/components")
async def create_component(req: AddPartRequest):
    created: dict[str, str] = {}

    def edit(board: Board) -> Board:
        board, created["id"] = add_part(
            board, req.footprint_id, Vector2(req.x, req.y), rotation=req.rotation, name=req.name,
        )
        return board

    _apply(edit)
    return {"id": created["id"], "board": _board_payload()}


@app.post("/api/components/{component_id}/move")
async def move(component_id: str, req: PointRequest):
    _apply(lambda b: move_component(b, component_id, Vector2(req.x, req.y)))
    return _board_payload()


@app.post("/api/junctions/{junction_id}/continuity")
async def continuity(junction_id: str, req: ContinuityRequest):
    _apply(lambda b: set_continuity(b, junction_id, req.mode))
    return _board_payload()


@app.post("/api/traces")
async def create_trace(req: AddTraceRequest):
    created: dict[str, str] = {}

    def edit(board: Board) -> Board:
        board, created["id"] = add_trace(board, req.from_pin.to_ref(), req.to_pin.to_ref())
        return board

    _apply(edit)
    return {"id": created["id"], "board": _board_payload()}


@app.post("/api/traces/{trace_id}/handle")
async def handle(trace_id: str, req: HandleRequest):
    _apply(lambda b: drag_handle(b, trace_id, req.handle, Vector2(req.x, req.y)))
    return _board_payload()


@app.post("/api/traces/{trace_id}/split")
async def split(trace_id: str, req: PointRequest):
    created: dict[str, str] = {}

    def edit(board: Board) -> Board:
        board, created["junction_id"] = split_trace(board, trace_id, Vector2(req.x, req.y))
        return board

    _apply(edit)
    return {"junction_id": created["junction_id"], "board": _board_payload()}


@app.post("/api/rotate")
async def rotate(req: RotateRequest):
    _apply(lambda b: rotate_components(b, req.ids, req.step))
    return _board_payload()


@app.post("/api/delete")
async def delete_items(req: IdsRequest):
    _apply(lambda b: delete(b, req.ids))
    return _board_payload()


@app.get("/api/export/gcode")
async def gcode():
    lines = export_grbl(store.current)
    return PlainTextResponse(
        "\n".join(lines) + "\n",
        headers={"Content-Disposition": 'attachment; filename="circuit.gcode"'},
    )


@app.get("/api/export/svg")
async def svg():
    return Response(content=export_svg(store.current), media_type="image/svg+xml")


@app.get("/api/footprints")
async def footprints():
    return [_footprint_to_dict(fp) for fp in builtin_footprints().values()]


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("circuitflow.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
