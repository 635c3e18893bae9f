"""Drag router: pointer events for moving a device group."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from routers.topology import require_session
from services.drag import DragState, DragTarget
from services.layout import LayoutEngine

router = APIRouter()


class PointerRequest(BaseModel):
    """Pointer position for move/up events."""

    session_id: str
    x: float
    y: float


class BeginDragRequest(PointerRequest):
    """Pointer-down on a group."""

    group: str
    target: DragTarget = DragTarget.GROUP_BACKGROUND


class EndDragRequest(BaseModel):
    session_id: str


class DragResponse(BaseModel):
    state: DragState
    group: str | None = None
    x: float | None = None
    y: float | None = None


def _response(engine: LayoutEngine, group_name: str | None = None) -> DragResponse:
    group = engine.drag.group or (engine.find_group(group_name) if group_name else None)
    if group is None:
        return DragResponse(state=engine.drag.state)
    return DragResponse(state=engine.drag.state, group=group.name, x=group.x, y=group.y)


@router.post("/drag/begin", response_model=DragResponse)
async def begin_drag(request: BeginDragRequest) -> DragResponse:
    """Start dragging a group from the given pointer position."""
    engine = require_session(request.session_id).engine
    group = engine.find_group(request.group)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Group '{request.group}' not found")
    engine.begin_drag(group, (request.x, request.y), request.target)
    return _response(engine, group.name)


@router.post("/drag/move", response_model=DragResponse)
async def pointer_move(request: PointerRequest) -> DragResponse:
    """Move the dragged group; no-op when no drag is in progress."""
    engine = require_session(request.session_id).engine
    engine.on_pointer_move((request.x, request.y))
    return _response(engine)


@router.post("/drag/up", response_model=DragResponse)
async def pointer_up(request: PointerRequest) -> DragResponse:
    engine = require_session(request.session_id).engine
    group_name = engine.drag.group.name if engine.drag.group else None
    engine.on_pointer_up((request.x, request.y))
    return _response(engine, group_name)


@router.post("/drag/end", response_model=DragResponse)
async def end_drag(request: EndDragRequest) -> DragResponse:
    engine = require_session(request.session_id).engine
    group_name = engine.drag.group.name if engine.drag.group else None
    engine.end_drag()
    return _response(engine, group_name)
