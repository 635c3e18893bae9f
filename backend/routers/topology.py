"""Topology router: layout, position queries, re-arrange and flow selection."""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from loader.validator import validate_references
from models.snapshot import TopologySnapshot
from services import selection
from services.session import Session, SessionManager

router = APIRouter()
session_manager = SessionManager()


class LayoutRequest(BaseModel):
    """Request body for the layout endpoint."""

    snapshot: TopologySnapshot
    session_id: str | None = None


class LayoutResponse(BaseModel):
    """Response body carrying a session and its positioned diagram."""

    session_id: str
    diagram: dict[str, Any]
    warnings: list[str]


class PointResponse(BaseModel):
    x: float
    y: float
    found: bool = True


class SelectionResponse(BaseModel):
    flow_id: str | None
    connections: list[str]


def require_session(session_id: str) -> Session:
    """Return the session or raise 404."""
    session = session_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def layout_into_session(snapshot: TopologySnapshot, session_id: str | None = None) -> LayoutResponse:
    """Validate and lay out ``snapshot`` in an existing or new session."""
    validate_references(snapshot)

    session = session_manager.get_session(session_id) if session_id else None
    if session is None:
        session = require_session(session_manager.create_session())

    session.engine.layout(snapshot)
    diagram = session.engine.to_diagram()

    return LayoutResponse(
        session_id=session.id,
        diagram=diagram,
        warnings=snapshot.warnings + diagram["diagnostics"],
    )


@router.post("/topology/layout", response_model=LayoutResponse)
async def layout_topology(request: LayoutRequest) -> LayoutResponse:
    """Lay out a merged topology snapshot and return the positioned diagram."""
    return layout_into_session(request.snapshot, request.session_id)


@router.get("/topology/{session_id}")
async def get_diagram(session_id: str) -> dict[str, Any]:
    """Current diagram of a session, including any dragged positions."""
    return require_session(session_id).engine.to_diagram()


@router.get("/topology/{session_id}/devices/{hostname}/center", response_model=PointResponse)
async def device_center(session_id: str, hostname: str) -> PointResponse:
    engine = require_session(session_id).engine
    point = engine.device_center(hostname)
    found = engine.membership.devices_by_hostname.get(hostname) is not None
    return PointResponse(x=point.x, y=point.y, found=found)


@router.get(
    "/topology/{session_id}/devices/{hostname}/interfaces/{interface_name}/anchor",
    response_model=PointResponse,
)
async def interface_anchor(session_id: str, hostname: str, interface_name: str) -> PointResponse:
    anchor = require_session(session_id).engine.resolve_interface(hostname, interface_name)
    return PointResponse(x=anchor.point.x, y=anchor.point.y, found=anchor.found)


@router.post("/topology/{session_id}/arrange")
async def auto_arrange(session_id: str) -> dict[str, Any]:
    """Re-pack all groups, discarding manual drag positions."""
    engine = require_session(session_id).engine
    engine.auto_arrange()
    return engine.to_diagram()


@router.post("/topology/{session_id}/refresh-sizes")
async def refresh_group_sizes(session_id: str) -> dict[str, Any]:
    """Re-size every group from its members, then re-pack."""
    engine = require_session(session_id).engine
    engine.refresh_group_sizes()
    return engine.to_diagram()


@router.post("/topology/{session_id}/flows/deselect", response_model=SelectionResponse)
async def deselect_flows(session_id: str) -> SelectionResponse:
    snapshot = require_session(session_id).engine.snapshot
    selection.deselect_all_flows(snapshot)
    return SelectionResponse(flow_id=None, connections=[])


@router.post("/topology/{session_id}/flows/{flow_id}/select", response_model=SelectionResponse)
async def select_flow(session_id: str, flow_id: str) -> SelectionResponse:
    """Select a flow and highlight the connections it traverses."""
    snapshot = require_session(session_id).engine.snapshot
    flow = snapshot.find_flow(flow_id)
    if flow is None:
        raise HTTPException(status_code=404, detail=f"Flow '{flow_id}' not found")
    highlighted = selection.select_flow(snapshot, flow)
    return SelectionResponse(flow_id=flow.id, connections=[c.label for c in highlighted])
