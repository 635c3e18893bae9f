"""Export router for SVG and PDF download endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel

from export.pdf_exporter import Orientation, PageSize, export_pdf
from export.svg_exporter import export_svg
from routers.topology import require_session

router = APIRouter()


class ExportRequest(BaseModel):
    """Request body for export endpoints."""

    session_id: str


class PdfExportRequest(ExportRequest):
    """Request body for the PDF export endpoint."""

    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.LANDSCAPE
    title: str = "Network Topology"


@router.post("/export/svg")
async def export_svg_endpoint(request: ExportRequest) -> Response:
    """Export the current diagram, including dragged positions, as SVG."""
    diagram = require_session(request.session_id).engine.to_diagram()
    content = export_svg(diagram)
    return Response(
        content=content,
        media_type="image/svg+xml; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="topology.svg"'},
    )


@router.post("/export/pdf")
async def export_pdf_endpoint(request: PdfExportRequest) -> Response:
    """Export the current diagram as a PDF document."""
    diagram = require_session(request.session_id).engine.to_diagram()
    content = export_pdf(
        diagram,
        page_size=request.page_size,
        orientation=request.orientation,
        title=request.title,
    )
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="topology.pdf"'},
    )
