"""Import router for topology, connections and flows JSON uploads."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, UploadFile

from loader.loader import (
    CONNECTIONS_FILE,
    FLOWS_FILE,
    TOPOLOGY_FILE,
    SnapshotLoadError,
    merge_files,
    parse_file_bytes,
)
from routers.topology import LayoutResponse, layout_into_session

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_document(file: UploadFile | None, default_name: str) -> dict[str, Any] | None:
    """Read and decode an optional uploaded JSON document."""
    if file is None:
        return None
    raw_bytes = await file.read()
    try:
        return parse_file_bytes(raw_bytes, file.filename or default_name)
    except SnapshotLoadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/import", response_model=LayoutResponse)
async def import_files(
    topology: UploadFile,
    connections: UploadFile | None = None,
    flows: UploadFile | None = None,
    session_id: str | None = None,
) -> LayoutResponse:
    """Import the topology documents, merge them and lay out the result.

    ``connections`` and ``flows`` are optional; missing documents count as empty.
    """
    topology_doc = await _read_document(topology, TOPOLOGY_FILE)
    connections_doc = await _read_document(connections, CONNECTIONS_FILE)
    flows_doc = await _read_document(flows, FLOWS_FILE)

    try:
        snapshot = merge_files(topology_doc or {}, connections_doc, flows_doc)
    except SnapshotLoadError as exc:
        logger.warning("Rejected topology import: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return layout_into_session(snapshot, session_id)
