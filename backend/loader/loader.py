"""Load and merge the topology, connections and flows documents."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from models.snapshot import ConnectionsFile, FlowsFile, TopologyFile, TopologySnapshot

logger = logging.getLogger(__name__)

TOPOLOGY_FILE = "topology.json"
CONNECTIONS_FILE = "connections.json"
FLOWS_FILE = "flows.json"


class SnapshotLoadError(Exception):
    """Error raised when a source document cannot be decoded or validated."""

    def __init__(self, message: str, source: str = "") -> None:
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


def _validate(model_cls: type[BaseModel], data: Any, source: str) -> Any:
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise SnapshotLoadError(f"invalid document: {exc}", source) from exc


def parse_file_bytes(raw: bytes, source: str) -> dict[str, Any]:
    """Decode a UTF-8 JSON document into a dict."""
    try:
        data = json.loads(raw.decode("UTF-8"))
    except UnicodeDecodeError as exc:
        raise SnapshotLoadError("file must be UTF-8 encoded", source) from exc
    except json.JSONDecodeError as exc:
        raise SnapshotLoadError(f"invalid JSON: {exc}", source) from exc
    if not isinstance(data, dict):
        raise SnapshotLoadError("top-level JSON value must be an object", source)
    return data


def merge_files(
    topology: TopologyFile | dict[str, Any],
    connections: ConnectionsFile | dict[str, Any] | None = None,
    flows: FlowsFile | dict[str, Any] | None = None,
) -> TopologySnapshot:
    """Combine the three source documents into one snapshot.

    Every ``selected`` flag starts out false regardless of the input.
    """
    topo = topology if isinstance(topology, TopologyFile) else _validate(
        TopologyFile, topology, TOPOLOGY_FILE
    )
    if connections is None:
        conns = ConnectionsFile()
    elif isinstance(connections, ConnectionsFile):
        conns = connections
    else:
        conns = _validate(ConnectionsFile, connections, CONNECTIONS_FILE)
    if flows is None:
        flws = FlowsFile()
    elif isinstance(flows, FlowsFile):
        flws = flows
    else:
        flws = _validate(FlowsFile, flows, FLOWS_FILE)

    connection = [c.model_copy(update={"selected": False}) for c in conns.connections]
    flow_list = [f.model_copy(update={"selected": False}) for f in flws.flows]

    snapshot = TopologySnapshot(
        devices=topo.devices,
        device_group=topo.device_group,
        zones=topo.zones,
        connection=connection,
        flows=flow_list,
    )
    logger.info(
        "Loaded topology: %d devices, %d groups, %d connections, %d flows, %d zones",
        len(snapshot.devices), len(snapshot.device_group), len(snapshot.connection),
        len(snapshot.flows), len(snapshot.zones),
    )
    return snapshot


def load_snapshot_files(directory: str | Path) -> TopologySnapshot:
    """Read ``topology.json``, ``connections.json`` and ``flows.json`` from a directory.

    Raises:
        SnapshotLoadError: If ``topology.json`` is missing or any file is invalid.
    """
    base = Path(directory)
    topology_path = base / TOPOLOGY_FILE
    if not topology_path.is_file():
        raise SnapshotLoadError("file not found", str(topology_path))

    documents: dict[str, dict[str, Any] | None] = {}
    for name in (TOPOLOGY_FILE, CONNECTIONS_FILE, FLOWS_FILE):
        path = base / name
        documents[name] = parse_file_bytes(path.read_bytes(), name) if path.is_file() else None

    return merge_files(
        documents[TOPOLOGY_FILE] or {},
        documents[CONNECTIONS_FILE],
        documents[FLOWS_FILE],
    )
