"""Flow selection and color lookups over a topology snapshot."""

import logging

from models.snapshot import TopologySnapshot
from models.topology_model import Connection, Flow, FlowStatus

logger = logging.getLogger(__name__)

DEFAULT_ZONE_COLOR = "#000"
CONNECTION_COLOR = "#666"
SELECTED_CONNECTION_COLOR = "#8A2BE2"

FLOW_STATUS_COLORS = {
    FlowStatus.APPROVED: "#28a745",
    FlowStatus.PENDING: "#ffc107",
    FlowStatus.REJECTED: "#dc3545",
}
UNKNOWN_STATUS_COLOR = "#6c757d"


def deselect_all_flows(snapshot: TopologySnapshot) -> None:
    for flow in snapshot.flows:
        flow.selected = False
    for conn in snapshot.connection:
        conn.selected = False


def select_flow(snapshot: TopologySnapshot, flow: Flow) -> list[Connection]:
    """Select ``flow`` exclusively and highlight every connection it traverses.

    Returns the highlighted connections. Labels without a matching connection
    are skipped.
    """
    deselect_all_flows(snapshot)
    flow.selected = True

    highlighted = []
    for label in flow.connection_labels:
        conn = next((c for c in snapshot.connection if c.label == label), None)
        if conn is None:
            logger.warning("Flow %s references unknown connection %s", flow.id, label)
            continue
        conn.selected = True
        highlighted.append(conn)

    logger.info(
        "Selected flow %s with %d connections: %s",
        flow.id, len(flow.connection_labels), flow.connection_labels,
    )
    return highlighted


def selected_flow(snapshot: TopologySnapshot) -> Flow | None:
    return next((f for f in snapshot.flows if f.selected), None)


def connections_by_labels(snapshot: TopologySnapshot, labels: list[str]) -> list[Connection]:
    return [c for c in snapshot.connection if c.label in labels]


def flows_by_status(snapshot: TopologySnapshot, status: FlowStatus | str) -> list[Flow]:
    return [f for f in snapshot.flows if f.status == status]


def zone_color(snapshot: TopologySnapshot, zone_name: str) -> str:
    zone = next((z for z in snapshot.zones if z.name == zone_name), None)
    return zone.color if zone else DEFAULT_ZONE_COLOR


def flow_status_color(status: FlowStatus | str) -> str:
    try:
        return FLOW_STATUS_COLORS[FlowStatus(status)]
    except ValueError:
        return UNKNOWN_STATUS_COLOR


def connection_stroke_color(connection: Connection) -> str:
    return SELECTED_CONNECTION_COLOR if connection.selected else CONNECTION_COLOR
