"""Tests for snapshot loading, reference validation and flow selection."""

import json

import pytest

from loader.loader import SnapshotLoadError, load_snapshot_files, merge_files, parse_file_bytes
from loader.validator import validate_connections, validate_flows, validate_references
from models.snapshot import TopologySnapshot
from models.topology_model import FlowStatus
from services import selection

TOPOLOGY = {
    "devices": [
        {
            "hostname": "fw1",
            "group": "edge",
            "interfaces": [
                {"name": "outside", "ip": "203.0.113.1", "status": "up", "zone": "untrust"},
                {"name": "inside", "ip": "10.0.0.1", "status": "up", "zone": "trust"},
            ],
            "x-level": 1,
            "y-level": 1,
        },
        {
            "hostname": "sw1",
            "group": "core",
            "interfaces": [{"name": "ge0", "ip": "10.0.0.2", "status": "up", "zone": "trust"}],
        },
    ],
    "device_group": [
        {"name": "edge", "devices": ["fw1"], "x-level": 1, "y-level": 1},
        {"name": "core", "devices": ["sw1"], "x-level": 1, "y-level": 2},
    ],
    "zones": [
        {"name": "trust", "color": "#00aa00"},
        {"name": "untrust", "color": "#aa0000"},
    ],
}

CONNECTIONS = {
    "connections": [
        {
            "source_device": "fw1", "source_interface": "inside",
            "destination_device": "sw1", "destination_interface": "ge0",
            "label": "fw1-sw1", "selected": True,
        },
        {
            "source_device": "fw1", "source_interface": "dmz",
            "destination_device": "db1", "destination_interface": "eth0",
            "label": "fw1-db1",
        },
    ]
}

FLOWS = {
    "flows": [
        {
            "id": "F1", "name": "web", "source": "internet", "destination": "sw1",
            "connection_labels": ["fw1-sw1"], "status": "approved",
        },
        {
            "id": "F2", "name": "backup", "source": "sw1", "destination": "db1",
            "connection_labels": ["fw1-sw1", "missing-link"], "status": "pending",
        },
    ]
}


@pytest.fixture
def snapshot() -> TopologySnapshot:
    return merge_files(TOPOLOGY, CONNECTIONS, FLOWS)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def test_merge_resets_selected_flags(snapshot):
    assert len(snapshot.devices) == 2
    assert len(snapshot.connection) == 2
    assert all(not c.selected for c in snapshot.connection)
    assert all(not f.selected for f in snapshot.flows)


def test_level_aliases_preserved(snapshot):
    fw1 = snapshot.find_device("fw1")
    assert (fw1.x_level, fw1.y_level) == (1, 1)
    assert snapshot.find_device("sw1").x_level is None

    dumped = snapshot.find_group("core").model_dump(by_alias=True)
    assert dumped["y-level"] == 2


def test_merge_without_connections_or_flows():
    snapshot = merge_files(TOPOLOGY)
    assert snapshot.connection == []
    assert snapshot.flows == []


def test_unknown_flow_status_is_kept():
    snapshot = merge_files(
        TOPOLOGY, None, {"flows": [{"id": "F9", "connection_labels": [], "status": "draft"}]}
    )
    flow = snapshot.find_flow("F9")

    assert flow.status == "draft"
    assert selection.flow_status_color(flow.status) == "#6c757d"
    assert selection.flows_by_status(snapshot, FlowStatus.PENDING) == []


def test_invalid_document_raises():
    with pytest.raises(SnapshotLoadError):
        merge_files({"devices": [{"interfaces": []}]})


def test_parse_file_bytes_errors():
    with pytest.raises(SnapshotLoadError):
        parse_file_bytes(b"{not json", "topology.json")
    with pytest.raises(SnapshotLoadError):
        parse_file_bytes(b"\xff\xfe", "topology.json")
    with pytest.raises(SnapshotLoadError):
        parse_file_bytes(b"[1, 2]", "topology.json")


def test_load_snapshot_files(tmp_path):
    (tmp_path / "topology.json").write_text(json.dumps(TOPOLOGY))
    (tmp_path / "connections.json").write_text(json.dumps(CONNECTIONS))

    snapshot = load_snapshot_files(tmp_path)

    assert len(snapshot.devices) == 2
    assert len(snapshot.connection) == 2
    assert snapshot.flows == []


def test_load_snapshot_files_missing_topology(tmp_path):
    with pytest.raises(SnapshotLoadError):
        load_snapshot_files(tmp_path)


# ---------------------------------------------------------------------------
# Reference validation
# ---------------------------------------------------------------------------

def test_validate_connections(snapshot):
    warnings = validate_connections(snapshot)
    assert warnings == [
        "Connection fw1-db1 references non-existent source interface: dmz",
        "Connection fw1-db1 references non-existent destination device: db1",
    ]


def test_validate_flows(snapshot):
    assert validate_flows(snapshot) == [
        "Flow F2 references non-existent connection label: missing-link",
    ]


def test_validate_references_appends_warnings(snapshot):
    warnings = validate_references(snapshot)
    assert len(warnings) == 3
    assert snapshot.warnings == warnings


# ---------------------------------------------------------------------------
# Flow selection
# ---------------------------------------------------------------------------

def test_select_flow_highlights_connections(snapshot):
    flow = snapshot.find_flow("F2")
    highlighted = selection.select_flow(snapshot, flow)

    assert [c.label for c in highlighted] == ["fw1-sw1"]
    assert flow.selected is True
    assert selection.selected_flow(snapshot) is flow
    assert [c.selected for c in snapshot.connection] == [True, False]


def test_select_flow_is_exclusive(snapshot):
    selection.select_flow(snapshot, snapshot.find_flow("F1"))
    selection.select_flow(snapshot, snapshot.find_flow("F2"))

    assert [f.selected for f in snapshot.flows] == [False, True]


def test_deselect_all(snapshot):
    selection.select_flow(snapshot, snapshot.find_flow("F1"))
    selection.deselect_all_flows(snapshot)

    assert selection.selected_flow(snapshot) is None
    assert not any(c.selected for c in snapshot.connection)


def test_colors(snapshot):
    assert selection.zone_color(snapshot, "trust") == "#00aa00"
    assert selection.zone_color(snapshot, "nowhere") == "#000"
    assert selection.flow_status_color(FlowStatus.APPROVED) == "#28a745"
    assert selection.flow_status_color("rejected") == "#dc3545"
    assert selection.flow_status_color("bogus") == "#6c757d"

    conn = snapshot.connection[0]
    assert selection.connection_stroke_color(conn) == "#666"
    conn.selected = True
    assert selection.connection_stroke_color(conn) == "#8A2BE2"


def test_filters(snapshot):
    assert [f.id for f in selection.flows_by_status(snapshot, FlowStatus.PENDING)] == ["F2"]
    assert [c.label for c in selection.connections_by_labels(snapshot, ["fw1-db1"])] == ["fw1-db1"]
