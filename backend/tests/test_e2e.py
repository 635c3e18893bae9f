"""End-to-end tests for the Network Topology API.

Covers layout of a merged snapshot, position queries, re-arrange, flow
selection, group dragging, file import and SVG/PDF export.
"""

import json

import pytest
from fastapi.testclient import TestClient
from lxml import etree

from main import app

client = TestClient(app)

SVG_NS = "http://www.w3.org/2000/svg"

# ---------------------------------------------------------------------------
# Fixture: two groups, one standalone device, connections and flows
# ---------------------------------------------------------------------------
TOPOLOGY = {
    "devices": [
        {
            "hostname": "fw1",
            "group": "edge",
            "interfaces": [
                {"name": "outside", "ip": "203.0.113.1", "status": "up", "zone": "untrust"},
                {"name": "inside", "ip": "10.0.0.1", "status": "up", "zone": "trust"},
            ],
        },
        {
            "hostname": "sw1",
            "group": "core",
            "interfaces": [{"name": "ge0", "ip": "10.0.0.2", "status": "up", "zone": "trust"}],
        },
        {
            "hostname": "db1",
            "interfaces": [{"name": "eth0", "ip": "10.0.1.5", "status": "up", "zone": "trust"}],
        },
    ],
    "device_group": [
        {"name": "edge", "devices": ["fw1"], "x-level": 1, "y-level": 1},
        {"name": "core", "devices": ["sw1"], "x-level": 2, "y-level": 1},
    ],
    "zones": [
        {"name": "trust", "color": "#00aa00"},
        {"name": "untrust", "color": "#aa0000"},
    ],
}

CONNECTIONS = [
    {
        "source_device": "fw1", "source_interface": "inside",
        "destination_device": "sw1", "destination_interface": "ge0",
        "label": "fw1-sw1",
    },
    {
        "source_device": "sw1", "source_interface": "ge0",
        "destination_device": "db1", "destination_interface": "eth0",
        "label": "sw1-db1",
    },
]

FLOWS = [
    {
        "id": "F1", "name": "db-access", "source": "internet", "destination": "db1",
        "connection_labels": ["fw1-sw1", "sw1-db1"], "status": "approved",
    },
    {
        "id": "F2", "name": "legacy", "source": "sw1", "destination": "db1",
        "connection_labels": ["sw1-db1"], "status": "rejected",
    },
]


def _snapshot(**overrides) -> dict:
    snapshot = {**TOPOLOGY, "connection": CONNECTIONS, "flows": FLOWS}
    snapshot.update(overrides)
    return snapshot


def _layout(snapshot: dict | None = None) -> dict:
    resp = client.post("/api/topology/layout", json={"snapshot": snapshot or _snapshot()})
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture
def session_id() -> str:
    return _layout()["session_id"]


def _by(items: list[dict], key: str, value: str) -> dict:
    return next(item for item in items if item[key] == value)


# ---------------------------------------------------------------------------
# 1. Layout
# ---------------------------------------------------------------------------
class TestLayout:
    """Verify the positioned diagram returned by the layout endpoint."""

    def test_groups_placed_left_to_right(self):
        diagram = _layout()["diagram"]
        edge = _by(diagram["groups"], "name", "edge")
        core = _by(diagram["groups"], "name", "core")

        assert (edge["x"], edge["y"], edge["width"], edge["height"]) == (50, 50, 150, 150)
        assert (core["x"], core["y"]) == (220, 50)

    def test_standalone_device_below_groups(self):
        diagram = _layout()["diagram"]
        db1 = _by(diagram["devices"], "hostname", "db1")

        assert db1["group"] is None
        assert (db1["x"], db1["y"]) == (50, 250)

    def test_device_and_interface_geometry(self):
        diagram = _layout()["diagram"]
        fw1 = _by(diagram["devices"], "hostname", "fw1")

        assert fw1["center"] == {"x": 110, "y": 105}
        assert [i["anchor"] for i in fw1["interfaces"]] == [
            {"x": 101, "y": 130},
            {"x": 119, "y": 130},
        ]
        assert fw1["interfaces"][0]["glyph"] == {"x": 95, "y": 124, "size": 12}
        assert [i["color"] for i in fw1["interfaces"]] == ["#aa0000", "#00aa00"]

    def test_connection_paths(self):
        diagram = _layout()["diagram"]
        conn = _by(diagram["connections"], "label", "fw1-sw1")

        assert conn["source"] == {"x": 119, "y": 130}
        assert conn["target"] == {"x": 280, "y": 130}
        assert conn["path"] == "M 119 130 L 280 130"
        assert conn["selected"] is False
        assert conn["color"] == "#666"

    def test_minimum_canvas(self):
        diagram = _layout()["diagram"]
        assert diagram["canvas"] == {"width": 1400, "height": 1000}

    def test_flows_carry_status_color(self):
        diagram = _layout()["diagram"]
        assert _by(diagram["flows"], "id", "F1")["statusColor"] == "#28a745"
        assert _by(diagram["flows"], "id", "F2")["statusColor"] == "#dc3545"

    def test_dangling_references_reported(self):
        snapshot = _snapshot(
            device_group=[{"name": "edge", "devices": ["fw1", "ghost"]}],
            connection=[
                {
                    "source_device": "fw1", "source_interface": "dmz",
                    "destination_device": "sw1", "destination_interface": "ge0",
                    "label": "broken",
                },
            ],
        )
        data = _layout(snapshot)
        warnings = "\n".join(data["warnings"])

        assert "non-existent source interface: dmz" in warnings
        assert "ghost" in warnings
        assert _by(data["diagram"]["groups"], "name", "edge")["devices"] == ["fw1"]

    def test_empty_snapshot(self):
        data = _layout({"devices": [], "device_group": []})
        diagram = data["diagram"]

        assert diagram["groups"] == []
        assert diagram["devices"] == []
        assert diagram["canvas"] == {"width": 1400, "height": 1000}

    def test_invalid_snapshot_rejected(self):
        resp = client.post("/api/topology/layout", json={"snapshot": {"devices": [{}]}})
        assert resp.status_code == 422

    def test_relayout_into_existing_session(self, session_id):
        data = client.post(
            "/api/topology/layout",
            json={"snapshot": _snapshot(), "session_id": session_id},
        ).json()
        assert data["session_id"] == session_id

    def test_get_diagram(self, session_id):
        resp = client.get(f"/api/topology/{session_id}")
        assert resp.status_code == 200
        assert len(resp.json()["groups"]) == 2

    def test_unknown_session(self):
        assert client.get("/api/topology/does-not-exist").status_code == 404


# ---------------------------------------------------------------------------
# 2. Position queries
# ---------------------------------------------------------------------------
class TestPositionQueries:
    """Verify device center and interface anchor endpoints."""

    def test_device_center(self, session_id):
        resp = client.get(f"/api/topology/{session_id}/devices/sw1/center")
        assert resp.json() == {"x": 280, "y": 105, "found": True}

    def test_unknown_device_center(self, session_id):
        resp = client.get(f"/api/topology/{session_id}/devices/nope/center")
        assert resp.json() == {"x": 0, "y": 0, "found": False}

    def test_interface_anchor(self, session_id):
        resp = client.get(f"/api/topology/{session_id}/devices/fw1/interfaces/outside/anchor")
        assert resp.json() == {"x": 101, "y": 130, "found": True}

    def test_interface_lookup_miss(self, session_id):
        resp = client.get(f"/api/topology/{session_id}/devices/fw1/interfaces/dmz/anchor")
        assert resp.json() == {"x": 110, "y": 135, "found": False}

        diagram = client.get(f"/api/topology/{session_id}").json()
        assert any("dmz" in message for message in diagram["diagnostics"])


# ---------------------------------------------------------------------------
# 3. Flow selection
# ---------------------------------------------------------------------------
class TestFlowSelection:
    """Verify flow selection highlights the traversed connections."""

    def test_select_flow(self, session_id):
        resp = client.post(f"/api/topology/{session_id}/flows/F1/select")
        assert resp.json() == {"flow_id": "F1", "connections": ["fw1-sw1", "sw1-db1"]}

        diagram = client.get(f"/api/topology/{session_id}").json()
        assert diagram["selectedFlow"] == "F1"
        assert all(c["selected"] for c in diagram["connections"])
        assert all(c["color"] == "#8A2BE2" for c in diagram["connections"])

    def test_selection_is_exclusive(self, session_id):
        client.post(f"/api/topology/{session_id}/flows/F1/select")
        client.post(f"/api/topology/{session_id}/flows/F2/select")

        diagram = client.get(f"/api/topology/{session_id}").json()
        assert [f["selected"] for f in diagram["flows"]] == [False, True]
        assert [c["selected"] for c in diagram["connections"]] == [False, True]

    def test_deselect(self, session_id):
        client.post(f"/api/topology/{session_id}/flows/F1/select")
        resp = client.post(f"/api/topology/{session_id}/flows/deselect")
        assert resp.json() == {"flow_id": None, "connections": []}

        diagram = client.get(f"/api/topology/{session_id}").json()
        assert diagram["selectedFlow"] is None
        assert not any(c["selected"] for c in diagram["connections"])

    def test_unknown_flow(self, session_id):
        resp = client.post(f"/api/topology/{session_id}/flows/F9/select")
        assert resp.status_code == 404


# ---------------------------------------------------------------------------
# 4. Dragging
# ---------------------------------------------------------------------------
class TestDrag:
    """Verify the pointer-event driven group drag."""

    def test_drag_cycle(self, session_id):
        resp = client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "edge", "x": 0, "y": 0},
        )
        assert resp.json() == {"state": "dragging", "group": "edge", "x": 50, "y": 50}

        resp = client.post("/api/drag/move", json={"session_id": session_id, "x": 30, "y": 20})
        assert resp.json() == {"state": "dragging", "group": "edge", "x": 80, "y": 70}

        resp = client.post("/api/drag/up", json={"session_id": session_id, "x": 30, "y": 20})
        assert resp.json() == {"state": "idle", "group": "edge", "x": 80, "y": 70}

        center = client.get(f"/api/topology/{session_id}/devices/fw1/center").json()
        assert (center["x"], center["y"]) == (140, 125)

        # further moves after pointer-up are ignored
        resp = client.post("/api/drag/move", json={"session_id": session_id, "x": 500, "y": 500})
        assert resp.json()["state"] == "idle"
        edge = _by(client.get(f"/api/topology/{session_id}").json()["groups"], "name", "edge")
        assert (edge["x"], edge["y"]) == (80, 70)

    def test_device_target_rejected(self, session_id):
        resp = client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "edge", "x": 0, "y": 0, "target": "device"},
        )
        assert resp.json()["state"] == "idle"

    def test_end_drag(self, session_id):
        client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "core", "x": 0, "y": 0},
        )
        resp = client.post("/api/drag/end", json={"session_id": session_id})
        assert resp.json() == {"state": "idle", "group": "core", "x": 220, "y": 50}

    def test_unknown_group(self, session_id):
        resp = client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "nope", "x": 0, "y": 0},
        )
        assert resp.status_code == 404

    def test_arrange_discards_drag(self, session_id):
        client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "edge", "x": 0, "y": 0},
        )
        client.post("/api/drag/move", json={"session_id": session_id, "x": 400, "y": 400})
        client.post("/api/drag/up", json={"session_id": session_id, "x": 400, "y": 400})

        diagram = client.post(f"/api/topology/{session_id}/arrange").json()
        edge = _by(diagram["groups"], "name", "edge")
        assert (edge["x"], edge["y"]) == (50, 50)

    def test_refresh_sizes(self, session_id):
        diagram = client.post(f"/api/topology/{session_id}/refresh-sizes").json()
        edge = _by(diagram["groups"], "name", "edge")
        assert (edge["width"], edge["height"]) == (150, 150)


# ---------------------------------------------------------------------------
# 5. Import
# ---------------------------------------------------------------------------
class TestImport:
    """Verify multipart upload of the topology documents."""

    @staticmethod
    def _file(name: str, payload) -> tuple:
        return (name, json.dumps(payload).encode("utf-8"), "application/json")

    def test_import_all_documents(self):
        resp = client.post(
            "/api/import",
            files={
                "topology": self._file("topology.json", TOPOLOGY),
                "connections": self._file("connections.json", {"connections": CONNECTIONS}),
                "flows": self._file("flows.json", {"flows": FLOWS}),
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["diagram"]["connections"]) == 2
        assert len(data["diagram"]["flows"]) == 2
        assert data["warnings"] == []

    def test_import_topology_only(self):
        resp = client.post(
            "/api/import",
            files={"topology": self._file("topology.json", TOPOLOGY)},
        )
        assert resp.status_code == 200
        assert resp.json()["diagram"]["connections"] == []

    def test_import_unknown_flow_status(self):
        flows = [{"id": "F9", "name": "draft", "connection_labels": ["fw1-sw1"], "status": "draft"}]
        resp = client.post(
            "/api/import",
            files={
                "topology": self._file("topology.json", TOPOLOGY),
                "flows": self._file("flows.json", {"flows": flows}),
            },
        )
        assert resp.status_code == 200
        flow = _by(resp.json()["diagram"]["flows"], "id", "F9")
        assert (flow["status"], flow["statusColor"]) == ("draft", "#6c757d")

    def test_import_invalid_json(self):
        resp = client.post(
            "/api/import",
            files={"topology": ("topology.json", b"{oops", "application/json")},
        )
        assert resp.status_code == 400

    def test_import_invalid_document(self):
        resp = client.post(
            "/api/import",
            files={"topology": self._file("topology.json", {"devices": [{"group": "x"}]})},
        )
        assert resp.status_code == 400


# ---------------------------------------------------------------------------
# 6. Export
# ---------------------------------------------------------------------------
class TestExport:
    """Verify SVG and PDF export of a laid-out session."""

    def test_svg_export(self, session_id):
        resp = client.post("/api/export/svg", json={"session_id": session_id})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("image/svg+xml")

        root = etree.fromstring(resp.content)
        assert root.tag == f"{{{SVG_NS}}}svg"
        assert root.get("width") == "1400"
        assert len(root.findall(f".//{{{SVG_NS}}}path")) == 2

    def test_svg_reflects_drag(self, session_id):
        client.post(
            "/api/drag/begin",
            json={"session_id": session_id, "group": "edge", "x": 0, "y": 0},
        )
        client.post("/api/drag/move", json={"session_id": session_id, "x": 10, "y": 0})
        client.post("/api/drag/end", json={"session_id": session_id})

        resp = client.post("/api/export/svg", json={"session_id": session_id})
        assert b"M 129 130 L 280 130" in resp.content

    def test_pdf_export(self, session_id):
        resp = client.post(
            "/api/export/pdf",
            json={"session_id": session_id, "page_size": "Letter", "orientation": "portrait"},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF-")

    def test_export_unknown_session(self):
        resp = client.post("/api/export/svg", json={"session_id": "missing"})
        assert resp.status_code == 404


def test_health():
    resp = client.get("/api/health")
    assert resp.json() == {"status": "ok"}
