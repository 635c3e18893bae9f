"""Layout engine that computes and maintains positions for topology diagrams.

Layout pipeline (recomputed from scratch on every load):
Phase 0: Build the hostname -> group membership index
Phase 1: Size every group to fit its member devices
Phase 2: Pack groups into level rows (no overlap)
Phase 3: Place standalone devices below the lowest group
Phase 4: Compute the canvas size

Between loads the engine answers position queries for the renderer and lets
the user drag groups around; ``auto_arrange`` and ``refresh_group_sizes``
re-run the packing explicitly.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from models.snapshot import TopologySnapshot
from models.topology_model import Connection, DeviceGroup
from services import selection
from services.diagnostics import DiagnosticLog
from services.drag import DragController, DragTarget, PositionChanged
from services.events import PointerEventKind, PointerEventSource, Signal
from services.geometry import DEFAULT_GEOMETRY, CanvasSize, GeometryConstants, Point
from services.group_sizer import size_group
from services.level_placer import canvas_size, group_height, group_width, place_groups
from services.membership import MembershipIndex
from services.position_resolver import InterfaceAnchor, PositionResolver
from services.standalone_placer import place_standalone

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Payload of ``on_layout_computed``."""

    canvas: CanvasSize
    standalone: list[str] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)


class LayoutEngine:
    """Owns the position model of one topology snapshot."""

    def __init__(self, geometry: GeometryConstants | None = None) -> None:
        self.geometry = geometry or DEFAULT_GEOMETRY
        self.diagnostics = DiagnosticLog()
        self.pointer_events = PointerEventSource()
        self.drag = DragController(self.pointer_events)
        self.on_layout_computed = Signal()
        self.on_position_changed = self.drag.on_position_changed
        self.drag.on_position_changed.connect(self._on_group_moved)

        self.snapshot = TopologySnapshot()
        self.canvas = CanvasSize(self.geometry.min_canvas_width, self.geometry.min_canvas_height)
        self.membership = MembershipIndex([], [])
        self.resolver = PositionResolver(self.membership, self.geometry, self.diagnostics)

    # ---------- Layout pipeline ----------

    def layout(self, snapshot: TopologySnapshot) -> LayoutResult:
        """Size, pack and place everything in ``snapshot``, mutating it in place."""
        if self.drag.is_dragging:
            self.drag.end_drag()
        self.snapshot = snapshot
        self.diagnostics.clear()

        # --- Phase 0 ---
        self.membership = MembershipIndex(snapshot.devices, snapshot.device_group, self.diagnostics)
        self.resolver = PositionResolver(self.membership, self.geometry, self.diagnostics)

        # --- Phase 1-4 ---
        self._size_groups()
        return self._arrange()

    def auto_arrange(self) -> LayoutResult:
        """Re-pack all groups from scratch, discarding manual positions."""
        return self._arrange()

    def refresh_group_sizes(self) -> LayoutResult:
        """Re-size every group, then re-pack."""
        self._size_groups()
        return self._arrange()

    def _size_groups(self) -> None:
        for group in self.snapshot.device_group:
            size_group(group, self.membership.members_of(group), self.geometry)

    def _arrange(self) -> LayoutResult:
        groups = self.snapshot.device_group
        place_groups(groups, self.geometry)
        standalone = place_standalone(self.snapshot.devices, groups, self.membership, self.geometry)
        self.canvas = self._content_canvas()

        result = LayoutResult(
            canvas=self.canvas,
            standalone=[d.hostname for d in standalone],
            diagnostics=self.diagnostics.messages(),
        )
        logger.info(
            "Layout computed: %d groups, %d standalone devices, canvas %sx%s",
            len(groups), len(standalone), self.canvas.width, self.canvas.height,
        )
        self.on_layout_computed.emit(result)
        return result

    def _content_canvas(self) -> CanvasSize:
        extra_right = 0.0
        extra_bottom = 0.0
        for device in self.snapshot.devices:
            if device.x is None or device.y is None:
                continue
            if not self.membership.is_standalone(device.hostname):
                continue
            extra_right = max(extra_right, device.x + self.geometry.device_width)
            extra_bottom = max(extra_bottom, device.y + self.geometry.device_height)
        return canvas_size(self.snapshot.device_group, self.geometry, extra_right, extra_bottom)

    def _on_group_moved(self, event: PositionChanged) -> None:
        # Grow the canvas with the dragged group; nothing else is reflowed
        self.canvas = self._content_canvas()

    # ---------- Position queries ----------

    def device_center(self, hostname: str) -> Point:
        return self.resolver.device_center(hostname)

    def interface_anchor(self, hostname: str, interface_name: str) -> Point:
        return self.resolver.interface_anchor(hostname, interface_name)

    def resolve_interface(self, hostname: str, interface_name: str) -> InterfaceAnchor:
        return self.resolver.resolve_interface(hostname, interface_name)

    def connection_path(self, connection: Connection) -> str:
        return self.resolver.connection_path(connection)

    # ---------- Drag lifecycle ----------

    def find_group(self, name: str) -> DeviceGroup | None:
        return self.snapshot.find_group(name)

    def begin_drag(
        self,
        group: DeviceGroup | str,
        pointer: Point | tuple[float, float],
        target: DragTarget = DragTarget.GROUP_BACKGROUND,
    ) -> bool:
        if isinstance(group, str):
            found = self.find_group(group)
            if found is None:
                self.diagnostics.reference_miss(f"Drag requested for unknown group '{group}'")
                return False
            group = found
        return self.drag.begin_drag(group, Point(*pointer), target)

    def on_pointer_move(self, pointer: Point | tuple[float, float]) -> None:
        """Forward a pointer move; no-op when no drag is in progress."""
        self.pointer_events.dispatch(PointerEventKind.MOVE, Point(*pointer))

    def on_pointer_up(self, pointer: Point | tuple[float, float]) -> None:
        self.pointer_events.dispatch(PointerEventKind.UP, Point(*pointer))

    def end_drag(self) -> None:
        self.drag.end_drag()

    def close(self) -> None:
        """Teardown: end any drag and release its pointer listeners."""
        self.drag.close()

    # ---------- Renderer output ----------

    def to_diagram(self) -> dict[str, Any]:
        """Positioned diagram data for the rendering layer."""
        snapshot = self.snapshot
        g = self.geometry

        groups = [
            {
                "name": group.name,
                "x": group.x,
                "y": group.y,
                "width": group_width(group, g),
                "height": group_height(group, g),
                "devices": [d.hostname for d in self.membership.members_of(group)],
            }
            for group in snapshot.device_group
        ]

        devices = []
        for hostname, device in self.membership.devices_by_hostname.items():
            origin = self.resolver.device_origin(hostname)
            center = self.resolver.device_center(hostname)
            owner = self.membership.group_of.get(hostname)
            glyphs = dict(self.resolver.interface_positions(hostname))
            interfaces = []
            for iface in device.interfaces:
                anchor = self.resolver.interface_anchor(hostname, iface.name)
                glyph = glyphs[iface.name]
                interfaces.append({
                    "name": iface.name,
                    "ip": iface.ip,
                    "status": iface.status,
                    "zone": iface.zone,
                    "color": selection.zone_color(snapshot, iface.zone),
                    "anchor": {"x": anchor.x, "y": anchor.y},
                    "glyph": {"x": glyph.x, "y": glyph.y, "size": g.interface_glyph_size},
                })
            devices.append({
                "hostname": hostname,
                "group": owner.name if owner else None,
                "x": origin.x,
                "y": origin.y,
                "width": g.device_width,
                "height": g.device_height,
                "center": {"x": center.x, "y": center.y},
                "interfaces": interfaces,
            })

        connections = []
        for conn in snapshot.connection:
            source, dest = self.resolver.connection_endpoints(conn)
            connections.append({
                "label": conn.label,
                "sourceDevice": conn.source_device,
                "sourceInterface": conn.source_interface,
                "destinationDevice": conn.destination_device,
                "destinationInterface": conn.destination_interface,
                "source": {"x": source.x, "y": source.y},
                "target": {"x": dest.x, "y": dest.y},
                "path": self.resolver.connection_path(conn),
                "selected": conn.selected,
                "color": selection.connection_stroke_color(conn),
            })

        selected = selection.selected_flow(snapshot)
        flows = [
            {
                "id": flow.id,
                "name": flow.name,
                "status": flow.status,
                "statusColor": selection.flow_status_color(flow.status),
                "connectionLabels": list(flow.connection_labels),
                "selected": flow.selected,
            }
            for flow in snapshot.flows
        ]

        return {
            "canvas": {"width": self.canvas.width, "height": self.canvas.height},
            "groups": groups,
            "devices": devices,
            "connections": connections,
            "flows": flows,
            "zones": [z.model_dump() for z in snapshot.zones],
            "selectedFlow": selected.id if selected else None,
            "diagnostics": self.diagnostics.messages(),
        }


def compute_layout(
    snapshot: TopologySnapshot, geometry: GeometryConstants | None = None
) -> dict[str, Any]:
    """Lay out ``snapshot`` with a fresh engine and return the diagram data."""
    engine = LayoutEngine(geometry)
    engine.layout(snapshot)
    return engine.to_diagram()
