"""Absolute positions of devices and interface anchors.

All queries read the current group/device position fields, so a group moved
by a drag is reflected immediately. Nothing here mutates state besides the
diagnostic log.
"""

from typing import NamedTuple

from models.topology_model import Connection, Device
from services.diagnostics import DiagnosticLog
from services.geometry import DEFAULT_GEOMETRY, GeometryConstants, Point
from services.group_sizer import relative_position
from services.membership import MembershipIndex

ORIGIN = Point(0, 0)


class InterfaceAnchor(NamedTuple):
    point: Point
    found: bool


class PositionResolver:
    """Resolves device origins, device centers and interface anchors."""

    def __init__(
        self,
        membership: MembershipIndex,
        geometry: GeometryConstants = DEFAULT_GEOMETRY,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.membership = membership
        self.geometry = geometry
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    def device_origin(self, hostname: str) -> Point | None:
        """Absolute top-left of a device box, or None for unknown hostnames."""
        device = self.membership.devices_by_hostname.get(hostname)
        if device is None:
            return None
        return self._origin_of(device)

    def _origin_of(self, device: Device) -> Point:
        group = self.membership.group_of.get(device.hostname)
        if group is None:
            return Point(device.x or 0, device.y or 0)
        index = self.membership.member_index(device.hostname)
        rel = relative_position(device, index, self.geometry)
        return Point((group.x or 0) + rel.x, (group.y or 0) + rel.y)

    def device_center(self, hostname: str) -> Point:
        origin = self.device_origin(hostname)
        if origin is None:
            self.diagnostics.reference_miss(f"Unknown device '{hostname}'")
            return ORIGIN
        return Point(
            origin.x + self.geometry.device_center_offset_x,
            origin.y + self.geometry.device_center_offset_y,
        )

    def resolve_interface(self, hostname: str, interface_name: str) -> InterfaceAnchor:
        """Anchor of an interface glyph, with ``found=False`` on a lookup miss."""
        device = self.membership.devices_by_hostname.get(hostname)
        if device is None:
            self.diagnostics.reference_miss(
                f"Interface '{interface_name}' requested on unknown device '{hostname}'"
            )
            return InterfaceAnchor(ORIGIN, False)

        g = self.geometry
        origin = self._origin_of(device)
        center_x = origin.x + g.device_center_offset_x

        names = [i.name for i in device.interfaces]
        if interface_name not in names:
            self.diagnostics.lookup_miss(
                f"Interface '{interface_name}' not found in device '{hostname}'"
            )
            return InterfaceAnchor(Point(center_x, origin.y + g.interface_miss_offset_y), False)

        index = names.index(interface_name)
        count = len(names)
        row_width = count * g.interface_glyph_size + (count - 1) * g.interface_gap
        row_start_x = center_x - row_width / 2
        row_top_y = origin.y + g.interface_row_offset_y + g.interface_row_gap

        return InterfaceAnchor(
            Point(
                row_start_x
                + index * (g.interface_glyph_size + g.interface_gap)
                + g.interface_glyph_size / 2,
                row_top_y + g.interface_glyph_size / 2,
            ),
            True,
        )

    def interface_anchor(self, hostname: str, interface_name: str) -> Point:
        return self.resolve_interface(hostname, interface_name).point

    def interface_positions(self, hostname: str) -> list[tuple[str, Point]]:
        """Top-left corner of every interface glyph of a device, in order."""
        device = self.membership.devices_by_hostname.get(hostname)
        if device is None:
            return []
        half = self.geometry.interface_glyph_size / 2
        positions = []
        for iface in device.interfaces:
            anchor = self.interface_anchor(hostname, iface.name)
            positions.append((iface.name, Point(anchor.x - half, anchor.y - half)))
        return positions

    def connection_endpoints(self, connection: Connection) -> tuple[Point, Point]:
        return (
            self.interface_anchor(connection.source_device, connection.source_interface),
            self.interface_anchor(
                connection.destination_device, connection.destination_interface
            ),
        )

    def connection_path(self, connection: Connection) -> str:
        """SVG path data for a straight line between both interface anchors."""
        source, dest = self.connection_endpoints(connection)
        return f"M {source.x:g} {source.y:g} L {dest.x:g} {dest.y:g}"
