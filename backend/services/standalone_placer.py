"""Placement of devices that belong to no group."""

from models.topology_model import Device, DeviceGroup
from services.geometry import DEFAULT_GEOMETRY, GeometryConstants
from services.level_placer import group_height
from services.membership import MembershipIndex


def standalone_row_y(
    groups: list[DeviceGroup],
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
) -> float:
    """Top of the standalone row: just below the lowest group."""
    if groups:
        lowest = max((g.y or 0) + group_height(g, geometry) for g in groups)
    else:
        lowest = geometry.base_margin_y
    return lowest + geometry.standalone_gap_y


def place_standalone(
    devices: list[Device],
    groups: list[DeviceGroup],
    membership: MembershipIndex,
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
) -> list[Device]:
    """Place standalone devices in one row and return them in placement order."""
    row_y = standalone_row_y(groups, geometry)
    placed: list[Device] = []
    seen: set[str] = set()

    for device in devices:
        if not membership.is_standalone(device.hostname) or device.hostname in seen:
            continue
        seen.add(device.hostname)
        device.x = geometry.base_margin_x + len(placed) * geometry.standalone_spacing_x
        device.y = row_y
        placed.append(device)

    return placed
