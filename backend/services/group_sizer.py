"""Group sizing and the shared intra-group relative placement rule."""

from models.topology_model import Device, DeviceGroup
from services.geometry import DEFAULT_GEOMETRY, GeometryConstants, Point


def relative_position(
    device: Device,
    index: int,
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
) -> Point:
    """Top-left of ``device`` relative to its group's top-left.

    Devices with both level hints sit on the 1-indexed grid; all others are
    laid out left to right by ``index`` on the first row.
    """
    if device.has_levels:
        return Point(
            geometry.device_margin_x + (device.x_level - 1) * geometry.grid_size_x,
            geometry.device_margin_y + (device.y_level - 1) * geometry.grid_size_y,
        )
    return Point(
        geometry.device_margin_x + index * geometry.grid_size_x,
        geometry.device_margin_y,
    )


def size_group(
    group: DeviceGroup,
    members: list[Device] | None,
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
) -> tuple[float, float]:
    """Compute and store the size that fits every member device plus padding.

    ``members`` must be in canonical member order; the position of a device
    in this list is the index used by :func:`relative_position`.
    """
    if not members:
        group.width = geometry.empty_group_width
        group.height = geometry.empty_group_height
        return group.width, group.height

    max_right = 0.0
    max_bottom = 0.0
    for index, device in enumerate(members):
        pos = relative_position(device, index, geometry)
        max_right = max(max_right, pos.x + geometry.device_width)
        max_bottom = max(max_bottom, pos.y + geometry.device_height)

    group.width = max_right + geometry.group_padding
    group.height = max_bottom + geometry.group_padding
    return group.width, group.height
