"""Row packing of device groups by level hints.

Groups are bucketed into rows by ``y-level`` and ordered inside a row by
``x-level``. Levels are sort keys, not coordinates: each group is placed
after the previous one in its row, and each row starts below the tallest
group of the row above, so boxes never overlap.
"""

import logging

from models.topology_model import DeviceGroup
from services.geometry import DEFAULT_GEOMETRY, CanvasSize, GeometryConstants

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = 1


def _level(value: int | None) -> int:
    # Group levels start at 1; 0 and missing both fold into the first row
    return value or DEFAULT_LEVEL


def group_width(group: DeviceGroup, geometry: GeometryConstants) -> float:
    return group.width if group.width is not None else geometry.default_group_width


def group_height(group: DeviceGroup, geometry: GeometryConstants) -> float:
    return group.height if group.height is not None else geometry.default_group_height


def bucket_by_level(groups: list[DeviceGroup]) -> list[tuple[int, list[DeviceGroup]]]:
    """Rows in ascending ``y-level``, each stably sorted by ``x-level``."""
    buckets: dict[int, list[DeviceGroup]] = {}
    for group in groups:
        buckets.setdefault(_level(group.y_level), []).append(group)
    return [
        (y_level, sorted(buckets[y_level], key=lambda g: _level(g.x_level)))
        for y_level in sorted(buckets)
    ]


def place_groups(
    groups: list[DeviceGroup],
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
) -> CanvasSize:
    """Assign ``x``/``y`` to every group and return the resulting canvas size."""
    current_y = geometry.base_margin_y

    for y_level, row in bucket_by_level(groups):
        current_x = geometry.base_margin_x
        max_height_in_row = 0.0

        for group in row:
            group.x = current_x
            group.y = current_y
            current_x += group_width(group, geometry) + geometry.group_spacing_x
            max_height_in_row = max(max_height_in_row, group_height(group, geometry))

            logger.debug(
                "Group %s (level %s) positioned at (%s, %s) size %sx%s",
                group.name, y_level, group.x, group.y, group.width, group.height,
            )

        current_y += max_height_in_row + geometry.level_spacing_y

    return canvas_size(groups, geometry)


def canvas_size(
    groups: list[DeviceGroup],
    geometry: GeometryConstants = DEFAULT_GEOMETRY,
    extra_right: float = 0,
    extra_bottom: float = 0,
) -> CanvasSize:
    """Bounding box of placed groups plus margin, floored at the minimum canvas.

    ``extra_right``/``extra_bottom`` extend the content extent for elements
    other than groups (e.g. standalone devices).
    """
    max_right = extra_right
    max_bottom = extra_bottom
    for group in groups:
        max_right = max(max_right, (group.x or 0) + group_width(group, geometry))
        max_bottom = max(max_bottom, (group.y or 0) + group_height(group, geometry))

    return CanvasSize(
        width=max(geometry.min_canvas_width, max_right + geometry.canvas_margin),
        height=max(geometry.min_canvas_height, max_bottom + geometry.canvas_margin),
    )
