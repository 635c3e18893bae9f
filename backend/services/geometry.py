"""Fixed layout parameters and small geometry value types."""

from typing import NamedTuple

from pydantic import BaseModel, Field


class Point(NamedTuple):
    x: float
    y: float


class CanvasSize(NamedTuple):
    width: float
    height: float


class GeometryConstants(BaseModel):
    """Grid, margin and glyph sizes used by every layout stage."""
    # Intra-group device grid
    grid_size_x: int = Field(default=100, description="Horizontal device grid pitch")
    grid_size_y: int = Field(default=80, description="Vertical device grid pitch")
    device_margin_x: int = Field(default=20, description="Left offset of the first device")
    device_margin_y: int = Field(default=40, description="Top offset of the first device row")
    device_width: int = Field(default=90, description="Device box width")
    device_height: int = Field(default=70, description="Device box height")
    group_padding: int = Field(default=40, description="Padding after the last device")

    # Group sizes
    empty_group_width: int = Field(default=150, description="Width of a group without members")
    empty_group_height: int = Field(default=100, description="Height of a group without members")
    default_group_width: int = Field(default=350, description="Width assumed for an unsized group")
    default_group_height: int = Field(default=150, description="Height assumed for an unsized group")

    # Group packing
    base_margin_x: int = Field(default=50, description="Left canvas margin")
    base_margin_y: int = Field(default=50, description="Top canvas margin")
    group_spacing_x: int = Field(default=20, description="Horizontal gap between groups")
    level_spacing_y: int = Field(default=50, description="Vertical gap between level rows")

    # Canvas
    min_canvas_width: int = Field(default=1400, description="Minimum canvas width")
    min_canvas_height: int = Field(default=1000, description="Minimum canvas height")
    canvas_margin: int = Field(default=100, description="Trailing margin after content")

    # Standalone devices
    standalone_spacing_x: int = Field(default=150, description="Pitch of standalone devices")
    standalone_gap_y: int = Field(default=50, description="Gap below the lowest group")

    # Device and interface glyphs
    device_center_offset_x: int = Field(default=40, description="Device visual center, x")
    device_center_offset_y: int = Field(default=15, description="Device visual center, y")
    interface_row_offset_y: int = Field(default=30, description="Bottom of the device label area")
    interface_row_gap: int = Field(default=4, description="Gap above the interface row")
    interface_glyph_size: int = Field(default=12, description="Interface glyph edge length")
    interface_gap: int = Field(default=6, description="Gap between interface glyphs")
    interface_miss_offset_y: int = Field(
        default=45, description="Fallback anchor offset for unknown interfaces"
    )


DEFAULT_GEOMETRY = GeometryConstants()
