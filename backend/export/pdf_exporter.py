"""PDF exporter that renders a topology diagram with configurable page size and orientation."""

from datetime import datetime
from enum import Enum
from io import BytesIO
from typing import Any

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import A4, LETTER, landscape, portrait
from reportlab.pdfgen import canvas


class PageSize(str, Enum):
    """Supported PDF page sizes."""
    A4 = "A4"
    LETTER = "Letter"


class Orientation(str, Enum):
    """Supported PDF page orientations."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


_MARGIN = 20
_TITLE_BLOCK_HEIGHT = 50
_FONT_SIZE = 9

_GROUP_COLOR = {"fill": HexColor("#F8F9FA"), "stroke": HexColor("#ADB5BD")}
_DEVICE_COLOR = {"fill": HexColor("#FFFFFF"), "stroke": HexColor("#343A40")}
_TEXT_COLOR = HexColor("#212529")


def _get_page_size(page_size: PageSize, orientation: Orientation) -> tuple[float, float]:
    """Get page dimensions based on size and orientation."""
    size_map = {
        PageSize.A4: A4,
        PageSize.LETTER: LETTER,
    }

    base_size = size_map.get(page_size, A4)

    if orientation == Orientation.LANDSCAPE:
        return landscape(base_size)
    return portrait(base_size)


def _color(value: str) -> Color:
    """Parse a CSS hex color (``#rgb`` or ``#rrggbb``), falling back to black."""
    if isinstance(value, str) and len(value) == 4 and value.startswith("#"):
        value = "#" + "".join(ch * 2 for ch in value[1:])
    try:
        return HexColor(value)
    except (ValueError, TypeError):
        return HexColor("#000000")


def _truncate_label(label: str, max_chars: int = 18) -> str:
    """Truncate label to fit within element bounds."""
    if len(label) <= max_chars:
        return label
    return label[: max_chars - 1] + "…"


class _Transform:
    """Maps diagram pixels (top-left origin) to PDF points (bottom-left origin)."""

    def __init__(self, canvas_w: float, canvas_h: float, page_w: float, page_h: float) -> None:
        avail_w = page_w - 2 * _MARGIN
        avail_h = page_h - 3 * _MARGIN - _TITLE_BLOCK_HEIGHT
        self.scale = min(avail_w / canvas_w, avail_h / canvas_h, 1.0)
        self.left = _MARGIN
        self.top = page_h - _MARGIN

    def point(self, x: float, y: float) -> tuple[float, float]:
        return self.left + x * self.scale, self.top - y * self.scale

    def rect(self, x: float, y: float, w: float, h: float) -> tuple[float, float, float, float]:
        px, py = self.point(x, y + h)
        return px, py, w * self.scale, h * self.scale


def _draw_title_block(c: canvas.Canvas, title: str, page_width: float) -> None:
    """Draw title block at the bottom of the page with diagram title and export date."""
    c.setStrokeColor(HexColor("#2C3E50"))
    c.setLineWidth(1)
    c.rect(_MARGIN, _MARGIN, page_width - 2 * _MARGIN, _TITLE_BLOCK_HEIGHT)

    c.setFont("Helvetica-Bold", 14)
    c.setFillColor(HexColor("#2C3E50"))
    c.drawString(_MARGIN + 10, _MARGIN + _TITLE_BLOCK_HEIGHT - 22, title)

    c.setFont("Helvetica", 10)
    export_date = datetime.now().strftime("%Y-%m-%d %H:%M")
    c.drawString(_MARGIN + 10, _MARGIN + 10, f"Exported: {export_date}")


def export_pdf(
    diagram: dict[str, Any],
    page_size: PageSize = PageSize.A4,
    orientation: Orientation = Orientation.LANDSCAPE,
    title: str = "Network Topology",
) -> bytes:
    """Render diagram data as a single-page PDF scaled to fit the page.

    Args:
        diagram: Positioned diagram data from ``LayoutEngine.to_diagram``.
        page_size: Page size (A4 or Letter), defaults to A4.
        orientation: Page orientation (portrait or landscape), defaults to landscape.
        title: Title shown in the title block and PDF metadata.

    Returns:
        Bytes containing the PDF document.
    """
    page_width, page_height = _get_page_size(page_size, orientation)

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(page_width, page_height))
    c.setTitle(title)
    c.setSubject("Network topology diagram")

    tf = _Transform(
        diagram["canvas"]["width"], diagram["canvas"]["height"], page_width, page_height
    )

    # Groups
    for group in diagram["groups"]:
        x, y, w, h = tf.rect(group["x"] or 0, group["y"] or 0, group["width"], group["height"])
        c.saveState()
        c.setFillColor(_GROUP_COLOR["fill"])
        c.setStrokeColor(_GROUP_COLOR["stroke"])
        c.roundRect(x, y, w, h, 6 * tf.scale, fill=1, stroke=1)
        c.restoreState()
        lx, ly = tf.point((group["x"] or 0) + 10, (group["y"] or 0) + 20)
        c.setFont("Helvetica-Bold", _FONT_SIZE + 1)
        c.setFillColor(_TEXT_COLOR)
        c.drawString(lx, ly, _truncate_label(group["name"], 30))

    # Connections
    for conn in diagram["connections"]:
        x1, y1 = tf.point(conn["source"]["x"], conn["source"]["y"])
        x2, y2 = tf.point(conn["target"]["x"], conn["target"]["y"])
        c.setStrokeColor(_color(conn["color"]))
        c.setLineWidth(2 if conn["selected"] else 1)
        c.line(x1, y1, x2, y2)

    # Devices and interfaces
    for device in diagram["devices"]:
        x, y, w, h = tf.rect(device["x"], device["y"], device["width"], device["height"])
        c.saveState()
        c.setFillColor(_DEVICE_COLOR["fill"])
        c.setStrokeColor(_DEVICE_COLOR["stroke"])
        c.roundRect(x, y, w, h, 3 * tf.scale, fill=1, stroke=1)
        c.restoreState()

        cx, cy = tf.point(device["center"]["x"], device["center"]["y"] + 4)
        c.setFont("Helvetica", _FONT_SIZE)
        c.setFillColor(_TEXT_COLOR)
        c.drawCentredString(cx, cy, _truncate_label(device["hostname"]))

        for iface in device["interfaces"]:
            box = iface["glyph"]
            ix, iy, iw, ih = tf.rect(box["x"], box["y"], box["size"], box["size"])
            c.setFillColor(_color(iface["color"]))
            c.rect(ix, iy, iw, ih, fill=1, stroke=0)

    _draw_title_block(c, title, page_width)

    c.showPage()
    c.save()

    return buffer.getvalue()
