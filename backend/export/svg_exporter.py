"""SVG exporter rendering a positioned topology diagram.

Draw order: group boxes, connection lines, device boxes with their interface
glyphs. Interface glyphs are filled with their zone color; selected
connections use the highlight color.
"""

from typing import Any

from lxml import etree

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
NSMAP = {None: SVG_NAMESPACE}

GROUP_FILL = "#f8f9fa"
GROUP_STROKE = "#adb5bd"
DEVICE_FILL = "#ffffff"
DEVICE_STROKE = "#343a40"
TEXT_COLOR = "#212529"


def _svg_tag(local_name: str) -> str:
    return f"{{{SVG_NAMESPACE}}}{local_name}"


def _fmt(value: float | None) -> str:
    return f"{value or 0:g}"


def _add_text(parent: etree._Element, x: float, y: float, text: str, **attrs: str) -> None:
    elem = etree.SubElement(parent, _svg_tag("text"))
    elem.set("x", _fmt(x))
    elem.set("y", _fmt(y))
    elem.set("fill", TEXT_COLOR)
    elem.set("font-family", "Helvetica, Arial, sans-serif")
    for key, value in attrs.items():
        elem.set(key.replace("_", "-"), value)
    elem.text = text


def _add_groups(root: etree._Element, groups: list[dict[str, Any]]) -> None:
    layer = etree.SubElement(root, _svg_tag("g"))
    layer.set("class", "groups")
    for group in groups:
        g_elem = etree.SubElement(layer, _svg_tag("g"))
        g_elem.set("class", "device-group")
        g_elem.set("data-name", group["name"])
        rect = etree.SubElement(g_elem, _svg_tag("rect"))
        rect.set("class", "group-background")
        rect.set("x", _fmt(group["x"]))
        rect.set("y", _fmt(group["y"]))
        rect.set("width", _fmt(group["width"]))
        rect.set("height", _fmt(group["height"]))
        rect.set("rx", "8")
        rect.set("fill", GROUP_FILL)
        rect.set("stroke", GROUP_STROKE)
        _add_text(
            g_elem, (group["x"] or 0) + 10, (group["y"] or 0) + 20, group["name"],
            font_size="13", font_weight="bold", **{"class": "group-label"},
        )


def _add_connections(root: etree._Element, connections: list[dict[str, Any]]) -> None:
    layer = etree.SubElement(root, _svg_tag("g"))
    layer.set("class", "connections")
    for conn in connections:
        path = etree.SubElement(layer, _svg_tag("path"))
        path.set("d", conn["path"])
        path.set("stroke", conn["color"])
        path.set("stroke-width", "3" if conn["selected"] else "2")
        path.set("fill", "none")
        path.set("data-label", conn["label"])
        title = etree.SubElement(path, _svg_tag("title"))
        title.text = conn["label"]


def _add_devices(root: etree._Element, devices: list[dict[str, Any]]) -> None:
    layer = etree.SubElement(root, _svg_tag("g"))
    layer.set("class", "devices")
    for device in devices:
        d_elem = etree.SubElement(layer, _svg_tag("g"))
        d_elem.set("class", "device")
        d_elem.set("data-hostname", device["hostname"])
        rect = etree.SubElement(d_elem, _svg_tag("rect"))
        rect.set("x", _fmt(device["x"]))
        rect.set("y", _fmt(device["y"]))
        rect.set("width", _fmt(device["width"]))
        rect.set("height", _fmt(device["height"]))
        rect.set("rx", "4")
        rect.set("fill", DEVICE_FILL)
        rect.set("stroke", DEVICE_STROKE)
        _add_text(
            d_elem, device["center"]["x"], device["center"]["y"] + 4, device["hostname"],
            font_size="11", text_anchor="middle",
        )

        for iface in device["interfaces"]:
            glyph = etree.SubElement(d_elem, _svg_tag("rect"))
            glyph.set("class", "interface")
            box = iface["glyph"]
            glyph.set("x", _fmt(box["x"]))
            glyph.set("y", _fmt(box["y"]))
            glyph.set("width", _fmt(box["size"]))
            glyph.set("height", _fmt(box["size"]))
            glyph.set("fill", iface["color"])
            title = etree.SubElement(glyph, _svg_tag("title"))
            title.text = f"{iface['name']} {iface['ip']}".strip()


def export_svg(diagram: dict[str, Any]) -> str:
    """Render diagram data (as produced by ``LayoutEngine.to_diagram``) to SVG.

    Args:
        diagram: Positioned diagram data.

    Returns:
        A string containing a standalone SVG document.
    """
    canvas = diagram["canvas"]
    root = etree.Element(_svg_tag("svg"), nsmap=NSMAP)
    root.set("width", _fmt(canvas["width"]))
    root.set("height", _fmt(canvas["height"]))
    root.set("viewBox", f"0 0 {_fmt(canvas['width'])} {_fmt(canvas['height'])}")

    _add_groups(root, diagram["groups"])
    _add_connections(root, diagram["connections"])
    _add_devices(root, diagram["devices"])

    svg_bytes = etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=True,
    )
    return svg_bytes.decode("UTF-8")
