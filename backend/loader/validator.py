"""Cross-reference validation for topology snapshots.

Dangling references are reported, never fatal: the layout proceeds with the
missing element treated as absent.
"""

from models.snapshot import TopologySnapshot


def validate_connections(snapshot: TopologySnapshot) -> list[str]:
    """Report connections naming unknown devices or interfaces."""
    warnings: list[str] = []
    devices = {d.hostname: d for d in snapshot.devices}

    for conn in snapshot.connection:
        for role, hostname, iface_name in (
            ("source", conn.source_device, conn.source_interface),
            ("destination", conn.destination_device, conn.destination_interface),
        ):
            device = devices.get(hostname)
            if device is None:
                warnings.append(
                    f"Connection {conn.label} references non-existent "
                    f"{role} device: {hostname}"
                )
                continue
            if not any(i.name == iface_name for i in device.interfaces):
                warnings.append(
                    f"Connection {conn.label} references non-existent "
                    f"{role} interface: {iface_name}"
                )

    return warnings


def validate_flows(snapshot: TopologySnapshot) -> list[str]:
    """Report flows naming unknown connection labels."""
    labels = {c.label for c in snapshot.connection}
    return [
        f"Flow {flow.id} references non-existent connection label: {label}"
        for flow in snapshot.flows
        for label in flow.connection_labels
        if label not in labels
    ]


def validate_references(snapshot: TopologySnapshot) -> list[str]:
    """Validate connection and flow references, appending findings to ``snapshot.warnings``.

    Group membership misses are reported by the layout engine while it builds
    its membership index. Returns the list of new warnings; an empty list
    means every reference resolves.
    """
    warnings = validate_connections(snapshot) + validate_flows(snapshot)
    snapshot.warnings.extend(warnings)
    return warnings
