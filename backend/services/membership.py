"""Hostname -> group index, built once per layout pass.

Groups reference devices by hostname only. The index resolves those weak
references once so that sizing and position resolving agree on which devices
belong to a group and in which order.
"""

from models.topology_model import Device, DeviceGroup
from services.diagnostics import DiagnosticLog


class MembershipIndex:
    """Resolved group membership for one snapshot."""

    def __init__(
        self,
        devices: list[Device],
        groups: list[DeviceGroup],
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.devices_by_hostname: dict[str, Device] = {}
        self.group_of: dict[str, DeviceGroup] = {}
        # Keyed by id(group): group names are not guaranteed unique
        self.members: dict[int, list[Device]] = {}
        self._member_index: dict[str, int] = {}

        for device in devices:
            self.devices_by_hostname.setdefault(device.hostname, device)

        seen_names: set[str] = set()
        for group in groups:
            if group.name in seen_names and diagnostics is not None:
                diagnostics.reference_miss(f"Duplicate group name '{group.name}'")
            seen_names.add(group.name)
            resolved: list[Device] = []
            for hostname in group.devices:
                device = self.devices_by_hostname.get(hostname)
                if device is None:
                    if diagnostics is not None:
                        diagnostics.reference_miss(
                            f"Group '{group.name}' lists unknown device '{hostname}'"
                        )
                    continue
                owner = self.group_of.get(hostname)
                if owner is not None:
                    # Duplicate within the same group is silently collapsed
                    if owner is not group and diagnostics is not None:
                        diagnostics.reference_miss(
                            f"Group '{group.name}' lists device '{hostname}' "
                            f"already placed in group '{owner.name}'"
                        )
                    continue
                self.group_of[hostname] = group
                self._member_index[hostname] = len(resolved)
                resolved.append(device)
            self.members[id(group)] = resolved

    def members_of(self, group: DeviceGroup) -> list[Device]:
        return self.members.get(id(group), [])

    def member_index(self, hostname: str) -> int:
        """Canonical index of a grouped device in its group's member list."""
        return self._member_index.get(hostname, 0)

    def is_standalone(self, hostname: str) -> bool:
        return hostname not in self.group_of
