"""Container models for a topology snapshot and its source documents."""

from pydantic import BaseModel, Field

from models.topology_model import Connection, Device, DeviceGroup, Flow, Zone


class TopologySnapshot(BaseModel):
    """Complete topology as consumed by the layout engine."""
    devices: list[Device] = Field(default_factory=list)
    device_group: list[DeviceGroup] = Field(default_factory=list)
    zones: list[Zone] = Field(default_factory=list)
    connection: list[Connection] = Field(default_factory=list)
    flows: list[Flow] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def find_device(self, hostname: str) -> Device | None:
        for device in self.devices:
            if device.hostname == hostname:
                return device
        return None

    def find_group(self, name: str) -> DeviceGroup | None:
        for group in self.device_group:
            if group.name == name:
                return group
        return None

    def find_flow(self, flow_id: str) -> Flow | None:
        for flow in self.flows:
            if flow.id == flow_id:
                return flow
        return None


class TopologyFile(BaseModel):
    """Shape of ``topology.json``."""
    devices: list[Device] = Field(default_factory=list)
    device_group: list[DeviceGroup] = Field(default_factory=list)
    zones: list[Zone] = Field(default_factory=list)


class ConnectionsFile(BaseModel):
    """Shape of ``connections.json``."""
    connections: list[Connection] = Field(default_factory=list)


class FlowsFile(BaseModel):
    """Shape of ``flows.json``."""
    flows: list[Flow] = Field(default_factory=list)
