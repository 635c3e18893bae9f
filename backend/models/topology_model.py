"""Pydantic data models for network topology elements.

Field names follow the topology JSON documents exactly. Level hints are
spelled ``x-level`` / ``y-level`` on the wire and exposed as ``x_level`` /
``y_level`` attributes.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FlowStatus(str, Enum):
    """Approval status of a traffic flow."""
    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"


class LevelHinted(BaseModel):
    """Base for elements that accept ``x-level`` / ``y-level`` placement hints."""
    model_config = ConfigDict(populate_by_name=True)

    x_level: Optional[int] = Field(default=None, alias="x-level")
    y_level: Optional[int] = Field(default=None, alias="y-level")

    @property
    def has_levels(self) -> bool:
        return self.x_level is not None and self.y_level is not None


class Zone(BaseModel):
    """A security zone; interfaces reference it by name."""
    name: str
    color: str


class NetworkInterface(LevelHinted):
    """An interface of a Device."""
    name: str
    ip: str = ""
    status: str = ""
    zone: str = ""
    x: Optional[float] = None
    y: Optional[float] = None


class Device(LevelHinted):
    """A network device. ``x``/``y`` are only meaningful for standalone devices."""
    hostname: str
    group: Optional[str] = None
    interfaces: list[NetworkInterface] = Field(default_factory=list)
    x: Optional[float] = None
    y: Optional[float] = None


class DeviceGroup(LevelHinted):
    """A group of devices drawn as one draggable box."""
    name: str
    devices: list[str] = Field(default_factory=list)
    x: Optional[float] = None
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None


class Connection(BaseModel):
    """A link between two device interfaces, identified by ``label``."""
    source_device: str
    source_interface: str
    destination_device: str
    destination_interface: str
    label: str
    selected: bool = False


class Flow(BaseModel):
    """A traffic flow traversing an ordered list of connections."""
    id: str
    name: str = ""
    source: str = ""
    destination: str = ""
    connection_labels: list[str] = Field(default_factory=list)
    # Free-form; statuses outside FlowStatus are kept and drawn in the neutral color
    status: str = FlowStatus.PENDING.value
    bandwidth: Optional[str] = None
    protocol: Optional[str] = None
    selected: bool = False
