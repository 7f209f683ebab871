"""Data structures for hub entities and accessory records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import time
from typing import Any
import uuid

from .const import DOMAIN

HOST_ID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_DNS, f"{DOMAIN}.home-assistant.io")


class Capability(StrEnum):
    """Control surface of an entity, used to pick its controller."""

    SWITCH = "switch"
    DIMMABLE = "dimmable"
    COLOR_TEMPERATURE = "color_temperature"
    SCENE = "scene"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, value: Any) -> Capability:
        """Return the capability for a stored value, UNSUPPORTED if unknown."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNSUPPORTED


@dataclass(frozen=True)
class DeviceFunctions:
    """Function indices used to read and command a device."""

    on_off: int | None = None
    dim: int | None = None
    color_temperature: int | None = None

    @property
    def capability(self) -> Capability:
        """Return the richest capability these functions support."""
        if self.color_temperature is not None:
            return Capability.COLOR_TEMPERATURE
        if self.dim is not None:
            return Capability.DIMMABLE
        if self.on_off is not None:
            return Capability.SWITCH
        return Capability.UNSUPPORTED


@dataclass
class Entity:
    """A controllable object reported by the hub."""

    entity_id: int  # stable across discovery cycles
    name: str
    device_type: int
    capability: Capability
    disabled: bool = False
    is_group: bool = False
    functions: DeviceFunctions = field(default_factory=DeviceFunctions)

    def __post_init__(self) -> None:
        """Normalize the capability to a known variant."""
        self.capability = Capability.parse(self.capability)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "entity_id": self.entity_id,
            "name": self.name,
            "device_type": self.device_type,
            "capability": str(self.capability),
            "disabled": self.disabled,
            "is_group": self.is_group,
            "functions": {
                "on_off": self.functions.on_off,
                "dim": self.functions.dim,
                "color_temperature": self.functions.color_temperature,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Entity:
        """Deserialize from dictionary."""
        return cls(
            entity_id=int(data["entity_id"]),
            name=data["name"],
            device_type=int(data.get("device_type", 0)),
            capability=Capability.parse(data.get("capability")),
            disabled=data.get("disabled", False),
            is_group=data.get("is_group", False),
            functions=DeviceFunctions(**data.get("functions", {})),
        )


@dataclass
class AccessoryRecord:
    """Persisted representation of one entity in Home Assistant."""

    host_id: str
    display_name: str
    entity: Entity | None = None  # last known entity; None for the reload switch
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def update_entity(self, entity: Entity) -> None:
        """Replace the context with a freshly discovered entity."""
        self.entity = entity
        self.display_name = entity.name
        self.updated_at = time.time()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "host_id": self.host_id,
            "display_name": self.display_name,
            "entity": self.entity.to_dict() if self.entity else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccessoryRecord:
        """Deserialize from dictionary."""
        entity_data = data.get("entity")
        return cls(
            host_id=data["host_id"],
            display_name=data["display_name"],
            entity=Entity.from_dict(entity_data) if entity_data else None,
            created_at=data.get("created_at", 0),
            updated_at=data.get("updated_at", 0),
        )


def host_identifier(key: int | str) -> str:
    """Return the Home Assistant identifier for a hub entity id.

    Deterministic: the same key always maps to the same identifier.
    """
    return str(uuid.uuid5(HOST_ID_NAMESPACE, str(key)))
