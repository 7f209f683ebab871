"""Base entity for ICS-2000 devices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity as HAEntity

from .const import DOMAIN, MANUFACTURER

if TYPE_CHECKING:
    from .hub import Hub
    from .models import AccessoryRecord, Entity


class KakuEntity(HAEntity):
    """Controller for one hub entity.

    State is optimistic: seeded from the last status snapshot and updated
    after each command.
    """

    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_assumed_state = True

    def __init__(self, hub: Hub, record: AccessoryRecord) -> None:
        """Initialize entity."""
        if record.entity is None:
            raise ValueError(f"Accessory {record.host_id} has no hub entity")
        self._hub = hub
        self._record = record
        self._attr_unique_id = record.host_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, record.host_id)},
            manufacturer=MANUFACTURER,
            model=f"Device type {record.entity.device_type}",
            name=record.display_name,
        )
        self._apply_status(hub.get_status(record.entity.entity_id))

    @property
    def kaku_entity(self) -> Entity:
        """Return the hub entity this controller drives."""
        entity = self._record.entity
        assert entity is not None
        return entity

    @property
    def record(self) -> AccessoryRecord:
        """Return the accessory record."""
        return self._record

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return hub identifiers."""
        entity = self.kaku_entity
        return {
            "hub_entity_id": entity.entity_id,
            "device_type": entity.device_type,
            "is_group": entity.is_group,
        }

    @callback
    def async_update_entity(self, entity: Entity) -> None:
        """Take a freshly discovered entity and its latest status."""
        if self._record.entity is not entity:
            self._record.update_entity(entity)
        self._apply_status(self._hub.get_status(entity.entity_id))
        if self.hass is not None:
            self._async_update_device_name(entity.name)
            self.async_write_ha_state()

    @callback
    def _async_update_device_name(self, name: str) -> None:
        """Carry a hub-side rename over to the device registry."""
        registry = dr.async_get(self.hass)
        device = registry.async_get_device(identifiers={(DOMAIN, self._record.host_id)})
        if device is not None and device.name != name:
            registry.async_update_device(device.id, name=name)

    def _apply_status(self, status: list[int]) -> None:
        """Update state attributes from function values.

        Override in subclasses that expose state.
        """

    async def _async_send(self, function: int | None, value: int) -> None:
        """Send a function value for this entity."""
        entity = self.kaku_entity
        if function is None:
            raise HomeAssistantError(
                f"{entity.name} does not support this command"
            )
        await self._hub.async_send_command(
            entity.entity_id, function, value, entity.is_group
        )


def status_value(status: list[int], function: int | None) -> int | None:
    """Return the value of one function in a status list."""
    if function is None or not 0 <= function < len(status):
        return None
    return status[function]
