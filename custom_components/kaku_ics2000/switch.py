"""Switch platform for the ICS-2000 integration."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import TYPE_CHECKING, Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.const import EntityCategory, Platform
from homeassistant.helpers.device_registry import DeviceInfo

from .const import DOMAIN, MANUFACTURER

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from . import KakuConfigEntry
    from .models import AccessoryRecord

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: KakuConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Hand the switch platform to the orchestrator."""
    entry.runtime_data.async_add_platform(Platform.SWITCH, async_add_entities)


class KakuOneFunctionSwitch(SwitchEntity):
    """Momentary switch: runs one action when turned on, then turns off."""

    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_is_on = False

    def __init__(self, record: AccessoryRecord) -> None:
        """Initialize switch."""
        self._record = record
        self._attr_unique_id = record.host_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, record.host_id)},
            manufacturer=MANUFACTURER,
            name=record.display_name,
        )

    @property
    def record(self) -> AccessoryRecord:
        """Return the accessory record."""
        return self._record

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Run the action."""
        self._attr_is_on = True
        self.async_write_ha_state()
        try:
            await self._async_on_set()
        finally:
            self._attr_is_on = False
            self.async_write_ha_state()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Reset the switch."""
        self._attr_is_on = False
        self.async_write_ha_state()

    async def _async_on_set(self) -> None:
        """Perform the switch action."""
        raise NotImplementedError


class KakuReloadSwitch(KakuOneFunctionSwitch):
    """Re-runs hub discovery and device sync when toggled."""

    _attr_entity_category = EntityCategory.CONFIG
    _attr_icon = "mdi:reload"

    def __init__(
        self, record: AccessoryRecord, reload: Callable[[], Awaitable[bool]]
    ) -> None:
        """Initialize reload switch."""
        super().__init__(record)
        self._reload = reload

    async def _async_on_set(self) -> None:
        if await self._reload():
            _LOGGER.info("Platform setup successfully after reload switch was toggled")
        else:
            _LOGGER.error("Error running setup after reload switch toggled")
