"""Light platform for the ICS-2000 integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.light import (
    ATTR_BRIGHTNESS,
    ATTR_COLOR_TEMP_KELVIN,
    ColorMode,
    LightEntity,
)
from homeassistant.const import Platform

from .const import (
    BRIGHTNESS_HUB_MAX,
    COLOR_TEMP_HUB_MAX,
    COLOR_TEMP_MAX_KELVIN,
    COLOR_TEMP_MIN_KELVIN,
)
from .entity import KakuEntity, status_value

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from . import KakuConfigEntry


async def async_setup_entry(
    hass: HomeAssistant,
    entry: KakuConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Hand the light platform to the orchestrator."""
    entry.runtime_data.async_add_platform(Platform.LIGHT, async_add_entities)


def brightness_to_hub(brightness: int) -> int:
    """Scale a 0..255 brightness to the hub's dim range."""
    return round(max(0, min(255, brightness)) * BRIGHTNESS_HUB_MAX / 255)


def hub_to_brightness(value: int) -> int:
    """Scale a hub dim level to a 0..255 brightness."""
    return round(max(0, min(BRIGHTNESS_HUB_MAX, value)) * 255 / BRIGHTNESS_HUB_MAX)


def kelvin_to_hub(kelvin: int) -> int:
    """Convert a color temperature to the hub scale (0 = coolest)."""
    kelvin = max(COLOR_TEMP_MIN_KELVIN, min(COLOR_TEMP_MAX_KELVIN, kelvin))
    span = COLOR_TEMP_MAX_KELVIN - COLOR_TEMP_MIN_KELVIN
    return round((COLOR_TEMP_MAX_KELVIN - kelvin) * COLOR_TEMP_HUB_MAX / span)


def hub_to_kelvin(value: int) -> int:
    """Convert a hub color temperature value to kelvin."""
    value = max(0, min(COLOR_TEMP_HUB_MAX, value))
    span = COLOR_TEMP_MAX_KELVIN - COLOR_TEMP_MIN_KELVIN
    return round(COLOR_TEMP_MAX_KELVIN - value * span / COLOR_TEMP_HUB_MAX)


class KakuLight(KakuEntity, LightEntity):
    """On/off light or receiver."""

    _attr_color_mode = ColorMode.ONOFF
    _attr_supported_color_modes = {ColorMode.ONOFF}

    def _apply_status(self, status: list[int]) -> None:
        value = status_value(status, self.kaku_entity.functions.on_off)
        if value is not None:
            self._attr_is_on = bool(value)

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the light on."""
        await self._async_turn_on(kwargs)
        self.async_write_ha_state()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the light off."""
        await self._async_send(self.kaku_entity.functions.on_off, 0)
        self._attr_is_on = False
        self.async_write_ha_state()

    async def _async_turn_on(self, kwargs: dict[str, Any]) -> None:
        await self._async_send(self.kaku_entity.functions.on_off, 1)
        self._attr_is_on = True


class KakuDimmableLight(KakuLight):
    """Dimmable light."""

    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}

    def _apply_status(self, status: list[int]) -> None:
        super()._apply_status(status)
        value = status_value(status, self.kaku_entity.functions.dim)
        if value is not None:
            self._attr_brightness = hub_to_brightness(value)

    async def _async_turn_on(self, kwargs: dict[str, Any]) -> None:
        # A dim command alone does not switch the device on
        if ATTR_BRIGHTNESS not in kwargs or not self.is_on:
            await super()._async_turn_on(kwargs)

        if ATTR_BRIGHTNESS in kwargs:
            brightness = kwargs[ATTR_BRIGHTNESS]
            await self._async_send(
                self.kaku_entity.functions.dim, brightness_to_hub(brightness)
            )
            self._attr_brightness = brightness


class KakuColorTemperatureLight(KakuDimmableLight):
    """Dimmable light with adjustable white temperature."""

    _attr_color_mode = ColorMode.COLOR_TEMP
    _attr_supported_color_modes = {ColorMode.COLOR_TEMP}
    _attr_min_color_temp_kelvin = COLOR_TEMP_MIN_KELVIN
    _attr_max_color_temp_kelvin = COLOR_TEMP_MAX_KELVIN

    def _apply_status(self, status: list[int]) -> None:
        super()._apply_status(status)
        value = status_value(status, self.kaku_entity.functions.color_temperature)
        if value is not None:
            self._attr_color_temp_kelvin = hub_to_kelvin(value)

    async def _async_turn_on(self, kwargs: dict[str, Any]) -> None:
        await super()._async_turn_on(kwargs)

        if ATTR_COLOR_TEMP_KELVIN in kwargs:
            kelvin = kwargs[ATTR_COLOR_TEMP_KELVIN]
            await self._async_send(
                self.kaku_entity.functions.color_temperature, kelvin_to_hub(kelvin)
            )
            self._attr_color_temp_kelvin = kelvin
