from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from homeassistant.components.light import ATTR_BRIGHTNESS, ATTR_COLOR_TEMP_KELVIN
from homeassistant.exceptions import HomeAssistantError
import pytest

from custom_components.kaku_ics2000.const import DOMAIN
from custom_components.kaku_ics2000.light import (
    KakuColorTemperatureLight,
    KakuDimmableLight,
    KakuLight,
    brightness_to_hub,
    hub_to_brightness,
    hub_to_kelvin,
    kelvin_to_hub,
)
from custom_components.kaku_ics2000.models import (
    AccessoryRecord,
    Capability,
    DeviceFunctions,
    host_identifier,
)
from custom_components.kaku_ics2000.scene import KakuScene
from custom_components.kaku_ics2000.switch import KakuReloadSwitch
from tests.conftest import FakeHub


def _controller(controller_class, entity, hub=None):
    record = AccessoryRecord(
        host_id=host_identifier(entity.entity_id),
        display_name=entity.name,
        entity=entity,
    )
    controller = controller_class(hub or FakeHub(), record)
    controller.async_write_ha_state = MagicMock()
    return controller


def test_brightness_conversion_clamps() -> None:
    assert brightness_to_hub(0) == 0
    assert brightness_to_hub(255) == 255
    assert brightness_to_hub(300) == 255
    assert hub_to_brightness(brightness_to_hub(128)) == 128


def test_kelvin_conversion_is_inverted_and_clamped() -> None:
    assert kelvin_to_hub(6500) == 0
    assert kelvin_to_hub(2200) == 600
    assert kelvin_to_hub(1000) == 600
    assert hub_to_kelvin(0) == 6500
    assert hub_to_kelvin(600) == 2200


@pytest.mark.asyncio
async def test_switch_light_sends_on_off(make_entity) -> None:
    hub = FakeHub()
    light = _controller(KakuLight, make_entity(entity_id=1, is_group=True), hub)

    await light.async_turn_on()
    assert light.is_on is True
    await light.async_turn_off()

    assert light.is_on is False
    assert hub.commands == [(1, 0, 1, True), (1, 0, 0, True)]
    assert light.async_write_ha_state.call_count == 2


@pytest.mark.asyncio
async def test_dimmable_light_turns_on_before_dimming(make_entity) -> None:
    hub = FakeHub()
    light = _controller(
        KakuDimmableLight, make_entity(entity_id=2, capability=Capability.DIMMABLE), hub
    )

    await light.async_turn_on(**{ATTR_BRIGHTNESS: 255})

    assert hub.commands == [(2, 3, 1, False), (2, 4, 255, False)]
    assert light.brightness == 255


@pytest.mark.asyncio
async def test_dimmable_light_only_dims_when_already_on(make_entity) -> None:
    hub = FakeHub()
    hub._statuses = {2: [0, 0, 0, 1, 10]}
    light = _controller(
        KakuDimmableLight, make_entity(entity_id=2, capability=Capability.DIMMABLE), hub
    )
    assert light.is_on is True

    await light.async_turn_on(**{ATTR_BRIGHTNESS: 0})

    assert hub.commands == [(2, 4, 0, False)]


@pytest.mark.asyncio
async def test_color_temperature_light(make_entity) -> None:
    hub = FakeHub()
    light = _controller(
        KakuColorTemperatureLight,
        make_entity(entity_id=3, capability=Capability.COLOR_TEMPERATURE),
        hub,
    )

    await light.async_turn_on(**{ATTR_COLOR_TEMP_KELVIN: 6500})

    assert hub.commands == [(3, 3, 1, False), (3, 9, 0, False)]
    assert light.color_temp_kelvin == 6500


@pytest.mark.asyncio
async def test_missing_function_raises(make_entity) -> None:
    light = _controller(
        KakuLight,
        make_entity(entity_id=4, functions=DeviceFunctions(dim=1)),
    )

    with pytest.raises(HomeAssistantError):
        await light.async_turn_on()


def test_status_is_applied_on_creation(make_entity) -> None:
    hub = FakeHub()
    hub._statuses = {5: [0, 0, 0, 1, 255, 0, 0, 0, 0, 300]}
    light = _controller(
        KakuColorTemperatureLight,
        make_entity(entity_id=5, capability=Capability.COLOR_TEMPERATURE),
        hub,
    )

    assert light.is_on is True
    assert light.brightness == 255
    assert light.color_temp_kelvin == hub_to_kelvin(300)


@pytest.mark.asyncio
async def test_scene_runs_on_hub(make_entity) -> None:
    hub = FakeHub()
    scene = _controller(
        KakuScene, make_entity(entity_id=10, name="Evening", capability=Capability.SCENE), hub
    )

    await scene.async_activate()

    assert hub.commands == [(10, 0, 1, False)]


@pytest.mark.asyncio
async def test_reload_switch_runs_reload_and_resets() -> None:
    reload = AsyncMock(return_value=True)
    switch = KakuReloadSwitch(
        AccessoryRecord(host_id=host_identifier("Reload Switch"), display_name="Reload Switch"),
        reload,
    )
    states: list[bool] = []
    switch.async_write_ha_state = MagicMock(side_effect=lambda: states.append(switch.is_on))

    await switch.async_turn_on()

    reload.assert_awaited_once()
    assert states == [True, False]
    assert switch.is_on is False


@pytest.mark.asyncio
async def test_reload_switch_logs_failure(caplog) -> None:
    switch = KakuReloadSwitch(
        AccessoryRecord(host_id=host_identifier("Reload Switch"), display_name="Reload Switch"),
        AsyncMock(return_value=False),
    )
    switch.async_write_ha_state = MagicMock()

    await switch.async_turn_on()

    assert "Error running setup after reload switch toggled" in caplog.text
    assert switch.is_on is False


@pytest.mark.parametrize(("device_name", "renamed"), [("Old name", True), ("New name", False)])
def test_rename_reaches_device_registry(make_entity, monkeypatch, device_name, renamed) -> None:
    registry = MagicMock()
    registry.async_get_device.return_value = SimpleNamespace(id="device-1", name=device_name)
    monkeypatch.setattr(
        "custom_components.kaku_ics2000.entity.dr.async_get", lambda hass: registry
    )
    light = _controller(KakuLight, make_entity(entity_id=5, name="Old name"))
    light.hass = MagicMock()

    light.async_update_entity(make_entity(entity_id=5, name="New name"))

    registry.async_get_device.assert_called_once_with(
        identifiers={(DOMAIN, host_identifier(5))}
    )
    if renamed:
        registry.async_update_device.assert_called_once_with("device-1", name="New name")
    else:
        registry.async_update_device.assert_not_called()
    assert light.kaku_entity.name == "New name"
    light.async_write_ha_state.assert_called_once()
