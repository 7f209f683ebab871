from __future__ import annotations

from homeassistant.const import Platform
import pytest

from custom_components.kaku_ics2000.dispatcher import DeviceDispatcher
from custom_components.kaku_ics2000.errors import UnsupportedCapability
from custom_components.kaku_ics2000.light import (
    KakuColorTemperatureLight,
    KakuDimmableLight,
    KakuLight,
)
from custom_components.kaku_ics2000.models import (
    AccessoryRecord,
    Capability,
    host_identifier,
)
from custom_components.kaku_ics2000.scene import KakuScene
from custom_components.kaku_ics2000.switch import KakuReloadSwitch
from tests.conftest import FakeHub


@pytest.fixture()
def platforms() -> dict[Platform, list]:
    return {Platform.LIGHT: [], Platform.SCENE: [], Platform.SWITCH: []}


@pytest.fixture()
def dispatcher(platforms) -> DeviceDispatcher:
    dispatcher = DeviceDispatcher(FakeHub())
    for platform, added in platforms.items():
        dispatcher.async_add_platform(platform, added.extend)
    return dispatcher


def _record(entity) -> AccessoryRecord:
    return AccessoryRecord(
        host_id=host_identifier(entity.entity_id),
        display_name=entity.name,
        entity=entity,
    )


@pytest.mark.parametrize(
    ("capability", "controller_class", "platform"),
    [
        (Capability.SWITCH, KakuLight, Platform.LIGHT),
        (Capability.DIMMABLE, KakuDimmableLight, Platform.LIGHT),
        (Capability.COLOR_TEMPERATURE, KakuColorTemperatureLight, Platform.LIGHT),
        (Capability.SCENE, KakuScene, Platform.SCENE),
    ],
)
def test_dispatch_creates_controller_for_capability(
    dispatcher, platforms, make_entity, capability, controller_class, platform
) -> None:
    record = _record(make_entity(entity_id=3, capability=capability))

    controller = dispatcher.dispatch(record)

    assert type(controller) is controller_class
    assert platforms[platform] == [controller]
    assert controller.unique_id == record.host_id
    assert dispatcher.get_controller(record.host_id) is controller


def test_unknown_capability_raises_unsupported(dispatcher, platforms, make_entity) -> None:
    entity = make_entity(entity_id=8, name="Heater", capability="heating", device_type=99)

    with pytest.raises(UnsupportedCapability) as exc_info:
        dispatcher.dispatch(_record(entity))

    assert exc_info.value.entity is entity
    assert str(exc_info.value) == "Device hasn't any controls: 8 Heater 99"
    assert all(not added for added in platforms.values())


def test_dispatch_reuses_attached_controller(dispatcher, platforms, make_entity) -> None:
    record = _record(make_entity(entity_id=4, name="Porch"))
    first = dispatcher.dispatch(record)

    record.update_entity(make_entity(entity_id=4, name="Front porch"))
    second = dispatcher.dispatch(record)

    assert second is first
    assert platforms[Platform.LIGHT] == [first]
    assert first.kaku_entity.name == "Front porch"


def test_dispatch_without_platform_raises(make_entity) -> None:
    dispatcher = DeviceDispatcher(FakeHub())

    with pytest.raises(RuntimeError):
        dispatcher.dispatch(_record(make_entity()))


def test_dispatch_reload_switch(dispatcher, platforms) -> None:
    record = AccessoryRecord(host_id=host_identifier("Reload Switch"), display_name="Reload Switch")

    async def reload() -> bool:
        return True

    controller = dispatcher.dispatch_reload_switch(record, reload)

    assert isinstance(controller, KakuReloadSwitch)
    assert platforms[Platform.SWITCH] == [controller]
