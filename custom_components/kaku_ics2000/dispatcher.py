"""Controller dispatch for ICS-2000 accessories."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import TYPE_CHECKING, assert_never

from homeassistant.const import Platform

from .entity import KakuEntity
from .errors import UnsupportedCapability
from .light import KakuColorTemperatureLight, KakuDimmableLight, KakuLight
from .models import Capability
from .scene import KakuScene
from .switch import KakuReloadSwitch

if TYPE_CHECKING:
    from homeassistant.helpers.entity import Entity as HAEntity
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .hub import Hub
    from .models import AccessoryRecord

_LOGGER = logging.getLogger(__name__)


class DeviceDispatcher:
    """Creates the controller matching an accessory's capability.

    Controllers are handed to the entity platform that owns them. This
    decouples the reconciler from the platform modules.
    """

    def __init__(self, hub: Hub) -> None:
        """Initialize the dispatcher."""
        self._hub = hub
        self._platforms: dict[Platform, AddEntitiesCallback] = {}
        self._controllers: dict[str, HAEntity] = {}

    def async_add_platform(
        self, platform: Platform, add_entities: AddEntitiesCallback
    ) -> None:
        """Register the callback that adds entities to a platform."""
        self._platforms[platform] = add_entities
        _LOGGER.debug("%s platform ready", platform)

    def dispatch(self, record: AccessoryRecord) -> KakuEntity:
        """Create the controller for a hub accessory and attach it.

        A controller already attached for the same host identifier and
        capability is refreshed and returned instead.

        Raises UnsupportedCapability when the entity has no known controls.
        """
        entity = record.entity
        if entity is None:
            raise ValueError(f"Accessory {record.host_id} has no hub entity")

        controller_class: type[KakuEntity]
        match entity.capability:
            case Capability.COLOR_TEMPERATURE:
                controller_class = KakuColorTemperatureLight
                platform = Platform.LIGHT
            case Capability.DIMMABLE:
                controller_class = KakuDimmableLight
                platform = Platform.LIGHT
            case Capability.SWITCH:
                controller_class = KakuLight
                platform = Platform.LIGHT
            case Capability.SCENE:
                controller_class = KakuScene
                platform = Platform.SCENE
            case Capability.UNSUPPORTED:
                raise UnsupportedCapability(entity)
            case _:
                assert_never(entity.capability)

        existing = self._controllers.get(record.host_id)
        if type(existing) is controller_class:
            existing.async_update_entity(entity)
            return existing

        controller = controller_class(self._hub, record)
        self._attach(platform, record.host_id, controller)
        return controller

    def dispatch_reload_switch(
        self, record: AccessoryRecord, reload: Callable[[], Awaitable[bool]]
    ) -> KakuReloadSwitch:
        """Create the reload switch and attach it."""
        controller = KakuReloadSwitch(record, reload)
        self._attach(Platform.SWITCH, record.host_id, controller)
        return controller

    def get_controller(self, host_id: str) -> HAEntity | None:
        """Return the controller created for a host identifier."""
        return self._controllers.get(host_id)

    @property
    def controllers(self) -> dict[str, HAEntity]:
        """Return all controllers by host identifier."""
        return dict(self._controllers)

    def _attach(self, platform: Platform, host_id: str, controller: HAEntity) -> None:
        """Add a controller to its platform."""
        add_entities = self._platforms.get(platform)
        if add_entities is None:
            raise RuntimeError(f"{platform} platform is not set up")
        add_entities([controller])
        self._controllers[host_id] = controller
