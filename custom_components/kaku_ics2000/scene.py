"""Scene platform for the ICS-2000 integration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.scene import Scene
from homeassistant.const import Platform

from .entity import KakuEntity

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from . import KakuConfigEntry


async def async_setup_entry(
    hass: HomeAssistant,
    entry: KakuConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Hand the scene platform to the orchestrator."""
    entry.runtime_data.async_add_platform(Platform.SCENE, async_add_entities)


class KakuScene(KakuEntity, Scene):
    """Scene stored on the hub."""

    _attr_assumed_state = False

    async def async_activate(self, **kwargs: Any) -> None:
        """Run the scene on the hub."""
        await self._hub.async_run_scene(self.kaku_entity.entity_id)
