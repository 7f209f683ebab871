"""Entity catalog for the ICS-2000 integration."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from .const import DEVICE_TYPE_FUNCTIONS
from .errors import CatalogFetchError
from .models import Capability, DeviceFunctions, Entity

if TYPE_CHECKING:
    from .hub import Hub

_LOGGER = logging.getLogger(__name__)


class EntityCatalogBuilder:
    """Turns the hub's raw entity records into typed, filtered entities."""

    def __init__(
        self,
        hub: Hub,
        blacklist: Iterable[int] = (),
        device_overrides: Mapping[int, DeviceFunctions] | None = None,
    ) -> None:
        """Initialize the builder."""
        self._hub = hub
        self._blacklist = frozenset(blacklist)
        self._device_overrides = dict(device_overrides or {})

    async def async_build(self, include_scenes: bool) -> list[Entity]:
        """Fetch and classify the hub's entities.

        Disabled devices are always dropped. Scenes have no disabled state and
        are only included when include_scenes is set.
        """
        try:
            raw = await self._hub.async_fetch_raw_entity_data()
        except CatalogFetchError:
            raise
        except Exception as err:
            raise CatalogFetchError(f"Error pulling devices: {err}") from err

        entities = [entity for entity in self.classify_entities(raw) if not entity.disabled]
        if include_scenes:
            entities.extend(self.extract_scenes(raw))
        return entities

    def classify_entities(self, raw: Iterable[dict[str, Any]]) -> list[Entity]:
        """Build device entities from raw records, skipping blacklisted ids."""
        entities: list[Entity] = []

        for record in raw:
            module = record.get("module")
            if not isinstance(module, dict):
                continue

            try:
                entity_id = int(record["id"])
                device_type = int(module.get("device", 0))
            except (KeyError, TypeError, ValueError):
                _LOGGER.warning("Skipping malformed device record: %s", record)
                continue

            if entity_id in self._blacklist:
                continue

            functions = self.resolve_functions(device_type)
            entities.append(
                Entity(
                    entity_id=entity_id,
                    name=module.get("name") or f"Device {entity_id}",
                    device_type=device_type,
                    capability=functions.capability,
                    disabled=bool(module.get("disabled", False)),
                    is_group=bool(module.get("isGroup", False)),
                    functions=functions,
                )
            )

        return entities

    def extract_scenes(self, raw: Iterable[dict[str, Any]]) -> list[Entity]:
        """Build scene entities from raw records, skipping blacklisted ids."""
        scenes: list[Entity] = []

        for record in raw:
            scene = record.get("scene")
            if not isinstance(scene, dict):
                continue

            try:
                entity_id = int(record["id"])
            except (KeyError, TypeError, ValueError):
                _LOGGER.warning("Skipping malformed scene record: %s", record)
                continue

            if entity_id in self._blacklist:
                continue

            scenes.append(
                Entity(
                    entity_id=entity_id,
                    name=scene.get("name") or f"Scene {entity_id}",
                    device_type=int(scene.get("device", 0) or 0),
                    capability=Capability.SCENE,
                )
            )

        return scenes

    def resolve_functions(self, device_type: int) -> DeviceFunctions:
        """Return the function indices for a device type.

        Configured overrides replace the built-in values field by field.
        """
        on_off, dim, color_temperature = DEVICE_TYPE_FUNCTIONS.get(
            device_type, (None, None, None)
        )
        functions = DeviceFunctions(
            on_off=on_off, dim=dim, color_temperature=color_temperature
        )

        override = self._device_overrides.get(device_type)
        if override is None:
            return functions

        return dataclasses.replace(
            functions,
            **{
                name: value
                for name, value in dataclasses.asdict(override).items()
                if value is not None
            },
        )
