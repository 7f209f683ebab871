"""Matches discovered hub entities against cached accessories."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Protocol

from .entity import KakuEntity
from .errors import KakuError, RegistrationError
from .models import AccessoryRecord, Entity, host_identifier

if TYPE_CHECKING:
    from .dispatcher import DeviceDispatcher

_LOGGER = logging.getLogger(__name__)


class AccessoryCache(Protocol):
    """Lookup and upsert of accessory records by host identifier."""

    def find_by_id(self, host_id: str) -> AccessoryRecord | None:
        """Return the record for a host identifier."""

    def upsert(self, record: AccessoryRecord) -> None:
        """Insert or replace a record."""


type RegisterAccessory = Callable[[AccessoryRecord], Awaitable[None]]


@dataclass
class ReconcileResult:
    """Entity ids handled by one reconciliation pass."""

    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    refreshed: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)


class AccessoryReconciler:
    """Creates or updates one accessory per hub entity.

    Entities already dispatched in this process (registered_ids) are not
    dispatched again; their record and live controller are refreshed instead.
    A failure on one entity never stops the others.
    """

    def __init__(
        self,
        cache: AccessoryCache,
        dispatcher: DeviceDispatcher,
        register: RegisterAccessory,
    ) -> None:
        """Initialize the reconciler."""
        self._cache = cache
        self._dispatcher = dispatcher
        self._register = register

    async def async_reconcile(
        self, entities: Iterable[Entity], registered_ids: set[int]
    ) -> ReconcileResult:
        """Reconcile entities, adding each handled id to registered_ids."""
        result = ReconcileResult()

        for entity in entities:
            refresh = entity.entity_id in registered_ids
            try:
                created = False
                if refresh:
                    self._refresh(entity)
                else:
                    created = await self._async_reconcile_entity(entity)
            except Exception as err:
                _LOGGER.error(
                    "Error registering device %s (%s): %s",
                    entity.name,
                    entity.entity_id,
                    err,
                )
                result.failed[entity.entity_id] = str(err)
                continue

            registered_ids.add(entity.entity_id)
            if refresh:
                result.refreshed.append(entity.entity_id)
            elif created:
                result.created.append(entity.entity_id)
            else:
                result.updated.append(entity.entity_id)

        return result

    async def _async_reconcile_entity(self, entity: Entity) -> bool:
        """Dispatch one entity; return True when a new accessory was registered."""
        host_id = host_identifier(entity.entity_id)
        existing = self._cache.find_by_id(host_id)

        if existing is not None:
            existing.update_entity(entity)
            self._cache.upsert(existing)
            self._dispatcher.dispatch(existing)
            _LOGGER.info(
                "Loaded entity from cache: name=%s, entityId=%s, deviceType=%s",
                entity.name,
                entity.entity_id,
                entity.device_type,
            )
            return False

        record = AccessoryRecord(host_id=host_id, display_name=entity.name, entity=entity)
        self._dispatcher.dispatch(record)
        try:
            await self._register(record)
        except KakuError:
            raise
        except Exception as err:
            raise RegistrationError(
                f"Failed to register {entity.name}: {err}"
            ) from err
        self._cache.upsert(record)

        _LOGGER.info(
            "Loaded new device: name=%s, entityId=%s, deviceType=%s",
            entity.name,
            entity.entity_id,
            entity.device_type,
        )
        return True

    def _refresh(self, entity: Entity) -> None:
        """Push a re-discovered entity to its record and controller."""
        host_id = host_identifier(entity.entity_id)
        record = self._cache.find_by_id(host_id)
        if record is not None:
            record.update_entity(entity)
            self._cache.upsert(record)

        controller = self._dispatcher.get_controller(host_id)
        if isinstance(controller, KakuEntity):
            controller.async_update_entity(entity)
