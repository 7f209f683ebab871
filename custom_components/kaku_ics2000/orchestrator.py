"""ICS-2000 sync orchestrator - core coordination logic."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import time
from typing import TYPE_CHECKING, Any

from homeassistant.const import Platform
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers import device_registry as dr
from homeassistant.helpers.event import async_track_time_change

from .catalog import EntityCatalogBuilder
from .const import (
    DISCOVERY_TIMEOUT,
    DOMAIN,
    MANUFACTURER,
    RELOAD_SWITCH_NAME,
    SYNC_HOUR,
    SYNC_MINUTE,
    SYNC_SECOND,
    TRIGGER_MANUAL,
    TRIGGER_SCHEDULE,
    TRIGGER_STARTUP,
)
from .dispatcher import DeviceDispatcher
from .errors import KakuError, RegistrationError
from .hub import DiscoveryCoordinator
from .models import AccessoryRecord, Entity, host_identifier
from .reconciler import AccessoryReconciler
from .rest_server import AdminServer
from .store import AccessoryStore

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .hub import Hub
    from .settings import KakuSettings

_LOGGER = logging.getLogger(__name__)


@dataclass
class SyncStatus:
    """Outcome of the most recent sync cycle."""

    trigger: str | None = None
    started_at: float | None = None
    finished_at: float | None = None
    success: bool | None = None
    error: str | None = None
    status_error: str | None = None
    hub_address: str | None = None
    used_backup_address: bool = False
    entity_count: int = 0
    created: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly copy."""
        return {
            "trigger": self.trigger,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "success": self.success,
            "error": self.error,
            "status_error": self.status_error,
            "hub_address": self.hub_address,
            "used_backup_address": self.used_backup_address,
            "entity_count": self.entity_count,
            "created": list(self.created),
            "updated": list(self.updated),
            "failed": dict(self.failed),
        }


class KakuSyncOrchestrator:
    """Keeps Home Assistant in sync with the entities of an ICS-2000 hub.

    One cycle is: discover hub -> log in -> fetch catalog and statuses ->
    reconcile accessories. Cycles run on startup, daily at midnight and on
    manual trigger. Overlapping triggers are dropped while a cycle runs.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        settings: KakuSettings,
        hub: Hub,
        *,
        store: AccessoryStore | None = None,
        discovery: DiscoveryCoordinator | None = None,
    ) -> None:
        """Initialize orchestrator."""
        self.hass = hass
        self._config_entry = config_entry
        self._settings = settings
        self._hub = hub
        self._store = store or AccessoryStore(hass, config_entry.entry_id)
        self._discovery = discovery or DiscoveryCoordinator(
            settings.local_backup_address
        )
        self._catalog = EntityCatalogBuilder(
            hub, settings.entity_blacklist, settings.device_configs_overrides
        )
        self._dispatcher = DeviceDispatcher(hub)
        self._reconciler = AccessoryReconciler(
            self._store, self._dispatcher, self._async_register_accessory
        )
        self._registered_ids: set[int] = set()
        self._entities: dict[int, Entity] = {}
        self._cycle_lock = asyncio.Lock()
        self._last_sync = SyncStatus()
        self._rest_server: AdminServer | None = None
        self._started = False
        self._unsub_listeners: list[CALLBACK_TYPE] = []
        self._pending_tasks: set[asyncio.Task[Any]] = set()

    # ─────────────────────────────────────────────────────────────
    # LIFECYCLE
    # ─────────────────────────────────────────────────────────────

    async def async_load(self) -> None:
        """Restore cached accessories; must finish before any registration."""
        await self._store.async_load()
        _LOGGER.debug("Restored %d cached accessories", len(self._store.records))

    @callback
    def async_add_platform(
        self, platform: Platform, add_entities: AddEntitiesCallback
    ) -> None:
        """Register an entity platform's add callback."""
        self._dispatcher.async_add_platform(platform, add_entities)

    async def async_start(self) -> None:
        """Start syncing once cached accessories are restored."""
        if self._started:
            return
        if not self._store.loaded:
            await self.async_load()

        _LOGGER.info("Starting ICS-2000 sync")
        self._settings.log_summary()

        # Rerun the sync every day so the device list, the AES key and the
        # local address of the hub stay up to date
        self._unsub_listeners.append(
            async_track_time_change(
                self.hass,
                self._async_scheduled_sync,
                hour=SYNC_HOUR,
                minute=SYNC_MINUTE,
                second=SYNC_SECOND,
            )
        )

        self._create_background_task(self._async_startup(), f"{DOMAIN}_startup")
        self._started = True

    async def async_stop(self) -> None:
        """Stop the orchestrator."""
        _LOGGER.info("Stopping ICS-2000 sync")

        for task in self._pending_tasks:
            task.cancel()
        if self._pending_tasks:
            await asyncio.gather(*self._pending_tasks, return_exceptions=True)
        self._pending_tasks.clear()

        for unsub in self._unsub_listeners:
            unsub()
        self._unsub_listeners.clear()

        if self._rest_server is not None:
            await self._rest_server.async_stop()
            self._rest_server = None

        await self._store.async_save()
        await self._hub.async_cleanup()
        self._started = False

    def _create_background_task(self, coro: Any, name: str) -> None:
        """Create a tracked background task."""
        task = self.hass.async_create_background_task(coro, name)
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    async def _async_startup(self) -> None:
        """Run the first cycle, then bring up the reload switch and REST server."""
        await self.async_run_cycle(TRIGGER_STARTUP)

        if self._settings.hide_reload_switch:
            _LOGGER.info("Hiding reloading switch as specified in config")
        else:
            await self._async_setup_reload_switch()

        if self._settings.start_rest_server:
            await self._async_start_rest_server()

    async def _async_scheduled_sync(self, now: Any = None) -> None:
        """Daily sync."""
        _LOGGER.info("Pulling AES-key from server and searching for hub as scheduled")
        await self.async_run_cycle(TRIGGER_SCHEDULE)

    async def async_reload(self) -> bool:
        """Run a sync on operator request."""
        return await self.async_run_cycle(TRIGGER_MANUAL)

    # ─────────────────────────────────────────────────────────────
    # SYNC CYCLE
    # ─────────────────────────────────────────────────────────────

    async def async_run_cycle(self, trigger: str) -> bool:
        """Run one sync cycle; return whether it completed.

        Errors are logged, never raised. A trigger arriving while a cycle is
        running is dropped.
        """
        if self._cycle_lock.locked():
            _LOGGER.info("Sync already in progress, ignoring %s trigger", trigger)
            return False

        async with self._cycle_lock:
            status = SyncStatus(trigger=trigger, started_at=time.time())
            self._last_sync = status
            try:
                await self._async_run_cycle(status)
            except KakuError as err:
                _LOGGER.error("Setup failed: %s", err)
                status.success = False
                status.error = str(err)
            except Exception as err:
                _LOGGER.exception("Unexpected error during %s sync", trigger)
                status.success = False
                status.error = str(err)
            else:
                status.success = True
            finally:
                status.finished_at = time.time()

        return bool(status.success)

    async def _async_run_cycle(self, status: SyncStatus) -> None:
        """Discover, authenticate, fetch and reconcile."""
        _LOGGER.info("Searching hub...")
        discovered = await self._discovery.async_discover(
            DISCOVERY_TIMEOUT, self._settings.discover_message
        )
        if discovered.used_backup_address:
            self._search_timeout_warning()
        self._hub.local_address = discovered.address
        status.hub_address = discovered.address
        status.used_backup_address = discovered.used_backup_address
        _LOGGER.info("Found hub: %s", discovered.address)

        await self._hub.async_login()

        _LOGGER.info("Pulling devices from server...")
        entities, statuses = await asyncio.gather(
            self._catalog.async_build(self._settings.show_scenes),
            self._hub.async_fetch_all_statuses(),
            return_exceptions=True,
        )
        if isinstance(entities, BaseException):
            raise entities
        # Without statuses controllers start with unknown state
        if isinstance(statuses, BaseException):
            if not isinstance(statuses, Exception):
                raise statuses
            _LOGGER.warning("Could not pull device statuses: %s", statuses)
            status.status_error = str(statuses)
        _LOGGER.info("Found %d devices", len(entities))
        self._entities = {entity.entity_id: entity for entity in entities}
        status.entity_count = len(entities)

        result = await self._reconciler.async_reconcile(entities, self._registered_ids)
        status.created = result.created
        status.updated = result.updated
        status.failed = result.failed

        stale = set(self._store.records) - {
            host_identifier(entity_id) for entity_id in self._entities
        }
        stale.discard(host_identifier(RELOAD_SWITCH_NAME))
        if stale:
            _LOGGER.debug("%d cached accessories were not reported by the hub", len(stale))

        await self._store.async_save()

    def _search_timeout_warning(self) -> None:
        _LOGGER.warning(
            "Searching for the hub timed out, using backup address %s. "
            "If the hub's address changed, devices may not respond",
            self._settings.local_backup_address,
        )

    async def _async_register_accessory(self, record: AccessoryRecord) -> None:
        """Register a new accessory with the device registry."""
        entity = record.entity
        try:
            dr.async_get(self.hass).async_get_or_create(
                config_entry_id=self._config_entry.entry_id,
                identifiers={(DOMAIN, record.host_id)},
                manufacturer=MANUFACTURER,
                model=f"Device type {entity.device_type}" if entity else None,
                name=record.display_name,
            )
        except Exception as err:
            raise RegistrationError(
                f"Failed to register {record.display_name}: {err}"
            ) from err

    # ─────────────────────────────────────────────────────────────
    # RELOAD SWITCH AND REST SERVER
    # ─────────────────────────────────────────────────────────────

    async def _async_setup_reload_switch(self) -> None:
        """Create the reload switch once per process."""
        host_id = host_identifier(RELOAD_SWITCH_NAME)
        if self._dispatcher.get_controller(host_id) is not None:
            return

        record = self._store.find_by_id(host_id)
        is_new = record is None
        if record is None:
            record = AccessoryRecord(host_id=host_id, display_name=RELOAD_SWITCH_NAME)

        try:
            self._dispatcher.dispatch_reload_switch(record, self.async_reload)
            if is_new:
                await self._async_register_accessory(record)
                self._store.upsert(record)
                await self._store.async_save()
        except Exception as err:
            _LOGGER.error("Error creating reload switch: %s", err)

    async def _async_start_rest_server(self) -> None:
        """Start the administrative REST server."""
        port = self._settings.rest_server_port
        server = AdminServer(self)
        try:
            await server.async_start(port)
        except OSError as err:
            _LOGGER.error("Error starting REST server: %s", err)
            return
        self._rest_server = server
        _LOGGER.info("REST server started on port %d", port)

    # ─────────────────────────────────────────────────────────────
    # STATE
    # ─────────────────────────────────────────────────────────────

    @property
    def hub(self) -> Hub:
        """Return the hub session."""
        return self._hub

    @property
    def settings(self) -> KakuSettings:
        """Return the settings in effect."""
        return self._settings

    @property
    def entities(self) -> dict[int, Entity]:
        """Return the entities of the last catalog, by hub entity id."""
        return dict(self._entities)

    @property
    def registered_ids(self) -> set[int]:
        """Return the entity ids dispatched in this process."""
        return set(self._registered_ids)

    @property
    def accessories(self) -> dict[str, AccessoryRecord]:
        """Return cached accessory records."""
        return self._store.records

    @property
    def last_sync(self) -> SyncStatus:
        """Return the status of the most recent cycle."""
        return self._last_sync

    @property
    def is_started(self) -> bool:
        """Return whether the orchestrator is started."""
        return self._started

    @property
    def is_syncing(self) -> bool:
        """Return whether a cycle is running."""
        return self._cycle_lock.locked()

    @property
    def pending_task_count(self) -> int:
        """Return number of pending tasks."""
        return len(self._pending_tasks)

    @property
    def rest_server(self) -> AdminServer | None:
        """Return the REST server when running."""
        return self._rest_server
