"""Persisted accessory cache for the ICS-2000 integration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from .const import STORAGE_KEY, STORAGE_VERSION
from .models import AccessoryRecord

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

_LOGGER = logging.getLogger(__name__)


class AccessoryStore:
    """Accessory records keyed by host identifier, persisted between restarts."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        """Initialize the store."""
        self._store: Store[dict[str, Any]] = Store(
            hass, STORAGE_VERSION, f"{STORAGE_KEY}.{entry_id}"
        )
        self._records: dict[str, AccessoryRecord] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        """Return whether the cache was restored from disk."""
        return self._loaded

    @property
    def records(self) -> dict[str, AccessoryRecord]:
        """Return all cached records."""
        return dict(self._records)

    def find_by_id(self, host_id: str) -> AccessoryRecord | None:
        """Return the cached record for a host identifier."""
        return self._records.get(host_id)

    def upsert(self, record: AccessoryRecord) -> None:
        """Insert a record or replace the one with the same host identifier."""
        self._records[record.host_id] = record

    async def async_load(self) -> None:
        """Restore cached records from disk."""
        data = await self._store.async_load()
        self._loaded = True
        if not data:
            return

        for record_data in data.get("accessories", []):
            try:
                record = AccessoryRecord.from_dict(record_data)
            except (KeyError, TypeError, ValueError) as err:
                _LOGGER.warning("Failed to load accessory: %s", err)
                continue
            _LOGGER.debug("Loading accessory from cache: %s", record.display_name)
            self._records[record.host_id] = record

    async def async_save(self) -> None:
        """Save cached records to disk."""
        await self._store.async_save(
            {"accessories": [record.to_dict() for record in self._records.values()]}
        )

    async def async_remove(self) -> None:
        """Delete the persisted cache."""
        self._records.clear()
        await self._store.async_remove()
