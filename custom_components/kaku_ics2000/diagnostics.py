"""Diagnostics support for the ICS-2000 integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.diagnostics import async_redact_data
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD
from homeassistant.core import HomeAssistant

from . import KakuConfigEntry

TO_REDACT = {CONF_EMAIL, CONF_PASSWORD, "aes_key", "mac"}


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: KakuConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    orchestrator = entry.runtime_data
    hub = orchestrator.hub
    rest_server = orchestrator.rest_server

    # Summarize cached accessories
    accessories: dict[str, dict[str, Any]] = {}
    for host_id, record in orchestrator.accessories.items():
        entity = record.entity
        accessories[host_id] = {
            "display_name": record.display_name,
            "entity_id": entity.entity_id if entity else None,
            "capability": str(entity.capability) if entity else None,
            "device_type": entity.device_type if entity else None,
            "updated_at": record.updated_at,
        }

    # Count by capability
    capability_counts: dict[str, int] = {}
    for entity in orchestrator.entities.values():
        key = str(entity.capability)
        capability_counts[key] = capability_counts.get(key, 0) + 1

    return {
        "config_entry": async_redact_data(
            {
                "entry_id": entry.entry_id,
                "data": dict(entry.data),
                "options": dict(entry.options),
            },
            TO_REDACT,
        ),
        "hub": async_redact_data(
            {
                "local_address": hub.local_address,
                "home_id": getattr(hub, "home_id", None),
                "mac": getattr(hub, "mac", None),
                "aes_key": getattr(hub, "aes_key", None),
            },
            TO_REDACT,
        ),
        "orchestrator": {
            "started": orchestrator.is_started,
            "syncing": orchestrator.is_syncing,
            "pending_tasks": orchestrator.pending_task_count,
            "registered_ids": sorted(orchestrator.registered_ids),
            "rest_server_running": rest_server is not None and rest_server.is_running,
        },
        "last_sync": orchestrator.last_sync.as_dict(),
        "entities": {
            "total_count": len(orchestrator.entities),
            "by_capability": capability_counts,
        },
        "accessories": accessories,
    }
