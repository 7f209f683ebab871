"""KlikAanKlikUit ICS-2000 integration for Home Assistant.

Discovers the ICS-2000 hub on the local network, pulls its devices and scenes
from the KlikAanKlikUit cloud and keeps them in sync as Home Assistant
entities:
- on/off, dimmable and tunable-white lights
- hub scenes (optional)
- a reload switch that re-runs the sync on demand
- an optional administrative REST server
"""

from __future__ import annotations

import logging
from typing import Final

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry, ConfigEntryState
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ConfigEntryError, HomeAssistantError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.typing import ConfigType

from .const import DOMAIN, SERVICE_RELOAD
from .errors import ConfigurationError
from .hub import CloudHub
from .orchestrator import KakuSyncOrchestrator
from .settings import KakuSettings
from .store import AccessoryStore

_LOGGER = logging.getLogger(__name__)

PLATFORMS: Final = [Platform.LIGHT, Platform.SCENE, Platform.SWITCH]

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)

type KakuConfigEntry = ConfigEntry[KakuSyncOrchestrator]


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the ICS-2000 integration (services only)."""
    _async_setup_services(hass)
    return True


async def async_setup_entry(hass: HomeAssistant, entry: KakuConfigEntry) -> bool:
    """Set up an ICS-2000 hub from a config entry."""
    try:
        settings = KakuSettings.from_entry(entry)
    except ConfigurationError as err:
        raise ConfigEntryError(str(err)) from err

    hub = CloudHub(async_get_clientsession(hass), settings.email, settings.password)
    orchestrator = KakuSyncOrchestrator(hass, entry, settings, hub)
    entry.runtime_data = orchestrator

    # Cached accessories must be restored and every platform ready before
    # the first sync registers anything
    await orchestrator.async_load()
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    await orchestrator.async_start()

    entry.async_on_unload(entry.add_update_listener(_async_options_updated))

    return True


async def async_unload_entry(hass: HomeAssistant, entry: KakuConfigEntry) -> bool:
    """Unload a config entry."""
    unloaded = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unloaded:
        await entry.runtime_data.async_stop()
    return unloaded


async def async_remove_entry(hass: HomeAssistant, entry: KakuConfigEntry) -> None:
    """Delete the accessory cache of a removed entry."""
    await AccessoryStore(hass, entry.entry_id).async_remove()


async def _async_options_updated(hass: HomeAssistant, entry: KakuConfigEntry) -> None:
    """Handle options update."""
    # Reload the integration to apply new options
    await hass.config_entries.async_reload(entry.entry_id)


def _async_setup_services(hass: HomeAssistant) -> None:
    """Register kaku_ics2000 services."""

    async def handle_reload(call: ServiceCall) -> None:
        """Re-run discovery and device sync for every loaded hub."""
        entries: list[KakuConfigEntry] = [
            entry
            for entry in hass.config_entries.async_entries(DOMAIN)
            if entry.state is ConfigEntryState.LOADED
        ]
        if not entries:
            raise HomeAssistantError(f"{DOMAIN} is not loaded")

        for entry in entries:
            if not await entry.runtime_data.async_reload():
                raise HomeAssistantError(
                    f"Sync of {entry.title} did not complete, see the log for details"
                )

    if not hass.services.has_service(DOMAIN, SERVICE_RELOAD):
        hass.services.async_register(
            DOMAIN,
            SERVICE_RELOAD,
            handle_reload,
            schema=vol.Schema({}),
        )
