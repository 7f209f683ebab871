"""Validated configuration for the ICS-2000 integration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Final

import voluptuous as vol

from homeassistant.const import CONF_EMAIL, CONF_PASSWORD
from homeassistant.helpers import config_validation as cv

from .const import (
    CONF_COLOR_TEMPERATURE_FUNCTION,
    CONF_DEVICE_BLACKLIST,
    CONF_DEVICE_CONFIGS_OVERRIDES,
    CONF_DIM_FUNCTION,
    CONF_DISCOVER_MESSAGE,
    CONF_ENTITY_BLACKLIST,
    CONF_HIDE_RELOAD_SWITCH,
    CONF_LOCAL_BACKUP_ADDRESS,
    CONF_ON_OFF_FUNCTION,
    CONF_REST_SERVER_PORT,
    CONF_SHOW_SCENES,
    CONF_START_REST_SERVER,
    DEFAULT_REST_SERVER_PORT,
)
from .errors import ConfigurationError
from .models import DeviceFunctions

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry

_LOGGER = logging.getLogger(__name__)

_BLACKLIST: Final = vol.All(cv.ensure_list, [vol.Coerce(int)])

DEVICE_OVERRIDE_SCHEMA: Final = vol.Schema(
    {
        vol.Optional(CONF_ON_OFF_FUNCTION): vol.Coerce(int),
        vol.Optional(CONF_DIM_FUNCTION): vol.Coerce(int),
        vol.Optional(CONF_COLOR_TEMPERATURE_FUNCTION): vol.Coerce(int),
    }
)

SETTINGS_SCHEMA: Final = vol.Schema(
    {
        vol.Required(CONF_EMAIL): vol.All(cv.string, vol.Length(min=1)),
        vol.Required(CONF_PASSWORD): vol.All(cv.string, vol.Length(min=1)),
        vol.Optional(CONF_ENTITY_BLACKLIST): vol.Any(None, _BLACKLIST),
        vol.Optional(CONF_DEVICE_BLACKLIST): vol.Any(None, _BLACKLIST),
        vol.Optional(CONF_LOCAL_BACKUP_ADDRESS): vol.Any(None, cv.string),
        vol.Optional(CONF_DEVICE_CONFIGS_OVERRIDES, default={}): vol.Any(
            None, {vol.Coerce(int): DEVICE_OVERRIDE_SCHEMA}
        ),
        vol.Optional(CONF_DISCOVER_MESSAGE): vol.Any(None, cv.string),
        vol.Optional(CONF_SHOW_SCENES, default=False): cv.boolean,
        vol.Optional(CONF_HIDE_RELOAD_SWITCH, default=False): cv.boolean,
        vol.Optional(CONF_START_REST_SERVER, default=False): cv.boolean,
        vol.Optional(CONF_REST_SERVER_PORT, default=DEFAULT_REST_SERVER_PORT): cv.port,
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class KakuSettings:
    """Immutable integration settings."""

    email: str
    password: str
    entity_blacklist: frozenset[int] = frozenset()
    local_backup_address: str | None = None
    device_configs_overrides: Mapping[int, DeviceFunctions] = field(default_factory=dict)
    discover_message: str | None = None
    show_scenes: bool = False
    hide_reload_switch: bool = False
    start_rest_server: bool = False
    rest_server_port: int = DEFAULT_REST_SERVER_PORT

    @classmethod
    def from_entry(cls, entry: ConfigEntry) -> KakuSettings:
        """Build settings from a config entry (data + options)."""
        return cls.from_mapping({**entry.data, **entry.options})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> KakuSettings:
        """Validate raw configuration and build settings.

        Raises ConfigurationError when credentials are missing or any value is
        malformed.
        """
        if not (data.get(CONF_EMAIL) and data.get(CONF_PASSWORD)):
            raise ConfigurationError("E-mail and password are required")

        try:
            config = SETTINGS_SCHEMA(dict(data))
        except vol.Invalid as err:
            raise ConfigurationError(f"Invalid configuration: {err}") from err

        blacklist = config.get(CONF_ENTITY_BLACKLIST)
        if blacklist is None:
            blacklist = config.get(CONF_DEVICE_BLACKLIST) or []

        overrides = {
            device_type: DeviceFunctions(
                on_off=values.get(CONF_ON_OFF_FUNCTION),
                dim=values.get(CONF_DIM_FUNCTION),
                color_temperature=values.get(CONF_COLOR_TEMPERATURE_FUNCTION),
            )
            for device_type, values in (config[CONF_DEVICE_CONFIGS_OVERRIDES] or {}).items()
        }

        return cls(
            email=config[CONF_EMAIL],
            password=config[CONF_PASSWORD],
            entity_blacklist=frozenset(blacklist),
            local_backup_address=config.get(CONF_LOCAL_BACKUP_ADDRESS) or None,
            device_configs_overrides=overrides,
            discover_message=config.get(CONF_DISCOVER_MESSAGE) or None,
            show_scenes=config[CONF_SHOW_SCENES],
            hide_reload_switch=config[CONF_HIDE_RELOAD_SWITCH],
            start_rest_server=config[CONF_START_REST_SERVER],
            rest_server_port=config[CONF_REST_SERVER_PORT],
        )

    def log_summary(self) -> None:
        """Log the non-default settings in effect."""
        if self.entity_blacklist:
            _LOGGER.info(
                "Blacklist contains %d entities: %s",
                len(self.entity_blacklist),
                sorted(self.entity_blacklist),
            )
        if self.local_backup_address:
            _LOGGER.info("Using %s as backup ip", self.local_backup_address)
        if self.device_configs_overrides:
            _LOGGER.info(
                "Device config overrides contains %d device types",
                len(self.device_configs_overrides),
            )
        if self.discover_message:
            _LOGGER.info("Using custom discover message: %s", self.discover_message)
