"""Config flow for the ICS-2000 integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_EMAIL, CONF_PASSWORD
from homeassistant.core import callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.selector import (
    BooleanSelector,
    NumberSelector,
    NumberSelectorConfig,
    NumberSelectorMode,
    ObjectSelector,
    SelectSelector,
    SelectSelectorConfig,
    SelectSelectorMode,
    TextSelector,
    TextSelectorConfig,
    TextSelectorType,
)

from .const import (
    CONF_DEVICE_CONFIGS_OVERRIDES,
    CONF_DISCOVER_MESSAGE,
    CONF_ENTITY_BLACKLIST,
    CONF_HIDE_RELOAD_SWITCH,
    CONF_LOCAL_BACKUP_ADDRESS,
    CONF_REST_SERVER_PORT,
    CONF_SHOW_SCENES,
    CONF_START_REST_SERVER,
    DEFAULT_REST_SERVER_PORT,
    DOMAIN,
)
from .errors import AuthenticationError, ConfigurationError
from .hub import CloudHub
from .settings import KakuSettings

_LOGGER = logging.getLogger(__name__)

USER_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_EMAIL): TextSelector(
            TextSelectorConfig(type=TextSelectorType.EMAIL)
        ),
        vol.Required(CONF_PASSWORD): TextSelector(
            TextSelectorConfig(type=TextSelectorType.PASSWORD)
        ),
    }
)


class KakuConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for the ICS-2000 integration."""

    VERSION = 1
    MINOR_VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the KlikAanKlikUit account credentials."""
        errors: dict[str, str] = {}

        if user_input is not None:
            await self.async_set_unique_id(user_input[CONF_EMAIL].lower())
            self._abort_if_unique_id_configured()

            try:
                settings = KakuSettings.from_mapping(user_input)
                hub = CloudHub(
                    async_get_clientsession(self.hass), settings.email, settings.password
                )
                await hub.async_login()
            except ConfigurationError:
                errors["base"] = "missing_credentials"
            except AuthenticationError as err:
                _LOGGER.debug("Login failed: %s", err)
                errors["base"] = "invalid_auth" if err.__cause__ is None else "cannot_connect"
            except Exception:
                _LOGGER.exception("Unexpected error while logging in")
                errors["base"] = "unknown"
            else:
                return self.async_create_entry(
                    title=user_input[CONF_EMAIL],
                    data={
                        CONF_EMAIL: user_input[CONF_EMAIL],
                        CONF_PASSWORD: user_input[CONF_PASSWORD],
                    },
                    options={
                        CONF_SHOW_SCENES: False,
                        CONF_HIDE_RELOAD_SWITCH: False,
                        CONF_START_REST_SERVER: False,
                        CONF_REST_SERVER_PORT: DEFAULT_REST_SERVER_PORT,
                    },
                )

        return self.async_show_form(
            step_id="user",
            data_schema=self.add_suggested_values_to_schema(USER_SCHEMA, user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: ConfigEntry,
    ) -> OptionsFlow:
        """Get the options flow for this handler."""
        return KakuOptionsFlow()


class KakuOptionsFlow(OptionsFlow):
    """Handle options flow for the ICS-2000 integration."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Manage the options."""
        errors: dict[str, str] = {}

        if user_input is not None:
            try:
                KakuSettings.from_mapping({**self.config_entry.data, **user_input})
            except ConfigurationError:
                errors["base"] = "invalid_options"
            else:
                return self.async_create_entry(title="", data=user_input)

        options = self.config_entry.options
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Optional(
                        CONF_ENTITY_BLACKLIST,
                        default=[str(i) for i in options.get(CONF_ENTITY_BLACKLIST) or []],
                    ): SelectSelector(
                        SelectSelectorConfig(
                            options=[],
                            multiple=True,
                            custom_value=True,
                            mode=SelectSelectorMode.DROPDOWN,
                        )
                    ),
                    vol.Optional(
                        CONF_LOCAL_BACKUP_ADDRESS,
                        description={
                            "suggested_value": options.get(CONF_LOCAL_BACKUP_ADDRESS)
                        },
                    ): TextSelector(),
                    vol.Optional(
                        CONF_DISCOVER_MESSAGE,
                        description={"suggested_value": options.get(CONF_DISCOVER_MESSAGE)},
                    ): TextSelector(),
                    vol.Optional(
                        CONF_DEVICE_CONFIGS_OVERRIDES,
                        description={
                            "suggested_value": options.get(CONF_DEVICE_CONFIGS_OVERRIDES)
                        },
                    ): ObjectSelector(),
                    vol.Required(
                        CONF_SHOW_SCENES,
                        default=options.get(CONF_SHOW_SCENES, False),
                    ): BooleanSelector(),
                    vol.Required(
                        CONF_HIDE_RELOAD_SWITCH,
                        default=options.get(CONF_HIDE_RELOAD_SWITCH, False),
                    ): BooleanSelector(),
                    vol.Required(
                        CONF_START_REST_SERVER,
                        default=options.get(CONF_START_REST_SERVER, False),
                    ): BooleanSelector(),
                    vol.Required(
                        CONF_REST_SERVER_PORT,
                        default=options.get(
                            CONF_REST_SERVER_PORT, DEFAULT_REST_SERVER_PORT
                        ),
                    ): NumberSelector(
                        NumberSelectorConfig(
                            min=1, max=65535, mode=NumberSelectorMode.BOX
                        )
                    ),
                }
            ),
            errors=errors,
        )
