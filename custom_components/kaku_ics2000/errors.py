"""Exceptions raised by the ICS-2000 integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError

if TYPE_CHECKING:
    from .models import Entity


class KakuError(HomeAssistantError):
    """Base class for ICS-2000 errors."""


class ConfigurationError(KakuError):
    """Configuration is missing or invalid."""


class DiscoveryTimeout(KakuError):
    """The hub did not answer the discovery probe and no backup address is set."""

    def __init__(self, timeout: float) -> None:
        """Initialize the error."""
        super().__init__(f"No response from hub within {timeout} seconds")
        self.timeout = timeout


class AuthenticationError(KakuError):
    """Logging in to the hub failed."""


class CatalogFetchError(KakuError):
    """Fetching the entity catalog from the hub failed."""


class HubRequestError(KakuError):
    """A status or command request to the hub failed."""


class UnsupportedCapability(KakuError):
    """An entity has no controller for its capability."""

    def __init__(self, entity: Entity) -> None:
        """Initialize the error."""
        super().__init__(
            f"Device hasn't any controls: {entity.entity_id} {entity.name} "
            f"{entity.device_type}"
        )
        self.entity = entity


class RegistrationError(KakuError):
    """Registering an accessory with Home Assistant failed."""
