"""Base class for ICS-2000 hub sessions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Hub(ABC):
    """Abstract session with an ICS-2000 hub.

    The sync engine only depends on this interface: logging in, fetching the
    raw entity list and bulk statuses. Controllers use the command methods.
    """

    def __init__(self) -> None:
        """Initialize hub."""
        self.local_address: str | None = None
        self._statuses: dict[int, list[int]] = {}

    @abstractmethod
    async def async_login(self) -> None:
        """Authenticate and refresh any time-limited credential.

        Raises AuthenticationError on failure.
        """

    @abstractmethod
    async def async_fetch_raw_entity_data(self) -> list[dict[str, Any]]:
        """Fetch the raw entity records (devices and scenes) in one batch.

        Raises CatalogFetchError on failure.
        """

    @abstractmethod
    async def async_fetch_all_statuses(self) -> dict[int, list[int]]:
        """Fetch the function values of every entity.

        Implementations store the result so get_status() can serve it.
        """

    @abstractmethod
    async def async_send_command(
        self,
        entity_id: int,
        function: int,
        value: int,
        is_group: bool = False,
    ) -> None:
        """Set one function of an entity to a value."""

    async def async_run_scene(self, entity_id: int) -> None:
        """Run a scene."""
        await self.async_send_command(entity_id, 0, 1)

    def get_status(self, entity_id: int) -> list[int]:
        """Return the last fetched function values of an entity."""
        return self._statuses.get(entity_id, [])

    @property
    def statuses(self) -> dict[int, list[int]]:
        """Return a copy of the last fetched status snapshot."""
        return dict(self._statuses)

    async def async_cleanup(self) -> None:
        """Clean up hub resources on shutdown.

        Override in subclasses if cleanup is needed.
        """
