"""ICS-2000 hub session backed by the KlikAanKlikUit cloud."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from ..const import (
    API_ACCOUNT,
    API_BASE_URL,
    API_COMMAND,
    API_DEVICE_UNIQUE_ID,
    API_ENTITY,
    API_GATEWAY,
    API_TIMEOUT,
)
from ..errors import AuthenticationError, CatalogFetchError, HubRequestError
from .base import Hub

_LOGGER = logging.getLogger(__name__)

_REQUEST_ERRORS = (aiohttp.ClientError, TimeoutError, ValueError)


class CloudHub(Hub):
    """Hub session that talks to the vendor cloud over HTTPS.

    Entry payloads are expected as decoded JSON; payload encryption is handled
    upstream of this client.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        email: str,
        password: str,
        base_url: str = API_BASE_URL,
    ) -> None:
        """Initialize cloud hub."""
        super().__init__()
        self._session = session
        self._email = email
        self._password = password
        self._base_url = base_url
        self.home_id: int | None = None
        self.mac: str | None = None
        self.aes_key: str | None = None

    @property
    def is_logged_in(self) -> bool:
        """Return whether a login succeeded."""
        return self.mac is not None

    async def _async_post(self, endpoint: str, data: dict[str, Any]) -> Any:
        """POST a form to the cloud API and return the decoded JSON body."""
        async with asyncio.timeout(API_TIMEOUT):
            async with self._session.post(
                f"{self._base_url}{endpoint}", data=data
            ) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)

    def _home_params(self) -> dict[str, Any]:
        """Return the parameters identifying this account's hub."""
        return {
            "email": self._email,
            "password_hash": self._password,
            "mac": self.mac,
            "home_id": str(self.home_id),
        }

    # ─────────────────────────────────────────────────────────────
    # SESSION
    # ─────────────────────────────────────────────────────────────

    async def async_login(self) -> None:
        """Log in and store the hub identity and AES key."""
        try:
            result = await self._async_post(
                API_ACCOUNT,
                {
                    "action": "login",
                    "email": self._email,
                    "password_hash": self._password,
                    "device_unique_id": API_DEVICE_UNIQUE_ID,
                    "platform": "",
                    "mac": "",
                },
            )
        except _REQUEST_ERRORS as err:
            raise AuthenticationError(f"Login failed: {err}") from err

        homes = result.get("homes") if isinstance(result, dict) else None
        if not homes:
            raise AuthenticationError("Login failed: no hub linked to this account")

        home = homes[0]
        self.home_id = home.get("home_id")
        self.mac = home.get("mac")
        self.aes_key = home.get("aes_key")
        _LOGGER.debug("Logged in, using hub %s", self.mac)

    # ─────────────────────────────────────────────────────────────
    # ENTITIES
    # ─────────────────────────────────────────────────────────────

    async def async_fetch_raw_entity_data(self) -> list[dict[str, Any]]:
        """Fetch all devices and scenes of the hub."""
        if not self.is_logged_in:
            raise CatalogFetchError("Not logged in")

        try:
            return await self._async_sync()
        except _REQUEST_ERRORS as err:
            raise CatalogFetchError(f"Error pulling devices: {err}") from err

    async def _async_sync(self) -> list[dict[str, Any]]:
        """Fetch and decode the gateway sync payload."""
        result = await self._async_post(
            API_GATEWAY, {"action": "sync", "since": "0", **self._home_params()}
        )
        if not isinstance(result, list):
            raise ValueError(f"Unexpected sync response: {type(result).__name__}")

        return [
            record for item in result if (record := self._decode_entry(item)) is not None
        ]

    @staticmethod
    def _decode_entry(item: Any) -> dict[str, Any] | None:
        """Flatten one sync entry into {"id": ..., "module"|"scene": {...}}."""
        if not isinstance(item, dict) or "id" not in item:
            return None

        data = item.get("data")
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                _LOGGER.debug("Skipping undecodable entry %s", item.get("id"))
                return None

        if not isinstance(data, dict):
            return None

        try:
            return {**data, "id": int(item["id"])}
        except (TypeError, ValueError):
            return None

    async def async_fetch_all_statuses(self) -> dict[int, list[int]]:
        """Fetch function values for every entity of the hub.

        Resolves the entity ids itself so it can run alongside the catalog
        fetch.
        """
        if not self.is_logged_in:
            raise HubRequestError("Not logged in")

        try:
            records = await self._async_sync()
            entity_ids = [record["id"] for record in records]
            if not entity_ids:
                self._statuses = {}
                return {}
            result = await self._async_post(
                API_ENTITY,
                {
                    "action": "get-multiple",
                    "entity_id": json.dumps(entity_ids),
                    **self._home_params(),
                },
            )
        except _REQUEST_ERRORS as err:
            raise HubRequestError(f"Error pulling statuses: {err}") from err

        statuses: dict[int, list[int]] = {}
        for item in result if isinstance(result, list) else []:
            if not isinstance(item, dict):
                continue
            try:
                entity_id = int(item["id"])
            except (KeyError, TypeError, ValueError):
                continue
            functions = self._decode_status(item.get("status"))
            if functions is None:
                _LOGGER.debug("Skipping undecodable status of entity %s", entity_id)
                continue
            statuses[entity_id] = functions

        self._statuses = statuses
        return dict(statuses)

    @staticmethod
    def _decode_status(status: Any) -> list[int] | None:
        """Return the function values of a status payload."""
        if isinstance(status, str):
            try:
                status = json.loads(status)
            except ValueError:
                return None
        if isinstance(status, dict):
            module = status.get("module")
            status = module.get("functions") if isinstance(module, dict) else None
        if not isinstance(status, list):
            return None
        try:
            return [int(value) for value in status]
        except (TypeError, ValueError):
            return None

    # ─────────────────────────────────────────────────────────────
    # COMMANDS
    # ─────────────────────────────────────────────────────────────

    async def async_send_command(
        self,
        entity_id: int,
        function: int,
        value: int,
        is_group: bool = False,
    ) -> None:
        """Queue a command for the hub."""
        if not self.is_logged_in:
            raise HubRequestError("Not logged in")

        command = {
            "entity_id": entity_id,
            "function": function,
            "value": value,
            "group": is_group,
        }
        try:
            await self._async_post(
                API_COMMAND,
                {
                    "action": "add",
                    "device_unique_id": API_DEVICE_UNIQUE_ID,
                    "command": json.dumps(command),
                    **self._home_params(),
                },
            )
        except _REQUEST_ERRORS as err:
            raise HubRequestError(
                f"Command for entity {entity_id} failed: {err}"
            ) from err

        functions = self._statuses.get(entity_id)
        if functions is not None and 0 <= function < len(functions):
            functions[function] = value
