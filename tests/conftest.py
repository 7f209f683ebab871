from __future__ import annotations

import asyncio
from typing import Any, Callable

import pytest

from custom_components.kaku_ics2000.hub.base import Hub
from custom_components.kaku_ics2000.models import (
    AccessoryRecord,
    Capability,
    DeviceFunctions,
    Entity,
)

SWITCH_FUNCTIONS = DeviceFunctions(on_off=0)
DIMMABLE_FUNCTIONS = DeviceFunctions(on_off=3, dim=4)
COLOR_TEMPERATURE_FUNCTIONS = DeviceFunctions(on_off=3, dim=4, color_temperature=9)


class FakeHub(Hub):
    """In-memory hub that records the calls made against it."""

    def __init__(
        self,
        raw: list[dict[str, Any]] | None = None,
        statuses: dict[int, list[int]] | None = None,
    ) -> None:
        super().__init__()
        self.raw = raw or []
        self.initial_statuses = statuses or {}
        self.calls: list[str] = []
        self.commands: list[tuple[int, int, int, bool]] = []
        self.login_error: Exception | None = None
        self.login_gate: asyncio.Event | None = None

    async def async_login(self) -> None:
        self.calls.append("login")
        if self.login_gate is not None:
            await self.login_gate.wait()
        if self.login_error is not None:
            raise self.login_error

    async def async_fetch_raw_entity_data(self) -> list[dict[str, Any]]:
        self.calls.append("fetch_entities")
        return list(self.raw)

    async def async_fetch_all_statuses(self) -> dict[int, list[int]]:
        self.calls.append("fetch_statuses")
        self._statuses = {key: list(value) for key, value in self.initial_statuses.items()}
        return dict(self._statuses)

    async def async_send_command(
        self,
        entity_id: int,
        function: int,
        value: int,
        is_group: bool = False,
    ) -> None:
        self.commands.append((entity_id, function, value, is_group))


class FakeResponse:
    """aiohttp response stand-in usable as an async context manager."""

    def __init__(self, payload: Any, error: Exception | None = None) -> None:
        self._payload = payload
        self._error = error

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    def raise_for_status(self) -> None:
        if self._error is not None:
            raise self._error

    async def json(self, content_type: str | None = "application/json") -> Any:
        return self._payload


class FakeSession:
    """Answers cloud API posts from a dict keyed by endpoint file name."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def post(self, url: str, data: dict[str, Any]) -> FakeResponse:
        self.requests.append((url, data))
        endpoint = url.rsplit("/", 1)[-1]
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            return FakeResponse(None, response)
        return FakeResponse(response)

    def endpoint_requests(self, endpoint: str) -> list[dict[str, Any]]:
        return [data for url, data in self.requests if url.endswith(endpoint)]


class FakeCache:
    """Dict-backed accessory cache with the AccessoryStore surface."""

    def __init__(self, records: list[AccessoryRecord] | None = None) -> None:
        self._records = {record.host_id: record for record in records or []}
        self.loaded = False
        self.save_count = 0

    @property
    def records(self) -> dict[str, AccessoryRecord]:
        return dict(self._records)

    def find_by_id(self, host_id: str) -> AccessoryRecord | None:
        return self._records.get(host_id)

    def upsert(self, record: AccessoryRecord) -> None:
        self._records[record.host_id] = record

    async def async_load(self) -> None:
        self.loaded = True

    async def async_save(self) -> None:
        self.save_count += 1


def device_record(
    entity_id: int,
    name: str,
    device: int,
    *,
    disabled: bool = False,
    is_group: bool = False,
) -> dict[str, Any]:
    return {
        "id": entity_id,
        "module": {
            "name": name,
            "device": device,
            "disabled": disabled,
            "isGroup": is_group,
        },
    }


def scene_record(entity_id: int, name: str) -> dict[str, Any]:
    return {"id": entity_id, "scene": {"name": name}}


@pytest.fixture()
def make_entity() -> Callable[..., Entity]:
    def _make(
        entity_id: int = 1,
        name: str = "Lamp",
        capability: Capability = Capability.SWITCH,
        device_type: int = 1,
        functions: DeviceFunctions | None = None,
        **kwargs: Any,
    ) -> Entity:
        if functions is None:
            functions = {
                Capability.SWITCH: SWITCH_FUNCTIONS,
                Capability.DIMMABLE: DIMMABLE_FUNCTIONS,
                Capability.COLOR_TEMPERATURE: COLOR_TEMPERATURE_FUNCTIONS,
            }.get(capability, DeviceFunctions())
        return Entity(
            entity_id=entity_id,
            name=name,
            device_type=device_type,
            capability=capability,
            functions=functions,
            **kwargs,
        )

    return _make


@pytest.fixture()
def fake_hub() -> FakeHub:
    return FakeHub()


@pytest.fixture()
def fake_cache() -> FakeCache:
    return FakeCache()
