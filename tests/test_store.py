from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from custom_components.kaku_ics2000.models import AccessoryRecord, host_identifier
from custom_components.kaku_ics2000.store import AccessoryStore


class _MemoryStore:
    data: dict[str, Any] | None = None

    def __init__(self, hass, version, key) -> None:
        self.key = key

    async def async_load(self) -> dict[str, Any] | None:
        return _MemoryStore.data

    async def async_save(self, data: dict[str, Any]) -> None:
        _MemoryStore.data = data

    async def async_remove(self) -> None:
        _MemoryStore.data = None


@pytest.fixture(autouse=True)
def memory_store(monkeypatch) -> None:
    _MemoryStore.data = None
    monkeypatch.setattr("custom_components.kaku_ics2000.store.Store", _MemoryStore)


@pytest.mark.asyncio
async def test_records_survive_restart(make_entity) -> None:
    store = AccessoryStore(MagicMock(), "entry-1")
    await store.async_load()
    record = AccessoryRecord(
        host_id=host_identifier(5), display_name="Lamp", entity=make_entity(entity_id=5)
    )
    store.upsert(record)
    await store.async_save()

    restored = AccessoryStore(MagicMock(), "entry-1")
    await restored.async_load()

    assert restored.loaded is True
    assert restored.find_by_id(host_identifier(5)).entity == record.entity


@pytest.mark.asyncio
async def test_upsert_replaces_by_host_id(make_entity) -> None:
    store = AccessoryStore(MagicMock(), "entry-1")
    host_id = host_identifier(5)
    store.upsert(AccessoryRecord(host_id=host_id, display_name="Old"))
    store.upsert(AccessoryRecord(host_id=host_id, display_name="New"))

    assert len(store.records) == 1
    assert store.find_by_id(host_id).display_name == "New"


@pytest.mark.asyncio
async def test_malformed_records_are_skipped() -> None:
    _MemoryStore.data = {
        "accessories": [
            {"display_name": "No host id"},
            {"host_id": "abc", "display_name": "Reload Switch"},
        ]
    }
    store = AccessoryStore(MagicMock(), "entry-1")

    await store.async_load()

    assert list(store.records) == ["abc"]


@pytest.mark.asyncio
async def test_remove_clears_cache() -> None:
    store = AccessoryStore(MagicMock(), "entry-1")
    store.upsert(AccessoryRecord(host_id="abc", display_name="Reload Switch"))

    await store.async_remove()

    assert store.records == {}
    assert _MemoryStore.data is None
