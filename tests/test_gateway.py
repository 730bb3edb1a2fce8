"""
Tests for the Supabase gateway wrapper: query execution and realtime subscriptions.
"""
import asyncio
import logging

import pytest
from postgrest import APIError

from gardenhub.shared.core.exceptions import ErrorType, GardenHubException
from gardenhub.shared.infrastructure.database.gateway import SupabaseGateway, extract_record


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, data=None, error=None):
        self._data = data
        self._error = error

    async def execute(self):
        if self._error is not None:
            raise self._error
        return FakeResponse(self._data)


class FakeChannel:
    def __init__(self, name):
        self.name = name
        self.handlers = []
        self.subscribed = False

    def on_postgres_changes(self, event, callback, table, schema, filter=None):
        self.handlers.append({"event": event, "callback": callback, "table": table, "filter": filter})
        return self

    async def subscribe(self):
        self.subscribed = True
        return self


class FakeClient:
    def __init__(self):
        self.channels = []
        self.removed = []

    def channel(self, name):
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel):
        self.removed.append(channel)


async def test_execute_returns_rows():
    gateway = SupabaseGateway(FakeClient())
    assert await gateway.execute(FakeQuery([{"id": "a"}]), "select", "tasks") == [{"id": "a"}]
    assert await gateway.execute(FakeQuery({"id": "a"}), "select", "tasks") == [{"id": "a"}]
    assert await gateway.execute(FakeQuery(None), "select", "tasks") == []


async def test_execute_classifies_failures():
    gateway = SupabaseGateway(FakeClient())
    error = APIError({"message": "permission denied for table tasks", "code": "42503", "hint": None, "details": None})

    with pytest.raises(GardenHubException) as exc_info:
        await gateway.execute(FakeQuery(error=error), "update", "tasks")

    assert exc_info.value.error_type == ErrorType.PERMISSION
    assert exc_info.value.details["operation"] == "update"
    assert exc_info.value.__cause__ is error


def test_extract_record_accepts_known_payload_shapes():
    row = {"id": "m1"}
    assert extract_record({"data": {"record": row}}) == row
    assert extract_record({"new": row}) == row
    assert extract_record({"record": row}) == row
    assert extract_record({}) is None


async def test_subscribe_dispatches_records_and_unsubscribes_once():
    client = FakeClient()
    gateway = SupabaseGateway(client)
    received = []

    async def on_record(record):
        received.append(record)

    subscription = await gateway.subscribe(
        "messages:c1", "messages", on_record, filter="conversation_id=eq.c1"
    )
    channel = client.channels[0]
    assert channel.subscribed
    assert channel.handlers[0]["event"] == "INSERT"
    assert channel.handlers[0]["filter"] == "conversation_id=eq.c1"

    channel.handlers[0]["callback"]({"data": {"record": {"id": "m1"}}})
    await asyncio.sleep(0)
    assert received == [{"id": "m1"}]

    await subscription.unsubscribe()
    await subscription.unsubscribe()
    assert client.removed == [channel]
    assert not subscription.active


async def test_failing_async_callback_is_logged(caplog):
    client = FakeClient()
    gateway = SupabaseGateway(client)

    async def on_record(record):
        raise RuntimeError(f"cannot deliver {record['id']}")

    subscription = await gateway.subscribe("messages:c1", "messages", on_record)

    with caplog.at_level(logging.ERROR):
        client.channels[0].handlers[0]["callback"]({"new": {"id": "m1"}})
        await asyncio.sleep(0)
        await asyncio.sleep(0)

    assert any("cannot deliver m1" in r.getMessage() for r in caplog.records)
    assert subscription._tasks == set()
    await subscription.unsubscribe()


async def test_unsubscribe_cancels_running_callbacks():
    client = FakeClient()
    gateway = SupabaseGateway(client)
    started = asyncio.Event()
    cancelled = []

    async def on_record(record):
        started.set()
        try:
            await asyncio.sleep(60)
        except asyncio.CancelledError:
            cancelled.append(record["id"])
            raise

    subscription = await gateway.subscribe("messages:c1", "messages", on_record)
    client.channels[0].handlers[0]["callback"]({"new": {"id": "m1"}})
    await started.wait()

    await subscription.unsubscribe()

    assert cancelled == ["m1"]
    assert client.removed == [client.channels[0]]
