"""Live subscriptions over Socket.IO."""

import asyncio
import logging

import pytest

from medischedule.core.security import create_access_token
from medischedule.database import Database
from medischedule.features.messages import socket
from medischedule.shared.schemas import Actor
from conftest import schedule_payload


@pytest.fixture
def emitted(monkeypatch, store):
    events = []

    async def fake_emit(event, data=None, room=None, **kwargs):
        events.append((event, data, room))

    monkeypatch.setattr(Database, "store", store)
    monkeypatch.setattr(socket.sio, "emit", fake_emit)
    monkeypatch.setattr(store, "subscribe", _fast(store.subscribe))
    return events


def _fast(subscribe):
    def wrapper(collection, filters=None, sort=None, interval=None):
        return subscribe(collection, filters, sort, interval=0.01)
    return wrapper


async def wait_for_event(events, name, count=1):
    for _ in range(200):
        matching = [e for e in events if e[0] == name]
        if len(matching) >= count:
            return matching
        await asyncio.sleep(0.01)
    raise AssertionError(f"no {name} event")


def test_doctor_scope_is_narrowed():
    doctor = Actor(id="d1", role="doctor")
    admin = Actor(id="a1", role="admin")

    assert socket.scope_filters(doctor, "operation_schedules", {"date": "2026-03-02"}) == {
        "date": "2026-03-02", "doctor_id": "d1"
    }
    assert socket.scope_filters(doctor, "surgery_requests", {"requesting_doctor_id": "d2"}) == {
        "requesting_doctor_id": "d1"
    }
    assert socket.scope_filters(doctor, "patients", {}) is None
    assert socket.scope_filters(admin, "patients", {}) == {}
    assert socket.scope_filters(admin, "logs", {}) is None
    assert socket.scope_filters(admin, "operation_schedules", {"$where": "1"}) is None


async def test_connect_requires_valid_token(emitted, seeded):
    assert await socket.connect("sid-0", {}, {}) is False
    assert await socket.connect("sid-0", {}, {"token": "garbage"}) is False


async def test_subscription_streams_snapshots_until_unsubscribed(emitted, store, admin, doctor, seeded):
    token = create_access_token({"sub": doctor.id, "email": doctor.email})
    assert await socket.connect("sid-1", {}, {"token": token}) is True

    await store.create("operation_schedules", schedule_payload(seeded), admin)
    ack = await socket.subscribe("sid-1", {"subscription_id": "today", "collection": "operation_schedules"})
    assert ack["status"] == "success"

    first = await wait_for_event(emitted, "snapshot")
    assert first[0][1]["subscription_id"] == "today"
    assert len(first[0][1]["records"]) == 1

    await store.create("operation_schedules", schedule_payload(seeded, date="2026-03-09"), admin)
    await wait_for_event(emitted, "snapshot", count=2)

    assert (await socket.unsubscribe("sid-1", {"subscription_id": "today"}))["status"] == "success"
    await asyncio.sleep(0.05)
    assert socket.socket_subscriptions["sid-1"] == {}

    await socket.disconnect("sid-1")
    assert "sid-1" not in socket.connected_users


async def test_doctor_cannot_watch_audit_log(emitted, doctor, seeded):
    token = create_access_token({"sub": doctor.id})
    await socket.connect("sid-2", {}, {"token": token})

    ack = await socket.subscribe("sid-2", {"subscription_id": "x", "collection": "logs"})

    assert ack["status"] == "error"
    await socket.disconnect("sid-2")


async def test_failed_stream_is_logged_and_dropped(emitted, doctor, seeded, monkeypatch, caplog):
    async def broken_stream(sid, subscription_id, collection, filters):
        raise RuntimeError("snapshot serialization failed")

    monkeypatch.setattr(socket, "stream_snapshots", broken_stream)
    token = create_access_token({"sub": doctor.id})
    await socket.connect("sid-3", {}, {"token": token})

    with caplog.at_level(logging.ERROR, logger="medischedule"):
        ack = await socket.subscribe("sid-3", {"subscription_id": "mine", "collection": "operation_schedules"})
        for _ in range(100):
            if not socket.socket_subscriptions["sid-3"]:
                break
            await asyncio.sleep(0.01)

    assert ack["status"] == "success"
    assert socket.socket_subscriptions["sid-3"] == {}
    assert "snapshot serialization failed" in caplog.text
    await socket.disconnect("sid-3")
