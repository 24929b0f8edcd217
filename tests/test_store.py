"""Document store: mutations, audit trail and live subscriptions."""

import asyncio

import pytest
from pymongo.errors import PyMongoError

from medischedule.store import AuditLog, UnknownCollectionError
from conftest import schedule_payload


COLLECTION_SAMPLES = {
    "patients": {"name": "Abena Darko", "age": 31, "gender": "Female", "admitted_on": "2026-02-27"},
    "ot_rooms": {"room_number": "OT-9"},
    "resources": {"name": "Propofol", "type": "drug", "quantity": 20, "unit": "vials"},
    "messages": {"sender_id": "doctor-1", "text": "Need the C-arm in OT-1"},
    "doctors": {"name": "Dr. Yaw Mensah"},
    "users": {"email": "y.mensah@hospital.org", "firstName": "Yaw", "lastName": "Mensah", "role": "doctor"},
}


@pytest.mark.parametrize("collection", sorted(COLLECTION_SAMPLES))
async def test_create_assigns_id_and_is_retrievable(store, admin, collection):
    result = await store.create(collection, COLLECTION_SAMPLES[collection], admin)

    assert result.ok
    assert result.id
    fetched = await store.get(collection, result.id)
    assert fetched is not None
    assert fetched.id == result.id


async def test_create_with_explicit_id(store, admin):
    result = await store.create("doctors", {"name": "Dr. Esi Quaye"}, admin, doc_id="auth-uid-42")

    assert result.id == "auth-uid-42"
    assert (await store.get("doctors", "auth-uid-42")).name == "Dr. Esi Quaye"


async def test_create_rejects_invalid_data(store, admin):
    result = await store.create("patients", {"name": "No Age", "gender": "Male", "admitted_on": "2026-01-01"}, admin)

    assert not result.ok
    assert result.kind == "validation"
    assert "age" in result.message


async def test_unknown_collection(store, admin):
    result = await store.create("theaters", {"name": "x"}, admin)
    assert result.kind == "validation"

    with pytest.raises(UnknownCollectionError):
        await store.find("theaters")


async def test_update_unknown_field_is_rejected(store, admin, seeded):
    result = await store.update("patients", seeded["patient_id"], {"blood_type": "O+"}, admin)

    assert not result.ok
    assert result.kind == "validation"


async def test_update_validates_field_values(store, admin, seeded):
    result = await store.update("patients", seeded["patient_id"], {"age": -4}, admin)

    assert result.kind == "validation"
    assert (await store.get("patients", seeded["patient_id"])).age == 54


async def test_update_missing_document(store, admin):
    result = await store.update("patients", "missing", {"age": 40}, admin)

    assert result.kind == "not_found"


async def test_update_with_expected_is_compare_and_swap(store, admin, seeded):
    created = await store.create("operation_schedules", schedule_payload(seeded), admin)

    first = await store.update(
        "operation_schedules", created.id, {"status": "cancelled"}, admin, expected={"status": "scheduled"}
    )
    second = await store.update(
        "operation_schedules", created.id, {"status": "completed"}, admin, expected={"status": "scheduled"}
    )

    assert first.ok
    assert second.kind == "conflict"
    assert (await store.get("operation_schedules", created.id)).status == "cancelled"


async def test_concurrent_disjoint_updates_both_persist(store, admin, doctor, seeded):
    created = await store.create("operation_schedules", schedule_payload(seeded), admin)

    results = await asyncio.gather(
        store.update("operation_schedules", created.id, {"remarks": "Uneventful"}, doctor),
        store.update("operation_schedules", created.id, {"nurses": ["Nurse Adoma"]}, admin),
    )

    assert all(result.ok for result in results)
    schedule = await store.get("operation_schedules", created.id)
    assert schedule.remarks == "Uneventful"
    assert schedule.nurses == ["Nurse Adoma"]


async def test_delete(store, admin, seeded):
    result = await store.delete("ot_rooms", seeded["room_b"], admin)

    assert result.ok
    assert await store.get("ot_rooms", seeded["room_b"]) is None
    assert (await store.delete("ot_rooms", seeded["room_b"], admin)).kind == "not_found"


async def test_find_with_sort_and_limit(store, admin):
    for name, quantity in [("Suture", 5), ("Gauze", 50), ("Ketamine", 12)]:
        await store.create("resources", {"name": name, "type": "material", "quantity": quantity}, admin)

    top = await store.find("resources", {"quantity": {"$gte": 10}}, sort=[("quantity", -1)], limit=1)

    assert [r.name for r in top] == ["Gauze"]
    assert await store.count("resources", {"type": "material"}) == 3


async def test_every_mutation_is_audited(store, admin, seeded):
    created = await store.create("resources", {"name": "Scalpel", "type": "instrument"}, admin)
    await store.update("resources", created.id, {"quantity": 4}, admin)
    await store.delete("resources", created.id, admin)
    await store.audit.flush()

    logs = await AuditLog.find({"details.id": created.id}).to_list()
    assert sorted(log.action for log in logs) == ["CREATE_RESOURCE", "DELETE_RESOURCE", "UPDATE_RESOURCE"]
    assert all(log.actor_id == admin.id and log.actor_email == admin.email for log in logs)
    assert [log.details["fields"] for log in logs if log.action == "UPDATE_RESOURCE"] == [["quantity"]]


async def test_explicit_action_name_is_recorded(store, admin, seeded):
    await store.update("patients", seeded["patient_id"], {"contact": "+233200000000"}, admin, action="CORRECT_CONTACT")
    await store.audit.flush()

    assert await AuditLog.find({"action": "CORRECT_CONTACT"}).count() == 1


async def test_failing_audit_write_does_not_change_result(store, admin, monkeypatch):
    async def broken_insert(self, *args, **kwargs):
        raise PyMongoError("logs collection unavailable")

    monkeypatch.setattr(AuditLog, "insert", broken_insert)

    result = await store.create("ot_rooms", {"room_number": "OT-7"}, admin)
    await store.audit.flush()

    assert result.ok
    assert await store.get("ot_rooms", result.id) is not None


async def test_subscribe_yields_initial_and_changed_snapshots(store, admin):
    await store.create("ot_rooms", {"room_number": "OT-1"}, admin)
    snapshots = store.subscribe("ot_rooms", sort=[("room_number", 1)], interval=0.01)

    first = await asyncio.wait_for(snapshots.__anext__(), timeout=2)
    assert [room.room_number for room in first] == ["OT-1"]

    await store.create("ot_rooms", {"room_number": "OT-2"}, admin)
    second = await asyncio.wait_for(snapshots.__anext__(), timeout=2)
    assert [room.room_number for room in second] == ["OT-1", "OT-2"]

    await snapshots.aclose()
    with pytest.raises(StopAsyncIteration):
        await snapshots.__anext__()


async def test_subscribe_applies_filters(store, admin):
    await store.create("ot_rooms", {"room_number": "OT-1", "status": "in-use"}, admin)
    await store.create("ot_rooms", {"room_number": "OT-2"}, admin)
    snapshots = store.subscribe("ot_rooms", {"status": "available"}, interval=0.01)

    first = await asyncio.wait_for(snapshots.__anext__(), timeout=2)
    await snapshots.aclose()

    assert [room.room_number for room in first] == ["OT-2"]
