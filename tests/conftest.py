"""Shared fixtures: an in-memory document store and seeded records."""

import pytest
from mongomock_motor import AsyncMongoMockClient

from medischedule.database import build_store
from medischedule.shared.schemas import Actor


ADMIN = Actor(id="admin-1", email="admin@hospital.org", role="admin")
DOCTOR = Actor(id="doctor-1", email="a.mensah@hospital.org", role="doctor")
OTHER_DOCTOR = Actor(id="doctor-2", email="k.owusu@hospital.org", role="doctor")


@pytest.fixture
async def store():
    client = AsyncMongoMockClient()
    store = await build_store(client["medischedule_test"])
    yield store
    await store.audit.flush()


@pytest.fixture
def admin():
    return ADMIN


@pytest.fixture
def doctor():
    return DOCTOR


@pytest.fixture
def other_doctor():
    return OTHER_DOCTOR


async def create_profile(store, actor, first_name, last_name):
    await store.create(
        "users",
        {"email": actor.email, "firstName": first_name, "lastName": last_name, "role": actor.role},
        actor,
        doc_id=actor.id,
    )
    if actor.role == "doctor":
        await store.create(
            "doctors",
            {
                "name": f"Dr. {first_name} {last_name}",
                "email": actor.email,
                "specialization": "General Surgery",
                "shift_hours": "08:00-16:00",
                "availability": ["Mon", "Tue", "Wed"],
            },
            actor,
            doc_id=actor.id,
        )


@pytest.fixture
async def seeded(store):
    """Staff profiles, one patient and two rooms."""
    await create_profile(store, ADMIN, "Efua", "Asante")
    await create_profile(store, DOCTOR, "Ama", "Mensah")
    await create_profile(store, OTHER_DOCTOR, "Kofi", "Owusu")

    patient = await store.create(
        "patients",
        {"name": "Kwame Boateng", "age": 54, "gender": "Male", "admitted_on": "2026-03-01"},
        ADMIN,
    )
    room_a = await store.create("ot_rooms", {"room_number": "OT-1", "equipment": ["C-arm"]}, ADMIN)
    room_b = await store.create("ot_rooms", {"room_number": "OT-2"}, ADMIN)

    return {"patient_id": patient.id, "room_a": room_a.id, "room_b": room_b.id}


def schedule_payload(seeded, **overrides):
    data = {
        "procedure": "Laparoscopic cholecystectomy",
        "patient_id": seeded["patient_id"],
        "doctor_id": DOCTOR.id,
        "ot_id": seeded["room_a"],
        "date": "2026-03-02",
        "start_time": "09:00",
        "end_time": "11:00",
        "anesthesia_type": "General",
        "anesthesiologist": "Dr. Nana Adjei",
    }
    data.update(overrides)
    return data
