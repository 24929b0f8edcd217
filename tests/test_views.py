"""Joined views and their memoization."""

from medischedule.shared.views import (
    UNKNOWN_DOCTOR,
    UNKNOWN_PATIENT,
    ViewCache,
    assemble_request_views,
    assemble_schedule_views,
    build_name_map,
)


PATIENTS = [{"id": "p1", "name": "Kwame Boateng"}]
DOCTORS = [{"id": "d1", "name": "Dr. Ama Mensah"}]
ROOMS = [{"id": "r1", "room_number": "OT-1"}]
SCHEDULES = [
    {"id": "s1", "patient_id": "p1", "doctor_id": "d1", "ot_id": "r1"},
    {"id": "s2", "patient_id": "gone", "doctor_id": "gone", "ot_id": "r9"},
]


def test_build_name_map():
    assert build_name_map(ROOMS, label="room_number") == {"r1": "OT-1"}
    assert build_name_map([{"id": "x"}]) == {"x": "x"}


def test_schedule_views_resolve_and_fall_back():
    views = assemble_schedule_views(SCHEDULES, PATIENTS, DOCTORS, ROOMS)

    assert [v["id"] for v in views] == ["s1", "s2"]
    assert (views[0]["patientName"], views[0]["doctorName"], views[0]["roomNumber"]) == (
        "Kwame Boateng", "Dr. Ama Mensah", "OT-1"
    )
    assert (views[1]["patientName"], views[1]["doctorName"], views[1]["roomNumber"]) == (
        UNKNOWN_PATIENT, UNKNOWN_DOCTOR, "r9"
    )
    assert "patientName" not in SCHEDULES[0]


def test_request_views_use_requesting_doctor():
    views = assemble_request_views([{"id": "q1", "patient_id": "p1", "requesting_doctor_id": "d1"}], PATIENTS, DOCTORS)

    assert views[0]["doctorName"] == "Dr. Ama Mensah"


def test_view_cache_recomputes_only_on_new_inputs():
    cache = ViewCache(assemble_schedule_views)
    schedules, patients, doctors, rooms = list(SCHEDULES), list(PATIENTS), list(DOCTORS), list(ROOMS)

    first = cache(schedules, patients, doctors, rooms)
    again = cache(schedules, patients, doctors, rooms)
    assert again is first
    assert cache.computations == 1

    # Equal content, new list object
    cache(schedules, list(patients), doctors, rooms)
    assert cache.computations == 2

    cache(schedules, patients, doctors, rooms)
    assert cache.computations == 3
