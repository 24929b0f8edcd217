"""Reports and dashboard summaries."""

from types import SimpleNamespace

from medischedule.features.reports.service import (
    ReportService,
    count_pending_tasks,
    minutes_between,
    summarize_utilization,
)
from conftest import schedule_payload


def operation(ot_id, date, start, end, status="scheduled"):
    return SimpleNamespace(ot_id=ot_id, date=date, start_time=start, end_time=end, status=status)


def test_minutes_between():
    assert minutes_between("09:00", "11:30") == 150
    assert minutes_between("11:00", "09:00") == 0


def test_utilization_groups_by_room_and_month():
    rooms = [{"id": "r1", "room_number": "OT-1"}]
    schedules = [
        operation("r1", "2026-03-02", "09:00", "11:00"),
        operation("r1", "2026-03-09", "09:00", "10:00", status="completed"),
        operation("r1", "2026-03-10", "09:00", "10:00", status="cancelled"),
        operation("r1", "2026-04-01", "09:00", "10:00"),
        operation("r7", "2026-03-02", "12:00", "13:00"),
    ]

    march = summarize_utilization(schedules, rooms, month="2026-03")

    assert [(u.roomNumber, u.surgeries, u.booked_minutes) for u in march] == [("OT-1", 2, 180), ("r7", 1, 60)]
    assert len(summarize_utilization(schedules, rooms)) == 3


def test_pending_tasks_are_past_and_open():
    schedules = [
        operation("r1", "2026-03-01", "09:00", "10:00"),
        operation("r1", "2026-03-01", "11:00", "12:00", status="completed"),
        operation("r1", "2026-03-05", "09:00", "10:00"),
    ]

    assert count_pending_tasks(schedules, "2026-03-02") == 1


async def test_counts_by_procedure_and_doctor(store, admin, other_doctor, seeded):
    await store.create("operation_schedules", schedule_payload(seeded), admin)
    await store.create("operation_schedules", schedule_payload(seeded, date="2026-03-03"), admin)
    await store.create(
        "operation_schedules",
        schedule_payload(seeded, procedure="Appendectomy", doctor_id=other_doctor.id, date="2026-03-04"),
        admin,
    )

    procedures = await ReportService.get_surgeries_by_procedure(store)
    doctors = await ReportService.get_surgeries_per_doctor(store)

    assert [(i.name, i.count) for i in procedures.items] == [("Laparoscopic cholecystectomy", 2), ("Appendectomy", 1)]
    assert [(i.name, i.count) for i in doctors.items] == [("Dr. Ama Mensah", 2), ("Dr. Kofi Owusu", 1)]
    assert procedures.total == 3


async def test_admin_dashboard(store, admin, seeded):
    await store.create("operation_schedules", schedule_payload(seeded), admin)
    await store.create("operation_schedules", schedule_payload(seeded, start_time="12:00", end_time="13:00", status="completed"), admin)
    await store.create("operation_schedules", schedule_payload(seeded, date="2026-03-03"), admin)

    dashboard = await ReportService.get_admin_dashboard(store, "2026-03-02")

    assert (dashboard.total, dashboard.scheduled, dashboard.completed) == (2, 1, 1)
    assert [op.start_time for op in dashboard.operations] == ["09:00", "12:00"]
    assert dashboard.operations[0].patientName == "Kwame Boateng"


async def test_doctor_dashboard(store, admin, doctor, seeded):
    await store.create("operation_schedules", schedule_payload(seeded, date="2026-03-01"), admin)
    await store.create("operation_schedules", schedule_payload(seeded), admin)
    await store.create("operation_schedules", schedule_payload(seeded, start_time="14:00", end_time="15:00"), admin)
    await store.create("messages", {"sender_id": admin.id, "receiver_id": doctor.id, "text": "Approved", "type": "system"}, admin)

    dashboard = await ReportService.get_doctor_dashboard(store, doctor, "2026-03-02", now="10:00")

    assert [op.start_time for op in dashboard.today] == ["09:00", "14:00"]
    assert dashboard.next_operation.start_time == "14:00"
    assert dashboard.pending_tasks == 1
    assert dashboard.unread_alerts == 1
