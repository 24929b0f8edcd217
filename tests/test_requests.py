"""Surgery request workflow from submission to booked operation."""

from medischedule.features.requests.schemas import (
    SubmitRequestRequest,
    UpdateRequestRequest,
    ApproveRequestRequest,
)
from medischedule.features.requests.service import SurgeryRequestService
from medischedule.features.messages.service import MessageService
from conftest import schedule_payload


def submission(seeded, **overrides):
    data = {
        "patient_id": seeded["patient_id"],
        "procedure_name": "Inguinal hernia repair",
        "diagnosis": "Right inguinal hernia",
        "preferred_date": "2026-03-04",
        "expected_duration": "2 hours",
        "anesthesia_type": "Spinal",
        "anesthesiologist": "Dr. Nana Adjei",
        "priority": "Semi-urgent",
    }
    data.update(overrides)
    return SubmitRequestRequest(**data)


def approval(seeded, **overrides):
    data = {"ot_id": seeded["room_a"], "start_time": "13:00", "end_time": "15:00"}
    data.update(overrides)
    return ApproveRequestRequest(**data)


async def test_doctor_submits_pending_request(store, doctor, seeded):
    result = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))

    assert result.ok
    request = await store.get("surgery_requests", result.id)
    assert request.status == "Pending"
    assert request.requesting_doctor_id == doctor.id


async def test_admin_cannot_submit(store, admin, seeded):
    result = await SurgeryRequestService.submit_request(store, admin, submission(seeded))

    assert result.kind == "forbidden"


async def test_approval_books_linked_operation(store, admin, doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))

    result = await SurgeryRequestService.approve_request(store, admin, submitted.id, approval(seeded))

    assert result.ok
    schedule = await store.get("operation_schedules", result.id)
    assert schedule.patient_id == seeded["patient_id"]
    assert schedule.doctor_id == doctor.id
    assert schedule.procedure == "Inguinal hernia repair"
    assert schedule.date == "2026-03-04"
    assert schedule.status == "scheduled"
    assert schedule.request_id == submitted.id

    request = await store.get("surgery_requests", submitted.id)
    assert request.status == "Scheduled"
    assert request.schedule_id == schedule.id


async def test_approval_notifies_doctor(store, admin, doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))
    await SurgeryRequestService.approve_request(store, admin, submitted.id, approval(seeded))

    alerts = await MessageService.list_alerts(store, doctor)

    assert len(alerts) == 1
    assert "approved" in alerts[0].text
    assert alerts[0].type == "system"


async def test_edit_after_approval_is_rejected(store, admin, doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))
    first_edit = await SurgeryRequestService.update_request(
        store, doctor, submitted.id, UpdateRequestRequest(diagnosis="Bilateral inguinal hernia")
    )
    await SurgeryRequestService.approve_request(store, admin, submitted.id, approval(seeded))

    late_edit = await SurgeryRequestService.update_request(
        store, doctor, submitted.id, UpdateRequestRequest(preferred_date="2026-03-10")
    )

    assert first_edit.ok
    assert late_edit.kind == "conflict"
    request = await store.get("surgery_requests", submitted.id)
    assert request.diagnosis == "Bilateral inguinal hernia"
    assert request.preferred_date == "2026-03-04"


async def test_other_doctor_cannot_edit_or_cancel(store, doctor, other_doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))

    edit = await SurgeryRequestService.update_request(
        store, other_doctor, submitted.id, UpdateRequestRequest(priority="Urgent")
    )
    cancel = await SurgeryRequestService.cancel_request(store, other_doctor, submitted.id)

    assert edit.kind == "conflict"
    assert cancel.kind == "conflict"
    assert (await store.get("surgery_requests", submitted.id)).status == "Pending"


async def test_failed_booking_reverts_request_to_pending(store, admin, doctor, seeded):
    await store.create("operation_schedules", schedule_payload(seeded, date="2026-03-04", start_time="14:00", end_time="16:00"), admin)
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))

    result = await SurgeryRequestService.approve_request(store, admin, submitted.id, approval(seeded))

    assert result.kind == "conflict"
    assert (await store.get("surgery_requests", submitted.id)).status == "Pending"
    assert await store.count("operation_schedules", {"request_id": submitted.id}) == 0


async def test_rejection_is_final(store, admin, doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))

    rejected = await SurgeryRequestService.reject_request(store, admin, submitted.id, "No ICU bed available")
    approved = await SurgeryRequestService.approve_request(store, admin, submitted.id, approval(seeded))

    assert rejected.ok
    assert approved.kind == "conflict"
    request = await store.get("surgery_requests", submitted.id)
    assert request.status == "Rejected"
    assert request.rejection_reason == "No ICU bed available"

    alerts = await MessageService.list_alerts(store, doctor)
    assert "No ICU bed available" in alerts[0].text


async def test_cancelled_request_cannot_be_rejected(store, admin, doctor, seeded):
    submitted = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))
    await SurgeryRequestService.cancel_request(store, doctor, submitted.id)

    result = await SurgeryRequestService.reject_request(store, admin, submitted.id)

    assert result.kind == "conflict"
    assert (await store.get("surgery_requests", submitted.id)).status == "Cancelled"


async def test_listing(store, admin, doctor, other_doctor, seeded):
    mine = await SurgeryRequestService.submit_request(store, doctor, submission(seeded))
    theirs = await SurgeryRequestService.submit_request(store, other_doctor, submission(seeded, procedure_name="Appendectomy"))
    await SurgeryRequestService.cancel_request(store, other_doctor, theirs.id)

    pending = await SurgeryRequestService.list_pending(store)
    own = await SurgeryRequestService.list_own(store, doctor)
    views = await SurgeryRequestService.to_views(store, own)

    assert [r.id for r in pending] == [mine.id]
    assert [r.id for r in own] == [mine.id]
    assert views[0].patientName == "Kwame Boateng"
    assert views[0].doctorName == "Dr. Ama Mensah"
