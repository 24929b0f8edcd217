# Surgery Requests Feature - Service

from typing import List, Optional
from pydantic import ValidationError
from medischedule.features.messages.service import MessageService
from medischedule.features.requests.models import SurgeryRequest
from medischedule.features.requests.schemas import (
    SubmitRequestRequest,
    UpdateRequestRequest,
    ApproveRequestRequest,
    SurgeryRequestResponse,
)
from medischedule.features.schedules.schemas import CreateScheduleRequest
from medischedule.features.schedules.service import ScheduleService
from medischedule.core.logging import logger
from medischedule.shared.exceptions import NotFoundException
from medischedule.shared.schemas import Actor
from medischedule.shared.views import assemble_request_views
from medischedule.store import DocumentStore, MutationResult


class SurgeryRequestService:
    """
    Service class for the request → approval → operation workflow.

    Status changes are conditional writes on the current status, so a
    request approved by one admin cannot be rejected by another, and a
    doctor's late edit cannot land on a request that is no longer pending.
    """

    @staticmethod
    async def submit_request(store: DocumentStore, actor: Actor, request: SubmitRequestRequest) -> MutationResult:
        """File a new request in Pending state."""
        if actor.role != "doctor":
            return MutationResult.failure("forbidden", "Only doctors can request surgery")

        data = {**request.model_dump(), "requesting_doctor_id": actor.id, "status": "Pending"}
        return await store.create("surgery_requests", data, actor)

    @staticmethod
    async def update_request(
        store: DocumentStore,
        actor: Actor,
        request_id: str,
        request: UpdateRequestRequest,
    ) -> MutationResult:
        """Edit a request; only its doctor, only while pending."""
        changes = request.model_dump(exclude_unset=True)
        if not changes:
            return MutationResult.failure("validation", "No fields to update", id=request_id)

        result = await store.update(
            "surgery_requests",
            request_id,
            changes,
            actor,
            expected={"status": "Pending", "requesting_doctor_id": actor.id},
        )
        if result.kind == "conflict":
            result.message = "Only your own pending requests can be edited"
        return result

    @staticmethod
    async def cancel_request(store: DocumentStore, actor: Actor, request_id: str) -> MutationResult:
        """Withdraw a pending request."""
        result = await store.update(
            "surgery_requests",
            request_id,
            {"status": "Cancelled"},
            actor,
            action="CANCEL_SURGERY_REQUEST",
            expected={"status": "Pending", "requesting_doctor_id": actor.id},
        )
        if result.kind == "conflict":
            result.message = "Only your own pending requests can be cancelled"
        return result

    @staticmethod
    async def reject_request(
        store: DocumentStore,
        actor: Actor,
        request_id: str,
        reason: Optional[str] = None,
    ) -> MutationResult:
        """Turn down a pending request and tell the doctor."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can reject requests")

        result = await store.update(
            "surgery_requests",
            request_id,
            {"status": "Rejected", "rejection_reason": reason},
            actor,
            action="REJECT_SURGERY_REQUEST",
            expected={"status": "Pending"},
        )
        if result.kind == "conflict":
            result.message = "Request is no longer pending"
            return result
        if not result.ok:
            return result

        surgery_request = await store.get("surgery_requests", request_id)
        if surgery_request:
            text = f"Your request for {surgery_request.procedure_name} was rejected."
            if reason:
                text += f" Reason: {reason}"
            await MessageService.notify(store, actor, surgery_request.requesting_doctor_id, text)
        return result

    @staticmethod
    async def approve_request(
        store: DocumentStore,
        actor: Actor,
        request_id: str,
        approval: ApproveRequestRequest,
    ) -> MutationResult:
        """
        Approve a pending request and book the operation.

        The request moves Pending → Approved → Scheduled, and the new
        operation carries request_id. If booking fails the request goes back
        to Pending. On success the result id is the new operation's id.
        """
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can approve requests")

        surgery_request = await store.get("surgery_requests", request_id)
        if surgery_request is None:
            return MutationResult.failure("not_found", "Surgery request not found", id=request_id)
        if surgery_request.status != "Pending":
            return MutationResult.failure("conflict", f"Request is already {surgery_request.status}", id=request_id)

        try:
            booking = CreateScheduleRequest(
                procedure=approval.procedure or surgery_request.procedure_name,
                patient_id=surgery_request.patient_id,
                doctor_id=surgery_request.requesting_doctor_id,
                ot_id=approval.ot_id,
                date=approval.date or surgery_request.preferred_date,
                start_time=approval.start_time,
                end_time=approval.end_time,
                anesthesia_type=approval.anesthesia_type or surgery_request.anesthesia_type,
                anesthesiologist=approval.anesthesiologist or surgery_request.anesthesiologist or "",
                assistant_surgeon=approval.assistant_surgeon or surgery_request.assistant_surgeon,
                nurses=approval.nurses,
            )
        except ValidationError as e:
            return MutationResult.failure("validation", f"Incomplete booking details: {e.error_count()} error(s)", id=request_id)

        claimed = await store.update(
            "surgery_requests",
            request_id,
            {"status": "Approved"},
            actor,
            action="APPROVE_SURGERY_REQUEST",
            expected={"status": "Pending"},
        )
        if not claimed.ok:
            if claimed.kind == "conflict":
                claimed.message = "Request is no longer pending"
            return claimed

        booked = await ScheduleService.create_schedule(store, actor, booking, request_id=request_id)
        if not booked.ok:
            logger.warning(f"Booking for request {request_id} failed, reverting to Pending: {booked.message}")
            await store.update(
                "surgery_requests",
                request_id,
                {"status": "Pending"},
                actor,
                expected={"status": "Approved"},
            )
            return booked

        scheduled = await store.update(
            "surgery_requests",
            request_id,
            {"status": "Scheduled", "schedule_id": booked.id},
            actor,
            expected={"status": "Approved"},
        )
        if not scheduled.ok:
            logger.error(f"Operation {booked.id} booked but request {request_id} not marked Scheduled: {scheduled.message}")
            return scheduled

        await MessageService.notify(
            store,
            actor,
            surgery_request.requesting_doctor_id,
            f"Your request for {booking.procedure} was approved and scheduled on "
            f"{booking.date} {booking.start_time}-{booking.end_time}.",
        )
        logger.info(f"Request {request_id} approved as operation {booked.id}")
        return MutationResult.success(id=booked.id, data={"request_id": request_id, "schedule_id": booked.id})

    @staticmethod
    async def list_pending(store: DocumentStore) -> List[SurgeryRequest]:
        """Requests awaiting review, oldest first."""
        return await store.find("surgery_requests", {"status": "Pending"}, sort=[("created_at", 1)])

    @staticmethod
    async def list_own(store: DocumentStore, actor: Actor) -> List[SurgeryRequest]:
        """Requests filed by the acting doctor, newest first."""
        return await store.find(
            "surgery_requests",
            {"requesting_doctor_id": actor.id},
            sort=[("created_at", -1)],
        )

    @staticmethod
    async def list_all(store: DocumentStore, status: Optional[str] = None) -> List[SurgeryRequest]:
        filters = {"status": status} if status else {}
        return await store.find("surgery_requests", filters, sort=[("created_at", -1)])

    @staticmethod
    async def get_request(store: DocumentStore, actor: Actor, request_id: str) -> SurgeryRequest:
        surgery_request = await store.get("surgery_requests", request_id)
        if not surgery_request or (not actor.is_admin and surgery_request.requesting_doctor_id != actor.id):
            raise NotFoundException("Surgery request not found")
        return surgery_request

    @staticmethod
    async def to_views(store: DocumentStore, requests: List[SurgeryRequest]) -> List[SurgeryRequestResponse]:
        """Resolve patient and doctor names for display."""
        patients = await store.find("patients")
        doctors = await store.find("doctors")
        return [SurgeryRequestResponse(**view) for view in assemble_request_views(requests, patients, doctors)]
