# Operation Schedules Feature - Service

from typing import Dict, List, Optional
from medischedule.features.schedules.models import OperationSchedule
from medischedule.features.schedules.schemas import (
    CreateScheduleRequest,
    UpdateScheduleRequest,
    CompleteScheduleRequest,
    ScheduleResponse,
)
from medischedule.core.logging import logger
from medischedule.shared.exceptions import NotFoundException
from medischedule.shared.schemas import Actor
from medischedule.shared.views import assemble_schedule_views
from medischedule.store import DocumentStore, MutationResult


# scheduled is the only non-terminal status
ALLOWED_TRANSITIONS: Dict[str, set] = {
    "scheduled": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

TIMING_FIELDS = {"ot_id", "date", "start_time", "end_time"}


def can_transition(current: str, new: str) -> bool:
    return new == current or new in ALLOWED_TRANSITIONS.get(current, set())


def times_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open HH:MM ranges; zero-padded strings compare chronologically."""
    return start_a < end_b and start_b < end_a


class ScheduleService:
    """Service class for booking and closing operations."""

    @staticmethod
    async def find_room_conflicts(
        store: DocumentStore,
        ot_id: str,
        date: str,
        start_time: str,
        end_time: str,
        exclude_id: Optional[str] = None,
    ) -> List[OperationSchedule]:
        """
        Scheduled operations in the same room and date overlapping the range.

        This is a plain read; a concurrent writer can still slip in between
        the check and the write.
        """
        booked = await store.find(
            "operation_schedules",
            {"ot_id": ot_id, "date": date, "status": "scheduled"},
            sort=[("start_time", 1)],
        )
        return [
            schedule for schedule in booked
            if schedule.id != exclude_id
            and times_overlap(start_time, end_time, schedule.start_time, schedule.end_time)
        ]

    @staticmethod
    async def create_schedule(
        store: DocumentStore,
        actor: Actor,
        request: CreateScheduleRequest,
        request_id: Optional[str] = None,
    ) -> MutationResult:
        """Book an operation after checking the room is free."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can schedule operations")

        conflicts = await ScheduleService.find_room_conflicts(
            store, request.ot_id, request.date, request.start_time, request.end_time
        )
        if conflicts:
            clashing = ", ".join(f"{c.procedure} {c.start_time}-{c.end_time}" for c in conflicts)
            logger.warning(f"Room {request.ot_id} double-booking refused on {request.date}: {clashing}")
            return MutationResult.failure("conflict", f"Room is already booked: {clashing}")

        data = request.model_dump()
        data.update({"status": "scheduled", "created_by": actor.id, "request_id": request_id})
        return await store.create("operation_schedules", data, actor)

    @staticmethod
    async def update_schedule(
        store: DocumentStore,
        actor: Actor,
        schedule_id: str,
        request: UpdateScheduleRequest,
    ) -> MutationResult:
        """
        Admin edit. Status may only move forward from scheduled, and
        completing requires remarks.
        """
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can edit operations")

        current = await store.get("operation_schedules", schedule_id)
        if current is None:
            return MutationResult.failure("not_found", "Operation not found", id=schedule_id)

        changes = request.model_dump(exclude_unset=True)
        if not changes:
            return MutationResult.failure("validation", "No fields to update", id=schedule_id)

        new_status = changes.get("status", current.status)
        if not can_transition(current.status, new_status):
            logger.warning(f"Refused status change {current.status} -> {new_status} on {schedule_id}")
            return MutationResult.failure(
                "conflict", f"Cannot change status from {current.status} to {new_status}", id=schedule_id
            )
        remarks = changes["remarks"] if "remarks" in changes else current.remarks
        if new_status == "completed" and not (remarks or "").strip():
            return MutationResult.failure("validation", "Remarks are required to complete an operation", id=schedule_id)

        if TIMING_FIELDS & changes.keys():
            if current.status != "scheduled":
                return MutationResult.failure("conflict", "Only scheduled operations can be moved", id=schedule_id)

            merged = {field: changes.get(field, getattr(current, field)) for field in TIMING_FIELDS}
            if merged["end_time"] <= merged["start_time"]:
                return MutationResult.failure("validation", "end_time must be after start_time", id=schedule_id)

            conflicts = await ScheduleService.find_room_conflicts(
                store, merged["ot_id"], merged["date"], merged["start_time"], merged["end_time"],
                exclude_id=schedule_id,
            )
            if conflicts and new_status == "scheduled":
                clashing = ", ".join(f"{c.procedure} {c.start_time}-{c.end_time}" for c in conflicts)
                return MutationResult.failure("conflict", f"Room is already booked: {clashing}", id=schedule_id)

        expected = {"status": current.status} if "status" in changes else None
        return await store.update("operation_schedules", schedule_id, changes, actor, expected=expected)

    @staticmethod
    async def complete_schedule(
        store: DocumentStore,
        actor: Actor,
        schedule_id: str,
        request: CompleteScheduleRequest,
    ) -> MutationResult:
        """Close an operation. Only the assigned doctor, only from scheduled."""
        current = await store.get("operation_schedules", schedule_id)
        if current is None:
            return MutationResult.failure("not_found", "Operation not found", id=schedule_id)
        if current.doctor_id != actor.id:
            return MutationResult.failure("forbidden", "Only the assigned doctor can complete this operation", id=schedule_id)
        if not request.remarks.strip():
            return MutationResult.failure("validation", "Remarks are required to complete an operation", id=schedule_id)

        changes = {"status": "completed", **request.model_dump(exclude_none=True)}
        result = await store.update(
            "operation_schedules",
            schedule_id,
            changes,
            actor,
            action="COMPLETE_SCHEDULE",
            expected={"status": "scheduled", "doctor_id": actor.id},
        )
        if result.kind == "conflict":
            result.message = "Operation is no longer scheduled"
        return result

    @staticmethod
    async def add_remarks(store: DocumentStore, actor: Actor, schedule_id: str, remarks: str) -> MutationResult:
        """Let the assigned doctor record remarks without changing status."""
        current = await store.get("operation_schedules", schedule_id)
        if current is None:
            return MutationResult.failure("not_found", "Operation not found", id=schedule_id)
        if current.doctor_id != actor.id and not actor.is_admin:
            return MutationResult.failure("forbidden", "Only the assigned doctor can add remarks", id=schedule_id)
        if current.status == "completed" and not remarks.strip():
            return MutationResult.failure("validation", "A completed operation must keep its remarks", id=schedule_id)

        return await store.update("operation_schedules", schedule_id, {"remarks": remarks}, actor)

    @staticmethod
    async def cancel_schedule(store: DocumentStore, actor: Actor, schedule_id: str) -> MutationResult:
        """Cancel a scheduled operation (admin or the assigned doctor)."""
        current = await store.get("operation_schedules", schedule_id)
        if current is None:
            return MutationResult.failure("not_found", "Operation not found", id=schedule_id)
        if not actor.is_admin and current.doctor_id != actor.id:
            return MutationResult.failure("forbidden", "You cannot cancel this operation", id=schedule_id)

        result = await store.update(
            "operation_schedules",
            schedule_id,
            {"status": "cancelled"},
            actor,
            action="CANCEL_SCHEDULE",
            expected={"status": "scheduled"},
        )
        if result.kind == "conflict":
            result.message = "Operation is no longer scheduled"
        return result

    @staticmethod
    async def delete_schedule(store: DocumentStore, actor: Actor, schedule_id: str) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can delete operations")
        return await store.delete("operation_schedules", schedule_id, actor)

    @staticmethod
    async def list_schedules(
        store: DocumentStore,
        actor: Actor,
        date: Optional[str] = None,
        status: Optional[str] = None,
        ot_id: Optional[str] = None,
    ) -> List[OperationSchedule]:
        """Admins see every operation, doctors only their own."""
        filters = {}
        if not actor.is_admin:
            filters["doctor_id"] = actor.id
        if date:
            filters["date"] = date
        if status:
            filters["status"] = status
        if ot_id:
            filters["ot_id"] = ot_id
        return await store.find("operation_schedules", filters, sort=[("date", 1), ("start_time", 1)])

    @staticmethod
    async def get_schedule(store: DocumentStore, actor: Actor, schedule_id: str) -> OperationSchedule:
        schedule = await store.get("operation_schedules", schedule_id)
        if not schedule or (not actor.is_admin and schedule.doctor_id != actor.id):
            raise NotFoundException("Operation not found")
        return schedule

    @staticmethod
    async def to_views(store: DocumentStore, schedules: List[OperationSchedule]) -> List[ScheduleResponse]:
        """Resolve patient, doctor and room names for display."""
        patients = await store.find("patients")
        doctors = await store.find("doctors")
        rooms = await store.find("ot_rooms")
        return [
            ScheduleResponse(**view)
            for view in assemble_schedule_views(schedules, patients, doctors, rooms)
        ]
