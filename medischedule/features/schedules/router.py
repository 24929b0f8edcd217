# Operation Schedules Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.schedules.models import ISO_DATE_PATTERN, TIME_PATTERN, ScheduleStatus
from medischedule.features.schedules.schemas import (
    CreateScheduleRequest,
    UpdateScheduleRequest,
    CompleteScheduleRequest,
    RemarksRequest,
    ScheduleResponse,
    ScheduleListResponse,
    RoomConflictResponse,
)
from medischedule.features.schedules.service import ScheduleService
from medischedule.shared.exceptions import raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(prefix="/schedules", tags=["Schedules"])


async def _view(store: DocumentStore, actor: Actor, schedule_id: str) -> ScheduleResponse:
    schedule = await ScheduleService.get_schedule(store, actor, schedule_id)
    return (await ScheduleService.to_views(store, [schedule]))[0]


@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    request: CreateScheduleRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Book an operation.

    Refused with 409 when the room is already booked for an overlapping time.
    """
    result = raise_for_result(await ScheduleService.create_schedule(store, actor, request))
    return await _view(store, actor, result.id)


@router.get("", response_model=ScheduleListResponse)
async def list_schedules(
    date: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN),
    status: Optional[ScheduleStatus] = Query(None),
    ot_id: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """
    List operations with patient, doctor and room names.

    Doctors only see operations assigned to them.
    """
    schedules = await ScheduleService.list_schedules(store, actor, date=date, status=status, ot_id=ot_id)
    views = await ScheduleService.to_views(store, schedules)
    return ScheduleListResponse(schedules=views, total=len(views))


@router.get("/conflicts", response_model=RoomConflictResponse)
async def check_room_conflicts(
    ot_id: str,
    date: str = Query(..., pattern=ISO_DATE_PATTERN),
    start_time: str = Query(..., pattern=TIME_PATTERN),
    end_time: str = Query(..., pattern=TIME_PATTERN),
    exclude_id: Optional[str] = None,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Show scheduled operations overlapping a proposed booking."""
    conflicts = await ScheduleService.find_room_conflicts(store, ot_id, date, start_time, end_time, exclude_id)
    views = await ScheduleService.to_views(store, conflicts)
    return RoomConflictResponse(conflicts=views, has_conflict=bool(views))


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get an operation."""
    return await _view(store, actor, schedule_id)


@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: str,
    request: UpdateScheduleRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Edit an operation."""
    raise_for_result(await ScheduleService.update_schedule(store, actor, schedule_id, request))
    return await _view(store, actor, schedule_id)


@router.post("/{schedule_id}/complete", response_model=ScheduleResponse)
async def complete_schedule(
    schedule_id: str,
    request: CompleteScheduleRequest,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Mark an operation completed. Assigned doctor only; remarks required."""
    raise_for_result(await ScheduleService.complete_schedule(store, actor, schedule_id, request))
    return await _view(store, actor, schedule_id)


@router.post("/{schedule_id}/remarks", response_model=ScheduleResponse)
async def add_remarks(
    schedule_id: str,
    request: RemarksRequest,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Record remarks on an operation."""
    raise_for_result(await ScheduleService.add_remarks(store, actor, schedule_id, request.remarks))
    return await _view(store, actor, schedule_id)


@router.post("/{schedule_id}/cancel", response_model=ScheduleResponse)
async def cancel_schedule(
    schedule_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Cancel a scheduled operation."""
    raise_for_result(await ScheduleService.cancel_schedule(store, actor, schedule_id))
    return await _view(store, actor, schedule_id)


@router.delete("/{schedule_id}", response_model=MutationResult)
async def delete_schedule(
    schedule_id: str,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Delete an operation."""
    return raise_for_result(await ScheduleService.delete_schedule(store, actor, schedule_id))
