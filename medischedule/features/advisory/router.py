# Schedule Adjustment Advisory Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query
from medischedule.database import get_store
from medischedule.features.auth.dependencies import require_roles
from medischedule.features.advisory.schemas import AdvisoryRequest, AdvisoryResult, AdvisoryContextResponse
from medischedule.features.advisory.service import AdvisoryService
from medischedule.features.schedules.models import ISO_DATE_PATTERN
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore


router = APIRouter(prefix="/advisory", tags=["Advisory"])


@router.post("/schedule-adjustment", response_model=AdvisoryResult)
async def suggest_schedule_adjustment(
    request: AdvisoryRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Suggest how to adjust the schedule for a new surgery, cancellation,
    postponement or emergency.

    Always answers 200; failures come back as an error result.
    """
    return await AdvisoryService.suggest_adjustment(store, actor, request)


@router.get("/context", response_model=AdvisoryContextResponse)
async def get_advisory_context(
    from_date: Optional[str] = Query(None, pattern=ISO_DATE_PATTERN),
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Preview the schedule and constraints the advisor would see."""
    return AdvisoryContextResponse(
        current_schedule=await AdvisoryService.build_schedule_snapshot(store, from_date),
        hospital_constraints=await AdvisoryService.build_hospital_constraints(store),
    )
