# Surgery Requests Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.requests.models import RequestStatus
from medischedule.features.requests.schemas import (
    SubmitRequestRequest,
    UpdateRequestRequest,
    ApproveRequestRequest,
    RejectRequestRequest,
    SurgeryRequestResponse,
    SurgeryRequestListResponse,
    ApprovalResponse,
)
from medischedule.features.requests.service import SurgeryRequestService
from medischedule.shared.exceptions import raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore


router = APIRouter(prefix="/requests", tags=["Surgery Requests"])


async def _view(store: DocumentStore, actor: Actor, request_id: str) -> SurgeryRequestResponse:
    surgery_request = await SurgeryRequestService.get_request(store, actor, request_id)
    return (await SurgeryRequestService.to_views(store, [surgery_request]))[0]


# ============== Doctor Endpoints ==============

@router.post("", response_model=SurgeryRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    request: SubmitRequestRequest,
    actor: Actor = Depends(require_roles("doctor")),
    store: DocumentStore = Depends(get_store),
):
    """Ask for theater time. The request starts out Pending."""
    result = raise_for_result(await SurgeryRequestService.submit_request(store, actor, request))
    return await _view(store, actor, result.id)


@router.get("/mine", response_model=SurgeryRequestListResponse)
async def list_my_requests(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Requests filed by the current doctor."""
    views = await SurgeryRequestService.to_views(store, await SurgeryRequestService.list_own(store, actor))
    return SurgeryRequestListResponse(requests=views, total=len(views))


@router.patch("/{request_id}", response_model=SurgeryRequestResponse)
async def update_request(
    request_id: str,
    request: UpdateRequestRequest,
    actor: Actor = Depends(require_roles("doctor")),
    store: DocumentStore = Depends(get_store),
):
    """Edit a pending request."""
    raise_for_result(await SurgeryRequestService.update_request(store, actor, request_id, request))
    return await _view(store, actor, request_id)


@router.post("/{request_id}/cancel", response_model=SurgeryRequestResponse)
async def cancel_request(
    request_id: str,
    actor: Actor = Depends(require_roles("doctor")),
    store: DocumentStore = Depends(get_store),
):
    """Withdraw a pending request."""
    raise_for_result(await SurgeryRequestService.cancel_request(store, actor, request_id))
    return await _view(store, actor, request_id)


# ============== Review Endpoints (Admin) ==============

@router.get("", response_model=SurgeryRequestListResponse)
async def list_requests(
    status: Optional[RequestStatus] = Query(None, description="Defaults to Pending"),
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Requests awaiting review, or every request in the given status."""
    if status is None or status == "Pending":
        requests = await SurgeryRequestService.list_pending(store)
    else:
        requests = await SurgeryRequestService.list_all(store, status)
    views = await SurgeryRequestService.to_views(store, requests)
    return SurgeryRequestListResponse(requests=views, total=len(views))


@router.post("/{request_id}/approve", response_model=ApprovalResponse)
async def approve_request(
    request_id: str,
    request: ApproveRequestRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """
    Approve a request and book its operation.

    409 when the request is no longer pending or the room is taken.
    """
    result = raise_for_result(await SurgeryRequestService.approve_request(store, actor, request_id, request))
    return ApprovalResponse(request=await _view(store, actor, request_id), schedule_id=result.id)


@router.post("/{request_id}/reject", response_model=SurgeryRequestResponse)
async def reject_request(
    request_id: str,
    request: RejectRequestRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Reject a pending request."""
    raise_for_result(await SurgeryRequestService.reject_request(store, actor, request_id, request.reason))
    return await _view(store, actor, request_id)


@router.get("/{request_id}", response_model=SurgeryRequestResponse)
async def get_request(
    request_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get a request. Doctors can only open their own."""
    return await _view(store, actor, request_id)
