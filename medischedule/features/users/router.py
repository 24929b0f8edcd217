# Users & Staff Feature - Router

from fastapi import APIRouter, Depends, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, get_token_identity, require_roles
from medischedule.features.auth.schemas import TokenIdentity
from medischedule.features.users.schemas import (
    RegisterProfileRequest,
    CreateStaffRequest,
    UpdateStaffRequest,
    UpdateOwnProfileRequest,
    StaffMemberResponse,
    StaffListResponse,
    DoctorResponse,
)
from medischedule.features.users.service import UserService
from medischedule.shared.exceptions import NotFoundException, raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(tags=["Users"])


async def _staff_member(store: DocumentStore, user_id: str) -> StaffMemberResponse:
    profile = await UserService.get_profile(store, user_id)
    if profile is None:
        raise NotFoundException("User not found")
    doctor = await UserService.get_doctor(store, user_id)
    return StaffMemberResponse(
        profile=UserService.profile_to_response(profile),
        doctor=UserService.doctor_to_response(doctor) if doctor else None,
    )


# ============== Self Endpoints ==============

@router.post("/users/profile", response_model=StaffMemberResponse, status_code=status.HTTP_201_CREATED)
async def register_profile(
    request: RegisterProfileRequest,
    identity: TokenIdentity = Depends(get_token_identity),
    store: DocumentStore = Depends(get_store),
):
    """
    Create the profile for a newly signed-up account.

    The account itself lives with the authentication provider; the token's
    subject becomes the profile id.
    """
    raise_for_result(await UserService.register_profile(store, identity, request))
    return await _staff_member(store, identity.id)


@router.get("/users/me", response_model=StaffMemberResponse)
async def get_me(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get the current user's profile and doctor record."""
    return await _staff_member(store, actor.id)


@router.patch("/users/me", response_model=StaffMemberResponse)
async def update_me(
    request: UpdateOwnProfileRequest,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Update the current user's settings."""
    raise_for_result(await UserService.update_own_profile(store, actor, request))
    return await _staff_member(store, actor.id)


# ============== Staff Endpoints (Admin) ==============

@router.get("/staff", response_model=StaffListResponse)
async def list_staff(
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """List all staff profiles."""
    staff = await UserService.list_staff(store)
    return StaffListResponse(staff=staff, total=len(staff))


@router.post("/staff", response_model=StaffMemberResponse, status_code=status.HTTP_201_CREATED)
async def create_staff(
    request: CreateStaffRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Register a doctor whose account already exists with the authentication provider."""
    raise_for_result(await UserService.create_staff(store, actor, request))
    return await _staff_member(store, request.user_id)


@router.patch("/staff/{user_id}", response_model=StaffMemberResponse)
async def update_staff(
    user_id: str,
    request: UpdateStaffRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Edit a staff member."""
    raise_for_result(await UserService.update_staff(store, actor, user_id, request))
    return await _staff_member(store, user_id)


@router.delete("/staff/{user_id}", response_model=MutationResult)
async def deactivate_staff(
    user_id: str,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Deactivate a staff member. Profiles are kept."""
    return raise_for_result(await UserService.deactivate_staff(store, actor, user_id))


# ============== Doctors ==============

@router.get("/doctors", response_model=list[DoctorResponse])
async def list_doctors(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """List doctors with their availability."""
    return [UserService.doctor_to_response(doctor) for doctor in await UserService.list_doctors(store)]
