# Users & Staff Feature - Service

from typing import Dict, List, Optional
from medischedule.features.auth.schemas import TokenIdentity
from medischedule.features.users.models import UserProfile, Doctor
from medischedule.features.users.schemas import (
    RegisterProfileRequest,
    CreateStaffRequest,
    UpdateStaffRequest,
    UpdateOwnProfileRequest,
    UserProfileResponse,
    DoctorResponse,
    StaffMemberResponse,
)
from medischedule.core.logging import logger
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


PROFILE_FIELDS = {"firstName", "lastName", "role", "isActive"}
DOCTOR_FIELDS = {"specialization", "phone", "shift_hours", "availability", "avatarUrl", "verified"}


class UserService:
    """Service class for user profiles and staff management."""

    @staticmethod
    async def register_profile(
        store: DocumentStore,
        identity: TokenIdentity,
        request: RegisterProfileRequest,
    ) -> MutationResult:
        """
        Create the profile of a freshly signed-up user.

        Doctors also get a doctor record under the same id.
        """
        existing = await store.get("users", identity.id)
        if existing:
            return MutationResult.failure("conflict", "Profile already exists", id=identity.id)

        email = request.email or identity.email
        if not email:
            return MutationResult.failure("validation", "An email address is required")

        actor = Actor(id=identity.id, email=email, role=request.role)
        return await UserService._create_user(
            store,
            actor,
            user_id=identity.id,
            email=email,
            first_name=request.firstName,
            last_name=request.lastName,
            role=request.role,
            doctor_fields={
                "specialization": request.specialization,
                "phone": request.phone,
                "shift_hours": request.shift_hours,
                "availability": request.availability,
            },
        )

    @staticmethod
    async def create_staff(store: DocumentStore, actor: Actor, request: CreateStaffRequest) -> MutationResult:
        """Register a doctor account on behalf of an admin."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can add staff")

        existing = await store.get("users", request.user_id)
        if existing:
            return MutationResult.failure("conflict", "A staff member with this account already exists", id=request.user_id)

        return await UserService._create_user(
            store,
            actor,
            user_id=request.user_id,
            email=request.email,
            first_name=request.firstName,
            last_name=request.lastName,
            role="doctor",
            doctor_fields={
                "specialization": request.specialization,
                "phone": request.phone,
                "shift_hours": request.shift_hours,
                "availability": request.availability,
            },
        )

    @staticmethod
    async def _create_user(
        store: DocumentStore,
        actor: Actor,
        user_id: str,
        email: str,
        first_name: str,
        last_name: str,
        role: str,
        doctor_fields: Dict,
    ) -> MutationResult:
        result = await store.create(
            "users",
            {"email": email, "firstName": first_name, "lastName": last_name, "role": role, "isActive": True},
            actor,
            action="CREATE_STAFF",
            doc_id=user_id,
        )
        if not result.ok or role != "doctor":
            return result

        doctor_result = await store.create(
            "doctors",
            {"name": f"{first_name} {last_name}", "email": email, **doctor_fields},
            actor,
            action="CREATE_STAFF",
            doc_id=user_id,
        )
        if not doctor_result.ok:
            # Keep users and doctors in step
            logger.error(f"Doctor record for {user_id} failed, removing profile: {doctor_result.message}")
            await store.delete("users", user_id, actor, action="DELETE_STAFF")
            return doctor_result

        return result

    @staticmethod
    async def get_profile(store: DocumentStore, user_id: str) -> Optional[UserProfile]:
        return await store.get("users", user_id)

    @staticmethod
    async def get_doctor(store: DocumentStore, doctor_id: str) -> Optional[Doctor]:
        return await store.get("doctors", doctor_id)

    @staticmethod
    async def list_doctors(store: DocumentStore) -> List[Doctor]:
        return await store.find("doctors", sort=[("name", 1)])

    @staticmethod
    async def list_staff(store: DocumentStore) -> List[StaffMemberResponse]:
        """List every profile with its doctor record."""
        profiles = await store.find("users", sort=[("lastName", 1), ("firstName", 1)])
        doctors = {doctor.id: doctor for doctor in await store.find("doctors")}

        staff = [
            StaffMemberResponse(
                profile=UserService.profile_to_response(profile),
                doctor=UserService.doctor_to_response(doctors[profile.id]) if profile.id in doctors else None,
            )
            for profile in profiles
        ]
        return staff

    @staticmethod
    async def update_own_profile(
        store: DocumentStore,
        actor: Actor,
        request: UpdateOwnProfileRequest,
    ) -> MutationResult:
        """Settings page update for the acting user."""
        return await UserService._apply_update(store, actor, actor.id, request.model_dump(exclude_unset=True))

    @staticmethod
    async def update_staff(
        store: DocumentStore,
        actor: Actor,
        user_id: str,
        request: UpdateStaffRequest,
    ) -> MutationResult:
        """Admin edit of any staff member."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can edit staff")

        changes = request.model_dump(exclude_unset=True)
        if user_id == actor.id and (changes.get("isActive") is False or changes.get("role") == "doctor"):
            return MutationResult.failure("validation", "Admins cannot demote or deactivate themselves")

        return await UserService._apply_update(store, actor, user_id, changes)

    @staticmethod
    async def deactivate_staff(store: DocumentStore, actor: Actor, user_id: str) -> MutationResult:
        """Soft-delete a staff member; profiles are never removed."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can remove staff")
        if user_id == actor.id:
            return MutationResult.failure("validation", "Admins cannot deactivate themselves")

        return await store.update("users", user_id, {"isActive": False}, actor, action="DELETE_STAFF")

    @staticmethod
    async def _apply_update(store: DocumentStore, actor: Actor, user_id: str, changes: Dict) -> MutationResult:
        profile = await store.get("users", user_id)
        if profile is None:
            return MutationResult.failure("not_found", "User not found", id=user_id)

        profile_changes = {key: value for key, value in changes.items() if key in PROFILE_FIELDS}
        doctor_changes = {key: value for key, value in changes.items() if key in DOCTOR_FIELDS}

        if "firstName" in changes or "lastName" in changes:
            first_name = changes.get("firstName", profile.firstName)
            last_name = changes.get("lastName", profile.lastName)
            doctor_changes["name"] = f"{first_name} {last_name}"

        if profile_changes:
            result = await store.update("users", user_id, profile_changes, actor, action="UPDATE_STAFF")
            if not result.ok:
                return result

        role = profile_changes.get("role", profile.role)
        if doctor_changes and role == "doctor":
            doctor = await store.get("doctors", user_id)
            if doctor is None:
                # Promoted to doctor, or a profile created before its doctor record
                doctor_changes.setdefault("name", f"{profile.firstName} {profile.lastName}")
                return await store.create(
                    "doctors",
                    {"email": profile.email, **doctor_changes},
                    actor,
                    action="UPDATE_STAFF",
                    doc_id=user_id,
                )
            return await store.update("doctors", user_id, doctor_changes, actor, action="UPDATE_STAFF")

        return MutationResult.success(id=user_id)

    @staticmethod
    def profile_to_response(profile: UserProfile) -> UserProfileResponse:
        """Convert profile document to response schema."""
        return UserProfileResponse(
            id=profile.id,
            email=profile.email,
            firstName=profile.firstName,
            lastName=profile.lastName,
            role=profile.role,
            isActive=profile.isActive,
            created_at=profile.created_at,
        )

    @staticmethod
    def doctor_to_response(doctor: Doctor) -> DoctorResponse:
        """Convert doctor document to response schema."""
        return DoctorResponse(**doctor.model_dump(include=set(DoctorResponse.model_fields)))
