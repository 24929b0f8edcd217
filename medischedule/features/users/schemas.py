# Users & Staff Feature - Schemas

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from medischedule.features.users.models import Weekday


# ============== Signup ==============

class RegisterProfileRequest(BaseModel):
    """Profile details submitted right after signing up with the auth provider."""
    email: Optional[EmailStr] = None
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    role: Literal["admin", "doctor"]
    
    # Doctor details, ignored for admins
    specialization: str = ""
    phone: str = Field("", max_length=20)
    shift_hours: str = ""
    availability: List[Weekday] = Field(default_factory=list)


# ============== Staff (admin) ==============

class CreateStaffRequest(BaseModel):
    """Request schema for an admin registering a doctor account."""
    user_id: str = Field(..., min_length=1, description="Identifier issued by the authentication provider")
    email: EmailStr
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    specialization: str = Field(..., min_length=1)
    phone: str = Field("", max_length=20)
    shift_hours: str = Field(..., min_length=1)
    availability: List[Weekday] = Field(..., min_length=1)


class UpdateStaffRequest(BaseModel):
    """Request schema for an admin editing a staff member."""
    firstName: Optional[str] = Field(None, min_length=1, max_length=100)
    lastName: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[Literal["admin", "doctor"]] = None
    isActive: Optional[bool] = None
    specialization: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    shift_hours: Optional[str] = None
    availability: Optional[List[Weekday]] = None
    avatarUrl: Optional[str] = None
    verified: Optional[bool] = None


# ============== Settings (self) ==============

class UpdateOwnProfileRequest(BaseModel):
    """Request schema for the settings page."""
    firstName: Optional[str] = Field(None, min_length=1, max_length=100)
    lastName: Optional[str] = Field(None, min_length=1, max_length=100)
    specialization: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, max_length=20)
    shift_hours: Optional[str] = None
    availability: Optional[List[Weekday]] = None
    avatarUrl: Optional[str] = None


# ============== Responses ==============

class UserProfileResponse(BaseModel):
    """Response schema for a user profile."""
    id: str
    email: str
    firstName: str
    lastName: str
    role: str
    isActive: bool
    created_at: datetime


class DoctorResponse(BaseModel):
    """Response schema for a doctor record."""
    id: str
    name: str
    email: Optional[str] = None
    phone: str = ""
    specialization: str = ""
    shift_hours: str = ""
    availability: List[str] = []
    avatarUrl: str = ""
    verified: bool = False


class StaffMemberResponse(BaseModel):
    """A user profile with its doctor record, if any."""
    profile: UserProfileResponse
    doctor: Optional[DoctorResponse] = None


class StaffListResponse(BaseModel):
    """Response schema for list of staff."""
    staff: List[StaffMemberResponse]
    total: int
