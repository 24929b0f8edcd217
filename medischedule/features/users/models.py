# Users & Staff Feature - Models

from typing import Optional, List, Literal
from beanie import Indexed
from pydantic import EmailStr, Field
from medischedule.shared.models import StoreDocument, TimestampMixin


Weekday = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class UserProfile(StoreDocument, TimestampMixin):
    """
    Profile of an authenticated user.

    The id is the identifier issued by the authentication provider.
    """
    
    email: Indexed(EmailStr)
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    role: Literal["admin", "doctor"]
    isActive: bool = True
    
    class Settings:
        name = "users"
        use_state_management = True
        indexes = [
            [("role", 1), ("isActive", 1)],
        ]
    
    class Config:
        json_schema_extra = {
            "example": {
                "email": "a.mensah@hospital.org",
                "firstName": "Ama",
                "lastName": "Mensah",
                "role": "doctor",
                "isActive": True,
            }
        }


class Doctor(StoreDocument, TimestampMixin):
    """Doctor record sharing its id with the linked UserProfile."""
    
    name: str
    email: Optional[EmailStr] = None
    phone: str = ""
    specialization: str = ""
    shift_hours: str = ""
    availability: List[Weekday] = Field(default_factory=list)
    avatarUrl: str = ""
    verified: bool = False
    
    class Settings:
        name = "doctors"
        use_state_management = True
