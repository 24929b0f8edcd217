# Surgery Requests Feature - Models

from typing import Literal, Optional
from beanie import Indexed
from pydantic import Field
from medischedule.shared.models import StoreDocument, TimestampMixin


RequestStatus = Literal["Pending", "Approved", "Scheduled", "Rejected", "Cancelled"]
Priority = Literal["Routine", "Semi-urgent", "Urgent", "Emergency"]


class SurgeryRequest(StoreDocument, TimestampMixin):
    """A doctor's request for theater time, reviewed by an admin."""
    
    requesting_doctor_id: Indexed(str)
    patient_id: str
    
    procedure_name: str = Field(..., min_length=1)
    diagnosis: str = Field(..., min_length=1)
    preferred_date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    expected_duration: str = Field(..., min_length=1)
    anesthesia_type: str = Field(..., min_length=1)
    priority: Priority = "Routine"
    
    # Staffing and resources, free text
    assistant_surgeon: Optional[str] = None
    anesthesiologist: Optional[str] = None
    nurses_needed: Optional[str] = None
    required_instruments: Optional[str] = None
    required_drugs: Optional[str] = None
    uploads_url: Optional[str] = None
    additional_notes: Optional[str] = None
    
    status: RequestStatus = "Pending"
    rejection_reason: Optional[str] = None
    
    # Operation created on approval
    schedule_id: Optional[str] = None
    
    class Settings:
        name = "surgery_requests"
        use_state_management = True
        indexes = [
            [("status", 1), ("created_at", -1)],
        ]
