# Surgery Requests Feature - Schemas

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from medischedule.features.requests.models import Priority
from medischedule.features.schedules.models import ISO_DATE_PATTERN, TIME_PATTERN


# ============== Submit / Edit (doctor) ==============

class SubmitRequestRequest(BaseModel):
    """Request schema for a doctor asking for theater time."""
    patient_id: str = Field(..., min_length=1)
    procedure_name: str = Field(..., min_length=1, max_length=200)
    diagnosis: str = Field(..., min_length=1, max_length=2000)
    preferred_date: str = Field(..., pattern=ISO_DATE_PATTERN)
    expected_duration: str = Field(..., min_length=1, description="e.g. 2 hours")
    anesthesia_type: str = Field(..., min_length=1)
    priority: Priority = "Routine"
    assistant_surgeon: Optional[str] = None
    anesthesiologist: Optional[str] = None
    nurses_needed: Optional[str] = None
    required_instruments: Optional[str] = None
    required_drugs: Optional[str] = None
    uploads_url: Optional[str] = None
    additional_notes: Optional[str] = None


class UpdateRequestRequest(BaseModel):
    """Request schema for editing a pending request."""
    patient_id: Optional[str] = Field(None, min_length=1)
    procedure_name: Optional[str] = Field(None, min_length=1, max_length=200)
    diagnosis: Optional[str] = Field(None, min_length=1, max_length=2000)
    preferred_date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    expected_duration: Optional[str] = Field(None, min_length=1)
    anesthesia_type: Optional[str] = Field(None, min_length=1)
    priority: Optional[Priority] = None
    assistant_surgeon: Optional[str] = None
    anesthesiologist: Optional[str] = None
    nurses_needed: Optional[str] = None
    required_instruments: Optional[str] = None
    required_drugs: Optional[str] = None
    uploads_url: Optional[str] = None
    additional_notes: Optional[str] = None


# ============== Review (admin) ==============

class ApproveRequestRequest(BaseModel):
    """
    Booking details supplied by the admin when approving.
    
    Unset fields fall back to what the doctor requested.
    """
    ot_id: str = Field(..., min_length=1)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    procedure: Optional[str] = Field(None, min_length=1)
    anesthesia_type: Optional[str] = None
    anesthesiologist: Optional[str] = None
    assistant_surgeon: Optional[str] = None
    nurses: List[str] = Field(default_factory=list)
    
    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class RejectRequestRequest(BaseModel):
    """Optional reason given to the requesting doctor."""
    reason: Optional[str] = Field(None, max_length=1000)


# ============== Responses ==============

class SurgeryRequestResponse(BaseModel):
    """Response schema for a surgery request with names resolved."""
    id: str
    requesting_doctor_id: str
    patient_id: str
    procedure_name: str
    diagnosis: str
    preferred_date: str
    expected_duration: str
    anesthesia_type: str
    priority: str
    assistant_surgeon: Optional[str] = None
    anesthesiologist: Optional[str] = None
    nurses_needed: Optional[str] = None
    required_instruments: Optional[str] = None
    required_drugs: Optional[str] = None
    uploads_url: Optional[str] = None
    additional_notes: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    schedule_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    
    patientName: Optional[str] = None
    doctorName: Optional[str] = None


class SurgeryRequestListResponse(BaseModel):
    """Response schema for list of surgery requests."""
    requests: List[SurgeryRequestResponse]
    total: int


class ApprovalResponse(BaseModel):
    """Result of approving a request."""
    request: SurgeryRequestResponse
    schedule_id: str
