# Operation Schedules Feature - Schemas

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from medischedule.features.schedules.models import ISO_DATE_PATTERN, TIME_PATTERN, ScheduleStatus


# ============== Create / Update ==============

class CreateScheduleRequest(BaseModel):
    """Request schema for booking an operation."""
    procedure: str = Field(..., min_length=1, max_length=200)
    patient_id: str = Field(..., min_length=1)
    doctor_id: str = Field(..., min_length=1)
    ot_id: str = Field(..., min_length=1)
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    anesthesia_type: str = Field(..., min_length=1)
    anesthesiologist: str = Field(..., min_length=1)
    assistant_surgeon: Optional[str] = None
    nurses: List[str] = Field(default_factory=list)
    remarks: Optional[str] = None
    report_url: Optional[str] = None
    drugs_used: List[str] = Field(default_factory=list)
    instruments: List[str] = Field(default_factory=list)
    
    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class UpdateScheduleRequest(BaseModel):
    """Request schema for an admin editing an operation."""
    procedure: Optional[str] = Field(None, min_length=1, max_length=200)
    patient_id: Optional[str] = Field(None, min_length=1)
    doctor_id: Optional[str] = Field(None, min_length=1)
    ot_id: Optional[str] = Field(None, min_length=1)
    date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    status: Optional[ScheduleStatus] = None
    anesthesia_type: Optional[str] = Field(None, min_length=1)
    anesthesiologist: Optional[str] = Field(None, min_length=1)
    assistant_surgeon: Optional[str] = None
    nurses: Optional[List[str]] = None
    remarks: Optional[str] = None
    report_url: Optional[str] = None
    drugs_used: Optional[List[str]] = None
    instruments: Optional[List[str]] = None


class CompleteScheduleRequest(BaseModel):
    """Request schema for the operating doctor closing an operation."""
    remarks: str = Field(..., min_length=1, description="Post-operative remarks are required")
    report_url: Optional[str] = None
    drugs_used: Optional[List[str]] = None
    instruments: Optional[List[str]] = None


class RemarksRequest(BaseModel):
    """Request schema for adding remarks without closing the operation."""
    remarks: str = Field(..., min_length=1)


# ============== Responses ==============

class ScheduleResponse(BaseModel):
    """Response schema for an operation, with display names resolved."""
    id: str
    patient_id: str
    doctor_id: str
    ot_id: str
    date: str
    start_time: str
    end_time: str
    procedure: str
    status: str
    anesthesia_type: str
    anesthesiologist: str
    assistant_surgeon: Optional[str] = None
    nurses: List[str] = []
    remarks: Optional[str] = None
    report_url: Optional[str] = None
    drugs_used: List[str] = []
    instruments: List[str] = []
    request_id: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime
    
    # Resolved at read time
    patientName: Optional[str] = None
    doctorName: Optional[str] = None
    roomNumber: Optional[str] = None


class ScheduleListResponse(BaseModel):
    """Response schema for list of operations."""
    schedules: List[ScheduleResponse]
    total: int


class RoomConflictResponse(BaseModel):
    """Operations already booked in a room over a time range."""
    conflicts: List[ScheduleResponse]
    has_conflict: bool
