# Operation Schedules Feature - Models

from typing import List, Literal, Optional
from beanie import Indexed
from pydantic import Field
from medischedule.shared.models import StoreDocument, TimestampMixin


ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^([01]\d|2[0-3]):([0-5]\d)$"

ScheduleStatus = Literal["scheduled", "completed", "cancelled"]


class OperationSchedule(StoreDocument, TimestampMixin):
    """A booked operation. Patient, doctor and room are soft references."""
    
    patient_id: Indexed(str)
    doctor_id: Indexed(str)
    ot_id: Indexed(str)
    
    date: str = Field(..., pattern=ISO_DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    
    procedure: str = Field(..., min_length=1)
    status: ScheduleStatus = "scheduled"
    
    anesthesia_type: str
    anesthesiologist: str
    assistant_surgeon: Optional[str] = None
    nurses: List[str] = Field(default_factory=list)
    
    # Filled in by the operating doctor
    remarks: Optional[str] = None
    report_url: Optional[str] = None
    drugs_used: List[str] = Field(default_factory=list)
    instruments: List[str] = Field(default_factory=list)
    
    # Surgery request this operation was approved from, if any
    request_id: Optional[str] = None
    
    created_by: str
    
    class Settings:
        name = "operation_schedules"
        use_state_management = True
        indexes = [
            [("ot_id", 1), ("date", 1), ("status", 1)],
            [("doctor_id", 1), ("date", 1)],
        ]
