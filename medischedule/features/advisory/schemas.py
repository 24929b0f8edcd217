# Schedule Adjustment Advisory Feature - Schemas

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field
from medischedule.features.schedules.models import ISO_DATE_PATTERN
from medischedule.graphs.schedule_adjustment.nodes import ScheduleAdjustmentOutput


EventKind = Literal["new", "cancellation", "postponement", "emergency"]
AdvisoryErrorKind = Literal["validation", "remote", "malformed", "busy"]


class AdvisoryRequest(BaseModel):
    """
    Request schema for a schedule adjustment suggestion.
    
    Snapshots are assembled from the live store unless supplied.
    """
    event_details: str = Field(..., max_length=10000, description="Free-text description of the change")
    event_kind: EventKind = "new"
    from_date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN, description="Only include operations from this date")
    current_schedule: Optional[str] = Field(None, description="JSON list of operations")
    hospital_constraints: Optional[str] = Field(None, description="JSON object of constraints")


class AdvisoryResult(BaseModel):
    """Outcome of an advisory call. Errors are reported, never raised."""
    status: Literal["success", "error"]
    error_kind: Optional[AdvisoryErrorKind] = None
    message: Optional[str] = None
    result: Optional[ScheduleAdjustmentOutput] = None
    adjustments: Optional[Any] = None
    raw: Optional[str] = None
    
    @property
    def ok(self) -> bool:
        return self.status == "success"


class AdvisoryContextResponse(BaseModel):
    """The snapshots the advisor would be given."""
    current_schedule: str
    hospital_constraints: str
