"""LangGraph state schema for the schedule adjustment workflow."""

from typing import Any, Optional, TypedDict


class ScheduleAdjustmentState(TypedDict, total=False):
    """State schema for the schedule adjustment workflow."""
    
    # Input - provided when starting the workflow
    current_schedule: str  # JSON list of scheduled operations
    hospital_constraints: str  # JSON object: rooms, doctors, inventory, hours
    event_details: str
    event_kind: str  # "new", "cancellation", "postponement", "emergency"
    
    # Model output before validation
    output: Any
    
    # Parsed suggestion
    result: Optional[dict]
    adjustments: Any
    raw: Optional[str]
    
    # "completed" or "failed"
    status: str
    error_kind: Optional[str]  # "validation", "remote", "malformed"
    message: Optional[str]
