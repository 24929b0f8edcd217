# Reports & Dashboards Feature - Schemas

from typing import List, Optional
from pydantic import BaseModel
from medischedule.features.schedules.schemas import ScheduleResponse


# ============== Reports ==============

class RoomUtilization(BaseModel):
    """Operations held in one room during one month."""
    ot_id: str
    roomNumber: str
    month: str  # YYYY-MM
    surgeries: int
    booked_minutes: int


class UtilizationReportResponse(BaseModel):
    """Response schema for OT utilization."""
    month: Optional[str] = None
    rooms: List[RoomUtilization]


class CountItem(BaseModel):
    """A label with its number of operations."""
    name: str
    count: int


class CountReportResponse(BaseModel):
    """Response schema for surgeries grouped by procedure or doctor."""
    items: List[CountItem]
    total: int


# ============== Dashboards ==============

class AdminDashboardResponse(BaseModel):
    """Operations on a given day, for the admin overview."""
    date: str
    total: int
    scheduled: int
    completed: int
    cancelled: int
    pending_requests: int
    operations: List[ScheduleResponse]
    
    class Config:
        json_schema_extra = {
            "example": {
                "date": "2026-03-02",
                "total": 6,
                "scheduled": 4,
                "completed": 1,
                "cancelled": 1,
                "pending_requests": 3,
                "operations": []
            }
        }


class DoctorDashboardResponse(BaseModel):
    """A doctor's day: today's list, the next operation and overdue work."""
    date: str
    today: List[ScheduleResponse]
    next_operation: Optional[ScheduleResponse] = None
    pending_tasks: int
    unread_alerts: int
