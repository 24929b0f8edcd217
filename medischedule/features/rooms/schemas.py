# Operating Rooms Feature - Schemas

from typing import Optional, List, Literal
from datetime import datetime
from pydantic import BaseModel, Field


class CreateRoomRequest(BaseModel):
    """Request schema for adding an operating room."""
    room_number: str = Field(..., min_length=1, max_length=20)
    capacity: Optional[int] = Field(None, ge=0)
    status: Literal["available", "in-use"] = "available"
    equipment: List[str] = Field(default_factory=list)


class UpdateRoomRequest(BaseModel):
    """Request schema for editing an operating room."""
    room_number: Optional[str] = Field(None, min_length=1, max_length=20)
    capacity: Optional[int] = Field(None, ge=0)
    status: Optional[Literal["available", "in-use"]] = None
    equipment: Optional[List[str]] = None


class RoomResponse(BaseModel):
    """Response schema for an operating room."""
    id: str
    room_number: str
    capacity: Optional[int] = None
    status: str
    equipment: List[str] = []
    created_at: datetime
