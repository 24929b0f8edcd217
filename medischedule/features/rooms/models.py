# Operating Rooms Feature - Models

from typing import List, Literal, Optional
from beanie import Indexed
from pydantic import Field
from medischedule.shared.models import StoreDocument, TimestampMixin


class OperatingRoom(StoreDocument, TimestampMixin):
    """Operating theater."""
    
    room_number: Indexed(str)
    capacity: Optional[int] = Field(None, ge=0)
    status: Literal["available", "in-use"] = "available"
    equipment: List[str] = Field(default_factory=list)
    
    class Settings:
        name = "ot_rooms"
        use_state_management = True
