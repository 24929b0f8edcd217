# Resources Feature - Models

from datetime import datetime
from typing import Literal, Optional
from pydantic import Field
from medischedule.shared.models import StoreDocument, TimestampMixin


class Resource(StoreDocument, TimestampMixin):
    """Drug, instrument or consumable kept in the theater inventory."""
    
    name: str = Field(..., min_length=1)
    type: Literal["drug", "instrument", "material"]
    quantity: int = Field(0, ge=0)
    unit: str = ""
    in_use: bool = False
    last_used: Optional[datetime] = None
    
    class Settings:
        name = "resources"
        use_state_management = True
        indexes = [
            [("type", 1), ("name", 1)],
        ]
