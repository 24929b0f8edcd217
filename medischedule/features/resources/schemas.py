# Resources Feature - Schemas

from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, Field


ResourceType = Literal["drug", "instrument", "material"]


class CreateResourceRequest(BaseModel):
    """Request schema for adding an inventory item."""
    name: str = Field(..., min_length=1, max_length=100)
    type: ResourceType
    quantity: int = Field(0, ge=0)
    unit: str = Field("", max_length=20)
    in_use: bool = False


class UpdateResourceRequest(BaseModel):
    """Request schema for editing an inventory item."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[ResourceType] = None
    quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    in_use: Optional[bool] = None


class ResourceResponse(BaseModel):
    """Response schema for an inventory item."""
    id: str
    name: str
    type: str
    quantity: int
    unit: str
    in_use: bool
    last_used: Optional[datetime] = None
    created_at: datetime
