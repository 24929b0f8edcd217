import uuid
from beanie import Document
from pydantic import BaseModel, Field
from datetime import datetime


def new_id() -> str:
    """Generate an opaque store-assigned document identifier."""
    return uuid.uuid4().hex


class TimestampMixin(BaseModel):
    """Mixin for adding timestamp fields to documents."""
    
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    


class StoreDocument(Document):
    """
    Base document with an opaque string identifier.

    Records linked to an authenticated user reuse the auth identifier as id,
    everything else gets a fresh hex id on creation.
    """
    
    id: str = Field(default_factory=new_id)
