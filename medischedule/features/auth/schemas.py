from typing import Optional
from pydantic import BaseModel


class TokenIdentity(BaseModel):
    """Identity asserted by a verified bearer token."""
    id: str
    email: Optional[str] = None
