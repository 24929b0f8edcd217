from pydantic import BaseModel
from typing import Optional, Literal


Role = Literal["admin", "doctor"]


class Actor(BaseModel):
    """The user on whose behalf an operation runs."""
    
    id: str
    email: Optional[str] = None
    role: Role
    
    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


