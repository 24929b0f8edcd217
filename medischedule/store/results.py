from typing import Any, Literal, Optional
from pydantic import BaseModel


ErrorKind = Literal["validation", "not_found", "conflict", "forbidden", "store"]


class MutationResult(BaseModel):
    """Outcome of a create/update/delete against the document store."""
    
    status: Literal["success", "error"]
    id: Optional[str] = None
    message: Optional[str] = None
    kind: Optional[ErrorKind] = None
    data: Optional[Any] = None
    
    @property
    def ok(self) -> bool:
        return self.status == "success"
    
    @classmethod
    def success(cls, id: Optional[str] = None, message: Optional[str] = None, data: Any = None) -> "MutationResult":
        return cls(status="success", id=id, message=message, data=data)
    
    @classmethod
    def failure(cls, kind: ErrorKind, message: str, id: Optional[str] = None) -> "MutationResult":
        return cls(status="error", kind=kind, message=message, id=id)
