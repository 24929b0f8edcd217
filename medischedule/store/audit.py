"""Append-only audit trail for store mutations."""

import asyncio
from datetime import datetime
from typing import Any, Dict, Optional, Set

from pydantic import Field
from pymongo.errors import PyMongoError

from medischedule.core.logging import logger
from medischedule.shared.models import StoreDocument
from medischedule.shared.schemas import Actor


# Entity names used in audit action codes, e.g. CREATE_PATIENT
ACTION_ENTITIES = {
    "patients": "PATIENT",
    "users": "STAFF",
    "doctors": "STAFF",
    "ot_rooms": "OT",
    "resources": "RESOURCE",
    "operation_schedules": "SCHEDULE",
    "surgery_requests": "SURGERY_REQUEST",
    "messages": "MESSAGE",
}


def default_action(collection: str, verb: str) -> str:
    """Build the audit action code for a plain mutation."""
    return f"{verb}_{ACTION_ENTITIES.get(collection, collection.upper())}"


class AuditLog(StoreDocument):
    """A single audit record."""
    
    action: str
    actor_id: str
    actor_email: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    details: Dict[str, Any] = Field(default_factory=dict)
    
    class Settings:
        name = "logs"
        indexes = [
            [("timestamp", -1)],
            [("actor_id", 1), ("timestamp", -1)],
        ]


class AuditLogger:
    """
    Writes audit records without blocking the mutation that produced them.

    Each record is inserted from its own task. A failed insert is logged as a
    warning and dropped; it never reaches the caller of the mutation.
    """
    
    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._pending: Set[asyncio.Task] = set()
    
    def record(self, actor: Optional[Actor], action: str, details: Optional[Dict[str, Any]] = None) -> Optional[asyncio.Task]:
        """Schedule an audit insert and return immediately."""
        if not self.enabled:
            return None
        
        entry = AuditLog(
            action=action,
            actor_id=actor.id if actor else "anonymous",
            actor_email=(actor.email if actor and actor.email else "anonymous"),
            details=details or {},
        )
        task = asyncio.create_task(self._write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
    
    async def _write(self, entry: AuditLog) -> None:
        try:
            await entry.insert()
        except (PyMongoError, RuntimeError) as e:
            logger.warning(f"Failed to write audit record {entry.action}: {e}")
    
    async def flush(self) -> None:
        """Wait for every audit write scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
