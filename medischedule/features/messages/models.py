# Messages Feature - Models

from datetime import datetime
from typing import Literal
from pydantic import Field
from medischedule.shared.models import StoreDocument


# Receiver used for messages addressed to every admin
ADMIN_GROUP = "admin-group"


class SupportMessage(StoreDocument):
    """
    Support message between staff and the admin team.
    System messages are alerts generated by the service itself.
    """
    
    sender_id: str
    receiver_id: str = ADMIN_GROUP
    text: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    read: bool = False
    type: Literal["system", "manual"] = "manual"
    
    class Settings:
        name = "messages"
        use_state_management = True
        indexes = [
            [("receiver_id", 1), ("timestamp", -1)],
            [("sender_id", 1), ("timestamp", -1)],
        ]
