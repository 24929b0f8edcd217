# Messages Feature - Service

from typing import List, Optional
from medischedule.features.messages.models import SupportMessage, ADMIN_GROUP
from medischedule.features.messages.schemas import SendMessageRequest, MessageResponse
from medischedule.core.logging import logger
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


class MessageService:
    """Service class for support messages and system alerts."""
    
    @staticmethod
    async def send_message(store: DocumentStore, actor: Actor, request: SendMessageRequest) -> MutationResult:
        """
        Send a manual message.
        
        Doctors always write to the admin team. Admins write to a specific
        user and must name the receiver.
        """
        if actor.is_admin:
            if not request.receiver_id:
                return MutationResult.failure("validation", "receiver_id is required for admin messages")
            receiver_id = request.receiver_id
        else:
            if request.receiver_id not in (None, ADMIN_GROUP):
                return MutationResult.failure("forbidden", "Doctors can only message the admin team")
            receiver_id = ADMIN_GROUP
        
        return await store.create(
            "messages",
            {"sender_id": actor.id, "receiver_id": receiver_id, "text": request.text, "type": "manual"},
            actor,
        )
    
    @staticmethod
    async def notify(store: DocumentStore, actor: Actor, receiver_id: str, text: str) -> MutationResult:
        """Post a system alert to a user."""
        result = await store.create(
            "messages",
            {"sender_id": actor.id, "receiver_id": receiver_id, "text": text, "type": "system"},
            actor,
        )
        if not result.ok:
            logger.warning(f"Failed to notify {receiver_id}: {result.message}")
        return result
    
    @staticmethod
    async def list_conversation(store: DocumentStore, actor: Actor, user_id: Optional[str] = None) -> List[SupportMessage]:
        """
        Manual messages exchanged with the admin team, oldest first.
        
        Doctors get their own thread; admins pass the user whose thread to open.
        """
        participant = user_id if actor.is_admin and user_id else actor.id
        return await store.find(
            "messages",
            {"type": "manual", "$or": [{"sender_id": participant}, {"receiver_id": participant}]},
            sort=[("timestamp", 1)],
        )
    
    @staticmethod
    async def list_admin_inbox(store: DocumentStore) -> List[SupportMessage]:
        """Messages addressed to the admin team, newest first."""
        return await store.find("messages", {"receiver_id": ADMIN_GROUP}, sort=[("timestamp", -1)])
    
    @staticmethod
    async def list_alerts(store: DocumentStore, actor: Actor) -> List[SupportMessage]:
        """System alerts for the acting user, newest first."""
        return await store.find(
            "messages",
            {"receiver_id": actor.id, "type": "system"},
            sort=[("timestamp", -1)],
        )
    
    @staticmethod
    async def mark_read(store: DocumentStore, actor: Actor, message_id: str) -> MutationResult:
        """Flip a message to read. Only its recipient may do so."""
        message = await store.get("messages", message_id)
        if message is None:
            return MutationResult.failure("not_found", "Message not found", id=message_id)
        
        is_recipient = message.receiver_id == actor.id or (message.receiver_id == ADMIN_GROUP and actor.is_admin)
        if not is_recipient:
            return MutationResult.failure("forbidden", "Only the recipient can mark a message as read", id=message_id)
        if message.read:
            return MutationResult.success(id=message_id)
        
        return await store.update("messages", message_id, {"read": True}, actor)
    
    @staticmethod
    async def mark_all_read(store: DocumentStore, actor: Actor, alerts_only: bool = True) -> int:
        """Mark every unread message addressed to the actor as read."""
        filters = {"receiver_id": actor.id, "read": False}
        if alerts_only:
            filters["type"] = "system"
        
        updated = 0
        for message in await store.find("messages", filters):
            result = await store.update("messages", message.id, {"read": True}, actor)
            if result.ok:
                updated += 1
        return updated
    
    @staticmethod
    async def to_responses(store: DocumentStore, messages: List[SupportMessage]) -> List[MessageResponse]:
        """Attach sender names; unknown senders fall back to their id."""
        users = await store.find("users")
        names = {
            profile.id: f"{profile.firstName} {profile.lastName}"
            for profile in users
        }
        return [
            MessageResponse(
                id=message.id,
                sender_id=message.sender_id,
                receiver_id=message.receiver_id,
                text=message.text,
                timestamp=message.timestamp,
                read=message.read,
                type=message.type,
                senderName="System" if message.type == "system" else names.get(message.sender_id, message.sender_id),
            )
            for message in messages
        ]
