# Messages Feature - Router

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.messages.schemas import (
    SendMessageRequest,
    MessageResponse,
    MessageListResponse,
    MarkAllReadResponse,
)
from medischedule.features.messages.service import MessageService
from medischedule.shared.exceptions import NotFoundException, raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    request: SendMessageRequest,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """
    Send a support message.
    
    Doctors reach the admin team; admins reply to a given user.
    """
    result = raise_for_result(await MessageService.send_message(store, actor, request))
    message = await store.get("messages", result.id)
    if message is None:
        raise NotFoundException("Message not found")
    return (await MessageService.to_responses(store, [message]))[0]


@router.get("", response_model=MessageListResponse)
async def list_conversation(
    user_id: Optional[str] = Query(None, description="Admins only: whose thread to open"),
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get a support thread, oldest message first."""
    messages = await MessageService.list_conversation(store, actor, user_id)
    responses = await MessageService.to_responses(store, messages)
    unread = sum(1 for m in messages if not m.read and m.receiver_id == actor.id)
    return MessageListResponse(messages=responses, total=len(responses), unread=unread)


@router.get("/inbox", response_model=MessageListResponse)
async def admin_inbox(
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Messages sent to the admin team."""
    messages = await MessageService.list_admin_inbox(store)
    responses = await MessageService.to_responses(store, messages)
    unread = sum(1 for m in messages if not m.read)
    return MessageListResponse(messages=responses, total=len(responses), unread=unread)


@router.get("/alerts", response_model=MessageListResponse)
async def list_alerts(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """System alerts for the current user, newest first."""
    messages = await MessageService.list_alerts(store, actor)
    responses = await MessageService.to_responses(store, messages)
    unread = sum(1 for m in messages if not m.read)
    return MessageListResponse(messages=responses, total=len(responses), unread=unread)


@router.post("/alerts/read-all", response_model=MarkAllReadResponse)
async def mark_all_alerts_read(
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Mark every alert as read."""
    return MarkAllReadResponse(updated=await MessageService.mark_all_read(store, actor))


@router.post("/{message_id}/read", response_model=MutationResult)
async def mark_read(
    message_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Mark a message as read."""
    return raise_for_result(await MessageService.mark_read(store, actor, message_id))
