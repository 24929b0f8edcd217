# Operating Rooms Feature - Router

from typing import List, Literal, Optional
from fastapi import APIRouter, Depends, Query, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.rooms.schemas import CreateRoomRequest, UpdateRoomRequest, RoomResponse
from medischedule.features.rooms.service import RoomService
from medischedule.shared.exceptions import raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(prefix="/rooms", tags=["Operating Rooms"])


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    request: CreateRoomRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Add an operating room."""
    result = raise_for_result(await RoomService.create_room(store, actor, request))
    return RoomService.room_to_response(await RoomService.get_room(store, result.id))


@router.get("", response_model=List[RoomResponse])
async def list_rooms(
    status: Optional[Literal["available", "in-use"]] = Query(None),
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """List operating rooms, optionally by status."""
    return [RoomService.room_to_response(room) for room in await RoomService.list_rooms(store, status)]


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(
    room_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get an operating room."""
    return RoomService.room_to_response(await RoomService.get_room(store, room_id))


@router.patch("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: str,
    request: UpdateRoomRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Edit an operating room."""
    raise_for_result(await RoomService.update_room(store, actor, room_id, request))
    return RoomService.room_to_response(await RoomService.get_room(store, room_id))


@router.delete("/{room_id}", response_model=MutationResult)
async def delete_room(
    room_id: str,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Delete an operating room. Operations booked in it keep the room id."""
    return raise_for_result(await RoomService.delete_room(store, actor, room_id))
