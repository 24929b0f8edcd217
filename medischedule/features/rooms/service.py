# Operating Rooms Feature - Service

from typing import List, Optional
from medischedule.features.rooms.models import OperatingRoom
from medischedule.features.rooms.schemas import CreateRoomRequest, UpdateRoomRequest, RoomResponse
from medischedule.shared.exceptions import NotFoundException
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


def _clean_equipment(equipment: List[str]) -> List[str]:
    return [item.strip() for item in equipment if item and item.strip()]


class RoomService:
    """Service class for operating room management."""
    
    @staticmethod
    async def create_room(store: DocumentStore, actor: Actor, request: CreateRoomRequest) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can add operating rooms")
        
        existing = await store.find("ot_rooms", {"room_number": request.room_number}, limit=1)
        if existing:
            return MutationResult.failure("conflict", f"Room {request.room_number} already exists")
        
        data = request.model_dump()
        data["equipment"] = _clean_equipment(request.equipment)
        return await store.create("ot_rooms", data, actor)
    
    @staticmethod
    async def list_rooms(store: DocumentStore, status: Optional[str] = None) -> List[OperatingRoom]:
        filters = {"status": status} if status else {}
        return await store.find("ot_rooms", filters, sort=[("room_number", 1)])
    
    @staticmethod
    async def get_room(store: DocumentStore, room_id: str) -> OperatingRoom:
        room = await store.get("ot_rooms", room_id)
        if not room:
            raise NotFoundException("Operating room not found")
        return room
    
    @staticmethod
    async def update_room(
        store: DocumentStore,
        actor: Actor,
        room_id: str,
        request: UpdateRoomRequest,
    ) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can edit operating rooms")
        
        changes = request.model_dump(exclude_unset=True)
        if "equipment" in changes and changes["equipment"] is not None:
            changes["equipment"] = _clean_equipment(changes["equipment"])
        if not changes:
            return MutationResult.failure("validation", "No fields to update", id=room_id)
        
        return await store.update("ot_rooms", room_id, changes, actor)
    
    @staticmethod
    async def delete_room(store: DocumentStore, actor: Actor, room_id: str) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can delete operating rooms")
        return await store.delete("ot_rooms", room_id, actor)
    
    @staticmethod
    def room_to_response(room: OperatingRoom) -> RoomResponse:
        return RoomResponse(
            id=room.id,
            room_number=room.room_number,
            capacity=room.capacity,
            status=room.status,
            equipment=room.equipment,
            created_at=room.created_at,
        )
