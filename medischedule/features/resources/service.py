# Resources Feature - Service

from datetime import datetime
from typing import List, Optional
from medischedule.features.resources.models import Resource
from medischedule.features.resources.schemas import (
    CreateResourceRequest,
    UpdateResourceRequest,
    ResourceResponse,
)
from medischedule.shared.exceptions import NotFoundException
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


class ResourceService:
    """Service class for theater inventory."""
    
    @staticmethod
    async def create_resource(store: DocumentStore, actor: Actor, request: CreateResourceRequest) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can add resources")
        
        data = request.model_dump()
        if request.in_use:
            data["last_used"] = datetime.utcnow()
        return await store.create("resources", data, actor)
    
    @staticmethod
    async def list_resources(store: DocumentStore, resource_type: Optional[str] = None) -> List[Resource]:
        filters = {"type": resource_type} if resource_type else {}
        return await store.find("resources", filters, sort=[("type", 1), ("name", 1)])
    
    @staticmethod
    async def get_resource(store: DocumentStore, resource_id: str) -> Resource:
        resource = await store.get("resources", resource_id)
        if not resource:
            raise NotFoundException("Resource not found")
        return resource
    
    @staticmethod
    async def update_resource(
        store: DocumentStore,
        actor: Actor,
        resource_id: str,
        request: UpdateResourceRequest,
    ) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can edit resources")
        
        changes = request.model_dump(exclude_unset=True)
        if not changes:
            return MutationResult.failure("validation", "No fields to update", id=resource_id)
        if changes.get("in_use"):
            changes["last_used"] = datetime.utcnow()
        
        return await store.update("resources", resource_id, changes, actor)
    
    @staticmethod
    async def mark_used(store: DocumentStore, actor: Actor, resource_id: str, in_use: bool = True) -> MutationResult:
        """Flag an item as in use (stamping last_used) or release it."""
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can update resources")
        
        changes = {"in_use": in_use}
        if in_use:
            changes["last_used"] = datetime.utcnow()
        return await store.update("resources", resource_id, changes, actor)
    
    @staticmethod
    async def delete_resource(store: DocumentStore, actor: Actor, resource_id: str) -> MutationResult:
        if not actor.is_admin:
            return MutationResult.failure("forbidden", "Only admins can delete resources")
        return await store.delete("resources", resource_id, actor)
    
    @staticmethod
    def resource_to_response(resource: Resource) -> ResourceResponse:
        return ResourceResponse(
            id=resource.id,
            name=resource.name,
            type=resource.type,
            quantity=resource.quantity,
            unit=resource.unit,
            in_use=resource.in_use,
            last_used=resource.last_used,
            created_at=resource.created_at,
        )
