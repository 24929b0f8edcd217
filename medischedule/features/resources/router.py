# Resources Feature - Router

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from medischedule.database import get_store
from medischedule.features.auth.dependencies import get_current_actor, require_roles
from medischedule.features.resources.schemas import (
    CreateResourceRequest,
    UpdateResourceRequest,
    ResourceResponse,
    ResourceType,
)
from medischedule.features.resources.service import ResourceService
from medischedule.shared.exceptions import raise_for_result
from medischedule.shared.schemas import Actor
from medischedule.store import DocumentStore, MutationResult


router = APIRouter(prefix="/resources", tags=["Resources"])


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    request: CreateResourceRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Add an inventory item."""
    result = raise_for_result(await ResourceService.create_resource(store, actor, request))
    return ResourceService.resource_to_response(await ResourceService.get_resource(store, result.id))


@router.get("", response_model=List[ResourceResponse])
async def list_resources(
    type: Optional[ResourceType] = Query(None, description="Filter by drug, instrument or material"),
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """List inventory items."""
    return [ResourceService.resource_to_response(r) for r in await ResourceService.list_resources(store, type)]


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: str,
    actor: Actor = Depends(get_current_actor),
    store: DocumentStore = Depends(get_store),
):
    """Get an inventory item."""
    return ResourceService.resource_to_response(await ResourceService.get_resource(store, resource_id))


@router.patch("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: str,
    request: UpdateResourceRequest,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Edit an inventory item."""
    raise_for_result(await ResourceService.update_resource(store, actor, resource_id, request))
    return ResourceService.resource_to_response(await ResourceService.get_resource(store, resource_id))


@router.post("/{resource_id}/use", response_model=ResourceResponse)
async def mark_resource_used(
    resource_id: str,
    in_use: bool = Query(True),
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Mark an item as in use, or release it with in_use=false."""
    raise_for_result(await ResourceService.mark_used(store, actor, resource_id, in_use))
    return ResourceService.resource_to_response(await ResourceService.get_resource(store, resource_id))


@router.delete("/{resource_id}", response_model=MutationResult)
async def delete_resource(
    resource_id: str,
    actor: Actor = Depends(require_roles("admin")),
    store: DocumentStore = Depends(get_store),
):
    """Delete an inventory item."""
    return raise_for_result(await ResourceService.delete_resource(store, actor, resource_id))
