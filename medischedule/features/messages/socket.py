# Live Subscriptions - Socket.IO Server

import asyncio
import functools
import socketio
from typing import Any, Dict, Optional
from medischedule.core.security import decode_token
from medischedule.core.logging import logger
from medischedule.database import get_store
from medischedule.shared.schemas import Actor


# Create Socket.IO server with ASGI support
sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",  # In production, restrict this
    logger=False,
    engineio_logger=False,
)

# Store connected actors: {sid: Actor}
connected_users: Dict[str, Actor] = {}

# Store live subscriptions per socket: {sid: {subscription_id: task}}
socket_subscriptions: Dict[str, Dict[str, asyncio.Task]] = {}

# Collections a doctor may watch, and the field tying a record to them
DOCTOR_SCOPES = {
    "operation_schedules": "doctor_id",
    "surgery_requests": "requesting_doctor_id",
}

DEFAULT_SORT = {
    "operation_schedules": [("date", 1), ("start_time", 1)],
    "surgery_requests": [("created_at", -1)],
    "messages": [("timestamp", 1)],
}

# Audit records are never streamed
HIDDEN_COLLECTIONS = {"logs"}


async def authenticate_socket(auth_data: Optional[Dict]) -> Optional[Actor]:
    """
    Authenticate a socket connection using JWT token.

    Args:
        auth_data: Authentication data containing token

    Returns:
        The acting user or None if authentication fails
    """
    if not auth_data or "token" not in auth_data:
        logger.warning("Socket connection attempted without token")
        return None

    payload = decode_token(auth_data["token"])
    if not payload or not payload.get("sub"):
        logger.warning("Socket connection with invalid token")
        return None

    store = await get_store()
    profile = await store.get("users", payload["sub"])
    if not profile:
        logger.warning(f"Socket auth - profile not found: {payload['sub']}")
        return None

    if not profile.isActive:
        logger.warning(f"Socket auth - user inactive: {profile.id}")
        return None

    return Actor(id=profile.id, email=profile.email, role=profile.role)


def scope_filters(actor: Actor, collection: str, filters: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Narrow a requested query to what the actor may see.

    Only plain equality filters are accepted from clients.

    Returns:
        The filters to run, or None if the subscription is not allowed
    """
    filters = dict(filters or {})
    if any(key.startswith("$") or isinstance(value, (dict, list)) for key, value in filters.items()):
        return None

    if collection in HIDDEN_COLLECTIONS:
        return None
    if actor.is_admin:
        return filters

    if collection in DOCTOR_SCOPES:
        filters[DOCTOR_SCOPES[collection]] = actor.id
        return filters
    if collection == "messages":
        return {"$and": [filters, {"$or": [{"sender_id": actor.id}, {"receiver_id": actor.id}]}]}
    return None


async def stream_snapshots(sid: str, subscription_id: str, collection: str, filters: Dict[str, Any]):
    """Emit a snapshot event every time the watched result set changes."""
    store = await get_store()
    snapshots = store.subscribe(collection, filters, DEFAULT_SORT.get(collection))
    try:
        async for records in snapshots:
            await sio.emit("snapshot", {
                "subscription_id": subscription_id,
                "collection": collection,
                "records": [record.model_dump(mode="json") for record in records],
            }, room=sid)
    finally:
        await snapshots.aclose()
        logger.debug(f"Subscription {subscription_id} on {collection} closed for {sid}")


def _on_subscription_done(sid: str, subscription_id: str, task: asyncio.Task) -> None:
    """Drop a finished stream and log how it ended."""
    subscriptions = socket_subscriptions.get(sid, {})
    if subscriptions.get(subscription_id) is task:
        subscriptions.pop(subscription_id)

    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Subscription {subscription_id} for {sid} failed: {error!r}")


def cancel_subscription(sid: str, subscription_id: str) -> bool:
    task = socket_subscriptions.get(sid, {}).pop(subscription_id, None)
    if task is None:
        return False
    task.cancel()
    return True


@sio.event
async def connect(sid, environ, auth):
    """Handle client connection."""
    logger.info(f"Socket connection attempt: {sid}")

    actor = await authenticate_socket(auth)
    if not actor:
        logger.warning(f"Socket authentication failed: {sid}")
        return False  # Reject connection

    connected_users[sid] = actor
    socket_subscriptions[sid] = {}

    logger.info(f"Socket connected: {sid} ({actor.role}: {actor.id})")

    # Send connection confirmation
    await sio.emit("connected", {
        "message": "Connected successfully",
        "role": actor.role,
        "user_id": actor.id,
    }, room=sid)

    return True


@sio.event
async def disconnect(sid):
    """Handle client disconnection and stop its subscriptions."""
    actor = connected_users.pop(sid, None)
    for task in socket_subscriptions.pop(sid, {}).values():
        task.cancel()

    if actor:
        logger.info(f"Socket disconnected: {sid} ({actor.role}: {actor.id})")
    else:
        logger.info(f"Socket disconnected: {sid}")


@sio.event
async def subscribe(sid, data):
    """
    Start a live query.

    Expected data: {subscription_id, collection, filters}
    """
    actor = connected_users.get(sid)
    if not actor:
        await sio.emit("error", {"message": "Not authenticated"}, room=sid)
        return {"status": "error", "message": "Not authenticated"}

    data = data or {}
    subscription_id = data.get("subscription_id")
    collection = data.get("collection")
    if not subscription_id or not collection:
        await sio.emit("error", {"message": "subscription_id and collection required"}, room=sid)
        return {"status": "error", "message": "subscription_id and collection required"}

    store = await get_store()
    if collection not in store.collections:
        await sio.emit("error", {"message": f"Unknown collection: {collection}"}, room=sid)
        return {"status": "error", "message": f"Unknown collection: {collection}"}

    filters = scope_filters(actor, collection, data.get("filters"))
    if filters is None:
        logger.warning(f"Subscription to {collection} refused for {actor.id}")
        await sio.emit("error", {"message": "Subscription not allowed"}, room=sid)
        return {"status": "error", "message": "Subscription not allowed"}

    # Re-subscribing under the same id replaces the previous query
    cancel_subscription(sid, subscription_id)
    task = asyncio.create_task(stream_snapshots(sid, subscription_id, collection, filters))
    task.add_done_callback(functools.partial(_on_subscription_done, sid, subscription_id))
    socket_subscriptions.setdefault(sid, {})[subscription_id] = task

    logger.info(f"{actor.id} subscribed to {collection} as {subscription_id}")
    return {"status": "success", "subscription_id": subscription_id}


@sio.event
async def unsubscribe(sid, data):
    """Stop a live query."""
    subscription_id = (data or {}).get("subscription_id")
    if not subscription_id or not cancel_subscription(sid, subscription_id):
        return {"status": "error", "message": "Unknown subscription"}

    logger.info(f"Socket {sid} unsubscribed from {subscription_id}")
    return {"status": "success", "subscription_id": subscription_id}


# Create ASGI app for Socket.IO
socket_app = socketio.ASGIApp(sio)
