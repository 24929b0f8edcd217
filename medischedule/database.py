"""MongoDB database connection manager."""

from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional

from medischedule.config import settings
from medischedule.core.logging import logger
from medischedule.store import AuditLogger, DocumentStore


def collection_models() -> dict:
    """Map every collection name to its document model."""
    from medischedule.features.users.models import UserProfile, Doctor
    from medischedule.features.patients.models import Patient
    from medischedule.features.rooms.models import OperatingRoom
    from medischedule.features.resources.models import Resource
    from medischedule.features.schedules.models import OperationSchedule
    from medischedule.features.requests.models import SurgeryRequest
    from medischedule.features.messages.models import SupportMessage

    return {
        "users": UserProfile,
        "doctors": Doctor,
        "patients": Patient,
        "ot_rooms": OperatingRoom,
        "resources": Resource,
        "operation_schedules": OperationSchedule,
        "surgery_requests": SurgeryRequest,
        "messages": SupportMessage,
    }


async def build_store(database, audit: Optional[AuditLogger] = None) -> DocumentStore:
    """Create and initialize a store over an already-open Motor database."""
    store = DocumentStore(database, collection_models(), audit=audit)
    await store.initialize()
    return store


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None
    store: Optional[DocumentStore] = None

    @classmethod
    async def connect_db(cls):
        """Connect to MongoDB and initialize the document store."""
        cls.client = AsyncIOMotorClient(settings.MONGODB_URL)
        cls.store = await build_store(cls.client[settings.DATABASE_NAME])

        logger.info(f"Connected to MongoDB database: {settings.DATABASE_NAME}")

    @classmethod
    async def close_db(cls):
        """Flush pending audit writes and close the MongoDB connection."""
        if cls.store:
            await cls.store.audit.flush()
            cls.store = None
        if cls.client:
            cls.client.close()
            logger.info("Closed MongoDB connection")


async def get_store() -> DocumentStore:
    """Dependency for document store access."""
    if Database.store is None:
        raise RuntimeError("Database is not connected")
    return Database.store
