"""Document store handle over MongoDB (Motor + Beanie)."""

import asyncio
from datetime import datetime
from typing import Annotated, Any, AsyncIterator, Dict, List, Mapping, Optional, Tuple, Type

from beanie import Document, init_beanie
from pydantic import TypeAdapter, ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from medischedule.config import settings
from medischedule.core.logging import logger
from medischedule.shared.schemas import Actor
from medischedule.store.audit import AuditLog, AuditLogger, default_action
from medischedule.store.results import MutationResult


Filters = Mapping[str, Any]
SortSpec = List[Tuple[str, int]]

# Fields the store maintains itself
_PROTECTED_FIELDS = {"id", "_id", "created_at", "revision_id"}


class UnknownCollectionError(KeyError):
    """Raised when a collection name has no registered document model."""


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class DocumentStore:
    """
    Typed access to the named collections of the scheduling database.

    Every mutation returns a ``MutationResult`` instead of raising, and
    appends an audit record without waiting for it. Reads return Beanie
    documents; driver errors on reads propagate to the caller.

    Beanie binds document models to one database per process, so only one
    initialized store should be live at a time.
    """

    def __init__(
        self,
        database,
        collections: Dict[str, Type[Document]],
        audit: Optional[AuditLogger] = None,
    ):
        self.database = database
        self.collections = dict(collections)
        self.audit = audit or AuditLogger()

    async def initialize(self) -> None:
        """Register document models with Beanie and create indexes."""
        await init_beanie(
            database=self.database,
            document_models=[*self.collections.values(), AuditLog],
        )
        logger.info(f"Document store initialized with collections: {', '.join(sorted(self.collections))}")

    def model_for(self, collection: str) -> Type[Document]:
        try:
            return self.collections[collection]
        except KeyError:
            raise UnknownCollectionError(collection)

    # ============== Mutations ==============

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        actor: Actor,
        action: Optional[str] = None,
        doc_id: Optional[str] = None,
    ) -> MutationResult:
        """Insert a new document; the store assigns the id unless ``doc_id`` is given."""
        try:
            model = self.model_for(collection)
        except UnknownCollectionError:
            return MutationResult.failure("validation", f"Unknown collection: {collection}")

        payload = {key: value for key, value in data.items() if key not in _PROTECTED_FIELDS}
        if doc_id:
            payload["id"] = doc_id

        now = datetime.utcnow()
        for field in ("created_at", "updated_at"):
            if field in model.model_fields:
                payload[field] = now
        if "created_by" in model.model_fields:
            payload.setdefault("created_by", actor.id)

        try:
            document = model.model_validate(payload)
        except ValidationError as e:
            return MutationResult.failure("validation", _describe_validation_error(e))

        try:
            await document.insert()
        except DuplicateKeyError:
            logger.warning(f"Duplicate document in {collection}: {document.id}")
            return MutationResult.failure("conflict", f"Document already exists in {collection}", id=document.id)
        except PyMongoError as e:
            logger.error(f"Failed to create document in {collection}: {e}")
            return MutationResult.failure("store", f"Failed to save to {collection}: {e}")

        logger.info(f"Created {collection}/{document.id} by {actor.id}")
        self.audit.record(
            actor,
            action or default_action(collection, "CREATE"),
            {"collection": collection, "id": document.id},
        )
        return MutationResult.success(id=document.id, data=document)

    async def update(
        self,
        collection: str,
        doc_id: str,
        partial: Mapping[str, Any],
        actor: Actor,
        action: Optional[str] = None,
        expected: Optional[Filters] = None,
    ) -> MutationResult:
        """
        Merge ``partial`` into an existing document with a single ``$set``.

        There is no read-before-write: concurrent updates to disjoint fields
        all survive. ``expected`` adds equality conditions to the write; when
        they no longer hold the update is refused with a conflict.
        """
        try:
            model = self.model_for(collection)
        except UnknownCollectionError:
            return MutationResult.failure("validation", f"Unknown collection: {collection}", id=doc_id)

        try:
            fields = self._validate_fields(model, partial)
        except ValidationError as e:
            return MutationResult.failure("validation", _describe_validation_error(e), id=doc_id)
        except ValueError as e:
            return MutationResult.failure("validation", str(e), id=doc_id)

        if "updated_at" in model.model_fields:
            fields["updated_at"] = datetime.utcnow()

        query = {"_id": doc_id, **(expected or {})}
        motor_collection = model.get_motor_collection()
        try:
            result = await motor_collection.update_one(query, {"$set": fields})
            if result.matched_count == 0:
                exists = await motor_collection.count_documents({"_id": doc_id}, limit=1)
                if not exists:
                    return MutationResult.failure("not_found", f"{collection}/{doc_id} not found", id=doc_id)
                logger.warning(f"Conditional update on {collection}/{doc_id} refused, expected {dict(expected or {})}")
                return MutationResult.failure("conflict", f"{collection}/{doc_id} was changed by someone else", id=doc_id)
        except PyMongoError as e:
            logger.error(f"Failed to update {collection}/{doc_id}: {e}")
            return MutationResult.failure("store", f"Failed to update {collection}: {e}", id=doc_id)

        logger.info(f"Updated {collection}/{doc_id} fields {sorted(partial)} by {actor.id}")
        self.audit.record(
            actor,
            action or default_action(collection, "UPDATE"),
            {"collection": collection, "id": doc_id, "fields": sorted(partial)},
        )
        return MutationResult.success(id=doc_id)

    async def delete(
        self,
        collection: str,
        doc_id: str,
        actor: Actor,
        action: Optional[str] = None,
    ) -> MutationResult:
        """Remove a document. Dependents are left untouched."""
        try:
            model = self.model_for(collection)
        except UnknownCollectionError:
            return MutationResult.failure("validation", f"Unknown collection: {collection}", id=doc_id)

        try:
            result = await model.get_motor_collection().delete_one({"_id": doc_id})
        except PyMongoError as e:
            logger.error(f"Failed to delete {collection}/{doc_id}: {e}")
            return MutationResult.failure("store", f"Failed to delete from {collection}: {e}", id=doc_id)

        if result.deleted_count == 0:
            return MutationResult.failure("not_found", f"{collection}/{doc_id} not found", id=doc_id)

        logger.info(f"Deleted {collection}/{doc_id} by {actor.id}")
        self.audit.record(
            actor,
            action or default_action(collection, "DELETE"),
            {"collection": collection, "id": doc_id},
        )
        return MutationResult.success(id=doc_id)

    @staticmethod
    def _validate_fields(model: Type[Document], partial: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate each field of a partial update against the model's declaration."""
        fields = {}
        for name, value in partial.items():
            if name in _PROTECTED_FIELDS:
                raise ValueError(f"Field '{name}' cannot be updated")
            field = model.model_fields.get(name)
            if field is None:
                raise ValueError(f"Unknown field '{name}' for {model.Settings.name}")
            annotation = field.annotation
            if field.metadata:
                annotation = Annotated[(annotation, *field.metadata)]
            adapter = TypeAdapter(annotation)
            fields[name] = adapter.dump_python(adapter.validate_python(value))
        return fields

    # ============== Reads ==============

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        model = self.model_for(collection)
        return await model.find_one({"_id": doc_id})

    async def find(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        sort: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Query by equality (or MongoDB operator) filters with optional ordering."""
        model = self.model_for(collection)
        query = model.find(dict(filters or {}))
        if sort:
            query = query.sort(sort)
        if limit:
            query = query.limit(limit)
        return await query.to_list()

    async def count(self, collection: str, filters: Optional[Filters] = None) -> int:
        model = self.model_for(collection)
        return await model.find(dict(filters or {})).count()

    async def subscribe(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        sort: Optional[SortSpec] = None,
        interval: Optional[float] = None,
    ) -> AsyncIterator[List[Document]]:
        """
        Live query: yield the full result set now and again whenever it changes.

        The sequence never ends on its own. Close it with ``aclose()`` or by
        cancelling the consuming task. Each call starts a fresh subscription.
        """
        model = self.model_for(collection)
        interval = settings.SUBSCRIPTION_POLL_INTERVAL if interval is None else interval
        previous = None

        while True:
            try:
                snapshot = await self.find(collection, filters, sort)
            except PyMongoError as e:
                logger.warning(f"Subscription poll on {model.Settings.name} failed: {e}")
            else:
                fingerprint = [doc.model_dump(mode="json") for doc in snapshot]
                if fingerprint != previous:
                    previous = fingerprint
                    yield snapshot
            await asyncio.sleep(interval)
