"""Document store access: the store handle, mutation results and audit logging."""

from medischedule.store.results import MutationResult
from medischedule.store.audit import AuditLog, AuditLogger
from medischedule.store.client import DocumentStore, UnknownCollectionError

__all__ = ["MutationResult", "AuditLog", "AuditLogger", "DocumentStore", "UnknownCollectionError"]
