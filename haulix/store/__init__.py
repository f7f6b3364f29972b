"""
Document store integration.

This module provides:
- DocumentStore: Backend interface (in-memory and SQLite implementations)
- TenantPaths: Tenant-scoped collection naming
- resolve_session: Tenant resolution at sign-in
- ReactiveStoreAdapter: Live collection mirrors and write commands
"""

from .adapter import ReactiveStoreAdapter
from .backend import DocumentStore, InMemoryDocumentStore, Snapshot, StoreDocument, Subscription
from .paths import CollectionKind, TenantPaths
from .session import Identity, SessionContext, resolve_session
from .sqlite import SqliteDocumentStore

__all__ = [
    "CollectionKind",
    "DocumentStore",
    "Identity",
    "InMemoryDocumentStore",
    "ReactiveStoreAdapter",
    "SessionContext",
    "Snapshot",
    "SqliteDocumentStore",
    "StoreDocument",
    "Subscription",
    "TenantPaths",
    "resolve_session",
]
