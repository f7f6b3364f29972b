"""
Document store interface and the in-memory backend.

A store holds collections of JSON-like documents keyed by id. Subscribers
receive the full current contents of a collection on subscribe and after
every change to it.
"""

import copy
import uuid
from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel, Field


class StoreDocument(BaseModel):
    """One stored document."""

    id: str
    data: dict[str, Any]


class Snapshot(BaseModel):
    """Full point-in-time contents of one collection."""

    path: str
    documents: list[StoreDocument] = Field(default_factory=list)


SnapshotCallback = Callable[[Snapshot], None]
ErrorCallback = Callable[[Exception], None]


class Subscription:
    """Handle returned by subscribe(); call unsubscribe() to stop delivery."""

    def __init__(self, store: "DocumentStore", path: str, token: str) -> None:
        self._store = store
        self.path = path
        self.token = token
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._store._remove_listener(self.path, self.token)
            self.active = False


class DocumentStore(ABC):
    """
    Base class for document store backends.

    Provides:
    - Listener bookkeeping and snapshot fan-out
    - Abstract create/update/delete/get primitives
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._listeners: dict[str, dict[str, tuple[SnapshotCallback, Optional[ErrorCallback]]]] = {}
        self.logger = structlog.get_logger(component="document_store")

    @abstractmethod
    def add(self, path: str, data: dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""

    @abstractmethod
    def set(self, path: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create or overwrite the document at doc_id."""

    @abstractmethod
    def update(self, path: str, doc_id: str, changes: dict[str, Any]) -> None:
        """Merge top-level fields into an existing document."""

    @abstractmethod
    def delete(self, path: str, doc_id: str) -> None:
        """Remove a document. Deleting a missing document is not an error."""

    @abstractmethod
    def get(self, path: str, doc_id: str) -> Optional[dict[str, Any]]:
        """One-time read of a document, or None."""

    @abstractmethod
    def _read_collection(self, path: str) -> list[StoreDocument]:
        """Current documents of a collection in storage order."""

    def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Subscription:
        """
        Listen to a collection.

        The current snapshot is delivered immediately, then again after
        every write to the collection.
        """
        token = uuid.uuid4().hex
        with self._lock:
            self._listeners.setdefault(path, {})[token] = (on_snapshot, on_error)
        self.logger.debug("listener_added", path=path)
        on_snapshot(self.snapshot(path))
        return Subscription(self, path, token)

    def snapshot(self, path: str) -> Snapshot:
        with self._lock:
            return Snapshot(path=path, documents=self._read_collection(path))

    def fail_stream(self, path: str, error: Exception) -> None:
        """Deliver a stream error to every listener of a collection."""
        for _, on_error in list(self._listeners.get(path, {}).values()):
            if on_error is not None:
                on_error(error)

    def _notify(self, path: str) -> None:
        listeners = list(self._listeners.get(path, {}).values())
        if not listeners:
            return
        current = self.snapshot(path)
        for on_snapshot, on_error in listeners:
            try:
                on_snapshot(current.model_copy(deep=True))
            except Exception as e:
                self.logger.error("listener_failed", path=path, error=str(e))
                if on_error is not None:
                    on_error(e)

    def _remove_listener(self, path: str, token: str) -> None:
        with self._lock:
            self._listeners.get(path, {}).pop(token, None)
        self.logger.debug("listener_removed", path=path)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex[:20]


class InMemoryDocumentStore(DocumentStore):
    """Process-local store with synchronous change notification."""

    def __init__(self) -> None:
        super().__init__()
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def add(self, path: str, data: dict[str, Any]) -> str:
        doc_id = self.new_id()
        self.set(path, doc_id, data)
        return doc_id

    def set(self, path: str, doc_id: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._collections.setdefault(path, {})[doc_id] = copy.deepcopy(data)
        self._notify(path)

    def update(self, path: str, doc_id: str, changes: dict[str, Any]) -> None:
        with self._lock:
            documents = self._collections.get(path, {})
            if doc_id not in documents:
                raise KeyError(f"No document {doc_id} in {path}")
            documents[doc_id].update(copy.deepcopy(changes))
        self._notify(path)

    def delete(self, path: str, doc_id: str) -> None:
        with self._lock:
            self._collections.get(path, {}).pop(doc_id, None)
        self._notify(path)

    def get(self, path: str, doc_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            document = self._collections.get(path, {}).get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def _read_collection(self, path: str) -> list[StoreDocument]:
        return [
            StoreDocument(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(path, {}).items()
        ]
