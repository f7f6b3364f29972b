"""
Reactive store adapter.

Mirrors the tenant's four collections in memory by listening to the store
and replacing each mirror wholesale on every snapshot. Writes go to the
store only; the mirrors change when the resulting snapshot arrives, so the
last write the store accepts wins.
"""

from functools import partial
from typing import Any, Callable, Optional

import structlog
from pydantic import BaseModel, ValidationError

from haulix.core.errors import RecordNotFoundError, TransportError
from haulix.data.models.load import Load
from haulix.data.models.reference import Customer, Driver, Location
from haulix.store.backend import DocumentStore, Snapshot, Subscription
from haulix.store.paths import CollectionKind
from haulix.store.session import SessionContext

MODEL_FOR: dict[CollectionKind, type[BaseModel]] = {
    CollectionKind.LOADS: Load,
    CollectionKind.CUSTOMERS: Customer,
    CollectionKind.LOCATIONS: Location,
    CollectionKind.DRIVERS: Driver,
}

ChangeListener = Callable[[CollectionKind], None]


class ReactiveStoreAdapter:
    """
    Live mirror of one tenant's loads, customers, locations and drivers.

    Provides:
    - Subscription lifecycle (start/stop)
    - Full-replace snapshot reconciliation
    - Fire-and-forget create/update/delete commands
    """

    def __init__(
        self,
        store: DocumentStore,
        session: SessionContext,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        self.store = store
        self.session = session
        self.logger = logger or structlog.get_logger(
            component="store_adapter", company_id=session.company_id
        )
        self._paths = session.paths.all_collections()
        self._mirrors: dict[CollectionKind, list[Any]] = {kind: [] for kind in CollectionKind}
        self._subscriptions: list[Subscription] = []
        self._listeners: list[ChangeListener] = []

    # ------------------------------------------------------------------
    # Mirrors
    # ------------------------------------------------------------------

    @property
    def loads(self) -> list[Load]:
        return list(self._mirrors[CollectionKind.LOADS])

    @property
    def customers(self) -> list[Customer]:
        return list(self._mirrors[CollectionKind.CUSTOMERS])

    @property
    def locations(self) -> list[Location]:
        return list(self._mirrors[CollectionKind.LOCATIONS])

    @property
    def drivers(self) -> list[Driver]:
        return list(self._mirrors[CollectionKind.DRIVERS])

    def find_load(self, load_id: str) -> Load:
        """
        Look a load up in the current snapshot.

        Raises:
            RecordNotFoundError: If the id is not in the mirror
        """
        for load in self._mirrors[CollectionKind.LOADS]:
            if load.id == load_id:
                return load
        raise RecordNotFoundError("Load", load_id)

    def add_listener(self, listener: ChangeListener) -> None:
        """Call listener(kind) after each applied snapshot."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return bool(self._subscriptions)

    def start(self) -> None:
        """Subscribe to all four collections."""
        if self._subscriptions:
            return
        for kind, path in self._paths.items():
            subscription = self.store.subscribe(
                path,
                on_snapshot=partial(self._apply_snapshot, kind),
                on_error=partial(self._on_stream_error, kind),
            )
            self._subscriptions.append(subscription)
        self.logger.info("subscriptions_started", collections=len(self._subscriptions))

    def stop(self) -> None:
        """Unsubscribe from every collection. Mirrors keep their last contents."""
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        count = len(self._subscriptions)
        self._subscriptions = []
        self.logger.info("subscriptions_stopped", collections=count)

    def _apply_snapshot(self, kind: CollectionKind, snapshot: Snapshot) -> None:
        model = MODEL_FOR[kind]
        records = []
        for document in snapshot.documents:
            try:
                records.append(model.model_validate({**document.data, "id": document.id}))
            except ValidationError as e:
                self.logger.warning(
                    "invalid_document_skipped",
                    collection=kind.value,
                    doc_id=document.id,
                    error=str(e),
                )
        self._mirrors[kind] = records
        self.logger.debug("snapshot_applied", collection=kind.value, documents=len(records))
        for listener in list(self._listeners):
            try:
                listener(kind)
            except Exception as e:
                self.logger.error("listener_failed", collection=kind.value, error=str(e))

    def _on_stream_error(self, kind: CollectionKind, error: Exception) -> None:
        # Last-known-good mirror stays in place.
        self.logger.warning(
            "snapshot_stream_error",
            collection=kind.value,
            error=str(error),
            retained=len(self._mirrors[kind]),
        )

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    def _write(self, operation: str, kind: CollectionKind, action: Callable[[str], Any], **context: Any) -> Any:
        path = self._paths[kind]
        try:
            result = action(path)
        except Exception as e:
            self.logger.error("store_write_failed", operation=operation, collection=kind.value, error=str(e), **context)
            raise TransportError(operation, str(e)) from e
        self.logger.info("store_write_sent", operation=operation, collection=kind.value, **context)
        return result

    def create_load(self, load: Load) -> str:
        """Send a new load to the store and return the assigned id."""
        document = load.to_document()
        return self._write("create load", CollectionKind.LOADS, lambda path: self.store.add(path, document))

    def update_load(self, load_id: str, changes: dict[str, Any]) -> None:
        """Merge camelCase document fields into a stored load."""
        self._write(
            "update load",
            CollectionKind.LOADS,
            lambda path: self.store.update(path, load_id, changes),
            load_id=load_id,
        )

    def delete_load(self, load_id: str) -> None:
        self._write(
            "delete load",
            CollectionKind.LOADS,
            lambda path: self.store.delete(path, load_id),
            load_id=load_id,
        )

    def _add_reference(self, kind: CollectionKind, record: BaseModel) -> str:
        document = record.to_document()
        return self._write(f"add {kind.value[:-1]}", kind, lambda path: self.store.add(path, document))

    def _delete_reference(self, kind: CollectionKind, record_id: str) -> None:
        self._write(
            f"delete {kind.value[:-1]}",
            kind,
            lambda path: self.store.delete(path, record_id),
            record_id=record_id,
        )

    def add_customer(self, customer: Customer) -> str:
        return self._add_reference(CollectionKind.CUSTOMERS, customer)

    def add_location(self, location: Location) -> str:
        return self._add_reference(CollectionKind.LOCATIONS, location)

    def add_driver(self, driver: Driver) -> str:
        return self._add_reference(CollectionKind.DRIVERS, driver)

    def delete_customer(self, customer_id: str) -> None:
        self._delete_reference(CollectionKind.CUSTOMERS, customer_id)

    def delete_location(self, location_id: str) -> None:
        self._delete_reference(CollectionKind.LOCATIONS, location_id)

    def delete_driver(self, driver_id: str) -> None:
        self._delete_reference(CollectionKind.DRIVERS, driver_id)
