"""
Application wiring: config, logging, store, session and adapter.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

from haulix.core.config import ConfigManager, get_config
from haulix.core.logging import configure_logging
from haulix.services.commands import DispatchCommands
from haulix.services.ports import AttachmentStorage, EmailDispatcher, LocalAttachmentStorage, LogEmailDispatcher
from haulix.store.adapter import ReactiveStoreAdapter
from haulix.store.backend import DocumentStore, InMemoryDocumentStore
from haulix.store.session import Identity, SessionContext, resolve_session
from haulix.store.sqlite import SqliteDocumentStore


class Application(BaseModel):
    """A signed-in session with its live adapter and command surface."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session: SessionContext
    store: DocumentStore
    adapter: ReactiveStoreAdapter
    commands: DispatchCommands

    def close(self) -> None:
        """Tear down all collection subscriptions."""
        self.adapter.stop()


def build_store(config: ConfigManager) -> DocumentStore:
    """Create the store backend named by STORE_BACKEND."""
    backend = config.env.store_backend.lower()
    if backend == "sqlite":
        return SqliteDocumentStore(config.env.store_path)
    if backend == "memory":
        return InMemoryDocumentStore()
    raise ValueError(f"Unsupported store backend: {backend}")


def start_session(
    identity: Identity,
    config: Optional[ConfigManager] = None,
    store: Optional[DocumentStore] = None,
    storage: Optional[AttachmentStorage] = None,
    mailer: Optional[EmailDispatcher] = None,
) -> Application:
    """
    Sign in, resolve the tenant and start mirroring its collections.

    Args:
        identity: Authenticated user
        config: Optional config manager (defaults to global instance)
        store: Optional store (defaults to the configured backend)
        storage: Optional attachment storage (defaults to UPLOAD_DIR on disk)
        mailer: Optional email dispatcher (defaults to logging only)

    Returns:
        Application with a running adapter
    """
    config = config or get_config()
    store = store or build_store(config)
    session = resolve_session(store, identity, config)
    adapter = ReactiveStoreAdapter(store, session)
    adapter.start()
    commands = DispatchCommands(
        adapter,
        storage or LocalAttachmentStorage(config.env.upload_dir),
        mailer or LogEmailDispatcher(),
        config_manager=config,
    )
    return Application(session=session, store=store, adapter=adapter, commands=commands)


def main() -> None:
    """Example usage: create a load and print today's board."""
    from haulix.data.models.load import Leg, new_load
    from haulix.services.action_required import action_required
    from haulix.services.financials import summarize
    from haulix.services.scheduler import assignment_slots

    config = get_config()
    configure_logging(config.env.log_level, config.env.log_format)

    app = start_session(Identity(uid="demo-user", email="dispatch@example.com"), config)
    today = date.today()

    load = new_load(
        container_no="MSCU1234567",
        shipping_line="MSC",
        customer_name="Acme Imports",
        appointment_date=today.isoformat(),
        appointment_time="09:30",
        base_price="500",
        fuel_surcharge="50",
        legs=[Leg(id="1", origin="Port A", destination="Warehouse B", driver_pay="200")],
    )
    print(app.commands.submit_load(load).message)

    print("\n" + "=" * 80)
    print(f"ASSIGNMENT BOARD - {app.session.company_name} - {today.isoformat()}")
    print("=" * 80)
    for slot in assignment_slots(app.adapter.loads, today):
        print(f"{slot.label}: {len(slot.loads)} load(s)")
        for item in slot.loads:
            money = summarize(item, app.commands.variant)
            print(
                f"  {item.container_no} {item.origin} -> {item.destination} "
                f"rev ${money.revenue} cost ${money.cost} profit ${money.profit}"
            )

    view = action_required(app.adapter.loads)
    print(f"\nReady to bill: {len(view.pending_termination)}")
    print(f"Partially complete: {len(view.partially_pending)}")
    print("=" * 80)

    app.close()


if __name__ == "__main__":
    main()
