"""Shared fixtures: in-memory store, resolved session, live adapter, fakes."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from haulix.core.config import ConfigManager, EnvironmentSettings
from haulix.data.models.load import Leg, Load
from haulix.services.commands import DispatchCommands
from haulix.services.ports import OutboundEmail
from haulix.store.adapter import ReactiveStoreAdapter
from haulix.store.backend import InMemoryDocumentStore
from haulix.store.paths import CollectionKind
from haulix.store.session import Identity, SessionContext, resolve_session


class FakeStorage:
    """Attachment storage keeping bytes in a dict."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.fail_upload: Optional[Exception] = None

    def upload(self, data: bytes, destination_path: str) -> str:
        if self.fail_upload is not None:
            raise self.fail_upload
        self.files[destination_path] = data
        return f"store://{destination_path}"

    def resolve(self, locator: str) -> str:
        return locator.replace("store://", "https://files.example.com/")


class RecordingMailer:
    """Email dispatcher that records messages."""

    def __init__(self) -> None:
        self.sent: list[OutboundEmail] = []
        self.result = True
        self.error: Optional[Exception] = None

    def send(self, email: OutboundEmail) -> bool:
        if self.error is not None:
            raise self.error
        self.sent.append(email)
        return self.result


def make_config(config_dir: Path, yaml_text: Optional[str] = None) -> ConfigManager:
    config_dir.mkdir(parents=True, exist_ok=True)
    if yaml_text is not None:
        (config_dir / "config.yaml").write_text(yaml_text)
    env = EnvironmentSettings(
        _env_file=None,
        app_id="test-app",
        upload_dir=str(config_dir / "uploads"),
    )
    return ConfigManager(config_dir=config_dir, env=env)


@pytest.fixture
def config(tmp_path: Path) -> ConfigManager:
    return make_config(tmp_path / "config")


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def session(store: InMemoryDocumentStore, config: ConfigManager) -> SessionContext:
    return resolve_session(store, Identity(uid="user-1", email="owner@example.com"), config)


@pytest.fixture
def loads_path(session: SessionContext) -> str:
    return session.paths.collection(CollectionKind.LOADS)


@pytest.fixture
def adapter(store: InMemoryDocumentStore, session: SessionContext):
    adapter = ReactiveStoreAdapter(store, session)
    adapter.start()
    yield adapter
    adapter.stop()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def commands(adapter, storage, mailer, config) -> DispatchCommands:
    return DispatchCommands(adapter, storage, mailer, config_manager=config)


def make_load(**overrides) -> Load:
    """Open load with one leg Port A -> Warehouse B."""
    fields = {
        "container_no": "MSCU1234567",
        "shipping_line": "MSC",
        "customer_name": "Acme Imports",
        "customer_email": "billing@acme.example",
        "appointment_date": "2026-10-19",
        "appointment_time": "09:30",
        "base_price": "500",
        "fuel_surcharge": "50",
        "legs": [
            Leg(
                id="1",
                origin="Port A",
                destination="Warehouse B",
                driver_name="Sam Ortiz",
                truck_no="T-101",
                driver_pay="200",
            )
        ],
    }
    fields.update(overrides)
    return Load.model_validate(fields)


def three_leg_load(**overrides) -> Load:
    legs = [
        Leg(id="1", origin="Port A", destination="Yard", status="Completed"),
        Leg(id="2", origin="Yard", destination="Warehouse B", status="Completed"),
        Leg(id="3", origin="Warehouse B", destination="Port A", status="Dispatched"),
    ]
    return make_load(legs=legs, **overrides)
