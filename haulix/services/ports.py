"""
Interfaces of the collaborators the command layer depends on, plus the
local-disk attachment storage.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Protocol

import structlog
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from haulix.services.documents import DailyReport, LoadProjection, PodProjection


class OutboundEmail(BaseModel):
    """Message handed to the email dispatcher."""

    to: str
    subject: str
    text: str
    html: str
    sender_name: Optional[str] = None
    attachment_urls: list[str] = Field(default_factory=list)


class AttachmentStorage(Protocol):
    """Byte storage for uploaded documents."""

    def upload(self, data: bytes, destination_path: str) -> str:
        """Store bytes and return a locator."""
        ...

    def resolve(self, locator: str) -> str:
        """Turn a locator into a downloadable URL."""
        ...


class EmailDispatcher(Protocol):
    """Outbound email transport."""

    def send(self, email: OutboundEmail) -> bool:
        """Send the message; True on success."""
        ...


class DocumentRenderer(Protocol):
    """Invoice/POD/report renderer. Receives pre-computed, rounded money."""

    def render_invoice(self, projection: LoadProjection) -> bytes:
        ...

    def render_pod(self, projection: PodProjection) -> bytes:
        ...

    def render_daily_report(self, report: DailyReport) -> bytes:
        ...


class LocalAttachmentStorage:
    """Stores uploads under a directory; locators are paths relative to it."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self.logger = structlog.get_logger(component="attachment_storage")

    def upload(self, data: bytes, destination_path: str) -> str:
        target = (self.root / destination_path).resolve()
        if self.root.resolve() not in target.parents:
            raise ValueError(f"destination escapes storage root: {destination_path}")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        self.logger.info("attachment_stored", locator=destination_path, size=len(data))
        return destination_path

    def resolve(self, locator: str) -> str:
        target = (self.root / locator).resolve()
        if not target.exists():
            raise FileNotFoundError(locator)
        return target.as_uri()


class LogEmailDispatcher:
    """Email dispatcher for local runs: logs the message instead of sending it."""

    def __init__(self) -> None:
        self.logger = structlog.get_logger(component="email")
        self.sent: list[OutboundEmail] = []

    def send(self, email: OutboundEmail) -> bool:
        self.sent.append(email)
        self.logger.info(
            "email_logged",
            to=email.to,
            subject=email.subject,
            attachments=len(email.attachment_urls),
        )
        return True
