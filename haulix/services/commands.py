"""
User-initiated commands.

Every command validates against the adapter's current snapshot, sends its
write to the store and returns a short Notification. Failures are reported
the same way; nothing raised by a collaborator escapes a command and the
in-memory mirrors are never edited directly. draft_invoice is a read-only
query and raises RecordNotFoundError for an unknown load.
"""

from datetime import datetime
from time import time
from typing import Any, Callable, Literal, Optional

import structlog
from pydantic import BaseModel

from haulix.core.config import BillingVariant, ConfigManager, get_config
from haulix.core.errors import HaulixError, LoadValidationError, TransportError
from haulix.data.models.load import Attachment, AttachmentSlot, Load, LoadStatus, SignatureCapture
from haulix.data.models.reference import Customer, Driver, Location
from haulix.services.messaging import build_invoice_email, draft_invoice_email
from haulix.services.ports import AttachmentStorage, EmailDispatcher
from haulix.store.adapter import ReactiveStoreAdapter


class Notification(BaseModel):
    """Transient status message shown after a command."""

    level: Literal["success", "error"]
    message: str

    @property
    def ok(self) -> bool:
        return self.level == "success"


class DispatchCommands:
    """
    Command surface for dispatchers.

    Provides:
    - Load create/update/delete and status moves
    - Leg signing and leg field edits
    - Two-phase document attachment
    - Invoice email dispatch
    - Address-book maintenance
    """

    def __init__(
        self,
        adapter: ReactiveStoreAdapter,
        storage: AttachmentStorage,
        mailer: EmailDispatcher,
        config_manager: Optional[ConfigManager] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        self.adapter = adapter
        self.session = adapter.session
        self.storage = storage
        self.mailer = mailer
        self.config_manager = config_manager or get_config()
        self.variant: BillingVariant = self.config_manager.get_billing_variant()
        self.logger = logger or structlog.get_logger(
            component="commands", company_id=self.session.company_id
        )

    def _run(self, command: str, action: Callable[[], str], **context: Any) -> Notification:
        try:
            message = action()
        except HaulixError as e:
            self.logger.warning("command_failed", command=command, error=e.message, **context)
            return Notification(level="error", message=e.message)
        self.logger.info("command_succeeded", command=command, **context)
        return Notification(level="success", message=message)

    # ------------------------------------------------------------------
    # Loads
    # ------------------------------------------------------------------

    def submit_load(self, load: Load, editing_id: Optional[str] = None) -> Notification:
        """Create a load, or overwrite the fields of the load being edited."""

        def action() -> str:
            load.validate_for_submission()
            stamped = load.with_status(load.status, self.variant).model_copy(
                update={"date_added": datetime.now().isoformat()}
            )
            if editing_id:
                self.adapter.find_load(editing_id)
                self.adapter.update_load(editing_id, stamped.to_document())
                return "Load updated"
            if not stamped.last_tracking_status:
                default_status = self.config_manager.get_tracking_defaults()["default_status"]
                stamped = stamped.model_copy(update={"last_tracking_status": default_status})
            self.adapter.create_load(stamped)
            return "Load created"

        return self._run("submit_load", action, load_id=editing_id)

    def set_status(self, load_id: str, status: LoadStatus | str) -> Notification:
        """Move a load to Open, Billing or Completed."""

        def action() -> str:
            updated = self.adapter.find_load(load_id).with_status(status, self.variant)
            self.adapter.update_load(load_id, {"status": updated.status.value})
            return f"Moved to {updated.status.value}"

        return self._run("set_status", action, load_id=load_id)

    def delete_load(self, load_id: str) -> Notification:
        def action() -> str:
            self.adapter.find_load(load_id)
            self.adapter.delete_load(load_id)
            return "Load deleted"

        return self._run("delete_load", action, load_id=load_id)

    def update_tracking_status(self, load_id: str, tracking_status: str) -> Notification:
        def action() -> str:
            self.adapter.find_load(load_id)
            self.adapter.update_load(load_id, {"lastTrackingStatus": tracking_status})
            return f"Tracking updated: {tracking_status}"

        return self._run("update_tracking_status", action, load_id=load_id)

    # ------------------------------------------------------------------
    # Legs
    # ------------------------------------------------------------------

    def _write_legs(self, load: Load) -> None:
        self.adapter.update_load(load.id, {"legs": [leg.to_document() for leg in load.legs]})

    def sign_leg(self, load_id: str, leg_id: str, capture: SignatureCapture) -> Notification:
        """Save proof of delivery on a leg; the leg becomes Completed."""

        def action() -> str:
            signed = self.adapter.find_load(load_id).sign_leg(leg_id, capture)
            self._write_legs(signed)
            return "Leg signed & synced"

        return self._run("sign_leg", action, load_id=load_id, leg_id=leg_id)

    def update_leg(self, load_id: str, leg_id: str, **changes: Any) -> Notification:
        """Plain field edit on one leg (route, driver, truck, status, costs)."""

        def action() -> str:
            updated = self.adapter.find_load(load_id).update_leg(leg_id, **changes)
            self._write_legs(updated)
            return "Leg updated"

        return self._run("update_leg", action, load_id=load_id, leg_id=leg_id)

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def attach_document(
        self,
        load_id: str,
        slot: AttachmentSlot | str,
        filename: str,
        mime_type: str,
        data: bytes,
    ) -> Notification:
        """
        Upload a document and then point the load's slot at it.

        The slot is written only after the upload succeeds; a failed
        upload leaves the existing attachment as it was.
        """

        def action() -> str:
            try:
                target = AttachmentSlot(slot)
            except ValueError:
                raise LoadValidationError(f"Unknown document slot: {slot}") from None
            self.adapter.find_load(load_id)
            path = f"loads/{int(time() * 1000)}_{filename}"
            try:
                locator = self.storage.upload(data, path)
            except Exception as e:
                self.logger.error("attachment_upload_failed", load_id=load_id, path=path, error=str(e))
                raise TransportError("upload", str(e)) from e
            attachment = Attachment(name=filename, mime_type=mime_type, locator=locator)
            self.adapter.update_load(load_id, {target.value: attachment.to_document()})
            return f"Uploaded {filename}"

        return self._run("attach_document", action, load_id=load_id)

    # ------------------------------------------------------------------
    # Email
    # ------------------------------------------------------------------

    def draft_invoice(self, load_id: str) -> str:
        """
        Default invoice email body for a load.

        A query rather than a command: it writes nothing and returns the
        text itself instead of a Notification.

        Raises:
            RecordNotFoundError: If no load has this id
        """
        return draft_invoice_email(self.adapter.find_load(load_id), self.session.company_name)

    def send_invoice_email(self, load_id: str, body: Optional[str] = None) -> Notification:
        """Email the invoice, attaching every document the load carries."""

        def action() -> str:
            load = self.adapter.find_load(load_id)
            load.validate_for_billing()
            text = body if body is not None else draft_invoice_email(load, self.session.company_name)
            urls = []
            for attachment in (load.load_confirmation, load.signed_pod_doc, load.invoice_doc):
                if attachment is None:
                    continue
                try:
                    urls.append(self.storage.resolve(attachment.locator))
                except Exception as e:
                    raise TransportError("resolve attachment", str(e)) from e
            email = build_invoice_email(load, text, urls, self.config_manager.get_email_config())
            try:
                sent = self.mailer.send(email)
            except Exception as e:
                self.logger.error("email_dispatch_failed", load_id=load_id, error=str(e))
                raise TransportError("send email", str(e)) from e
            if not sent:
                self.logger.error("email_dispatch_failed", load_id=load_id, error="rejected")
                raise TransportError("send email", "dispatcher reported failure")
            self.logger.info("email_dispatched", load_id=load_id, attachments=len(urls))
            return "Email sent"

        return self._run("send_invoice_email", action, load_id=load_id)

    # ------------------------------------------------------------------
    # Address book
    # ------------------------------------------------------------------

    def add_customer(self, customer: Customer) -> Notification:
        def action() -> str:
            if not customer.name.strip():
                raise LoadValidationError("Customer name is required")
            self.adapter.add_customer(customer)
            return "Customer saved"

        return self._run("add_customer", action)

    def add_location(self, location: Location) -> Notification:
        def action() -> str:
            if not location.name.strip():
                raise LoadValidationError("Location name is required")
            self.adapter.add_location(location)
            return "Location saved"

        return self._run("add_location", action)

    def add_driver(self, driver: Driver) -> Notification:
        def action() -> str:
            if not driver.name.strip():
                raise LoadValidationError("Driver name is required")
            self.adapter.add_driver(driver)
            return "Driver saved"

        return self._run("add_driver", action)

    def delete_customer(self, customer_id: str) -> Notification:
        def action() -> str:
            self.adapter.delete_customer(customer_id)
            return "Customer deleted"

        return self._run("delete_customer", action, record_id=customer_id)

    def delete_location(self, location_id: str) -> Notification:
        def action() -> str:
            self.adapter.delete_location(location_id)
            return "Location deleted"

        return self._run("delete_location", action, record_id=location_id)

    def delete_driver(self, driver_id: str) -> Notification:
        def action() -> str:
            self.adapter.delete_driver(driver_id)
            return "Driver deleted"

        return self._run("delete_driver", action, record_id=driver_id)
