"""Tests for dispatcher commands."""

import pytest

from haulix.core.errors import RecordNotFoundError
from haulix.data.models.load import Attachment, LegStatus, LoadStatus, SignatureCapture
from haulix.data.models.reference import Customer, Driver, Location
from haulix.services.commands import DispatchCommands
from tests.conftest import make_config, make_load


def _create(commands, **overrides):
    result = commands.submit_load(make_load(**overrides))
    assert result.ok, result.message
    return commands.adapter.loads[-1]


def test_submit_creates_load(commands, adapter):
    result = commands.submit_load(make_load())

    assert result.level == "success"
    assert result.message == "Load created"
    [load] = adapter.loads
    assert load.id
    assert load.container_no == "MSCU1234567"
    assert load.date_added


def test_submit_succeeds_when_a_change_listener_fails(commands, adapter):
    def broken(kind):
        raise RuntimeError("listener bug")

    adapter.add_listener(broken)

    result = commands.submit_load(make_load())

    assert result.level == "success"
    assert result.message == "Load created"
    assert len(adapter.loads) == 1


def test_submit_fills_configured_tracking_status(adapter, storage, mailer, tmp_path):
    config = make_config(tmp_path / "tracking", "tracking:\n  default_status: Awaiting Vessel\n")
    commands = DispatchCommands(adapter, storage, mailer, config_manager=config)

    assert commands.submit_load(make_load(last_tracking_status="")).ok
    assert adapter.loads[0].last_tracking_status == "Awaiting Vessel"


def test_submit_invalid_load_writes_nothing(commands, store, loads_path):
    result = commands.submit_load(make_load(container_no=""))

    assert result.level == "error"
    assert result.message == "Container number is required"
    assert store.snapshot(loads_path).documents == []


def test_submit_edit_overwrites_fields(commands, adapter):
    load = _create(commands)

    result = commands.submit_load(load.model_copy(update={"notes": "Gate closes at 3"}), editing_id=load.id)

    assert result.message == "Load updated"
    assert len(adapter.loads) == 1
    assert adapter.find_load(load.id).notes == "Gate closes at 3"


def test_submit_edit_of_missing_load_fails(commands, adapter):
    result = commands.submit_load(make_load(), editing_id="gone")

    assert not result.ok
    assert result.message == "Load not found: gone"
    assert adapter.loads == []


def test_status_round_trip_leaves_other_fields(commands, adapter):
    load = _create(commands)

    assert commands.set_status(load.id, LoadStatus.BILLING).message == "Moved to Billing"
    billed = adapter.find_load(load.id)
    assert billed.status == LoadStatus.BILLING
    assert commands.set_status(load.id, "Open").ok

    assert adapter.find_load(load.id) == load


def test_status_change_is_not_gated_on_billing_fields(commands, adapter):
    load = _create(commands, customer_name="")

    assert commands.set_status(load.id, "Billing").ok
    assert adapter.find_load(load.id).status == LoadStatus.BILLING


def test_status_of_missing_load(commands):
    result = commands.set_status("nope", "Billing")

    assert result.level == "error"
    assert result.message == "Load not found: nope"


def test_pricing_only_rejects_completed(adapter, storage, mailer, tmp_path):
    config = make_config(tmp_path / "pricing", "billing:\n  variant: pricing_only\n")
    commands = DispatchCommands(adapter, storage, mailer, config_manager=config)
    load = _create(commands)

    result = commands.set_status(load.id, "Completed")

    assert not result.ok
    assert adapter.find_load(load.id).status == LoadStatus.OPEN


def test_delete_load(commands, adapter):
    load = _create(commands)

    assert commands.delete_load(load.id).message == "Load deleted"
    assert adapter.loads == []
    assert not commands.delete_load(load.id).ok


def test_update_tracking_status(commands, adapter):
    load = _create(commands)

    assert commands.update_tracking_status(load.id, "Discharged").ok
    assert adapter.find_load(load.id).last_tracking_status == "Discharged"


def test_sign_leg_syncs_through_store(commands, adapter):
    load = _create(commands)
    capture = SignatureCapture(
        arrival_time="10:00", departure_time="10:45", receiver_name="Dana", signature="data:,sig"
    )

    result = commands.sign_leg(load.id, "1", capture)

    assert result.message == "Leg signed & synced"
    leg = adapter.find_load(load.id).find_leg("1")
    assert leg.status == LegStatus.COMPLETED
    assert leg.receiver_name == "Dana"


def test_sign_unknown_leg(commands):
    load = _create(commands)
    capture = SignatureCapture(arrival_time="", departure_time="", receiver_name="", signature="")

    result = commands.sign_leg(load.id, "9", capture)

    assert result.message == "Leg not found: 9"


def test_update_leg(commands, adapter):
    load = _create(commands)

    assert commands.update_leg(load.id, "1", driver_name="Lee", status="Dispatched").ok

    leg = adapter.find_load(load.id).find_leg("1")
    assert leg.driver_name == "Lee"
    assert leg.status == LegStatus.DISPATCHED
    assert not commands.update_leg(load.id, "1", status="Unknown").ok


def test_attach_document(commands, adapter, storage):
    load = _create(commands)

    result = commands.attach_document(load.id, "signedPodDoc", "pod.pdf", "application/pdf", b"%PDF")

    assert result.message == "Uploaded pod.pdf"
    attachment = adapter.find_load(load.id).signed_pod_doc
    assert attachment.name == "pod.pdf"
    assert attachment.mime_type == "application/pdf"
    assert attachment.locator.startswith("store://loads/")
    assert attachment.locator.endswith("_pod.pdf")
    assert list(storage.files.values()) == [b"%PDF"]


def test_failed_upload_keeps_existing_attachment(commands, adapter, storage):
    existing = Attachment(name="old.pdf", mime_type="application/pdf", locator="store://loads/1_old.pdf")
    load = _create(commands, load_confirmation=existing)
    storage.fail_upload = OSError("disk full")

    result = commands.attach_document(load.id, "loadConfirmation", "new.pdf", "application/pdf", b"x")

    assert result.level == "error"
    assert result.message == "upload failed: disk full"
    assert adapter.find_load(load.id).load_confirmation == existing


def test_attach_to_unknown_slot(commands, storage):
    load = _create(commands)

    result = commands.attach_document(load.id, "rateSheet", "a.pdf", "application/pdf", b"x")

    assert result.message == "Unknown document slot: rateSheet"
    assert storage.files == {}


def test_send_invoice_email_with_attachments(commands, mailer):
    confirmation = Attachment(name="rc.pdf", locator="store://loads/1_rc.pdf")
    invoice = Attachment(name="inv.pdf", locator="store://loads/2_inv.pdf")
    load = _create(commands, load_confirmation=confirmation, invoice_doc=invoice)

    result = commands.send_invoice_email(load.id)

    assert result.message == "Email sent"
    [email] = mailer.sent
    assert email.to == "billing@acme.example"
    assert email.subject == "Invoice: MSCU1234567"
    assert "Amount Due: $550.00" in email.text
    assert "<br>" in email.html and "\n" not in email.html
    assert email.attachment_urls == [
        "https://files.example.com/loads/1_rc.pdf",
        "https://files.example.com/loads/2_inv.pdf",
    ]


def test_send_invoice_email_with_custom_body(commands, mailer):
    load = _create(commands)

    assert commands.send_invoice_email(load.id, body="Hi\nthere").ok
    assert mailer.sent[0].html == "Hi<br>there"
    assert mailer.sent[0].attachment_urls == []


def test_send_invoice_email_without_customer_email(commands, mailer):
    load = _create(commands, customer_email="")

    result = commands.send_invoice_email(load.id)

    assert result.message == "No customer email found"
    assert mailer.sent == []


def test_send_invoice_email_requires_customer_name(commands, mailer):
    load = _create(commands, customer_name="")

    assert commands.send_invoice_email(load.id).message == "Customer name is required for billing"


def test_send_invoice_email_dispatch_failure(commands, mailer):
    load = _create(commands)
    mailer.result = False

    result = commands.send_invoice_email(load.id)

    assert result.level == "error"
    assert result.message.startswith("send email failed")

    mailer.error = TimeoutError("smtp timeout")
    assert commands.send_invoice_email(load.id).message == "send email failed: smtp timeout"


def test_draft_invoice(commands):
    load = _create(commands)

    draft = commands.draft_invoice(load.id)

    assert draft.startswith("Dear Acme Imports,")
    assert draft.endswith("Haulix Dispatch Team")


def test_draft_invoice_for_unknown_load_raises(commands):
    with pytest.raises(RecordNotFoundError, match="Load not found: gone"):
        commands.draft_invoice("gone")


def test_address_book(commands, adapter):
    assert commands.add_customer(Customer(name="Acme", email="ap@acme.example")).message == "Customer saved"
    assert commands.add_location(Location(name="Port A", address="1 Harbor Rd")).message == "Location saved"
    assert commands.add_driver(Driver(name="Sam", truck_no="T-1")).message == "Driver saved"
    assert not commands.add_customer(Customer(name="  ")).ok

    assert [c.name for c in adapter.customers] == ["Acme"]
    assert commands.delete_location(adapter.locations[0].id).message == "Location deleted"
    assert commands.delete_driver(adapter.drivers[0].id).ok
    assert commands.delete_customer(adapter.customers[0].id).ok
    assert adapter.customers == adapter.locations == adapter.drivers == []
