"""Tests for document projections, invoice email text and dispatch notes."""

from datetime import date

import pytest

from haulix.core.config import EmailConfig
from haulix.core.errors import LoadValidationError, RecordNotFoundError
from haulix.data.models.load import Leg
from haulix.services.documents import (
    REPORT_HEADERS,
    daily_report,
    daily_report_csv,
    project_load,
    project_pod,
)
from haulix.services.messaging import build_invoice_email, carrier_tracking_url, draft_invoice_email
from haulix.services.notes import dispatch_assignment_text, generate_dispatch_notes
from tests.conftest import make_load

DAY = date(2026, 10, 19)


def test_project_load_formats_money():
    projection = project_load(make_load(), "Acme Trucking")

    assert (projection.revenue, projection.cost, projection.profit) == ("550.00", "200.00", "350.00")
    assert projection.company_name == "Acme Trucking"


def test_project_pod():
    projection = project_pod(make_load(), "1", "Acme Trucking")

    assert projection.leg.origin == "Port A"
    with pytest.raises(RecordNotFoundError):
        project_pod(make_load(), "2", "Acme Trucking")


def test_daily_report_rows():
    loads = [
        make_load(),
        make_load(container_no="OTHER", appointment_date="2026-10-20"),
        make_load(container_no="NOLEGS", legs=[]),
    ]

    report = daily_report(loads, DAY, "Acme Trucking")

    assert [row.container_no for row in report.rows] == ["MSCU1234567", "NOLEGS"]
    first, empty = report.rows
    assert first.drivers == "Sam Ortiz"
    assert first.values()[-3:] == ["$550.00", "$200.00", "$350.00"]
    assert (empty.origin, empty.destination, empty.drivers, empty.trucks) == ("N/A", "N/A", "TBD", "TBD")
    assert report.filename == "Acme_Trucking_Daily_Report_2026-10-19.csv"


def test_daily_report_joins_multiple_drivers():
    load = make_load(
        legs=[
            Leg(id="1", driver_name="Sam", truck_no="T-1"),
            Leg(id="2", driver_name="Lee", truck_no="T-2"),
        ]
    )

    [row] = daily_report([load], DAY, "Acme").rows

    assert row.drivers == "Sam / Lee"
    assert row.trucks == "T-1 / T-2"


def test_daily_report_csv():
    text = daily_report_csv(daily_report([make_load()], DAY, "Acme"))

    header, line, trailer = text.split("\n")
    assert header == ",".join(f'"{name}"' for name in REPORT_HEADERS)
    assert line.startswith('"MSCU1234567","Acme Imports","MSC"')
    assert line.endswith('"$550.00","$200.00","$350.00"')
    assert trailer == ""


def test_draft_invoice_email():
    text = draft_invoice_email(make_load(po_number="PO-1"), "Acme Trucking")

    assert "- Container: MSCU1234567" in text
    assert "- PO Number: PO-1" in text
    assert "- Reference: N/A" in text
    assert "- Amount Due: $550.00" in text
    assert text.endswith("Acme Trucking Dispatch Team")


def test_build_invoice_email_uses_config():
    email = build_invoice_email(
        make_load(), "Body", ["https://x/a.pdf"], EmailConfig(sender_name="Ops", subject_prefix="Bill")
    )

    assert email.subject == "Bill: MSCU1234567"
    assert email.sender_name == "Ops"
    assert email.attachment_urls == ["https://x/a.pdf"]


def test_build_invoice_email_requires_address():
    with pytest.raises(LoadValidationError, match="No customer email found"):
        build_invoice_email(make_load(customer_email=" "), "Body", [])


@pytest.mark.parametrize(
    "line, fragment",
    [
        ("MSC", "msc.com"),
        ("Maersk", "maersk.com"),
        ("ONE Line", "one-line.com"),
        ("CPKC", "cpkcr.com"),
        ("Hapag", "google.com/search?q=Hapag+container+tracking"),
        ("Hapag Lloyd & Co", "google.com/search?q=Hapag+Lloyd+%26+Co+container+tracking"),
    ],
)
def test_carrier_tracking_url(line, fragment):
    assert fragment in carrier_tracking_url(line)


@pytest.mark.parametrize(
    "size, handling",
    [
        ("40ft Reefer", "ACTIVE REEFER"),
        ("40ft HC", "HIGH CUBE"),
        ("45ft", "HIGH CUBE"),
        ("20ft", "Standard dry freight"),
    ],
)
def test_dispatch_notes_handling(size, handling):
    notes = generate_dispatch_notes(make_load(size=size, weight="18000 lbs"))

    assert handling in notes
    assert "- From: Port A" in notes
    assert "- To: Warehouse B" in notes
    assert f"- Size/Type: {size} at 18000 lbs" in notes


def test_dispatch_notes_without_route():
    notes = generate_dispatch_notes(make_load(legs=[], shipping_line=""))

    assert "[Origin Not Set]" in notes
    assert "[Carrier Not Set]" in notes


def test_dispatch_assignment_text():
    load = make_load(legs=[Leg(id="1", origin="Port A", destination="Yard")])

    text = dispatch_assignment_text(load, load.legs[0])

    assert "Container: MSCU1234567" in text
    assert "Appointment: 2026-10-19 at 09:30" in text
    assert "Driver: TBD" in text
    assert "Truck: TBD" in text
