"""
Read-only projections handed to the document renderer (invoice, POD and
daily report). Money is computed and rounded here; renderers do no
arithmetic.
"""

import csv
import io
import re
from datetime import date
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from haulix.core.config import BillingVariant
from haulix.data.models.load import Leg, Load
from haulix.services.financials import summarize

REPORT_HEADERS = [
    "Container No",
    "Customer",
    "Shipping Line",
    "Size",
    "Weight",
    "PO Number",
    "Pickup No",
    "Origin",
    "Destination",
    "Driver(s)",
    "Truck(s)",
    "Appointment Time",
    "Status",
    "Total Revenue",
    "Total Cost",
    "Net Profit",
]


class LoadProjection(BaseModel):
    """One load with its two-decimal financials."""

    model_config = ConfigDict(frozen=True)

    load: Load
    company_name: str
    revenue: str
    cost: str
    profit: str


class PodProjection(LoadProjection):
    """Load projection plus the leg whose proof of delivery is printed."""

    leg: Leg


class DailyReportRow(BaseModel):
    """One CSV line of the daily report."""

    container_no: str
    customer: str
    shipping_line: str
    size: str
    weight: str
    po_number: str
    pickup_no: str
    origin: str
    destination: str
    drivers: str
    trucks: str
    appointment_time: str
    status: str
    revenue: str
    cost: str
    profit: str

    def values(self) -> list[str]:
        return [
            self.container_no,
            self.customer,
            self.shipping_line,
            self.size,
            self.weight,
            self.po_number,
            self.pickup_no,
            self.origin,
            self.destination,
            self.drivers,
            self.trucks,
            self.appointment_time,
            self.status,
            f"${self.revenue}",
            f"${self.cost}",
            f"${self.profit}",
        ]


class DailyReport(BaseModel):
    """All loads with an appointment on one day."""

    day: date
    company_name: str
    rows: list[DailyReportRow] = Field(default_factory=list)

    @property
    def filename(self) -> str:
        company = re.sub(r"\s+", "_", self.company_name or "Company")
        return f"{company}_Daily_Report_{self.day.isoformat()}.csv"


def project_load(
    load: Load,
    company_name: str,
    variant: BillingVariant = BillingVariant.COST_TRACKING,
) -> LoadProjection:
    money = summarize(load, variant).formatted()
    return LoadProjection(load=load, company_name=company_name, **money)


def project_pod(
    load: Load,
    leg_id: str,
    company_name: str,
    variant: BillingVariant = BillingVariant.COST_TRACKING,
) -> PodProjection:
    """
    Projection for one leg's proof of delivery.

    Raises:
        RecordNotFoundError: If the leg is not on the load
    """
    leg = load.find_leg(leg_id)
    money = summarize(load, variant).formatted()
    return PodProjection(load=load, leg=leg, company_name=company_name, **money)


def daily_report(
    loads: Iterable[Load],
    day: date,
    company_name: str,
    variant: BillingVariant = BillingVariant.COST_TRACKING,
) -> DailyReport:
    """Build the daily report for every load with an appointment on day."""
    rows = []
    for load in loads:
        if load.appointment_day != day:
            continue
        money = summarize(load, variant).formatted()
        rows.append(
            DailyReportRow(
                container_no=load.container_no,
                customer=load.customer_name,
                shipping_line=load.shipping_line,
                size=load.size,
                weight=load.weight,
                po_number=load.po_number,
                pickup_no=load.pickup_no,
                origin=load.origin or "N/A",
                destination=load.destination or "N/A",
                drivers=" / ".join(load.drivers) or "TBD",
                trucks=" / ".join(load.trucks) or "TBD",
                appointment_time=load.appointment_time,
                status=load.status.value,
                **money,
            )
        )
    return DailyReport(day=day, company_name=company_name, rows=rows)


def daily_report_csv(report: DailyReport) -> str:
    """Render the daily report as CSV text (every field quoted)."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(REPORT_HEADERS)
    for row in report.rows:
        writer.writerow(row.values())
    return buffer.getvalue()
