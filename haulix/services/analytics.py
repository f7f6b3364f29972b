"""
Profit dashboard aggregates.

Totals and top-five rankings by customer, lane, truck and driver, plus a
six-month revenue/profit trend.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal, localcontext
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from haulix.core.config import BillingVariant
from haulix.data.models.load import Load
from haulix.services.financials import MONEY_CONTEXT, ZERO, round_cents, summarize

TOP_N = 5
TREND_MONTHS = 6


class RankedEntry(BaseModel):
    """Revenue and profit attributed to one customer, lane, truck or driver."""

    name: str
    revenue: Decimal
    profit: Decimal


class MonthTotal(BaseModel):
    """Revenue and profit for one calendar month."""

    label: str
    year: int
    month: int
    revenue: Decimal = ZERO
    profit: Decimal = ZERO


class ProfitDashboard(BaseModel):
    """Aggregates over a set of loads."""

    total_revenue: Decimal
    total_cost: Decimal
    total_profit: Decimal
    gross_margin_pct: Decimal
    top_customers: list[RankedEntry] = Field(default_factory=list)
    top_lanes: list[RankedEntry] = Field(default_factory=list)
    top_trucks: list[RankedEntry] = Field(default_factory=list)
    top_drivers: list[RankedEntry] = Field(default_factory=list)
    trend: list[MonthTotal] = Field(default_factory=list)


def _place_name(composite: str, fallback: str) -> str:
    # Legs filled from a saved location read "Name - Address".
    return composite.split(" - ")[0] or fallback


def lane_name(load: Load) -> Optional[str]:
    """Lane label "Origin → Destination" from the name part of each end; None without legs."""
    if not load.legs:
        return None
    origin = _place_name(load.legs[0].origin, "Unknown Origin")
    destination = _place_name(load.legs[-1].destination, "Unknown Dest")
    return f"{origin} → {destination}"


def _rank(totals: dict[str, list[Decimal]]) -> list[RankedEntry]:
    entries = [
        RankedEntry(name=name, revenue=round_cents(rev), profit=round_cents(profit))
        for name, (rev, profit) in totals.items()
    ]
    entries.sort(key=lambda entry: entry.revenue, reverse=True)
    return entries[:TOP_N]


def _trend_months(today: date) -> list[MonthTotal]:
    months = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        index = today.year * 12 + today.month - 1 - offset
        year, month = divmod(index, 12)
        label = date(year, month + 1, 1).strftime("%b %y")
        months.append(MonthTotal(label=label, year=year, month=month + 1))
    return months


def _load_month(load: Load) -> Optional[tuple[int, int]]:
    day = load.appointment_day
    if day is not None:
        return day.year, day.month
    if load.date_added:
        try:
            added = datetime.fromisoformat(load.date_added.replace("Z", "+00:00"))
        except ValueError:
            return None
        return added.year, added.month
    return None


def profit_dashboard(
    loads: Iterable[Load],
    today: Optional[date] = None,
    variant: BillingVariant = BillingVariant.COST_TRACKING,
) -> ProfitDashboard:
    """
    Build the profit dashboard for a set of loads.

    Revenue and profit of a load with several trucks (or drivers) are split
    evenly across them.

    Args:
        loads: Loads to aggregate
        today: Reference day for the trend window (defaults to today)
        variant: Billing variant used for cost

    Returns:
        ProfitDashboard
    """
    today = today or date.today()
    customers: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    lanes: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    trucks: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    drivers: dict[str, list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    months = _trend_months(today)
    month_index = {(m.year, m.month): m for m in months}

    total_revenue = ZERO
    total_cost = ZERO

    with localcontext(MONEY_CONTEXT):
        for load in loads:
            summary = summarize(load, variant)
            revenue, profit = summary.revenue, summary.profit
            total_revenue += revenue
            total_cost += summary.cost

            customer = customers[load.customer_name or "Unknown"]
            customer[0] += revenue
            customer[1] += profit

            lane = lane_name(load)
            if lane is not None:
                lanes[lane][0] += revenue
                lanes[lane][1] += profit

            for names, bucket in ((load.trucks, trucks), (load.drivers, drivers)):
                if not names:
                    continue
                share = Decimal(len(names))
                for name in names:
                    bucket[name][0] += revenue / share
                    bucket[name][1] += profit / share

            key = _load_month(load)
            if key in month_index:
                month_index[key].revenue += revenue
                month_index[key].profit += profit

        total_profit = total_revenue - total_cost
        margin = ZERO
        if total_revenue > 0:
            margin = (total_profit / total_revenue * 100).quantize(Decimal("0.1"))

    return ProfitDashboard(
        total_revenue=total_revenue,
        total_cost=total_cost,
        total_profit=total_profit,
        gross_margin_pct=margin,
        top_customers=_rank(customers),
        top_lanes=_rank(lanes),
        top_trucks=_rank(trucks),
        top_drivers=_rank(drivers),
        trend=months,
    )
