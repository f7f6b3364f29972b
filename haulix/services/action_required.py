"""
Derived views over the load collection: action required, daily summary
and search. Recomputed on every read; nothing here is stored.
"""

from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from haulix.data.models.load import LegStatus, Load, LoadStatus


def is_pending_termination(load: Load) -> bool:
    """Open, has legs, and every leg is Completed (ready for billing)."""
    return (
        load.status == LoadStatus.OPEN
        and len(load.legs) > 0
        and all(leg.status == LegStatus.COMPLETED for leg in load.legs)
    )


def is_partially_pending(load: Load) -> bool:
    """Open with some, but not all, legs Completed."""
    if load.status != LoadStatus.OPEN:
        return False
    completed = [leg.status == LegStatus.COMPLETED for leg in load.legs]
    return any(completed) and not all(completed)


class ActionRequiredView(BaseModel):
    """Loads that need a dispatcher's attention."""

    pending_termination: list[Load] = Field(default_factory=list)
    partially_pending: list[Load] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.pending_termination) + len(self.partially_pending)


def action_required(loads: Iterable[Load]) -> ActionRequiredView:
    loads = list(loads)
    return ActionRequiredView(
        pending_termination=[load for load in loads if is_pending_termination(load)],
        partially_pending=[load for load in loads if is_partially_pending(load)],
    )


class DailySummary(BaseModel):
    """Headline counts for the dashboard."""

    day: date
    loads_today: int
    active_trucks: int
    need_to_bill: int
    need_to_terminate: int


def daily_summary(loads: Iterable[Load], day: date) -> DailySummary:
    """
    Counts for one calendar day.

    Loads/trucks count only loads with that appointment date; the billing
    and termination counts cover the whole collection.
    """
    loads = list(loads)
    todays = [load for load in loads if load.appointment_day == day]
    trucks = {truck for load in todays for truck in load.trucks}
    return DailySummary(
        day=day,
        loads_today=len(todays),
        active_trucks=len(trucks),
        need_to_bill=sum(1 for load in loads if is_pending_termination(load)),
        need_to_terminate=sum(1 for load in loads if is_partially_pending(load)),
    )


def search_loads(
    loads: Iterable[Load],
    term: str = "",
    status: Optional[LoadStatus] = None,
) -> list[Load]:
    """
    Filter loads by a search term and optionally one status tab.

    The term matches container number, customer name, PO number or pickup
    number, case-insensitively.
    """
    needle = (term or "").lower()
    results = []
    for load in loads:
        haystack = (load.container_no, load.customer_name, load.po_number, load.pickup_no)
        if not any(needle in value.lower() for value in haystack):
            continue
        if status is not None and load.status != status:
            continue
        results.append(load)
    return results
