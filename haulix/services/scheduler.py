"""
Assignment board: a day's open loads grouped into appointment time slots.
"""

from datetime import date
from typing import Iterable

from pydantic import BaseModel, Field

from haulix.data.models.load import Load, LoadStatus


class AssignmentSlot(BaseModel):
    """One time window on the assignment board."""

    id: str
    label: str
    start_hour: int
    end_hour: int
    loads: list[Load] = Field(default_factory=list)

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour <= self.end_hour


# (id, label, first hour, last hour), in board order
SLOT_WINDOWS = (
    ("early", "00:00 - 07:59", 0, 7),
    ("morning", "08:00 - 09:59", 8, 9),
    ("midday", "10:00 - 12:59", 10, 12),
    ("afternoon", "13:00 - 15:59", 13, 15),
    ("late", "16:00 - 23:59", 16, 23),
)


def assignment_slots(loads: Iterable[Load], day: date) -> list[AssignmentSlot]:
    """
    Bucket the day's Open loads by appointment hour.

    All five slots are returned in fixed order even when empty. A missing
    or unparseable appointment time counts as hour 0.

    Args:
        loads: Full load collection
        day: Calendar date to show

    Returns:
        List of AssignmentSlot, early to late
    """
    day_loads = [
        load
        for load in loads
        if load.status == LoadStatus.OPEN and load.appointment_day == day
    ]
    slots = []
    for slot_id, label, start, end in SLOT_WINDOWS:
        slot = AssignmentSlot(id=slot_id, label=label, start_hour=start, end_hour=end)
        slot.loads = [load for load in day_loads if slot.contains(load.appointment_hour)]
        slots.append(slot)
    return slots
