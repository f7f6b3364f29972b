"""
Address-book records and tenant records.

Customers, locations and drivers are suggestion sources: a load copies
their values when one is picked and keeps no link back.
"""

from datetime import datetime
from typing import Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReferenceModel(BaseModel):
    """Base for address-book documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[str] = None

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class Customer(ReferenceModel):
    """Saved billing customer."""

    name: str
    email: str = ""
    address: str = ""


class Location(ReferenceModel):
    """Saved pickup/delivery location."""

    name: str
    address: str = ""

    @property
    def label(self) -> str:
        """Composite "Name - Address" text written onto a leg."""
        return f"{self.name} - {self.address}"


class Driver(ReferenceModel):
    """Saved driver and the truck they usually run."""

    name: str
    truck_no: str = ""


class Company(ReferenceModel):
    """Tenant record that owns every collection."""

    name: str
    address: str = ""
    email: str = ""
    created_at: datetime = Field(default_factory=datetime.now)


class UserProfile(ReferenceModel):
    """Per-user record pointing at the user's company."""

    email: Optional[str] = None
    company_id: str
    role: str = "owner"
    created_at: datetime = Field(default_factory=datetime.now)


RecordT = TypeVar("RecordT", Customer, Location, Driver)


def suggest(records: Sequence[RecordT], term: str) -> list[RecordT]:
    """Records whose name contains the typed term (case-insensitive)."""
    needle = (term or "").lower()
    return [record for record in records if needle in record.name.lower()]
