"""
Load data model - represents one container shipment and its route legs.
"""

import re
from datetime import date
from enum import Enum
from time import time
from typing import Annotated, Any, Iterable, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from haulix.core.config import BillingVariant
from haulix.core.errors import LoadValidationError, RecordNotFoundError
from haulix.data.models.reference import Customer, Driver, Location


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _amount_text(value: Any) -> Optional[str]:
    # Money fields are free text in stored documents; numbers are kept as text.
    if value is None:
        return None
    return str(value)


Text = Annotated[str, BeforeValidator(_text)]
Amount = Annotated[Optional[str], BeforeValidator(_amount_text)]

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


class DocumentModel(BaseModel):
    """Base for records persisted as camelCase documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape (camelCase, no id)."""
        return self.model_dump(by_alias=True, exclude={"id"}, mode="json")


class LoadStatus(str, Enum):
    """Load billing lifecycle status."""

    OPEN = "Open"
    BILLING = "Billing"
    COMPLETED = "Completed"


class LegStatus(str, Enum):
    """Leg dispatch status."""

    PLANNED = "Planned"
    DISPATCHED = "Dispatched"
    COMPLETED = "Completed"


class AttachmentSlot(str, Enum):
    """Named document slots on a load."""

    LOAD_CONFIRMATION = "loadConfirmation"
    SIGNED_POD = "signedPodDoc"
    INVOICE = "invoiceDoc"

    @property
    def field_name(self) -> str:
        return {
            AttachmentSlot.LOAD_CONFIRMATION: "load_confirmation",
            AttachmentSlot.SIGNED_POD: "signed_pod_doc",
            AttachmentSlot.INVOICE: "invoice_doc",
        }[self]


class Attachment(DocumentModel):
    """Uploaded document reference."""

    name: str
    mime_type: str = Field("application/octet-stream", alias="type")
    locator: str


class ExtraCharge(DocumentModel):
    """Additional line item billed to the customer."""

    description: Text = ""
    amount: Amount = None


class SignatureCapture(BaseModel):
    """Proof-of-delivery data captured when a leg is signed."""

    arrival_time: str
    departure_time: str
    receiver_name: str
    signature: str = Field(..., description="Signature image (opaque, usually a data URI)")


class Leg(DocumentModel):
    """One point-to-point segment of a load's route."""

    id: Text
    origin: Text = Field("", alias="from")
    destination: Text = Field("", alias="to")
    driver_name: Text = ""
    truck_no: Text = ""
    status: LegStatus = LegStatus.PLANNED

    # Proof of delivery
    arrival_time: Text = ""
    departure_time: Text = ""
    receiver_name: Text = ""
    signature: Optional[str] = None

    # Per-leg costs
    driver_pay: Amount = None
    fuel_cost: Amount = None
    detention_pay: Amount = None

    def to_document(self) -> dict[str, Any]:
        """Legs are embedded in the load document and keep their id."""
        return self.model_dump(by_alias=True, mode="json")

    def signed(self, capture: SignatureCapture) -> "Leg":
        """Copy of this leg carrying the proof fields and status Completed."""
        return self.model_copy(
            update={
                "arrival_time": capture.arrival_time,
                "departure_time": capture.departure_time,
                "receiver_name": capture.receiver_name,
                "signature": capture.signature,
                "status": LegStatus.COMPLETED,
            }
        )


def new_leg(existing_ids: Iterable[str] = ()) -> Leg:
    """
    Create a blank Planned leg.

    The id is the creation time in milliseconds, bumped until it does not
    collide with any id already on the load.
    """
    taken = set(existing_ids)
    candidate = int(time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return Leg(id=str(candidate))


class Load(DocumentModel):
    """
    Represents a container shipment (the aggregate root).

    Legs are embedded in route order. Every mutation returns a new Load;
    nothing here writes to the store.
    """

    # Identification (assigned by the store)
    id: Optional[str] = None
    status: LoadStatus = LoadStatus.OPEN

    # Shipment identity
    container_no: Text = ""
    shipping_line: Text = ""
    size: Text = "40ft"
    weight: Text = ""
    po_number: Text = ""
    pickup_no: Text = ""
    customer_ref_no: Text = ""

    # Customer snapshot
    customer_name: Text = ""
    customer_email: Text = ""
    customer_address: Text = ""

    # Schedule
    appointment_date: Text = ""
    appointment_time: Text = ""

    # Revenue inputs
    base_price: Amount = None
    waiting_time: Amount = None
    fuel_surcharge: Amount = None
    prepull: Amount = None
    extra_charges: list[ExtraCharge] = Field(default_factory=list)

    # Cost inputs
    driver_cost: Amount = None
    fuel_cost: Amount = None
    broker_rate: Amount = None

    # Attachments
    load_confirmation: Optional[Attachment] = None
    signed_pod_doc: Optional[Attachment] = None
    invoice_doc: Optional[Attachment] = None

    notes: Text = ""
    last_tracking_status: Text = "Pending"
    date_added: Optional[str] = None

    legs: list[Leg] = Field(default_factory=list)

    @property
    def appointment_day(self) -> Optional[date]:
        """Appointment date parsed from ISO text, or None."""
        try:
            return date.fromisoformat(self.appointment_date.strip())
        except ValueError:
            return None

    @property
    def appointment_hour(self) -> int:
        """Hour of the appointment time; 0 when missing or unparseable."""
        match = _LEADING_DIGITS.match(self.appointment_time or "")
        if match is None:
            return 0
        return int(match.group(1))

    @property
    def origin(self) -> str:
        """Origin of the first leg."""
        return self.legs[0].origin if self.legs else ""

    @property
    def destination(self) -> str:
        """Destination of the last leg."""
        return self.legs[-1].destination if self.legs else ""

    @property
    def drivers(self) -> list[str]:
        """Distinct driver names across legs, in route order."""
        return list(dict.fromkeys(leg.driver_name for leg in self.legs if leg.driver_name))

    @property
    def trucks(self) -> list[str]:
        """Distinct truck numbers across legs, in route order."""
        return list(dict.fromkeys(leg.truck_no for leg in self.legs if leg.truck_no))

    def find_leg(self, leg_id: str) -> Leg:
        for leg in self.legs:
            if leg.id == leg_id:
                return leg
        raise RecordNotFoundError("Leg", leg_id)

    def with_status(
        self,
        status: LoadStatus | str,
        variant: BillingVariant = BillingVariant.COST_TRACKING,
    ) -> "Load":
        """
        Move the load to another status.

        Any status may follow any other; only the status field changes.
        The pricing-only variant has no Completed tier.

        Raises:
            LoadValidationError: If the status is unknown or not offered by the variant
        """
        try:
            target = LoadStatus(status)
        except ValueError:
            raise LoadValidationError(f"Unknown load status: {status}") from None
        if variant == BillingVariant.PRICING_ONLY and target == LoadStatus.COMPLETED:
            raise LoadValidationError("Completed is not available for pricing-only billing")
        return self.model_copy(update={"status": target})

    def sign_leg(self, leg_id: str, capture: SignatureCapture) -> "Load":
        """
        Record proof of delivery on one leg and mark it Completed.

        Raises:
            RecordNotFoundError: If the leg is not on this load
        """
        self.find_leg(leg_id)
        legs = [leg.signed(capture) if leg.id == leg_id else leg for leg in self.legs]
        return self.model_copy(update={"legs": legs})

    def update_leg(self, leg_id: str, **changes: Any) -> "Load":
        """
        Plain field update on one leg.

        Status may be set to any value here, including Completed without
        proof fields.
        """
        current = self.find_leg(leg_id)
        try:
            updated = Leg.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            raise LoadValidationError(f"Invalid leg update: {e.errors()[0]['msg']}") from e
        legs = [updated if leg.id == leg_id else leg for leg in self.legs]
        return self.model_copy(update={"legs": legs})

    def add_leg(self) -> "Load":
        """Append a blank Planned leg."""
        leg = new_leg(existing.id for existing in self.legs)
        return self.model_copy(update={"legs": [*self.legs, leg]})

    def remove_leg(self, leg_id: str) -> "Load":
        self.find_leg(leg_id)
        return self.model_copy(update={"legs": [leg for leg in self.legs if leg.id != leg_id]})

    def with_attachment(self, slot: AttachmentSlot, attachment: Attachment) -> "Load":
        return self.model_copy(update={slot.field_name: attachment})

    def apply_customer(self, customer: Customer) -> "Load":
        """Copy a saved customer's fields onto the load."""
        return self.model_copy(
            update={
                "customer_name": customer.name,
                "customer_email": customer.email,
                "customer_address": customer.address,
            }
        )

    def apply_location(self, leg_id: str, location: Location, end: str = "from") -> "Load":
        """Fill a leg's origin ("from") or destination ("to") from a saved location."""
        if end not in ("from", "to"):
            raise ValueError(f"end must be 'from' or 'to', got {end!r}")
        field = "origin" if end == "from" else "destination"
        return self.update_leg(leg_id, **{field: location.label})

    def apply_driver(self, leg_id: str, driver: Driver) -> "Load":
        """Assign a saved driver and their usual truck to a leg."""
        return self.update_leg(leg_id, driver_name=driver.name, truck_no=driver.truck_no)

    def validate_for_submission(self) -> None:
        """
        Check the fields required to save a load.

        Raises:
            LoadValidationError: If the container number or legs are missing
        """
        if not self.container_no.strip():
            raise LoadValidationError("Container number is required")
        if not self.legs:
            raise LoadValidationError("A load needs at least one leg")

    def validate_for_billing(self) -> None:
        """
        Check the fields required to bill a load.

        Raises:
            LoadValidationError: If the customer name is missing
        """
        self.validate_for_submission()
        if not self.customer_name.strip():
            raise LoadValidationError("Customer name is required for billing")


def new_load(**fields: Any) -> Load:
    """Create an Open load with one blank leg unless legs are given."""
    if "legs" not in fields:
        fields["legs"] = [new_leg()]
    return Load.model_validate(fields)
