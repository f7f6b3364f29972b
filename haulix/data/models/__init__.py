"""
Pydantic data models for dispatch and billing.

Core models:
- Load: Container shipment with its embedded legs
- Leg: One route segment with driver, truck and proof of delivery
- Customer / Location / Driver: Address-book suggestion sources
- Company / UserProfile: Tenant records
"""

from .load import (
    Attachment,
    AttachmentSlot,
    ExtraCharge,
    Leg,
    LegStatus,
    Load,
    LoadStatus,
    SignatureCapture,
    new_leg,
    new_load,
)
from .reference import Company, Customer, Driver, Location, UserProfile, suggest

__all__ = [
    "Attachment",
    "AttachmentSlot",
    "Company",
    "Customer",
    "Driver",
    "ExtraCharge",
    "Leg",
    "LegStatus",
    "Load",
    "LoadStatus",
    "Location",
    "SignatureCapture",
    "UserProfile",
    "new_leg",
    "new_load",
    "suggest",
]
