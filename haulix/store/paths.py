"""Tenant-scoped collection paths."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class CollectionKind(str, Enum):
    """The four collections every tenant owns."""

    LOADS = "loads"
    CUSTOMERS = "customers"
    LOCATIONS = "locations"
    DRIVERS = "drivers"


def users_path(app_id: str) -> str:
    return f"artifacts/{app_id}/users"


def companies_path(app_id: str) -> str:
    return f"artifacts/{app_id}/public/data/companies"


class TenantPaths(BaseModel):
    """
    Builds every path a session may touch.

    The company id is part of each collection name, so one tenant's
    adapter has no way to address another tenant's collections.
    """

    model_config = ConfigDict(frozen=True)

    app_id: str
    company_id: str

    @field_validator("app_id", "company_id")
    @classmethod
    def _no_separators(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError(f"invalid path segment: {value!r}")
        return value

    def collection(self, kind: CollectionKind) -> str:
        return f"artifacts/{self.app_id}/public/data/{kind.value}_{self.company_id}"

    def all_collections(self) -> dict[CollectionKind, str]:
        return {kind: self.collection(kind) for kind in CollectionKind}
