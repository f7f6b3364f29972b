"""
Session resolution: which tenant the signed-in user works in.

Resolved once at sign-in. The first login creates the user and company
records; later logins reuse the stored company id.
"""

from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError

from haulix.core.config import ConfigManager, get_config
from haulix.core.errors import TransportError
from haulix.data.models.reference import Company, UserProfile
from haulix.store.backend import DocumentStore
from haulix.store.paths import TenantPaths, companies_path, users_path

logger = structlog.get_logger(component="session")


class Identity(BaseModel):
    """Authenticated user as reported by the identity provider."""

    uid: str
    email: Optional[str] = None


class SessionContext(BaseModel):
    """Explicit session value passed to the adapter and command layer."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: Optional[str] = None
    app_id: str
    company_id: str
    company_name: str

    @property
    def paths(self) -> TenantPaths:
        return TenantPaths(app_id=self.app_id, company_id=self.company_id)


def resolve_session(
    store: DocumentStore,
    identity: Identity,
    config: Optional[ConfigManager] = None,
) -> SessionContext:
    """
    Resolve (or create on first login) the tenant for an identity.

    Args:
        store: Backing document store
        identity: Signed-in user
        config: Optional config manager (defaults to global instance)

    Returns:
        SessionContext for the user's company

    Raises:
        TransportError: If the store cannot be read or written
    """
    config = config or get_config()
    app_id = config.env.app_id
    defaults = config.get_company_defaults()

    try:
        user_doc = store.get(users_path(app_id), identity.uid)
        if user_doc is not None:
            company_id = UserProfile.model_validate(user_doc).company_id
            logger.info("tenant_reused", user_id=identity.uid, company_id=company_id)
        else:
            company_id = identity.uid
            profile = UserProfile(email=identity.email, company_id=company_id, role="owner")
            store.set(users_path(app_id), identity.uid, profile.to_document())
            company = Company(name=defaults.name, address=defaults.address, email=defaults.email)
            store.set(companies_path(app_id), company_id, company.to_document())
            logger.info("tenant_created", user_id=identity.uid, company_id=company_id)

        company_doc = store.get(companies_path(app_id), company_id)
    except ValidationError as e:
        logger.error("tenant_resolution_failed", user_id=identity.uid, error=str(e))
        raise TransportError("resolve tenant", "stored user record is malformed") from e
    except Exception as e:
        logger.error("tenant_resolution_failed", user_id=identity.uid, error=str(e))
        raise TransportError("resolve tenant", str(e)) from e

    company_name = defaults.name
    if company_doc and company_doc.get("name"):
        company_name = company_doc["name"]

    return SessionContext(
        user_id=identity.uid,
        email=identity.email,
        app_id=app_id,
        company_id=company_id,
        company_name=company_name,
    )
