"""
Configuration management for the dispatch tracker.

Handles loading and accessing:
- Business configuration (config.yaml)
- Environment variables (.env)
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingVariant(str, Enum):
    """Which financial model and status tiers the deployment uses."""

    COST_TRACKING = "cost_tracking"
    PRICING_ONLY = "pricing_only"


class CompanyDefaults(BaseModel):
    """Values written to a tenant record on first login."""

    name: str = "Haulix"
    address: str = "123 Logistics Way"
    email: str = "dispatch@haulix.com"


class EmailConfig(BaseModel):
    """Outbound email settings."""

    sender_name: str = "Haulix Dispatch"
    subject_prefix: str = "Invoice"


class EnvironmentSettings(BaseSettings):
    """Environment variables configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Store namespace shared by every tenant
    app_id: str = Field("haulix-tms-default", alias="HAULIX_APP_ID")

    # Store backend ("memory" or "sqlite")
    store_backend: str = Field("memory", alias="STORE_BACKEND")
    store_path: str = Field("./data/haulix_store.db", alias="STORE_PATH")

    # Attachments
    upload_dir: str = Field("./uploads", alias="UPLOAD_DIR")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")


class ConfigManager:
    """
    Central configuration manager for the dispatch tracker.

    Loads and provides access to:
    - Business configuration from config/config.yaml
    - Environment variables from .env
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        env: Optional[EnvironmentSettings] = None,
    ) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional path to config directory. Defaults to project root/config.
            env: Optional pre-built environment settings (defaults to reading .env)
        """
        if config_dir is None:
            # Default to config/ directory in project root
            project_root = Path(__file__).parent.parent.parent
            config_dir = project_root / "config"

        self.config_dir = config_dir
        self._business_config: Optional[dict[str, Any]] = None
        self._env_settings: Optional[EnvironmentSettings] = env

    @property
    def business_config(self) -> dict[str, Any]:
        """Load and return business configuration from config.yaml."""
        if self._business_config is None:
            config_path = self.config_dir / "config.yaml"
            if config_path.exists():
                with open(config_path, "r") as f:
                    self._business_config = yaml.safe_load(f) or {}
            else:
                self._business_config = {}
        return self._business_config

    @property
    def env(self) -> EnvironmentSettings:
        """Load and return environment settings."""
        if self._env_settings is None:
            self._env_settings = EnvironmentSettings()
        return self._env_settings

    def get_company_defaults(self) -> CompanyDefaults:
        """Get the company record written when a tenant is first created."""
        return CompanyDefaults(**(self.business_config.get("company") or {}))

    def get_billing_variant(self) -> BillingVariant:
        """Get the billing variant (cost tracking or pricing only)."""
        billing = self.business_config.get("billing") or {}
        return BillingVariant(billing.get("variant", BillingVariant.COST_TRACKING.value))

    def get_tracking_defaults(self) -> dict[str, Any]:
        """Get tracking defaults from business config."""
        return {"default_status": "Pending", **(self.business_config.get("tracking") or {})}

    def get_email_config(self) -> EmailConfig:
        """Get outbound email settings from business config."""
        return EmailConfig(**(self.business_config.get("email") or {}))


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """
    Get the global configuration manager instance.

    Returns:
        ConfigManager singleton instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
