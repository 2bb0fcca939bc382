"""
Application configuration using Pydantic Settings.

This module provides typed and validated settings for the tax service
client, loaded from environment variables, .env files, or the flat
property map handed over by the billing plugin.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import Mapping

# Prefix of the plugin properties read by TaxServiceSettings.from_properties
PROPERTY_PREFIX = "org.killbill.billing.plugin.avatax."

DEFAULT_CONNECT_TIMEOUT_MS = 10_000
DEFAULT_READ_TIMEOUT_MS = 60_000

# Plugin property name -> settings field name
PROPERTY_FIELDS: dict[str, str] = {
    "url": "url",
    "accountNumber": "account_number",
    "licenseKey": "license_key",
    "proxyHost": "proxy_host",
    "proxyPort": "proxy_port",
    "strictSSL": "strict_ssl",
    "connectTimeout": "connect_timeout",
    "readTimeout": "read_timeout",
    "companyCode": "company_code",
    "commitDocuments": "commit_documents",
}


class TaxServiceSettings(BaseSettings):
    """Tax service API settings."""

    model_config = SettingsConfigDict(env_prefix="TAX_SERVICE_")

    url: str | None = Field(default=None, description="Base URL of the tax service API")
    account_number: str | None = Field(default=None, description="Account number")
    license_key: SecretStr | None = Field(default=None, description="License key")
    proxy_host: str | None = Field(default=None, description="HTTP proxy host")
    proxy_port: int | None = Field(default=None, description="HTTP proxy port", ge=1, le=65535)
    strict_ssl: bool = Field(default=False, description="Verify TLS certificates")
    connect_timeout: int = Field(
        default=DEFAULT_CONNECT_TIMEOUT_MS, description="Connect timeout in milliseconds", ge=0
    )
    read_timeout: int = Field(
        default=DEFAULT_READ_TIMEOUT_MS, description="Read timeout in milliseconds", ge=0
    )
    company_code: str | None = Field(default=None, description="Company code for all documents")
    commit_documents: bool = Field(default=False, description="Commit generated tax documents")

    @field_validator("strict_ssl", "commit_documents", mode="before")
    @classmethod
    def parse_boolean(cls, v: object) -> object:
        """Treat strings as true only when they read "true", ignoring case."""
        if v is None:
            return False
        if isinstance(v, str):
            return v.strip().lower() == "true"
        return v

    @property
    def is_configured(self) -> bool:
        """Check if the URL and credentials are all configured."""
        return bool(
            self.url
            and self.account_number
            and self.license_key is not None
            and self.license_key.get_secret_value()
        )

    @property
    def connect_timeout_seconds(self) -> float:
        """Connect timeout converted to seconds."""
        return self.connect_timeout / 1000

    @property
    def read_timeout_seconds(self) -> float:
        """Read timeout converted to seconds."""
        return self.read_timeout / 1000

    @property
    def proxy_url(self) -> str | None:
        """Proxy URL built from host and port, if a proxy host is set."""
        if not self.proxy_host:
            return None
        if self.proxy_port is None:
            return f"http://{self.proxy_host}"
        return f"http://{self.proxy_host}:{self.proxy_port}"

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, str],
        prefix: str = PROPERTY_PREFIX,
    ) -> TaxServiceSettings:
        """
        Build settings from a flat plugin property map.

        Keys look like ``<prefix>accountNumber``. Missing or blank
        properties are left out so field defaults apply. Environment
        variables and .env files are not consulted.

        Args:
            properties: Plugin properties.
            prefix: Prefix shared by all tax service properties.

        Returns:
            Settings populated from the properties.
        """
        values: dict[str, str] = {}
        for property_name, field_name in PROPERTY_FIELDS.items():
            raw = properties.get(prefix + property_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()
        return cls.model_validate(values)


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates the tax service section with logging options.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    log_level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool | None = Field(
        default=None, description="Force JSON logs (defaults to on in production)"
    )

    tax_service: TaxServiceSettings = Field(default_factory=TaxServiceSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def use_json_logs(self) -> bool:
        """Whether logs should be rendered as JSON."""
        if self.json_logs is None:
            return self.is_production
        return self.json_logs


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Configured Settings instance.
    """
    return Settings()
