"""
Application settings for the Person linking service.

- Defaults are intended for development use.
- For testing, override via pyproject.toml [tool.pytest.ini_options] or
  construct a Settings instance directly.
- For production, set environment variables to override fields.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FhirVersion(str, Enum):
    """FHIR releases the linking engine knows how to read and write."""

    DSTU3 = "DSTU3"
    R4 = "R4"
    R4B = "R4B"
    R5 = "R5"


class Settings(BaseSettings):
    """Linking engine configuration."""

    # EID Configuration
    enterprise_eid_system: str | None = Field(
        default=None,
        description="Identifier system URI treated as the authoritative enterprise EID",
    )
    internal_eid_system: str = Field(
        default="urn:panova:empi:eid",
        description="Identifier system used for EIDs generated by this service",
    )
    prevent_multiple_eids: bool = Field(
        default=True,
        description="Single-EID mode: refuse a second non-matching enterprise EID",
    )

    # Resource model; the release is checked by get_adapter, not here
    fhir_version: str = Field(
        default=FhirVersion.R4.value,
        description="FHIR release of the Person resources handled by this process",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


settings = Settings()
