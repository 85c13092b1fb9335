"""Health check schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    fhir_version: str
    enterprise_eid_system: str | None
    prevent_multiple_eids: bool
