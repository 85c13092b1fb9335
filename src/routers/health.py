"""Health check endpoint."""

from fastapi import APIRouter

from src.routers.deps import EmpiServiceDep
from src.schemas.health import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(empi: EmpiServiceDep) -> HealthResponse:
    """Report service health and the linking policy in effect."""
    return HealthResponse(
        status="healthy" if empi.settings.enterprise_eid_system else "degraded",
        fhir_version=empi.settings.fhir_version,
        enterprise_eid_system=empi.settings.enterprise_eid_system,
        prevent_multiple_eids=empi.settings.prevent_multiple_eids,
    )
