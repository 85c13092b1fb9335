"""Test configuration and fixtures."""

from typing import Any, AsyncGenerator, Generator, Protocol

import pytest
from httpx import ASGITransport, AsyncClient

from src.clients.empi import get_empi_service
from src.empi.adapters import get_adapter
from src.empi.model import TransactionContext
from src.empi.service import EmpiService
from src.main import app
from src.settings import Settings

# Enterprise EID system used throughout the tests
ENTERPRISE_SYSTEM = "urn:ent"
INTERNAL_SYSTEM = "urn:panova:empi:eid"


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Configure pytest-anyio to use asyncio."""
    return "asyncio"


@pytest.fixture
def empi_settings() -> Settings:
    """Single-EID mode settings for R4."""
    return Settings(
        enterprise_eid_system=ENTERPRISE_SYSTEM,
        internal_eid_system=INTERNAL_SYSTEM,
        prevent_multiple_eids=True,
        fhir_version="R4",
    )


@pytest.fixture
def multi_eid_settings() -> Settings:
    """Multi-EID mode settings for R4."""
    return Settings(
        enterprise_eid_system=ENTERPRISE_SYSTEM,
        internal_eid_system=INTERNAL_SYSTEM,
        prevent_multiple_eids=False,
        fhir_version="R4",
    )


@pytest.fixture
def empi_service(empi_settings: Settings) -> EmpiService:
    """EMPI service in single-EID mode."""
    return EmpiService(empi_settings, get_adapter(empi_settings.fhir_version))


@pytest.fixture
def multi_eid_service(multi_eid_settings: Settings) -> EmpiService:
    """EMPI service in multi-EID mode."""
    return EmpiService(
        multi_eid_settings, get_adapter(multi_eid_settings.fhir_version)
    )


@pytest.fixture
def ctx() -> TransactionContext:
    """Empty transaction context."""
    return TransactionContext()


def make_person(
    eid_values: list[str] | None = None,
    person_id: str | None = "person-1",
    **fields: Any,
) -> dict[str, Any]:
    """Build an R4 Person carrying enterprise EIDs with the given values."""
    person: dict[str, Any] = {"resourceType": "Person", "active": True}
    if person_id:
        person["id"] = person_id
    if eid_values:
        person["identifier"] = [
            {"system": ENTERPRISE_SYSTEM, "value": value} for value in eid_values
        ]
    person.update(fields)
    return person


def make_patient(
    eid_values: list[str] | None = None,
    patient_id: str = "patient-1",
    **fields: Any,
) -> dict[str, Any]:
    """Build an R4 Patient carrying enterprise EIDs with the given values."""
    patient: dict[str, Any] = {"resourceType": "Patient", "id": patient_id}
    if eid_values:
        patient["identifier"] = [
            {"system": ENTERPRISE_SYSTEM, "value": value} for value in eid_values
        ]
    patient.update(fields)
    return patient


class ClientFactory(Protocol):
    """Protocol for client factory fixture."""

    def __call__(self) -> AsyncClient: ...


@pytest.fixture
def client_factory(
    empi_service: EmpiService,
) -> Generator[ClientFactory, None, None]:
    """Factory for creating test clients with the test EMPI service."""

    def _create_client() -> AsyncClient:
        app.dependency_overrides[get_empi_service] = lambda: empi_service

        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://testserver")

    yield _create_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client(
    client_factory: ClientFactory,
) -> AsyncGenerator[AsyncClient, None]:
    """Async client for testing endpoints."""
    async with client_factory() as c:
        yield c
