"""Dependency provider for the EMPI service."""

from functools import lru_cache

from src.empi.service import EmpiService, create_empi_service


@lru_cache(maxsize=1)
def get_empi_service() -> EmpiService:
    """Get singleton EmpiService instance."""
    return create_empi_service()
