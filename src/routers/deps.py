"""Shared dependencies for routers."""

from typing import Annotated

from fastapi import Depends

from src.clients.empi import get_empi_service
from src.empi.service import EmpiService

# Typed dependency aliases for use in endpoint signatures
EmpiServiceDep = Annotated[EmpiService, Depends(get_empi_service)]
