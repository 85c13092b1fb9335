"""
Enterprise Master Patient Index (EMPI) linking engine.

This package handles:
- Extracting and generating enterprise identifiers (EIDs)
- Linking Persons to the Patient/Practitioner records they represent
- Reconciling incoming EIDs and detecting duplicate identity claims
- Merging Person demographics and retiring merged-away Persons
"""

from src.empi.links import LinkResult, LinkStatus
from src.empi.model import (
    AssuranceLevel,
    CanonicalEID,
    EmpiOperation,
    Link,
    TransactionContext,
)
from src.empi.service import EmpiService, create_empi_service

__all__ = [
    "AssuranceLevel",
    "CanonicalEID",
    "EmpiOperation",
    "EmpiService",
    "Link",
    "LinkResult",
    "LinkStatus",
    "TransactionContext",
    "create_empi_service",
]
