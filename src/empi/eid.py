"""
Enterprise identifier (EID) extraction and generation.

An EID is an identifier under the configured enterprise system. Persons that
have no external EID to adopt receive an internally generated one under
the service's own system.
"""

import copy
from uuid import uuid4

from src.empi.adapters import Element, Resource, ResourceModelAdapter
from src.empi.model import EID_USE_SECONDARY, CanonicalEID
from src.settings import Settings


class EidHelper:
    """Reads and creates EIDs according to the configured identifier systems."""

    def __init__(self, settings: Settings, adapter: ResourceModelAdapter):
        self.settings = settings
        self.adapter = adapter

    def extract_external_eids(self, resource: Resource) -> list[CanonicalEID]:
        """EIDs under the enterprise system, in the resource's identifier order."""
        system = self.settings.enterprise_eid_system
        if not system:
            return []
        return self._extract_eids(resource, system)

    def external_identifiers(self, resource: Resource) -> list[Element]:
        """Copies of the full Identifier elements behind extract_external_eids."""
        system = self.settings.enterprise_eid_system
        if not system:
            return []
        return [
            copy.deepcopy(identifier)
            for identifier in self.adapter.get_identifiers(resource)
            if identifier.get("system") == system
        ]

    def extract_internal_eids(self, resource: Resource) -> list[CanonicalEID]:
        """EIDs previously generated by this service."""
        return self._extract_eids(resource, self.settings.internal_eid_system)

    def generate_eid(self) -> CanonicalEID:
        """Create a new random EID under the internal system."""
        return CanonicalEID(
            system=self.settings.internal_eid_system,
            value=str(uuid4()),
            use=EID_USE_SECONDARY,
        )

    def _extract_eids(self, resource: Resource, system: str) -> list[CanonicalEID]:
        return [
            CanonicalEID.from_fhir(identifier)
            for identifier in self.adapter.get_identifiers(resource)
            if identifier.get("system") == system
        ]


def eid_match_exists(
    first: list[CanonicalEID], second: list[CanonicalEID]
) -> bool:
    """True if any EID appears in both lists (exact system and value match)."""
    return any(eid in second for eid in first)
