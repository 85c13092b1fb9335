"""
Person adapters for FHIR DSTU3, R4 and R4B.

These releases share the Person layout the engine uses; Person.photo is a
single Attachment (0..1).
https://hl7.org/fhir/R4/person.html
"""

from typing import Any

from src.empi.adapters.base import Resource, ResourceModelAdapter
from src.settings import FhirVersion


class R4PersonAdapter(ResourceModelAdapter):
    """Adapter for R4 Person resources."""

    version = FhirVersion.R4

    def get_photo(self, person: Resource) -> dict[str, Any] | None:
        photo: dict[str, Any] | None = person.get("photo") or None
        return photo

    def set_photo(self, person: Resource, photo: dict[str, Any] | None) -> None:
        if photo is None:
            person.pop("photo", None)
        else:
            person["photo"] = photo


class Dstu3PersonAdapter(R4PersonAdapter):
    """Adapter for DSTU3 Person resources."""

    version = FhirVersion.DSTU3


class R4BPersonAdapter(R4PersonAdapter):
    """Adapter for R4B Person resources."""

    version = FhirVersion.R4B
