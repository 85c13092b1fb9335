"""
Person adapter for FHIR R5.

R5 changes relevant to linking:
- Person.photo becomes a list of Attachments (0..*)
https://hl7.org/fhir/R5/person.html
"""

from typing import Any

from src.empi.adapters.base import Resource, ResourceModelAdapter
from src.settings import FhirVersion


class R5PersonAdapter(ResourceModelAdapter):
    """Adapter for R5 Person resources."""

    version = FhirVersion.R5

    def get_photo(self, person: Resource) -> list[dict[str, Any]] | None:
        photos: list[dict[str, Any]] = person.get("photo") or []
        return photos or None

    def set_photo(
        self, person: Resource, photo: list[dict[str, Any]] | dict[str, Any] | None
    ) -> None:
        if not photo:
            person.pop("photo", None)
        elif isinstance(photo, dict):
            # Accept a single Attachment read from an older release
            person["photo"] = [photo]
        else:
            person["photo"] = list(photo)
