"""
Resource model adapter contract.

The linking engine never touches a Person dict directly. Each supported FHIR
release provides one adapter exposing typed accessors for the fields the
engine reads and writes, so release differences stay in one place.

List getters return a new list holding the resource's elements; changes to
the list itself are only stored through the matching setter. Target
resources are therefore never modified by reads.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.empi.model import Link, to_unqualified_versionless
from src.settings import FhirVersion

Resource = dict[str, Any]
Element = dict[str, Any]


class ResourceModelAdapter(ABC):
    """Typed field access for Person and target resources of one FHIR release."""

    version: FhirVersion

    def new_person(self) -> Resource:
        """Create an empty, active Person resource."""
        return {"resourceType": "Person", "active": True}

    def resource_id(self, resource: Resource) -> str | None:
        """Unqualified, versionless ``ResourceType/id`` of a resource, if it has one."""
        resource_id = resource.get("id")
        if not resource_id:
            return None
        return f"{resource.get('resourceType', 'Resource')}/{resource_id}"

    # Identifiers

    def get_identifiers(self, resource: Resource) -> list[Element]:
        return self._get_list(resource, "identifier")

    def set_identifiers(self, resource: Resource, identifiers: list[Element]) -> None:
        self._set_list(resource, "identifier", identifiers)

    def add_identifier(self, resource: Resource, identifier: Element) -> None:
        identifiers = self.get_identifiers(resource)
        identifiers.append(identifier)
        self.set_identifiers(resource, identifiers)

    # Links

    def get_links(self, person: Resource) -> list[Element]:
        return self._get_list(person, "link")

    def set_links(self, person: Resource, links: list[Element]) -> None:
        self._set_list(person, "link", links)

    def link_target(self, link: Element) -> str | None:
        """Unqualified, versionless reference a link points at."""
        reference = (link.get("target") or {}).get("reference")
        if not reference:
            return None
        return to_unqualified_versionless(reference)

    def link_assurance(self, link: Element) -> str | None:
        """Raw assurance code stored on a link."""
        assurance: str | None = link.get("assurance")
        return assurance

    def set_link_assurance(self, link: Element, code: str) -> None:
        link["assurance"] = code

    def build_link(self, link: Link) -> Element:
        """Render a canonical Link as this release's Person.link element."""
        return link.to_fhir()

    # Repeating demographic fields

    def get_names(self, person: Resource) -> list[Element]:
        return self._get_list(person, "name")

    def set_names(self, person: Resource, names: list[Element]) -> None:
        self._set_list(person, "name", names)

    def get_addresses(self, person: Resource) -> list[Element]:
        return self._get_list(person, "address")

    def set_addresses(self, person: Resource, addresses: list[Element]) -> None:
        self._set_list(person, "address", addresses)

    def get_telecoms(self, person: Resource) -> list[Element]:
        return self._get_list(person, "telecom")

    def set_telecoms(self, person: Resource, telecoms: list[Element]) -> None:
        self._set_list(person, "telecom", telecoms)

    # Scalar demographic fields

    def get_birth_date(self, person: Resource) -> str | None:
        birth_date: str | None = person.get("birthDate") or None
        return birth_date

    def set_birth_date(self, person: Resource, birth_date: str) -> None:
        person["birthDate"] = birth_date

    def get_gender(self, person: Resource) -> str | None:
        gender: str | None = person.get("gender") or None
        return gender

    def set_gender(self, person: Resource, gender: str) -> None:
        person["gender"] = gender

    @abstractmethod
    def get_photo(self, person: Resource) -> Any:
        """The Person's photo in this release's shape, None when absent."""

    @abstractmethod
    def set_photo(self, person: Resource, photo: Any) -> None:
        """Store a photo value previously read with get_photo."""

    # Status and meta

    def is_active(self, person: Resource) -> bool:
        """Person.active; only an explicit ``true`` counts as active."""
        return person.get("active") is True

    def set_active(self, person: Resource, active: bool) -> None:
        person["active"] = active

    def get_meta_tags(self, resource: Resource) -> list[Element]:
        return list((resource.get("meta") or {}).get("tag") or [])

    def add_meta_tag(
        self, resource: Resource, system: str, code: str, display: str
    ) -> None:
        meta = resource.setdefault("meta", {})
        meta.setdefault("tag", []).append(
            {"system": system, "code": code, "display": display}
        )

    def _get_list(self, resource: Resource, key: str) -> list[Element]:
        return list(resource.get(key) or [])

    def _set_list(self, resource: Resource, key: str, values: list[Element]) -> None:
        # FHIR JSON does not allow empty arrays
        if values:
            resource[key] = list(values)
        else:
            resource.pop(key, None)
