"""Person creation, deactivation and ownership tagging."""

import logging

from src.empi.adapters import Resource, ResourceModelAdapter
from src.empi.eid import EidHelper
from src.empi.model import (
    CODE_EMPI_MANAGED,
    DISPLAY_EMPI_MANAGED,
    SYSTEM_EMPI_MANAGED,
)

logger = logging.getLogger(__name__)


class PersonLifecycle:
    """
    Creates Persons from target resources and retires merged-away ones.

    Persons are never deleted by the engine; deactivation is the only way
    one leaves service.
    """

    def __init__(self, adapter: ResourceModelAdapter, eid_helper: EidHelper):
        self.adapter = adapter
        self.eid_helper = eid_helper

    def create_from_target(self, target: Resource) -> Resource:
        """
        Create a new Person seeded from a target resource.

        Every external EID of the target is copied onto the Person. When the
        target has none, a generated internal EID is added instead, so every
        Person carries at least one EID. The Person is tagged as managed by
        this service. It is not persisted.

        Args:
            target: Resource the Person will represent (e.g. a Patient)

        Returns:
            The new Person resource
        """
        person = self.adapter.new_person()

        external_eids = self.eid_helper.external_identifiers(target)
        for identifier in external_eids:
            self.adapter.add_identifier(person, identifier)

        if not external_eids:
            self.adapter.add_identifier(person, self.eid_helper.generate_eid().to_fhir())

        self.adapter.add_meta_tag(
            person, SYSTEM_EMPI_MANAGED, CODE_EMPI_MANAGED, DISPLAY_EMPI_MANAGED
        )
        logger.info(
            "Created Person for %s with %d external EID(s)",
            self.adapter.resource_id(target) or "new resource",
            len(external_eids),
        )
        return person

    def deactivate(self, person: Resource) -> None:
        self.adapter.set_active(person, False)

    def is_deactivated(self, person: Resource) -> bool:
        return not self.adapter.is_active(person)

    def is_managed(self, person: Resource) -> bool:
        """True if the Person carries the managed-by-EMPI tag."""
        return any(
            tag.get("system") == SYSTEM_EMPI_MANAGED and tag.get("code") == CODE_EMPI_MANAGED
            for tag in self.adapter.get_meta_tags(person)
        )
