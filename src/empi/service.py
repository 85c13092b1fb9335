"""
EMPI service: the linking engine wired for one FHIR release and configuration.

Orchestration code (import pipelines, admin endpoints) talks to this class;
it decides when to link, reconcile or merge, and this class applies the
policy consistently.
"""

import logging

from src.empi.adapters import Resource, ResourceModelAdapter, get_adapter
from src.empi.duplicates import is_potential_duplicate
from src.empi.eid import EidHelper
from src.empi.lifecycle import PersonLifecycle
from src.empi.links import LinkManager, LinkResult
from src.empi.merge import merge_person_fields
from src.empi.model import (
    AssuranceLevel,
    CanonicalEID,
    Link,
    TransactionContext,
)
from src.empi.reconciler import EidReconciler
from src.settings import Settings
from src.settings import settings as default_settings

logger = logging.getLogger(__name__)


class EmpiService:
    """Facade over EID handling, links, merging and Person lifecycle."""

    def __init__(self, settings: Settings, adapter: ResourceModelAdapter):
        self.settings = settings
        self.adapter = adapter
        self.eids = EidHelper(settings, adapter)
        self.links = LinkManager(adapter)
        self.reconciler = EidReconciler(settings, adapter, self.eids)
        self.lifecycle = PersonLifecycle(adapter, self.eids)

    # EIDs

    def extract_external_eids(self, resource: Resource) -> list[CanonicalEID]:
        return self.eids.extract_external_eids(resource)

    def generate_eid(self) -> CanonicalEID:
        return self.eids.generate_eid()

    def reconcile_eid(
        self, person: Resource, target: Resource, ctx: TransactionContext
    ) -> Resource:
        return self.reconciler.reconcile_eid(person, target, ctx)

    def handle_external_eid_addition(
        self, person: Resource, target: Resource, ctx: TransactionContext
    ) -> None:
        self.reconciler.handle_external_eid_addition(person, target, ctx)

    def overwrite_external_eids(
        self, person: Resource, new_eids: list[CanonicalEID]
    ) -> Resource:
        return self.reconciler.overwrite_external_eids(person, new_eids)

    def is_potential_duplicate(self, person_a: Resource, person_b: Resource) -> bool:
        return is_potential_duplicate(self.eids, person_a, person_b)

    # Links

    def add_or_update_link(
        self,
        person: Resource,
        target_id: str,
        assurance: AssuranceLevel | None,
        ctx: TransactionContext,
    ) -> LinkResult:
        return self.links.add_or_update_link(person, target_id, assurance, ctx)

    def remove_link(
        self, person: Resource, target_id: str, ctx: TransactionContext
    ) -> bool:
        return self.links.remove_link(person, target_id, ctx)

    def contains_link(self, person: Resource, target_id: str) -> bool:
        return self.links.contains_link(person, target_id)

    def get_link_count(self, person: Resource) -> int:
        return self.links.get_link_count(person)

    def new_link(self, target_id: str, assurance: AssuranceLevel) -> Link:
        return self.links.new_link(target_id, assurance)

    def set_links(self, person: Resource, links: list[Link]) -> None:
        self.links.set_links(person, links)

    # Lifecycle and merging

    def create_from_target(self, target: Resource) -> Resource:
        return self.lifecycle.create_from_target(target)

    def deactivate(self, person: Resource) -> None:
        self.lifecycle.deactivate(person)

    def is_deactivated(self, person: Resource) -> bool:
        return self.lifecycle.is_deactivated(person)

    def merge_person_fields(self, from_person: Resource, to_person: Resource) -> None:
        merge_person_fields(self.adapter, from_person, to_person)

    def merge_persons(
        self,
        from_person: Resource,
        to_person: Resource,
        ctx: TransactionContext,
    ) -> Resource:
        """
        Fold ``from_person`` into ``to_person`` and deactivate ``from_person``.

        Demographics are merged without overwriting the survivor. Links of the
        losing Person whose target the survivor does not already link to are
        moved over with their assurance; the survivor's own links are kept.

        Returns:
            The surviving Person

        Raises:
            ValueError: If both arguments are the same Person
        """
        from_id = self.adapter.resource_id(from_person)
        if from_person is to_person or (
            from_id and from_id == self.adapter.resource_id(to_person)
        ):
            raise ValueError(f"Cannot merge {from_id or 'a Person'} into itself")

        merge_person_fields(self.adapter, from_person, to_person)

        for link in self.adapter.get_links(from_person):
            target = self.adapter.link_target(link)
            if not target or self.links.contains_link(to_person, target):
                continue
            assurance = AssuranceLevel.from_code(self.adapter.link_assurance(link))
            self.links.add_or_update_link(to_person, target, assurance, ctx)

        self.adapter.set_links(from_person, [])
        self.lifecycle.deactivate(from_person)

        from_label = from_id or "new Person"
        to_label = self.adapter.resource_id(to_person) or "new Person"
        ctx.add_transaction_log_message(f"Merged {from_label} into {to_label}")
        logger.info("Merged Person %s into %s", from_label, to_label)
        return to_person


def create_empi_service(settings: Settings | None = None) -> EmpiService:
    """
    Build an EmpiService for the configured FHIR release.

    Raises:
        UnsupportedModelVersionError: If the configured release has no adapter
    """
    config = settings or default_settings
    return EmpiService(config, get_adapter(config.fhir_version))
