"""
EID reconciliation between a Person and an incoming target resource.

Decides whether the target's enterprise identifiers are adopted by the
Person, are already present, or contradict the Person's identity:

1. Target has no EID: nothing to do
2. Person has no EID yet, or multiple EIDs are allowed: adopt the target's EIDs
3. An EID already matches: nothing to do
4. Otherwise: the target claims a different identity (DuplicateConflictError)
"""

import logging

from src.empi.adapters import Resource, ResourceModelAdapter
from src.empi.eid import EidHelper, eid_match_exists
from src.empi.merge import merge_element_list
from src.empi.model import CanonicalEID, TransactionContext
from src.exceptions import DuplicateConflictError
from src.settings import Settings

logger = logging.getLogger(__name__)


class EidReconciler:
    """Applies target EIDs to Persons under the configured single/multi-EID policy."""

    def __init__(
        self,
        settings: Settings,
        adapter: ResourceModelAdapter,
        eid_helper: EidHelper,
    ):
        self.settings = settings
        self.adapter = adapter
        self.eid_helper = eid_helper

    def reconcile_eid(
        self,
        source_person: Resource,
        target: Resource,
        ctx: TransactionContext,
    ) -> Resource:
        """
        Update a Person's external EIDs from an incoming target resource.

        Args:
            source_person: The Person to update
            target: The resource the incoming EIDs are read from
            ctx: Transaction log of the calling operation

        Returns:
            The (possibly modified) Person

        Raises:
            DuplicateConflictError: If single-EID mode is enforced and the
                Person already has a different external EID
        """
        incoming_eids = self.eid_helper.extract_external_eids(target)
        if not incoming_eids:
            return source_person

        person_eids = self.eid_helper.extract_external_eids(source_person)
        target_label = self.adapter.resource_id(target) or "new resource"
        incoming_label = ",".join(str(eid) for eid in incoming_eids)

        if not person_eids or not self.settings.prevent_multiple_eids:
            self._log(
                ctx,
                f"Incoming resource:{target_label} with EID {incoming_label} is applying "
                "this EIDs to its related Person, as this Person does not yet have an "
                "external EID or multiple EIDs are allowed",
            )
            self.add_eids_if_absent(source_person, incoming_eids)
        elif eid_match_exists(person_eids, incoming_eids):
            self._log(
                ctx,
                f"Incoming resource:{target_label} with EIDs {incoming_label} does not "
                "need to overwrite Person, as this EID is already present",
            )
        else:
            logger.warning(
                "EID conflict for %s: Person has %s, incoming %s",
                target_label,
                ",".join(str(eid) for eid in person_eids),
                incoming_label,
            )
            raise DuplicateConflictError(person_eids, incoming_eids)

        return source_person

    def handle_external_eid_addition(
        self,
        source_person: Resource,
        target: Resource,
        ctx: TransactionContext,
    ) -> None:
        """Reconcile only when the target actually carries an external EID."""
        if self.eid_helper.extract_external_eids(target):
            self.reconcile_eid(source_person, target, ctx)

    def overwrite_external_eids(
        self, person: Resource, new_eids: list[CanonicalEID]
    ) -> Resource:
        """
        Replace every enterprise EID on the Person with ``new_eids``.

        Intended for administrative correction, not for normal reconciliation.
        """
        system = self.settings.enterprise_eid_system
        if system:
            identifiers = [
                identifier
                for identifier in self.adapter.get_identifiers(person)
                if (identifier.get("system") or "").lower() != system.lower()
            ]
            self.adapter.set_identifiers(person, identifiers)
        self.add_eids_if_absent(person, new_eids)
        logger.info(
            "Overwrote external EIDs on %s with %s",
            self.adapter.resource_id(person) or "new Person",
            ",".join(str(eid) for eid in new_eids),
        )
        return person

    def add_eids_if_absent(self, person: Resource, eids: list[CanonicalEID]) -> None:
        """Append the EIDs the Person does not carry yet, keeping their order."""
        current_eids = self.eid_helper.extract_external_eids(person)
        current_eids += self.eid_helper.extract_internal_eids(person)
        for eid in merge_element_list(eids, current_eids):
            self.adapter.add_identifier(person, eid.to_fhir())

    def _log(self, ctx: TransactionContext, message: str) -> None:
        ctx.add_transaction_log_message(message)
        logger.debug(message)
