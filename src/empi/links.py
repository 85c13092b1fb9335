"""
Person link management.

A Person links to the target resources (Patient, Practitioner, ...) it
represents. Each link carries an identity assurance level, and a Person holds
at most one link per target.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from src.empi.adapters import Resource, ResourceModelAdapter
from src.empi.model import (
    AssuranceLevel,
    Link,
    TransactionContext,
    to_unqualified_versionless,
)

logger = logging.getLogger(__name__)

MISSING_ASSURANCE_REASON = "Refusing to update or add a link without an Assurance Level."


class LinkStatus(str, Enum):
    """Outcome of an add-or-update link call."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"


@dataclass
class LinkResult:
    """Result of an add-or-update link call."""

    status: LinkStatus
    reason: str | None = None
    previous_assurance: str | None = None


class LinkManager:
    """Creates, updates, queries and removes links on a Person."""

    def __init__(self, adapter: ResourceModelAdapter):
        self.adapter = adapter

    def get_link_ids(self, person: Resource) -> list[str]:
        """Unqualified, versionless target references of the Person's links."""
        link_ids = []
        for link in self.adapter.get_links(person):
            target = self.adapter.link_target(link)
            if target:
                link_ids.append(target)
        return link_ids

    def contains_link(self, person: Resource, target_id: str) -> bool:
        return to_unqualified_versionless(target_id) in self.get_link_ids(person)

    def get_link_count(self, person: Resource) -> int:
        return len(self.adapter.get_links(person))

    def add_or_update_link(
        self,
        person: Resource,
        target_id: str,
        assurance: AssuranceLevel | None,
        ctx: TransactionContext,
    ) -> LinkResult:
        """
        Create a link to the target, or change the assurance of the existing one.

        A call without an assurance level is skipped: a warning is logged, the
        Person is left as is and a SKIPPED result is returned.

        Args:
            person: Person resource to modify
            target_id: Reference of the linked resource (e.g. "Patient/123")
            assurance: Certainty of the link
            ctx: Transaction log of the calling operation

        Returns:
            LinkResult describing what happened
        """
        if assurance is None:
            logger.warning(MISSING_ASSURANCE_REASON)
            return LinkResult(status=LinkStatus.SKIPPED, reason=MISSING_ASSURANCE_REASON)

        target = to_unqualified_versionless(target_id)
        links = self.adapter.get_links(person)

        for link in links:
            if self.adapter.link_target(link) == target:
                previous = self.adapter.link_assurance(link)
                ctx.add_transaction_log_message(
                    f"Updating link from {self._person_label(person)} -> {target}. "
                    f"Changing IdentityAssuranceLevel: {previous} -> {assurance.name}"
                )
                self.adapter.set_link_assurance(link, assurance.value)
                return LinkResult(status=LinkStatus.UPDATED, previous_assurance=previous)

        links.append(self.adapter.build_link(Link(target, assurance)))
        self.adapter.set_links(person, links)
        ctx.add_transaction_log_message(
            f"Creating new link from {self._person_label(person)} -> {target} "
            f"with IdentityAssuranceLevel: {assurance.name}"
        )
        return LinkResult(status=LinkStatus.CREATED)

    def remove_link(
        self, person: Resource, target_id: str, ctx: TransactionContext
    ) -> bool:
        """
        Remove the Person's link to the target.

        Returns False, logging nothing, when there is no such link.
        """
        target = to_unqualified_versionless(target_id)
        links = self.adapter.get_links(person)
        remaining = [link for link in links if self.adapter.link_target(link) != target]
        if len(remaining) == len(links):
            return False

        ctx.add_transaction_log_message(
            f"Removing PersonLinkComponent from {self._person_label(person)} -> {target}"
        )
        self.adapter.set_links(person, remaining)
        return True

    def new_link(self, target_id: str, assurance: AssuranceLevel) -> Link:
        return Link(target_reference=target_id, assurance=assurance)

    def set_links(self, person: Resource, links: list[Link]) -> None:
        """Replace the Person's whole link list."""
        self.adapter.set_links(person, [self.adapter.build_link(link) for link in links])

    def _person_label(self, person: Resource) -> str:
        return self.adapter.resource_id(person) or "new Person"
