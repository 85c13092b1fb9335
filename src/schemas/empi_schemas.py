"""Schemas for EMPI endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from src.empi.links import LinkStatus
from src.empi.model import AssuranceLevel

FhirResource = dict[str, Any]


class CreatePersonRequest(BaseModel):
    """Request to create a Person from a target resource."""

    target: FhirResource = Field(description="Resource the new Person will represent")


class ReconcileEidRequest(BaseModel):
    """Request to apply a target resource's EIDs to a Person."""

    person: FhirResource = Field(description="Person resource to update")
    target: FhirResource = Field(description="Incoming resource carrying EIDs")


class LinkRequest(BaseModel):
    """Request to add or update a Person link."""

    person: FhirResource = Field(description="Person resource to update")
    target_reference: str = Field(
        description="Reference of the linked resource, e.g. Patient/123"
    )
    assurance: AssuranceLevel | None = Field(
        default=None,
        description="Identity assurance level of the link (level1-level4)",
    )


class RemoveLinkRequest(BaseModel):
    """Request to remove a Person link."""

    person: FhirResource = Field(description="Person resource to update")
    target_reference: str = Field(description="Reference of the linked resource")


class MergePersonsRequest(BaseModel):
    """Request to merge one Person into another."""

    from_person: FhirResource = Field(description="Person being merged away")
    to_person: FhirResource = Field(description="Surviving Person")


class DuplicateCheckRequest(BaseModel):
    """Request to compare the EIDs of two Persons."""

    person_a: FhirResource
    person_b: FhirResource


class PersonResponse(BaseModel):
    """A Person resource with the audit log of the operation that produced it."""

    person: FhirResource
    log: list[str] = Field(default_factory=list)


class LinkResponse(PersonResponse):
    """Result of adding or updating a link."""

    status: LinkStatus
    reason: str | None = None
    link_count: int


class RemoveLinkResponse(PersonResponse):
    """Result of removing a link."""

    removed: bool
    link_count: int


class MergePersonsResponse(BaseModel):
    """Result of merging two Persons."""

    from_person: FhirResource
    to_person: FhirResource
    log: list[str] = Field(default_factory=list)


class DuplicateCheckResponse(BaseModel):
    """Result of a duplicate check."""

    potential_duplicate: bool
