"""EMPI endpoints for Person linking, EID reconciliation and merging.

The endpoints are stateless: they apply the linking policy to the resources
in the request body and return the updated resources for the caller to
persist.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from src.empi.model import EmpiOperation, TransactionContext
from src.exceptions import DuplicateConflictError
from src.routers.deps import EmpiServiceDep
from src.schemas.empi_schemas import (
    CreatePersonRequest,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    LinkRequest,
    LinkResponse,
    MergePersonsRequest,
    MergePersonsResponse,
    PersonResponse,
    ReconcileEidRequest,
    RemoveLinkRequest,
    RemoveLinkResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/empi", tags=["EMPI"])


@router.post(
    "/persons", response_model=PersonResponse, status_code=status.HTTP_201_CREATED
)
async def create_person(
    request: CreatePersonRequest,
    empi: EmpiServiceDep,
) -> PersonResponse:
    """
    Create a new Person seeded from a target resource.

    The Person receives the target's enterprise EIDs (or a generated one)
    and the EMPI-managed tag. Linking the Person to the target is a
    separate call.
    """
    person = empi.create_from_target(request.target)
    return PersonResponse(person=person)


@router.post("/reconcile-eid", response_model=PersonResponse)
async def reconcile_eid(
    request: ReconcileEidRequest,
    empi: EmpiServiceDep,
) -> PersonResponse:
    """
    Apply the target's enterprise EIDs to the Person.

    Returns 409 when the Person already has a different EID and multiple
    EIDs are not allowed. Such conflicts need manual review.
    """
    ctx = TransactionContext(operation=EmpiOperation.UPDATE_EID)
    try:
        person = empi.reconcile_eid(request.person, request.target, ctx)
    except DuplicateConflictError as e:
        logger.info("EID reconciliation rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(e),
                "person_eids": [eid.to_fhir() for eid in e.person_eids],
                "incoming_eids": [eid.to_fhir() for eid in e.incoming_eids],
            },
        ) from e
    return PersonResponse(person=person, log=ctx.messages)


@router.post("/links", response_model=LinkResponse)
async def add_or_update_link(
    request: LinkRequest,
    empi: EmpiServiceDep,
) -> LinkResponse:
    """
    Add a link from the Person to the target, or update its assurance level.

    Requests without an assurance level are accepted but skipped; the
    response status says so.
    """
    ctx = TransactionContext(operation=EmpiOperation.UPDATE_LINK)
    result = empi.add_or_update_link(
        request.person, request.target_reference, request.assurance, ctx
    )
    return LinkResponse(
        person=request.person,
        log=ctx.messages,
        status=result.status,
        reason=result.reason,
        link_count=empi.get_link_count(request.person),
    )


@router.post("/links/remove", response_model=RemoveLinkResponse)
async def remove_link(
    request: RemoveLinkRequest,
    empi: EmpiServiceDep,
) -> RemoveLinkResponse:
    """Remove the Person's link to the target, if there is one."""
    ctx = TransactionContext(operation=EmpiOperation.REMOVE_LINK)
    removed = empi.remove_link(request.person, request.target_reference, ctx)
    return RemoveLinkResponse(
        person=request.person,
        log=ctx.messages,
        removed=removed,
        link_count=empi.get_link_count(request.person),
    )


@router.post("/merge", response_model=MergePersonsResponse)
async def merge_persons(
    request: MergePersonsRequest,
    empi: EmpiServiceDep,
) -> MergePersonsResponse:
    """
    Merge from_person into to_person and deactivate from_person.

    Returns 400 when both sides are the same Person.
    """
    ctx = TransactionContext(operation=EmpiOperation.MERGE_PERSONS)
    try:
        to_person = empi.merge_persons(request.from_person, request.to_person, ctx)
    except ValueError as e:
        logger.info("Merge rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    return MergePersonsResponse(
        from_person=request.from_person,
        to_person=to_person,
        log=ctx.messages,
    )


@router.post("/duplicate-check", response_model=DuplicateCheckResponse)
async def duplicate_check(
    request: DuplicateCheckRequest,
    empi: EmpiServiceDep,
) -> DuplicateCheckResponse:
    """Check whether two Persons carry conflicting enterprise EIDs."""
    return DuplicateCheckResponse(
        potential_duplicate=empi.is_potential_duplicate(
            request.person_a, request.person_b
        )
    )
