"""Duplicate Person detection based on enterprise identifiers."""

from src.empi.adapters import Resource
from src.empi.eid import EidHelper, eid_match_exists


def is_potential_duplicate(
    eid_helper: EidHelper,
    existing_person: Resource,
    comparing_person: Resource,
) -> bool:
    """
    Decide whether two identity records make conflicting EID claims.

    A record is a potential duplicate when both sides carry at least one
    external EID and none of them match. A side without EIDs gives no
    evidence either way, so the result is False.
    """
    existing_eids = eid_helper.extract_external_eids(existing_person)
    comparing_eids = eid_helper.extract_external_eids(comparing_person)
    return (
        bool(existing_eids)
        and bool(comparing_eids)
        and not eid_match_exists(comparing_eids, existing_eids)
    )
