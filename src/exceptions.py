"""Custom exceptions for the Person linking service."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.empi.model import CanonicalEID


class EmpiError(Exception):
    """Base exception for linking engine errors."""

    pass


class UnsupportedModelVersionError(EmpiError):
    """No resource model adapter exists for the requested FHIR version."""

    def __init__(self, version: object):
        super().__init__(f"Version not supported: {version}")
        self.version = version


class DuplicateConflictError(EmpiError):
    """
    Accepting an incoming EID would create a duplicate Person.

    Raised in single-EID mode when the Person already carries an enterprise
    EID and none of the incoming EIDs match it. Callers route this to manual
    review.
    """

    def __init__(
        self,
        person_eids: "list[CanonicalEID]",
        incoming_eids: "list[CanonicalEID]",
    ):
        super().__init__("This would create a duplicate person!")
        self.person_eids = person_eids
        self.incoming_eids = incoming_eids
