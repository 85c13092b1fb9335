"""
Canonical, version-independent types used by the linking engine.

FHIR resources themselves stay plain JSON dicts; these types describe the
pieces the engine reasons about (EIDs, assurance levels, links) and the
audit log an operation writes into.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Meta tag marking a Person as owned by the linking engine
SYSTEM_EMPI_MANAGED = "https://panova.ai/empi-managed"
CODE_EMPI_MANAGED = "EMPI-MANAGED"
DISPLAY_EMPI_MANAGED = "This Person can only be modified by the EMPI linking service."

EID_USE_OFFICIAL = "official"
EID_USE_SECONDARY = "secondary"


class AssuranceLevel(str, Enum):
    """Confidence tier of a Person link, least to most certain."""

    LEVEL1 = "level1"
    LEVEL2 = "level2"
    LEVEL3 = "level3"
    LEVEL4 = "level4"

    @property
    def rank(self) -> int:
        return _ASSURANCE_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, AssuranceLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, AssuranceLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, AssuranceLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, AssuranceLevel):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def from_code(cls, code: str | None) -> "AssuranceLevel | None":
        """Parse a FHIR identity-assuranceLevel code, None when absent or unknown."""
        if not code:
            return None
        try:
            return cls(code.lower())
        except ValueError:
            return None


_ASSURANCE_ORDER = list(AssuranceLevel)


@dataclass(frozen=True)
class CanonicalEID:
    """
    An enterprise identifier, independent of FHIR version.

    Equality covers system and value only; ``use`` is kept so the identifier
    can be written back the way it arrived.
    """

    system: str
    value: str
    use: str | None = field(default=None, compare=False)

    def to_fhir(self) -> dict[str, str]:
        """Convert to FHIR Identifier format."""
        identifier = {"system": self.system, "value": self.value}
        if self.use:
            identifier["use"] = self.use
        return identifier

    def to_search_param(self) -> str:
        """Convert to FHIR search parameter format (system|value)."""
        return f"{self.system}|{self.value}"

    @classmethod
    def from_fhir(cls, identifier: dict[str, Any]) -> "CanonicalEID":
        return cls(
            system=identifier.get("system", ""),
            value=identifier.get("value", ""),
            use=identifier.get("use"),
        )

    def __str__(self) -> str:
        return self.to_search_param()


@dataclass
class Link:
    """A link from a Person to one target resource."""

    target_reference: str
    assurance: AssuranceLevel

    def __post_init__(self) -> None:
        if self.assurance is None:
            raise ValueError(
                f"Link to {self.target_reference} requires an assurance level"
            )

    def to_fhir(self) -> dict[str, Any]:
        """Convert to a FHIR Person.link backbone element."""
        return {
            "target": {"reference": self.target_reference},
            "assurance": self.assurance.value,
        }


class EmpiOperation(str, Enum):
    """Kind of operation a transaction context was opened for."""

    CREATE_PERSON = "create_person"
    UPDATE_PERSON = "update_person"
    UPDATE_LINK = "update_link"
    REMOVE_LINK = "remove_link"
    MERGE_PERSONS = "merge_persons"
    UPDATE_EID = "update_eid"


@dataclass
class TransactionContext:
    """Append-only audit log for a single linking operation."""

    operation: EmpiOperation | None = None
    messages: list[str] = field(default_factory=list)

    def add_transaction_log_message(self, message: str) -> None:
        self.messages.append(message)


def to_unqualified_versionless(reference: str) -> str:
    """
    Reduce a FHIR reference to ``ResourceType/id``.

    ``http://host/fhir/Patient/1/_history/3`` and ``Patient/1/_history/3``
    both become ``Patient/1``. Non-RESTful references (``urn:uuid:...``) are
    returned unchanged.
    """
    if reference.startswith(("urn:", "#")):
        return reference
    parts = [part for part in reference.split("/") if part]
    if "_history" in parts:
        parts = parts[: parts.index("_history")]
    if len(parts) < 2:
        return reference
    return f"{parts[-2]}/{parts[-1]}"
