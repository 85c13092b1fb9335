"""Tests for Person field merging and the Person merge flow."""

import copy
from typing import Any

import pytest

from src.empi.adapters import get_adapter
from src.empi.merge import merge_element_list, merge_person_fields
from src.empi.model import AssuranceLevel, TransactionContext
from src.empi.service import EmpiService
from src.settings import FhirVersion
from tests.conftest import make_person


@pytest.fixture
def from_person() -> dict[str, Any]:
    """Losing Person with full demographics."""
    return make_person(
        ["123"],
        person_id="loser",
        name=[
            {"family": "Testpatientone", "given": ["Elkind"]},
            {"family": "Elkind", "given": ["Sofia"]},
        ],
        address=[{"city": "Carlsbad", "state": "CA", "postalCode": "92008"}],
        telecom=[{"system": "phone", "value": "555-123-4567"}],
        birthDate="1980-12-23",
        gender="female",
        photo={"contentType": "image/png", "url": "http://example.org/a.png"},
    )


class TestMergeElementList:
    """Tests for the generic list merge."""

    def test_appends_missing_in_order(self) -> None:
        """New elements follow existing ones in source order."""
        to_items = ["a", "b"]

        added = merge_element_list(["c", "a", "d"], to_items)

        assert to_items == ["a", "b", "c", "d"]
        assert added == ["c", "d"]

    def test_custom_equality(self) -> None:
        """The equality function decides what counts as present."""
        to_items = ["Smith"]

        merge_element_list(["SMITH", "Jones"], to_items, lambda a, b: a.lower() == b.lower())

        assert to_items == ["Smith", "Jones"]

    def test_merge_is_idempotent(self) -> None:
        """Merging the same list twice equals merging once."""
        from_items = [{"family": "A"}, {"family": "B"}, {"family": "A"}]
        once: list[dict[str, str]] = [{"family": "B"}]
        merge_element_list(from_items, once)
        twice = copy.deepcopy(once)
        merge_element_list(from_items, twice)

        assert once == twice == [{"family": "B"}, {"family": "A"}]


class TestMergePersonFields:
    """Tests for merge_person_fields."""

    def test_empty_target_receives_everything(
        self, empi_service: EmpiService, from_person: dict[str, Any]
    ) -> None:
        """All fields are copied onto an empty Person."""
        to_person = make_person(person_id="winner")

        empi_service.merge_person_fields(from_person, to_person)

        for field in ("name", "identifier", "address", "telecom", "birthDate", "gender", "photo"):
            assert to_person[field] == from_person[field]

    def test_scalars_are_never_overwritten(
        self, empi_service: EmpiService, from_person: dict[str, Any]
    ) -> None:
        """Existing scalar values on the survivor win."""
        to_person = make_person(
            birthDate="1981-01-01",
            gender="other",
            photo={"url": "http://example.org/b.png"},
        )

        empi_service.merge_person_fields(from_person, to_person)

        assert to_person["birthDate"] == "1981-01-01"
        assert to_person["gender"] == "other"
        assert to_person["photo"] == {"url": "http://example.org/b.png"}

    def test_repeating_fields_union_by_deep_equality(
        self, empi_service: EmpiService, from_person: dict[str, Any]
    ) -> None:
        """Structurally equal elements are not duplicated; existing order is kept."""
        to_person = make_person(
            ["456"],
            name=[
                {"family": "Elkind", "given": ["Sofia"]},
                {"family": "Testpatientone", "given": ["Elkind", "M"]},
            ],
        )

        empi_service.merge_person_fields(from_person, to_person)

        assert to_person["name"] == [
            {"family": "Elkind", "given": ["Sofia"]},
            {"family": "Testpatientone", "given": ["Elkind", "M"]},
            {"family": "Testpatientone", "given": ["Elkind"]},
        ]
        assert [i["value"] for i in to_person["identifier"]] == ["456", "123"]

    def test_merge_twice_equals_merge_once(
        self, empi_service: EmpiService, from_person: dict[str, Any]
    ) -> None:
        """Field merging is idempotent."""
        to_person = make_person(["456"], name=[{"family": "Other"}])
        empi_service.merge_person_fields(from_person, to_person)
        once = copy.deepcopy(to_person)

        empi_service.merge_person_fields(from_person, to_person)

        assert to_person == once

    def test_source_is_not_modified(
        self, empi_service: EmpiService, from_person: dict[str, Any]
    ) -> None:
        """Only the survivor changes, and it does not share elements with the source."""
        before = copy.deepcopy(from_person)
        to_person = make_person()

        empi_service.merge_person_fields(from_person, to_person)
        to_person["name"][0]["family"] = "Changed"

        assert from_person == before

    def test_missing_source_scalars_do_not_create_fields(
        self, empi_service: EmpiService
    ) -> None:
        """Absent values on both sides stay absent."""
        to_person = make_person()

        empi_service.merge_person_fields(make_person(), to_person)

        assert "birthDate" not in to_person
        assert "gender" not in to_person
        assert "photo" not in to_person

    def test_r5_photo_lists(self) -> None:
        """R5 photos are lists and follow the same first-write-wins rule."""
        adapter = get_adapter(FhirVersion.R5)
        from_person = make_person(photo=[{"url": "http://example.org/a.png"}])
        empty = make_person()
        with_photo = make_person(photo=[{"url": "http://example.org/b.png"}])

        merge_person_fields(adapter, from_person, empty)
        merge_person_fields(adapter, from_person, with_photo)

        assert empty["photo"] == [{"url": "http://example.org/a.png"}]
        assert with_photo["photo"] == [{"url": "http://example.org/b.png"}]


class TestMergePersons:
    """Tests for the full Person merge."""

    def test_merge_moves_links_and_deactivates_loser(
        self,
        empi_service: EmpiService,
        from_person: dict[str, Any],
        ctx: TransactionContext,
    ) -> None:
        """Loser links move over; survivor links keep their assurance."""
        from_person["link"] = [
            {"target": {"reference": "Patient/1"}, "assurance": "level1"},
            {"target": {"reference": "Patient/2"}, "assurance": "level2"},
        ]
        to_person = make_person(
            person_id="winner",
            link=[{"target": {"reference": "Patient/1"}, "assurance": "level4"}],
        )

        result = empi_service.merge_persons(from_person, to_person, ctx)

        assert result is to_person
        assert to_person["link"] == [
            {"target": {"reference": "Patient/1"}, "assurance": "level4"},
            {"target": {"reference": "Patient/2"}, "assurance": "level2"},
        ]
        assert "link" not in from_person
        assert empi_service.is_deactivated(from_person) is True
        assert empi_service.is_deactivated(to_person) is False
        assert to_person["birthDate"] == "1980-12-23"
        assert ctx.messages[-1] == "Merged Person/loser into Person/winner"

    def test_link_assurance_is_preserved(
        self, empi_service: EmpiService, ctx: TransactionContext
    ) -> None:
        """Moved links keep the loser's assurance level."""
        loser = make_person(
            person_id="loser",
            link=[{"target": {"reference": "Patient/7"}, "assurance": "level3"}],
        )
        winner = make_person(person_id="winner")

        empi_service.merge_persons(loser, winner, ctx)

        assert empi_service.contains_link(winner, "Patient/7")
        assert winner["link"][0]["assurance"] == AssuranceLevel.LEVEL3.value

    def test_merging_a_person_into_itself_is_rejected(
        self, empi_service: EmpiService, ctx: TransactionContext
    ) -> None:
        """The survivor is left untouched when both sides are one object."""
        person = make_person(
            ["123"],
            link=[{"target": {"reference": "Patient/1"}, "assurance": "level2"}],
        )
        before = copy.deepcopy(person)

        with pytest.raises(ValueError, match="into itself"):
            empi_service.merge_persons(person, person, ctx)

        assert person == before
        assert empi_service.get_link_count(person) == 1
        assert empi_service.is_deactivated(person) is False
        assert ctx.messages == []

    def test_copies_with_the_same_id_are_rejected(
        self, empi_service: EmpiService, ctx: TransactionContext
    ) -> None:
        """Two copies of one stored Person cannot be merged."""
        loser = make_person(["123"], person_id="same")
        winner = make_person(
            ["123"],
            person_id="same",
            link=[{"target": {"reference": "Patient/1"}, "assurance": "level2"}],
        )

        with pytest.raises(ValueError, match="Person/same"):
            empi_service.merge_persons(loser, winner, ctx)

        assert loser["active"] is True
        assert winner["link"] == [
            {"target": {"reference": "Patient/1"}, "assurance": "level2"}
        ]

    def test_persons_without_ids_can_be_merged(
        self, empi_service: EmpiService, ctx: TransactionContext
    ) -> None:
        """Two distinct unsaved Persons are not mistaken for one."""
        loser = make_person(person_id=None, gender="male")
        winner = make_person(person_id=None)

        empi_service.merge_persons(loser, winner, ctx)

        assert winner["gender"] == "male"
        assert empi_service.is_deactivated(loser) is True
