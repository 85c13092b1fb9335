"""
Demographic field merging between two Persons.

Merges fold a losing Person into a surviving one. Repeating fields are
union-merged; scalar fields are only filled where the survivor has no value.
Nothing already on the survivor is removed or overwritten.
"""

import copy
import operator
from typing import Callable, TypeVar

from src.empi.adapters import Element, Resource, ResourceModelAdapter

T = TypeVar("T")


def merge_element_list(
    from_items: list[T],
    to_items: list[T],
    equals: Callable[[T, T], bool] = operator.eq,
) -> list[T]:
    """
    Append to ``to_items`` every element of ``from_items`` it lacks.

    Existing elements keep their order; new ones follow in ``from_items``
    order. Repeated elements within ``from_items`` are appended once.

    Returns:
        The elements that were appended
    """
    items_added: list[T] = []
    for from_item in from_items:
        if not any(equals(from_item, to_item) for to_item in to_items):
            to_items.append(from_item)
            items_added.append(from_item)
    return items_added


def merge_person_fields(
    adapter: ResourceModelAdapter,
    from_person: Resource,
    to_person: Resource,
) -> None:
    """Merge demographics of ``from_person`` into ``to_person`` (only the latter changes)."""
    repeating_fields: list[
        tuple[
            Callable[[Resource], list[Element]],
            Callable[[Resource, list[Element]], None],
        ]
    ] = [
        (adapter.get_names, adapter.set_names),
        (adapter.get_identifiers, adapter.set_identifiers),
        (adapter.get_addresses, adapter.set_addresses),
        (adapter.get_telecoms, adapter.set_telecoms),
    ]
    for getter, setter in repeating_fields:
        to_items = getter(to_person)
        if merge_element_list(copy.deepcopy(getter(from_person)), to_items):
            setter(to_person, to_items)

    birth_date = adapter.get_birth_date(from_person)
    if adapter.get_birth_date(to_person) is None and birth_date is not None:
        adapter.set_birth_date(to_person, birth_date)

    gender = adapter.get_gender(from_person)
    if adapter.get_gender(to_person) is None and gender is not None:
        adapter.set_gender(to_person, gender)

    photo = adapter.get_photo(from_person)
    if adapter.get_photo(to_person) is None and photo is not None:
        adapter.set_photo(to_person, copy.deepcopy(photo))
