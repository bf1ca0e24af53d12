"""Partition one generation into family groups (spouse pair + unmarried siblings)."""

from collections.abc import Sequence

from graph import PersonGraph
from models import FamilyGroup


def build_family_groups(person_ids: Sequence[int], person_graph: PersonGraph) -> list[FamilyGroup]:
    """
    Split the persons displayed on one generation row into family groups.

    The ids are scanned in the given order, which is part of the contract:
    the assembler passes them in snapshot order with each spouse right after
    the person who introduced them. A person starts a new group, then pulls in
    their spouse and every sibling that has no spouse, as long as those are on
    the same row and not yet assigned. Each group is sorted by person id.

    Args:
        person_ids: Persons of a single generation, in enumeration order
        person_graph: Graph of the current snapshot

    Returns:
        Family groups in the order their first member was scanned; every id
        appears in exactly one group.
    """
    in_row = set(person_ids)
    assigned: set[int] = set()
    groups: list[FamilyGroup] = []

    for person_id in person_ids:
        if person_id in assigned:
            continue

        members = [person_id]
        assigned.add(person_id)

        spouse_id = person_graph.spouse(person_id)
        if spouse_id is not None and spouse_id in in_row and spouse_id not in assigned:
            members.append(spouse_id)
            assigned.add(spouse_id)

        for sibling_id in sorted(person_graph.siblings(person_id)):
            if sibling_id not in in_row or sibling_id in assigned:
                continue
            if person_graph.spouse(sibling_id) is not None:
                continue
            members.append(sibling_id)
            assigned.add(sibling_id)

        groups.append(FamilyGroup(tuple(sorted(members))))

    return groups
