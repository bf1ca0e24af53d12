"""Consistency checks for person snapshots."""

from collections.abc import Sequence

import networkx as nx

from graph import PersonGraph
from models import Person


def validate_persons(persons: Sequence[Person]) -> list[str]:
    """
    Check a person snapshot for:
    - Cycles in parent-child relationships
    - Links to unknown ids and links declared on only one side
    - Spouse links that are not mutual
    - More than two parents
    - Impossible ages (child born before parent)

    Returns a list of warning messages. None of these stop a render.
    """
    warnings: list[str] = []
    by_id = {p.id: p for p in persons}

    for p in persons:
        for field_name, ids in (("parentIds", p.parent_ids), ("childrenIds", p.children_ids)):
            for ref in ids:
                if ref not in by_id:
                    warnings.append(f"{p.name} ({p.id}) lists unknown person {ref} in {field_name}")
        if p.spouse_id is not None and p.spouse_id not in by_id:
            warnings.append(f"{p.name} ({p.id}) lists unknown spouse {p.spouse_id}")

        if len(set(p.parent_ids)) > 2:
            warnings.append(f"{p.name} ({p.id}) has more than two parents")

        spouse = by_id.get(p.spouse_id) if p.spouse_id is not None else None
        if spouse is not None and spouse.spouse_id != p.id:
            warnings.append(
                f"Spouse link is not mutual: {p.name} ({p.id}) -> {spouse.name} ({spouse.id})"
            )

        for child_id in p.children_ids:
            child = by_id.get(child_id)
            if child is not None and p.id not in child.parent_ids:
                warnings.append(
                    f"{p.name} ({p.id}) lists {child.name} ({child.id}) as a child, "
                    "but not the other way round"
                )
        for parent_id in p.parent_ids:
            parent = by_id.get(parent_id)
            if parent is not None and p.id not in parent.children_ids:
                warnings.append(
                    f"{p.name} ({p.id}) lists {parent.name} ({parent.id}) as a parent, "
                    "but not the other way round"
                )

    person_graph = PersonGraph(persons)

    # Check for cycles
    try:
        cycle = nx.find_cycle(person_graph.G, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    for parent_id, child_id in person_graph.G.edges():
        parent = by_id[parent_id]
        child = by_id[child_id]
        if child.birth_date < parent.birth_date:
            warnings.append(f"Impossible: {child.name} born before parent {parent.name}")
        elif (child.birth_date - parent.birth_date).days < 12 * 365:
            warnings.append(
                f"Suspicious: {parent.name} was less than 12 years old when {child.name} was born"
            )

    return warnings
