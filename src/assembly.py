"""Assemble the positioned node/edge graph handed to the render adapter."""

from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from graph import PersonGraph
from labels import JUNCTION_COLOR, is_birthday, node_colors, person_label
from layout import BREADTH_FIRST, CENTERED, LayoutEngine
from models import (
    JUNCTION,
    PARENT,
    PERSON,
    SPOUSE,
    Edge,
    FamilyGraph,
    LayoutConfig,
    Node,
    Person,
    junction_node_id,
    person_node_id,
)
from parsing import persons_from_records


def _person_node(person: Person, generation: int, today: date, show_age: bool) -> Node:
    birthday = is_birthday(person.birth_date, today)
    background, border = node_colors(generation, birthday)
    return Node(
        id=person_node_id(person.id),
        kind=PERSON,
        generation=generation,
        label=person_label(person.name, person.birth_date, today, show_age),
        person_id=person.id,
        background_color=background,
        border_color=border,
        birthday=birthday,
    )


def build_elements(
    person_graph: PersonGraph,
    generations: dict[int, int],
    today: date,
    show_age: bool = False,
) -> tuple[list[Node], list[Edge], dict[str, tuple[int, int]]]:
    """
    Create the unpositioned nodes and edges for a snapshot.

    Persons are visited in snapshot order. A person's spouse is emitted right
    after them, together with the junction (when the pair shares a child) or
    the direct spouse edge. Parent-child edges come from the junction when the
    person's spouse shares the child and the junction already exists;
    otherwise they run directly from the person.

    Returns:
        (nodes, edges, junctions) where junctions maps a junction node id to
        its (smaller, larger) spouse ids.
    """
    nodes: list[Node] = []
    edges: list[Edge] = []
    edge_ids: set[str] = set()
    emitted: set[int] = set()
    junctions: dict[str, tuple[int, int]] = {}

    def add_edge(edge_id: str, kind: str, source: str, target: str):
        if edge_id not in edge_ids:
            edge_ids.add(edge_id)
            edges.append(Edge(edge_id, kind, source, target))

    for person in person_graph.people():
        spouse_id = person_graph.spouse(person.id)

        if person.id not in emitted:
            nodes.append(_person_node(person, generations[person.id], today, show_age))
            emitted.add(person.id)

            if spouse_id is not None and spouse_id not in emitted:
                spouse = person_graph.lookup(spouse_id)
                nodes.append(_person_node(spouse, generations[spouse_id], today, show_age))
                emitted.add(spouse_id)

                if person_graph.shared_children(person.id, spouse_id):
                    junction_id = junction_node_id(person.id, spouse_id)
                    junctions[junction_id] = (min(person.id, spouse_id), max(person.id, spouse_id))
                    nodes.append(
                        Node(
                            id=junction_id,
                            kind=JUNCTION,
                            generation=generations[person.id],
                            background_color=JUNCTION_COLOR,
                            border_color=JUNCTION_COLOR,
                        )
                    )
                    for partner_id in (person.id, spouse_id):
                        add_edge(
                            f"spouse_{partner_id}_{junction_id}",
                            SPOUSE,
                            person_node_id(partner_id),
                            junction_id,
                        )
                else:
                    add_edge(
                        f"spouse_{person.id}_{spouse_id}",
                        SPOUSE,
                        person_node_id(person.id),
                        person_node_id(spouse_id),
                    )

        spouse_children = set(person_graph.children(spouse_id)) if spouse_id is not None else set()
        for child_id in person_graph.children(person.id):
            junction_id = junction_node_id(person.id, spouse_id) if spouse_id is not None else None
            if child_id in spouse_children and junction_id in junctions:
                add_edge(f"parent_{junction_id}_{child_id}", PARENT, junction_id, person_node_id(child_id))
            else:
                # Single parent, or the couple's junction has not been created
                add_edge(
                    f"parent_{person.id}_{child_id}",
                    PARENT,
                    person_node_id(person.id),
                    person_node_id(child_id),
                )

    return nodes, edges, junctions


def assemble_graph(
    persons: Sequence,
    *,
    show_age: bool = False,
    today: date | None = None,
    config: LayoutConfig | None = None,
    strategy: str = CENTERED,
) -> FamilyGraph:
    """
    Build the complete positioned family graph for one render.

    Args:
        persons: Person snapshot (Person objects or input records)
        show_age: Add an age line to every person label
        today: Reference date for ages and birthday highlighting
        config: Spacing constants and overlap iteration cap
        strategy: CENTERED (parent-anchored rows) or BREADTH_FIRST

    Returns:
        A FamilyGraph whose `fully_resolved` flag is False when some family
        group may still overlap its neighbours.

    Raises:
        InputValidationError: if the snapshot is malformed
        CyclicRelationshipError: if the ancestry loops
    """
    snapshot = persons_from_records(persons)
    today = today or date.today()
    person_graph = PersonGraph(snapshot)

    if strategy == BREADTH_FIRST:
        generations = person_graph.breadth_first_generations()
    else:
        generations = {p.id: person_graph.generation(p.id) for p in snapshot}

    nodes, edges, junctions = build_elements(person_graph, generations, today, show_age)

    engine = LayoutEngine(person_graph, config, strategy)
    result = engine.layout(nodes, junctions)

    positioned = []
    for node in nodes:
        x, y = result.positions.get(node.id, (0.0, 0.0))
        positioned.append(replace(node, x=x, y=y))

    return FamilyGraph(
        nodes=positioned,
        edges=edges,
        fully_resolved=result.fully_resolved,
        degraded_groups=result.degraded_groups,
    )
