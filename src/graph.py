"""NetworkX-backed person graph: lookups, generations and siblings."""

from collections.abc import Sequence

import networkx as nx

from errors import CyclicRelationshipError
from models import Person


class PersonGraph:
    """
    Read-only view over one person snapshot.

    Parent links are stored as PARENT_OF edges (parent -> child) in a
    NetworkX DiGraph. A link counts when either side declares it: the child
    through `parent_ids` or the parent through `children_ids`. Links to ids
    that are not part of the snapshot are ignored.

    Generations are memoized per instance, so a new PersonGraph must be built
    for every render.
    """

    def __init__(self, persons: Sequence[Person]):
        self._persons: dict[int, Person] = {p.id: p for p in persons}
        self._generations: dict[int, int] = {}

        self.G = nx.DiGraph()
        for p in persons:
            self.G.add_node(p.id, person_name=p.name, birth_date=p.birth_date)

        for p in persons:
            for parent_id in p.parent_ids:
                if parent_id in self._persons:
                    self.G.add_edge(parent_id, p.id, relationship_type="PARENT_OF")
            for child_id in p.children_ids:
                if child_id in self._persons:
                    self.G.add_edge(p.id, child_id, relationship_type="PARENT_OF")

    def __len__(self) -> int:
        return len(self._persons)

    def __contains__(self, person_id: int) -> bool:
        return person_id in self._persons

    def people(self) -> list[Person]:
        """All persons in snapshot order."""
        return list(self._persons.values())

    def lookup(self, person_id: int) -> Person | None:
        return self._persons.get(person_id)

    def parents(self, person_id: int) -> list[int]:
        if person_id not in self.G:
            return []
        return sorted(self.G.predecessors(person_id))

    def children(self, person_id: int) -> list[int]:
        if person_id not in self.G:
            return []
        return sorted(self.G.successors(person_id))

    def spouse(self, person_id: int) -> int | None:
        """Spouse id, or None when there is none or it is not in the snapshot."""
        person = self.lookup(person_id)
        if person is None or person.spouse_id is None:
            return None
        if person.spouse_id not in self._persons or person.spouse_id == person_id:
            return None
        return person.spouse_id

    def shared_children(self, a: int, b: int) -> list[int]:
        return sorted(set(self.children(a)) & set(self.children(b)))

    def siblings(self, person_id: int) -> set[int]:
        """Union of the children of every parent of `person_id`, excluding itself."""
        siblings: set[int] = set()
        for parent_id in self.parents(person_id):
            siblings.update(self.children(parent_id))
        siblings.discard(person_id)
        return siblings

    def generation(self, person_id: int) -> int:
        """
        Generation rank of a person; root ancestors are generation 1.

        A person with parents sits one below their deepest parent. A person
        without parents takes the generation their spouse gets from the
        spouse's parents, if any. Otherwise the person is a root.

        Raises:
            CyclicRelationshipError: if the rule revisits a person already on
                the active recursion chain.
        """
        return self._generation(person_id, [])

    def _generation(self, person_id: int, chain: list[int]) -> int:
        if person_id in self._generations:
            return self._generations[person_id]
        if person_id not in self._persons:
            return 1
        if person_id in chain:
            raise CyclicRelationshipError(chain[chain.index(person_id):] + [person_id])

        chain.append(person_id)
        try:
            parents = self.parents(person_id)
            if not parents:
                spouse_id = self.spouse(person_id)
                if spouse_id is not None:
                    parents = self.parents(spouse_id)

            if parents:
                generation = max(self._generation(pid, chain) for pid in parents) + 1
            else:
                generation = 1
        finally:
            chain.pop()

        self._generations[person_id] = generation
        return generation

    def breadth_first_generations(self) -> dict[int, int]:
        """
        Rank every person by breadth-first depth from the persons without parents.

        This is the coarse ranking used when the centered layout cannot be
        rendered: spouses without parents of their own stay at depth 1.

        Raises:
            CyclicRelationshipError: if some persons cannot be reached from any
                root, which only happens when their ancestry loops.
        """
        if not self._persons:
            return {}

        roots = [pid for pid in self._persons if not self.parents(pid)]
        ranks: dict[int, int] = {}
        if roots:
            for depth, layer in enumerate(nx.bfs_layers(self.G, roots), start=1):
                for pid in layer:
                    ranks[pid] = depth

        unreachable = [pid for pid in self._persons if pid not in ranks]
        if unreachable:
            raise CyclicRelationshipError(unreachable)
        return ranks
