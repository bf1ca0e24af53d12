"""Generation-by-generation placement of family groups and junctions."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from families import build_family_groups
from graph import PersonGraph
from models import (
    JUNCTION,
    PERSON,
    FamilyGroup,
    LayoutConfig,
    Node,
    PlacementRectangle,
    junction_node_id,
    person_node_id,
)

CENTERED = "centered"
BREADTH_FIRST = "breadthfirst"
STRATEGIES = (CENTERED, BREADTH_FIRST)


@dataclass
class LayoutResult:
    positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    fully_resolved: bool = True
    degraded_groups: list[FamilyGroup] = field(default_factory=list)


def parent_key(parent_ids: Sequence[int]) -> str | None:
    """Node id the children of these parents hang from."""
    if len(parent_ids) >= 2:
        return junction_node_id(min(parent_ids), max(parent_ids))
    if len(parent_ids) == 1:
        return person_node_id(parent_ids[0])
    return None


class LayoutEngine:
    """
    Assign (x, y) to every node of an assembled graph.

    Rows are processed top to bottom. With the centered strategy generation 1
    is laid out as one centered row and every later row places its family
    groups under their parents, shifting a group sideways when it would
    overlap a group already placed on the same row. The breadth-first
    strategy lays out every row like generation 1.

    The overlap shift is bounded by `config.max_iterations`. A group that
    still overlaps when the cap is hit keeps its last candidate position and
    is reported in `LayoutResult.degraded_groups`.
    """

    def __init__(
        self,
        person_graph: PersonGraph,
        config: LayoutConfig | None = None,
        strategy: str = CENTERED,
    ):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown layout strategy {strategy!r}, expected one of {STRATEGIES}")
        self.person_graph = person_graph
        self.config = config or LayoutConfig()
        self.strategy = strategy

        self._positions: dict[str, tuple[float, float]] = {}
        self._degraded: list[FamilyGroup] = []
        self._junctions: dict[str, tuple[int, int]] = {}
        self._junction_rows: dict[str, int] = {}

    def layout(self, nodes: Sequence[Node], junctions: dict[str, tuple[int, int]]) -> LayoutResult:
        """
        Compute positions for `nodes`.

        Args:
            nodes: Person and junction nodes, in assembly order
            junctions: Junction node id -> (spouse id, spouse id)

        Returns:
            A LayoutResult with a position for every node id
        """
        self._positions = {}
        self._degraded = []
        self._junctions = dict(junctions)
        self._junction_rows = {n.id: n.generation for n in nodes if n.kind == JUNCTION}

        rows: dict[int, list[int]] = {}
        for node in nodes:
            if node.kind == PERSON:
                rows.setdefault(node.generation, []).append(node.person_id)

        for generation in sorted(rows):
            groups = build_family_groups(rows[generation], self.person_graph)
            placed: list[PlacementRectangle] = []
            y = self.row_y(generation)
            if generation == 1 or self.strategy == BREADTH_FIRST:
                self._place_row(groups, y, placed)
            else:
                self._place_under_parents(groups, y, placed)

        # Spouses on different rows never share a group
        for junction_id in self._junctions:
            if junction_id not in self._positions:
                self._place_junction(junction_id)

        return LayoutResult(
            positions=dict(self._positions),
            fully_resolved=not self._degraded,
            degraded_groups=list(self._degraded),
        )

    def row_y(self, generation: int) -> float:
        return self.config.top_margin + (generation - 1) * self.config.row_spacing

    def _place_row(self, groups: list[FamilyGroup], y: float, placed: list[PlacementRectangle]):
        unit = self.config.unit_spacing
        gap = self.config.group_spacing

        groups = sorted(groups, key=lambda g: g.min_id)
        total = sum(g.width(unit) for g in groups) + max(len(groups) - 1, 0) * gap

        x = -total / 2
        for group in groups:
            self._commit(group, x, y, placed)
            x += group.width(unit) + gap

    def _place_under_parents(
        self, groups: list[FamilyGroup], y: float, placed: list[PlacementRectangle]
    ):
        unit = self.config.unit_spacing
        gap = self.config.group_spacing

        groups_by_key: dict[str | None, list[FamilyGroup]] = {}
        for group in groups:
            parent_ids = set()
            for member in group.members:
                parent_ids.update(self.person_graph.parents(member))
            groups_by_key.setdefault(parent_key(sorted(parent_ids)), []).append(group)

        # Parentless groups sort first
        for key in sorted(groups_by_key, key=lambda k: k or ""):
            sibling_groups = sorted(groups_by_key[key], key=lambda g: g.min_id)
            parent_x = self._parent_x(key)

            if len(sibling_groups) == 1:
                group = sibling_groups[0]
                ideal = parent_x - group.width(unit) / 2 + unit / 2
                x = self._resolve_overlap(group, ideal, parent_x, placed)
                self._commit(group, x, y, placed)
                continue

            # Several sibling families: center the whole block under the parents
            total = sum(g.width(unit) for g in sibling_groups) + (len(sibling_groups) - 1) * gap
            cursor = parent_x - total / 2 + unit / 2
            for group in sibling_groups:
                x = self._resolve_overlap(group, cursor, parent_x, placed)
                self._commit(group, x, y, placed)
                cursor = x + group.width(unit) + gap

    def _parent_x(self, key: str | None) -> float:
        if key is None:
            return 0.0
        if key in self._positions:
            return self._positions[key][0]

        # Couple without a placed junction: midpoint of whichever spouses are placed
        _, *ids = key.split("_")
        xs = [
            self._positions[person_node_id(int(pid))][0]
            for pid in ids
            if person_node_id(int(pid)) in self._positions
        ]
        return sum(xs) / len(xs) if xs else 0.0

    def _resolve_overlap(
        self,
        group: FamilyGroup,
        ideal: float,
        parent_x: float,
        placed: list[PlacementRectangle],
    ) -> float:
        """
        Left edge for `group`, shifted off the placed rectangles where possible.

        The first conflict decides the direction (the smaller move, ties away
        from the center, right at the center). Later conflicts push the
        candidate further the same way, so every step clears at least one
        rectangle for good.
        """
        width = group.width(self.config.unit_spacing)
        gap = self.config.group_spacing

        candidate = ideal
        conflict = self._nearest_conflict(candidate, width, placed)
        go_right = None
        iterations = 0
        while conflict is not None and iterations < self.config.max_iterations:
            iterations += 1
            shift_right = conflict.right + gap
            shift_left = conflict.left - gap - width

            if go_right is None:
                move_right = abs(shift_right - candidate)
                move_left = abs(shift_left - candidate)
                if move_right != move_left:
                    go_right = move_right < move_left
                else:
                    go_right = parent_x >= 0

            candidate = shift_right if go_right else shift_left
            conflict = self._nearest_conflict(candidate, width, placed)

        if conflict is not None:
            self._degraded.append(group)
        return candidate

    @staticmethod
    def _nearest_conflict(
        left: float, width: float, placed: list[PlacementRectangle]
    ) -> PlacementRectangle | None:
        conflicts = [rect for rect in placed if rect.overlaps(left, left + width)]
        if not conflicts:
            return None
        center = left + width / 2
        return min(conflicts, key=lambda rect: abs(rect.center - center))

    def _commit(self, group: FamilyGroup, x: float, y: float, placed: list[PlacementRectangle]):
        unit = self.config.unit_spacing
        for index, member in enumerate(group.members):
            self._positions[person_node_id(member)] = (x + index * unit, y)
        placed.append(PlacementRectangle(x, x + group.width(unit)))

        for member in group.members:
            spouse_id = self.person_graph.spouse(member)
            if spouse_id is None or spouse_id not in group.members or member > spouse_id:
                continue
            junction_id = junction_node_id(member, spouse_id)
            if junction_id in self._junctions:
                self._place_junction(junction_id)

    def _place_junction(self, junction_id: str):
        a, b = self._junctions[junction_id]
        pos_a = self._positions.get(person_node_id(a))
        pos_b = self._positions.get(person_node_id(b))
        if pos_a is None or pos_b is None:
            return
        row = self._junction_rows.get(junction_id)
        y = self.row_y(row) if row is not None else pos_a[1]
        self._positions[junction_id] = ((pos_a[0] + pos_b[0]) / 2, y)
