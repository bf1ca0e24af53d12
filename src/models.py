"""Data classes for family graph entities."""

from dataclasses import dataclass, field
from datetime import date

PERSON = "person"
JUNCTION = "junction"

SPOUSE = "spouse"
PARENT = "parent"


@dataclass(frozen=True)
class Person:
    id: int
    name: str
    birth_date: date
    parent_ids: tuple[int, ...] = ()
    spouse_id: int | None = None
    children_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class Node:
    id: str
    kind: str  # PERSON or JUNCTION
    generation: int
    label: str = ""
    person_id: int | None = None
    x: float = 0.0
    y: float = 0.0
    background_color: str = "#ffffff"
    border_color: str = "#dee2e6"
    birthday: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "label": self.label,
            "generation": self.generation,
            "person_id": self.person_id,
            "position": {"x": self.x, "y": self.y},
            "style": {
                "background_color": self.background_color,
                "border_color": self.border_color,
                "birthday": self.birthday,
            },
        }


@dataclass(frozen=True)
class Edge:
    id: str
    kind: str  # SPOUSE or PARENT
    source: str
    target: str

    def to_dict(self) -> dict:
        return {"id": self.id, "kind": self.kind, "source": self.source, "target": self.target}


@dataclass(frozen=True)
class FamilyGroup:
    members: tuple[int, ...]  # person ids, ascending

    @property
    def min_id(self) -> int:
        return self.members[0]

    def width(self, unit_spacing: float) -> float:
        return len(self.members) * unit_spacing


@dataclass(frozen=True)
class PlacementRectangle:
    left: float
    right: float

    def overlaps(self, left: float, right: float) -> bool:
        return left < self.right and right > self.left

    @property
    def center(self) -> float:
        return (self.left + self.right) / 2


@dataclass(frozen=True)
class LayoutConfig:
    row_spacing: float = 200.0  # vertical gap between generations
    unit_spacing: float = 220.0  # horizontal gap between members of one group
    group_spacing: float = 50.0  # horizontal gap between family groups
    top_margin: float = 100.0  # y of generation 1
    max_iterations: int = 100  # overlap-resolution cap per family group


@dataclass
class FamilyGraph:
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    fully_resolved: bool = True
    degraded_groups: list[FamilyGroup] = field(default_factory=list)

    def node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "fully_resolved": self.fully_resolved,
        }


def person_node_id(person_id: int) -> str:
    return f"person_{person_id}"


def junction_node_id(a: int, b: int) -> str:
    return f"junction_{min(a, b)}_{max(a, b)}"
