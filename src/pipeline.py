"""One full render: assemble, lay out and hand off to the render adapter."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from assembly import assemble_graph
from errors import RenderBackendError
from layout import BREADTH_FIRST, CENTERED
from models import FamilyGraph, LayoutConfig
from plotting import render_graph

Renderer = Callable[[FamilyGraph, Path | None, bool], None]


@dataclass
class RenderResult:
    graph: FamilyGraph
    used_fallback: bool = False


def render_family_tree(
    persons: Sequence,
    output_path: Path | None = None,
    *,
    renderer: Renderer = render_graph,
    show_age: bool = False,
    today: date | None = None,
    config: LayoutConfig | None = None,
) -> RenderResult:
    """
    Build the family graph from a fresh snapshot and render it.

    The centered layout is rendered with preset positions first. If the
    renderer reports that its preset layout mode is unavailable, the graph
    is rebuilt with the breadth-first ranking and rendered once more in
    ranked mode. Any other render error, or a failure of the fallback,
    propagates to the caller.

    Args:
        persons: Person snapshot (Person objects or input records)
        output_path: Passed through to the renderer
        renderer: Callable(graph, output_path, preset)
        show_age: Add an age line to person labels
        today: Reference date for ages and birthdays
        config: Layout constants

    Returns:
        The graph that was rendered and whether the fallback was used.
    """
    today = today or date.today()
    graph = assemble_graph(persons, show_age=show_age, today=today, config=config, strategy=CENTERED)

    try:
        renderer(graph, output_path, True)
    except RenderBackendError as exc:
        if not exc.layout_unavailable:
            raise
        graph = assemble_graph(
            persons, show_age=show_age, today=today, config=config, strategy=BREADTH_FIRST
        )
        renderer(graph, output_path, False)
        return RenderResult(graph=graph, used_fallback=True)

    return RenderResult(graph=graph)
