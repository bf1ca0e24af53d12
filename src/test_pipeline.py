from datetime import date

import pytest

from errors import RenderBackendError
from models import Person
from pipeline import render_family_tree

TODAY = date(2024, 1, 1)

PERSONS = [
    Person(1, "Taro", date(1960, 4, 1), spouse_id=2, children_ids=(3,)),
    Person(2, "Hanako", date(1962, 8, 15), spouse_id=1, children_ids=(3,)),
    Person(3, "Ichiro", date(1990, 11, 30), parent_ids=(1, 2), spouse_id=4),
    Person(4, "Yuki", date(1991, 2, 20), spouse_id=3),
]


class RecordingRenderer:
    def __init__(self, failures=()):
        self.failures = list(failures)
        self.calls = []

    def __call__(self, graph, output_path, preset):
        self.calls.append((graph, output_path, preset))
        if self.failures:
            failure = self.failures.pop(0)
            if failure is not None:
                raise failure


def test_renders_centered_layout_with_preset_positions(tmp_path):
    renderer = RecordingRenderer()
    output = tmp_path / "tree.png"

    result = render_family_tree(PERSONS, output, renderer=renderer, today=TODAY)

    assert not result.used_fallback
    assert len(renderer.calls) == 1
    graph, path, preset = renderer.calls[0]
    assert graph is result.graph
    assert path == output
    assert preset is True
    # married-in spouse shares the child's row
    assert result.graph.node("person_4").y == result.graph.node("person_3").y


def test_falls_back_to_breadth_first_ranking_when_preset_layout_is_unavailable():
    renderer = RecordingRenderer([RenderBackendError("neato missing", layout_unavailable=True)])

    result = render_family_tree(PERSONS, renderer=renderer, today=TODAY)

    assert result.used_fallback
    assert [preset for _, _, preset in renderer.calls] == [True, False]
    assert result.graph is renderer.calls[1][0]
    # breadth-first ranking keeps the parentless spouse on the top row
    assert result.graph.node("person_4").generation == 1
    assert result.graph.node("person_3").generation == 2


def test_other_backend_errors_propagate():
    renderer = RecordingRenderer([RenderBackendError("disk full")])

    with pytest.raises(RenderBackendError, match="disk full"):
        render_family_tree(PERSONS, renderer=renderer, today=TODAY)
    assert len(renderer.calls) == 1


def test_fallback_failure_propagates():
    renderer = RecordingRenderer([
        RenderBackendError("neato missing", layout_unavailable=True),
        RenderBackendError("dot missing", layout_unavailable=True),
    ])

    with pytest.raises(RenderBackendError, match="dot missing"):
        render_family_tree(PERSONS, renderer=renderer, today=TODAY)
    assert len(renderer.calls) == 2
