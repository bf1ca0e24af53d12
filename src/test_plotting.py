from datetime import date
import errno

import matplotlib
import pydot
import pytest

matplotlib.use("Agg")

from assembly import assemble_graph
from errors import RenderBackendError
from models import Person
from plotting import build_pydot_graph, plot_graph, render_graph, to_networkx

TODAY = date(2024, 1, 1)


@pytest.fixture
def family():
    return assemble_graph(
        [
            Person(1, "Taro", date(1960, 4, 1), spouse_id=2, children_ids=(3,)),
            Person(2, "Hanako", date(1962, 8, 15), spouse_id=1, children_ids=(3,)),
            Person(3, "Ichiro", date(1990, 11, 30), parent_ids=(1, 2)),
        ],
        today=TODAY,
    )


def _attr(P, node_id, name):
    value = P.get_node(node_id)[0].get(name)
    return value.strip('"') if isinstance(value, str) else value


def test_preset_graph_pins_every_node(family):
    P = build_pydot_graph(family, preset=True)

    assert _attr(P, "person_1", "pos") == "-220,-100!"
    assert _attr(P, "person_3", "pos") == "-110,-300!"
    assert _attr(P, "junction_1_2", "shape") == "point"
    assert _attr(P, "person_1", "fillcolor") == "#fff5e6"
    assert len(P.get_edges()) == 3
    assert P.get_subgraphs() == []


def test_ranked_graph_groups_generations(family):
    P = build_pydot_graph(family, preset=False)

    assert _attr(P, "person_1", "pos") is None
    names = sorted(sg.get_name() for sg in P.get_subgraphs())
    assert names == ["generation_1", "generation_2"]


def test_render_graph_picks_program_and_format(family, tmp_path, monkeypatch):
    calls = []

    def fake_write(self, path, prog=None, format="raw", encoding=None):
        calls.append((path, prog, format))

    monkeypatch.setattr(pydot.Dot, "write", fake_write)

    render_graph(family, tmp_path / "tree.svg")
    render_graph(family, tmp_path / "tree.jpg", preset=False)

    assert calls == [
        (str(tmp_path / "tree.svg"), ["neato", "-n2"], "svg"),
        (str(tmp_path / "tree.jpg"), "dot", "png"),
    ]


def test_missing_layout_program_is_reported_as_unavailable(family, tmp_path, monkeypatch):
    def fake_write(self, path, prog=None, format="raw", encoding=None):
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", "neato")

    monkeypatch.setattr(pydot.Dot, "write", fake_write)

    with pytest.raises(RenderBackendError) as excinfo:
        render_graph(family, tmp_path / "tree.png")
    assert excinfo.value.layout_unavailable


def test_other_graphviz_failures_are_not_unavailable(family, tmp_path, monkeypatch):
    def fake_write(self, path, prog=None, format="raw", encoding=None):
        raise Exception("boom")

    monkeypatch.setattr(pydot.Dot, "write", fake_write)

    with pytest.raises(RenderBackendError, match="boom") as excinfo:
        render_graph(family, tmp_path / "tree.png")
    assert not excinfo.value.layout_unavailable


def test_to_networkx(family):
    G = to_networkx(family)

    assert G.number_of_nodes() == 4
    assert G.number_of_edges() == 3
    assert G.nodes["junction_1_2"]["kind"] == "junction"
    assert G.edges["junction_1_2", "person_3"]["kind"] == "parent"


def test_plot_graph_writes_image(family, tmp_path):
    output = tmp_path / "tree.png"

    plot_graph(family, output)

    assert output.exists()
    assert output.stat().st_size > 0
