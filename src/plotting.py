"""Render adapter: draw an assembled family graph with Graphviz or matplotlib."""

from pathlib import Path
import errno
import tempfile

import matplotlib.pyplot as plt
import networkx as nx
import pydot

from errors import RenderBackendError
from models import JUNCTION, SPOUSE, FamilyGraph

POINTS_PER_INCH = 72
NODE_WIDTH = 180  # points
NODE_HEIGHT = 100  # points
EDGE_COLOR = "#7f8c8d"
SPOUSE_EDGE_COLOR = "#764ba2"


def build_pydot_graph(graph: FamilyGraph, preset: bool = True) -> pydot.Dot:
    """
    Convert a family graph into a pydot graph.

    With `preset` every node is pinned at its computed position and the graph
    must be laid out with `neato -n2`, which keeps positions as given. Without
    it, positions are dropped and each generation becomes a `rank=same`
    subgraph for a hierarchical `dot` layout.
    """
    P = pydot.Dot(graph_type="graph")
    P.set("splines", "line")
    if preset:
        P.set("layout", "neato")
    else:
        P.set("rankdir", "TB")  # Top-to-bottom (ancestors at top)
        P.set("nodesep", "0.4")
        P.set("ranksep", "0.6")

    ranks: dict[int, list[str]] = {}
    for node in graph.nodes:
        attrs = {}
        if preset:
            # Graphviz y axis points up
            attrs["pos"] = f"{node.x:g},{-node.y:g}!"

        if node.kind == JUNCTION:
            P.add_node(
                pydot.Node(
                    node.id,
                    shape="point",
                    width="0.1",
                    height="0.1",
                    label="",
                    color=node.border_color,
                    **attrs,
                )
            )
        else:
            P.add_node(
                pydot.Node(
                    node.id,
                    label=node.label,
                    shape="box",
                    style="rounded,filled",
                    fillcolor=node.background_color,
                    color=node.border_color,
                    penwidth="2",
                    width=str(NODE_WIDTH / POINTS_PER_INCH),
                    height=str(NODE_HEIGHT / POINTS_PER_INCH),
                    fixedsize="true",
                    fontsize="14",
                    **attrs,
                )
            )
        ranks.setdefault(node.generation, []).append(node.id)

    for edge in graph.edges:
        color = SPOUSE_EDGE_COLOR if edge.kind == SPOUSE else EDGE_COLOR
        P.add_edge(pydot.Edge(edge.source, edge.target, color=color, penwidth="3"))

    if not preset:
        # Align each generation (spouses and their junctions included) horizontally
        for generation in sorted(ranks):
            sg = pydot.Subgraph(f"generation_{generation}", rank="same")
            for node_id in ranks[generation]:
                sg.add_node(pydot.Node(node_id))
            P.add_subgraph(sg)

    return P


def render_graph(graph: FamilyGraph, output_path: Path | None = None, preset: bool = True):
    """
    Render a family graph with Graphviz.

    Args:
        graph: Positioned family graph
        output_path: Image to write (png, svg or pdf, from the extension).
            If None, the image is shown with matplotlib.
        preset: Use the precomputed positions (neato -n2); otherwise let
            `dot` rank the generations.

    Raises:
        RenderBackendError: if Graphviz fails. `layout_unavailable` is set
            when the layout program itself cannot be started.
    """
    P = build_pydot_graph(graph, preset=preset)
    prog = ["neato", "-n2"] if preset else "dot"
    prog_name = prog[0] if isinstance(prog, list) else prog

    if output_path is None:
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            _write(P, Path(f.name), "png", prog, prog_name)
            img = plt.imread(f.name)
        plt.figure(figsize=(20, 16))
        plt.imshow(img)
        plt.axis("off")
        plt.tight_layout()
        plt.show()
        return

    # Determine format from extension
    ext = output_path.suffix.lower().lstrip(".")
    if ext not in ("png", "svg", "pdf"):
        ext = "png"
    _write(P, output_path, ext, prog, prog_name)


def _write(P: pydot.Dot, path: Path, fmt: str, prog, prog_name: str):
    try:
        P.write(str(path), format=fmt, prog=prog)
    except OSError as exc:
        missing = exc.errno == errno.ENOENT or isinstance(exc, FileNotFoundError)
        raise RenderBackendError(
            f'Graphviz "{prog_name}" could not be run: {exc}. '
            "Install Graphviz and make sure it is on PATH.",
            layout_unavailable=missing,
        ) from exc
    except Exception as exc:
        # pydot reports failed Graphviz runs with plain exceptions
        raise RenderBackendError(
            f'Graphviz "{prog_name}" failed to render {path.name}: {exc}',
            layout_unavailable="not found" in str(exc),
        ) from exc


def to_networkx(graph: FamilyGraph) -> nx.Graph:
    """Family graph as an undirected NetworkX graph carrying all node/edge data."""
    G = nx.Graph()
    for node in graph.nodes:
        G.add_node(node.id, **node.to_dict())
    for edge in graph.edges:
        G.add_edge(edge.source, edge.target, id=edge.id, kind=edge.kind)
    return G


def plot_graph(graph: FamilyGraph, output_path: Path | None = None):
    """
    Draw the family graph with matplotlib at its precomputed positions.

    Does not need Graphviz. Junctions are drawn as small dots, persons as
    labelled boxes colored by generation.
    """
    G = to_networkx(graph)
    # matplotlib y axis points up
    pos = {node.id: (node.x, -node.y) for node in graph.nodes}

    persons = [n for n in graph.nodes if n.kind != JUNCTION]
    junctions = [n.id for n in graph.nodes if n.kind == JUNCTION]
    spouse_edges = [(e.source, e.target) for e in graph.edges if e.kind == SPOUSE]
    parent_edges = [(e.source, e.target) for e in graph.edges if e.kind != SPOUSE]

    fig, ax = plt.subplots(figsize=(20, 16))
    nx.draw_networkx_edges(G, pos, edgelist=parent_edges, edge_color=EDGE_COLOR, width=2, ax=ax)
    nx.draw_networkx_edges(G, pos, edgelist=spouse_edges, edge_color=SPOUSE_EDGE_COLOR, width=2, ax=ax)
    nx.draw_networkx_nodes(
        G, pos, nodelist=junctions, node_color=EDGE_COLOR, node_size=30, ax=ax
    )
    nx.draw_networkx_nodes(
        G,
        pos,
        nodelist=[n.id for n in persons],
        node_color=[n.background_color for n in persons],
        edgecolors=[n.border_color for n in persons],
        node_shape="s",
        node_size=2500,
        linewidths=2,
        ax=ax,
    )
    nx.draw_networkx_labels(G, pos, labels={n.id: n.label for n in persons}, font_size=8, ax=ax)

    ax.set_title(f"Family Tree ({len(persons)} people, {len(graph.edges)} relationships)")
    ax.axis("off")
    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()
