"""
1) Load the person records from a JSON or GEDCOM file.
2) Check them for inconsistencies (cycles, one-sided links, impossible ages).
3) Build the positioned family graph (generations, family groups, junctions).
4) Write it as JSON, or render it with Graphviz (falling back to a ranked
   layout when preset positioning is unavailable).
"""

from collections.abc import Sequence
from pathlib import Path
import argparse
import json
import sys

from assembly import assemble_graph
from errors import FamilyTreeError
from models import LayoutConfig
from parsing import load_persons
from pipeline import render_family_tree
from validation import validate_persons


def build_parser() -> argparse.ArgumentParser:
    defaults = LayoutConfig()
    parser = argparse.ArgumentParser(
        description="Lay out a multi-generation family tree and render it."
    )
    parser.add_argument("input", type=Path, help="Person records (.json list or .ged GEDCOM file).")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output file: .json for the graph data, .png/.svg/.pdf for an image. "
        "Shows a preview window when omitted.",
    )
    parser.add_argument("--show-age", action="store_true", help="Add the current age to every label.")
    parser.add_argument("--row-spacing", type=float, default=defaults.row_spacing)
    parser.add_argument("--unit-spacing", type=float, default=defaults.unit_spacing)
    parser.add_argument("--group-spacing", type=float, default=defaults.group_spacing)
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=defaults.max_iterations,
        help="Overlap-resolution attempts per family group.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = LayoutConfig(
        row_spacing=args.row_spacing,
        unit_spacing=args.unit_spacing,
        group_spacing=args.group_spacing,
        max_iterations=args.max_iterations,
    )

    try:
        print(f"Loading persons: {args.input}")
        persons = load_persons(args.input)
        print(f"  Found {len(persons)} persons")

        print("Checking relationships...")
        warnings = validate_persons(persons)
        if warnings:
            print(f"  Found {len(warnings)} warnings:")
            for w in warnings[:10]:  # Show first 10 warnings
                print(f"    - {w}")
            if len(warnings) > 10:
                print(f"    ... and {len(warnings) - 10} more")
        else:
            print("  No issues found")

        output = args.output
        if output is not None and output.suffix.lower() == ".json":
            print("Building family graph...")
            graph = assemble_graph(persons, show_age=args.show_age, config=config)
            with open(output, "w", encoding="utf-8") as f:
                json.dump(graph.to_dict(), f, ensure_ascii=False, indent=2)
            print(f"Graph saved to {output}")
        else:
            print("Rendering family graph...")
            result = render_family_tree(persons, output, show_age=args.show_age, config=config)
            graph = result.graph
            if result.used_fallback:
                print("  Preset layout unavailable; rendered with breadth-first ranking instead")
            if output is not None:
                print(f"Graph saved to {output}")
    except (FamilyTreeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"  Graph has {len(graph.nodes)} nodes and {len(graph.edges)} edges")
    if not graph.fully_resolved:
        groups = ", ".join(str(list(g.members)) for g in graph.degraded_groups)
        print(f"  Warning: overlaps could not be fully resolved for family groups {groups}")
    print("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
