"""DOT graph output writer.

Generates a Graphviz DOT file for the project dependency graph. Projects of
one build layer share a rank; edges on a cycle are drawn in red.
"""

from __future__ import annotations

import os
from typing import Set, Tuple

from ..graphs.models import DependencyGraph
from ..models import ProjectKind

_KIND_FILL = {
    ProjectKind.EXECUTABLE: "lightpink",
    ProjectKind.SHARED_LIBRARY: "palegreen",
    ProjectKind.STATIC_LIBRARY: "lightblue",
    ProjectKind.UNKNOWN: "lightyellow",
}


def write_graph_dot(graph: DependencyGraph, output_dir: str) -> str:
    """Write the project dependency graph as DOT file."""
    path = os.path.join(output_dir, "graph.dot")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    cycle_edges = _cycle_edges(graph)

    with open(path, "w", encoding="utf-8") as f:
        f.write("digraph dependencies {\n")
        f.write("  rankdir=BT;\n")
        f.write("  node [shape=box, style=filled];\n")
        f.write("  edge [color=gray40];\n")
        f.write("\n")

        for node_id, record in graph.nodes.items():
            fill = _KIND_FILL[record.kind]
            f.write(f'  "{_escape(node_id)}" [label="{_escape(record.display_name)}", '
                    f'fillcolor={fill}];\n')
        f.write("\n")

        for layer in graph.layers:
            members = " ".join(f'"{_escape(n)}";' for n in layer.nodes)
            f.write(f"  {{ rank=same; {members} }}  // layer {layer.number}\n")
        f.write("\n")

        for edge in graph.edges:
            style = ""
            if (edge.from_node, edge.to_node) in cycle_edges:
                style = " [color=red, penwidth=2]"
            f.write(f'  "{_escape(edge.from_node)}" -> "{_escape(edge.to_node)}"{style};\n')

        f.write("}\n")

    return path


def _cycle_edges(graph: DependencyGraph) -> Set[Tuple[str, str]]:
    edges: Set[Tuple[str, str]] = set()
    for cycle in graph.cycles:
        for a, b in zip(cycle, cycle[1:]):
            edges.add((a, b))
    return edges


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')
