"""JSON output writer."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone

from ..graphs.models import DependencyGraph


def write_graph_json(result, output_dir: str) -> str:
    """Write the analyzed graph with per-project migration scores to JSON."""
    path = os.path.join(output_dir, "graph.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    graph = result.graph
    projects = []
    for node_id, record in graph.nodes.items():
        entry = record.to_dict()
        score = result.scores.get(node_id)
        if score is not None:
            entry["migration"] = score.to_dict()
        projects.append(entry)

    data = {
        "generated_at": _now_iso(),
        "summary": {
            "projects": graph.node_count,
            "edges": graph.edge_count,
            "layers": len(graph.layers),
            "cycles": len(graph.cycles),
            "distinct_cycles": len(result.canonical_cycles),
            "unscheduled": len(result.unscheduled),
        },
        "projects": projects,
        "edges": [e.to_dict() for e in graph.edges],
        "layers": [layer.to_dict() for layer in graph.layers],
        "cycles": [list(c) for c in graph.cycles],
        "canonical_cycles": [list(c) for c in result.canonical_cycles],
        "unscheduled": sorted(result.unscheduled),
        "blocked": sorted(result.blocked),
        "duplicate_ids": list(graph.duplicate_ids),
    }

    _write_json(path, data)
    return path


def write_build_layers_json(graph: DependencyGraph, output_dir: str) -> str:
    """Write the parallel build order to JSON."""
    path = os.path.join(output_dir, "build-layers.json")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    layers = []
    for layer in graph.layers:
        layers.append({
            "layer": layer.number,
            "projects": [
                {
                    "id": node_id,
                    "name": graph.nodes[node_id].display_name,
                    "path": graph.nodes[node_id].path,
                }
                for node_id in layer.nodes
            ],
        })

    data = {
        "generated_at": _now_iso(),
        "layer_count": len(layers),
        "layers": layers,
    }

    _write_json(path, data)
    return path


def _write_json(path: str, data: dict):
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False, default=str)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
