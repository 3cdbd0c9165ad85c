"""Dependency graph assembly from project records.

Only intra-set dependencies become edges. Dependency ids without a matching
record are dropped; external tokens stay on the record for the scorer.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import ProjectRecord
from .models import DependencyEdge, DependencyGraph


def build_graph(records: Iterable[ProjectRecord]) -> DependencyGraph:
    """Build a dependency graph from a complete set of project records.

    Args:
        records: Every record of the run. Records sharing an id overwrite
            earlier ones (last write wins); the overwritten ids are listed in
            ``duplicate_ids``.

    Returns:
        DependencyGraph with nodes and edges, no cycles or layers yet.
    """
    records = list(records)
    nodes: Dict[str, ProjectRecord] = {}
    duplicate_ids: List[str] = []

    for record in records:
        if record.id in nodes and record.id not in duplicate_ids:
            duplicate_ids.append(record.id)
        nodes[record.id] = record

    # Every input record contributes edges, including overwritten duplicates
    edges: List[DependencyEdge] = []
    for record in records:
        for dep_id in record.dependencies:
            if dep_id in nodes:
                edges.append(DependencyEdge(from_node=record.id, to_node=dep_id))

    return DependencyGraph(nodes=nodes, edges=edges, duplicate_ids=duplicate_ids)
