"""Data models for dependency graph analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ..models import ProjectRecord

# Closed loop of project ids: first id == last id.
Cycle = List[str]


@dataclass(frozen=True)
class DependencyEdge:
    """``from_node`` depends on ``to_node``."""
    from_node: str
    to_node: str
    kind: str = "ProjectReference"

    def to_dict(self) -> dict:
        return {"from": self.from_node, "to": self.to_node, "kind": self.kind}


@dataclass(frozen=True)
class BuildLayer:
    """Projects that can be built in parallel once earlier layers are done."""
    number: int
    nodes: List[str] = field(default_factory=list, hash=False)

    def to_dict(self) -> dict:
        return {"layer": self.number, "projects": list(self.nodes)}


@dataclass(frozen=True)
class DependencyGraph:
    """Snapshot of a project set: nodes keyed by id plus derived structure.

    Built once per run by ``build_graph``. ``cycles`` and ``layers`` are empty
    on an assembled graph; the collector derives a new instance carrying them.
    """
    nodes: Dict[str, ProjectRecord] = field(default_factory=dict, hash=False)
    edges: List[DependencyEdge] = field(default_factory=list, hash=False)
    layers: List[BuildLayer] = field(default_factory=list, hash=False)
    cycles: List[Cycle] = field(default_factory=list, hash=False)
    duplicate_ids: List[str] = field(default_factory=list, hash=False)

    def successors(self) -> Dict[str, List[str]]:
        """Map every node to the targets of its outgoing edges (duplicates kept)."""
        succ: Dict[str, List[str]] = {n: [] for n in self.nodes}
        for edge in self.edges:
            succ[edge.from_node].append(edge.to_node)
        return succ

    def dependents(self) -> Dict[str, List[str]]:
        """Map every node to the sources of edges pointing at it (duplicates kept)."""
        preds: Dict[str, List[str]] = {n: [] for n in self.nodes}
        for edge in self.edges:
            preds[edge.to_node].append(edge.from_node)
        return preds

    def out_degrees(self) -> Dict[str, int]:
        """Outgoing edge count of every node, in one pass over the edges."""
        return {n: len(targets) for n, targets in self.successors().items()}

    def out_degree(self, node_id: str) -> int:
        return self.out_degrees().get(node_id, 0)

    def to_dict(self) -> dict:
        return {
            "nodes": [r.to_dict() for r in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges],
            "layers": [layer.to_dict() for layer in self.layers],
            "cycles": [list(c) for c in self.cycles],
        }

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)
