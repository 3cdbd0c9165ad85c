"""Parallel build layering (Kahn's algorithm).

A project's remaining count starts at its number of outgoing edges and drops
by one each time one of its dependencies is scheduled. Projects on a cycle,
or depending on one, never reach zero and are left out of every layer.
"""

from __future__ import annotations

from typing import Dict, List, Set

from .models import BuildLayer, DependencyGraph


def compute_layers(graph: DependencyGraph) -> List[BuildLayer]:
    """Sort projects into build layers.

    Args:
        graph: Assembled dependency graph.

    Returns:
        Layers numbered from 0. For every edge whose endpoints are both
        scheduled, the dependent sits in a strictly higher layer than its
        dependency. A fully cyclic graph yields an empty list.
    """
    remaining: Dict[str, int] = {n: 0 for n in graph.nodes}
    for edge in graph.edges:
        remaining[edge.from_node] += 1
    dependents = graph.dependents()

    scheduled: Set[str] = set()
    frontier: List[str] = []
    for node, count in remaining.items():
        if count == 0:
            frontier.append(node)
            scheduled.add(node)

    layers: List[BuildLayer] = []
    while frontier:
        layers.append(BuildLayer(number=len(layers), nodes=frontier))
        next_frontier: List[str] = []
        for node in frontier:
            for dependent in dependents[node]:
                if dependent in scheduled:
                    continue
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    next_frontier.append(dependent)
                    scheduled.add(dependent)
        frontier = next_frontier

    return layers


def layer_index(layers: List[BuildLayer]) -> Dict[str, int]:
    """Map each scheduled project id to its layer number."""
    index: Dict[str, int] = {}
    for layer in layers:
        for node in layer.nodes:
            index[node] = layer.number
    return index


def unscheduled_nodes(graph: DependencyGraph, layers: List[BuildLayer]) -> Set[str]:
    """Ids of projects that were left out of every layer."""
    return set(graph.nodes) - set(layer_index(layers))
