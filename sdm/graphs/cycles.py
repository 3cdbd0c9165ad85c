"""Dependency cycle enumeration.

Depth-first search from every node that has not been visited yet. A node is
marked visited only once its whole subtree is explored, so a neighbour found
on the current path closes a cycle. The raw report can list the same loop
more than once (for instance through duplicate edges); ``canonical_cycles``
gives the deduplicated view.
"""

from __future__ import annotations

from typing import Dict, List, Set

from .models import Cycle, DependencyGraph


def find_cycles(graph: DependencyGraph) -> List[Cycle]:
    """Enumerate dependency cycles.

    Args:
        graph: Assembled dependency graph.

    Returns:
        Raw cycles in discovery order. Each cycle repeats its first id at the
        end, e.g. ``["A", "B", "A"]``.
    """
    succ = graph.successors()
    visited: Set[str] = set()
    on_stack: Set[str] = set()
    path: List[str] = []
    cycles: List[Cycle] = []

    for node in graph.nodes:
        if node not in visited:
            _visit(node, succ, visited, on_stack, path, cycles)
    return cycles


def _visit(
    root: str,
    succ: Dict[str, List[str]],
    visited: Set[str],
    on_stack: Set[str],
    path: List[str],
    cycles: List[Cycle],
) -> None:
    # Iterative DFS; each frame is (node, index of next successor to explore)
    on_stack.add(root)
    path.append(root)
    frames = [(root, 0)]

    while frames:
        node, idx = frames[-1]
        neighbours = succ[node]
        if idx < len(neighbours):
            frames[-1] = (node, idx + 1)
            nxt = neighbours[idx]
            if nxt in on_stack:
                start = path.index(nxt)
                cycles.append(path[start:] + [nxt])
            elif nxt not in visited:
                on_stack.add(nxt)
                path.append(nxt)
                frames.append((nxt, 0))
            continue

        frames.pop()
        on_stack.discard(node)
        path.pop()
        visited.add(node)


def canonicalize_cycle(cycle: Cycle) -> Cycle:
    """Rotate a closed cycle so it starts at its smallest id, then re-close it."""
    ring = list(cycle[:-1]) if len(cycle) > 1 and cycle[0] == cycle[-1] else list(cycle)
    if not ring:
        return []
    start = ring.index(min(ring))
    rotated = ring[start:] + ring[:start]
    return rotated + [rotated[0]]


def canonical_cycles(cycles: List[Cycle]) -> List[Cycle]:
    """Deduplicate cycles after rotating each to its canonical form.

    First-seen order is preserved.
    """
    seen: Set[tuple] = set()
    result: List[Cycle] = []
    for cycle in cycles:
        canon = canonicalize_cycle(cycle)
        key = tuple(canon)
        if key in seen:
            continue
        seen.add(key)
        result.append(canon)
    return result


def cycle_members(cycles: List[Cycle]) -> Set[str]:
    """All ids that appear in any cycle."""
    members: Set[str] = set()
    for cycle in cycles:
        members.update(cycle)
    return members
