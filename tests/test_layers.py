import random

import pytest

from sdm.graphs.assembler import build_graph
from sdm.graphs.cycles import cycle_members, find_cycles
from sdm.graphs.layers import compute_layers, layer_index, unscheduled_nodes


def _layer_sets(layers):
    return [set(layer.nodes) for layer in layers]


def test_independent_projects_share_layer_zero(graph_of):
    graph = graph_of({"A": [], "B": [], "C": []})

    layers = compute_layers(graph)

    assert len(layers) == 1
    assert layers[0].number == 0
    assert set(layers[0].nodes) == {"A", "B", "C"}
    assert find_cycles(graph) == []


def test_chain_gives_one_layer_per_project(chain_records):
    graph = build_graph(chain_records)

    layers = compute_layers(graph)

    assert [layer.number for layer in layers] == [0, 1, 2]
    assert _layer_sets(layers) == [{"Utils"}, {"Core"}, {"App"}]
    assert find_cycles(graph) == []


def test_diamond_puts_siblings_together(graph_of):
    graph = graph_of({
        "Utils": [],
        "Core": ["Utils"],
        "Ui": ["Utils"],
        "App": ["Core", "Ui"],
    })

    assert _layer_sets(compute_layers(graph)) == [{"Utils"}, {"Core", "Ui"}, {"App"}]


def test_layer_follows_longest_dependency_path(graph_of):
    graph = graph_of({"A": [], "B": ["A"], "C": ["B", "A"]})

    assert layer_index(compute_layers(graph)) == {"A": 0, "B": 1, "C": 2}


def test_duplicate_edges_do_not_stall_scheduling(graph_of):
    graph = graph_of({"A": ["B", "B"], "B": []})

    assert _layer_sets(compute_layers(graph)) == [{"B"}, {"A"}]


def test_mutual_dependency_is_excluded(graph_of):
    graph = graph_of({"A": ["B"], "B": ["A"]})

    layers = compute_layers(graph)

    assert layers == []
    assert unscheduled_nodes(graph, layers) == {"A", "B"}


def test_fully_cyclic_graph_returns_no_layers(graph_of):
    graph = graph_of({"A": ["B"], "B": ["C"], "C": ["A"]})

    assert compute_layers(graph) == []


def test_dependents_of_a_cycle_are_unscheduled(graph_of):
    graph = graph_of({"A": ["B"], "B": ["A"], "D": ["A"], "C": []})

    layers = compute_layers(graph)
    cycles = find_cycles(graph)

    assert _layer_sets(layers) == [{"C"}]
    assert unscheduled_nodes(graph, layers) == {"A", "B", "D"}
    assert unscheduled_nodes(graph, layers) - cycle_members(cycles) == {"D"}


def test_empty_graph(graph_of):
    graph = graph_of({})

    assert compute_layers(graph) == []
    assert unscheduled_nodes(graph, []) == set()


@pytest.mark.parametrize("adjacency", [
    {"A": [], "B": [], "C": []},
    {"A": ["B"], "B": ["A"]},
    {"A": ["B"], "B": ["A"], "C": [], "E": ["C"]},
    {"A": ["A"], "B": []},
    {"Utils": [], "Core": ["Utils"], "App": ["Core"]},
])
def test_layers_and_cycles_cover_every_node(graph_of, adjacency):
    graph = graph_of(adjacency)

    layered = set(layer_index(compute_layers(graph)))

    assert layered | cycle_members(find_cycles(graph)) == set(graph.nodes)


# ---------------------------------------------------------------------------
# Properties over seeded random graphs
# ---------------------------------------------------------------------------

def _random_adjacency(rng):
    n = rng.randint(1, 14)
    names = [f"P{i}" for i in range(n)]
    density = rng.choice([0.05, 0.15, 0.3])
    adjacency = {name: [] for name in names}
    for a in names:
        for b in names:
            if rng.random() < density:
                adjacency[a].append(b)
                if rng.random() < 0.1:
                    adjacency[a].append(b)
    return adjacency


def _reaches(adjacency, start, targets):
    seen = set()
    stack = list(adjacency[start])
    while stack:
        node = stack.pop()
        if node in targets:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(adjacency[node])
    return False


@pytest.mark.parametrize("seed", range(40))
def test_random_graph_properties(graph_of, seed):
    adjacency = _random_adjacency(random.Random(seed))
    graph = graph_of(adjacency)

    layers = compute_layers(graph)
    cycles = find_cycles(graph)
    index = layer_index(layers)
    members = cycle_members(cycles)
    unscheduled = unscheduled_nodes(graph, layers)

    # contiguous, non-empty, disjoint layers
    assert [layer.number for layer in layers] == list(range(len(layers)))
    assert all(layer.nodes for layer in layers)
    assert sum(len(layer.nodes) for layer in layers) == len(index)

    # dependents always build after their dependencies
    for edge in graph.edges:
        if edge.from_node in index and edge.to_node in index:
            assert index[edge.from_node] > index[edge.to_node]

    # every cycle member is unscheduled
    assert members <= unscheduled

    # a node is unscheduled exactly when it is on a reported cycle or reaches one
    for node in graph.nodes:
        expected = node in members or _reaches(adjacency, node, members)
        assert (node in unscheduled) == expected

    assert set(index) | members | (unscheduled - members) == set(graph.nodes)
