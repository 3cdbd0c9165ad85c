import pytest

from sdm.graphs.cycles import (
    canonical_cycles,
    canonicalize_cycle,
    cycle_members,
    find_cycles,
)


def test_no_cycles_in_chain(graph_of):
    graph = graph_of({"A": [], "B": ["A"], "C": ["B"]})

    assert find_cycles(graph) == []


def test_empty_graph(graph_of):
    assert find_cycles(graph_of({})) == []


def test_two_node_mutual_dependency(graph_of):
    graph = graph_of({"A": ["B"], "B": ["A"]})

    cycles = find_cycles(graph)

    assert cycles == [["A", "B", "A"]]
    assert any("A" in c and "B" in c for c in cycles)


def test_three_node_cycle_is_closed(graph_of):
    graph = graph_of({"A": ["B"], "B": ["C"], "C": ["A"]})

    cycles = find_cycles(graph)

    assert cycles == [["A", "B", "C", "A"]]
    for cycle in cycles:
        assert cycle[0] == cycle[-1]


def test_self_dependency_is_a_cycle(graph_of):
    assert find_cycles(graph_of({"A": ["A"]})) == [["A", "A"]]


def test_multiple_independent_cycles(graph_of):
    graph = graph_of({"A": ["B"], "B": ["A"], "C": ["D"], "D": ["C"]})

    cycles = find_cycles(graph)

    assert len(cycles) >= 2
    assert cycle_members(cycles) == {"A", "B", "C", "D"}


def test_consecutive_cycle_entries_are_edges(graph_of):
    adjacency = {"A": ["B"], "B": ["C", "D"], "C": ["A"], "D": ["B"]}
    graph = graph_of(adjacency)

    for cycle in find_cycles(graph):
        for a, b in zip(cycle, cycle[1:]):
            assert b in adjacency[a]


def test_raw_report_repeats_cycle_reached_twice(graph_of):
    # duplicate edge B -> A closes the same loop twice
    graph = graph_of({"A": ["B"], "B": ["A", "A"]})

    raw = find_cycles(graph)

    assert raw == [["A", "B", "A"], ["A", "B", "A"]]
    assert canonical_cycles(raw) == [["A", "B", "A"]]


def test_cycle_entered_from_several_roots_is_reported_once_per_back_edge(graph_of):
    # X and Y both lead into the C <-> D loop
    graph = graph_of({"X": ["C"], "Y": ["C"], "C": ["D"], "D": ["C"]})

    raw = find_cycles(graph)

    assert raw == [["C", "D", "C"]]


def test_find_cycles_does_not_depend_on_previous_calls(graph_of):
    graph = graph_of({"A": ["B"], "B": ["A"]})

    assert find_cycles(graph) == find_cycles(graph)


@pytest.mark.parametrize("cycle, expected", [
    (["C", "A", "B", "C"], ["A", "B", "C", "A"]),
    (["A", "B", "A"], ["A", "B", "A"]),
    (["B", "A", "B"], ["A", "B", "A"]),
    (["A", "A"], ["A", "A"]),
    ([], []),
])
def test_canonicalize_cycle(cycle, expected):
    assert canonicalize_cycle(cycle) == expected


def test_canonical_cycles_dedupes_rotations_in_first_seen_order():
    raw = [["C", "B", "C"], ["X", "Y", "Z", "X"], ["B", "C", "B"], ["Z", "X", "Y", "Z"]]

    assert canonical_cycles(raw) == [["B", "C", "B"], ["X", "Y", "Z", "X"]]


def test_canonical_cycles_keeps_distinct_directions():
    raw = [["A", "B", "C", "A"], ["A", "C", "B", "A"]]

    assert canonical_cycles(raw) == raw


def test_deep_chain_does_not_hit_recursion_limit(graph_of):
    n = 5000
    adjacency = {f"P{i}": [f"P{i + 1}"] for i in range(n)}
    adjacency[f"P{n}"] = ["P0"]

    cycles = find_cycles(graph_of(adjacency))

    assert len(cycles) == 1
    assert len(cycles[0]) == n + 2
