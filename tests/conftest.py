"""Shared fixtures: record and graph factories."""

import pytest

from sdm.graphs.assembler import build_graph
from sdm.models import ProjectKind, ProjectRecord


def make_record(project_id, deps=(), **kwargs):
    kwargs.setdefault("kind", ProjectKind.SHARED_LIBRARY)
    return ProjectRecord(
        id=project_id,
        dependencies=tuple(deps),
        **kwargs,
    )


@pytest.fixture
def record():
    """Factory: ``record("A", ["B"], kind=...)``."""
    return make_record


@pytest.fixture
def graph_of():
    """Factory: ``graph_of({"A": ["B"], "B": []})`` -> assembled graph."""
    def _build(adjacency):
        return build_graph(make_record(node, deps) for node, deps in adjacency.items())
    return _build


@pytest.fixture
def chain_records():
    """Utils <- Core <- App (App is the executable)."""
    return [
        make_record("Utils", kind=ProjectKind.STATIC_LIBRARY),
        make_record("Core", ["Utils"]),
        make_record("App", ["Core"], kind=ProjectKind.EXECUTABLE),
    ]
