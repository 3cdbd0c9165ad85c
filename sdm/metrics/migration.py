"""Migration difficulty scoring (0-100, lower is easier).

Five independently capped factors are summed and the total is capped at 100:

    project_kind            (cap 20)  managed vs native, executables
    platform_dependencies   (cap 30)  platform API libraries, MFC / ATL
    structural_complexity   (cap 15)  intra-solution dependency count, cycles
    external_surface        (cap 20)  external dependency count, binary artifacts
    build_system_age        (cap 15)  legacy build tools, large property maps

Levels:
    Easy            [0, 20)
    Moderate        [20, 40)
    Hard            [40, 60)
    Very Hard       [60, 80)
    Extremely Hard  [80, 100]
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from ..config import ScoringConfig
from ..graphs.cycles import cycle_members
from ..graphs.models import DependencyGraph
from ..models import (
    DifficultyLevel,
    MigrationScore,
    ProjectKind,
    ProjectLanguage,
    ProjectRecord,
)

MAX_SCORE = 100

_LEVEL_THRESHOLDS = [
    (80, DifficultyLevel.EXTREMELY_HARD),
    (60, DifficultyLevel.VERY_HARD),
    (40, DifficultyLevel.HARD),
    (20, DifficultyLevel.MODERATE),
    (0, DifficultyLevel.EASY),
]


def score_to_level(score: int) -> DifficultyLevel:
    """Convert a 0-100 score to a difficulty level."""
    for threshold, level in _LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return DifficultyLevel.EASY


def score_project(
    record: ProjectRecord,
    graph: DependencyGraph,
    cfg: Optional[ScoringConfig] = None,
    in_cycle: Optional[Set[str]] = None,
    dep_counts: Optional[Dict[str, int]] = None,
) -> MigrationScore:
    """Compute the migration score of one project.

    Args:
        record: The project to score.
        graph: Dependency graph the project belongs to; its ``cycles`` decide
            cycle membership and its edges give the dependency count.
        cfg: Scoring points and thresholds.
        in_cycle: Precomputed cycle member ids, to avoid rescanning
            ``graph.cycles`` for every project.
        dep_counts: Precomputed outgoing edge counts per project id, to avoid
            rescanning ``graph.edges`` for every project.

    Returns:
        MigrationScore with total, level, per-signal factors and the capped
        subtotal of each factor.
    """
    if cfg is None:
        cfg = ScoringConfig()
    if in_cycle is None:
        in_cycle = cycle_members(graph.cycles)
    if dep_counts is None:
        dep_counts = graph.out_degrees()

    factors: Dict[str, int] = {}
    breakdown = {
        "project_kind": _score_project_kind(record, cfg, factors),
        "platform_dependencies": _score_platform_dependencies(record, cfg, factors),
        "structural_complexity": _score_structural_complexity(
            record, dep_counts, in_cycle, cfg, factors),
        "external_surface": _score_external_surface(record, cfg, factors),
        "build_system_age": _score_build_system_age(record, cfg, factors),
    }

    total = max(0, min(MAX_SCORE, sum(breakdown.values())))
    return MigrationScore(
        total=total,
        level=score_to_level(total),
        factors=factors,
        breakdown=breakdown,
    )


def score_all(
    graph: DependencyGraph,
    cfg: Optional[ScoringConfig] = None,
) -> Dict[str, MigrationScore]:
    """Score every project of the graph, keyed by project id."""
    members = cycle_members(graph.cycles)
    dep_counts = graph.out_degrees()
    return {
        node_id: score_project(record, graph, cfg, in_cycle=members, dep_counts=dep_counts)
        for node_id, record in graph.nodes.items()
    }


def _add(factors: Dict[str, int], description: str, points: int) -> None:
    factors[description] = factors.get(description, 0) + points


def _cap(points: int, cap: int) -> int:
    return max(0, min(cap, points))


def _score_project_kind(record: ProjectRecord, cfg: ScoringConfig, factors: Dict[str, int]) -> int:
    pk = cfg.project_kind
    points = 0

    if record.language == ProjectLanguage.MANAGED:
        points += pk.managed
        _add(factors, "Managed .NET project", pk.managed)
    elif record.language == ProjectLanguage.NATIVE:
        points += pk.native
        _add(factors, "Native C++ project", pk.native)

    if record.kind == ProjectKind.EXECUTABLE:
        points += pk.executable
        _add(factors, "Executable (may have UI dependencies)", pk.executable)

    return _cap(points, pk.cap)


def _score_platform_dependencies(
    record: ProjectRecord,
    cfg: ScoringConfig,
    factors: Dict[str, int],
) -> int:
    pd = cfg.platform_dependencies
    keywords: List[str] = [k.lower() for k in pd.keywords]
    points = 0

    for dep in record.external_dependencies:
        dep_lower = dep.lower()
        # One hit per token, whichever keyword matches first
        if any(keyword in dep_lower for keyword in keywords):
            points += pd.per_token
            _add(factors, f"Platform-specific dependency: {dep}", pd.per_token)

    if record.uses_mfc:
        points += pd.uses_mfc
        _add(factors, "Uses MFC (Microsoft Foundation Classes)", pd.uses_mfc)
    if record.uses_atl:
        points += pd.uses_atl
        _add(factors, "Uses ATL (Active Template Library)", pd.uses_atl)

    return _cap(points, pd.cap)


def _score_structural_complexity(
    record: ProjectRecord,
    dep_counts: Dict[str, int],
    in_cycle: Set[str],
    cfg: ScoringConfig,
    factors: Dict[str, int],
) -> int:
    sc = cfg.structural_complexity
    points = 0

    dep_count = dep_counts.get(record.id, 0)
    if dep_count > sc.high_above:
        points += sc.high
        _add(factors, f"High dependency count ({dep_count} projects)", sc.high)
    elif dep_count > sc.moderate_above:
        points += sc.moderate
        _add(factors, f"Moderate dependency count ({dep_count} projects)", sc.moderate)
    elif dep_count > 0:
        _add(factors, f"Low dependency count ({dep_count} projects)", 0)

    if record.id in in_cycle:
        points += sc.in_cycle
        _add(factors, "Part of circular dependency", sc.in_cycle)

    return _cap(points, sc.cap)


def _score_external_surface(record: ProjectRecord, cfg: ScoringConfig, factors: Dict[str, int]) -> int:
    es = cfg.external_surface
    points = 0

    external_count = len(record.external_dependencies)
    if external_count > es.many_above:
        points += es.many
        _add(factors, f"Many external dependencies ({external_count})", es.many)
    elif external_count > es.moderate_above:
        points += es.moderate
        _add(factors, f"Moderate external dependencies ({external_count})", es.moderate)
    elif external_count > es.some_above:
        points += es.some
        _add(factors, f"Some external dependencies ({external_count})", es.some)

    markers = [m.lower() for m in es.binary_markers]
    has_platform_binary = any(
        marker in dep.lower()
        for dep in record.external_dependencies
        for marker in markers
    )
    if has_platform_binary and external_count > 0:
        points += es.platform_binary
        _add(factors, "Platform-specific external libraries detected", es.platform_binary)

    return _cap(points, es.cap)


def _score_build_system_age(record: ProjectRecord, cfg: ScoringConfig, factors: Dict[str, int]) -> int:
    bs = cfg.build_system_age
    points = 0

    version = (record.tools_version or "").strip()
    if version and _is_legacy_version(version, bs.legacy_version_prefixes):
        points += bs.legacy_version
        _add(factors, f"Legacy build tools version ({version})", bs.legacy_version)

    if len(record.properties) > bs.property_count_above:
        points += bs.complex_configuration
        _add(factors, "Complex build configuration", bs.complex_configuration)

    return _cap(points, bs.cap)


def _is_legacy_version(version: str, prefixes: List[str]) -> bool:
    # Compared on the major component: "10", "10.0" and "10.0.30319" all match "10."
    major = version.split(".", 1)[0]
    return any(p and major == p.split(".", 1)[0] for p in prefixes)
