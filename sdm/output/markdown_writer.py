"""Markdown report writer (summary, Mermaid diagram, layers, cycles, scores)."""

from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from typing import Dict, List, Set, Tuple

from ..graphs.models import DependencyGraph
from ..models import DifficultyLevel, MigrationScore, ProjectKind

_KIND_STYLES = {
    ProjectKind.EXECUTABLE: "fill:#ff6b6b,stroke:#c92a2a,stroke-width:2px",
    ProjectKind.SHARED_LIBRARY: "fill:#51cf66,stroke:#2b8a3e,stroke-width:2px",
    ProjectKind.STATIC_LIBRARY: "fill:#4dabf7,stroke:#1864ab,stroke-width:2px",
}


def write_report_md(result, output_dir: str) -> str:
    """Write the dependency report as Markdown."""
    path = os.path.join(output_dir, "dependency_report.md")
    os.makedirs(os.path.dirname(path), exist_ok=True)

    graph: DependencyGraph = result.graph
    lines: list = []

    lines.append("# Dependency Report\n")
    lines.append(f"_Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}_\n")

    lines.append("## Overview\n")
    lines.append("| Parameter | Value |")
    lines.append("|---|---|")
    lines.append(f"| Projects | {graph.node_count} |")
    lines.append(f"| Dependencies (edges) | {graph.edge_count} |")
    lines.append(f"| Build layers | {len(graph.layers)} |")
    lines.append(f"| Cycles (raw / distinct) | {len(graph.cycles)} / {len(result.canonical_cycles)} |")
    lines.append(f"| Unscheduled projects | {len(result.unscheduled)} |")
    lines.append("")

    lines.extend(mermaid_lines(graph, result.scores))
    lines.append("")

    # Layers
    lines.append("## Build Layers\n")
    if not graph.layers:
        lines.append("_No project could be layered._\n")
    for layer in graph.layers:
        lines.append(f"### Layer {layer.number}\n")
        for node_id in layer.nodes:
            lines.append(f"- {graph.nodes[node_id].display_name}")
        lines.append("")

    # Cycles
    if result.canonical_cycles:
        lines.append(f"## Circular Dependencies ({len(result.canonical_cycles)})\n")
        for cycle in result.canonical_cycles:
            lines.append("- " + " → ".join(f"`{n}`" for n in cycle))
        lines.append("")
        if result.blocked:
            lines.append("Projects blocked by a cycle they depend on:\n")
            for node_id in sorted(result.blocked):
                lines.append(f"- `{node_id}`")
            lines.append("")
    else:
        lines.append("No cyclic dependencies detected.\n")

    # Scores grouped by level
    lines.append("## Migration Scores\n")
    lines.append("Difficulty of moving each project off its current platform "
                 "(0-100, lower is easier).\n")
    by_level: Dict[DifficultyLevel, List[str]] = {level: [] for level in DifficultyLevel}
    for node_id, score in result.scores.items():
        by_level[score.level].append(node_id)
    for level in DifficultyLevel:
        ids = sorted(by_level[level], key=lambda n: -result.scores[n].total)
        if not ids:
            continue
        lines.append(f"### {level.value} ({len(ids)})\n")
        lines.append("| Project | Score | Top factors |")
        lines.append("|---|---|---|")
        for node_id in ids:
            score = result.scores[node_id]
            lines.append(
                f"| {graph.nodes[node_id].display_name} | {score.total} | {_top_factors(score)} |"
            )
        lines.append("")

    with open(path, "w", encoding="utf-8") as fh:
        fh.write("\n".join(lines))

    return path


def mermaid_lines(graph: DependencyGraph, scores: Dict[str, MigrationScore]) -> List[str]:
    """Render the graph as a fenced Mermaid ``graph TD`` block."""
    lines = ["## Dependency Graph\n", "```mermaid", "graph TD"]

    # External tokens that look like library names, not paths
    externals = sorted({
        ext
        for record in graph.nodes.values()
        for ext in record.external_dependencies
        if ext.strip() and "/" not in ext and "\\" not in ext
    })
    node_ids, ext_ids = mermaid_id_table(list(graph.nodes), externals)

    for node_id, record in graph.nodes.items():
        mid = node_ids[node_id]
        label = f"{_label(record.display_name)}<br/>({record.kind.value})"
        score = scores.get(node_id)
        if score is not None:
            label += f"<br/>Migration: {score.total}/100 ({score.level.value})"
        lines.append(f'    {mid}["{label}"]')
        style = _KIND_STYLES.get(record.kind)
        if style:
            lines.append(f"    style {mid} {style}")

    for edge in graph.edges:
        lines.append(f"    {node_ids[edge.from_node]} --> {node_ids[edge.to_node]}")

    for ext in externals:
        eid = ext_ids[ext]
        lines.append(f'    {eid}["{_label(ext)}<br/>(External)"]')
        lines.append(f"    style {eid} fill:#ffd43b,stroke:#fab005,stroke-width:2px")
    for node_id, record in graph.nodes.items():
        for ext in record.external_dependencies:
            if ext in ext_ids:
                lines.append(f"    {node_ids[node_id]} -.-> {ext_ids[ext]}")

    lines.append("```")
    return lines


def mermaid_id_table(
    node_ids: List[str],
    externals: List[str],
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Assign a distinct Mermaid identifier to every project and external token.

    Identifiers are sanitized names; a name already taken gets a numeric
    suffix, so ``Core.Lib`` and ``Core_Lib`` stay two nodes.

    Returns:
        (project id -> Mermaid id, external token -> Mermaid id)
    """
    used: Set[str] = set()

    def claim(name: str) -> str:
        base = sanitize_node_id(name)
        candidate, n = base, 1
        while candidate in used:
            candidate = f"{base}_{n}"
            n += 1
        used.add(candidate)
        return candidate

    projects = {node_id: claim(node_id) for node_id in node_ids}
    tokens = {ext: claim("ext_" + ext) for ext in externals}
    return projects, tokens


def sanitize_node_id(name: str) -> str:
    """Make a Mermaid-safe node identifier."""
    safe = re.sub(r"[^A-Za-z0-9_]", "_", name)
    if not safe or safe[0].isdigit():
        safe = "n_" + safe
    return safe


def _label(text: str) -> str:
    return text.replace('"', "#quot;")


def _top_factors(score: MigrationScore, limit: int = 3) -> str:
    top = sorted(
        ((desc, pts) for desc, pts in score.factors.items() if pts > 0),
        key=lambda x: -x[1],
    )[:limit]
    return "; ".join(f"{desc} (+{pts})" for desc, pts in top) or "—"
