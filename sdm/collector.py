"""Collector: orchestrates record loading, graph analysis and output generation."""

from __future__ import annotations

import dataclasses
import os
import sys
import time
from typing import Dict, List, Optional, Set

from .config import SdmConfig
from .discovery import load_records
from .graphs.assembler import build_graph
from .graphs.cycles import canonical_cycles, cycle_members, find_cycles
from .graphs.layers import compute_layers, unscheduled_nodes
from .graphs.models import Cycle, DependencyGraph
from .metrics.migration import score_all
from .models import DifficultyLevel, MigrationScore, ProjectRecord
from .output import dot_writer, json_writer, markdown_writer, script_writer


class DuplicateProjectIdError(ValueError):
    """Two or more records share an id and duplicates are configured as errors."""

    def __init__(self, ids: List[str]):
        self.ids = list(ids)
        super().__init__(f"duplicate project ids: {', '.join(self.ids)}")


class AnalysisResult:
    """Container for everything derived from one project set."""

    def __init__(self):
        self.graph: DependencyGraph = DependencyGraph()
        self.canonical_cycles: List[Cycle] = []
        self.scores: Dict[str, MigrationScore] = {}
        self.unscheduled: Set[str] = set()
        # unscheduled projects that are not on a cycle themselves
        self.blocked: Set[str] = set()
        self.duration_seconds: float = 0.0

    @property
    def has_cycles(self) -> bool:
        return bool(self.graph.cycles)

    def level_counts(self) -> Dict[str, int]:
        counts = {level.value: 0 for level in DifficultyLevel}
        for score in self.scores.values():
            counts[score.level.value] += 1
        return counts


def analyze_records(
    records: List[ProjectRecord],
    config: Optional[SdmConfig] = None,
    verbose: bool = False,
) -> AnalysisResult:
    """Assemble the graph and derive cycles, layers and migration scores.

    Raises:
        DuplicateProjectIdError: Records share an id and
            ``graphs.on_duplicate_id`` is ``error``.
    """
    if config is None:
        config = SdmConfig()

    start_time = time.time()
    result = AnalysisResult()

    # 1. Assemble
    assembled = build_graph(records)
    if assembled.duplicate_ids:
        if config.graphs.on_duplicate_id == "error":
            raise DuplicateProjectIdError(assembled.duplicate_ids)
        for dup in assembled.duplicate_ids:
            print(f"[graph] warning: duplicate project id {dup!r}, last record wins",
                  file=sys.stderr)

    if verbose:
        print(f"[graph] {assembled.node_count} projects, {assembled.edge_count} edges")

    # 2. Cycles and layers, on a new graph instance
    cycles = find_cycles(assembled)
    layers = compute_layers(assembled)
    graph = dataclasses.replace(assembled, cycles=cycles, layers=layers)

    result.graph = graph
    result.canonical_cycles = canonical_cycles(cycles)
    result.unscheduled = unscheduled_nodes(graph, layers)
    result.blocked = result.unscheduled - cycle_members(cycles)

    if verbose:
        print(f"[graph] {len(layers)} build layers, {len(cycles)} cycles "
              f"({len(result.canonical_cycles)} distinct)")
        if result.unscheduled:
            print(f"[graph] {len(result.unscheduled)} projects could not be layered:")
            for node_id in sorted(result.unscheduled):
                print(f"  - {node_id}")

    # 3. Scores
    result.scores = score_all(graph, config.scoring)

    result.duration_seconds = time.time() - start_time
    return result


def collect(
    config: SdmConfig,
    source: Optional[str] = None,
    verbose: bool = True,
) -> AnalysisResult:
    """Main entry point: load records, then analyze the complete set."""
    if verbose:
        print(f"[sdm] Project root: {config.root}")

    records = load_records(config, source=source, verbose=verbose)
    if verbose:
        print(f"[sdm] Records loaded: {len(records)}")

    if not records:
        print("[sdm] No project records found!")

    return analyze_records(records, config, verbose=verbose)


def write_output(
    result: AnalysisResult,
    config: SdmConfig,
    verbose: bool = True,
) -> List[str]:
    """Write all configured output formats. Returns written paths."""
    output_dir = config.output.directory
    if not os.path.isabs(output_dir):
        output_dir = os.path.join(config.root, output_dir)
    os.makedirs(output_dir, exist_ok=True)

    formats = set(config.output.formats)
    written: List[str] = []

    if verbose:
        print(f"\n[sdm] Writing output to {output_dir}...")

    if "json" in formats:
        written.append(json_writer.write_graph_json(result, output_dir))
        written.append(json_writer.write_build_layers_json(result.graph, output_dir))

    if "markdown" in formats:
        written.append(markdown_writer.write_report_md(result, output_dir))

    if "dot" in formats:
        written.append(dot_writer.write_graph_dot(result.graph, output_dir))

    if "script" in formats:
        written.append(script_writer.write_build_script(
            result.graph,
            output_dir,
            build_command=config.output.build_command,
            build_args=config.output.build_args,
        ))

    if verbose:
        for path in written:
            print(f"  {os.path.relpath(path, output_dir)}")

    return written
