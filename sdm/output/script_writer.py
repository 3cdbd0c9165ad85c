"""Build script writer.

Emits a bash script that builds each layer's projects in parallel and waits
for the whole layer before starting the next one.
"""

from __future__ import annotations

import os
import shlex
import stat
from typing import List, Optional

from ..graphs.layers import unscheduled_nodes
from ..graphs.models import DependencyGraph


def write_build_script(
    graph: DependencyGraph,
    output_dir: str,
    build_command: str = "msbuild",
    build_args: Optional[List[str]] = None,
) -> str:
    """Write ``build.sh`` for the graph's build layers.

    Args:
        graph: Analyzed graph (layers filled).
        output_dir: Output directory.
        build_command: Default build tool; ``BUILD_TOOL`` overrides it at run time.
        build_args: Arguments passed to the build tool before the project path.

    Returns:
        Path of the written script.
    """
    path = os.path.join(output_dir, "build.sh")
    os.makedirs(os.path.dirname(path), exist_ok=True)
    args = " ".join(shlex.quote(a) for a in (build_args or []))

    lines: List[str] = [
        "#!/bin/bash",
        "# Layered parallel build. Projects in one layer have no dependencies on each other.",
        "",
        f"DEFAULT_BUILD_TOOL={shlex.quote(build_command)}",
        'BUILD_TOOL="${BUILD_TOOL:-$DEFAULT_BUILD_TOOL}"',
        f"BUILD_ARGS=({args})",
        "",
        "build_layer() {",
        '  local layer="$1"; shift',
        '  local pids=()',
        '  echo "=== Layer ${layer} ($# projects) ==="',
        '  for project in "$@"; do',
        '    "$BUILD_TOOL" "${BUILD_ARGS[@]}" "$project" &',
        '    pids+=("$!")',
        "  done",
        "  local failed=0",
        '  for pid in "${pids[@]}"; do',
        '    wait "$pid" || failed=1',
        "  done",
        '  if [ "$failed" -ne 0 ]; then',
        '    echo "Layer ${layer} failed" >&2',
        "    exit 1",
        "  fi",
        "}",
        "",
    ]

    for layer in graph.layers:
        targets = " ".join(
            shlex.quote(graph.nodes[n].path or n) for n in layer.nodes
        )
        lines.append(f"build_layer {layer.number} {targets}")

    skipped = sorted(unscheduled_nodes(graph, graph.layers))
    if skipped:
        lines.append("")
        lines.append("# Not built: part of or dependent on a dependency cycle")
        for node_id in skipped:
            lines.append(f"#   {node_id}")

    lines.append("")
    lines.append('echo "Build completed"')
    lines.append("")

    with open(path, "w", encoding="utf-8", newline="\n") as fh:
        fh.write("\n".join(lines))
    os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    return path
