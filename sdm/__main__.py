"""CLI entry point for Solution Dependency Mapper.

Usage:
    sdm [options] [SOURCE]
    python -m sdm [options] [SOURCE]

Options:
    SOURCE              Project manifest file or directory to scan (default: config root)
    --config PATH       Path to sdm.yaml config file
    --format LIST       Comma-separated output formats: json,markdown,dot,script
    --output DIR        Override output directory
    --canonical-cycles  Print deduplicated cycles instead of the raw report
    --strict-ids        Treat duplicate project ids as an error
    --fail-on-cycles    Exit with status 2 when dependency cycles exist
    --verbose / -v      Verbose output (default: on)
    --quiet / -q        Suppress output
    --help / -h         Show this help
"""

from __future__ import annotations

import argparse
import os
import sys


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="sdm",
        description="Map project dependencies: cycles, build layers and migration scores",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Project manifest file or directory (default: configured discovery)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to sdm.yaml configuration file",
    )
    parser.add_argument(
        "--format",
        type=str,
        default=None,
        help="Comma-separated output formats (json,markdown,dot,script)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for results",
    )
    parser.add_argument(
        "--canonical-cycles",
        action="store_true",
        default=False,
        help="Print deduplicated cycles instead of the raw report",
    )
    parser.add_argument(
        "--strict-ids",
        action="store_true",
        default=False,
        help="Fail when two projects share an id",
    )
    parser.add_argument(
        "--fail-on-cycles",
        action="store_true",
        default=False,
        help="Exit with status 2 when dependency cycles exist",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=True,
        help="Verbose output (default)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress output",
    )

    args = parser.parse_args(argv)

    source = None
    if args.source:
        source = os.path.abspath(args.source)
        if not os.path.exists(source):
            print(f"Error: source not found: {source}", file=sys.stderr)
            return 1
    repo_root = source if source and os.path.isdir(source) else os.getcwd()

    # Load config
    from .config import load_config
    config = load_config(config_path=args.config, repo_root=repo_root)

    # Apply CLI overrides
    if args.format:
        config.output.formats = [f.strip() for f in args.format.split(",") if f.strip()]
    if args.output:
        config.output.directory = os.path.abspath(args.output)
    if args.strict_ids:
        config.graphs.on_duplicate_id = "error"
    if args.canonical_cycles:
        config.graphs.canonical_cycles = True

    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("  Solution Dependency Mapper v1.0")
        print("=" * 60)
        print(f"  Formats: {', '.join(config.output.formats)}")
        print(f"  Duplicate ids: {config.graphs.on_duplicate_id}")
        print("=" * 60)
        print()

    from .collector import DuplicateProjectIdError, collect, write_output

    try:
        result = collect(config, source=source, verbose=verbose)
    except DuplicateProjectIdError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    written = write_output(result, config, verbose=verbose)

    if verbose:
        _print_summary(result, config.graphs.canonical_cycles)
        print(f"\n{'=' * 60}")
        print(f"  Done! Wrote {len(written)} files.")
        print(f"  Time: {result.duration_seconds:.2f}s")
        print(f"{'=' * 60}")

    if args.fail_on_cycles and result.has_cycles:
        return 2
    return 0


def _print_summary(result, canonical: bool) -> None:
    graph = result.graph
    print("\n[sdm] Summary")
    print(f"  Projects: {graph.node_count}")
    print(f"  Dependencies: {graph.edge_count}")
    print(f"  Build layers: {len(graph.layers)}")
    if graph.cycles:
        cycles = result.canonical_cycles if canonical else graph.cycles
        print(f"  Circular dependencies: {len(cycles)}")
        for cycle in cycles:
            print(f"    {' -> '.join(cycle)}")
    if result.unscheduled:
        print(f"  Unscheduled projects: {len(result.unscheduled)}")
    print("  Migration difficulty:")
    for level, count in result.level_counts().items():
        if count:
            print(f"    {level}: {count}")


if __name__ == "__main__":
    sys.exit(main())
