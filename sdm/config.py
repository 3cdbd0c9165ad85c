"""Configuration loading and validation for dependency analysis."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

import yaml


# ---------------------------------------------------------------------------
# Migration scoring dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ProjectKindPoints:
    managed: int = 5
    native: int = 15
    executable: int = 5
    cap: int = 20


@dataclass
class PlatformDependencyPoints:
    per_token: int = 3
    uses_mfc: int = 10
    uses_atl: int = 8
    cap: int = 30
    keywords: list = field(default_factory=lambda: [
        "win32", "winapi", "windows.h", "afx", "mfc", "atl", "com", "ole", "activex",
        "user32", "kernel32", "gdi32", "advapi32", "shell32", "ole32", "comdlg32",
        "ws2_32", "winsock", "directx", "d3d", "xaudio", "xinput",
    ])


@dataclass
class StructuralComplexityPoints:
    moderate_above: int = 5
    high_above: int = 10
    moderate: int = 5
    high: int = 10
    in_cycle: int = 5
    cap: int = 15


@dataclass
class ExternalSurfacePoints:
    some_above: int = 5
    moderate_above: int = 10
    many_above: int = 20
    some: int = 5
    moderate: int = 10
    many: int = 15
    platform_binary: int = 5
    cap: int = 20
    binary_markers: list = field(default_factory=lambda: [".lib", ".dll", "nuget", "packages"])


@dataclass
class BuildSystemAgePoints:
    legacy_version: int = 10
    complex_configuration: int = 5
    property_count_above: int = 20
    cap: int = 15
    legacy_version_prefixes: list = field(default_factory=lambda: ["10.", "11.", "12."])


@dataclass
class ScoringConfig:
    project_kind: ProjectKindPoints = field(default_factory=ProjectKindPoints)
    platform_dependencies: PlatformDependencyPoints = field(default_factory=PlatformDependencyPoints)
    structural_complexity: StructuralComplexityPoints = field(default_factory=StructuralComplexityPoints)
    external_surface: ExternalSurfacePoints = field(default_factory=ExternalSurfacePoints)
    build_system_age: BuildSystemAgePoints = field(default_factory=BuildSystemAgePoints)


# ---------------------------------------------------------------------------
# Discovery config
# ---------------------------------------------------------------------------

@dataclass
class DiscoveryConfig:
    strategy: str = "auto"  # auto | manifest | manual
    manifest: Optional[str] = None
    manifests: list = field(default_factory=list)
    patterns: list = field(default_factory=lambda: ["*.sdm.yaml", "*.sdm.yml", "*.sdm.json"])
    exclude_patterns: list = field(default_factory=lambda: [
        "**/bin/**",
        "**/obj/**",
        "**/node_modules/**",
    ])


# ---------------------------------------------------------------------------
# Graph config
# ---------------------------------------------------------------------------

@dataclass
class GraphConfig:
    on_duplicate_id: str = "warn"  # warn | error
    canonical_cycles: bool = False


# ---------------------------------------------------------------------------
# Output config
# ---------------------------------------------------------------------------

@dataclass
class OutputConfig:
    directory: str = "analysis/sdm_output"
    formats: list = field(default_factory=lambda: ["json", "markdown", "dot", "script"])
    build_command: str = "msbuild"
    build_args: list = field(default_factory=lambda: ["/p:Configuration=Release", "/m"])


# ---------------------------------------------------------------------------
# Top-level Config
# ---------------------------------------------------------------------------

@dataclass
class SdmConfig:
    version: str = "1.0"
    root: str = "."
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    graphs: GraphConfig = field(default_factory=GraphConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def _apply_dict(obj, data: dict):
    """Apply dictionary values to a dataclass instance, recursively."""
    if not isinstance(data, dict):
        return
    for key, value in data.items():
        if hasattr(obj, key):
            current = getattr(obj, key)
            if hasattr(current, '__dataclass_fields__') and isinstance(value, dict):
                _apply_dict(current, value)
            else:
                setattr(obj, key, value)


def load_config(config_path: Optional[str] = None, repo_root: Optional[str] = None) -> SdmConfig:
    """Load analysis configuration from a YAML file.

    Search order when *config_path* is None:
      1. ``sdm.yaml`` in *repo_root*
      2. ``analysis/sdm.yaml`` in *repo_root*

    *repo_root* defaults to cwd.
    """
    if repo_root is None:
        repo_root = os.getcwd()

    config = SdmConfig()

    if config_path is None:
        candidates = [
            os.path.join(repo_root, "sdm.yaml"),
            os.path.join(repo_root, "analysis", "sdm.yaml"),
        ]
        for candidate in candidates:
            if os.path.isfile(candidate):
                config_path = candidate
                break

    if config_path and os.path.isfile(config_path):
        with open(config_path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if "version" in data:
            config.version = str(data["version"])
        if "root" in data:
            config.root = data["root"]
        for section in ("discovery", "graphs", "scoring", "output"):
            if section in data:
                _apply_dict(getattr(config, section), data[section])

    # Resolve root to absolute
    if not os.path.isabs(config.root):
        if config_path:
            config_dir = os.path.dirname(os.path.abspath(config_path))
            config.root = os.path.normpath(os.path.join(config_dir, config.root))
        else:
            config.root = os.path.abspath(os.path.join(repo_root, config.root))

    return config
