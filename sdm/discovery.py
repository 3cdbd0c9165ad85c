"""Project record discovery.

Reads project records from YAML or JSON manifests. A manifest is either a
mapping with a ``projects`` list or a bare list of project mappings::

    projects:
      - id: Core
        path: src/Core/Core.vcxproj
        kind: StaticLibrary
        dependencies: [Utils]
        external_dependencies: [user32.lib]
        uses_mfc: false
        tools_version: "12.0"
"""

from __future__ import annotations

import fnmatch
import os
import sys
from typing import Any, Dict, List, Optional

import yaml

from .config import SdmConfig
from .models import ProjectKind, ProjectLanguage, ProjectRecord


class RecordError(ValueError):
    """A project entry or manifest file could not be turned into records."""


def discover_manifests(config: SdmConfig, source: Optional[str] = None) -> List[str]:
    """Return the manifest files to read, based on strategy.

    An explicit *source* (file or directory) overrides the configured strategy.
    """
    if source:
        if os.path.isdir(source):
            return _discover_auto(source, config)
        return [source]

    strategy = config.discovery.strategy
    if strategy == "manifest":
        manifest = config.discovery.manifest
        if not manifest:
            print("[discovery] no manifest configured, falling back to auto")
            return _discover_auto(config.root, config)
        return [_resolve(config.root, manifest)]
    elif strategy == "manual":
        return [_resolve(config.root, m) for m in config.discovery.manifests]
    else:
        return _discover_auto(config.root, config)


def _resolve(root: str, path: str) -> str:
    return path if os.path.isabs(path) else os.path.join(root, path)


def _discover_auto(root: str, config: SdmConfig) -> List[str]:
    """Recursively find manifest files matching the configured patterns."""
    found: List[str] = []

    for dirpath, dirs, files in os.walk(root):
        # Prune hidden/build directories
        dirs[:] = [
            d for d in dirs
            if not d.startswith(".")
            and d not in ("bin", "obj", "node_modules")
        ]

        rel_dir = os.path.relpath(dirpath, root)
        if rel_dir != "." and _is_excluded_path(rel_dir, config.discovery.exclude_patterns):
            continue

        for f in files:
            if any(fnmatch.fnmatch(f, p) for p in config.discovery.patterns):
                found.append(os.path.join(dirpath, f))

    return sorted(found)


def _is_excluded_path(rel_path: str, patterns: list) -> bool:
    """Check if a relative path matches any exclude pattern."""
    normalized = rel_path.replace(os.sep, "/")
    for pattern in patterns:
        if fnmatch.fnmatch(normalized, pattern):
            return True
        # Also check individual path components
        stripped = pattern.strip("*/")
        for part in normalized.split("/"):
            if fnmatch.fnmatch(part, pattern) or (stripped and part == stripped):
                return True
    return False


def parse_record(data: Any) -> ProjectRecord:
    """Build a ProjectRecord from one manifest entry.

    Raises:
        RecordError: The entry is not a mapping, has no ``id`` or carries a
            malformed field.
    """
    if not isinstance(data, dict):
        raise RecordError(f"project entry must be a mapping, got {type(data).__name__}")

    project_id = data.get("id") or data.get("path")
    if not project_id:
        raise RecordError("project entry has neither 'id' nor 'path'")
    project_id = str(project_id)
    path = data.get("path")

    properties = data.get("properties") or {}
    if not isinstance(properties, dict):
        raise RecordError(f"{project_id}: 'properties' must be a mapping")

    return ProjectRecord(
        id=project_id,
        kind=ProjectKind.parse(data.get("kind") or data.get("output_type")),
        dependencies=_string_tuple(data, "dependencies", project_id),
        external_dependencies=_string_tuple(data, "external_dependencies", project_id),
        name=data.get("name"),
        path=str(path) if path else None,
        language=ProjectLanguage.parse(data.get("language"), path),
        uses_mfc=_flag(data.get("uses_mfc")),
        uses_atl=_flag(data.get("uses_atl")),
        tools_version=str(data["tools_version"]) if data.get("tools_version") is not None else None,
        properties={str(k): str(v) for k, v in properties.items()},
    )


def _string_tuple(data: Dict[str, Any], key: str, project_id: str) -> tuple:
    value = data.get(key) or []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise RecordError(f"{project_id}: '{key}' must be a list")
    return tuple(str(v) for v in value)


def _flag(value: Any) -> bool:
    """Interpret a legacy-framework flag (``true``, ``Static``, ``Dynamic``)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("true", "yes", "1", "static", "dynamic")


def read_manifest(path: str) -> List[Any]:
    """Return the raw project entries of one manifest file.

    Raises:
        RecordError: The file cannot be read or has an unexpected shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        raise RecordError(f"cannot read {path}: {e}") from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("projects") or []
    if not isinstance(data, list):
        raise RecordError(f"{path}: expected a list of projects")
    return data


def load_records(
    config: SdmConfig,
    source: Optional[str] = None,
    verbose: bool = True,
) -> List[ProjectRecord]:
    """Load every project record from the discovered manifests.

    Malformed files and entries are reported on stderr and skipped.
    """
    records: List[ProjectRecord] = []
    manifests = discover_manifests(config, source)
    if verbose:
        print(f"[discovery] Manifests found: {len(manifests)}")

    for path in manifests:
        try:
            entries = read_manifest(path)
        except RecordError as e:
            print(f"  [!] {e}", file=sys.stderr)
            continue
        for entry in entries:
            try:
                records.append(parse_record(entry))
            except RecordError as e:
                print(f"  [!] {path}: {e}", file=sys.stderr)
        if verbose:
            print(f"  {os.path.relpath(path, config.root)}: {len(entries)} projects")

    return records
