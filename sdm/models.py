"""Data models for project records and migration scoring."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


# ---------------------------------------------------------------------------
# Project classification
# ---------------------------------------------------------------------------

class ProjectKind(Enum):
    """Output type of a build unit."""
    EXECUTABLE = "Executable"
    SHARED_LIBRARY = "SharedLibrary"
    STATIC_LIBRARY = "StaticLibrary"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ProjectKind":
        """Map an output-type spelling (``Exe``, ``DynamicLibrary``, ...) to a kind."""
        if value is None:
            return cls.UNKNOWN
        if isinstance(value, ProjectKind):
            return value
        return _KIND_ALIASES.get(str(value).strip().lower(), cls.UNKNOWN)


_KIND_ALIASES = {
    "executable": ProjectKind.EXECUTABLE,
    "exe": ProjectKind.EXECUTABLE,
    "winexe": ProjectKind.EXECUTABLE,
    "application": ProjectKind.EXECUTABLE,
    "sharedlibrary": ProjectKind.SHARED_LIBRARY,
    "dynamiclibrary": ProjectKind.SHARED_LIBRARY,
    "library": ProjectKind.SHARED_LIBRARY,
    "dll": ProjectKind.SHARED_LIBRARY,
    "staticlibrary": ProjectKind.STATIC_LIBRARY,
    "lib": ProjectKind.STATIC_LIBRARY,
}


class ProjectLanguage(Enum):
    """Managed (.NET) vs native (C/C++) project style."""
    MANAGED = "managed"
    NATIVE = "native"
    UNKNOWN = "unknown"

    @classmethod
    def from_path(cls, path: Optional[str]) -> "ProjectLanguage":
        if not path:
            return cls.UNKNOWN
        ext = os.path.splitext(path)[1].lower()
        if ext in (".csproj", ".vbproj", ".fsproj"):
            return cls.MANAGED
        if ext in (".vcxproj", ".vcproj"):
            return cls.NATIVE
        return cls.UNKNOWN

    @classmethod
    def parse(cls, value: Optional[str], path: Optional[str] = None) -> "ProjectLanguage":
        if isinstance(value, ProjectLanguage):
            return value
        if value:
            key = str(value).strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        return cls.from_path(path)


# ---------------------------------------------------------------------------
# Project record (engine input)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectRecord:
    """One build unit as produced by the project-file evaluator.

    ``dependencies`` are ids of other projects in the same set; tokens in
    ``external_dependencies`` are opaque library names. ``properties`` is
    pass-through metadata: the scorer only looks at its size.
    """
    id: str
    kind: ProjectKind = ProjectKind.UNKNOWN
    dependencies: Tuple[str, ...] = ()
    external_dependencies: Tuple[str, ...] = ()
    name: Optional[str] = None
    path: Optional[str] = None
    language: ProjectLanguage = ProjectLanguage.UNKNOWN
    uses_mfc: bool = False
    uses_atl: bool = False
    tools_version: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.path:
            return os.path.splitext(os.path.basename(self.path))[0]
        return self.id

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.display_name,
            "kind": self.kind.value,
            "language": self.language.value,
            "dependencies": list(self.dependencies),
            "external_dependencies": list(self.external_dependencies),
        }
        if self.path:
            d["path"] = self.path
        if self.tools_version:
            d["tools_version"] = self.tools_version
        if self.uses_mfc:
            d["uses_mfc"] = True
        if self.uses_atl:
            d["uses_atl"] = True
        if self.properties:
            d["properties"] = dict(self.properties)
        return d


# ---------------------------------------------------------------------------
# Migration score
# ---------------------------------------------------------------------------

class DifficultyLevel(Enum):
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    VERY_HARD = "Very Hard"
    EXTREMELY_HARD = "Extremely Hard"


@dataclass
class MigrationScore:
    """Explainable 0-100 migration difficulty for one project.

    ``factors`` maps a human-readable signal to the points it contributed
    before capping; ``breakdown`` holds the capped subtotal of each of the
    five scoring factors.
    """
    total: int = 0
    level: DifficultyLevel = DifficultyLevel.EASY
    factors: Dict[str, int] = field(default_factory=dict)
    breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "level": self.level.value,
            "factors": dict(self.factors),
            "breakdown": dict(self.breakdown),
        }
