"""Core records produced by a project analysis pass.

Records are built once per pass and never mutated afterwards; a new pass
builds a new structure.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any

from unityatlas.asset_types import AssetType

if TYPE_CHECKING:
    from unityatlas.script_parser import ScriptInfo
    from unityatlas.yaml_scanner import PrefabInfo, SceneInfo

_ID_NAMESPACE = uuid.UUID("6f1c3a52-9d0e-4c1b-8a57-2f4e3b9c7d10")


def make_record_id(project_id: str, kind: str, path: str) -> str:
    """Deterministic opaque id for a record of `kind` owned by `path`."""
    return str(uuid.uuid5(_ID_NAMESPACE, f"{project_id}\x00{kind}\x00{path}"))


class DependencyType(Enum):
    """Kind of a directed asset-to-asset dependency."""

    SCRIPT_USAGE = "script_usage"
    PREFAB_INSTANCE = "prefab_instance"
    SCENE_REFERENCE = "scene_reference"
    MATERIAL_REFERENCE = "material_reference"
    TEXTURE_REFERENCE = "texture_reference"


@dataclass(frozen=True)
class Asset:
    """One tracked file in the Unity project, keyed by its .meta GUID."""

    id: str
    path: str
    type: AssetType
    guid: str
    content_hash: str
    parse_metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def name(self) -> str:
        """Last path segment, used as display name."""
        return PurePosixPath(self.path).name

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "type": self.type.value,
            "guid": self.guid,
            "content_hash": self.content_hash,
            "parse_metadata": dict(self.parse_metadata),
        }


@dataclass(frozen=True)
class AssetDependency:
    """Directed edge: the source asset references the target GUID."""

    source_guid: str
    target_guid: str
    type: DependencyType

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_guid": self.source_guid,
            "target_guid": self.target_guid,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class SkippedFile:
    """A file the analyzer could not parse; the pass continued without it."""

    path: str
    reason: str


@dataclass(frozen=True)
class GuidConflict:
    """Two .meta files declared the same GUID; the later path was kept."""

    guid: str
    kept_path: str
    dropped_path: str


@dataclass
class ProjectStructure:
    """Assets and parsed records of one analysis pass."""

    assets: list[Asset] = field(default_factory=list)
    scripts: list[ScriptInfo] = field(default_factory=list)
    scenes: list[SceneInfo] = field(default_factory=list)
    prefabs: list[PrefabInfo] = field(default_factory=list)
    dependencies: list[AssetDependency] = field(default_factory=list)

    def get_asset(self, guid: str) -> Asset | None:
        for asset in self.assets:
            if asset.guid == guid:
                return asset
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "assets": [a.to_dict() for a in self.assets],
            "scripts": [s.to_dict() for s in self.scripts],
            "scenes": [s.to_dict() for s in self.scenes],
            "prefabs": [p.to_dict() for p in self.prefabs],
            "dependencies": [d.to_dict() for d in self.dependencies],
        }


@dataclass
class AnalysisResult:
    """Structure plus the non-fatal problems met while building it."""

    project_id: str
    structure: ProjectStructure
    skipped_files: list[SkippedFile] = field(default_factory=list)
    guid_conflicts: list[GuidConflict] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_files)

    @property
    def has_warnings(self) -> bool:
        return bool(self.skipped_files or self.guid_conflicts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_id": self.project_id,
            "structure": self.structure.to_dict(),
            "skipped_files": [
                {"path": s.path, "reason": s.reason} for s in self.skipped_files
            ],
            "guid_conflicts": [
                {"guid": c.guid, "kept_path": c.kept_path, "dropped_path": c.dropped_path}
                for c in self.guid_conflicts
            ],
        }
