"""Project-wide statistics over an analyzed project structure."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from unityatlas.asset_types import AssetType
from unityatlas.config import UNITYATLAS_TOP_REFERENCED
from unityatlas.logging import get_logger
from unityatlas.models import Asset, AssetDependency, ProjectStructure

logger = get_logger("summary")

SCRIPT_CATEGORIES = ("MonoBehaviour", "ScriptableObject")
OTHER_CATEGORY = "Other"
UNKNOWN_ASSET_NAME = "Unknown"


@dataclass(frozen=True)
class ReferencedAsset:
    guid: str
    name: str
    reference_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"guid": self.guid, "name": self.name, "reference_count": self.reference_count}


@dataclass
class ProjectSummary:
    """Aggregate statistics of one analysis pass."""

    total_assets: int = 0
    total_scripts: int = 0
    total_scenes: int = 0
    total_prefabs: int = 0
    asset_type_counts: dict[str, int] = field(default_factory=dict)
    script_categories: dict[str, int] = field(default_factory=dict)
    most_referenced_assets: list[ReferencedAsset] = field(default_factory=list)
    dependency_depth: int = 0
    dependency_cycles: list[tuple[str, str]] = field(default_factory=list)
    """Edges (source, target) that close a cycle and were not followed."""

    @property
    def has_cycles(self) -> bool:
        return bool(self.dependency_cycles)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_assets": self.total_assets,
            "total_scripts": self.total_scripts,
            "total_scenes": self.total_scenes,
            "total_prefabs": self.total_prefabs,
            "asset_type_counts": dict(self.asset_type_counts),
            "script_categories": dict(self.script_categories),
            "most_referenced_assets": [a.to_dict() for a in self.most_referenced_assets],
            "dependency_depth": self.dependency_depth,
            "dependency_cycles": [list(c) for c in self.dependency_cycles],
        }


def categorize_script(base_types: Iterable[str]) -> str:
    """Category of a script by substring match on its base types.

    MonoBehaviour is checked before ScriptableObject.
    """
    base_types = list(base_types)
    for category in SCRIPT_CATEGORIES:
        if any(category in base_type for base_type in base_types):
            return category
    return OTHER_CATEGORY


def rank_referenced_assets(
    assets: list[Asset],
    dependencies: Iterable[AssetDependency],
    top_n: int = 10,
) -> list[ReferencedAsset]:
    """Assets ranked by inbound dependency count.

    Ties keep the order in which the target was first referenced.
    Assets that nobody references are not listed.
    """
    counts: dict[str, int] = {}
    for dep in dependencies:
        counts[dep.target_guid] = counts.get(dep.target_guid, 0) + 1

    names = {}
    for asset in assets:
        names.setdefault(asset.guid, asset.name)

    # sorted() is stable, so ties stay in first-reference order
    ranked = sorted(counts.items(), key=lambda item: -item[1])[:top_n]
    return [
        ReferencedAsset(guid=guid, name=names.get(guid, UNKNOWN_ASSET_NAME), reference_count=count)
        for guid, count in ranked
    ]


def calculate_dependency_depth(
    assets: Iterable[Asset],
    dependencies: Iterable[AssetDependency],
) -> tuple[int, list[tuple[str, str]]]:
    """Longest dependency chain found by depth-first traversal.

    A traversal starts from every asset not yet visited. A node is marked
    visited the first time it is reached and never expanded again, so its
    depth is the one of its first discovery. Targets need not be
    registered assets.

    Edges that lead back into the current traversal path close a cycle;
    they are not followed and are returned as (source, target) pairs. The
    traversal is iterative, so long chains don't hit the recursion limit.

    Returns:
        Tuple of (max depth, cycle-closing edges)
    """
    adjacency: dict[str, list[str]] = defaultdict(list)
    for dep in dependencies:
        adjacency[dep.source_guid].append(dep.target_guid)

    visited: set[str] = set()
    cycles: list[tuple[str, str]] = []
    max_depth = 0
    done = object()

    for asset in assets:
        start = asset.guid
        if start in visited:
            continue

        visited.add(start)
        on_path = {start}
        stack = [(start, 0, iter(adjacency.get(start, ())))]

        while stack:
            node, depth, targets = stack[-1]
            target = next(targets, done)

            if target is done:
                stack.pop()
                on_path.discard(node)
                continue

            if target in on_path:
                cycles.append((node, target))
                continue
            if target in visited:
                continue

            visited.add(target)
            on_path.add(target)
            max_depth = max(max_depth, depth + 1)
            stack.append((target, depth + 1, iter(adjacency.get(target, ()))))

    for source, target in cycles:
        logger.warning("Dependency cycle broken at %s -> %s", source, target)

    return max_depth, cycles


def generate_project_summary(
    structure: ProjectStructure,
    top_n: int | None = None,
) -> ProjectSummary:
    """Compute aggregate statistics for a project structure.

    Args:
        structure: Analyzed project structure
        top_n: Number of most-referenced assets to list (default from config)

    Returns:
        ProjectSummary
    """
    if top_n is None:
        top_n = UNITYATLAS_TOP_REFERENCED

    asset_type_counts = {t.value: 0 for t in AssetType}
    for asset in structure.assets:
        asset_type_counts[asset.type.value] += 1

    script_categories: dict[str, int] = {}
    for script in structure.scripts:
        category = categorize_script(script.base_types)
        script_categories[category] = script_categories.get(category, 0) + 1

    depth, cycles = calculate_dependency_depth(structure.assets, structure.dependencies)

    return ProjectSummary(
        total_assets=len(structure.assets),
        total_scripts=len(structure.scripts),
        total_scenes=len(structure.scenes),
        total_prefabs=len(structure.prefabs),
        asset_type_counts=asset_type_counts,
        script_categories=script_categories,
        most_referenced_assets=rank_referenced_assets(
            structure.assets, structure.dependencies, top_n=top_n
        ),
        dependency_depth=depth,
        dependency_cycles=cycles,
    )
