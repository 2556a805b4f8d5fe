"""Unity Project Analyzer.

Turns a flat set of (path, content) pairs into a project structure:
registered assets keyed by GUID, parsed scripts/scenes/prefabs and the
dependency records between them.

Analysis runs in two passes. The registration pass reads every .meta file
and registers the sibling asset under its GUID. The content pass then
parses scripts, scenes, prefabs and materials of registered assets. An
asset without a readable .meta file is never registered, so it can't take
part in cross-referencing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from unityatlas.asset_types import AssetType, detect_asset_type
from unityatlas.config import UNITYATLAS_INCLUDE_PACKAGES, UNITYATLAS_MAX_WORKERS
from unityatlas.errors import ConfigurationError
from unityatlas.graph import DependencyGraph, build_dependency_graph
from unityatlas.hashing import content_hash
from unityatlas.logging import get_logger
from unityatlas.meta_parser import asset_path_for_meta, is_meta_path, parse_meta
from unityatlas.models import (
    AnalysisResult,
    Asset,
    AssetDependency,
    DependencyType,
    GuidConflict,
    ProjectStructure,
    SkippedFile,
    make_record_id,
)
from unityatlas.script_parser import ScriptInfo, parse_script
from unityatlas.summary import ProjectSummary, generate_project_summary
from unityatlas.yaml_scanner import (
    PrefabInfo,
    SceneInfo,
    extract_asset_references,
    parse_prefab,
    parse_scene,
)

logger = get_logger("asset_tracker")

# Files the analyzer reads
ANALYZED_EXTENSIONS = {".meta", ".cs", ".unity", ".prefab", ".mat"}

# Asset types whose content is parsed in the content pass
CONTENT_TYPES = {AssetType.SCRIPT, AssetType.SCENE, AssetType.PREFAB, AssetType.MATERIAL}

# Classification of generic inline references by the target's asset type
REFERENCE_DEPENDENCY_TYPES: dict[AssetType, DependencyType] = {
    AssetType.PREFAB: DependencyType.PREFAB_INSTANCE,
    AssetType.SCENE: DependencyType.SCENE_REFERENCE,
    AssetType.MATERIAL: DependencyType.MATERIAL_REFERENCE,
    AssetType.TEXTURE: DependencyType.TEXTURE_REFERENCE,
}

# Type alias for progress callback
ProgressCallback = Callable[[int, int], None] | None

FileSet = Mapping[str, str] | Iterable[tuple[str, str]]


def normalize_path(path: str) -> str:
    """Normalize a project-relative path to forward slashes without a leading ./"""
    path = str(path).replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


@dataclass
class AssetRegistry:
    """Registered assets of one analysis pass, keyed by GUID.

    A registry is written by a single analysis pass; build a new one for
    every run instead of sharing it between concurrent passes.
    """

    project_id: str
    guid_to_asset: dict[str, Asset] = field(default_factory=dict)
    path_to_guid: dict[str, str] = field(default_factory=dict)
    conflicts: list[GuidConflict] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.guid_to_asset)

    def __contains__(self, guid: object) -> bool:
        return guid in self.guid_to_asset

    def register(self, asset: Asset) -> GuidConflict | None:
        """Register an asset under its GUID.

        If the GUID is already taken, the new asset replaces the old one
        (last registration wins) and the conflict is returned. A path is
        held by one GUID at a time; re-registering a path under a new GUID
        drops the old entry.
        """
        held_guid = self.path_to_guid.get(asset.path)
        if held_guid is not None and held_guid != asset.guid:
            self.guid_to_asset.pop(held_guid, None)

        conflict = None
        previous = self.guid_to_asset.get(asset.guid)
        if previous is not None and previous.path != asset.path:
            conflict = GuidConflict(
                guid=asset.guid,
                kept_path=asset.path,
                dropped_path=previous.path,
            )
            self.conflicts.append(conflict)
            self.path_to_guid.pop(previous.path, None)

        self.guid_to_asset[asset.guid] = asset
        self.path_to_guid[asset.path] = asset.guid
        return conflict

    def get(self, guid: str) -> Asset | None:
        """Get the asset registered under a GUID."""
        return self.guid_to_asset.get(guid)

    def get_by_path(self, path: str) -> Asset | None:
        """Get the asset registered for a project-relative path."""
        guid = self.path_to_guid.get(normalize_path(path))
        return self.guid_to_asset.get(guid) if guid is not None else None

    def assets(self) -> list[Asset]:
        """Registered assets in registration order."""
        return list(self.guid_to_asset.values())


@dataclass
class _ParsedContent:
    scripts: list[ScriptInfo] = field(default_factory=list)
    scenes: list[SceneInfo] = field(default_factory=list)
    prefabs: list[PrefabInfo] = field(default_factory=list)
    by_guid: dict[str, Any] = field(default_factory=dict)
    skipped: list[SkippedFile] = field(default_factory=list)


def _parse_asset_content(asset: Asset, content: str) -> tuple[Any, str | None]:
    """Dispatch an asset's content to its parser.

    Returns:
        Tuple of (record or None, failure reason or None)
    """
    try:
        if asset.type is AssetType.SCRIPT:
            record = parse_script(content, asset.path)
            reason = "no class declaration found"
        elif asset.type is AssetType.SCENE:
            record = parse_scene(content, asset.path)
            reason = "scene content is not scannable text"
        elif asset.type is AssetType.PREFAB:
            record = parse_prefab(content, asset.path)
            reason = "prefab content is not scannable text"
        else:
            record = extract_asset_references(content) if isinstance(content, str) else None
            reason = "material content is not scannable text"
    except Exception as e:
        return None, f"parser error: {e}"

    if record is None:
        return None, reason
    return record, None


class ProjectAnalyzer:
    """Builds the project structure of a Unity project from its file contents.

    Example:
        >>> analyzer = ProjectAnalyzer("my-project")
        >>> result = analyzer.analyze([("Assets/Player.cs", src), ("Assets/Player.cs.meta", meta)])
        >>> graph = analyzer.build_dependency_graph(result.structure)
    """

    def __init__(
        self,
        project_id: str,
        max_workers: int | None = None,
    ):
        if not project_id or not str(project_id).strip():
            raise ConfigurationError("A project id is required to analyze a project")

        self.project_id = str(project_id)
        self.max_workers = UNITYATLAS_MAX_WORKERS if max_workers is None else max_workers

    def analyze(
        self,
        files: FileSet,
        progress_callback: ProgressCallback = None,
    ) -> AnalysisResult:
        """Run both passes over a set of files.

        Args:
            files: Mapping or iterable of (project-relative path, text content)
            progress_callback: Optional callback for content-pass progress (current, total)

        Returns:
            AnalysisResult with the project structure and skipped files

        Raises:
            ConfigurationError: If no files are supplied
        """
        contents = self._collect_contents(files)
        if not contents:
            raise ConfigurationError(
                f"No project files supplied for project '{self.project_id}'"
            )

        logger.debug("Registration pass over %d files", len(contents))
        registry, skipped = self.register_assets(contents)

        logger.debug("Content pass over %d registered assets", len(registry))
        parsed = self.parse_contents(registry, contents, progress_callback=progress_callback)
        skipped.extend(parsed.skipped)

        structure = ProjectStructure(
            assets=registry.assets(),
            scripts=parsed.scripts,
            scenes=parsed.scenes,
            prefabs=parsed.prefabs,
            dependencies=self.extract_dependencies(registry, parsed.by_guid),
        )

        for skipped_file in skipped:
            logger.warning("Skipped %s: %s", skipped_file.path, skipped_file.reason)

        return AnalysisResult(
            project_id=self.project_id,
            structure=structure,
            skipped_files=skipped,
            guid_conflicts=list(registry.conflicts),
        )

    def register_assets(self, contents: Mapping[str, str]) -> tuple[AssetRegistry, list[SkippedFile]]:
        """Registration pass: register every asset that has a parsable .meta file.

        .meta files are processed in sorted path order, so duplicate GUIDs
        resolve the same way regardless of input order.
        """
        registry = AssetRegistry(project_id=self.project_id)
        skipped: list[SkippedFile] = []

        for meta_path in sorted(p for p in contents if is_meta_path(p)):
            meta_content = contents[meta_path]
            meta = parse_meta(meta_content)
            if meta is None:
                skipped.append(SkippedFile(meta_path, "no guid found in .meta file"))
                continue

            asset_path = asset_path_for_meta(meta_path)
            asset = Asset(
                id=make_record_id(self.project_id, "asset", asset_path),
                path=asset_path,
                type=detect_asset_type(asset_path),
                guid=meta.guid,
                content_hash=content_hash(meta_content),
                parse_metadata={"file_format_version": meta.file_format_version},
            )

            conflict = registry.register(asset)
            if conflict is not None:
                logger.warning(
                    "Duplicate guid %s: %s replaces %s",
                    conflict.guid, conflict.kept_path, conflict.dropped_path,
                )

        return registry, skipped

    def parse_contents(
        self,
        registry: AssetRegistry,
        contents: Mapping[str, str],
        progress_callback: ProgressCallback = None,
    ) -> _ParsedContent:
        """Content pass: parse scripts, scenes, prefabs and materials of registered assets.

        Registered assets without supplied content stay bare assets.
        Parsing runs in a thread pool when max_workers > 1; results are
        merged in registration order.
        """
        jobs: list[tuple[Asset, str]] = []
        for asset in registry.assets():
            if asset.type not in CONTENT_TYPES:
                continue
            content = contents.get(asset.path)
            if content is None:
                logger.debug("No content supplied for %s", asset.path)
                continue
            jobs.append((asset, content))

        total = len(jobs)
        if self.max_workers is not None and self.max_workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(_parse_asset_content, a, c) for a, c in jobs]
                outcomes = []
                for i, future in enumerate(futures):
                    outcomes.append(future.result())
                    if progress_callback:
                        progress_callback(i + 1, total)
        else:
            outcomes = []
            for i, (asset, content) in enumerate(jobs):
                outcomes.append(_parse_asset_content(asset, content))
                if progress_callback:
                    progress_callback(i + 1, total)

        parsed = _ParsedContent()
        for (asset, _), (record, reason) in zip(jobs, outcomes):
            if record is None:
                parsed.skipped.append(SkippedFile(asset.path, reason or "parse failed"))
                continue

            parsed.by_guid[asset.guid] = record
            if asset.type is AssetType.MATERIAL:
                continue

            record.id = make_record_id(self.project_id, asset.type.value, asset.path)
            record.asset_id = asset.id
            if asset.type is AssetType.SCRIPT:
                parsed.scripts.append(record)
            elif asset.type is AssetType.SCENE:
                parsed.scenes.append(record)
            else:
                parsed.prefabs.append(record)

        return parsed

    def extract_dependencies(
        self,
        registry: AssetRegistry,
        records: Mapping[str, Any],
    ) -> list[AssetDependency]:
        """Derive dependency records from parsed scenes, prefabs and materials.

        Script and prefab references are recorded whether or not their
        target is registered. Other inline references are classified by
        the registered target's asset type and dropped when unclassifiable.
        """
        dependencies: list[AssetDependency] = []

        for asset in registry.assets():
            record = records.get(asset.guid)
            if record is None:
                continue

            if isinstance(record, SceneInfo):
                script_refs = record.script_references
                prefab_refs = record.prefab_references
                other_refs = record.asset_references
            elif isinstance(record, PrefabInfo):
                script_refs = record.script_references
                prefab_refs = record.nested_prefab_references
                other_refs = record.asset_references
            elif isinstance(record, list):
                script_refs, prefab_refs, other_refs = [], [], record
            else:
                continue

            for guid in script_refs:
                dependencies.append(AssetDependency(asset.guid, guid, DependencyType.SCRIPT_USAGE))
            for guid in prefab_refs:
                dependencies.append(AssetDependency(asset.guid, guid, DependencyType.PREFAB_INSTANCE))

            emitted = set(script_refs) | set(prefab_refs)
            for guid in other_refs:
                if guid in emitted:
                    continue
                target = registry.get(guid)
                if target is None:
                    continue
                dependency_type = REFERENCE_DEPENDENCY_TYPES.get(target.type)
                if dependency_type is not None:
                    dependencies.append(AssetDependency(asset.guid, guid, dependency_type))

        return dependencies

    def build_dependency_graph(self, structure: ProjectStructure) -> DependencyGraph:
        return build_dependency_graph(structure.assets, structure.dependencies)

    def generate_project_summary(
        self,
        structure: ProjectStructure,
        top_n: int | None = None,
    ) -> ProjectSummary:
        return generate_project_summary(structure, top_n=top_n)

    def _collect_contents(self, files: FileSet) -> dict[str, str]:
        if files is None:
            raise ConfigurationError("No project files supplied")
        items = files.items() if isinstance(files, Mapping) else files

        contents: dict[str, str] = {}
        for path, content in items:
            contents[normalize_path(path)] = content
        return contents


def analyze_files(
    files: FileSet,
    project_id: str,
    max_workers: int | None = None,
    progress_callback: ProgressCallback = None,
) -> AnalysisResult:
    """Analyze an in-memory set of (path, content) pairs."""
    analyzer = ProjectAnalyzer(project_id, max_workers=max_workers)
    return analyzer.analyze(files, progress_callback=progress_callback)


def find_unity_project_root(start_path: Path) -> Path | None:
    """Find the Unity project root by looking for Assets folder.

    Args:
        start_path: Starting path to search from

    Returns:
        Path to project root (parent of Assets folder), or None if not found
    """
    current = start_path.resolve()

    # If start_path is a file, start from its parent
    if current.is_file():
        current = current.parent

    for _ in range(20):  # Limit search depth
        if (current / "Assets").is_dir():
            return current

        parent = current.parent
        if parent == current:  # Reached root
            break
        current = parent

    return None


def collect_project_files(
    project_root: Path,
    include_packages: bool = False,
    progress_callback: ProgressCallback = None,
) -> list[tuple[str, str]]:
    """Read the files the analyzer needs from a project directory.

    Args:
        project_root: Path to Unity project root
        include_packages: Whether to include the Packages folder
        progress_callback: Optional callback for progress (current, total)

    Returns:
        List of (project-relative posix path, text) pairs, sorted by path
    """
    search_paths = [project_root / "Assets"]
    if include_packages:
        search_paths.append(project_root / "Packages")
    search_paths = [p for p in search_paths if p.is_dir()]
    if not search_paths:
        search_paths = [project_root]

    candidates: list[Path] = []
    for search_path in search_paths:
        for path in search_path.rglob("*"):
            if path.suffix.lower() in ANALYZED_EXTENSIONS and path.is_file():
                candidates.append(path)
    candidates.sort()

    total = len(candidates)
    files: list[tuple[str, str]] = []
    for i, path in enumerate(candidates):
        if progress_callback:
            progress_callback(i + 1, total)
        try:
            content = path.read_text(encoding="utf-8-sig", errors="replace")
        except OSError as e:
            # Skip unreadable files
            logger.warning("Could not read %s: %s", path, e)
            continue
        files.append((path.relative_to(project_root).as_posix(), content))

    return files


def analyze_project_dir(
    project_root: Path,
    project_id: str | None = None,
    include_packages: bool | None = None,
    max_workers: int | None = None,
    progress_callback: ProgressCallback = None,
) -> AnalysisResult:
    """Collect the files of a project directory and analyze them.

    Args:
        project_root: Unity project root (or any folder holding assets)
        project_id: Project identity, defaults to the directory name
        include_packages: Whether to include Packages (default from config)
        max_workers: Parser threads (default from config)
        progress_callback: Optional callback for file-collection progress

    Raises:
        ConfigurationError: If the directory doesn't exist or holds no analyzable files
    """
    project_root = Path(project_root)
    if not project_root.is_dir():
        raise ConfigurationError(f"Project directory not found: {project_root}")

    if include_packages is None:
        include_packages = UNITYATLAS_INCLUDE_PACKAGES

    files = collect_project_files(
        project_root,
        include_packages=include_packages,
        progress_callback=progress_callback,
    )
    analyzer = ProjectAnalyzer(
        project_id or project_root.resolve().name,
        max_workers=max_workers,
    )
    return analyzer.analyze(files)

