"""Unity Project Analyzer.

Reads Unity's text asset formats (.meta, .cs, .unity, .prefab, .mat),
builds a GUID-keyed dependency graph across assets and derives
project-wide summaries.
"""

from importlib.metadata import version

__version__ = version("unityatlas")

from unityatlas.errors import AnalyzerError, ConfigurationError
from unityatlas.asset_types import (
    AssetType,
    EXTENSION_TO_TYPE,
    asset_type_color,
    asset_type_icon,
    detect_asset_type,
)
from unityatlas.models import (
    AnalysisResult,
    Asset,
    AssetDependency,
    DependencyType,
    GuidConflict,
    ProjectStructure,
    SkippedFile,
)
from unityatlas.meta_parser import MetaInfo, parse_meta
from unityatlas.script_parser import (
    UNITY_MESSAGES,
    Field,
    Method,
    Parameter,
    ScriptInfo,
    parse_script,
    parse_script_file,
)
from unityatlas.yaml_scanner import (
    ComponentRef,
    GameObject,
    PrefabInfo,
    SceneInfo,
    parse_prefab,
    parse_scene,
)
from unityatlas.hashing import content_hash
from unityatlas.graph import (
    DependencyGraph,
    GraphEdge,
    GraphNode,
    build_dependency_graph,
)
from unityatlas.summary import (
    ProjectSummary,
    ReferencedAsset,
    calculate_dependency_depth,
    generate_project_summary,
)
from unityatlas.asset_tracker import (
    AssetRegistry,
    ProjectAnalyzer,
    analyze_files,
    analyze_project_dir,
    collect_project_files,
    find_unity_project_root,
)

__all__ = [
    # Errors
    "AnalyzerError",
    "ConfigurationError",
    # Asset types
    "AssetType",
    "EXTENSION_TO_TYPE",
    "asset_type_color",
    "asset_type_icon",
    "detect_asset_type",
    # Records
    "AnalysisResult",
    "Asset",
    "AssetDependency",
    "DependencyType",
    "GuidConflict",
    "ProjectStructure",
    "SkippedFile",
    # Parsers
    "MetaInfo",
    "parse_meta",
    "UNITY_MESSAGES",
    "Field",
    "Method",
    "Parameter",
    "ScriptInfo",
    "parse_script",
    "parse_script_file",
    "ComponentRef",
    "GameObject",
    "PrefabInfo",
    "SceneInfo",
    "parse_prefab",
    "parse_scene",
    "content_hash",
    # Graph and summary
    "DependencyGraph",
    "GraphEdge",
    "GraphNode",
    "build_dependency_graph",
    "ProjectSummary",
    "ReferencedAsset",
    "calculate_dependency_depth",
    "generate_project_summary",
    # Analyzer
    "AssetRegistry",
    "ProjectAnalyzer",
    "analyze_files",
    "analyze_project_dir",
    "collect_project_files",
    "find_unity_project_root",
]
