"""Command-line interface for unityatlas.

Provides commands for analyzing a Unity project, printing its dependency
graph and inspecting single scripts or .meta files.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import click

from unityatlas import __version__
from unityatlas.asset_tracker import analyze_project_dir, find_unity_project_root
from unityatlas.errors import AnalyzerError
from unityatlas.graph import build_dependency_graph
from unityatlas.logging import configure_logging
from unityatlas.meta_parser import parse_meta
from unityatlas.models import AnalysisResult
from unityatlas.script_parser import parse_script_file
from unityatlas.summary import generate_project_summary


def create_progress_bar(
    label: str = "Processing",
    show_eta: bool = True,
) -> tuple[Callable[[int, int], None], Callable[[], None]]:
    """Create a progress bar and return update/close callbacks.

    The bar is opened on the first update, once the total is known.

    Args:
        label: Progress bar label
        show_eta: Whether to show ETA

    Returns:
        Tuple of (update_callback, close_callback)
    """
    state: dict[str, object] = {}

    def update(current: int, total: int) -> None:
        bar = state.get("bar")
        if bar is None:
            bar = click.progressbar(
                length=total,
                label=label,
                show_eta=show_eta,
                show_percent=True,
            )
            bar.__enter__()
            state["bar"] = bar
        bar.update(1)

    def close() -> None:
        bar = state.get("bar")
        if bar is not None:
            bar.__exit__(None, None, None)

    return update, close


def _resolve_project_root(project: Path) -> Path:
    return find_unity_project_root(project) or project


def _run_analysis(
    project: Path,
    project_id: str | None,
    include_packages: bool | None,
    workers: int | None,
    progress: bool,
) -> tuple[Path, AnalysisResult]:
    project_root = _resolve_project_root(project)

    update = close = None
    if progress:
        update, close = create_progress_bar("Reading project files")

    try:
        result = analyze_project_dir(
            project_root,
            project_id=project_id,
            include_packages=include_packages,
            max_workers=workers,
            progress_callback=update,
        )
    except AnalyzerError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)
    finally:
        if close:
            close()

    return project_root, result


def _echo_warnings(result: AnalysisResult) -> None:
    if result.skipped_files:
        click.echo()
        click.echo(f"Skipped files: {result.skipped_count}")
        for skipped in result.skipped_files:
            click.echo(f"  {skipped.path}: {skipped.reason}")

    if result.guid_conflicts:
        click.echo()
        click.echo(f"GUID conflicts: {len(result.guid_conflicts)}")
        for conflict in result.guid_conflicts:
            click.echo(f"  {conflict.guid}: kept {conflict.kept_path}, dropped {conflict.dropped_path}")


@click.group()
@click.version_option(version=__version__, prog_name="unityatlas")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write log records to this file",
)
def main(verbose: bool, log_file: Path | None) -> None:
    """Unity Project Analyzer.

    Scans .meta, C#, scene and prefab files of a Unity project, builds the
    GUID dependency graph between assets and summarizes the project.
    """
    configure_logging(verbose=verbose, log_file=log_file)


@main.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--project-id", type=str, help="Project identity (default: directory name)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--include-packages",
    is_flag=True,
    help="Include Packages folder in the analysis",
)
@click.option("--workers", type=int, help="Parser threads (default: 1, synchronous)")
@click.option("--top", "top_n", type=int, help="Number of most referenced assets to list")
@click.option("--progress", is_flag=True, help="Show progress bar")
def analyze(
    project: Path,
    project_id: str | None,
    output_format: str,
    include_packages: bool,
    workers: int | None,
    top_n: int | None,
    progress: bool,
) -> None:
    """Analyze a Unity project and print its summary.

    Examples:

        # Summary of a project
        unityatlas analyze MyGame

        # Full structure, graph and summary as JSON
        unityatlas analyze MyGame --format json

        # Parse with 8 threads
        unityatlas analyze MyGame --workers 8
    """
    project_root, result = _run_analysis(project, project_id, include_packages or None, workers, progress)
    structure = result.structure
    summary = generate_project_summary(structure, top_n=top_n)

    if output_format == "json":
        graph = build_dependency_graph(structure.assets, structure.dependencies)
        output_data = {
            "result": result.to_dict(),
            "graph": graph.to_dict(),
            "summary": summary.to_dict(),
        }
        click.echo(json.dumps(output_data, indent=2))
        return

    click.echo(f"Project: {result.project_id}")
    click.echo(f"Root: {project_root}")
    click.echo()

    click.echo("Summary:")
    click.echo(f"  Assets: {summary.total_assets}")
    click.echo(f"  Scripts: {summary.total_scripts}")
    click.echo(f"  Scenes: {summary.total_scenes}")
    click.echo(f"  Prefabs: {summary.total_prefabs}")
    click.echo(f"  Dependencies: {len(structure.dependencies)}")
    click.echo(f"  Dependency depth: {summary.dependency_depth}")

    type_counts = {t: c for t, c in summary.asset_type_counts.items() if c}
    if type_counts:
        click.echo()
        click.echo("By type:")
        for t, count in sorted(type_counts.items(), key=lambda x: -x[1]):
            click.echo(f"  {t}: {count}")

    if summary.script_categories:
        click.echo()
        click.echo("Script categories:")
        for category, count in summary.script_categories.items():
            click.echo(f"  {category}: {count}")

    if summary.most_referenced_assets:
        click.echo()
        click.echo("Most referenced:")
        for ref in summary.most_referenced_assets:
            click.echo(f"  {ref.name} ({ref.guid}): {ref.reference_count}")

    if summary.dependency_cycles:
        click.echo()
        click.echo(f"Dependency cycles: {len(summary.dependency_cycles)}")
        for source, target in summary.dependency_cycles:
            click.echo(f"  {source} -> {target}")

    _echo_warnings(result)


@main.command()
@click.argument("project", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--project-id", type=str, help="Project identity (default: directory name)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option(
    "--resolved-only",
    is_flag=True,
    help="Drop edges that point at unregistered GUIDs",
)
@click.option(
    "--include-packages",
    is_flag=True,
    help="Include Packages folder in the analysis",
)
def graph(
    project: Path,
    project_id: str | None,
    output_format: str,
    resolved_only: bool,
    include_packages: bool,
) -> None:
    """Print the asset dependency graph of a Unity project.

    Examples:

        # Nodes and edges as text
        unityatlas graph MyGame

        # Only edges between known assets, as JSON
        unityatlas graph MyGame --resolved-only --format json
    """
    _, result = _run_analysis(project, project_id, include_packages or None, None, False)
    dependency_graph = build_dependency_graph(result.structure.assets, result.structure.dependencies)
    edges = dependency_graph.resolved_edges() if resolved_only else list(dependency_graph.edges)

    if output_format == "json":
        output_data = {
            "nodes": [n.to_dict() for n in dependency_graph.nodes],
            "edges": [e.to_dict() for e in edges],
        }
        click.echo(json.dumps(output_data, indent=2))
        return

    click.echo(f"Nodes: {len(dependency_graph.nodes)}")
    for node in dependency_graph.nodes:
        click.echo(f"  {node.guid} {node.path} [{node.type}]")

    click.echo()
    click.echo(f"Edges: {len(edges)}")
    for edge in edges:
        source = dependency_graph.node_for(edge.source)
        target = dependency_graph.node_for(edge.target)
        source_str = source.name if source else edge.source
        if target is None:
            click.echo(f"  {source_str} -> {edge.target} ({edge.type}) [UNRESOLVED]")
        else:
            click.echo(f"  {source_str} -> {target.name} ({edge.type})")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
def script(file: Path, output_format: str) -> None:
    """Show the structure extracted from a C# script.

    Examples:

        unityatlas script Assets/Scripts/PlayerController.cs
    """
    info = parse_script_file(file)
    if info is None:
        click.echo(f"Error: No class declaration found in {file}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(info.to_dict(), indent=2))
        return

    click.echo(f"Class: {info.full_name}")
    if info.base_types:
        click.echo(f"Base types: {', '.join(info.base_types)}")
    if info.unity_messages:
        click.echo(f"Unity messages: {', '.join(info.unity_messages)}")
    if info.component_usages:
        click.echo(f"Components used: {', '.join(sorted(info.component_usages))}")

    serialized = info.get_serialized_fields()
    if serialized:
        click.echo()
        click.echo("Serialized fields:")
        for f in serialized:
            click.echo(f"  {f.type} {f.name}")

    if info.methods:
        click.echo()
        click.echo("Methods:")
        for method in info.methods:
            params = ", ".join(f"{p.type} {p.name}".strip() for p in method.parameters)
            marker = " [Unity message]" if method.is_unity_message else ""
            click.echo(f"  {method.return_type} {method.name}({params}){marker}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def meta(file: Path) -> None:
    """Show the GUID and format version of a .meta file.

    Examples:

        unityatlas meta Assets/Scripts/PlayerController.cs.meta
    """
    try:
        content = file.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        click.echo(f"Error: Failed to read {file}: {e}", err=True)
        sys.exit(1)

    info = parse_meta(content)
    if info is None:
        click.echo(f"Error: No guid found in {file}", err=True)
        sys.exit(1)

    click.echo(f"guid: {info.guid}")
    click.echo(f"fileFormatVersion: {info.file_format_version}")


if __name__ == "__main__":
    main()
