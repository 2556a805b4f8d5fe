"""Dependency graph over registered assets.

The graph is a read-only view: one node per asset and one edge per
dependency record. Edges are not validated against the node set, so a
reference to a GUID that isn't registered in the project shows up as a
dangling edge; presentation code decides whether to drop or highlight it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from unityatlas.asset_types import asset_type_color
from unityatlas.models import Asset, AssetDependency


@dataclass(frozen=True)
class GraphNode:
    guid: str
    name: str
    type: str
    path: str

    @property
    def color(self) -> str:
        return asset_type_color(self.type)

    def to_dict(self) -> dict[str, Any]:
        return {"guid": self.guid, "name": self.name, "type": self.type, "path": self.path}


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str
    type: str

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "type": self.type}


@dataclass(frozen=True)
class DependencyGraph:
    """Nodes and edges of the asset dependency graph."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    _node_index: dict[str, GraphNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        index = {}
        for node in self.nodes:
            index.setdefault(node.guid, node)
        object.__setattr__(self, "_node_index", index)

    def node_for(self, guid: str) -> GraphNode | None:
        """Get the node for a GUID, or None if it isn't a known asset."""
        return self._node_index.get(guid)

    def is_dangling(self, edge: GraphEdge) -> bool:
        return edge.source not in self._node_index or edge.target not in self._node_index

    def resolved_edges(self) -> list[GraphEdge]:
        """Edges whose source and target are both known nodes."""
        return [e for e in self.edges if not self.is_dangling(e)]

    def dangling_edges(self) -> list[GraphEdge]:
        """Edges that point at (or come from) an unknown GUID."""
        return [e for e in self.edges if self.is_dangling(e)]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def build_dependency_graph(
    assets: Iterable[Asset],
    dependencies: Iterable[AssetDependency],
) -> DependencyGraph:
    """Build the dependency graph.

    Args:
        assets: Registered assets, one node each
        dependencies: Dependency records, one edge each (dangling edges included)

    Returns:
        DependencyGraph
    """
    nodes = tuple(
        GraphNode(guid=a.guid, name=a.name, type=a.type.value, path=a.path)
        for a in assets
    )
    edges = tuple(
        GraphEdge(source=d.source_guid, target=d.target_guid, type=d.type.value)
        for d in dependencies
    )
    return DependencyGraph(nodes=nodes, edges=edges)
