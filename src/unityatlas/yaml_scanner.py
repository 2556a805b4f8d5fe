"""Lightweight scanner for Unity YAML scenes and prefabs.

Unity writes scenes (.unity), prefabs (.prefab) and materials (.mat) as a
stream of YAML documents, each introduced by a tag line such as::

    --- !u!1 &1234567890
    GameObject:
      m_Name: Player

This module does not parse YAML. It matches tag lines and a handful of
well-known keys with regular expressions, which is enough to list game
objects and collect the GUIDs a document references.

Game object names come from the first m_Name anywhere in a GameObject
document and keep spaces ("Main Camera"), so they can differ from a scan
that only accepts a single word right after the GameObject: tag.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

# Document header: class id, document-local fileID, optional "stripped"
DOCUMENT_HEADER_PATTERN = re.compile(
    r"^---\s*!u!(\d+)\s*&(-?\d+)(?:\s+stripped)?\s*$",
    re.MULTILINE,
)
GAME_OBJECT_TAG_PATTERN = re.compile(r"\A\s*GameObject:\s*$", re.MULTILINE)
NAME_PATTERN = re.compile(r"^\s*m_Name:[ \t]*(.*?)[ \t\r]*$", re.MULTILINE)

# Same-line reference blocks, e.g. m_Script: {fileID: 11500000, guid: abc, type: 3}
SCRIPT_REFERENCE_PATTERN = re.compile(r"m_Script:.*?guid:\s*([a-f0-9]+)", re.IGNORECASE)
PREFAB_REFERENCE_PATTERN = re.compile(r"m_PrefabAsset:.*?guid:\s*([a-f0-9]+)", re.IGNORECASE)

# Any inline external reference {fileID: N, guid: G, type: T}
ASSET_REFERENCE_PATTERN = re.compile(
    r"\{\s*fileID:\s*-?\d+\s*,\s*guid:\s*([a-f0-9]+)\s*,\s*type:\s*\d+\s*\}",
    re.IGNORECASE,
)

ROOT_PLACEHOLDER_NAME = "Root"


@dataclass
class ComponentRef:
    """A component attached to a game object."""

    type: str
    file_id: str
    guid: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "file_id": self.file_id, "guid": self.guid}


@dataclass
class GameObject:
    """A GameObject declared in a scene or prefab document.

    `file_id` is the document-local anchor, not a project-wide GUID.
    Components and children are not filled in by the scanner.
    """

    name: str
    file_id: str
    components: list[ComponentRef] = field(default_factory=list)
    children: list[GameObject] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file_id": self.file_id,
            "components": [c.to_dict() for c in self.components],
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class SceneInfo:
    """Information extracted from a .unity scene."""

    scene_name: str
    game_objects: list[GameObject] = field(default_factory=list)
    script_references: list[str] = field(default_factory=list)
    prefab_references: list[str] = field(default_factory=list)
    asset_references: list[str] = field(default_factory=list)
    path: str | None = None
    id: str | None = None
    asset_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "asset_id": self.asset_id,
            "path": self.path,
            "scene_name": self.scene_name,
            "game_objects": [g.to_dict() for g in self.game_objects],
            "script_references": list(self.script_references),
            "prefab_references": list(self.prefab_references),
            "asset_references": list(self.asset_references),
        }


@dataclass
class PrefabInfo:
    """Information extracted from a .prefab asset.

    The root object is the first GameObject found in the file.
    """

    prefab_name: str
    root_object: GameObject
    components: list[ComponentRef] = field(default_factory=list)
    game_objects: list[GameObject] = field(default_factory=list)
    script_references: list[str] = field(default_factory=list)
    nested_prefab_references: list[str] = field(default_factory=list)
    asset_references: list[str] = field(default_factory=list)
    path: str | None = None
    id: str | None = None
    asset_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "asset_id": self.asset_id,
            "path": self.path,
            "prefab_name": self.prefab_name,
            "root_object": self.root_object.to_dict(),
            "components": [c.to_dict() for c in self.components],
            "script_references": list(self.script_references),
            "nested_prefab_references": list(self.nested_prefab_references),
            "asset_references": list(self.asset_references),
        }


def _is_scannable(content: Any) -> bool:
    # Binary-serialized assets can't be scanned as text
    return isinstance(content, str) and "\x00" not in content


def _unique(values: list[str]) -> list[str]:
    return list(dict.fromkeys(values))


def _stem(path: str | None) -> str | None:
    if not path:
        return None
    return PurePosixPath(path.replace("\\", "/")).stem or None


def extract_game_objects(content: str) -> list[GameObject]:
    """List GameObject documents that carry a name.

    Args:
        content: Unity YAML text

    Returns:
        GameObjects in document order
    """
    game_objects: list[GameObject] = []
    headers = list(DOCUMENT_HEADER_PATTERN.finditer(content))

    for i, header in enumerate(headers):
        end = headers[i + 1].start() if i + 1 < len(headers) else len(content)
        body = content[header.end():end]

        if not GAME_OBJECT_TAG_PATTERN.search(body):
            continue

        name_match = NAME_PATTERN.search(body)
        if not name_match or not name_match.group(1):
            continue

        game_objects.append(GameObject(name=name_match.group(1), file_id=header.group(2)))

    return game_objects


def extract_script_references(content: str) -> list[str]:
    """GUIDs referenced from m_Script blocks, de-duplicated."""
    return _unique(SCRIPT_REFERENCE_PATTERN.findall(content))


def extract_prefab_references(content: str) -> list[str]:
    """GUIDs referenced from m_PrefabAsset blocks, de-duplicated."""
    return _unique(PREFAB_REFERENCE_PATTERN.findall(content))


def extract_asset_references(content: str) -> list[str]:
    """GUIDs of every inline {fileID, guid, type} reference, de-duplicated."""
    return _unique(ASSET_REFERENCE_PATTERN.findall(content))


def parse_scene(content: str, path: str | None = None) -> SceneInfo | None:
    """Scan a .unity scene.

    Args:
        content: Scene text
        path: Optional project-relative path, used for the scene name

    Returns:
        SceneInfo, or None if the content can't be scanned as text
    """
    if not _is_scannable(content):
        return None

    return SceneInfo(
        scene_name=_stem(path) or "Scene",
        game_objects=extract_game_objects(content),
        script_references=extract_script_references(content),
        prefab_references=extract_prefab_references(content),
        asset_references=extract_asset_references(content),
        path=path,
    )


def parse_prefab(content: str, path: str | None = None) -> PrefabInfo | None:
    """Scan a .prefab asset.

    When no GameObject is found a placeholder root named after the file
    (fileID "0") is used.

    Args:
        content: Prefab text
        path: Optional project-relative path, used for the prefab name

    Returns:
        PrefabInfo, or None if the content can't be scanned as text
    """
    if not _is_scannable(content):
        return None

    prefab_name = _stem(path) or ROOT_PLACEHOLDER_NAME
    game_objects = extract_game_objects(content)
    if game_objects:
        root_object = game_objects[0]
    else:
        root_object = GameObject(name=prefab_name, file_id="0")

    return PrefabInfo(
        prefab_name=prefab_name,
        root_object=root_object,
        components=list(root_object.components),
        game_objects=game_objects,
        script_references=extract_script_references(content),
        nested_prefab_references=extract_prefab_references(content),
        asset_references=extract_asset_references(content),
        path=path,
    )
