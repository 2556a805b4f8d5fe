"""Unity asset type classification.

Maps file extensions to the closed set of asset kinds the analyzer tracks,
plus the display color/icon table that visualizations key off.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePosixPath


class AssetType(Enum):
    """Asset kinds tracked by the analyzer."""

    SCRIPT = "script"  # .cs
    SCENE = "scene"  # .unity
    PREFAB = "prefab"  # .prefab
    SHADER = "shader"  # .shader
    MATERIAL = "material"  # .mat
    TEXTURE = "texture"  # .png, .jpg, .jpeg, .tga
    OTHER = "other"  # fallback


# File extension to asset type mapping
EXTENSION_TO_TYPE: dict[str, AssetType] = {
    ".cs": AssetType.SCRIPT,
    ".unity": AssetType.SCENE,
    ".prefab": AssetType.PREFAB,
    ".shader": AssetType.SHADER,
    ".mat": AssetType.MATERIAL,
    ".png": AssetType.TEXTURE,
    ".jpg": AssetType.TEXTURE,
    ".jpeg": AssetType.TEXTURE,
    ".tga": AssetType.TEXTURE,
}

ASSET_TYPE_COLORS: dict[AssetType, str] = {
    AssetType.SCRIPT: "#00FF00",
    AssetType.SCENE: "#FF6B6B",
    AssetType.PREFAB: "#4ECDC4",
    AssetType.SHADER: "#FFE66D",
    AssetType.MATERIAL: "#A8DADC",
    AssetType.TEXTURE: "#F1C40F",
    AssetType.OTHER: "#95A5A6",
}

ASSET_TYPE_ICONS: dict[AssetType, str] = {
    AssetType.SCRIPT: "\U0001f4c4",
    AssetType.SCENE: "\U0001f3ac",
    AssetType.PREFAB: "\U0001f9e9",
    AssetType.SHADER: "\u2728",
    AssetType.MATERIAL: "\U0001f3a8",
    AssetType.TEXTURE: "\U0001f5bc\ufe0f",
    AssetType.OTHER: "\U0001f4e6",
}


def detect_asset_type(path: str) -> AssetType:
    """Detect the asset type from an asset path.

    Args:
        path: Project-relative asset path (without the .meta suffix)

    Returns:
        Detected AssetType, OTHER for unknown extensions
    """
    ext = PurePosixPath(path).suffix.lower()
    return EXTENSION_TO_TYPE.get(ext, AssetType.OTHER)


def _coerce(asset_type: AssetType | str) -> AssetType:
    if isinstance(asset_type, AssetType):
        return asset_type
    try:
        return AssetType(asset_type)
    except ValueError:
        return AssetType.OTHER


def asset_type_color(asset_type: AssetType | str) -> str:
    """Display color for an asset type; unknown types get OTHER's color."""
    return ASSET_TYPE_COLORS[_coerce(asset_type)]


def asset_type_icon(asset_type: AssetType | str) -> str:
    """Display icon for an asset type; unknown types get OTHER's icon."""
    return ASSET_TYPE_ICONS[_coerce(asset_type)]
