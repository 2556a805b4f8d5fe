"""Unity .meta sidecar parsing.

A .meta file sits next to every tracked asset and carries the GUID Unity
uses for all cross-asset references.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

META_SUFFIX = ".meta"
DEFAULT_FILE_FORMAT_VERSION = 2

# Pattern to extract the GUID (label is case-insensitive)
META_GUID_PATTERN = re.compile(r"guid:\s*([a-f0-9]+)", re.IGNORECASE)
META_VERSION_PATTERN = re.compile(r"fileFormatVersion:\s*(\d+)")


@dataclass(frozen=True)
class MetaInfo:
    """GUID and format version read from a .meta file."""

    guid: str
    file_format_version: int = DEFAULT_FILE_FORMAT_VERSION


def parse_meta(content: str) -> MetaInfo | None:
    """Parse the text of a .meta file.

    Args:
        content: The .meta file content

    Returns:
        MetaInfo, or None if no guid field is present
    """
    if not isinstance(content, str):
        return None

    guid_match = META_GUID_PATTERN.search(content)
    if not guid_match:
        return None

    version_match = META_VERSION_PATTERN.search(content)
    version = int(version_match.group(1)) if version_match else DEFAULT_FILE_FORMAT_VERSION

    return MetaInfo(guid=guid_match.group(1), file_format_version=version)


def is_meta_path(path: str) -> bool:
    """Whether `path` is a .meta sidecar. Unity writes the suffix in lower case only."""
    return path.endswith(META_SUFFIX)


def asset_path_for_meta(meta_path: str) -> str:
    """Strip the .meta suffix to get the sibling asset path."""
    if is_meta_path(meta_path):
        return meta_path[: -len(META_SUFFIX)]
    return meta_path
