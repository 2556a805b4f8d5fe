"""C# Script Parser for Unity project analysis.

Scans C# source text for the structural signals the analyzer needs:
namespace, class declaration and base types, method and field
declarations with their attributes, Unity message callbacks and
component API usage.

This is pattern matching, not a compiler front end. Signatures that span
several lines or unusual formatting can be missed, and attributes are
collected from a fixed window of text before each declaration, so two
declarations close to each other may share attributes. Callers get
useful signal, not an exact syntax tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Unity lifecycle callbacks recognised as "Unity messages"
UNITY_MESSAGES = frozenset({
    "Awake",
    "Start",
    "Update",
    "FixedUpdate",
    "LateUpdate",
    "OnEnable",
    "OnDisable",
    "OnDestroy",
    "OnApplicationQuit",
    "OnCollisionEnter",
    "OnCollisionExit",
    "OnTriggerEnter",
    "OnTriggerExit",
})

# How far back (in characters) to look for attributes of a declaration
METHOD_ATTRIBUTE_WINDOW = 200
FIELD_ATTRIBUTE_WINDOW = 100


@dataclass
class Parameter:
    """A method parameter (first token is the type, second the name)."""

    type: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "name": self.name}


@dataclass
class Method:
    """A method declaration found in a script."""

    name: str
    return_type: str
    parameters: list[Parameter] = field(default_factory=list)
    attributes: list[str] = field(default_factory=list)
    is_unity_message: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "return_type": self.return_type,
            "parameters": [p.to_dict() for p in self.parameters],
            "attributes": list(self.attributes),
            "is_unity_message": self.is_unity_message,
        }


@dataclass
class Field:
    """A field declaration found in a script."""

    name: str
    type: str
    attributes: list[str] = field(default_factory=list)
    is_serialized_field: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "attributes": list(self.attributes),
            "is_serialized_field": self.is_serialized_field,
        }


@dataclass
class ScriptInfo:
    """Information extracted from a C# script.

    `id` and `asset_id` are filled in by the analyzer once the script is
    attached to its registered asset.
    """

    class_name: str
    namespace: str = ""
    base_types: list[str] = field(default_factory=list)
    methods: list[Method] = field(default_factory=list)
    fields: list[Field] = field(default_factory=list)
    unity_messages: list[str] = field(default_factory=list)
    component_usages: list[str] = field(default_factory=list)
    path: str | None = None
    id: str | None = None
    asset_id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.namespace}.{self.class_name}" if self.namespace else self.class_name

    def get_method(self, name: str) -> Method | None:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def get_field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_serialized_fields(self) -> list[Field]:
        return [f for f in self.fields if f.is_serialized_field]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "asset_id": self.asset_id,
            "path": self.path,
            "namespace": self.namespace,
            "class_name": self.class_name,
            "base_types": list(self.base_types),
            "methods": [m.to_dict() for m in self.methods],
            "fields": [f.to_dict() for f in self.fields],
            "unity_messages": list(self.unity_messages),
            "component_usages": list(self.component_usages),
        }


# Regex patterns for C# scanning
# Note: These are simplified, single-line patterns by design of the format

NAMESPACE_PATTERN = re.compile(r"namespace\s+([\w.]+)")

CLASS_PATTERN = re.compile(r"(?:public|internal|private)?\s*class\s+(\w+)")

# Inheritance list: everything between "class Name :" and the opening brace
BASE_TYPES_PATTERN = re.compile(r"class\s+\w+\s*:\s*([^{]+)")

# Captures: return type (with optional generic args), name, parameter list
METHOD_PATTERN = re.compile(
    r"(?:public|private|protected|internal)?\s*"  # Access modifier
    r"(?:static)?\s*"
    r"(?:virtual|override|async)?\s*"
    r"(\w+(?:<[^>]+>)?)\s+"  # Return type
    r"(\w+)\s*"  # Method name
    r"\(([^)]*)\)"  # Parameters
)

# Captures: type (with optional generic args), name; ends at ';' or '='
FIELD_PATTERN = re.compile(
    r"(?:public|private|protected|internal)?\s*"
    r"(?:static|readonly)?\s*"
    r"(\w+(?:<[^>]+>)?)\s+"  # Type
    r"(\w+)\s*[;=]"  # Field name and terminator
)

# [Name] or [Name(args)]; only the name is kept
ATTRIBUTE_PATTERN = re.compile(r"\[(\w+)(?:\([^)]*\))?\]")

COMPONENT_USAGE_PATTERNS = (
    re.compile(r"GetComponent<(\w+)>"),
    re.compile(r"AddComponent<(\w+)>"),
    re.compile(r"RequireComponent\(typeof\((\w+)\)\)"),
)

SERIALIZE_FIELD_ATTRIBUTE = "SerializeField"


def parse_script(content: str, path: str | Path | None = None) -> ScriptInfo | None:
    """Parse C# source text.

    Args:
        content: The C# script content
        path: Optional project-relative path of the script

    Returns:
        ScriptInfo with extracted information, or None if no class
        declaration is found
    """
    if not isinstance(content, str):
        return None

    class_match = CLASS_PATTERN.search(content)
    if not class_match:
        return None

    namespace_match = NAMESPACE_PATTERN.search(content)
    methods = _extract_methods(content)

    return ScriptInfo(
        class_name=class_match.group(1),
        namespace=namespace_match.group(1) if namespace_match else "",
        base_types=_extract_base_types(content),
        methods=methods,
        fields=_extract_fields(content),
        unity_messages=[m.name for m in methods if m.is_unity_message],
        component_usages=_extract_component_usages(content),
        path=str(path) if path is not None else None,
    )


def parse_script_file(path: Path) -> ScriptInfo | None:
    """Parse a C# script file.

    Args:
        path: Path to the .cs file

    Returns:
        ScriptInfo object or None if the file can't be read or parsed
    """
    try:
        content = path.read_text(encoding="utf-8-sig")  # Handle BOM
    except (OSError, UnicodeDecodeError):
        return None
    return parse_script(content, path)


def _extract_base_types(content: str) -> list[str]:
    match = BASE_TYPES_PATTERN.search(content)
    if not match:
        return []
    return [t.strip() for t in match.group(1).split(",") if t.strip()]


def _extract_methods(content: str) -> list[Method]:
    methods: list[Method] = []

    for match in METHOD_PATTERN.finditer(content):
        return_type, name, params_str = match.groups()

        parameters = []
        for raw in params_str.split(","):
            parts = raw.split()
            if not parts:
                continue
            parameters.append(Parameter(
                type=parts[0],
                name=parts[1] if len(parts) > 1 else "",
            ))

        methods.append(Method(
            name=name,
            return_type=return_type,
            parameters=parameters,
            attributes=_attributes_before(content, match.start(), METHOD_ATTRIBUTE_WINDOW),
            is_unity_message=name in UNITY_MESSAGES,
        ))

    return methods


def _extract_fields(content: str) -> list[Field]:
    fields: list[Field] = []

    for match in FIELD_PATTERN.finditer(content):
        field_type, name = match.groups()
        attributes = _attributes_before(content, match.start(), FIELD_ATTRIBUTE_WINDOW)

        fields.append(Field(
            name=name,
            type=field_type,
            attributes=attributes,
            is_serialized_field=SERIALIZE_FIELD_ATTRIBUTE in attributes,
        ))

    return fields


def _attributes_before(content: str, position: int, window: int) -> list[str]:
    """Collect attribute names in the `window` characters before `position`."""
    before = content[max(0, position - window):position]
    return ATTRIBUTE_PATTERN.findall(before)


def _extract_component_usages(content: str) -> list[str]:
    """Component type names used via GetComponent/AddComponent/RequireComponent.

    Duplicates are dropped; first-seen order is kept but is not meaningful.
    """
    usages: dict[str, None] = {}
    for pattern in COMPONENT_USAGE_PATTERNS:
        for match in pattern.finditer(content):
            usages.setdefault(match.group(1), None)
    return list(usages)
