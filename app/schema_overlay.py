"""
Editor schema augmentation.

Takes the base jsoncv schema and returns a copy tuned for the form editor:
• propertyOrder for the top-level sections and the basics fields
• headerTemplate on the items of every array ("work" → "work {{i1}}")
• textarea format for the long-form fields
• plain text input for partial ISO dates
The base schema is never mutated.
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from schema_resume import SECTIONS_IN_ORDER, BASICS_IN_ORDER

SCHEMA_TITLE = "CV Schema"
LAST_MODIFIED_NOTE = ". This will be automatically updated when downloading."

# dotted paths below schema["properties"]
KEY_FORMAT_MAP = {
    "basics.properties.summary": "textarea",
    "work.items.properties.description": "textarea",
    "work.items.properties.summary": "textarea",
    "work.items.properties.highlights.items": "textarea",
    "projects.items.properties.description": "textarea",
    "projects.items.properties.highlights.items": "textarea",
    "sideProjects.items.properties.description": "textarea",
    "skills.items.properties.summary": "textarea",
    "languages.items.properties.summary": "textarea",
    "references.items.properties.reference": "textarea",
    "awards.items.properties.summary": "textarea",
    "publications.items.properties.summary": "textarea",
    "volunteer.items.properties.summary": "textarea",
    "volunteer.items.properties.highlights.items": "textarea",
}

# basics children listed in the table of contents
TOC_BASICS = ("location", "profiles")


class SchemaConfigError(KeyError):
    """A configured schema path does not exist in the schema."""


@dataclass
class TocEntry:
    name: str
    anchor: str
    children: List["TocEntry"] = field(default_factory=list)


# ───────────────────────────────────────── helpers ──
def header_noun(key: str) -> str:
    """Singular label for an array key: strips one trailing "s", nothing more."""
    return key[:-1] if key.endswith("s") else key


def traverse_down(obj: Any, callback: Callable[[str, Dict[str, Any]], None]) -> None:
    """Call ``callback(key, node)`` for every dict nested below ``obj``."""
    if isinstance(obj, dict):
        for key, value in obj.items():
            if isinstance(value, dict):
                callback(key, value)
            traverse_down(value, callback)
    elif isinstance(obj, list):
        for value in obj:
            traverse_down(value, callback)


def get_path(obj: Dict[str, Any], dotted: str) -> Any:
    node: Any = obj
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            raise SchemaConfigError(f"schema path not found: {dotted}")
        node = node[part]
    return node


def _add_header_template(key: str, node: Dict[str, Any]) -> None:
    if node.get("type") == "array" and isinstance(node.get("items"), dict):
        node["items"]["headerTemplate"] = f"{header_noun(key)} {{{{i1}}}}"


# ───────────────────────────────────────── transformer ──
def augment_schema(base: Dict[str, Any]) -> Dict[str, Any]:
    schema = copy.deepcopy(base)
    props = schema["properties"]

    for index, name in enumerate(SECTIONS_IN_ORDER):
        get_path(props, name)["propertyOrder"] = index
    basics_props = get_path(props, "basics.properties")
    for index, name in enumerate(BASICS_IN_ORDER):
        get_path(basics_props, name)["propertyOrder"] = index

    traverse_down(schema, _add_header_template)

    for key, fmt in KEY_FORMAT_MAP.items():
        get_path(props, key)["format"] = fmt

    # the date pattern accepts YYYY and YYYY-MM, which a date picker cannot hold
    get_path(schema, "definitions.iso8601")["format"] = "text"

    schema["title"] = SCHEMA_TITLE
    last_modified = get_path(props, "meta.properties.lastModified")
    last_modified["description"] = last_modified.get("description", "") + LAST_MODIFIED_NOTE
    return schema


def build_toc(schema: Dict[str, Any]) -> List[TocEntry]:
    """Table of contents: one entry per ordered section, anchors are editor paths."""
    props = schema["properties"]
    ordered = sorted(
        (name for name in props if "propertyOrder" in props[name]),
        key=lambda name: props[name]["propertyOrder"],
    )
    toc = []
    for name in ordered:
        entry = TocEntry(name=name, anchor=f"root.{name}")
        if name == "basics":
            entry.children = [
                TocEntry(name=child, anchor=f"root.basics.{child}")
                for child in TOC_BASICS
                if child in props["basics"].get("properties", {})
            ]
        toc.append(entry)
    return toc
