"""
The jsoncv schema contract, the bundled sample CV and the section lists
shared by the editor and the renderer.
"""

from __future__ import annotations
import json
from typing import Any, Dict

from config import SCHEMA_PATH, SAMPLE_PATH

# canonical order of the top-level sections in the editor
SECTIONS_IN_ORDER = [
    "basics", "education", "work", "projects", "sideProjects", "skills",
    "languages", "interests", "references", "awards", "publications",
    "volunteer", "certificates", "meta",
]
BASICS_IN_ORDER = [
    "name", "label", "email", "phone", "url", "summary", "image",
    "location", "profiles",
]

# sections that can be hidden in the rendered CV; summary lives under basics
HIDEABLE_SECTIONS = [
    "basics", "summary", "education", "work", "projects", "sideProjects",
    "skills", "languages", "interests", "references", "awards",
    "publications", "volunteer", "certificates", "meta",
]


def load_base_schema() -> Dict[str, Any]:
    """Fresh copy of the base schema on every call."""
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def load_sample() -> Dict[str, Any]:
    return json.loads(SAMPLE_PATH.read_text(encoding="utf-8"))


def properties_to_object(properties: Dict[str, Any]) -> Dict[str, Any]:
    """Empty document skeleton for a schema ``properties`` mapping."""
    out: Dict[str, Any] = {}
    for key, prop in properties.items():
        kind = prop.get("type")
        if kind == "object":
            out[key] = properties_to_object(prop.get("properties", {}))
        elif kind == "array":
            out[key] = []
        elif kind == "string" or "$ref" in prop:
            out[key] = ""
    return out
