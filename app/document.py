"""
CV document boundary: parsing uploads, schema validation and title lookup.

Inside the editor a document is a plain dict. It is checked against the
schema only where it crosses a boundary (load, upload, export, build).
"""

from __future__ import annotations
import json
from typing import Any, Dict, List

from jsonschema import Draft7Validator


class DocumentParseError(ValueError):
    """Uploaded content is not a JSON object."""


def parse_document(text: str | bytes) -> Dict[str, Any]:
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(f"Invalid JSON file: {e}") from e
    if not isinstance(data, dict):
        raise DocumentParseError(
            f"Invalid JSON file: expected an object, got {type(data).__name__}"
        )
    return data


def validate_document(doc: Dict[str, Any], schema: Dict[str, Any]) -> List[str]:
    """Readable schema violations, empty when the document conforms."""
    validator = Draft7Validator(schema)
    messages = []
    for err in sorted(validator.iter_errors(doc), key=lambda e: list(e.path)):
        where = ".".join(str(p) for p in err.path) or "<root>"
        messages.append(f"{where}: {err.message}")
    return messages


def ensure_meta(doc: Dict[str, Any]) -> Dict[str, Any]:
    meta = doc.get("meta")
    if not isinstance(meta, dict):
        meta = doc["meta"] = {}
    return meta


def hidden_sections(doc: Dict[str, Any]) -> List[str]:
    meta = doc.get("meta") or {}
    return list(meta.get("hiddenSections") or [])


def cv_title(doc: Dict[str, Any]) -> str:
    name = ((doc.get("basics") or {}).get("name") or "").strip()
    if name:
        return name
    meta_name = ((doc.get("meta") or {}).get("name") or "").strip()
    return meta_name or "CV"
