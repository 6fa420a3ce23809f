"""
Preview, persistence and export for an editor session.

Every committed change re-serializes the document (with the selected theme
forced into meta.theme), refreshes the HTML preview and writes the JSON to
the store. Exports stamp meta.lastModified and meta.theme on the live
document. Bulk replaces (sample, new, upload) ask for confirmation first.
"""

from __future__ import annotations
import copy
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from document import (
    DocumentParseError,
    cv_title,
    ensure_meta,
    parse_document,
)
from generator_rule import json_to_html
from schema_resume import load_sample, properties_to_object

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

CONFIRM_NEW = "Are you sure to create an empty CV? Your current data will be lost."
CONFIRM_UPLOAD = "Are you sure to upload an existing CV data? Your current data will be replaced."
CONFIRM_SAMPLE = "Are you sure to load sample data? Your current data will be replaced."

MIME_TYPES = {"json": "application/json", "html": "text/html"}


@dataclass
class Download:
    filename: str
    content: str
    mime: str


def format_timestamp(now: datetime) -> str:
    """``YYYY-MM-DDTHH:mm:ss±HH:MM`` in local time."""
    if now.tzinfo is None:
        now = now.astimezone()
    return now.isoformat(timespec="seconds")


def preview_data(doc: Dict[str, Any], theme: str) -> Dict[str, Any]:
    data = copy.deepcopy(doc)
    ensure_meta(data)["theme"] = theme
    return data


def to_json(doc: Dict[str, Any]) -> str:
    return json.dumps(doc, indent=2, ensure_ascii=False)


class PreviewSync:
    def __init__(self, session, store, renderer: Callable[..., str] = json_to_html):
        self.session = session
        self.store = store
        self.renderer = renderer
        self.json_text = ""
        self.preview_html = ""

    def attach(self) -> None:
        self.session.subscribe(lambda _session: self.sync())

    # ───────────────────────────────────────── live preview ──
    def sync(self) -> None:
        theme = self.store.get_theme()
        data = preview_data(self.session.get_value(), theme)
        self.json_text = to_json(data)
        try:
            self.preview_html = self.renderer(
                data, theme=theme, primary_color=self.store.get_primary_color()
            )
        except Exception:
            logger.exception("Preview rendering failed, keeping previous preview")
        self.store.save_cv_json(self.json_text)

    def set_theme(self, theme: str) -> None:
        logger.info("theme %s", theme)
        self.store.save_theme(theme)
        self.sync()

    def set_primary_color(self, color: str) -> None:
        logger.info("color %s", color)
        self.store.save_primary_color(color)
        self.sync()

    # ───────────────────────────────────────── export ──
    def export(self, content_type: str, now: Optional[datetime] = None) -> Download:
        if content_type not in MIME_TYPES:
            raise ValueError(f"Unsupported export type: {content_type}")
        data = self.session.get_value()
        meta = ensure_meta(data)
        title = cv_title(data)

        meta["lastModified"] = format_timestamp(now or datetime.now().astimezone())
        meta["theme"] = self.store.get_theme()

        if content_type == "json":
            download = Download(f"{title}.json", to_json(data), MIME_TYPES["json"])
        else:
            download = Download(f"{title}.html", self.preview_html, MIME_TYPES["html"])

        # push the stamped metadata back into the meta sub-editor
        self.session.set_sub_value("root.meta", meta)
        return download

    # ───────────────────────────────────────── bulk replace ──
    def load_sample(self, confirm: Confirm) -> bool:
        if not confirm(CONFIRM_SAMPLE):
            return False
        self.session.load(load_sample())
        return True

    def new_document(self, confirm: Confirm) -> bool:
        if not confirm(CONFIRM_NEW):
            return False
        v = properties_to_object(self.session.schema["properties"])
        logger.info("new value %s", v)
        self.session.set_value(v)
        return True

    def upload(self, content: str | bytes, confirm: Optional[Confirm] = None) -> bool:
        """Replace the document with uploaded JSON; a parse error leaves everything as it was."""
        if confirm is not None and not confirm(CONFIRM_UPLOAD):
            return False
        try:
            data = parse_document(content)
        except DocumentParseError as e:
            logger.warning("%s", e)
            raise
        self.session.load(data)
        return True
