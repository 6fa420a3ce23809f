"""
Per-section show/hide toggles.

Hidden sections are stored in the document itself, in meta.hiddenSections.
The toggle controls never cache that state: their icon and label are
derived from a fresh read of the document each time they are refreshed.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from document import ensure_meta, hidden_sections
from form_adapter import NodeHeader
from schema_resume import HIDEABLE_SECTIONS

logger = logging.getLogger(__name__)

ICON_HIDDEN = "mdi:eye-off"
ICON_VISIBLE = "mdi:eye"


def section_path(name: str) -> str:
    return "root.basics.summary" if name == "summary" else f"root.{name}"


def is_section_hidden(doc: Dict[str, Any], name: str) -> bool:
    return name in hidden_sections(doc)


def toggle_hidden_section(doc: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Add ``name`` to meta.hiddenSections, or remove it if present. Mutates ``doc``."""
    meta = ensure_meta(doc)
    hidden = meta.get("hiddenSections")
    if not isinstance(hidden, list):
        hidden = meta["hiddenSections"] = []
    if name in hidden:
        hidden.remove(name)
    else:
        hidden.append(name)
    return doc


@dataclass
class ToggleControl:
    section: str
    icon: str = ICON_VISIBLE
    label: str = "hide"
    title: str = ""
    css_class: str = "visibility-toggle"

    def refresh(self, doc: Dict[str, Any]) -> None:
        hidden = is_section_hidden(doc, self.section)
        self.icon = ICON_HIDDEN if hidden else ICON_VISIBLE
        self.label = "show" if hidden else "hide"
        self.title = (f"Show {self.section} in CV" if hidden
                      else f"Hide {self.section} from CV")


class VisibilityOverlay:
    def __init__(self, session, form):
        self.session = session
        self.form = form

    def attach(self) -> None:
        self.form.on_ready(self.add_controls)
        self.form.on_render(self.add_controls)
        self.session.subscribe(lambda _session: self.refresh_controls())

    def add_controls(self) -> None:
        # controls belong to rendered nodes; a re-render discards the old ones
        self.session.bindings.clear()
        for name in HIDEABLE_SECTIONS:
            self.add_control(name)

    def add_control(self, name: str) -> Optional[ToggleControl]:
        node = self.form.node(section_path(name))
        if node is None:
            return None
        if node.header is None:
            node.header = NodeHeader(node.title)
        holder = node.header.button_holder
        if holder is None:
            # plain fields such as basics.summary have no button area
            holder = node.header.button_holder = []

        existing = next((c for c in holder if isinstance(c, ToggleControl)), None)
        if existing is not None:
            self.session.bindings[name] = existing
            return existing

        control = ToggleControl(name)
        control.refresh(self.session.get_value())
        holder.insert(0, control)
        self.session.bindings[name] = control
        return control

    def toggle(self, name: str) -> None:
        if name not in HIDEABLE_SECTIONS:
            raise ValueError(f"Section cannot be hidden: {name}")
        data = self.session.get_value()
        toggle_hidden_section(data, name)
        logger.info("Toggled visibility of %s, hidden: %s", name, hidden_sections(data))
        self.session.set_value(data)
        control = self.session.bindings.get(name)
        if control is not None:
            control.refresh(self.session.get_value())

    def refresh_controls(self) -> None:
        doc = self.session.get_value()
        for control in self.session.bindings.values():
            control.refresh(doc)
