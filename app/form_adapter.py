"""
Schema-driven form layer.

Builds a render tree from the augmented schema and the session value. The
Streamlit GUI draws widgets from the tree; the visibility overlay hangs its
controls on the node headers. Node paths use the editor's dotted form
("root", "root.basics", "root.work.0.highlights.1").
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# never rendered as form fields; managed by dedicated controls
UNRENDERED_PATHS = {"root.meta.hiddenSections"}

FORM_THEMES = {
    "mytheme": {
        "object": "je-object",
        "array": "je-array",
        "field": "je-field",
        "header": "je-header",
        "button_holder": "je-header-button-holder",
    },
}

ICON_LIBS = {
    "myiconlib": {
        "add": "mdi:plus",
        "delete": "mdi:delete-outline",
        "delete_all": "mdi:delete-sweep",
        "moveup": "mdi:arrow-up",
        "movedown": "mdi:arrow-down",
        "collapse": "mdi:chevron-down",
        "expand": "mdi:chevron-right",
        "edit": "mdi:pencil",
        "copy": "mdi:content-copy",
    },
}

# Streamlit buttons take Material Symbols shortcodes rather than Iconify names
MATERIAL_ICONS = {
    "mdi:plus": ":material/add:",
    "mdi:delete-outline": ":material/delete:",
    "mdi:delete-sweep": ":material/delete_sweep:",
    "mdi:arrow-up": ":material/arrow_upward:",
    "mdi:arrow-down": ":material/arrow_downward:",
    "mdi:chevron-down": ":material/expand_more:",
    "mdi:chevron-right": ":material/chevron_right:",
    "mdi:pencil": ":material/edit:",
    "mdi:content-copy": ":material/content_copy:",
    "mdi:eye": ":material/visibility:",
    "mdi:eye-off": ":material/visibility_off:",
}


def icon_markup(name: str) -> str:
    return f'<iconify-icon icon="{name}"></iconify-icon>'


def material_icon(name: str) -> str | None:
    return MATERIAL_ICONS.get(name)


@dataclass
class NodeHeader:
    title: str
    button_holder: Optional[List[Any]] = None


@dataclass
class FormNode:
    path: str
    key: str
    title: str
    kind: str  # object | array | field
    widget: str
    schema: Dict[str, Any]
    header: Optional[NodeHeader] = None
    children: List["FormNode"] = field(default_factory=list)
    css_class: str = ""
    description: str = ""
    actions: List[str] = field(default_factory=list)


class FormEditor:
    """Render tree over an EditorSession; re-renders on structural change."""

    def __init__(self, session, theme: str = "mytheme", iconlib: str = "myiconlib",
                 disable_array_delete_all_rows: bool = True,
                 no_additional_properties: bool = True):
        if theme not in FORM_THEMES:
            raise ValueError(f"Unknown form theme: {theme}")
        if iconlib not in ICON_LIBS:
            raise ValueError(f"Unknown icon library: {iconlib}")
        self.session = session
        self.theme = FORM_THEMES[theme]
        self.icons = ICON_LIBS[iconlib]
        self.options = {
            "disable_array_delete_all_rows": disable_array_delete_all_rows,
            "no_additional_properties": no_additional_properties,
        }
        self.root: Optional[FormNode] = None
        self.nodes: Dict[str, FormNode] = {}
        self.render_count = 0
        self._ready_handlers: List[Callable[[], None]] = []
        self._render_handlers: List[Callable[[], None]] = []
        self._shape: Optional[frozenset] = None
        session.subscribe(self._on_session_change)

    # ───────────────────────────────────────── events ──
    def on_ready(self, handler: Callable[[], None]) -> None:
        self._ready_handlers.append(handler)

    def on_render(self, handler: Callable[[], None]) -> None:
        self._render_handlers.append(handler)

    def _on_session_change(self, session) -> None:
        if self.root is None:
            return
        if self._value_shape(session.get_value()) != self._shape:
            logger.debug("Document shape changed, re-rendering form")
            self.render()

    # ───────────────────────────────────────── rendering ──
    def render(self) -> FormNode:
        value = self.session.get_value()
        nodes: Dict[str, FormNode] = {}
        self.root = self._build(nodes, "root", "root", self.session.schema, value,
                                title=self.session.schema.get("title", "root"))
        self.nodes = nodes
        self._shape = frozenset(nodes)
        self.render_count += 1
        handlers = self._ready_handlers if self.render_count == 1 else self._render_handlers
        for handler in list(handlers):
            handler()
        return self.root

    def node(self, path: str) -> Optional[FormNode]:
        return self.nodes.get(path)

    def icon(self, action: str) -> str:
        return icon_markup(self.icons[action])

    def button_icon(self, action: str) -> str | None:
        return material_icon(self.icons[action])

    def _value_shape(self, value: Any) -> frozenset:
        nodes: Dict[str, FormNode] = {}
        self._build(nodes, "root", "root", self.session.schema, value, title="root")
        return frozenset(nodes)

    def resolve(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        ref = schema.get("$ref")
        if not ref:
            return schema
        if not ref.startswith("#/"):
            raise ValueError(f"Unsupported $ref: {ref}")
        target: Any = self.session.schema
        for part in ref[2:].split("/"):
            target = target[part]
        merged = dict(target)
        merged.update({k: v for k, v in schema.items() if k != "$ref"})
        return merged

    def _build(self, nodes: Dict[str, FormNode], path: str, key: str, schema: Dict[str, Any], value: Any,
               title: str) -> FormNode:
        schema = self.resolve(schema)
        kind = schema.get("type")

        if kind == "object":
            node = FormNode(path, key, title, "object", "object", schema,
                            header=NodeHeader(title, button_holder=[]),
                            css_class=self.theme["object"],
                            description=schema.get("description", ""))
            props = schema.get("properties", {})
            ordered = sorted(
                enumerate(props.items()),
                key=lambda item: (item[1][1].get("propertyOrder", 1000), item[0]),
            )
            value = value if isinstance(value, dict) else {}
            for _, (child_key, child_schema) in ordered:
                child_path = f"{path}.{child_key}"
                if child_path in UNRENDERED_PATHS:
                    continue
                node.children.append(
                    self._build(nodes, child_path, child_key, child_schema, value.get(child_key), child_key)
                )
            if not self.options["no_additional_properties"]:
                # keys the schema does not declare are edited as raw JSON
                for child_key in value:
                    if child_key not in props and f"{path}.{child_key}" not in UNRENDERED_PATHS:
                        node.children.append(
                            self._build(nodes, f"{path}.{child_key}", child_key, {},
                                        value[child_key], child_key)
                        )
        elif kind == "array":
            node = FormNode(path, key, title, "array", "array", schema,
                            header=NodeHeader(title, button_holder=[]),
                            css_class=self.theme["array"],
                            description=schema.get("description", ""))
            node.actions = self._array_actions()
            items = schema.get("items", {})
            template = items.get("headerTemplate", f"{key} {{{{i1}}}}")
            for index, item in enumerate(value if isinstance(value, list) else []):
                item_title = template.replace("{{i1}}", str(index + 1)).replace("{{i0}}", str(index))
                node.children.append(
                    self._build(nodes, f"{path}.{index}", str(index), items, item, item_title)
                )
        else:
            node = FormNode(path, key, title, "field", self._widget_for(schema), schema,
                            css_class=self.theme["field"],
                            description=schema.get("description", ""))

        nodes[path] = node
        return node

    def _array_actions(self) -> List[str]:
        actions = ["add", "delete", "moveup", "movedown"]
        if not self.options["disable_array_delete_all_rows"]:
            actions.append("delete_all")
        return actions

    @staticmethod
    def _widget_for(schema: Dict[str, Any]) -> str:
        kind = schema.get("type")
        if kind == "string":
            return "text_area" if schema.get("format") == "textarea" else "text_input"
        if kind in ("number", "integer"):
            return "number_input"
        if kind == "boolean":
            return "checkbox"
        return "json"
