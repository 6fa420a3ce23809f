import streamlit as st

# MUST be the first Streamlit command
st.set_page_config(layout="wide", page_title="jsoncv Editor")

import json
import logging
import streamlit.components.v1 as components

from config import configure_logging
from document import DocumentParseError
from editor import create_editor
from form_adapter import material_icon
from generator_rule import get_theme_names
from preview_sync import CONFIRM_NEW, CONFIRM_SAMPLE, CONFIRM_UPLOAD
from store import Store
from visibility import ToggleControl

configure_logging()
logger = logging.getLogger(__name__)

_CONFIRM_TEXT = {"new": CONFIRM_NEW, "sample": CONFIRM_SAMPLE, "upload": CONFIRM_UPLOAD}

# Initialize session state variables
if "editor" not in st.session_state:
    st.session_state.store = Store()
    st.session_state.editor = create_editor(st.session_state.store)
if "form_generation" not in st.session_state:
    # bumped whenever the document changes outside the widgets, so they reload
    st.session_state.form_generation = 0
if "pending_action" not in st.session_state:
    st.session_state.pending_action = None
if "upload_open" not in st.session_state:
    st.session_state.upload_open = False
if "download" not in st.session_state:
    st.session_state.download = None
if "upload_error" not in st.session_state:
    st.session_state.upload_error = None
if "field_error" not in st.session_state:
    st.session_state.field_error = None

store = st.session_state.store
editor = st.session_state.editor
session, form, overlay, sync = editor.session, editor.form, editor.overlay, editor.sync


def _bump():
    st.session_state.form_generation += 1


def _widget_key(path: str) -> str:
    return f"{st.session_state.form_generation}:{path}"


# ───────────────────────────────────────── callbacks ──
def on_field_change(path: str, kind: str):
    raw = st.session_state[_widget_key(path)]
    if kind == "json":
        try:
            raw = json.loads(raw) if raw else None
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON for %s: %s", path, e)
            st.session_state.field_error = f"{path}: {e}"
            return
    st.session_state.field_error = None
    session.set_field(path, raw)


def on_toggle(section: str):
    overlay.toggle(section)
    _bump()


def on_array_add(path: str, item_schema: dict):
    current = session.get_path(path) or []
    item_type = item_schema.get("type")
    empty = {} if item_type == "object" else ""
    session.set_field(f"{path}.{len(current)}", empty)
    _bump()


def on_array_delete(path: str, index: int):
    current = session.get_path(path) or []
    del current[index]
    session.set_field(path, current)
    _bump()


def on_array_move(path: str, index: int, offset: int):
    current = session.get_path(path) or []
    target = index + offset
    if 0 <= target < len(current):
        current[index], current[target] = current[target], current[index]
        session.set_field(path, current)
        _bump()


def on_array_clear(path: str):
    session.set_field(path, [])
    _bump()


def on_theme_change():
    sync.set_theme(st.session_state.theme_select)


def on_color_change():
    sync.set_primary_color(st.session_state.color_picker)


def on_request(action: str):
    st.session_state.pending_action = action


def on_confirm(answer: bool):
    action = st.session_state.pending_action
    st.session_state.pending_action = None
    confirm = lambda _msg: answer  # noqa: E731
    if action == "new":
        sync.new_document(confirm)
        _bump()
    elif action == "sample":
        sync.load_sample(confirm)
        _bump()
    elif action == "upload" and answer:
        st.session_state.upload_open = True


def on_upload():
    uploaded = st.session_state.get("upload_file")
    if uploaded is None:
        return
    try:
        sync.upload(uploaded.getvalue())
        st.session_state.upload_error = None
        _bump()
    except DocumentParseError as e:
        st.session_state.upload_error = str(e)
    st.session_state.upload_open = False


def on_export(kind: str):
    st.session_state.download = sync.export(kind)
    _bump()


# ───────────────────────────────────────── form rendering ──
def render_toggles(node):
    holder = node.header.button_holder if node.header else None
    for control in holder or []:
        if isinstance(control, ToggleControl):
            st.button(
                control.label,
                icon=material_icon(control.icon),
                key=f"toggle:{st.session_state.form_generation}:{node.path}",
                help=control.title,
                on_click=on_toggle,
                args=(control.section,),
            )


def render_field(node):
    value = session.get_path(node.path)
    key = _widget_key(node.path)
    label = node.title
    common = dict(key=key, help=node.description or None,
                  on_change=on_field_change, args=(node.path, node.widget))
    if node.widget == "text_area":
        st.text_area(label, value=value or "", **common)
    elif node.widget == "number_input":
        st.number_input(label, value=value if value is not None else 0, **common)
    elif node.widget == "checkbox":
        st.checkbox(label, value=bool(value), **common)
    elif node.widget == "json":
        st.text_input(label, value=json.dumps(value) if value is not None else "", **common)
    else:
        st.text_input(label, value=value or "", **common)
    render_toggles(node)


def _action_button(action: str, label: str, key: str, help: str, on_click, args):
    st.button(label, key=f"{action}:{st.session_state.form_generation}:{key}",
              icon=form.button_icon(action), help=help, on_click=on_click, args=args)


def render_item_actions(array_node, index: int, child):
    last = len(array_node.children) - 1
    if "moveup" in array_node.actions and index > 0:
        _action_button("moveup", "Up", child.path, f"Move {child.title} up",
                       on_array_move, (array_node.path, index, -1))
    if "movedown" in array_node.actions and index < last:
        _action_button("movedown", "Down", child.path, f"Move {child.title} down",
                       on_array_move, (array_node.path, index, 1))
    if "delete" in array_node.actions:
        _action_button("delete", child.title, child.path, f"Delete {child.title}",
                       on_array_delete, (array_node.path, index))


def render_node(node, depth: int = 0):
    st.markdown(f'<div id="{node.path}" class="{node.css_class}"></div>', unsafe_allow_html=True)
    if node.kind == "field":
        render_field(node)
        return

    if depth == 0:
        for child in node.children:
            render_node(child, depth + 1)
        return

    # expanders cannot be nested, deeper levels get a bordered container
    if depth == 1:
        box = st.expander(node.title, expanded=True, icon=form.button_icon("collapse"))
    else:
        box = st.container(border=True)
    with box:
        if depth > 1:
            st.markdown(f"**{node.title}**")
        render_toggles(node)
        for index, child in enumerate(node.children):
            render_node(child, depth + 1)
            if node.kind == "array":
                render_item_actions(node, index, child)
        if node.kind == "array":
            noun = node.schema.get("items", {}).get("headerTemplate", node.key).split(" ")[0]
            _action_button("add", noun, node.path, f"Add {noun}",
                           on_array_add, (node.path, form.resolve(node.schema.get("items", {}))))
            if "delete_all" in node.actions and node.children:
                _action_button("delete_all", "All", node.path, f"Delete all {node.key}",
                               on_array_clear, (node.path,))


# ───────────────────────────────────────── sidebar ──
with st.sidebar:
    st.title("jsoncv Editor")

    st.markdown("### Contents")
    toc_lines = []
    for entry in editor.toc:
        toc_lines.append(f"- [{entry.name}](#{entry.anchor})")
        for child in entry.children:
            toc_lines.append(f"    - [{child.name}](#{child.anchor})")
    st.markdown("\n".join(toc_lines))

    st.markdown("### Appearance")
    themes = get_theme_names()
    current_theme = store.get_theme()
    st.selectbox("Theme", options=themes,
                 index=themes.index(current_theme) if current_theme in themes else 0,
                 key="theme_select", on_change=on_theme_change)
    st.color_picker("Primary color", value=store.get_primary_color(),
                    key="color_picker", on_change=on_color_change)

    st.markdown("### Data")
    col_new, col_sample, col_upload = st.columns(3)
    col_new.button("New", on_click=on_request, args=("new",), use_container_width=True)
    col_sample.button("Sample", on_click=on_request, args=("sample",), use_container_width=True)
    col_upload.button("Upload", on_click=on_request, args=("upload",), use_container_width=True)

    if st.session_state.pending_action:
        st.warning(_CONFIRM_TEXT[st.session_state.pending_action])
        col_yes, col_no = st.columns(2)
        col_yes.button("✅ Yes", on_click=on_confirm, args=(True,), type="primary")
        col_no.button("❌ Cancel", on_click=on_confirm, args=(False,))

    if st.session_state.upload_open:
        st.file_uploader("CV JSON", type="json", key="upload_file", on_change=on_upload)
    if st.session_state.upload_error:
        st.error(st.session_state.upload_error)

    st.markdown("### Download")
    col_json, col_html = st.columns(2)
    col_json.button("Prepare JSON", on_click=on_export, args=("json",), use_container_width=True)
    col_html.button("Prepare HTML", on_click=on_export, args=("html",), use_container_width=True)
    download = st.session_state.download
    if download is not None:
        st.download_button(
            label=f"📥 {download.filename}",
            data=download.content,
            file_name=download.filename,
            mime=download.mime,
            use_container_width=True,
        )

    saved = store.get_cv_saved_time()
    if saved:
        st.caption(f"Saved locally at {saved}")

# ───────────────────────────────────────── main area ──
col_form, col_preview = st.columns([1, 1])

with col_form:
    st.subheader(form.root.title if form.root else "CV")
    if st.session_state.field_error:
        st.error(st.session_state.field_error)
    if form.root is not None:
        render_node(form.root)

with col_preview:
    mode = st.radio("Preview", ["HTML", "JSON"], horizontal=True, key="preview_mode")
    if mode == "HTML":
        components.html(sync.preview_html, height=900, scrolling=True)
    else:
        st.code(sync.json_text, language="json")
