"""
Wires one editor session together.

Subscribers are registered in this order, so every mutation runs
form re-render → visibility controls → preview/store sync.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from form_adapter import FormEditor
from preview_sync import PreviewSync
from schema_overlay import TocEntry, augment_schema, build_toc
from schema_resume import load_base_schema, load_sample
from session import EditorSession
from store import Store
from visibility import VisibilityOverlay

logger = logging.getLogger(__name__)


@dataclass
class Editor:
    session: EditorSession
    form: FormEditor
    overlay: VisibilityOverlay
    sync: PreviewSync
    toc: List[TocEntry]


def create_editor(store: Store, initial: Optional[Dict[str, Any]] = None,
                  renderer=None) -> Editor:
    schema = augment_schema(load_base_schema())

    data = initial if initial is not None else store.get_cv_data()
    if not data:
        data = load_sample()

    session = EditorSession(schema)
    form = FormEditor(session, theme="mytheme", iconlib="myiconlib",
                      disable_array_delete_all_rows=True,
                      no_additional_properties=True)
    overlay = VisibilityOverlay(session, form)
    overlay.attach()
    sync = PreviewSync(session, store) if renderer is None else PreviewSync(session, store, renderer)
    sync.attach()

    form.render()
    session.load(data)
    logger.info("Editor ready with %d rendered nodes", len(form.nodes))
    return Editor(session, form, overlay, sync, build_toc(schema))
