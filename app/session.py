"""
Editor session: the live CV document and everything bound to it.

• Owns the live document, the augmented schema and the section → control
  bindings of the visibility overlay
• Every committed mutation notifies subscribers synchronously, in
  registration order
• A mutation made by a subscriber is applied at once, but its notification
  waits until the current dispatch has finished
"""

from __future__ import annotations
import copy
import logging
from typing import Any, Callable, Dict, List

from document import validate_document
from form_adapter import UNRENDERED_PATHS

logger = logging.getLogger(__name__)

Handler = Callable[["EditorSession"], None]


class ReadOnlyFieldError(ValueError):
    """The path is not editable through the form."""


class EditorSession:
    def __init__(self, schema: Dict[str, Any], value: Dict[str, Any] | None = None):
        self.schema = schema
        self._value: Dict[str, Any] = copy.deepcopy(value) if value is not None else {}
        self._subscribers: List[Handler] = []
        self.bindings: Dict[str, Any] = {}
        self._dispatching = False
        self._pending = 0
        self.revision = 0

    # ───────────────────────────────────────── subscriptions ──
    def subscribe(self, handler: Handler) -> Callable[[], None]:
        self._subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in self._subscribers:
                self._subscribers.remove(handler)

        return unsubscribe

    def _commit(self) -> None:
        self.revision += 1
        self._pending += 1
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                self._pending -= 1
                for handler in list(self._subscribers):
                    handler(self)
        finally:
            self._dispatching = False
            self._pending = 0

    # ───────────────────────────────────────── value access ──
    def get_value(self) -> Dict[str, Any]:
        return copy.deepcopy(self._value)

    def set_value(self, value: Dict[str, Any]) -> None:
        """Replace the whole document."""
        self._value = copy.deepcopy(value)
        self._commit()

    def load(self, value: Dict[str, Any]) -> List[str]:
        """Replace the document from outside the editor, reporting schema problems."""
        problems = validate_document(value, self.schema)
        for problem in problems:
            logger.warning("CV does not match schema: %s", problem)
        self.set_value(value)
        return problems

    def get_path(self, path: str) -> Any:
        node: Any = self._value
        for part in _split(path):
            if isinstance(node, list):
                node = node[int(part)]
            elif isinstance(node, dict):
                node = node.get(part)
            else:
                return None
            if node is None:
                return None
        return copy.deepcopy(node)

    def set_field(self, path: str, value: Any) -> None:
        """Form edit of one schema-bound field, e.g. ``root.basics.name``."""
        for managed in UNRENDERED_PATHS:
            if path == managed or path.startswith(managed + "."):
                raise ReadOnlyFieldError(f"{path} is managed by the visibility toggles")
        # a form edit of a parent object keeps the managed values as they are
        kept = {managed: self.get_path(managed) for managed in UNRENDERED_PATHS
                if _is_ancestor(path, managed)}
        self._assign(path, value)
        for managed, old in kept.items():
            self._restore(managed, old)
        self._commit()

    def set_sub_value(self, path: str, value: Any) -> None:
        """Replace the value held by one sub-editor (``root.meta`` after export)."""
        self._assign(path, value)
        self._commit()

    def _assign(self, path: str, value: Any) -> None:
        parts = _split(path)
        if not parts:
            if not isinstance(value, dict):
                raise TypeError("root value must be an object")
            self._value = copy.deepcopy(value)
            return
        node: Any = self._value
        for part, nxt in zip(parts, parts[1:]):
            if isinstance(node, list):
                node = node[int(part)]
                continue
            child = node.get(part)
            if child is None:
                child = [] if nxt.isdigit() else {}
                node[part] = child
            node = child
        last = parts[-1]
        if isinstance(node, list):
            index = int(last)
            if index == len(node):
                node.append(copy.deepcopy(value))
            else:
                node[index] = copy.deepcopy(value)
        else:
            node[last] = copy.deepcopy(value)

    def _restore(self, path: str, old: Any) -> None:
        parts = _split(path)
        parent: Any = self._value
        for part in parts[:-1]:
            if not isinstance(parent, dict):
                return
            if not isinstance(parent.get(part), dict):
                if old is None:
                    return
                parent[part] = {}
            parent = parent[part]
        if not isinstance(parent, dict):
            return
        if old is None:
            parent.pop(parts[-1], None)
        else:
            parent[parts[-1]] = old


def _split(path: str) -> List[str]:
    parts = path.split(".") if path else []
    if parts and parts[0] == "root":
        parts = parts[1:]
    return parts


def _is_ancestor(path: str, other: str) -> bool:
    mine, theirs = _split(path), _split(other)
    return len(mine) < len(theirs) and theirs[:len(mine)] == mine
