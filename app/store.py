"""
Persistent editor store.

• One file per key under STORE_DIR, each holding a plain string
• Four independent slots: CV JSON, save time, primary color, theme
• No locking and no transactions between slots
"""

from __future__ import annotations
import json
import time
from pathlib import Path

from config import STORE_DIR, DEFAULT_PRIMARY_COLOR, DEFAULT_THEME

STORE_KEYS = {
    "cv_json": "cvJSON",
    "cv_saved_time": "cvSavedTime",
    "primary_color": "primary-color",
    "theme": "theme",
}


class Store:
    """Key-value store over a directory, one file per key."""

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root or STORE_DIR)

    # ───────────────────────────────────────── raw slots ──
    def _path(self, key: str) -> Path:
        return self.root / key

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(str(value), encoding="utf-8")

    def _update_saved_time(self) -> None:
        self.set_item(STORE_KEYS["cv_saved_time"], str(int(time.time() * 1000)))

    # ───────────────────────────────────────── accessors ──
    def save_cv_json(self, text: str) -> None:
        self.set_item(STORE_KEYS["cv_json"], text)
        self._update_saved_time()

    def get_cv_data(self) -> dict | None:
        v = self.get_item(STORE_KEYS["cv_json"])
        if not v:
            return None
        return json.loads(v)

    def get_cv_saved_time(self) -> str | None:
        return self.get_item(STORE_KEYS["cv_saved_time"])

    def save_primary_color(self, color: str) -> None:
        self.set_item(STORE_KEYS["primary_color"], color)
        self._update_saved_time()

    def get_primary_color(self) -> str:
        return self.get_item(STORE_KEYS["primary_color"]) or DEFAULT_PRIMARY_COLOR

    def save_theme(self, theme: str) -> None:
        self.set_item(STORE_KEYS["theme"], theme)
        self._update_saved_time()

    def get_theme(self) -> str:
        return self.get_item(STORE_KEYS["theme"]) or DEFAULT_THEME
