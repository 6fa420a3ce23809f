"""
Theme rendering: CV JSON → single-file HTML.

Each theme is a directory under app/themes/ holding index.html (Jinja2)
and style.css. The CSS is inlined with its accent color replaced by the chosen primary
color, so the output needs no other assets.
"""

from __future__ import annotations
import copy
import logging
import re
from typing import Any, Dict, List

import cssutils
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import THEMES_DIR, THEME, SITE_URL, DEFAULT_PRIMARY_COLOR
from document import hidden_sections

cssutils.log.setLevel(logging.CRITICAL)
# keep colors as written, e.g. #112233 rather than #123
cssutils.ser.prefs.minimizeColorHash = False

env = Environment(loader=FileSystemLoader(str(THEMES_DIR)),
                  autoescape=select_autoescape(["html"]))


def get_theme_names() -> List[str]:
    return sorted(p.name for p in THEMES_DIR.iterdir()
                  if p.is_dir() and (p / "index.html").exists())


def get_render_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of the CV without hidden sections, plus page title/description."""
    cv = copy.deepcopy(data)
    for name in hidden_sections(cv):
        if name == "summary":
            if isinstance(cv.get("basics"), dict):
                cv["basics"]["summary"] = ""
        else:
            cv.pop(name, None)
    basics = cv.get("basics") or {}
    return {
        "cv": cv,
        "hidden": hidden_sections(data),
        "title": basics.get("name") or (data.get("meta") or {}).get("name", ""),
        "description": (basics.get("summary") or "").replace("\n", " "),
    }


def _style_rules(rules):
    for rule in rules:
        if rule.type == rule.STYLE_RULE:
            yield rule
        elif rule.type == rule.MEDIA_RULE:
            yield from _style_rules(rule.cssRules)


def themed_css(theme: str, primary_color: str) -> str:
    """Theme stylesheet with the default accent swapped for ``primary_color``."""
    sheet = cssutils.parseFile(str(THEMES_DIR / theme / "style.css"))
    accent = DEFAULT_PRIMARY_COLOR.lower()
    if primary_color.lower() != accent:
        for rule in _style_rules(sheet.cssRules):
            for prop in rule.style:
                if accent in prop.value.lower():
                    prop.value = re.sub(re.escape(accent), primary_color, prop.value, flags=re.I)
    return sheet.cssText.decode("utf-8")


def json_to_html(data: dict, theme: str = THEME,
                 primary_color: str = DEFAULT_PRIMARY_COLOR,
                 site_url: str = SITE_URL, is_production: bool = False) -> str:
    """Render résumé → HTML with the theme CSS embedded in a <style> tag."""
    if theme not in get_theme_names():
        raise ValueError(f"Unknown theme: {theme}")
    render_data = get_render_data(data)
    return env.get_template(f"{theme}/index.html").render(
        **render_data,
        theme=theme,
        site_url=site_url,
        is_production=is_production,
        primary_color=primary_color,
        inline_css=themed_css(theme, primary_color),
    )
