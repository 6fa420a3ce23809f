"""
HTML/CSS checks for rendered CV pages.

• html5lib strict parse for structural problems
• cssutils validation of every inline <style> block
Returns messages instead of raising; callers decide whether to warn.
"""

from __future__ import annotations
import logging
from typing import List

import cssutils
import html5lib
from bs4 import BeautifulSoup


class _CaptureCSSLogHandler(logging.Handler):
    def __init__(self, error_list: List[str]):
        super().__init__()
        self.error_list = error_list

    def emit(self, record):
        self.error_list.append(f"CSS Error in <style> tag: {record.getMessage()}")


def validate_html_css(html_content: str) -> List[str]:
    """Validates HTML structure and inline CSS. Returns a list of error messages."""
    errors: List[str] = []
    try:
        html5lib.HTMLParser(strict=True).parse(html_content)
    except html5lib.html5parser.ParseError as e:
        errors.append(f"HTML ParseError: {e}")

    soup = BeautifulSoup(html_content, "html5lib")
    if soup.title is None or not soup.title.get_text(strip=True):
        errors.append("HTML is missing a non-empty <title>")

    css_logger = logging.getLogger("CSSUTILS")
    for style_tag in soup.find_all("style"):
        if not style_tag.string:
            continue
        current_css_errors: List[str] = []
        capture_handler = _CaptureCSSLogHandler(current_css_errors)
        original_level = css_logger.level
        css_logger.addHandler(capture_handler)
        css_logger.setLevel(logging.WARNING)
        try:
            parser = cssutils.CSSParser(validate=True, raiseExceptions=False)
            parser.parseString(style_tag.string)
        finally:
            css_logger.setLevel(original_level)
            css_logger.removeHandler(capture_handler)
        errors.extend(current_css_errors)

    return errors
