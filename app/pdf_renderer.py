"""
HTML → PDF for built CV pages.

• RemotePDFRenderer: POSTs the page to an HTML-to-PDF API with requests,
  honoring Retry-After on 429 up to a fixed number of retries and keeping a
  fixed delay between calls
• LocalPDFRenderer: prints the page with headless Chromium via Playwright
"""

from __future__ import annotations
import logging
import time
from typing import Optional

import requests

from config import PDF_API_URL, PDF_API_KEY, PDF_MAX_RETRIES, PDF_CALL_DELAY

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER = 5
REQUEST_TIMEOUT = 120


class PDFRenderError(RuntimeError):
    """The PDF could not be produced for one document."""


class RemotePDFRenderer:
    def __init__(self, api_url: str = PDF_API_URL, api_key: Optional[str] = PDF_API_KEY,
                 max_retries: int = PDF_MAX_RETRIES, call_delay: float = PDF_CALL_DELAY):
        self.api_url = api_url
        self.api_key = api_key
        self.max_retries = max_retries
        self.call_delay = call_delay
        self._calls = 0

    def _retry_after(self, resp: requests.Response) -> float:
        value = resp.headers.get("Retry-After")
        try:
            return float(value) if value is not None else DEFAULT_RETRY_AFTER
        except ValueError:
            return DEFAULT_RETRY_AFTER

    def render(self, html: str) -> bytes:
        if not self.api_key:
            raise PDFRenderError("PDF_API_KEY is required for remote PDF rendering")
        if self._calls and self.call_delay:
            time.sleep(self.call_delay)
        self._calls += 1

        payload = {"source": html, "format": "A4", "use_print": True}
        for attempt in range(self.max_retries + 1):
            try:
                resp = requests.post(
                    self.api_url,
                    json=payload,
                    auth=("api", self.api_key),
                    timeout=REQUEST_TIMEOUT,
                )
            except requests.RequestException as e:
                raise PDFRenderError(f"PDF API request failed: {e}") from e

            if resp.status_code == 429:
                if attempt == self.max_retries:
                    break
                delay = self._retry_after(resp)
                logger.warning(
                    "PDF API rate limited (attempt %d/%d), retrying in %ss",
                    attempt + 1, self.max_retries + 1, delay,
                )
                time.sleep(delay)
                continue
            if not resp.ok:
                raise PDFRenderError(
                    f"PDF API error {resp.status_code}: {resp.text[:200]}"
                )
            return resp.content

        raise PDFRenderError(
            f"PDF API still rate limited after {self.max_retries + 1} attempts"
        )


class LocalPDFRenderer:
    def __init__(self, page_format: str = "A4"):
        self.page_format = page_format

    def render(self, html: str) -> bytes:
        from playwright.sync_api import Error as PlaywrightError, sync_playwright

        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(headless=True)
                try:
                    page = browser.new_page()
                    page.set_content(html, wait_until="networkidle")
                    return page.pdf(format=self.page_format, print_background=True)
                finally:
                    browser.close()
        except PlaywrightError as e:
            raise PDFRenderError(f"Headless browser failed: {e}") from e


def get_pdf_renderer(mode: str):
    mode = (mode or "none").lower()
    if mode == "none":
        return None
    if mode == "remote":
        return RemotePDFRenderer()
    if mode == "local":
        return LocalPDFRenderer()
    raise ValueError(f"Unknown PDF mode: {mode}")
