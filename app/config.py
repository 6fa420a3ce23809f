"""
Configuration settings for the jsoncv toolkit.

Build, theme and PDF settings come from the environment (or a .env file).
Every setting has a default so the editor and the build scripts run
without any configuration.
"""

from __future__ import annotations
from dotenv import load_dotenv
load_dotenv()          # ← must be before os.getenv(...)
import logging
import os
from pathlib import Path

APP_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = APP_DIR.parent
SCHEMA_PATH = APP_DIR / "schema" / "jsoncv.schema.json"
SAMPLE_PATH = APP_DIR / "sample.cv.json"
THEMES_DIR = APP_DIR / "themes"

# Build inputs
DATA_FILENAME = os.getenv("DATA_FILENAME", str(SAMPLE_PATH))
OUT_DIR = os.getenv("OUT_DIR", "dist")
RESUMES_DIR = os.getenv("RESUMES_DIR", "resumes")
THEME = os.getenv("THEME", "xenking")
SITE_URL = os.getenv("SITE_URL", "xenking.pro")
DOMAIN = os.getenv("DOMAIN", "your-domain.com")
IS_PRODUCTION = os.getenv("NODE_ENV", os.getenv("APP_ENV", "")) == "production"

# Site router: the resume served at "/"
RESUME_NAME = os.getenv("RESUME_NAME", "Richard Hendriks CV")

# Editor store
STORE_DIR = os.getenv("STORE_DIR", str(PROJECT_ROOT / ".cache" / "store"))
DEFAULT_PRIMARY_COLOR = "#950e0e"
DEFAULT_THEME = "xenking"

# PDF rendering: "none", "remote" (rendering API) or "local" (headless Chromium)
PDF_MODE = os.getenv("PDF_MODE", "none").lower()
PDF_API_URL = os.getenv("PDF_API_URL", "https://api.pdfshift.io/v3/convert/pdf")
PDF_API_KEY = os.getenv("PDF_API_KEY")
PDF_MAX_RETRIES = int(os.getenv("PDF_MAX_RETRIES", "3"))
PDF_CALL_DELAY = float(os.getenv("PDF_CALL_DELAY", "2"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for the command line entry points."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # cssutils logs through its own "CSSUTILS" logger
    logging.getLogger("CSSUTILS").setLevel(logging.CRITICAL)
