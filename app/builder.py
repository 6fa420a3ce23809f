"""
Build every resume in resumes/ into dist/resume/.

For each <name>.json with a meta.name: copy the JSON, render the themed
single-file HTML, optionally print a PDF. A failing resume is logged and
skipped; the rest of the batch still builds.

With --data the builder renders a single document (DATA_FILENAME by
default) into OUT_DIR/index.html instead.
"""

from __future__ import annotations
import argparse
import json
import logging
import re
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

import config
from document import DocumentParseError, parse_document, validate_document
from generator_rule import json_to_html
from pdf_renderer import PDFRenderError, get_pdf_renderer
from schema_resume import load_base_schema
from validator import validate_html_css

logger = logging.getLogger(__name__)

_VERSIONED = re.compile(r"\.\d{4}-\d{2}-\d{2}T")


@dataclass
class BuildReport:
    built: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def bundle_html(data: dict, out_dir: Path, *, theme: str, site_url: str,
                primary_color: str) -> None:
    """Render one resume into out_dir/index.html."""
    out_dir.mkdir(parents=True, exist_ok=True)
    html = json_to_html(data, theme=theme, primary_color=primary_color,
                        site_url=site_url, is_production=config.IS_PRODUCTION)
    (out_dir / "index.html").write_text(html, encoding="utf-8")


def build_single(data_file: str | Path = config.DATA_FILENAME,
                 out_dir: str | Path = config.OUT_DIR,
                 theme: str = config.THEME, site_url: str = config.SITE_URL,
                 pdf_renderer=None,
                 primary_color: str = config.DEFAULT_PRIMARY_COLOR,
                 bundler: Callable[..., None] = bundle_html) -> Path:
    """Build one document into out_dir/index.html (plus index.pdf if asked)."""
    data_file = Path(data_file)
    data = parse_document(data_file.read_bytes())
    for problem in validate_document(data, load_base_schema()):
        logger.warning("%s: %s", data_file.name, problem)

    out_dir = Path(out_dir)
    bundler(data, out_dir, theme=theme, site_url=site_url, primary_color=primary_color)
    built_html = out_dir / "index.html"
    if not built_html.exists():
        raise FileNotFoundError(f"HTML build not found: {built_html}")

    html = built_html.read_text(encoding="utf-8")
    for problem in validate_html_css(html):
        logger.warning("%s: %s", data_file.name, problem)
    print(f"✅ HTML: {built_html}")

    if pdf_renderer is not None:
        pdf_path = out_dir / "index.pdf"
        pdf_path.write_bytes(pdf_renderer.render(html))
        print(f"✅ PDF: {pdf_path}")
    return built_html


def build_all(resumes_dir: str | Path, dist_dir: str | Path,
              theme: str = config.THEME, site_url: str = config.SITE_URL,
              pdf_renderer=None, tmp_dir: str | Path | None = None,
              primary_color: str = config.DEFAULT_PRIMARY_COLOR,
              bundler: Callable[..., None] = bundle_html) -> BuildReport:
    resumes_dir = Path(resumes_dir)
    if not resumes_dir.is_dir():
        raise FileNotFoundError(f"{resumes_dir}/ directory not found")

    dist_resumes = Path(dist_dir) / "resume"
    dist_resumes.mkdir(parents=True, exist_ok=True)
    tmp_root = Path(tmp_dir) if tmp_dir else Path.cwd() / ".tmp-build"

    report = BuildReport()
    resume_files = sorted(resumes_dir.glob("*.json"))
    if not resume_files:
        logger.warning("No resume files found in %s", resumes_dir)
        return report

    print("📦 Building all resume versions...\n")
    schema = load_base_schema()
    try:
        for resume_path in resume_files:
            _build_one(resume_path, dist_resumes, tmp_root, schema, report,
                       theme=theme, site_url=site_url, pdf_renderer=pdf_renderer,
                       primary_color=primary_color, bundler=bundler)
    finally:
        shutil.rmtree(tmp_root, ignore_errors=True)

    print(f"✅ Built {len(report.built)} resume(s)")
    return report


def _build_one(resume_path: Path, dist_resumes: Path, tmp_root: Path, schema: dict,
               report: BuildReport, *, theme: str, site_url: str, pdf_renderer,
               primary_color: str, bundler: Callable[..., None]) -> None:
    file = resume_path.name
    try:
        data = json.loads(resume_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to read %s: %s", file, e)
        report.failed.append(file)
        return

    resume_name = (data.get("meta") or {}).get("name") if isinstance(data, dict) else None
    if not resume_name:
        logger.warning("Skipping %s: no meta.name field", file)
        report.skipped.append(file)
        return

    base = resume_path.stem
    print(f"🔨 Building: {file}")
    print(f"   Resume name: {resume_name}")
    for problem in validate_document(data, schema):
        logger.warning("%s: %s", file, problem)

    shutil.copyfile(resume_path, dist_resumes / file)
    print(f"   ✅ JSON: /resume/{file}")

    out_dir = tmp_root / base
    try:
        bundler(data, out_dir, theme=theme, site_url=site_url, primary_color=primary_color)

        built_html = out_dir / "index.html"
        if not built_html.exists():
            logger.warning("HTML build not found: %s", built_html)
            report.skipped.append(file)
            return

        html = built_html.read_text(encoding="utf-8")
        for problem in validate_html_css(html):
            logger.warning("%s: %s", file, problem)
        shutil.copyfile(built_html, dist_resumes / f"{base}.html")
        print(f"   ✅ HTML: /resume/{base}.html")

        if pdf_renderer is not None:
            pdf_path = dist_resumes / f"{base}.pdf"
            pdf_path.write_bytes(pdf_renderer.render(html))
            print(f"   ✅ PDF: /resume/{base}.pdf")
    except PDFRenderError as e:
        logger.error("Failed to build PDF for %s: %s", file, e)
        report.failed.append(file)
        return
    except Exception as e:
        logger.error("Failed to build HTML for %s: %s", file, e)
        report.failed.append(file)
        return
    finally:
        shutil.rmtree(out_dir, ignore_errors=True)

    report.built.append(file)
    print("")


def resume_urls(resumes_dir: str | Path, domain: str = config.DOMAIN) -> List[dict]:
    """URLs of the latest (non-timestamped) resumes."""
    urls = []
    for path in sorted(Path(resumes_dir).glob("*.json")):
        if _VERSIONED.search(path.name):
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            continue
        name = (data.get("meta") or {}).get("name") if isinstance(data, dict) else None
        if not name:
            continue
        urls.append({
            "name": name,
            "json": f"https://{domain}/resume/{path.name}",
            "html": f"https://{domain}/resume/{path.stem}.html",
        })
    return urls


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build all resume versions into the site.")
    parser.add_argument("--resumes-dir", default=config.RESUMES_DIR)
    parser.add_argument("--out-dir", default=config.OUT_DIR)
    parser.add_argument("--theme", default=config.THEME)
    parser.add_argument("--site-url", default=config.SITE_URL)
    parser.add_argument("--domain", default=config.DOMAIN)
    parser.add_argument("--pdf", choices=["none", "remote", "local"], default=config.PDF_MODE)
    parser.add_argument("--data", nargs="?", const=config.DATA_FILENAME, default=None,
                        help="build this one document into OUT_DIR instead of all of RESUMES_DIR "
                             "(without a value: DATA_FILENAME)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    config.configure_logging()
    args = _parse_args(argv)
    if args.data is not None:
        try:
            build_single(args.data, args.out_dir, theme=args.theme, site_url=args.site_url,
                         pdf_renderer=get_pdf_renderer(args.pdf))
        except (OSError, DocumentParseError, PDFRenderError) as e:
            logger.error("%s", e)
            return 1
        return 0

    try:
        build_all(args.resumes_dir, args.out_dir, theme=args.theme,
                  site_url=args.site_url, pdf_renderer=get_pdf_renderer(args.pdf))
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except Exception:
        logger.exception("Build failed")
        return 1

    print("")
    print("📋 Resume URLs:")
    for entry in resume_urls(args.resumes_dir, args.domain):
        print(f"   {entry['name']}:")
        print(f"     JSON: {entry['json']}")
        print(f"     HTML: {entry['html']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
