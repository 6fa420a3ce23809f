"""
Install a new resume version into resumes/.

The current <name>.json (if any) is kept as <name>.<timestamp>.json before
the new file takes its place.
"""

from __future__ import annotations
import argparse
import json
import logging
import shutil
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import config

logger = logging.getLogger(__name__)


@dataclass
class VersionResult:
    name: str
    latest_path: Path
    backup_path: Optional[Path] = None


def backup_timestamp(now: datetime) -> str:
    """UTC ISO time with ':' and '.' replaced, cut to seconds: 2024-05-01T10-20-30."""
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return iso.replace(":", "-").replace(".", "-")[:19]


def version_resume(new_file: str | Path, resumes_dir: str | Path,
                   now: Optional[datetime] = None) -> VersionResult:
    new_file = Path(new_file)
    if not new_file.exists():
        raise FileNotFoundError(f"File not found: {new_file}")

    data = json.loads(new_file.read_text(encoding="utf-8"))
    name = (data.get("meta") or {}).get("name") if isinstance(data, dict) else None
    if not name:
        raise ValueError("Resume must have meta.name field")

    resumes_dir = Path(resumes_dir)
    resumes_dir.mkdir(parents=True, exist_ok=True)
    latest_path = resumes_dir / f"{name}.json"
    result = VersionResult(name=name, latest_path=latest_path)

    print(f"📄 Resume name: {name}")
    print(f"📁 Resumes directory: {resumes_dir}")

    if latest_path.exists():
        stamp = backup_timestamp(now or datetime.now(timezone.utc))
        backup_path = resumes_dir / f"{name}.{stamp}.json"
        print(f"📦 Backing up existing resume to: {backup_path.name}")
        shutil.copyfile(latest_path, backup_path)
        result.backup_path = backup_path
    else:
        print("ℹ️  No existing resume found (first version)")

    print(f"⬆️  Copying new resume to: {latest_path.name}")
    shutil.copyfile(new_file, latest_path)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    config.configure_logging()
    parser = argparse.ArgumentParser(description="Version a resume into resumes/.")
    parser.add_argument("resume", help="path to the new resume JSON")
    parser.add_argument("--resumes-dir", default=config.RESUMES_DIR)
    parser.add_argument("--domain", default=config.DOMAIN)
    args = parser.parse_args(argv)

    try:
        result = version_resume(args.resume, args.resumes_dir)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print("")
    print("✅ Resume versioned successfully!")
    print("")
    print("📋 URLs will be:")
    print(f"   Latest JSON: https://{args.domain}/resume/{result.name}.json")
    print(f"   Latest HTML: https://{args.domain}/")
    print("")
    print('💡 Run "python app/builder.py" to build HTML versions')
    return 0


if __name__ == "__main__":
    sys.exit(main())
