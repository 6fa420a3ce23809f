"""
Static site server for dist/ with the deployment routing rules:

• "/"                  → /resume/<RESUME_NAME>.html
• "/editor", "/editor/" → /index.html
• anything else        → served unchanged
"""

from __future__ import annotations
import argparse
import logging
import socket
import sys
import threading
from functools import partial
from http.server import HTTPServer, SimpleHTTPRequestHandler
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

import config

logger = logging.getLogger(__name__)


def resolve_asset_path(pathname: str, resume_name: str = config.RESUME_NAME) -> str:
    if pathname in ("/", ""):
        return f"/resume/{resume_name}.html"
    if pathname in ("/editor", "/editor/"):
        return "/index.html"
    return pathname


class SiteRequestHandler(SimpleHTTPRequestHandler):
    resume_name = config.RESUME_NAME

    def _rewrite(self) -> None:
        parts = urlsplit(self.path)
        target = resolve_asset_path(parts.path, self.resume_name)
        if target != parts.path:
            logger.info("Rewriting %s to %s", parts.path, target)
        else:
            logger.info("Serving asset: %s", parts.path)
        self.path = urlunsplit(("", "", target, parts.query, ""))

    def do_GET(self):
        self._rewrite()
        super().do_GET()

    def do_HEAD(self):
        self._rewrite()
        super().do_HEAD()

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class SiteServer:
    def __init__(self, dist_dir: str | Path = config.OUT_DIR,
                 resume_name: str = config.RESUME_NAME):
        self.dist_dir = Path(dist_dir)
        self.resume_name = resume_name
        self.server = None
        self.server_thread = None
        self.port = None

    def start(self, port: int = 0, host: str = "127.0.0.1") -> str:
        """Serve in a background thread and return the base URL."""
        if self.server is not None:
            self.stop()
        handler_cls = type("BoundSiteRequestHandler", (SiteRequestHandler,),
                           {"resume_name": self.resume_name})
        handler = partial(handler_cls, directory=str(self.dist_dir))
        self.server = HTTPServer((host, port or self._find_free_port()), handler)
        self.port = self.server.server_address[1]
        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()
        return f"http://{host}:{self.port}/"

    def stop(self) -> None:
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            self.server = None
        if self.server_thread:
            self.server_thread.join(timeout=2)
            self.server_thread = None

    @staticmethod
    def _find_free_port() -> int:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("", 0))
            return s.getsockname()[1]


def main(argv: Optional[List[str]] = None) -> int:
    config.configure_logging()
    parser = argparse.ArgumentParser(description="Serve the built site with resume routing.")
    parser.add_argument("--dist-dir", default=config.OUT_DIR)
    parser.add_argument("--resume-name", default=config.RESUME_NAME)
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    server = SiteServer(args.dist_dir, args.resume_name)
    url = server.start(args.port)
    print(f"Serving {args.dist_dir} at {url}")
    try:
        server.server_thread.join()
    except KeyboardInterrupt:
        pass
    finally:
        server.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
