#!/usr/bin/env python3
"""
Simple HTTP server to preview the generated site.
Run this after build_site.py; opens toc.html in the browser.
"""

from __future__ import annotations

import functools
import http.server
import logging
import socketserver
import sys
import webbrowser
from pathlib import Path
from typing import Optional, Sequence

from build_site import OUTPUT_DIR_NAME, TOC_FILENAME, configure_logging

logger = logging.getLogger(__name__)


def make_handler(site_path: Path):
    """Request handler class serving files from site_path."""
    return functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(site_path))


def serve_site(site_dir: Path = Path(OUTPUT_DIR_NAME), port: int = 8000, open_browser: bool = True) -> bool:
    """Serve site_dir until interrupted. Returns False if there is nothing to serve."""
    site_path = Path(site_dir).resolve()
    if not site_path.is_dir():
        logger.error("Site directory '%s' doesn't exist. Run build_site.py first.", site_dir)
        return False

    with socketserver.TCPServer(("", port), make_handler(site_path)) as httpd:
        url = f"http://localhost:{port}/{TOC_FILENAME}"
        logger.info("Serving %s at %s", site_path, url)
        logger.info("Press Ctrl+C to stop")

        if open_browser:
            webbrowser.open(url)

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("\nServer stopped.")
    return True


def parse_port(argv: Sequence[str]) -> int:
    if argv:
        try:
            return int(argv[0])
        except ValueError:
            logger.warning("Ignoring invalid port %r", argv[0])
    return 8000


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    return 0 if serve_site(port=parse_port(args)) else 1


if __name__ == "__main__":
    sys.exit(main())
