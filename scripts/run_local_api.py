#!/usr/bin/env python3
"""
Local API Server

Serves the API handlers over HTTP for development, backed by the
DuckDB store at DATABASE_PATH.

Usage:
    python3 scripts/run_local_api.py --port 8000
    curl http://localhost:8000/api/politicians?state=TX
"""

import sys
import argparse
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import urlsplit
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.lib.resources import set_store
from api.lib.router import dispatch
from ingestion.lib.config import configure_logging, load_settings
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


class APIRequestHandler(BaseHTTPRequestHandler):
    """Translate HTTP requests into handler events and back."""

    def _handle(self):
        url = urlsplit(self.path)
        body = None
        length = int(self.headers.get("Content-Length") or 0)
        if length:
            body = self.rfile.read(length).decode("utf-8")

        response = dispatch(self.command, url.path, url.query, body)

        payload = (response.get("body") or "").encode("utf-8")
        self.send_response(response["statusCode"])
        for name, value in (response.get("headers") or {}).items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if payload:
            self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle
    do_OPTIONS = _handle

    def log_message(self, format, *args):
        logger.info(f"{self.address_string()} - {format % args}")


def main():
    parser = argparse.ArgumentParser(description="Run the API locally")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--db", help="DuckDB file (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level)

    database_path = args.db or settings.database_path
    set_store(PoliticsStore(database_path))

    server = HTTPServer((args.host, args.port), APIRequestHandler)
    logger.info(f"Serving API on http://{args.host}:{args.port} (store: {database_path})")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
