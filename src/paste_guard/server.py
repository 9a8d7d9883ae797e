"""HTTP sidecar server for paste-guard.

Runs as a lightweight stdlib HTTP server on localhost.  The browser
extension's native-messaging host (or any local tool) calls it instead of
embedding the engine.

Endpoints:
    POST /analyze   — {"text": ..., "url": ...}  ->  {"findings": [...]}
    POST /redact    — {"text": ..., "url": ..., "keep": [indices]}
                      ->  {"text": ..., "findings": [...]}
    GET  /rules     — Active rule names
    GET  /health    — Health check

All endpoints expect/return JSON.  /analyze never fails: any problem with
the request yields empty findings so the paste goes through.
"""

from __future__ import annotations
import json
import logging
import os
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any

from .config import DEFAULT_CONFIG, create_guard, load_from_yaml
from .engine import apply_redactions
from .guard import PasteGuard

logger = logging.getLogger(__name__)

DEFAULT_PORT = int(os.environ.get("PASTE_GUARD_PORT", "18792"))

# Shared state — set once by serve(), read-only afterwards
_guard: PasteGuard | None = None


def _get_guard() -> PasteGuard:
    global _guard
    if _guard is None:
        _guard = create_guard(load_from_yaml(DEFAULT_CONFIG))
    return _guard


class GuardHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the paste-guard sidecar."""

    def _read_json(self) -> dict[str, Any]:
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        data = json.loads(body) if body else {}
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        return data

    def _respond(self, status: int, data: Any) -> None:
        body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        guard = _get_guard()
        if self.path == "/health":
            self._respond(200, {
                "status": "ok",
                "enabled": guard.settings.enabled,
                "rules": len(guard.rules) if guard.rules is not None else 0,
            })
        elif self.path == "/rules":
            names = guard.rules.names() if guard.rules is not None else []
            self._respond(200, {"rules": names})
        else:
            self._respond(404, {"error": "not found"})

    def do_POST(self) -> None:
        guard = _get_guard()

        if self.path == "/analyze":
            try:
                body = self._read_json()
            except ValueError as e:
                logger.warning("bad /analyze request: %s", e)
                self._respond(200, {"findings": []})
                return
            self._respond(200, guard.handle_message(body, body.get("url")))

        elif self.path == "/redact":
            try:
                body = self._read_json()
                text = body.get("text", "")
                findings = guard.analyze(text, body.get("url"))
                keep = body.get("keep") or []
                if not isinstance(keep, list) or not all(
                    isinstance(i, int) and not isinstance(i, bool) for i in keep
                ):
                    raise ValueError("keep must be a list of finding indices")
                keep = set(keep)
                selected = [i not in keep for i in range(len(findings))]
                self._respond(200, {
                    "text": apply_redactions(text, findings, selected) if findings else text,
                    "findings": [f.to_dict() for f in findings],
                })
            except (ValueError, TypeError) as e:
                self._respond(400, {"error": str(e)})

        else:
            self._respond(404, {"error": "not found"})


def serve(guard: PasteGuard, port: int = DEFAULT_PORT) -> None:
    """Start the paste-guard HTTP sidecar."""
    global _guard
    _guard = guard

    server = HTTPServer(("127.0.0.1", port), GuardHandler)
    logger.info("paste-guard sidecar listening on http://127.0.0.1:%d", port)
    logger.info("  protection: %s, policy: %s, %d domains, %d rules",
                "enabled" if guard.settings.enabled else "disabled",
                guard.settings.policy.value, len(guard.settings.domains),
                len(guard.rules) if guard.rules is not None else 0)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("shutting down")
        server.server_close()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="paste-guard HTTP sidecar")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--config", default=DEFAULT_CONFIG)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    serve(create_guard(load_from_yaml(args.config)), port=args.port)
