# relay/__init__.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, send_from_directory

from .core.config import Settings
from .core.errors import register_error_handlers
from .core.extensions import init_extensions, socketio
from .core.logging import configure_logging
from .core.security import build_csp
from .ws.presence import ConnectionRegistry

log = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parent / "public"

LIVENESS_TEXT = "Overlay relay is running"

__all__ = ["create_app", "socketio", "PUBLIC_DIR", "LIVENESS_TEXT"]


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    if not logging.getLogger().handlers:
        configure_logging()

    app = Flask(
        __name__,
        static_folder=str(PUBLIC_DIR / "static"),
        static_url_path="/static",
    )
    app.config.from_object(Settings())
    if overrides:
        app.config.update(overrides)

    mode = init_extensions(app)
    app.extensions["socketio_mode"] = mode

    app.extensions["connections"] = ConnectionRegistry()
    app.extensions["csp"] = build_csp([app.config.get("SOCKETIO_CDN", "")])

    register_error_handlers(app)
    _register_routes(app)
    _register_socketio_handlers()

    @app.after_request
    def _security_headers(resp: Response) -> Response:
        resp.headers.setdefault("Content-Security-Policy", app.extensions["csp"])
        return resp

    log.info(
        "Relay created (debug=%s, public=%s, socketio=%s)",
        app.config.get("DEBUG"),
        PUBLIC_DIR,
        mode,
    )
    return app


def _register_routes(app: Flask) -> None:
    @app.get("/")
    def index():
        return Response(LIVENESS_TEXT, mimetype="text/plain")

    @app.get("/sender")
    def sender_page():
        return send_from_directory(PUBLIC_DIR, "sender.html")

    @app.get("/receiver")
    def receiver_page():
        return send_from_directory(PUBLIC_DIR, "receiver.html")

    @app.get("/healthz")
    def _healthz():
        reg: ConnectionRegistry = app.extensions["connections"]
        return {"ok": True, "clients": reg.count()}, 200


def _register_socketio_handlers() -> None:
    from .ws import events  # noqa: F401
