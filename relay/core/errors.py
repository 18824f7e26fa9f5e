# relay/core/errors.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

log = logging.getLogger(__name__)


def error_payload(status: int, error: str, message: Optional[str]) -> Dict[str, Any]:
    """Corps JSON commun à toutes les erreurs HTTP du relais."""
    return {
        "ok": False,
        "status": status,
        "error": error,
        "message": message or "",
        "path": request.path,
    }


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        code = e.code or 500
        if code >= 500:
            log.warning("HTTP %s on %s: %s", code, request.path, e.description)
        else:
            log.debug("HTTP %s on %s", code, request.path)
        return jsonify(error_payload(code, e.name, e.description)), code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # Le relais ne doit jamais tomber pour une route : on log et on renvoie 500
        log.exception("Unhandled relay error on %s: %s", request.path, e)
        return jsonify(error_payload(500, "InternalServerError", "The relay hit an unexpected error.")), 500
