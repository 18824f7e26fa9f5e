# relay/core/extensions.py

from __future__ import annotations

import logging

from flask_cors import CORS
from flask_socketio import SocketIO

log = logging.getLogger(__name__)

# Instance globale unique
socketio = SocketIO(
    cors_allowed_origins="*",
    logger=False,
    engineio_logger=False,
    manage_session=False,
)


def _pick_async_mode(preferred: str) -> str:
    """
    Choisit un async_mode utilisable.
    - si preferred == eventlet/gevent mais non installé => fallback threading
    """
    pref = (preferred or "").strip().lower() or "eventlet"

    if pref == "eventlet":
        try:
            import eventlet  # noqa: F401
            return "eventlet"
        except ImportError:
            log.warning("SOCKETIO_MODE=eventlet mais eventlet absent → fallback threading")
            return "threading"

    if pref == "gevent":
        try:
            import gevent  # noqa: F401
            return "gevent"
        except ImportError:
            log.warning("SOCKETIO_MODE=gevent mais gevent absent → fallback threading")
            return "threading"

    if pref == "threading":
        return pref

    log.warning("SOCKETIO_MODE=%s inconnu → fallback threading", pref)
    return "threading"


def init_extensions(app) -> str:
    """
    - CORS : toutes origines sur tout le relais (pages, statiques, Socket.IO)
    - Socket.IO : init UNIQUE (idempotent), mode via app.config["SOCKETIO_MODE"]

    Retourne l'async_mode effectivement utilisé.
    """
    CORS(
        app,
        resources={r"/*": {"origins": "*"}},
        send_wildcard=True,
        methods=list(app.config.get("CORS_METHODS") or ("GET", "POST")),
        allow_headers=["Content-Type"],
    )

    mode = _pick_async_mode(app.config.get("SOCKETIO_MODE", "eventlet"))

    if not getattr(socketio, "server", None):
        socketio.init_app(app, async_mode=mode, cors_allowed_origins="*")
        log.info("Socket.IO init_app: async_mode=%s", mode)
    else:
        log.debug("Socket.IO déjà initialisé, skip init_app()")
    return mode
