# relay/ws/events.py
from __future__ import annotations

import logging
from typing import Any, Optional

from flask import current_app, request as flask_request

from relay.core.extensions import socketio
from relay.ws.presence import ConnectionRegistry

log = logging.getLogger(__name__)

__all__ = [
    "MESSAGE_EVENT",
    "broadcast_message",
]

MESSAGE_EVENT = "message"

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _connections() -> Optional[ConnectionRegistry]:
    return current_app.extensions.get("connections")

# --------------------------------------------------------------------------- #
# Broadcast helper                                                            #
# --------------------------------------------------------------------------- #

def broadcast_message(payload: Any) -> bool:
    """
    Diffuse un 'message' tel quel à toutes les connexions vivantes,
    émetteur compris. Pas de stockage, pas de replay : un client connecté
    après coup ne le recevra jamais.

    Retourne False si l'émission a échoué ; l'erreur est seulement loggée.
    """
    try:
        socketio.emit(MESSAGE_EVENT, payload)
        return True
    except Exception as e:
        log.warning("broadcast_message failed: %s", e)
        return False

# --------------------------------------------------------------------------- #
# Events                                                                      #
# --------------------------------------------------------------------------- #

@socketio.on("connect")
def on_connect():
    sid = flask_request.sid
    reg = _connections()
    if reg is not None:
        reg.add(sid)
    log.info("[ws] connect sid=%s clients=%s", sid, reg.count() if reg is not None else "?")

@socketio.on("disconnect")
def on_disconnect(*_args):
    sid = flask_request.sid
    reg = _connections()
    if reg is not None:
        reg.remove(sid)
    log.info("[ws] disconnect sid=%s clients=%s", sid, reg.count() if reg is not None else "?")

@socketio.on(MESSAGE_EVENT)
def on_message(*args: Any):
    # Seul le premier argument est relayé, les suivants sont ignorés
    payload = args[0] if args else None
    log.debug("[ws] message from sid=%s", flask_request.sid)
    broadcast_message(payload)
