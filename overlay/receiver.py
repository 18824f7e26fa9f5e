# overlay/receiver.py
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

import socketio

logger = logging.getLogger(__name__)

MESSAGE_EVENT = "message"
RECONNECT_DELAY_S = 5


class RelayReceiver:
    """Socket.IO subscriber of the relay, running in its own daemon thread.

    Every ``message`` payload is handed to ``on_message`` from the socket
    thread; the caller is responsible for moving it onto the GUI thread.
    """

    def __init__(
        self,
        server_url: str,
        on_message: Callable[[Any], None],
        client: Optional[socketio.Client] = None,
        reconnect_delay_s: float = RECONNECT_DELAY_S,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.on_message = on_message
        self.sio = client or socketio.Client(reconnection=False)
        self.reconnect_delay_s = reconnect_delay_s
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.sio.on("connect", self._on_connect)
        self.sio.on("disconnect", self._on_disconnect)
        self.sio.on(MESSAGE_EVENT, self._on_message)

    # ---- Socket.IO handlers ----
    def _on_connect(self) -> None:
        logger.info("Connected to relay %s", self.server_url)

    def _on_disconnect(self, *_args) -> None:
        logger.info("Disconnected from relay %s", self.server_url)

    def _on_message(self, payload: Any = None) -> None:
        logger.debug("Relay message received: %r", payload)
        try:
            self.on_message(payload)
        except Exception:
            logger.exception("Overlay message handler failed")

    # ---- Lifecycle ----
    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        """Connect, wait, and reconnect after a fixed delay on failures."""
        while not self._stopped.is_set():
            try:
                logger.info("Connecting to relay at %s", self.server_url)
                self.sio.connect(self.server_url)
                self.sio.wait()
            except Exception as exc:
                logger.error("Relay connection failed: %s", exc)
            if self._stopped.wait(self.reconnect_delay_s):
                break

    def stop(self) -> None:
        self._stopped.set()
        try:
            if self.sio.connected:
                self.sio.disconnect()
        except Exception as exc:
            logger.debug("Disconnect failed: %s", exc)
