# relay/wsgi.py
from __future__ import annotations

import logging

from relay import create_app
from relay.core.extensions import socketio
from relay.core.logging import configure_logging

log = logging.getLogger(__name__)


def main() -> None:
    configure_logging()
    app = create_app()

    host = app.config["HOST"]
    port = int(app.config["PORT"])
    mode = app.extensions.get("socketio_mode", "threading")
    log.info("Relay starting host=%s port=%s socketio_mode=%s", host, port, mode)

    if mode == "threading":
        socketio.run(
            app,
            host=host,
            port=port,
            allow_unsafe_werkzeug=True,
            use_reloader=False,
        )
    else:
        # eventlet / gevent
        socketio.run(
            app,
            host=host,
            port=port,
            use_reloader=False,
        )


if __name__ == "__main__":
    main()
