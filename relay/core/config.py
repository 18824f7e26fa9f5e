# relay/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass
class Settings:
    # Flask
    DEBUG: bool = _get_bool("FLASK_DEBUG", False)
    SECRET_KEY: str = os.getenv("FLASK_SECRET_KEY", "dev-secret-override-me")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int("PORT", 3000)

    # Socket.IO
    SOCKETIO_MODE: str = os.getenv("SOCKETIO_MODE", "eventlet")
    SOCKETIO_CDN: str = os.getenv("SOCKETIO_CDN", "https://cdn.socket.io")

    # CORS
    CORS_METHODS: tuple = ("GET", "POST", "OPTIONS")
