# overlay/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Charger le fichier .env
load_dotenv()

CAPTURE_MODES = ("save", "email")


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


def _get_str(name: str) -> Optional[str]:
    v = os.getenv(name)
    return v.strip() if v and v.strip() else None


def _server_url() -> str:
    # SERVER_URL prioritaire, RENDER_URL pour les déploiements Render
    return (_get_str("SERVER_URL") or _get_str("RENDER_URL") or "http://localhost:3000").rstrip("/")


def _capture_mode() -> str:
    mode = (os.getenv("CAPTURE_MODE") or "save").strip().lower()
    return mode if mode in CAPTURE_MODES else "save"


@dataclass
class OverlayConfig:
    """Settings of the desktop overlay, read from the environment at creation time."""

    # Relay
    SERVER_URL: str = field(default_factory=_server_url)

    # Window geometry
    WIDTH: int = field(default_factory=lambda: _get_int("OVERLAY_WIDTH", 400))
    HEIGHT: int = field(default_factory=lambda: _get_int("OVERLAY_HEIGHT", 600))
    X: int = field(default_factory=lambda: _get_int("OVERLAY_X", 20))
    Y: int = field(default_factory=lambda: _get_int("OVERLAY_Y", 20))

    # Capture
    CAPTURE_MODE: str = field(default_factory=_capture_mode)
    CAPTURE_DIR: str = field(default_factory=lambda: os.getenv("CAPTURE_DIR", "screenshots"))
    CAPTURE_FLASH: bool = field(default_factory=lambda: _get_bool("CAPTURE_FLASH", True))

    # Email (SMTP SSL)
    EMAIL_USER: Optional[str] = field(default_factory=lambda: _get_str("EMAIL_USER"))
    EMAIL_PASS: Optional[str] = field(default_factory=lambda: _get_str("EMAIL_PASS"))
    EMAIL_RECIPIENT: Optional[str] = field(default_factory=lambda: _get_str("EMAIL_RECIPIENT"))
    SMTP_HOST: str = field(default_factory=lambda: os.getenv("SMTP_HOST", "smtp.gmail.com"))
    SMTP_PORT: int = field(default_factory=lambda: _get_int("SMTP_PORT", 465))
    SMTP_TIMEOUT_S: Optional[int] = field(
        default_factory=lambda: _get_int("SMTP_TIMEOUT_S", 0) or None
    )

    @property
    def email_configured(self) -> bool:
        return bool(self.EMAIL_USER and self.EMAIL_PASS and self.EMAIL_RECIPIENT)
