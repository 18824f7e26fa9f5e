"""
capture.py
~~~~~~~~~~

Screenshot + notification helper of the overlay.

When the capture shortcut fires, the whole screen is grabbed with Pillow and
written as a PNG whose name carries the current question number and a
timestamp.  Depending on ``CAPTURE_MODE`` the file is then either kept in
``CAPTURE_DIR`` (``save``) or mailed to ``EMAIL_RECIPIENT`` through the
configured SMTP account (``email``), in which case the local copy is removed
a few seconds later.

:meth:`CaptureHelper.run` never raises.  Every failure is logged and reported
through a :class:`CaptureResult`; the caller decides whether to advance the
question counter.
"""

from __future__ import annotations

import logging
import os
import smtplib
import threading
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Callable, Optional

from PIL import ImageGrab

from .config import OverlayConfig

logger = logging.getLogger(__name__)

CLEANUP_DELAY_S = 5.0


class CaptureError(Exception):
    """Raised inside the helper when one capture step fails."""


@dataclass
class CaptureResult:
    """Outcome of one capture run."""

    ok: bool
    question: int
    mode: str
    path: Optional[Path] = None
    error: Optional[str] = None


def _schedule_with_timer(delay_s: float, fn: Callable[[], None]) -> None:
    t = threading.Timer(delay_s, fn)
    t.daemon = True
    t.start()


class CaptureHelper:
    """Grab the screen, then save the PNG locally or send it by email.

    Parameters
    ----------
    config: OverlayConfig
        Capture mode, directory and SMTP account.
    grab: callable
        Returns a Pillow image of the full screen (``ImageGrab.grab``).
    smtp_factory: callable
        ``smtplib.SMTP_SSL``-compatible constructor.
    schedule: callable
        ``schedule(delay_s, fn)`` used for the delayed temp-file cleanup.
    """

    def __init__(
        self,
        config: OverlayConfig,
        grab: Callable[[], Any] = ImageGrab.grab,
        smtp_factory: Callable[..., Any] = smtplib.SMTP_SSL,
        schedule: Callable[[float, Callable[[], None]], None] = _schedule_with_timer,
        cleanup_delay_s: float = CLEANUP_DELAY_S,
    ) -> None:
        self.config = config
        self._grab = grab
        self._smtp_factory = smtp_factory
        self._schedule = schedule
        self.cleanup_delay_s = cleanup_delay_s

    # ---- Steps ----
    def capture_path(self, question: int, now: Optional[datetime] = None) -> Path:
        stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
        return Path(self.config.CAPTURE_DIR) / f"question_{int(question)}_{stamp}.png"

    def capture(self, question: int) -> Path:
        path = self.capture_path(question)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CaptureError(f"cannot create {path.parent}: {exc}") from exc
        try:
            image = self._grab()
            image.save(str(path), "PNG")
        except Exception as exc:
            raise CaptureError(f"screen capture failed: {exc}") from exc
        logger.info("Captured question %s to %s", question, path)
        return path

    def build_email(self, path: Path, question: int) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = f"Question {question}"
        msg["From"] = self.config.EMAIL_USER
        msg["To"] = self.config.EMAIL_RECIPIENT
        msg.set_content(f"Screenshot for question {question} ({path.name}).")
        with open(path, "rb") as fh:
            msg.add_attachment(fh.read(), maintype="image", subtype="png", filename=path.name)
        return msg

    def send_email(self, path: Path, question: int) -> None:
        if not self.config.email_configured:
            raise CaptureError("email not configured")
        msg = self.build_email(path, question)
        kwargs = {}
        if self.config.SMTP_TIMEOUT_S:
            kwargs["timeout"] = self.config.SMTP_TIMEOUT_S
        try:
            with self._smtp_factory(self.config.SMTP_HOST, self.config.SMTP_PORT, **kwargs) as smtp:
                smtp.login(self.config.EMAIL_USER, self.config.EMAIL_PASS)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise CaptureError(f"SMTP send failed: {exc}") from exc
        logger.info("Mailed question %s to %s", question, self.config.EMAIL_RECIPIENT)

    def cleanup(self, path: Path) -> None:
        try:
            os.remove(path)
            logger.debug("Removed temporary capture %s", path)
        except FileNotFoundError:
            logger.debug("Temporary capture %s already gone", path)
        except OSError as exc:
            logger.warning("Could not remove temporary capture %s: %s", path, exc)

    # ---- Entry point ----
    def run(self, question: int) -> CaptureResult:
        mode = self.config.CAPTURE_MODE
        path: Optional[Path] = None
        try:
            if mode == "email" and not self.config.email_configured:
                raise CaptureError("email not configured")
            path = self.capture(question)
            if mode == "email":
                try:
                    self.send_email(path, question)
                finally:
                    self._schedule(self.cleanup_delay_s, lambda p=path: self.cleanup(p))
        except CaptureError as exc:
            logger.error("Capture of question %s failed (%s): %s", question, mode, exc)
            return CaptureResult(ok=False, question=question, mode=mode, path=path, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected capture failure for question %s", question)
            return CaptureResult(ok=False, question=question, mode=mode, path=path, error=str(exc))
        return CaptureResult(ok=True, question=question, mode=mode, path=path)
