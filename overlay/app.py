"""
app.py
~~~~~~

Desktop receiver of the overlay relay.

A frameless, transparent, always-on-top Tkinter window subscribes to the
relay's ``message`` event and shows the latest payload, with the current
question number in a small header.  Global shortcuts move, resize, hide and
flash the window and trigger screen captures.

Run it with::

    python -m overlay

``SERVER_URL`` selects the relay (``http://localhost:3000`` by default);
see :mod:`overlay.config` for the other settings.
"""

from __future__ import annotations

import json
import logging
import tkinter as tk
from typing import Any, Callable, Optional

from relay.core.logging import configure_logging

from .capture import CaptureHelper
from .config import OverlayConfig
from .counter import QuestionCounter
from .hotkeys import HotkeyService
from .receiver import RelayReceiver
from .window import TkWindow, WindowController, WindowState

logger = logging.getLogger(__name__)


def format_payload(payload: Any) -> str:
    """Text shown for one relay message."""
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        return str(payload)


class OverlayApp:
    """Owns the Tk root and wires window, shortcuts, capture and relay together."""

    def __init__(self, config: Optional[OverlayConfig] = None) -> None:
        self.config = config or OverlayConfig()
        self.root = tk.Tk()
        self.root.title("Overlay")
        self.window = TkWindow(self.root)
        self.window.apply_presentation_flags()
        bg = self.root.cget("bg")

        # Header (question number) + content
        self.question_label = tk.Label(
            self.root, text="Q1", fg="white", bg="#333333", font=("Segoe UI", 9), padx=6
        )
        self.question_label.pack(anchor="nw", padx=8, pady=(8, 4))
        self.content_label = tk.Label(
            self.root,
            text="",
            fg="white",
            bg=bg,
            justify=tk.LEFT,
            anchor="nw",
            font=("Segoe UI", 11),
        )
        self.content_label.pack(fill=tk.BOTH, expand=True, padx=8, pady=(0, 8))
        self.content_label.bind("<Configure>", self._on_resize_content)

        state = WindowState(
            x=self.config.X,
            y=self.config.Y,
            width=self.config.WIDTH,
            height=self.config.HEIGHT,
        )
        self.controller = WindowController(
            self.window,
            state=state,
            counter=QuestionCounter(),
            capture=CaptureHelper(self.config),
            on_counter_changed=self.show_question,
            capture_flash=self.config.CAPTURE_FLASH,
        )
        self.hotkeys = HotkeyService(self.controller, post=self.post)
        self.receiver = RelayReceiver(self.config.SERVER_URL, self._on_relay_message)

    # ---- Thread marshalling ----
    def post(self, fn: Callable[[], None]) -> None:
        """Run ``fn`` on the Tk thread."""
        self.root.after(0, fn)

    def _on_relay_message(self, payload: Any) -> None:
        # Tkinter updates must happen in the main thread
        self.post(lambda: self.show_message(payload))

    # ---- Display ----
    def show_message(self, payload: Any) -> None:
        self.content_label.configure(text=format_payload(payload))

    def show_question(self, value: int) -> None:
        self.question_label.configure(text=f"Q{value}")

    def _on_resize_content(self, event: tk.Event) -> None:
        self.content_label.configure(wraplength=max(event.width - 4, 50))

    # ---- Lifecycle ----
    def run(self) -> None:
        logger.info(
            "Overlay starting (relay=%s, capture=%s)", self.config.SERVER_URL, self.config.CAPTURE_MODE
        )
        self.controller.show()
        self.controller.start()
        self.hotkeys.start()
        self.receiver.start()
        try:
            self.root.mainloop()
        except KeyboardInterrupt:
            pass
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        self.controller.stop()
        self.hotkeys.stop()
        self.receiver.stop()
        logger.info("Overlay stopped")


def main() -> None:
    configure_logging()
    OverlayApp().run()


if __name__ == "__main__":
    main()
