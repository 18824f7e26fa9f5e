# overlay/hotkeys.py
from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# action name -> pynput combo
DEFAULT_BINDINGS: Dict[str, str] = {
    "toggle": "<ctrl>+b",
    "move_up": "<ctrl>+<up>",
    "move_down": "<ctrl>+<down>",
    "move_left": "<ctrl>+<left>",
    "move_right": "<ctrl>+<right>",
    "resize_wider": "<ctrl>+<shift>+<right>",
    "resize_narrower": "<ctrl>+<shift>+<left>",
    "resize_taller": "<ctrl>+<shift>+<down>",
    "resize_shorter": "<ctrl>+<shift>+<up>",
    "capture": "<ctrl>+<shift>+s",
    "reset_question": "<ctrl>+<alt>+0",
    **{f"question_{n}": f"<ctrl>+<alt>+{n}" for n in range(1, 10)},
}


def build_actions(controller: Any) -> Dict[str, Callable[[], None]]:
    """Map every action name to the controller call it triggers."""
    actions: Dict[str, Callable[[], None]] = {
        "toggle": controller.toggle_visibility,
        "capture": controller.capture_and_send,
        "reset_question": controller.reset_question,
    }
    for direction in ("up", "down", "left", "right"):
        actions[f"move_{direction}"] = lambda d=direction: controller.move(d)
    for direction in ("wider", "narrower", "taller", "shorter"):
        actions[f"resize_{direction}"] = lambda d=direction: controller.resize(d)
    for n in range(1, 10):
        actions[f"question_{n}"] = lambda k=n: controller.set_question(k)
    return actions


def build_hotkeys(
    controller: Any,
    bindings: Optional[Dict[str, str]] = None,
    post: Optional[Callable[[Callable[[], None]], None]] = None,
) -> Dict[str, Callable[[], None]]:
    """``{combo: callback}`` ready for ``keyboard.GlobalHotKeys``.

    ``post`` forwards each callback to the GUI thread; without it the
    controller is called directly from the listener thread.
    """
    bindings = bindings or DEFAULT_BINDINGS
    actions = build_actions(controller)
    hotkeys: Dict[str, Callable[[], None]] = {}
    for name, combo in bindings.items():
        fn = actions.get(name)
        if fn is None:
            logger.warning("Unknown shortcut action %r (%s) ignored", name, combo)
            continue
        hotkeys[combo] = _wrap(fn, post)
    return hotkeys


def _wrap(fn: Callable[[], None], post: Optional[Callable[[Callable[[], None]], None]]) -> Callable[[], None]:
    def _runner() -> None:
        if post:
            post(fn)
        else:
            fn()

    return _runner


class HotkeyService:
    """Registers the global shortcuts with pynput and forwards them to Tk safely."""

    def __init__(
        self,
        controller: Any,
        bindings: Optional[Dict[str, str]] = None,
        post: Optional[Callable[[Callable[[], None]], None]] = None,
    ) -> None:
        self.hotkeys = build_hotkeys(controller, bindings, post)
        self._listener: Optional[Any] = None

    def start(self) -> bool:
        try:
            # pynput needs a display (X connection) at import time
            from pynput import keyboard

            self._listener = keyboard.GlobalHotKeys(self.hotkeys)
            self._listener.start()
        except Exception as exc:
            logger.error("Hotkey registration failed: %s", exc)
            if sys.platform == "darwin":
                logger.info("On macOS grant Accessibility permissions to the terminal running the overlay")
            self._listener = None
            return False
        logger.info("Registered %d global hotkeys", len(self.hotkeys))
        return True

    def stop(self) -> None:
        if self._listener is not None:
            self._listener.stop()
            self._listener = None
