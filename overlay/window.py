"""
window.py
~~~~~~~~~

Window state and the controller behind every overlay shortcut.

The :class:`WindowController` owns the single overlay window of the process
(through a small backend, :class:`TkWindow` in production) together with its
:class:`WindowState` and the :class:`~overlay.counter.QuestionCounter`.  All
of its methods are meant to run on the Tk thread; work started elsewhere
(captures, socket events, hotkeys) comes back through ``window.after(0, ...)``.

Visibility is driven by opacity only.  Withdrawing the window would make some
window managers drop the always-on-top layering, so "hidden" means alpha 0.
"""

from __future__ import annotations

import ctypes
import logging
import sys
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from .capture import CaptureHelper, CaptureResult
from .counter import QuestionCounter

logger = logging.getLogger(__name__)

MOVE_STEP = 50
RESIZE_STEP = 50
MIN_WIDTH = 200
MIN_HEIGHT = 150

FLASH_OPACITY = 0.5
MOVE_FLASH_MS = 150
FLASH_ITERATIONS = 6
FLASH_INTERVAL_MS = 100
KEEP_ON_TOP_MS = 1000

MOVES = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
RESIZES = {
    "wider": (1, 0),
    "narrower": (-1, 0),
    "taller": (0, 1),
    "shorter": (0, -1),
}

# Windows extended styles
GWL_EXSTYLE = -20
WS_EX_LAYERED = 0x00080000
WS_EX_TRANSPARENT = 0x00000020
WS_EX_TOOLWINDOW = 0x00000080
WS_EX_NOACTIVATE = 0x08000000
HWND_TOPMOST = -1
SWP_NOSIZE = 0x0001
SWP_NOMOVE = 0x0002
SWP_NOACTIVATE = 0x0010

TRANSPARENT_KEY = "#010101"


@dataclass
class WindowState:
    """Geometry and visibility of the overlay window."""

    x: int = 20
    y: int = 20
    width: int = 400
    height: int = 600
    opacity: float = 1.0
    visible: bool = True

    @property
    def geometry(self) -> str:
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


class TkWindow:
    """Tk backend of the controller: the actual frameless always-on-top window."""

    def __init__(self, root: Any) -> None:
        self.root = root
        self._hwnd: Optional[int] = None

    # ---- Presentation ----
    def apply_presentation_flags(self) -> None:
        self.root.overrideredirect(True)
        self.root.attributes("-topmost", True)
        try:
            if sys.platform == "win32":
                self.root.configure(bg=TRANSPARENT_KEY)
                self.root.attributes("-transparentcolor", TRANSPARENT_KEY)
            elif sys.platform == "darwin":
                self.root.attributes("-transparent", True)
                self.root.configure(bg="systemTransparent")
            else:
                self.root.configure(bg="#111111")
        except Exception as exc:
            logger.warning("Transparent background unavailable: %s", exc)
        if sys.platform == "win32":
            self._apply_win32_styles()

    def _get_hwnd(self) -> int:
        if self._hwnd:
            return self._hwnd
        self.root.update_idletasks()
        hwnd = 0
        try:
            hwnd = int(self.root.wm_frame(), 16)
        except (ValueError, TypeError):
            hwnd = 0
        self._hwnd = hwnd or self.root.winfo_id()
        return self._hwnd

    def _apply_win32_styles(self) -> None:
        """Hide from the taskbar, never take focus, let clicks fall through."""
        try:
            user32 = ctypes.windll.user32
            hwnd = self._get_hwnd()
            style = user32.GetWindowLongW(hwnd, GWL_EXSTYLE)
            style |= WS_EX_LAYERED | WS_EX_TRANSPARENT | WS_EX_TOOLWINDOW | WS_EX_NOACTIVATE
            user32.SetWindowLongW(hwnd, GWL_EXSTYLE, style)
        except Exception as exc:
            logger.warning("Could not apply click-through styles: %s", exc)

    # ---- Backend interface ----
    def set_opacity(self, alpha: float) -> None:
        self.root.attributes("-alpha", alpha)

    def set_geometry(self, state: WindowState) -> None:
        self.root.geometry(state.geometry)

    def assert_topmost(self) -> None:
        """Re-assert '-topmost' and raise the window above whatever stole focus.

        Only the stacking order is restored.  Tk has no portable call for
        cross-workspace visibility (macOS Spaces, X11 sticky state, Windows
        virtual desktops), so the window stays on the workspace it was
        created on.
        """
        self.root.attributes("-topmost", True)
        self.root.lift()
        if sys.platform == "win32":
            try:
                ctypes.windll.user32.SetWindowPos(
                    self._get_hwnd(), HWND_TOPMOST, 0, 0, 0, 0,
                    SWP_NOMOVE | SWP_NOSIZE | SWP_NOACTIVATE,
                )
            except Exception as exc:
                logger.debug("SetWindowPos failed: %s", exc)

    def after(self, ms: int, fn: Callable[[], None]) -> Any:
        return self.root.after(ms, fn)

    def after_cancel(self, handle: Any) -> None:
        self.root.after_cancel(handle)


def _run_in_thread(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, daemon=True).start()


class WindowController:
    """Every shortcut-triggered mutation of the overlay window.

    Attributes
    ----------
    window:
        Backend exposing ``set_opacity``, ``set_geometry``, ``assert_topmost``,
        ``after`` and ``after_cancel``.
    state: WindowState
        Current geometry and opacity.  Only this controller mutates it.
    counter: QuestionCounter
        Question number shown on the overlay.
    capture: CaptureHelper | None
        Screenshot helper used by :meth:`capture_and_send`.
    on_counter_changed: callable
        Receives the new counter value once an update is acknowledged.
    """

    def __init__(
        self,
        window: Any,
        state: Optional[WindowState] = None,
        counter: Optional[QuestionCounter] = None,
        capture: Optional[CaptureHelper] = None,
        on_counter_changed: Optional[Callable[[int], None]] = None,
        capture_flash: bool = True,
        run_in_background: Callable[[Callable[[], None]], None] = _run_in_thread,
    ) -> None:
        self.window = window
        self.state = state or WindowState()
        self.counter = counter or QuestionCounter()
        self.capture = capture
        self.on_counter_changed = on_counter_changed
        self.capture_flash = capture_flash
        self._run_in_background = run_in_background

        self._visible_opacity = self.state.opacity or 1.0
        self._flash_restore: Optional[float] = None
        self._flash_token = 0
        self._keep_on_top_handle: Any = None

    # ---- Low level ----
    def _set_opacity(self, alpha: float) -> None:
        self.state.opacity = alpha
        self.window.set_opacity(alpha)

    def _apply_geometry(self) -> None:
        self.window.set_geometry(self.state)

    def _push_counter(self) -> None:
        if self.on_counter_changed:
            self.on_counter_changed(self.counter.value)

    def snapshot(self) -> WindowState:
        return replace(self.state)

    def show(self) -> None:
        """Apply the whole state once, right after the window is created."""
        self._apply_geometry()
        self._set_opacity(self.state.opacity)
        self._push_counter()

    # ---- Visibility ----
    def toggle_visibility(self) -> None:
        # Un flash en cours rendrait l'opacité courante trompeuse
        current = self._flash_restore if self._flash_restore is not None else self.state.opacity
        self._cancel_flash()
        if current > 0:
            self._visible_opacity = current
            self._set_opacity(0.0)
            self.state.visible = False
        else:
            self._set_opacity(self._visible_opacity)
            self.state.visible = True
        logger.debug("Overlay visible=%s", self.state.visible)

    def flash(
        self,
        iterations: int = FLASH_ITERATIONS,
        interval_ms: int = FLASH_INTERVAL_MS,
        on_done: Optional[Callable[[], None]] = None,
    ) -> None:
        """Alternate opacity ``iterations`` times, then restore the prior opacity."""
        if self._flash_restore is None:
            self._flash_restore = self.state.opacity
        restore = self._flash_restore
        self._flash_token += 1
        token = self._flash_token

        def step(i: int) -> None:
            if token != self._flash_token:
                # remplacé par un flash plus récent ou un toggle
                if on_done:
                    on_done()
                return
            if i >= iterations:
                self._flash_restore = None
                self._set_opacity(restore)
                if on_done:
                    on_done()
                return
            self._set_opacity(FLASH_OPACITY if i % 2 == 0 else restore)
            self.window.after(interval_ms, lambda: step(i + 1))

        step(0)

    def _cancel_flash(self) -> None:
        if self._flash_restore is not None:
            self._set_opacity(self._flash_restore)
        self._flash_restore = None
        self._flash_token += 1

    # ---- Geometry ----
    def move(self, direction: str) -> None:
        delta = MOVES.get(direction)
        if delta is None:
            logger.debug("Unknown move direction %r", direction)
            return
        self.state.x += delta[0] * MOVE_STEP
        self.state.y += delta[1] * MOVE_STEP
        self._apply_geometry()
        self.flash(iterations=1, interval_ms=MOVE_FLASH_MS)

    def resize(self, direction: str) -> None:
        delta = RESIZES.get(direction)
        if delta is None:
            logger.debug("Unknown resize direction %r", direction)
            return
        self.state.width = max(MIN_WIDTH, self.state.width + delta[0] * RESIZE_STEP)
        self.state.height = max(MIN_HEIGHT, self.state.height + delta[1] * RESIZE_STEP)
        self._apply_geometry()

    # ---- Question counter ----
    def set_question(self, k: object) -> None:
        value = self.counter.set(k)
        logger.info("Question set to %s", value)
        self.flash(on_done=self._push_counter)

    def reset_question(self) -> None:
        self.counter.reset()
        logger.info("Question reset to 1")
        self.flash(on_done=self._push_counter)

    # ---- Capture ----
    def capture_and_send(self) -> None:
        if self.capture is None:
            logger.warning("Capture requested but no capture helper is configured")
            return
        question = self.counter.value
        if self.capture_flash:
            self.flash(iterations=2, interval_ms=FLASH_INTERVAL_MS)
        self._run_in_background(lambda: self._capture_worker(question))

    def _capture_worker(self, question: int) -> None:
        result = self.capture.run(question)
        # retour sur le thread Tk
        self.window.after(0, lambda: self._on_capture_done(result))

    def _on_capture_done(self, result: CaptureResult) -> None:
        if not result.ok:
            logger.warning("Capture of question %s not sent: %s", result.question, result.error)
            return
        self.counter.advance()
        logger.info("Question %s done (%s), now on %s", result.question, result.mode, self.counter.value)
        self._push_counter()

    # ---- Always on top ----
    def start(self) -> None:
        self.stop()
        self._keep_on_top_handle = self.window.after(KEEP_ON_TOP_MS, self._keep_on_top)

    def stop(self) -> None:
        if self._keep_on_top_handle is not None:
            try:
                self.window.after_cancel(self._keep_on_top_handle)
            except Exception as exc:
                logger.debug("after_cancel failed: %s", exc)
            self._keep_on_top_handle = None

    def _keep_on_top(self) -> None:
        try:
            self.window.assert_topmost()
        except Exception as exc:
            logger.warning("Could not re-assert always-on-top: %s", exc)
        self._keep_on_top_handle = self.window.after(KEEP_ON_TOP_MS, self._keep_on_top)
