"""
Desktop overlay of the relay.

This package contains the always-on-top window that displays whatever the
sender page pushes through the relay.  The window is frameless, transparent
and click-through, so it can stay over any application.  It subscribes to the
relay's ``message`` event with python-socketio and is driven entirely by
global keyboard shortcuts (pynput): hide, move, resize, capture the screen
and set the question number.

Tkinter ships with Python, so no additional GUI framework is required.  See
``overlay/app.py`` for the entry point and ``overlay/window.py`` for the
shortcut behaviour.
"""
