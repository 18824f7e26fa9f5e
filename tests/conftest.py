# tests/conftest.py
import pytest

from relay import create_app
from relay.core.extensions import socketio


@pytest.fixture(autouse=True)
def _no_env_side_effects(monkeypatch):
    # Neutralise la config locale (.env / shell) pendant les tests
    for k in (
        "SERVER_URL", "RENDER_URL", "CAPTURE_MODE", "CAPTURE_DIR", "CAPTURE_FLASH",
        "EMAIL_USER", "EMAIL_PASS", "EMAIL_RECIPIENT", "SMTP_HOST", "SMTP_PORT", "SMTP_TIMEOUT_S",
        "OVERLAY_WIDTH", "OVERLAY_HEIGHT", "OVERLAY_X", "OVERLAY_Y",
    ):
        monkeypatch.delenv(k, raising=False)


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SOCKETIO_MODE": "threading"})


@pytest.fixture
def http(app):
    return app.test_client()


@pytest.fixture
def connect(app):
    """
    Fabrique de clients Socket.IO de test.
    Usage:
      a = connect(); b = connect()
    Tous les clients encore connectés sont fermés en fin de test.
    """
    clients = []

    def _connect():
        c = socketio.test_client(app)
        assert c.is_connected()
        clients.append(c)
        return c

    yield _connect

    for c in clients:
        if c.is_connected():
            c.disconnect()


class FakeWindow:
    """Backend de fenêtre sans Tk : enregistre tout, exécute les after() à la demande."""

    def __init__(self):
        self.opacities = []
        self.geometries = []
        self.pending = []
        self.cancelled = []
        self.topmost_calls = 0
        self._next_handle = 0

    def set_opacity(self, alpha):
        self.opacities.append(alpha)

    def set_geometry(self, state):
        self.geometries.append(state.geometry)

    def assert_topmost(self):
        self.topmost_calls += 1

    def after(self, ms, fn):
        self._next_handle += 1
        self.pending.append((self._next_handle, ms, fn))
        return self._next_handle

    def after_cancel(self, handle):
        self.cancelled.append(handle)
        self.pending = [p for p in self.pending if p[0] != handle]

    def run_pending(self, limit=100):
        ran = 0
        while self.pending and ran < limit:
            _, _, fn = self.pending.pop(0)
            fn()
            ran += 1
        return ran


@pytest.fixture
def fake_window():
    return FakeWindow()
