# tests/test_capture.py
import smtplib
from datetime import datetime

import pytest

from overlay.capture import CaptureHelper
from overlay.config import OverlayConfig


class FakeImage:
    def save(self, path, fmt):
        assert fmt == "PNG"
        with open(path, "wb") as f:
            f.write(b"\x89PNGfake")


class FakeSMTP:
    """Remplace smtplib.SMTP_SSL : garde les appels pour inspection."""

    instances = []

    def __init__(self, host, port, **kwargs):
        self.host, self.port, self.kwargs = host, port, kwargs
        self.logins = []
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def login(self, user, password):
        self.logins.append((user, password))

    def send_message(self, msg):
        self.sent.append(msg)


class FailingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture(autouse=True)
def _reset_smtp():
    FakeSMTP.instances.clear()


def _config(tmp_path, **kw):
    base = dict(CAPTURE_DIR=str(tmp_path / "shots"), CAPTURE_MODE="save")
    base.update(kw)
    return OverlayConfig(**base)


def _email_config(tmp_path, **kw):
    return _config(
        tmp_path,
        CAPTURE_MODE="email",
        EMAIL_USER="me@example.com",
        EMAIL_PASS="secret",
        EMAIL_RECIPIENT="you@example.com",
        **kw,
    )


def _helper(config, scheduled, **kw):
    kw.setdefault("grab", FakeImage)
    kw.setdefault("smtp_factory", FakeSMTP)
    return CaptureHelper(config, schedule=lambda d, fn: scheduled.append((d, fn)), **kw)


def test_capture_path_format(tmp_path):
    h = _helper(_config(tmp_path), [])
    p = h.capture_path(3, now=datetime(2024, 1, 2, 3, 4, 5))
    assert p.name == "question_3_20240102-030405.png"
    assert p.parent == tmp_path / "shots"


def test_save_mode_keeps_file(tmp_path):
    scheduled = []
    h = _helper(_config(tmp_path), scheduled)
    res = h.run(2)
    assert res.ok and res.mode == "save" and res.question == 2
    assert res.path.exists()
    assert res.path.name.startswith("question_2_")
    assert scheduled == []
    assert FakeSMTP.instances == []


def test_email_mode_sends_and_schedules_cleanup(tmp_path):
    scheduled = []
    h = _helper(_email_config(tmp_path), scheduled)
    res = h.run(4)
    assert res.ok and res.mode == "email"

    smtp = FakeSMTP.instances[0]
    assert (smtp.host, smtp.port) == ("smtp.gmail.com", 465)
    assert smtp.kwargs == {}
    assert smtp.logins == [("me@example.com", "secret")]
    msg = smtp.sent[0]
    assert msg["Subject"] == "Question 4"
    assert msg["To"] == "you@example.com"
    attachments = list(msg.iter_attachments())
    assert attachments[0].get_filename() == res.path.name
    assert attachments[0].get_content_type() == "image/png"

    # fichier temporaire supprimé seulement après le délai
    assert res.path.exists()
    delay, fn = scheduled[0]
    assert delay == h.cleanup_delay_s
    fn()
    assert not res.path.exists()


def test_email_timeout_is_passed_when_configured(tmp_path):
    h = _helper(_email_config(tmp_path, SMTP_TIMEOUT_S=12), [])
    assert h.run(1).ok
    assert FakeSMTP.instances[0].kwargs == {"timeout": 12}


def test_email_not_configured(tmp_path):
    grabbed = []
    cfg = _config(tmp_path, CAPTURE_MODE="email")
    h = _helper(cfg, [], grab=lambda: grabbed.append(1) or FakeImage())
    res = h.run(1)
    assert not res.ok
    assert res.error == "email not configured"
    assert grabbed == []


def test_smtp_failure_is_reported_not_raised(tmp_path):
    scheduled = []
    h = _helper(_email_config(tmp_path), scheduled, smtp_factory=FailingSMTP)
    res = h.run(7)
    assert not res.ok
    assert "SMTP" in res.error
    assert len(scheduled) == 1


def test_grab_failure_is_reported(tmp_path):
    def broken():
        raise OSError("no display")

    res = _helper(_config(tmp_path), [], grab=broken).run(1)
    assert not res.ok
    assert "no display" in res.error


def test_cleanup_missing_file_is_silent(tmp_path):
    h = _helper(_config(tmp_path), [])
    h.cleanup(tmp_path / "missing.png")
