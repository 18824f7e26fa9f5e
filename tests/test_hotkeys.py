# tests/test_hotkeys.py
from unittest.mock import Mock

from overlay.hotkeys import DEFAULT_BINDINGS, build_actions, build_hotkeys


def test_every_binding_has_an_action():
    actions = build_actions(Mock())
    assert set(DEFAULT_BINDINGS) == set(actions)
    assert len(DEFAULT_BINDINGS) == 20


def test_combos_dispatch_to_controller():
    ctl = Mock()
    hotkeys = build_hotkeys(ctl)
    hotkeys["<ctrl>+b"]()
    hotkeys["<ctrl>+<left>"]()
    hotkeys["<ctrl>+<shift>+<up>"]()
    hotkeys["<ctrl>+<alt>+5"]()
    hotkeys["<ctrl>+<alt>+0"]()
    hotkeys["<ctrl>+<shift>+s"]()
    ctl.toggle_visibility.assert_called_once_with()
    ctl.move.assert_called_once_with("left")
    ctl.resize.assert_called_once_with("shorter")
    ctl.set_question.assert_called_once_with(5)
    ctl.reset_question.assert_called_once_with()
    ctl.capture_and_send.assert_called_once_with()


def test_callbacks_are_posted():
    ctl = Mock()
    posted = []
    hotkeys = build_hotkeys(ctl, post=posted.append)
    hotkeys["<ctrl>+<down>"]()
    ctl.move.assert_not_called()
    posted[0]()
    ctl.move.assert_called_once_with("down")


def test_unknown_action_is_skipped():
    hotkeys = build_hotkeys(Mock(), bindings={"toggle": "<ctrl>+t", "explode": "<ctrl>+x"})
    assert list(hotkeys) == ["<ctrl>+t"]
