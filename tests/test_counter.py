# tests/test_counter.py
import pytest

from overlay.counter import QuestionCounter


@pytest.mark.parametrize("k", range(1, 10))
def test_set_then_read(k):
    c = QuestionCounter()
    assert c.set(k) == k
    assert c.value == k


@pytest.mark.parametrize("bad", [0, -3, "4", 2.0, None, True])
def test_invalid_values_reset(bad):
    c = QuestionCounter()
    c.set(5)
    assert c.set(bad) == 1
    assert c.value == 1


def test_set_accepts_any_positive_int():
    c = QuestionCounter()
    assert c.set(12) == 12
    assert c.set(1000) == 1000
    assert c.advance() == 1001


def test_reset_and_advance():
    c = QuestionCounter()
    c.set(7)
    assert c.reset() == 1
    assert c.advance() == 2
    assert c.advance() == 3
    assert int(c) == 3


def test_start_value_must_be_positive():
    assert QuestionCounter(0).value == 1
    assert QuestionCounter(12).value == 12
