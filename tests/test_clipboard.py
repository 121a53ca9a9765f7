import sys

import pytest

from llmtools.clipboard import ClipboardError, osc52_sequence, set_text
from llmtools.crypto import base64_decode


def _payload(sequence):
    assert sequence.startswith("\x1b]52;c;")
    assert sequence.endswith("\x07")
    return sequence[len("\x1b]52;c;") : -1]


def test_sequence_round_trips_text():
    text = "hello, wörld\nsecond line"
    payload = _payload(osc52_sequence(text))
    assert base64_decode(payload).decode("utf-8") == text


def test_sequence_for_empty_text():
    assert osc52_sequence("") == "\x1b]52;c;\x07"


def test_set_text_writes_sequence(capsys):
    set_text("copy me")
    captured = capsys.readouterr()
    assert captured.out == osc52_sequence("copy me")


class _BrokenStream:
    def write(self, data):
        raise OSError("closed")

    def flush(self):
        raise OSError("closed")


def test_set_text_failure(monkeypatch):
    monkeypatch.setattr(sys, "stdout", _BrokenStream())
    with pytest.raises(ClipboardError) as info:
        set_text("x")
    assert str(info.value) == "Failed to copy (OSC52 error: Failed to send OSC52 sequence)"
    assert str(info.value.__cause__) == "No clipboard available"