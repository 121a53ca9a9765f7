"""Copying text to the clipboard through the terminal."""

from __future__ import annotations

import sys

from llmtools.crypto import base64_encode


class ClipboardError(RuntimeError):
    """Raised when text cannot be copied to the clipboard."""


def osc52_sequence(text: str) -> str:
    """The OSC 52 escape sequence that sets the clipboard to ``text``."""
    return f"\x1b]52;c;{base64_encode(text)}\x07"


def _send_osc52(text: str) -> None:
    sequence = osc52_sequence(text)
    try:
        sys.stdout.write(sequence)
    except (OSError, ValueError) as err:
        raise ClipboardError("Failed to send OSC52 sequence") from err
    try:
        sys.stdout.flush()
    except (OSError, ValueError) as err:
        raise ClipboardError("Failed to flush OSC52 sequence") from err


def set_text(text: str) -> None:
    """Copy ``text`` to the clipboard using the OSC 52 terminal sequence."""
    try:
        _send_osc52(text)
    except ClipboardError as err:
        raise ClipboardError(f"Failed to copy (OSC52 error: {err})") from ClipboardError(
            "No clipboard available"
        )