"""A shared flag recording whether the user asked to abort."""

from __future__ import annotations

import asyncio
import threading

_POLL_INTERVAL = 0.025


class AbortSignal:
    """Thread-safe record of Ctrl-C and Ctrl-D abort requests."""

    def __init__(self) -> None:
        self._ctrlc = threading.Event()
        self._ctrld = threading.Event()

    def aborted(self) -> bool:
        return self.aborted_ctrlc() or self.aborted_ctrld()

    def aborted_ctrlc(self) -> bool:
        return self._ctrlc.is_set()

    def aborted_ctrld(self) -> bool:
        return self._ctrld.is_set()

    def reset(self) -> None:
        self._ctrlc.clear()
        self._ctrld.clear()

    def set_ctrlc(self) -> None:
        self._ctrlc.set()

    def set_ctrld(self) -> None:
        self._ctrld.set()


def create_abort_signal() -> AbortSignal:
    return AbortSignal()


async def wait_abort_signal(abort_signal: AbortSignal) -> None:
    """Return once ``abort_signal`` has been set."""
    while not abort_signal.aborted():
        await asyncio.sleep(_POLL_INTERVAL)