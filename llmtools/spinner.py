"""Terminal spinner shown while waiting for long-running work."""

from __future__ import annotations

import asyncio
import contextlib
import queue
import signal
import sys
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, TextIO, TypeVar

from llmtools.abort_signal import AbortSignal, wait_abort_signal
from llmtools.text import is_stdout_terminal

T = TypeVar("T")

MOVE_TO_COLUMN_0 = "\x1b[1G"
CURSOR_HIDE = "\x1b[?25l"
CURSOR_SHOW = "\x1b[?25h"
CLEAR_FROM_CURSOR_DOWN = "\x1b[J"

_TICK_INTERVAL = 0.05
_POLL_INTERVAL = 0.025
_SEND_PAUSE = 0.01
_STOP_TIMEOUT = 1.0


class AbortedError(RuntimeError):
    """Raised when the user aborts a task that runs under a spinner."""


class SpinnerState:
    """Frame counter and message of a spinner, drawn on a terminal stream."""

    FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

    def __init__(self, stream: TextIO | None = None) -> None:
        self.index = 0
        self.message = ""
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _is_terminal(self) -> bool:
        if self._stream is None:
            return is_stdout_terminal()
        try:
            return bool(self._stream.isatty())
        except (AttributeError, ValueError):
            return False

    def step(self) -> None:
        """Draw the next frame."""
        if not self._is_terminal() or not self.message:
            return
        writer = self.stream
        frame = self.FRAMES[self.index % len(self.FRAMES)]
        dots = "." * ((self.index // 5) % 4)
        writer.write(f"{MOVE_TO_COLUMN_0}{frame}{self.message}{dots:<3}")
        if self.index == 0:
            writer.write(CURSOR_HIDE)
        writer.flush()
        self.index += 1

    def set_message(self, message: str) -> None:
        self.clear_message()
        if message:
            self.message = f" {message}"

    def clear_message(self) -> None:
        """Erase the spinner line and show the cursor again."""
        if not self._is_terminal() or not self.message:
            return
        self.message = ""
        writer = self.stream
        writer.write(f"{MOVE_TO_COLUMN_0}{CLEAR_FROM_CURSOR_DOWN}{CURSOR_SHOW}")
        writer.flush()


@dataclass(frozen=True)
class _SetMessage:
    message: str


class _Stop:
    pass


class Spinner:
    """A spinner animated by a background thread."""

    def __init__(self, message: str, stream: TextIO | None = None) -> None:
        self._events: queue.Queue[_SetMessage | _Stop] = queue.Queue()
        self._closed = threading.Event()
        self._state = SpinnerState(stream)
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._events.put(_SetMessage(message))
        self._thread.start()

    def _run(self) -> None:
        try:
            next_tick = time.monotonic()
            while True:
                timeout = max(0.0, next_tick - time.monotonic())
                try:
                    event = self._events.get(timeout=timeout)
                except queue.Empty:
                    with contextlib.suppress(OSError, ValueError):
                        self._state.step()
                    next_tick += _TICK_INTERVAL
                    continue
                if isinstance(event, _Stop):
                    self._state.clear_message()
                    break
                self._state.set_message(event.message)
        finally:
            self._closed.set()

    def set_message(self, message: str) -> None:
        """Replace the message; raises RuntimeError once the spinner has stopped."""
        if self._closed.is_set():
            raise RuntimeError("The spinner has stopped")
        self._events.put(_SetMessage(message))
        time.sleep(_SEND_PAUSE)

    def stop(self) -> None:
        """Stop the animation and erase the spinner line."""
        if self._closed.is_set():
            return
        self._events.put(_Stop())
        self._closed.wait(_STOP_TIMEOUT)


def spawn_spinner(message: str) -> Spinner:
    """Start a spinner on standard output."""
    return Spinner(message)


async def _run_abortable_spinner(
    message: str, done: asyncio.Event, abort_signal: AbortSignal
) -> None:
    state = SpinnerState()
    pending = [message]
    while not abort_signal.aborted():
        await asyncio.sleep(_POLL_INTERVAL)
        if done.is_set():
            break
        if pending:
            state.set_message(pending.pop())
        state.step()
    state.clear_message()


async def abortable_run_with_spinner(
    task: Awaitable[T], message: str, abort_signal: AbortSignal
) -> T:
    """Await ``task`` with a spinner shown; raise AbortedError if the user aborts.

    Without a terminal the task is simply awaited.
    """
    if not is_stdout_terminal():
        return await task

    loop = asyncio.get_running_loop()
    ctrlc_pressed = False

    def on_sigint() -> None:
        nonlocal ctrlc_pressed
        ctrlc_pressed = True
        abort_signal.set_ctrlc()

    handler_installed = False
    with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
        loop.add_signal_handler(signal.SIGINT, on_sigint)
        handler_installed = True

    task_future = asyncio.ensure_future(task)
    done = asyncio.Event()
    spinner = asyncio.create_task(_run_abortable_spinner(message, done, abort_signal))
    abort_watch = asyncio.create_task(wait_abort_signal(abort_signal))
    try:
        await asyncio.wait({task_future, abort_watch}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        done.set()
        abort_watch.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await abort_watch
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
        if not task_future.done():
            task_future.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task_future
        await spinner

    if task_future.done() and not task_future.cancelled():
        return task_future.result()
    raise AbortedError("Aborted!" if ctrlc_pressed else "Aborted.")