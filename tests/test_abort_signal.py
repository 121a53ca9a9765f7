import asyncio
import threading

import pytest

from llmtools.abort_signal import AbortSignal, create_abort_signal, wait_abort_signal


def test_new_signal_is_not_aborted():
    signal = create_abort_signal()
    assert isinstance(signal, AbortSignal)
    assert signal.aborted() is False
    assert signal.aborted_ctrlc() is False
    assert signal.aborted_ctrld() is False


def test_ctrlc_sets_only_ctrlc():
    signal = create_abort_signal()
    signal.set_ctrlc()
    assert signal.aborted() is True
    assert signal.aborted_ctrlc() is True
    assert signal.aborted_ctrld() is False


def test_ctrld_sets_only_ctrld():
    signal = create_abort_signal()
    signal.set_ctrld()
    assert signal.aborted() is True
    assert signal.aborted_ctrld() is True
    assert signal.aborted_ctrlc() is False


def test_reset_clears_both():
    signal = create_abort_signal()
    signal.set_ctrlc()
    signal.set_ctrld()
    signal.reset()
    assert signal.aborted() is False


def test_signals_are_independent():
    first = create_abort_signal()
    second = create_abort_signal()
    first.set_ctrlc()
    assert second.aborted() is False


def test_set_from_other_thread():
    signal = create_abort_signal()
    worker = threading.Thread(target=signal.set_ctrld)
    worker.start()
    worker.join()
    assert signal.aborted_ctrld() is True


@pytest.mark.asyncio
async def test_wait_returns_after_signal():
    signal = create_abort_signal()

    async def trigger():
        await asyncio.sleep(0.05)
        signal.set_ctrlc()

    task = asyncio.create_task(trigger())
    await asyncio.wait_for(wait_abort_signal(signal), timeout=2)
    await task
    assert signal.aborted_ctrlc() is True


@pytest.mark.asyncio
async def test_wait_blocks_without_signal():
    signal = create_abort_signal()
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(wait_abort_signal(signal), timeout=0.1)


@pytest.mark.asyncio
async def test_wait_returns_immediately_when_already_set():
    signal = create_abort_signal()
    signal.set_ctrld()
    await asyncio.wait_for(wait_abort_signal(signal), timeout=0.5)
    assert signal.aborted() is True