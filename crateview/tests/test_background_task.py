import asyncio

import pytest

from crateview.runtime import BackgroundTask, TaskState


class _Gate:
    """Coroutine factory whose executions block until released."""

    def __init__(self) -> None:
        self.calls = []
        self.outcomes = {}
        self._events = []

    async def __call__(self, *args, **kwargs):
        event = asyncio.Event()
        index = len(self.calls)
        self.calls.append((args, kwargs))
        self._events.append(event)
        await event.wait()
        outcome = self.outcomes.get(index, f"result-{index}")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def release(self, index: int) -> None:
        self._events[index].set()


async def _wait_for(predicate, *, timeout: float = 0.5, interval: float = 0.001) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return predicate()


@pytest.mark.asyncio
async def test_concurrent_performs_share_one_execution():
    gate = _Gate()
    task = BackgroundTask("demo", gate)

    first = asyncio.create_task(task.perform())
    second = asyncio.create_task(task.perform())
    assert await _wait_for(lambda: len(gate.calls) == 1)
    assert task.state() is TaskState.RUNNING

    gate.release(0)
    results = await asyncio.gather(first, second)

    assert results == ["result-0", "result-0"]
    assert task.perform_count == 1
    assert task.state() is TaskState.COMPLETED
    assert task.last is task.last_successful
    assert task.last.value == "result-0"


@pytest.mark.asyncio
async def test_perform_after_completion_starts_new_execution():
    gate = _Gate()
    task = BackgroundTask("demo", gate)
    assert task.state() is TaskState.IDLE
    assert task.last is None

    pending = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 1)
    gate.release(0)
    assert await pending == "result-0"

    pending = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 2)
    gate.release(1)
    assert await pending == "result-1"
    assert task.perform_count == 2
    assert task.last_successful.value == "result-1"


@pytest.mark.asyncio
async def test_failure_reaches_every_joined_caller_and_is_not_cached():
    gate = _Gate()
    gate.outcomes = {0: RuntimeError("boom")}
    task = BackgroundTask("demo", gate)

    first = asyncio.create_task(task.perform())
    second = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 1)
    gate.release(0)
    results = await asyncio.gather(first, second, return_exceptions=True)

    assert all(isinstance(result, RuntimeError) for result in results)
    assert task.last.is_error
    assert isinstance(task.last.error, RuntimeError)
    assert task.last.value is None
    assert task.last_successful is None

    retry = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 2)
    gate.release(1)
    assert await retry == "result-1"
    assert task.last_successful is task.last


@pytest.mark.asyncio
async def test_last_successful_survives_a_later_failure():
    gate = _Gate()
    gate.outcomes = {1: ValueError("nope")}
    task = BackgroundTask("demo", gate)

    pending = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 1)
    gate.release(0)
    await pending

    pending = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 2)
    gate.release(1)
    with pytest.raises(ValueError):
        await pending

    assert task.last.is_error
    assert task.last_successful.value == "result-0"


@pytest.mark.asyncio
async def test_key_func_splits_dedup_slots():
    gate = _Gate()
    task = BackgroundTask("demo", gate, key_func=lambda reload=False: reload)

    plain_a = asyncio.create_task(task.perform(reload=False))
    plain_b = asyncio.create_task(task.perform(reload=False))
    forced = asyncio.create_task(task.perform(reload=True))
    assert await _wait_for(lambda: len(gate.calls) == 2)
    assert task.state(reload=True) is TaskState.RUNNING

    gate.release(1)
    assert await forced == "result-1"
    assert task.state(reload=True) is TaskState.COMPLETED
    assert task.state(reload=False) is TaskState.RUNNING

    gate.release(0)
    assert await asyncio.gather(plain_a, plain_b) == ["result-0", "result-0"]
    # last tracks the most recently started execution, not the last to finish
    assert task.last.value == "result-1"
    assert task.last_successful.value == "result-1"


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_execution():
    gate = _Gate()
    task = BackgroundTask("demo", gate)

    impatient = asyncio.create_task(task.perform())
    patient = asyncio.create_task(task.perform())
    await _wait_for(lambda: len(gate.calls) == 1)

    impatient.cancel()
    with pytest.raises(asyncio.CancelledError):
        await impatient

    gate.release(0)
    assert await patient == "result-0"
    assert task.last.is_successful
