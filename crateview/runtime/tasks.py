"""Single-flight background tasks with a readable latest-result handle."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, Generic, Optional, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

_SEQUENCE = count(1)


class TaskState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class TaskInstance(Generic[T]):
    """One execution of a background task shared by every caller that joined it."""

    task_name: str
    key: Hashable
    seq: int
    future: "asyncio.Future[T]" = field(repr=False)

    @property
    def is_running(self) -> bool:
        return not self.future.done()

    @property
    def is_finished(self) -> bool:
        return self.future.done()

    @property
    def is_successful(self) -> bool:
        return self.future.done() and not self.future.cancelled() and self.future.exception() is None

    @property
    def is_error(self) -> bool:
        return self.future.done() and not self.is_successful

    @property
    def value(self) -> Optional[T]:
        """Resolved result, or ``None`` while running or after a failure."""

        if self.is_successful:
            return self.future.result()
        return None

    @property
    def error(self) -> Optional[BaseException]:
        if not self.future.done():
            return None
        if self.future.cancelled():
            return asyncio.CancelledError()
        return self.future.exception()


class BackgroundTask(Generic[T]):
    """Runs ``func`` with at most one in-flight execution per dedup key.

    A ``perform`` issued while an execution with the same key is running joins
    that execution and resolves to its outcome. The key defaults to the task
    itself; ``key_func`` can split a task into independent slots (e.g. a
    forced reload versus a plain load). Failures are not cached: the next
    ``perform`` after a failed execution starts a new one.
    """

    def __init__(
        self,
        name: str,
        func: Callable[..., Awaitable[T]],
        *,
        key_func: Optional[Callable[..., Hashable]] = None,
    ) -> None:
        self.name = name
        self._func = func
        self._key_func = key_func
        self._inflight: Dict[Hashable, TaskInstance[T]] = {}
        self._last: Optional[TaskInstance[T]] = None
        self._last_successful: Optional[TaskInstance[T]] = None
        self._perform_count = 0

    @property
    def last(self) -> Optional[TaskInstance[T]]:
        """Most recently started execution, finished or not."""

        return self._last

    @property
    def last_successful(self) -> Optional[TaskInstance[T]]:
        """Most recently started execution that completed successfully."""

        return self._last_successful

    @property
    def is_running(self) -> bool:
        return any(instance.is_running for instance in self._inflight.values())

    @property
    def perform_count(self) -> int:
        """Number of executions actually started (joined calls excluded)."""

        return self._perform_count

    def state(self, *args: Any, **kwargs: Any) -> TaskState:
        key = self._key(args, kwargs)
        instance = self._inflight.get(key)
        if instance is not None and instance.is_running:
            return TaskState.RUNNING
        if self._last is None:
            return TaskState.IDLE
        return TaskState.COMPLETED

    async def perform(self, *args: Any, **kwargs: Any) -> T:
        instance = self.start(*args, **kwargs)
        # Shield so a cancelled caller does not cancel the shared execution.
        return await asyncio.shield(instance.future)

    def start(self, *args: Any, **kwargs: Any) -> TaskInstance[T]:
        """Start (or join) an execution without awaiting it."""

        key = self._key(args, kwargs)
        existing = self._inflight.get(key)
        if existing is not None and existing.is_running:
            LOGGER.debug("Joining in-flight %s execution seq=%s key=%r", self.name, existing.seq, key)
            return existing

        future: asyncio.Future[T] = asyncio.ensure_future(self._func(*args, **kwargs))
        instance: TaskInstance[T] = TaskInstance(
            task_name=self.name,
            key=key,
            seq=next(_SEQUENCE),
            future=future,
        )
        self._inflight[key] = instance
        self._last = instance
        self._perform_count += 1
        LOGGER.debug("Started %s execution seq=%s key=%r", self.name, instance.seq, key)
        future.add_done_callback(lambda _fut: self._on_done(instance))
        return instance

    def _on_done(self, instance: TaskInstance[T]) -> None:
        if self._inflight.get(instance.key) is instance:
            self._inflight.pop(instance.key, None)
        if instance.future.cancelled():
            LOGGER.debug("%s execution seq=%s cancelled", self.name, instance.seq)
            return
        exc = instance.future.exception()
        if exc is not None:
            LOGGER.debug("%s execution seq=%s failed: %s", self.name, instance.seq, exc)
            return
        current = self._last_successful
        if current is None or instance.seq > current.seq:
            self._last_successful = instance

    def _key(self, args: tuple[Any, ...], kwargs: Dict[str, Any]) -> Hashable:
        if self._key_func is None:
            return self.name
        return self._key_func(*args, **kwargs)
