"""Cancellation and deadline scope for API calls.

Every API call takes a ``Context``. Cancelling it, or letting its deadline
pass, aborts the in-flight network operation and surfaces a
``ContextCancelledError`` or ``DeadlineExceededError`` instead of the
low-level transport failure.

Example:
    ```python
    from sysdig_client import Context

    ctx = Context.with_timeout(10)
    me = await client.users.me(ctx)
    ```
"""

import asyncio
import contextlib
import time
from collections.abc import Awaitable
from typing import TypeVar

from sysdig_client.errors.exceptions import ContextCancelledError, ContextError, DeadlineExceededError

T = TypeVar("T")


class Context:
    """Caller-supplied cancellation and timeout scope.

    Args:
        deadline: Absolute ``time.monotonic()`` value after which the context
            is done. ``None`` means no deadline.
    """

    def __init__(self, *, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = asyncio.Event()

    @classmethod
    def background(cls) -> "Context":
        """A context that is never cancelled and has no deadline."""
        return cls()

    @classmethod
    def with_timeout(cls, timeout: float) -> "Context":
        """A context whose deadline is ``timeout`` seconds from now."""
        return cls(deadline=time.monotonic() + timeout)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> ContextError | None:
        """The reason this context is done, or None while it is still live."""
        if self._cancelled.is_set():
            return ContextCancelledError("context canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError("context deadline exceeded")
        return None

    def done(self) -> bool:
        return self.err() is not None

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless this context ends first.

        When the context is cancelled or its deadline passes before the
        awaitable completes, the awaitable is cancelled and the context error
        is raised. Exceptions from the awaitable itself propagate unchanged.
        """
        if (error := self.err()) is not None:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise error

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._cancelled.wait())
        try:
            await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        if not task.cancelled():
            return task.result()
        raise self.err() or DeadlineExceededError("context deadline exceeded")
