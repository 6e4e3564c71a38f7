"""
Debounce primitive.

A Debouncer delays a function until a quiet period has elapsed since the
last call. Each call cancels the pending invocation and schedules a new one
with the latest arguments, so at most one invocation is ever pending.

Scheduling is delegated to any object with a ``call_later(seconds,
callback)`` method returning a handle with ``cancel()``. An asyncio event
loop satisfies this and is the default.
"""

import asyncio
from typing import Any, Callable


class Debouncer:
    """
    Coalesces rapid calls into a single delayed invocation.

    Attributes:
        fn: Function invoked once calls go quiet
        delay_ms: Quiet period in milliseconds
    """

    def __init__(self, fn: Callable[..., Any], delay_ms: int, scheduler: Any = None):
        """
        Initialize the debouncer.

        Args:
            fn: Function to debounce
            delay_ms: Quiet period in milliseconds
            scheduler: Object providing call_later; the running asyncio loop
                at call time when omitted
        """
        self.fn = fn
        self.delay_ms = delay_ms
        self._scheduler = scheduler
        self._handle = None
        self._args: tuple = ()
        self._kwargs: dict = {}

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def __call__(self, *args, **kwargs) -> None:
        """Schedule fn with these arguments, superseding any pending call.

        Raises:
            RuntimeError: If no scheduler was given and no asyncio loop is running
        """
        self.cancel()
        self._args, self._kwargs = args, kwargs
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(self.delay_ms / 1000, self._fire)

    def cancel(self) -> None:
        """Drop the pending invocation, if any; fn will not run for it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._args, self._kwargs = (), {}

    def flush(self) -> Any:
        """Run the pending invocation now.

        Returns:
            fn's result, or None when nothing was pending
        """
        if self._handle is None:
            return None
        self._handle.cancel()
        return self._fire()

    def _fire(self) -> Any:
        args, kwargs = self._args, self._kwargs
        self._handle = None
        self._args, self._kwargs = (), {}
        return self.fn(*args, **kwargs)


def debounce(fn: Callable[..., Any], delay_ms: int, scheduler: Any = None) -> Debouncer:
    """Wrap fn so it only runs after delay_ms of silence."""
    return Debouncer(fn, delay_ms, scheduler=scheduler)
