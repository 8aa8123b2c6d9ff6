"""Debounced scheduling for search-as-you-type.

The filter function stays free of timing concerns; this wrapper only decides
*when* to call it.  Each :meth:`Debouncer.trigger` cancels the pending call
and schedules a new one after the quiet period.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable

from loguru import logger

from toolshelf.config import settings


class Debouncer:
    """Run *func* once input has been quiet for *delay* seconds.

    Must be used from inside a running event loop.
    """

    def __init__(self, func: Callable[..., Any], delay: float | None = None) -> None:
        self._func = func
        self.delay = settings.search_debounce if delay is None else delay
        self._task: asyncio.Task | None = None
        self.result: Any = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        """(Re)schedule ``func(*args, **kwargs)`` after the quiet period."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args, kwargs))
        self._task.add_done_callback(self._report_failure)

    async def _run(self, args: tuple, kwargs: dict) -> Any:
        await asyncio.sleep(self.delay)
        result = self._func(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        self.result = result
        return result

    @staticmethod
    def _report_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(f"[debounce] scheduled call failed: {exc!r}")

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self) -> Any:
        """Wait for the pending call (if any) and return its result."""
        if self._task is None:
            return self.result
        task = self._task
        try:
            return await task
        finally:
            if self._task is task:
                self._task = None
