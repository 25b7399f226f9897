# issuewatch/core/dispatch.py
"""
Fire-and-forget scheduling of report coroutines.

Interceptors run inside sys.excepthook, logging calls, loop callbacks and
HTTP client code; none of them may wait for the webhook. A report becomes a
task when the calling thread has a running event loop, otherwise it runs on
a daemon thread with a loop of its own.

Nothing is flushed at interpreter exit: a report scheduled just before the
process ends may be lost. Call flush() explicitly where that matters.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

CoroutineFactory = Callable[[], Awaitable[Any]]


class ReportDispatcher:
    def __init__(self) -> None:
        self._tasks: Set["asyncio.Task[Any]"] = set()
        self._threads: Set[threading.Thread] = set()
        self._threads_lock = threading.Lock()

    def submit(self, make_coro: CoroutineFactory) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(make_coro())
            # Keep a strong reference until done; the loop only holds weak ones
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        thread = threading.Thread(
            target=self._run_in_thread,
            args=(make_coro,),
            name="issuewatch-report",
            daemon=True,
        )
        with self._threads_lock:
            self._threads.add(thread)
        thread.start()

    def _run_in_thread(self, make_coro: CoroutineFactory) -> None:
        try:
            asyncio.run(make_coro())
        except Exception as e:
            logger.debug("Report thread failed: %s", e)
        finally:
            with self._threads_lock:
                self._threads.discard(threading.current_thread())

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for reports running on background threads.

        Tasks on a running loop cannot be waited for from synchronous code;
        use drain() for those. Returns True when no thread is left running.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._threads_lock:
            threads = list(self._threads)

        for thread in threads:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)

        with self._threads_lock:
            return not any(t.is_alive() for t in self._threads)

    async def drain(self) -> None:
        """Wait for reports scheduled as tasks on the current loop"""
        loop = asyncio.get_running_loop()
        while True:
            tasks = [t for t in self._tasks if t.get_loop() is loop and not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
