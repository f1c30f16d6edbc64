"""Debounced shop search that only applies the latest response."""

import asyncio
import inspect
import logging
from typing import Any, Callable, List, Optional

from .. import config
from .api import ApiError
from .bookings import log_notifier

logger = logging.getLogger(__name__)


class LatestSearch:
    """Debounce keystrokes and drop responses that arrive out of order.

    ``search`` takes the query and returns the results, either directly or as
    an awaitable. Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        search: Callable[[str], Any],
        nearby: Optional[List[dict]] = None,
        delay: float = config.SEARCH_DEBOUNCE_SECONDS,
        notify: Callable[[str], None] = log_notifier,
    ):
        self.search = search
        self.nearby = list(nearby or [])
        self.results: List[dict] = list(self.nearby)
        self.delay = delay
        self.notify = notify
        self.query = ""
        self.loading = False
        self._seq = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: set = set()

    def set_nearby(self, results: List[dict]):
        self.nearby = list(results)
        if not self.query.strip():
            self.results = list(self.nearby)

    def type(self, query: str):
        self.query = query
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if not query.strip():
            # Invalidate anything in flight and fall back to nearby shops
            self._seq += 1
            self.loading = False
            self.results = list(self.nearby)
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire, query)

    def _fire(self, query: str):
        self._timer = None
        self._seq += 1
        task = asyncio.ensure_future(self._request(query, self._seq))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _request(self, query: str, seq: int):
        self.loading = True
        try:
            results = self.search(query)
            if inspect.isawaitable(results):
                results = await results
        except ApiError as exc:
            if seq == self._seq:
                self.loading = False
                self.notify(f"Search failed: {exc.message}")
            return

        if seq != self._seq:
            logger.debug("Discarding stale results for %r", query)
            return
        self.loading = False
        self.results = results

    async def wait(self):
        """Wait for the pending timer and every in-flight request."""
        while self._timer is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks))
            else:
                await asyncio.sleep(self.delay / 4 or 0.01)
