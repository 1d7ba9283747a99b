"""
Cooperative cancellation for in-flight searches.

A token is created per search and handed to every provider call. Providers
check it around each request; cancelling the token also cancels the asyncio
task it is bound to, so a request that is already waiting on the network is
interrupted rather than run to completion.

Usage:
    token = CancellationToken()
    task = asyncio.create_task(run_search(token))
    token.bind(task)
    ...
    token.cancel()   # the search stops at its next suspension point
"""

import asyncio
from typing import Optional


class SearchCancelled(asyncio.CancelledError):
    """Raised at a suspension point once the search's token was cancelled."""
    pass


class CancellationToken:
    """Cancellation flag for one search, optionally bound to the task running it."""

    def __init__(self):
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Task) -> None:
        """Attach the task running this search."""
        self._task = task
        if self._cancelled and not task.done():
            task.cancel()

    def cancel(self) -> None:
        """Mark the search cancelled and interrupt its task if still running."""
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise SearchCancelled("Search was cancelled")
