from __future__ import annotations

import threading
from time import perf_counter
from typing import Optional

from ..errors import SearchCancelled


class CancellationToken:
    """
    Cooperative cancellation flag shared between a caller and a running search.

    A token is cancelled when cancel() was called, when its optional timeout
    (seconds, measured from construction) has elapsed, or when its parent
    token is cancelled.
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional["CancellationToken"] = None):
        self._event = threading.Event()
        self._deadline = perf_counter() + timeout if timeout is not None else None
        self._parent = parent

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and perf_counter() >= self._deadline:
            return True
        return self._parent is not None and self._parent.cancelled

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise SearchCancelled("Search cancelled")
