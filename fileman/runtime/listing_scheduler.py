"""Background directory-listing worker pool with an interactive-thread queue.

Workers only build immutable ``ListingResult`` values. Completions wait in a
queue until the interactive thread calls ``dispatch_completed``, which runs
each request's callback on that thread. ``in_flight`` counts requests that
were submitted but whose callback has not run yet.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from ..errors import EnumerationFailed
from ..file_model import ListingResult, ListingSnapshot, list_directory, path_entry_for

logger = logging.getLogger(__name__)

ListingCallback = Callable[[ListingResult], None]


@dataclass(frozen=True)
class ListingRequest:
    """One directory enumeration job."""

    request_id: int
    target: Path
    show_hidden: bool


@dataclass(frozen=True)
class ListingCompletion:
    """Completed enumeration waiting for the interactive thread."""

    request: ListingRequest
    result: ListingResult


class ListingScheduler:
    """Runs every submitted listing to completion; no cancellation, no timeout."""

    def __init__(
        self,
        list_fn: Callable[[Path, bool], ListingResult] = list_directory,
        *,
        max_workers: int = 4,
        show_hidden: bool = False,
    ) -> None:
        self._list_fn = list_fn
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="fileman-lister",
        )
        self._lock = threading.Lock()
        self._next_request_id = 1
        self._in_flight = 0
        self._callbacks: dict[int, ListingCallback | None] = {}
        self._results: Queue[ListingCompletion] = Queue()
        self.show_hidden = show_hidden

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def busy(self) -> bool:
        return self.in_flight > 0

    def _worker(self, request: ListingRequest) -> None:
        try:
            result = self._list_fn(request.target, request.show_hidden)
        except Exception as exc:
            logger.exception("lister raised for %s", request.target)
            result = ListingResult(
                snapshot=ListingSnapshot.empty(path_entry_for(request.target)),
                error=EnumerationFailed(request.target, str(exc)),
            )
        self._results.put(ListingCompletion(request=request, result=result))

    def submit(self, target: Path, on_complete: ListingCallback | None = None) -> int:
        """Queue an enumeration of ``target`` and return its request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._in_flight += 1
            self._callbacks[request_id] = on_complete
        request = ListingRequest(request_id=request_id, target=Path(target), show_hidden=self.show_hidden)
        logger.debug("listing request %d: %s", request_id, request.target)
        self._executor.submit(self._worker, request)
        return request_id

    def dispatch_completed(self) -> int:
        """Run callbacks for every queued completion; return how many ran.

        Must be called from the interactive thread. Completions are taken one
        at a time so a raising callback leaves the rest queued.
        """
        dispatched = 0
        while True:
            try:
                completion = self._results.get_nowait()
            except Empty:
                return dispatched
            with self._lock:
                callback = self._callbacks.pop(completion.request.request_id, None)
            try:
                if callback is not None:
                    callback(completion.result)
            finally:
                with self._lock:
                    self._in_flight -= 1
            dispatched += 1

    def close(self) -> None:
        self._executor.shutdown(wait=True)


__all__ = [
    "ListingCallback",
    "ListingRequest",
    "ListingCompletion",
    "ListingScheduler",
]
