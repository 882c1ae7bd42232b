"""Shared fixtures for deterministic tree/table tests."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from fileman.file_model import ListingResult, list_directory


class ManualScheduler:
    """Records listing submissions; tests decide when and in which order they finish."""

    def __init__(self, show_hidden: bool = False) -> None:
        self.show_hidden = show_hidden
        self.requests: list[tuple[Path, Callable[[ListingResult], None] | None]] = []

    def submit(self, target: Path, on_complete: Callable[[ListingResult], None] | None = None) -> int:
        self.requests.append((Path(target), on_complete))
        return len(self.requests)

    @property
    def pending_paths(self) -> list[Path]:
        return [path for path, _callback in self.requests]

    def run_one(self, index: int = 0) -> ListingResult:
        path, callback = self.requests.pop(index)
        result = list_directory(path, self.show_hidden)
        if callback is not None:
            callback(result)
        return result

    def run_all(self) -> None:
        while self.requests:
            self.run_one()


def wait_until(predicate: Callable[[], bool], timeout_seconds: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout_seconds
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def pump_until(scheduler, predicate: Callable[[], bool], timeout_seconds: float = 2.0) -> bool:
    """Dispatch completed listings until ``predicate`` holds."""

    def step() -> bool:
        scheduler.dispatch_completed()
        return predicate()

    return wait_until(step, timeout_seconds)
