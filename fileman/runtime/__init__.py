"""Runtime orchestration: background listing, config, and the browser session."""

from __future__ import annotations

from .listing_scheduler import ListingCompletion, ListingRequest, ListingScheduler
from .session import BrowserSession

__all__ = [
    "ListingRequest",
    "ListingCompletion",
    "ListingScheduler",
    "BrowserSession",
]
