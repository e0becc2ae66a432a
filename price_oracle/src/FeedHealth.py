"""FeedHealth: Per-feed success and failure bookkeeping.

Counters are diagnostic only. They never change which feeds are tried or in
what order; every fetch still walks the registry in priority order.

.. code-block:: python

    >>> health = FeedHealth(["coingecko", "coinbase"])
    >>> health.record_failure("coingecko", "HTTP 429: rate limited")
    >>> health.record_success("coinbase")
    >>> health.get_feed_status("coingecko").consecutive_failures
    1
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class FeedStatus:
    """Tracks the outcome history of a single feed.

    :ivar consecutive_failures: Failures since the last success.
    :ivar total_failures: Total failures since tracking began.
    :ivar total_successes: Total successes since tracking began.
    :ivar last_error: Reason of the most recent failure, cleared on success.
    """

    consecutive_failures: int = 0
    total_failures: int = 0
    total_successes: int = 0
    last_error: str | None = None


class FeedHealth:
    """Collects feed outcomes reported by the fetcher.

    :ivar feeds: Tracked feed names.
    """

    def __init__(self, feeds: list[str] | None = None) -> None:
        """Initialize the tracker.

        :param feeds: Feed names to track from the start.
        """
        self.feeds: list[str] = []
        self._status: dict[str, FeedStatus] = {}
        for feed in feeds or []:
            self._track(feed)

    def _track(self, feed: str) -> FeedStatus:
        if feed not in self._status:
            self.feeds.append(feed)
            self._status[feed] = FeedStatus()
        return self._status[feed]

    def record_failure(self, feed: str, reason: str) -> None:
        """Record a failed attempt.

        :param feed: Feed name that failed.
        :param reason: Failure reason.
        """
        status = self._track(feed)
        status.consecutive_failures += 1
        status.total_failures += 1
        status.last_error = reason

    def record_success(self, feed: str) -> None:
        """Record a successful attempt, resetting the failure streak.

        :param feed: Feed name that succeeded.
        """
        status = self._track(feed)
        status.consecutive_failures = 0
        status.total_successes += 1
        status.last_error = None

    def get_feed_status(self, feed: str) -> FeedStatus | None:
        """Get a copy of one feed's status.

        :param feed: Feed name to query.
        :returns: FeedStatus or None if the feed is not tracked.
        """
        status = self._status.get(feed)
        return replace(status) if status is not None else None

    def get_all_status(self) -> dict[str, FeedStatus]:
        """Get copies of all feed statuses.

        :returns: Dict mapping feed names to their status.
        """
        return {feed: replace(status) for feed, status in self._status.items()}
