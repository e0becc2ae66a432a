"""FeedRegistry: Ordered, read-only catalogue of quote feeds.

Feeds are ordered by ascending priority; feeds sharing a priority keep their
registration order.

.. code-block:: python

    >>> registry = FeedRegistry.from_names(["binance", "coingecko"])
    >>> registry.names()
    ['coingecko', 'binance']
"""

from __future__ import annotations

from typing import Iterable

from .feeds import FeedDescriptor, get_feed


class FeedRegistry:
    """Immutable priority-ordered sequence of feed descriptors."""

    def __init__(self, feeds: Iterable[FeedDescriptor]) -> None:
        """Initialize the registry.

        :param feeds: Feed descriptors in registration order.
        """
        # sorted() is stable, so equal priorities keep registration order
        self._feeds: tuple[FeedDescriptor, ...] = tuple(
            sorted(feeds, key=lambda feed: feed.priority)
        )

    @classmethod
    def from_names(cls, names: Iterable[str]) -> FeedRegistry:
        """Build a registry from catalogue feed names.

        :param names: Feed names (e.g., ["coingecko", "coinbase"]).
        :returns: New FeedRegistry instance.
        :raises ValueError: If a feed name is unknown.
        """
        return cls(get_feed(name) for name in names)

    def list(self) -> tuple[FeedDescriptor, ...]:
        """Return the feeds in the order they should be tried."""
        return self._feeds

    def names(self) -> list[str]:
        """Return the ordered feed names."""
        return [feed.name for feed in self._feeds]

    def __repr__(self) -> str:
        return f"FeedRegistry({self.names()!r})"
