"""Page-owned registry of delegated events.

Maps a normalized event name to the number of ``EventDelegatingBehavior``
instances on the page listening for it. An ajax event behavior reads it
before walking its ancestors: no entry (or a zero count) means nothing
on the page delegates that event, so the walk is skipped.

Counts change only when a delegating behavior joins or leaves a page;
render passes only read. A lock keeps writers exclusive when a page
object is shared between threads.
"""

import logging
import threading
from collections.abc import Iterator

logger = logging.getLogger("perch.ajax")


class DelegatedEvents:
    """Event name -> registration count. Entries at zero are removed."""

    __slots__ = ("_counts", "_lock")

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def register(self, event: str) -> int:
        """Increment *event*'s count and return the new value."""
        with self._lock:
            count = self._counts.get(event, 0) + 1
            self._counts[event] = count
        logger.debug("delegated event %r registered (count=%d)", event, count)
        return count

    def unregister(self, event: str) -> int:
        """Decrement *event*'s count, dropping the entry at zero.

        Unregistering an event that was never registered is a no-op
        (logged as a warning) and returns 0.
        """
        with self._lock:
            count = self._counts.get(event, 0)
            if count == 0:
                logger.warning("delegated event %r unregistered without registration", event)
                return 0
            count -= 1
            if count:
                self._counts[event] = count
            else:
                del self._counts[event]
        logger.debug("delegated event %r unregistered (count=%d)", event, count)
        return count

    def count(self, event: str) -> int:
        with self._lock:
            return self._counts.get(event, 0)

    def is_delegated(self, event: str) -> bool:
        return self.count(event) > 0

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def __contains__(self, event: object) -> bool:
        return isinstance(event, str) and self.is_delegated(event)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __repr__(self) -> str:
        return f"DelegatedEvents({self.snapshot()!r})"
