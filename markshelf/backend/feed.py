from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

ACTION_INSERT = "insert"
ACTION_DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    action: str
    record: dict = field(default_factory=dict)


def _matches(filters: dict, record: dict) -> bool:
    return all(record.get(key) == value for key, value in filters.items())


class Subscription:
    def __init__(
        self,
        feed: ChangeFeed,
        collection: str,
        filters: dict,
        callback: Callable[[ChangeEvent], None],
    ):
        self.feed = feed
        self.collection = collection
        self.filters = dict(filters or {})
        self.callback = callback
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def wants(self, event: ChangeEvent) -> bool:
        return (
            not self._closed
            and event.collection == self.collection
            and _matches(self.filters, event.record)
        )

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.feed._remove(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class ChangeFeed:
    """In-process publish/subscribe hub for row changes.

    Notifications carry the changed record but consumers are expected to
    treat them only as a signal that something in the watched rows changed.
    Callbacks run on the publishing thread, outside the feed's lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: list[Subscription] = []

    def subscribe(
        self,
        collection: str,
        filters: dict | None,
        callback: Callable[[ChangeEvent], None],
    ) -> Subscription:
        subscription = Subscription(self, collection, filters or {}, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug(
            "Opened subscription on %s filtered by %s", collection, subscription.filters
        )
        return subscription

    def publish(self, event: ChangeEvent) -> int:
        with self._lock:
            targets = [sub for sub in self._subscriptions if sub.wants(event)]

        delivered = 0
        for subscription in targets:
            if subscription.closed:
                continue
            try:
                subscription.callback(event)
                delivered += 1
            except Exception:
                logger.exception(
                    "Change callback failed for %s %s", event.collection, event.action
                )
        return delivered

    def subscriber_count(self, collection: str | None = None) -> int:
        with self._lock:
            return sum(
                1
                for sub in self._subscriptions
                if collection is None or sub.collection == collection
            )

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug("Closed subscription on %s", subscription.collection)
