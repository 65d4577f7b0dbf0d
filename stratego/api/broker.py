"""
Event Broker - In-memory publish/subscribe for game event feeds.

Each game has one topic, `games/<id>/moves`. Messages are plain event
tokens and are delivered to subscribers synchronously, in publish order.
"""

from __future__ import annotations
from typing import Callable
import logging
import threading

logger = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]
ErrorHandler = Callable[[Exception], None]


def moves_topic(game_id: str) -> str:
    return f"games/{game_id}/moves"


class Subscription:
    """
    A live subscription to one topic.

    Owned by whoever opened it. close() is idempotent, and the object is
    a context manager so the feed is released when a session ends.
    """

    def __init__(
        self,
        topic: str,
        on_message: MessageHandler,
        on_error: ErrorHandler | None = None,
        on_close: Callable[[Subscription], None] | None = None,
    ):
        self.topic = topic
        self._on_message = on_message
        self._on_error = on_error
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def deliver(self, message: str):
        if self._closed:
            return
        self._on_message(message)

    def fail(self, error: Exception):
        if self._closed:
            return
        if self._on_error:
            self._on_error(error)
        else:
            logger.error("Unhandled error on %s: %s", self.topic, error)

    def close(self):
        if self._closed:
            return
        self._closed = True
        if self._on_close:
            self._on_close(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class EventBroker:
    """Topic -> subscribers registry."""

    def __init__(self):
        self._subscribers: dict[str, list[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        topic: str,
        on_message: MessageHandler,
        on_error: ErrorHandler | None = None,
    ) -> Subscription:
        subscription = Subscription(topic, on_message, on_error, on_close=self._remove)
        with self._lock:
            self._subscribers.setdefault(topic, []).append(subscription)
        logger.debug("Subscribed to %s", topic)
        return subscription

    def publish(self, topic: str, message: str) -> int:
        """Deliver `message` to every subscriber of `topic`. Returns the count."""
        with self._lock:
            subscribers = list(self._subscribers.get(topic, []))

        for subscription in subscribers:
            try:
                subscription.deliver(message)
            except Exception as e:
                logger.exception("Subscriber on %s failed on %r", topic, message)
                subscription.fail(e)
        return len(subscribers)

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, []))

    def _remove(self, subscription: Subscription):
        with self._lock:
            subscribers = self._subscribers.get(subscription.topic, [])
            if subscription in subscribers:
                subscribers.remove(subscription)
            if not subscribers:
                self._subscribers.pop(subscription.topic, None)
