"""One-second tick sources for the timer engine."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable

TickCallback = Callable[[], None]


class TickSubscription:
    """Handle returned by ``TickSource.subscribe``; cancel to stop ticks."""

    def __init__(self, callback: TickCallback, on_cancel: Callable[[TickSubscription], None]):
        self.callback = callback
        self._on_cancel = on_cancel
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._on_cancel(self)


class TickSource(ABC):
    """Delivers one callback per elapsed second to each subscriber."""

    @abstractmethod
    def subscribe(self, callback: TickCallback) -> TickSubscription:
        """Start delivering ticks to ``callback``."""


class AsyncioTickSource(TickSource):
    """Ticks scheduled on the running asyncio event loop.

    Deadlines advance by a fixed interval from the subscription time, so
    slow callbacks do not make the countdown drift.
    """

    def __init__(self, interval: float = 1.0, loop: asyncio.AbstractEventLoop | None = None):
        self.interval = interval
        self._loop = loop
        self._handles: dict[int, asyncio.TimerHandle] = {}

    def subscribe(self, callback: TickCallback) -> TickSubscription:
        loop = self._loop or asyncio.get_running_loop()
        subscription = TickSubscription(callback, self._unschedule)
        deadline = loop.time() + self.interval

        def fire() -> None:
            nonlocal deadline
            self._handles.pop(id(subscription), None)
            if not subscription.active:
                return
            deadline += self.interval
            self._handles[id(subscription)] = loop.call_at(deadline, fire)
            subscription.callback()

        self._handles[id(subscription)] = loop.call_at(deadline, fire)
        return subscription

    def _unschedule(self, subscription: TickSubscription) -> None:
        handle = self._handles.pop(id(subscription), None)
        if handle is not None:
            handle.cancel()


class ManualTickSource(TickSource):
    """Deterministic tick source driven by ``advance``."""

    def __init__(self):
        self._subscriptions: list[TickSubscription] = []
        self.elapsed = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: TickCallback) -> TickSubscription:
        subscription = TickSubscription(callback, self._subscriptions.remove)
        self._subscriptions.append(subscription)
        return subscription

    def advance(self, seconds: int = 1) -> None:
        """Fire every active subscription once per second of ``seconds``."""
        for _ in range(seconds):
            self.elapsed += 1
            for subscription in list(self._subscriptions):
                if subscription.active:
                    subscription.callback()
