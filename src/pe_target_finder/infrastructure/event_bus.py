"""Event bus infrastructure for PE Target Finder.

Provides a synchronous pub-sub event bus whose ``subscribe`` calls return a
:class:`Subscription` release handle.  Events are delivered in publish order
and each one is handled to completion before the next: an event published
from inside a handler is queued, not dispatched re-entrantly.  A handler that
raises is logged and skipped so a single failing subscriber never breaks the
publish pipeline.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict, deque
from collections.abc import Callable

from pe_target_finder.domain.events import DomainEvent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
SyncHandler = Callable[[DomainEvent], None]


# ===================================================================== #
#  Subscription handle                                                   #
# ===================================================================== #

class Subscription:
    """Release handle returned by a subscription.

    ``unsubscribe()`` detaches the handler the first time it is called and
    is a no-op afterwards.
    """

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._release is not None

    def unsubscribe(self) -> bool:
        """Release the subscription. Returns ``True`` on the first call only."""
        with self._lock:
            release, self._release = self._release, None
        if release is None:
            return False
        release()
        return True

    def __repr__(self) -> str:
        return f"Subscription(active={self.active})"


# ===================================================================== #
#  Synchronous Event Bus                                                 #
# ===================================================================== #

class EventBus:
    """Thread-safe synchronous pub-sub for domain events.

    Handlers are invoked **in registration order**, global handlers first.

    Usage::

        bus = EventBus()
        subscription = bus.subscribe(SearchResolved, my_handler)
        bus.publish(SearchResolved(...))
        subscription.unsubscribe()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[type[DomainEvent], list[SyncHandler]] = defaultdict(list)
        self._global_handlers: list[SyncHandler] = []
        self._pending: deque[DomainEvent] = deque()
        self._dispatching = False

    # -- subscription -------------------------------------------------------

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: SyncHandler,
    ) -> Subscription:
        """Register *handler* for a specific *event_type*."""
        with self._lock:
            self._handlers[event_type].append(handler)
        return Subscription(lambda: self.unsubscribe(event_type, handler))

    def subscribe_all(self, handler: SyncHandler) -> Subscription:
        """Register *handler* to receive **every** published event."""
        with self._lock:
            self._global_handlers.append(handler)
        return Subscription(lambda: self.unsubscribe_all(handler))

    def unsubscribe(
        self,
        event_type: type[DomainEvent],
        handler: SyncHandler,
    ) -> bool:
        """Remove *handler* from *event_type*. Returns ``True`` if found."""
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            try:
                handlers.remove(handler)
                return True
            except ValueError:
                return False

    def unsubscribe_all(self, handler: SyncHandler) -> bool:
        """Remove a global handler. Returns ``True`` if found."""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
                return True
            except ValueError:
                return False

    # -- publishing ---------------------------------------------------------

    def publish(self, event: DomainEvent) -> None:
        """Publish *event* to all matching handlers (global first, then typed).

        Called from inside a handler, the event is queued and delivered once
        the current event has been handled by every subscriber.
        """
        with self._lock:
            self._pending.append(event)
            if self._dispatching:
                return
            self._dispatching = True

        try:
            while True:
                with self._lock:
                    if not self._pending:
                        break
                    current = self._pending.popleft()
                self._dispatch(current)
        finally:
            with self._lock:
                self._dispatching = False

    def _dispatch(self, event: DomainEvent) -> None:
        with self._lock:
            global_snapshot = list(self._global_handlers)
            typed_snapshot = list(self._handlers.get(type(event), []))

        for handler in global_snapshot:
            try:
                handler(event)
            except Exception:
                logger.exception("Error in global event handler %r", handler)

        for handler in typed_snapshot:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Error in handler %r for %s", handler, type(event).__name__
                )

    # -- introspection / lifecycle ------------------------------------------

    def handler_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """Return the number of handlers registered.

        If *event_type* is ``None``, returns the total across all types
        plus globals.
        """
        with self._lock:
            if event_type is not None:
                return len(self._handlers.get(event_type, []))
            total = sum(len(hs) for hs in self._handlers.values())
            return total + len(self._global_handlers)

    def clear(self) -> None:
        """Remove all registered handlers."""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
