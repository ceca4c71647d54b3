"""
Event Bus - in-process pub-sub between the editor core and its host

- publishers:   await bus.publish(event)
- subscribers:  bus.subscribe(event_type, handler, priority, filter_fn)
- middleware:   bus.add_middleware(fn) runs before any handler and may
                rewrite or drop the event
"""

import inspect
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional

from motionblocks.models.events import Event, EventType
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Middleware = Callable[[Event], Optional[Event]]


@dataclass
class Subscription:
    """One handler registered for one event type"""
    event_type: EventType
    handler: Handler
    priority: int = 0
    filter_fn: Optional[Callable[[Event], bool]] = None

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", repr(self.handler))

    def accepts(self, event: Event) -> bool:
        return self.filter_fn is None or bool(self.filter_fn(event))


class EventBus:
    """
    Priority-ordered async event bus

    Handlers run one after another, highest priority first; handlers of
    equal priority keep subscription order. Sync and async handlers are
    both accepted. A handler that raises is logged and skipped, the rest
    still run.

    Example:
        bus = EventBus()
        bus.subscribe(EventType.PROGRAM_CHANGED, store.save_steps, priority=10)
        await bus.publish(ProgramChangedEvent(program))
    """

    def __init__(self, history_limit: int = 100):
        self._subscriptions: Dict[EventType, List[Subscription]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)

    # -----------------------------
    # Registration
    # -----------------------------

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None,
    ) -> Subscription:
        """
        Register handler for event_type.

        Args:
            handler: Sync or async callable taking the event
            priority: Higher runs first
            filter_fn: Handler only sees events for which this returns True
        """
        subscription = Subscription(event_type, handler, priority, filter_fn)
        entries = self._subscriptions.setdefault(event_type, [])
        entries.append(subscription)
        # stable sort keeps registration order within a priority
        entries.sort(key=lambda s: -s.priority)

        log.debug("Handler subscribed", event_type=event_type, handler=subscription.name, priority=priority)
        return subscription

    def unsubscribe(self, event_type: EventType, handler: Handler) -> bool:
        """Remove the first registration of handler; False if there was none"""
        entries = self._subscriptions.get(event_type, [])
        for subscription in entries:
            if subscription.handler == handler:
                entries.remove(subscription)
                return True
        return False

    def handler_count(self, event_type: EventType) -> int:
        return len(self._subscriptions.get(event_type, []))

    def add_middleware(self, middleware: Middleware) -> None:
        """Append to the middleware chain (runs in registration order)"""
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    # -----------------------------
    # Dispatch
    # -----------------------------

    async def publish(self, event: Event) -> int:
        """
        Deliver event; returns how many handlers ran.

        Middleware first (None drops the event), then history, then the
        matching handlers by priority.
        """
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return 0

        self._history.append(event)

        delivered = 0
        for subscription in list(self._subscriptions.get(event.type, [])):
            if not subscription.accepts(event):
                continue
            delivered += 1
            try:
                result = subscription.handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(
                    f"Event handler failed: {subscription.name} for {event.type.name}",
                    error=str(e),
                    error_type=type(e).__name__,
                )

        if not delivered:
            log.debug("No handlers for event", event_type=event.type)
        return delivered

    # -----------------------------
    # History
    # -----------------------------

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Most recent events, oldest first"""
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
