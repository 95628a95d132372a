"""
Event Bus - in-process pub/sub for relay events

The dispatcher publishes COLOR_SENT after each datagram goes out and the
discovery service publishes DISCOVERY_RESPONSE per controller reply. The
Socket.IO broadcasters subscribe and forward them to web clients.
"""

import inspect
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Middleware = Callable[[Event], Optional[Event]]


@dataclass
class Subscription:
    handler: Handler
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]

    @property
    def name(self) -> str:
        return getattr(self.handler, "__name__", type(self.handler).__name__)


class EventBus:
    """
    Priority-ordered event dispatch with a middleware pipeline.

    Handlers may be sync or async. A failing handler is logged and the rest
    still run, so one broken Socket.IO forwarder cannot stall the relay.

    Example:
        bus = EventBus()
        bus.subscribe(EventType.COLOR_SENT, on_sent, filter_fn=lambda e: e.device_id == "desk")
        await bus.publish(ColorSentEvent("desk", "192.168.1.40", "ff00ff"))
    """

    def __init__(self, history_limit: int = 100):
        self._subscriptions: Dict[EventType, List[Subscription]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Register a handler for one event type.

        Args:
            event_type: events to receive
            handler: sync or async callable taking the event
            priority: higher runs first; equal priorities keep registration order
            filter_fn: optional predicate, the handler is skipped when it returns False
        """
        subscription = Subscription(handler, priority, filter_fn)
        bucket = self._subscriptions.setdefault(event_type, [])
        bucket.append(subscription)
        bucket.sort(key=lambda s: s.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=subscription.name,
            priority=priority
        )

    def add_middleware(self, middleware: Middleware) -> None:
        """Append to the pipeline. Middleware returns the (possibly replaced) event, or None to drop it."""
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    async def publish(self, event: Event) -> None:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                return

        self._history.append(event)

        for subscription in self._subscriptions.get(event.type, []):
            if subscription.filter_fn is not None and not subscription.filter_fn(event):
                continue
            try:
                result = subscription.handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                log.error(
                    f"Event handler failed: {subscription.name} for {event.type.name}",
                    exception=repr(e)
                )

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
