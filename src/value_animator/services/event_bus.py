"""
Event Bus - Event channel consumed by the Animator

Implements pub-sub pattern:
- Publishers: publish(event) / emit(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)

Dispatch is synchronous: every handler runs inline, before publish() returns.
The Animator relies on this to emit start/frame/end from inside a tick.
"""

from typing import Callable, List, Dict, Optional
from dataclasses import dataclass
from value_animator.models.events import Event, EventType
from value_animator.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Event bus for synchronous pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first, FIFO on ties)
    - Per-handler filtering (fine-grained control)
    - Middleware pipeline (logging, blocking)
    - Fault tolerance (one handler crash doesn't stop others)

    Example:
        bus = EventBus()

        bus.subscribe(
            EventType.FRAME,
            on_frame,
            priority=10,
            filter_fn=lambda e: e.animator is fader
        )

        bus.publish(AnimationFrameEvent(fader, 0.5))
    """

    def __init__(self, history_limit: int = 100):
        # Handlers organized by event type
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Middleware pipeline (applied in registration order)
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Event history (bounded, for debugging)
        self._event_history: List[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Subscribe to event type

        Args:
            event_type: Which events to listen for
            handler: Function to call with the event
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        handler_entry = EventHandler(handler, priority, filter_fn)
        self._handlers[event_type].append(handler_entry)

        # Sort by priority (descending - highest first); sort is stable
        self._handlers[event_type].sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    # Alias matching the on(name, handler) capability
    on = subscribe

    def unsubscribe(
        self,
        event_type: EventType,
        handler: Callable[[Event], None],
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> bool:
        """
        Remove registrations of handler for event_type

        Args:
            event_type: Event type the handler was subscribed to
            handler: Handler to remove
            filter_fn: If given, only registrations made with this filter
                are removed (same handler may be registered by several owners)

        Returns:
            True if at least one registration was removed
        """
        entries = self._handlers.get(event_type, [])
        kept = [
            h for h in entries
            if h.handler != handler or (filter_fn is not None and h.filter_fn != filter_fn)
        ]
        removed = len(kept) != len(entries)
        self._handlers[event_type] = kept
        return removed

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to event processing pipeline

        Middleware can:
        - Modify events (return modified event)
        - Block events (return None)
        - Log/validate events

        Middleware runs in registration order (FIFO).
        """
        self._middleware.append(middleware)
        log.debug(
            "Middleware registered",
            middleware=getattr(middleware, "__name__", repr(middleware))
        )

    def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority (high → low)
        4. Apply per-handler filters
        5. Catch and log handler exceptions (fault tolerance)
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                # Event blocked by middleware
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        # Snapshot so handlers may subscribe/unsubscribe while dispatching
        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            return

        for handler_entry in handlers:
            if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                continue

            try:
                handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler_entry.handler, '__name__', '?')} for {event.type.name}",
                    exception=repr(e)
                )
                # Continue to next handler (fault tolerance)

    # Alias matching the emit(name, payload) capability
    emit = publish

    def handler_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """
        Get recent events from history

        Args:
            limit: Number of recent events to return

        Returns:
            List of recent events (newest last)
        """
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        """Clear event history"""
        self._event_history.clear()
