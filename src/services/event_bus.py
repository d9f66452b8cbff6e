"""
Event Bus - Central event routing system

Implements pub-sub pattern:
- Publishers: publish(event) / publish_nowait(event)
- Subscribers: subscribe(event_type, handler, priority, filter_fn)
- Middleware: add_middleware(middleware_fn)
"""

import asyncio
import inspect
from typing import Callable, List, Dict, Optional, Set
from dataclasses import dataclass
from models.events import Event, EventType
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


@dataclass
class EventHandler:
    """Event handler registration"""
    handler: Callable[[Event], None]
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]


class EventBus:
    """
    Central event bus for pub-sub event handling

    Features:
    - Priority-based handler execution (high priority first)
    - Per-handler filtering
    - Middleware pipeline (modify or block events)
    - Async/sync handler support (auto-detected)
    - One handler crash doesn't stop the others

    Example:
        bus = EventBus()

        bus.subscribe(
            EventType.BUTTON_GESTURE,
            handler_fn,
            priority=10,
            filter_fn=lambda e: e.button == "doorbell"
        )

        await bus.publish(ButtonGestureEvent("doorbell", Gesture.PRESS))
    """

    def __init__(self, history_limit: int = 100):
        self._handlers: Dict[EventType, List[EventHandler]] = {}

        # Applied in registration order
        self._middleware: List[Callable[[Event], Optional[Event]]] = []

        # Circular buffer for debugging
        self._event_history: List[Event] = []
        self._history_limit = history_limit

        # publish_nowait() tasks stay referenced until they finish
        self._pending: Set[asyncio.Task] = set()

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
            handler: Function to call (can be async or sync)
            priority: Execution priority (higher = called first, default: 0)
            filter_fn: Optional filter (return True = handle, False = skip)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        self._handlers[event_type].append(EventHandler(handler, priority, filter_fn))

        # Highest priority first
        self._handlers[event_type].sort(key=lambda h: h.priority, reverse=True)

        log.debug(
            "Event handler subscribed",
            event_type=event_type.name,
            handler=getattr(handler, "__name__", repr(handler)),
            priority=priority
        )

    def unsubscribe(self, event_type: EventType, handler: Callable[[Event], None]) -> bool:
        handlers = self._handlers.get(event_type, [])
        remaining = [h for h in handlers if h.handler != handler]
        self._handlers[event_type] = remaining
        return len(remaining) != len(handlers)

    def add_middleware(self, middleware: Callable[[Event], Optional[Event]]) -> None:
        """
        Add middleware to the event processing pipeline.

        Middleware returns the (possibly modified) event, or None to block it.
        """
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=getattr(middleware, "__name__", repr(middleware)))

    async def publish(self, event: Event) -> None:
        """
        Publish event to all subscribers

        Flow:
        1. Apply middleware (can modify or block event)
        2. Save to event history
        3. Execute handlers by priority, honouring per-handler filters
        4. Log handler exceptions and carry on
        """
        for middleware in self._middleware:
            processed_event = middleware(event)
            if processed_event is None:
                return
            event = processed_event

        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

        handlers = list(self._handlers.get(event.type, []))
        if not handlers:
            return

        for handler_entry in handlers:
            if handler_entry.filter_fn and not handler_entry.filter_fn(event):
                continue

            try:
                if inspect.iscoroutinefunction(handler_entry.handler):
                    await handler_entry.handler(event)
                else:
                    handler_entry.handler(event)
            except Exception as e:
                log.error(
                    f"Event handler failed: {getattr(handler_entry.handler, '__name__', '?')} for {event.type.name}",
                    exception=e
                )

    def publish_nowait(self, event: Event) -> Optional[asyncio.Task]:
        """
        Schedule publish() from synchronous code (timer callbacks, GPIO edges).

        Returns the task, or None when no event loop is running; the event is
        then only recorded in the history.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._event_history.append(event)
            if len(self._event_history) > self._history_limit:
                self._event_history.pop(0)
            return None
        task = loop.create_task(self.publish(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def wait_idle(self) -> None:
        """Wait for every publish_nowait() task, including ones scheduled meanwhile"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Recent events, newest last"""
        return self._event_history[-limit:]

    def clear_history(self) -> None:
        self._event_history.clear()
