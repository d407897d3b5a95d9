# core/event_bus.py
from collections import defaultdict
from typing import Type, Callable, Dict, List, Any
import asyncio
import logging

logger = logging.getLogger(__name__)

class Event:
    """Base class for all events."""
    pass

class EventBus:
    def __init__(self):
        self._subs: Dict[Type[Event], List[Callable[[Event], Any]]] = defaultdict(list)

    def subscribe(self, event_type: Type[Event], handler: Callable[[Event], Any]):
        """Register a handler for a specific event type."""
        self._subs[event_type].append(handler)

    def unsubscribe(self, event_type: Type[Event], handler: Callable[[Event], Any]):
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._subs.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Event):
        """Publish an event to all subscribers (sync or async)."""
        # copy so handlers may unsubscribe themselves while being called
        for handler in list(self._subs.get(type(event), [])):
            try:
                result = handler(event)
            except Exception:
                # a broken subscriber must not abort the publisher
                logger.exception("Handler %r failed on %s", handler, type(event).__name__)
                continue
            # If handler returns a coroutine, schedule it
            if asyncio.iscoroutine(result):
                try:
                    asyncio.get_running_loop()
                except RuntimeError:
                    logger.warning("No running loop for async handler %r; dropping %s",
                                   handler, type(event).__name__)
                    result.close()
                    continue
                asyncio.create_task(result)
