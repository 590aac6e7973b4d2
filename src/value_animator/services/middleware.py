"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from value_animator.models.events import Event
from value_animator.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source else None
    log.debug(f"Event: {event.type.name} from {source_str} | {event.to_data()}")
    return event
