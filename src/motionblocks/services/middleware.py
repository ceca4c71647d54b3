"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from motionblocks.models.events import Event
from motionblocks.models.step import summarize
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    source_str = event.source.name if event.source else "-"

    data = event.to_data()
    if "program" in data:
        summary = summarize(data["program"])
        data_str = f"steps={summary.step_count} duration={summary.total_duration:g}s"
    else:
        data_str = str(data)

    log.debug(f"Event: {event.type.name} from {source_str} | {data_str}")
    return event
