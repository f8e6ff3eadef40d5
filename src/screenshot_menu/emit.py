"""
Structured event emitter.

Default: JSON lines to stderr, one per event, distinguishable from the
"LEVEL: message" log lines. Extra transports register with add_handler().

Event format:
    {"event_type": "...", "timestamp": "...", "source": {"tool": "..."}, "data": {...}}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EventHandler = Callable[[dict], None]

EVENT_CATALOG = [
    {
        "event_type": "config.resolved",
        "data_fields": ["config_path", "source", "screenshot_dir"],
    },
    {
        "event_type": "operation.started",
        "data_fields": ["operation_id", "mode"],
    },
    {
        "event_type": "operation.completed",
        "data_fields": ["operation_id", "mode", "success", "file_path", "error_message"],
    },
    {
        "event_type": "artifact.created",
        "data_fields": ["file_path", "file_type", "region", "destination", "format"],
    },
    {
        "event_type": "error.handled",
        "data_fields": ["error_type", "message", "mode"],
    },
    {
        "event_type": "shutdown",
        "data_fields": [],
    },
]

_handlers: List[EventHandler] = []
_source: str = "unknown"
_stderr_enabled: bool = True


def configure(source: str, stderr: bool = True) -> None:
    """Set the source name for emitted events. Call once at startup.

    Args:
        source: Source identifier for events
        stderr: Whether to write events to stderr
    """
    global _source, _stderr_enabled
    _source = source
    _stderr_enabled = stderr


def add_handler(handler: EventHandler) -> None:
    """Also deliver every event to handler (called with the full event dict).

    Handler exceptions are logged at debug level and never reach the caller.
    """
    _handlers.append(handler)


def emit(event_type: str, data: Dict[str, Any], source: Optional[str] = None) -> None:
    """Emit a structured event.

    Args:
        event_type: One of the EVENT_CATALOG types (e.g. "artifact.created")
        data: Event payload
        source: Override the configured source name for this event
    """
    event = {
        "event_type": event_type,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "source": {"tool": source or _source},
        "data": data,
    }

    if _stderr_enabled:
        try:
            print(json.dumps(event, default=str), file=sys.stderr, flush=True)
        except (OSError, ValueError) as exc:
            logger.debug("Could not write event: %s", exc)

    for handler in list(_handlers):
        try:
            handler(event)
        except Exception as exc:
            logger.debug("Event handler error: %s", exc)
