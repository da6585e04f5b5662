"""
Append-only audit logging.
"""

from practicum.kernel.events.event_store import EventStore

__all__ = [
    "EventStore",
]
