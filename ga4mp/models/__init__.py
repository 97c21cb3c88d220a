from .context import Identity, SessionContext, to_timestamp_micros
from .event import Event, UserProperty

__all__ = [
    "Event",
    "Identity",
    "SessionContext",
    "UserProperty",
    "to_timestamp_micros",
]
