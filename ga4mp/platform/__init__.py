from .client import (
    HttpxTransport,
    Transport,
    TransportResponse,
    build_collect_url,
)

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResponse",
    "build_collect_url",
]
