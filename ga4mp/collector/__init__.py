from .aggregator import ErrorAggregator
from .batching import check_size, partition
from .request import build_envelope, serialize_body, stamp_batch
from .store import EventStore
from .engine import SubmissionEngine, SubmissionResult, SubmissionState

__all__ = [
    "ErrorAggregator",
    "EventStore",
    "SubmissionEngine",
    "SubmissionResult",
    "SubmissionState",
    "build_envelope",
    "check_size",
    "partition",
    "serialize_body",
    "stamp_batch",
]
