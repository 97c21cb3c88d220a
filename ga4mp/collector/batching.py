from typing import Iterator, Sequence, TypeVar

from ga4mp.constants import MAX_EVENTS_PER_REQUEST, MAX_REQUEST_BODY_BYTES

T = TypeVar("T")


def partition(
    events: Sequence[T], max_per_batch: int = MAX_EVENTS_PER_REQUEST
) -> Iterator[Sequence[T]]:
    """
    Yield contiguous, order-preserving slices of at most `max_per_batch` events.
    """
    if max_per_batch < 1:
        raise ValueError("max_per_batch must be at least 1")

    for start in range(0, len(events), max_per_batch):
        yield events[start:start + max_per_batch]


def check_size(serialized_body: str, max_bytes: int = MAX_REQUEST_BODY_BYTES) -> bool:
    return len(serialized_body) <= max_bytes
