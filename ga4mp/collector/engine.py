"""
Batch submission of stored events to the collector.

Every planned batch is attempted, even after earlier batches ran into
problems. Problems are recorded in an ErrorAggregator and raised once, after
the last batch, as an AggregatedSubmissionError. Stored events are only
cleared when nothing was recorded.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ga4mp.config.log_codes import (
    SUBMIT_BATCH_DISPATCHED,
    SUBMIT_BATCH_SKIPPED,
    SUBMIT_FAILED,
    SUBMIT_STARTED,
    SUBMIT_SUCCEEDED,
)
from ga4mp.constants import (
    ALLOW_RESPONSE_CODES,
    KB,
    MAX_EVENTS_PER_REQUEST,
    MAX_REQUEST_BODY_BYTES,
    NO_CONTENT,
)
from ga4mp.errors import MissingRequiredFieldsError, TransportError
from ga4mp.platform.client import Transport, TransportResponse
from ga4mp.platform.http_utils import (
    UnparsableBodyError,
    decode_body,
    extract_validation_messages,
    format_validation_message,
    parse_body,
)

from .aggregator import ErrorAggregator
from .batching import check_size, partition
from .request import build_envelope, serialize_body, stamp_batch
from .store import EventStore

logger = logging.getLogger(__name__)


class SubmissionState(Enum):
    IDLE = "idle"
    BUILDING = "building"
    DISPATCHING = "dispatching"
    INTERPRETING = "interpreting"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    """
    Outcome of a clean submission.
    """

    batches: int = 0
    events: int = 0
    status_codes: List[int] = field(default_factory=list)

    def __bool__(self) -> bool:
        return True


class SubmissionEngine:
    """
    Sends the events of an EventStore to the collector in batches.

    Args:
        store: The state to submit.
        transport: Delivers each request body and returns the raw response.
        url: Collector URL including the credential query parameters.
        request_fields: Returns the optional top-level fields
            (`non_personalized_ads`, `timestamp_micros`) at submission time.
    """

    def __init__(
        self,
        store: EventStore,
        transport: Transport,
        url: str,
        request_fields: Optional[Callable[[], Mapping[str, Any]]] = None,
        max_per_batch: int = MAX_EVENTS_PER_REQUEST,
        max_body_bytes: int = MAX_REQUEST_BODY_BYTES,
    ):
        self.store = store
        self.transport = transport
        self.url = url
        self._request_fields = request_fields or dict
        self.max_per_batch = max_per_batch
        self.max_body_bytes = max_body_bytes
        self.state = SubmissionState.IDLE

    def submit(
        self, session_id: Optional[int] = None, debug_mode: bool = False
    ) -> SubmissionResult:
        """
        Submit every stored event.

        Returns:
            SubmissionResult: When every batch was accepted without problems.

        Raises:
            MissingRequiredFieldsError: Before any dispatch, if no identity is set.
            AggregatedSubmissionError: After all batches, if any problem was recorded.
        """
        self.state = SubmissionState.BUILDING

        # Missing identity is a hard failure before any request is made,
        # rather than a problem recorded alongside the server responses.
        missing = self.store.required_fields_missing()
        if missing:
            self.state = SubmissionState.FAILED
            raise MissingRequiredFieldsError(missing)

        events = self.store.events
        aggregator = ErrorAggregator()
        result = SubmissionResult()
        logger.info(
            SUBMIT_STARTED,
            extra={"events": len(events), "max_per_batch": self.max_per_batch},
        )

        for index, batch in enumerate(partition(events, self.max_per_batch)):
            self.state = SubmissionState.BUILDING
            body = self._build_body(batch, session_id, debug_mode)
            serialized = serialize_body(body)

            if not check_size(serialized, self.max_body_bytes):
                logger.info(
                    SUBMIT_BATCH_SKIPPED,
                    extra={"batch": index, "size": len(serialized)},
                )
                aggregator.record(f"Request body exceeds {self._size_limit_label()}")
                continue

            self.state = SubmissionState.DISPATCHING
            try:
                response = self.transport.post(self.url, body)
            except TransportError as e:
                aggregator.record(f"Request failed: {e}")
                continue

            logger.debug(
                SUBMIT_BATCH_DISPATCHED,
                extra={
                    "batch": index,
                    "events": len(batch),
                    "status_code": response.status_code,
                },
            )
            result.batches += 1
            result.events += len(batch)
            result.status_codes.append(response.status_code)

            self.state = SubmissionState.INTERPRETING
            self._interpret(response, aggregator)

        return self._finalize(aggregator, result)

    def _size_limit_label(self) -> str:
        if self.max_body_bytes % KB == 0:
            return f"{self.max_body_bytes // KB}kB"
        return f"{self.max_body_bytes} bytes"

    def _build_body(
        self,
        batch: Sequence[Mapping[str, Any]],
        session_id: Optional[int],
        debug_mode: bool,
    ) -> dict:
        fields = self._request_fields()
        return build_envelope(
            self.store.identity,
            self.store.user_properties,
            stamp_batch(batch, session_id=session_id, debug_mode=debug_mode),
            non_personalized_ads=fields.get("non_personalized_ads"),
            timestamp_micros=fields.get("timestamp_micros"),
        )

    def _interpret(self, response: TransportResponse, aggregator: ErrorAggregator) -> None:
        status_code = response.status_code or 0
        if status_code not in ALLOW_RESPONSE_CODES:
            aggregator.record(f"Request received code {status_code}")

        if status_code == NO_CONTENT:
            return

        text = decode_body(response.content)
        if not text:
            aggregator.record("Received not body")
            return

        try:
            data = parse_body(text)
        except UnparsableBodyError:
            aggregator.record("Could not parse response")
            return

        for message in extract_validation_messages(data):
            aggregator.record(format_validation_message(message))

    def _finalize(
        self, aggregator: ErrorAggregator, result: SubmissionResult
    ) -> SubmissionResult:
        self.state = SubmissionState.FINALIZING

        if aggregator.has_problems():
            self.state = SubmissionState.FAILED
            logger.error(SUBMIT_FAILED, extra={"problems": len(aggregator)})
            aggregator.raise_if_any()

        self.store.clear()
        self.state = SubmissionState.SUCCEEDED
        logger.info(
            SUBMIT_SUCCEEDED,
            extra={"batches": result.batches, "events": result.events},
        )
        return result
