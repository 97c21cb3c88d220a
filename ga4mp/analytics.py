"""
Collector facade: gather events and user properties, then submit them.

Example:

    >>> analytics = Analytics("G-XXXXXXX", "secret").set_client_id("555.123")
    >>> analytics.add_event(Event(name="login", params={"method": "email"}))
    >>> analytics.submit()
"""

import logging
from typing import Any, Dict, Optional

from ga4mp.collector import (
    EventStore,
    SubmissionEngine,
    SubmissionResult,
    build_envelope,
)
from ga4mp.collector.store import EventInput, UserPropertyInput
from ga4mp.constants import URL_LIVE
from ga4mp.errors import ValidationError
from ga4mp.logs_helpers import log_call
from ga4mp.models import Identity, SessionContext, to_timestamp_micros
from ga4mp.models.context import TimestampInput
from ga4mp.platform.client import HttpxTransport, Transport, build_collect_url

logger = logging.getLogger(__name__)


class Analytics:
    """
    Collects everything to send to the collector for one user.

    Setters return the instance so calls can be chained. Events accumulate
    until `submit()` delivers them all; they are only dropped after a fully
    successful submission.

    Args:
        measurement_id: Identifies the destination analytics property.
        api_secret: Authorizes ingestion for that property.
        debug_mode: Stamp `debug_mode = 1` into every submitted event.
        transport: Delivers request bodies, an HttpxTransport by default.
        url: Collector URL, the production endpoint by default.
    """

    def __init__(
        self,
        measurement_id: str,
        api_secret: str,
        debug_mode: bool = False,
        transport: Optional[Transport] = None,
        url: Optional[str] = None,
    ):
        self.measurement_id = measurement_id
        self._api_secret = api_secret
        self.session = SessionContext(debug_mode=debug_mode)
        self.store = EventStore(Identity())

        self.non_personalized_ads: Optional[bool] = None
        self.timestamp_micros: Optional[int] = None

        self._owns_transport = transport is None
        self.transport = transport if transport is not None else HttpxTransport()
        self.engine = SubmissionEngine(
            store=self.store,
            transport=self.transport,
            url=build_collect_url(url or URL_LIVE, measurement_id, api_secret),
            request_fields=self._request_fields,
        )

    @classmethod
    def new(cls, measurement_id: str, api_secret: str, debug_mode: bool = False) -> "Analytics":
        return cls(measurement_id, api_secret, debug_mode)

    @property
    def debug_mode(self) -> bool:
        return self.session.debug_mode

    def allow_personalized_ads(self, allow: bool) -> "Analytics":
        self.non_personalized_ads = not allow
        return self

    def set_client_id(self, client_id: str) -> "Analytics":
        self.store.identity.client_id = client_id
        return self

    def get_client_id(self) -> Optional[str]:
        return self.store.identity.client_id

    def set_user_id(self, user_id: str) -> "Analytics":
        self.store.identity.user_id = user_id
        return self

    def get_user_id(self) -> Optional[str]:
        return self.store.identity.user_id

    def set_session_id(self, session_id: int) -> "Analytics":
        if isinstance(session_id, bool) or not isinstance(session_id, int) or session_id < 0:
            raise ValidationError("Session id must be a non-negative integer")

        self.session.session_id = session_id
        return self

    def get_session_id(self) -> Optional[int]:
        return self.session.session_id

    def set_timestamp(self, value: TimestampInput) -> "Analytics":
        """
        Set the time the events happened.

        Args:
            value: Unix time in seconds (`time.time()`) or a datetime, no
                older than 3 days.

        Raises:
            ValidationError: If the value is not numeric or too old.
        """
        self.timestamp_micros = to_timestamp_micros(value)
        return self

    def get_timestamp(self) -> Optional[int]:
        return self.timestamp_micros

    def add_user_property(self, prop: UserPropertyInput) -> "Analytics":
        """
        Add a user property; at most 25 can be held.

        Raises:
            LimitExceededError: If 25 user properties are already set.
        """
        self.store.add_user_property(prop)
        return self

    def add_event(self, event: EventInput) -> "Analytics":
        self.store.add_event(event)
        return self

    def _request_fields(self) -> Dict[str, Any]:
        return {
            "non_personalized_ads": self.non_personalized_ads,
            "timestamp_micros": self.timestamp_micros,
        }

    @log_call(show_args=False, show_result=True)
    def submit(self) -> SubmissionResult:
        """
        Push every stored event to the collector.

        Events are cleared only when every batch was accepted without problems.

        Raises:
            MissingRequiredFieldsError: If neither client id nor user id is set.
            AggregatedSubmissionError: If any batch recorded a problem.
        """
        return self.engine.submit(
            session_id=self.session.session_id, debug_mode=self.session.debug_mode
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Current state as the plain structure of a request body, with all
        stored events and without session stamping.
        """
        return build_envelope(
            self.store.identity,
            self.store.user_properties,
            self.store.events,
            **self._request_fields(),
        )

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "Analytics":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(measurement_id={self.measurement_id!r}, "
            f"events={len(self.store.events)}, debug_mode={self.debug_mode})"
        )
