import copy
import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

import pydantic

from ga4mp.constants import MAX_USER_PROPERTIES
from ga4mp.errors import LimitExceededError, ValidationError
from ga4mp.models import Event, Identity, UserProperty

logger = logging.getLogger(__name__)

EventInput = Union[Event, Mapping[str, Any]]
UserPropertyInput = Union[UserProperty, Mapping[str, Any]]


class EventStore:
    """
    In-memory state of a collector: identity, user properties and events.

    Events are kept in insertion order as plain records. They are never
    capped here; the per-request limit is applied when batches are planned.
    """

    def __init__(self, identity: Optional[Identity] = None):
        self.identity = identity if identity is not None else Identity()
        self._user_properties: Dict[str, Any] = {}
        self._events: List[Dict[str, Any]] = []

    @property
    def events(self) -> Tuple[Dict[str, Any], ...]:
        """
        Copies of the stored events, in insertion order.
        """
        return tuple(copy.deepcopy(event) for event in self._events)

    @property
    def user_properties(self) -> Dict[str, Any]:
        return dict(self._user_properties)

    def add_user_property(self, prop: UserPropertyInput) -> int:
        """
        Add or replace a user property by name.

        Returns:
            int: How many user properties are stored.

        Raises:
            LimitExceededError: If the store already holds the maximum.
        """
        if len(self._user_properties) >= MAX_USER_PROPERTIES:
            raise LimitExceededError("user properties", MAX_USER_PROPERTIES)

        if not isinstance(prop, UserProperty):
            try:
                prop = UserProperty.model_validate(prop)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid user property: {e}") from e

        self._user_properties[prop.name] = prop.value
        return len(self._user_properties)

    def add_event(self, event: EventInput) -> int:
        """
        Append an event to the ordered sequence.

        Returns:
            int: How many events are stored.
        """
        if not isinstance(event, Event):
            try:
                event = Event.model_validate(event)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid event: {e}") from e

        self._events.append(copy.deepcopy(event.to_dict()))
        logger.debug("Stored event %s, %s in store", event.name, len(self._events))
        return len(self._events)

    def required_fields_missing(self) -> Set[str]:
        return self.identity.required_fields_missing()

    def clear(self) -> None:
        """
        Drop the stored events. Identity and user properties are kept.
        """
        self._events.clear()
