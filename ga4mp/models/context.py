import math
from datetime import datetime, timezone
from numbers import Real
from typing import Optional, Set, Union

from pydantic.dataclasses import dataclass

from ga4mp.constants import MAX_TIMESTAMP_AGE, MICROS_PER_SECOND
from ga4mp.errors import ValidationError

TimestampInput = Union[int, float, datetime]


@dataclass
class Identity:
    """
    Identifiers of the user the events belong to.

    At least one of them must be non-empty when submitting.
    """

    client_id: Optional[str] = None
    user_id: Optional[str] = None

    def required_fields_missing(self) -> Set[str]:
        if not self.client_id and not self.user_id:
            return {"client_id"}
        return set()


@dataclass
class SessionContext:
    """
    Request-wide values that are stamped into every event of every batch.
    """

    session_id: Optional[int] = None
    debug_mode: bool = False


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp_micros(value: TimestampInput, now: Optional[datetime] = None) -> int:
    """
    Normalize a Unix time in seconds (or a datetime) to integer microseconds.

    Args:
        value: `time.time()` style seconds, int or float, or an aware/naive datetime.
        now: Reference instant for the age check, defaults to the current time.

    Raises:
        ValidationError: If the value is not numeric or older than the allowed age.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        seconds = value.timestamp()
    elif isinstance(value, Real) and not isinstance(value, bool):
        try:
            seconds = float(value)
        except OverflowError as e:
            raise ValidationError("Timestamp value must be numeric") from e
    else:
        raise ValidationError("Timestamp value must be numeric")

    if not math.isfinite(seconds):
        raise ValidationError("Timestamp value must be numeric")

    try:
        micros = math.floor(seconds * MICROS_PER_SECOND)
    except OverflowError as e:
        raise ValidationError("Timestamp value must be numeric") from e

    limit = (now or _utcnow()) - MAX_TIMESTAMP_AGE
    if micros < math.floor(limit.timestamp()) * MICROS_PER_SECOND:
        raise ValidationError(
            f"Timestamp can not be older than {MAX_TIMESTAMP_AGE.days} days"
        )

    return micros
