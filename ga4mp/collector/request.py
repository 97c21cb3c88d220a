"""
Assembly of the request body sent to the collector.
"""
import json
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ga4mp.models import Identity


def build_envelope(
    identity: Identity,
    user_properties: Mapping[str, Any],
    events_batch: Sequence[Mapping[str, Any]],
    non_personalized_ads: Optional[bool] = None,
    timestamp_micros: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the outer request body for one batch.

    Only fields that are set are included; unset optional fields are left
    out rather than sent as null.
    """
    body: Dict[str, Any] = {}

    if non_personalized_ads is not None:
        body["non_personalized_ads"] = non_personalized_ads
    if timestamp_micros is not None:
        body["timestamp_micros"] = timestamp_micros
    if identity.client_id:
        body["client_id"] = identity.client_id
    if identity.user_id:
        body["user_id"] = identity.user_id
    if user_properties:
        body["user_properties"] = {
            name: {"value": value} for name, value in user_properties.items()
        }

    body["events"] = list(events_batch)
    return body


def stamp_batch(
    events_batch: Sequence[Mapping[str, Any]],
    session_id: Optional[int] = None,
    debug_mode: bool = False,
) -> List[Dict[str, Any]]:
    """
    Copy a batch, adding the session id and debug flag to every event's params.

    The records passed in are left untouched.
    """
    stamped = []
    for event in events_batch:
        params = dict(event.get("params") or {})

        if session_id:
            params["session_id"] = session_id
        if debug_mode:
            params["debug_mode"] = 1

        stamped.append({**event, "params": params})

    return stamped


def serialize_body(body: Mapping[str, Any]) -> str:
    """
    Compact JSON text of a request body, as measured and as sent.
    """
    return json.dumps(body, separators=(",", ":"))
