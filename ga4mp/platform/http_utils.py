import json
import logging
from typing import Any, List, Mapping, Optional

logger = logging.getLogger(__name__)

VALIDATION_MESSAGES_KEY = "validationMessages"


class UnparsableBodyError(ValueError):
    """
    Raised when a non-empty response body does not decode to a JSON value.
    """


def decode_body(content: bytes) -> str:
    """
    Decode a response body, replacing undecodable bytes.
    """
    if not content:
        return ""
    return content.decode("utf-8", errors="replace")


def parse_body(text: str) -> Any:
    """
    Parse a non-empty response body.

    JSON `null` is treated the same as invalid JSON.

    Raises:
        UnparsableBodyError: If the body cannot be used.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.debug("Invalid JSON in collector response: %s", e)
        raise UnparsableBodyError(str(e)) from e

    if data is None:
        raise UnparsableBodyError("Response body is JSON null")

    return data


def extract_validation_messages(data: Any) -> List[Mapping[str, Any]]:
    """
    Return the validationMessages of a parsed response, or an empty list.
    """
    if not isinstance(data, Mapping):
        return []

    messages = data.get(VALIDATION_MESSAGES_KEY) or []
    if not isinstance(messages, list):
        return []
    return [msg for msg in messages if isinstance(msg, Mapping)]


def format_validation_message(message: Mapping[str, Any]) -> str:
    """
    Format one validation message as a problem line.

    The field path is wrapped in brackets when present; otherwise the code is
    followed directly by a colon.
    """
    code = message.get("validationCode", "")
    description = message.get("description", "")
    field_path: Optional[str] = message.get("fieldPath")

    if field_path is not None:
        return f"Validation Message: {code}[{field_path}]: {description}"

    return f"Validation Message: {code}:{description}"
