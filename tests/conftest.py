import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

from ga4mp.models import Event
from ga4mp.platform.client import TransportResponse


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without network access")


class RecordingTransport:
    """
    Transport double that records every POST and replays queued responses.

    Queued exceptions are raised instead of returned. When the queue runs
    dry, `default` is returned.
    """

    def __init__(
        self,
        responses: Optional[List[Any]] = None,
        default: TransportResponse = TransportResponse(204),
    ):
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.closed = False

    def post(self, url: str, body: Mapping[str, Any]) -> TransportResponse:
        self.calls.append((url, json.loads(json.dumps(body))))
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [body for _, body in self.calls]


@pytest.fixture
def transport_factory():
    return RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def json_response():
    def _response(payload: Any, status_code: int = 200) -> TransportResponse:
        return TransportResponse(status_code, json.dumps(payload).encode("utf-8"))

    return _response


@pytest.fixture
def make_events():
    def _make(count: int, **params) -> List[Event]:
        return [
            Event(name="page_view", params={"index": i, **params})
            for i in range(count)
        ]

    return _make
