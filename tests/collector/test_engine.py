import httpx
import pytest

from ga4mp.collector.engine import SubmissionEngine, SubmissionState
from ga4mp.collector.store import EventStore
from ga4mp.errors import (
    AggregatedSubmissionError,
    MissingRequiredFieldsError,
    NetworkConnectionError,
    RequestTimeoutError,
)
from ga4mp.models import Event, Identity
from ga4mp.platform.client import HttpxTransport, TransportResponse

URL = "https://collector.example.com/mp/collect?measurement_id=G-1&api_secret=s"


@pytest.fixture
def store():
    return EventStore(Identity(client_id="555.1234"))


def make_engine(store, transport, **kwargs):
    return SubmissionEngine(store=store, transport=transport, url=URL, **kwargs)


@pytest.mark.unit
class TestCleanSubmission:
    def test_60_events_are_sent_in_three_batches_and_cleared(
        self, store, transport, make_events
    ):
        for event in make_events(60):
            store.add_event(event)
        engine = make_engine(store, transport)

        result = engine.submit()

        assert [len(body["events"]) for body in transport.bodies] == [25, 25, 10]
        sent = [e["params"]["index"] for body in transport.bodies for e in body["events"]]
        assert sent == list(range(60))
        assert all("session_id" not in e["params"] for b in transport.bodies for e in b["events"])
        assert store.events == ()
        assert result
        assert result.batches == 3
        assert result.events == 60
        assert result.status_codes == [204, 204, 204]
        assert engine.state is SubmissionState.SUCCEEDED

    def test_every_request_goes_to_the_configured_url(self, store, transport, make_events):
        for event in make_events(30):
            store.add_event(event)

        make_engine(store, transport).submit()

        assert [url for url, _ in transport.calls] == [URL, URL]

    def test_every_batch_carries_the_top_level_fields(self, store, transport, make_events):
        store.identity.user_id = "user-1"
        store.add_user_property({"name": "plan", "value": "pro"})
        for event in make_events(30):
            store.add_event(event)
        engine = make_engine(
            store,
            transport,
            request_fields=lambda: {"non_personalized_ads": True, "timestamp_micros": 10},
        )

        engine.submit()

        for body in transport.bodies:
            assert body["client_id"] == "555.1234"
            assert body["user_id"] == "user-1"
            assert body["user_properties"] == {"plan": {"value": "pro"}}
            assert body["non_personalized_ads"] is True
            assert body["timestamp_micros"] == 10

    def test_200_without_validation_messages_is_accepted(
        self, store, transport_factory, json_response
    ):
        transport = transport_factory(default=json_response({"validationMessages": []}))
        store.add_event(Event(name="login"))

        make_engine(store, transport).submit()

        assert store.events == ()

    def test_nothing_stored_sends_nothing(self, store, transport):
        result = make_engine(store, transport).submit()

        assert transport.calls == []
        assert result.batches == 0


@pytest.mark.unit
class TestFailedSubmission:
    def test_session_and_debug_are_stamped_and_empty_body_is_reported(
        self, store, transport_factory, make_events
    ):
        transport = transport_factory(default=TransportResponse(200, b""))
        for event in make_events(10):
            store.add_event(event)
        engine = make_engine(store, transport)

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            engine.submit(session_id=42, debug_mode=True)

        events = transport.bodies[0]["events"]
        assert len(events) == 10
        for event in events:
            assert event["params"]["session_id"] == 42
            assert event["params"]["debug_mode"] == 1
        assert exc_info.value.problems == ["Received not body"]
        assert len(store.events) == 10
        assert all("session_id" not in e["params"] for e in store.events)
        assert engine.state is SubmissionState.FAILED

    def test_oversized_batch_is_skipped_and_later_batches_still_sent(
        self, store, transport
    ):
        padding = "x" * 6000
        for i in range(25):
            store.add_event(Event(name="big", params={"i": i, "padding": padding}))
        for i in range(5):
            store.add_event(Event(name="small", params={"i": i}))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert exc_info.value.problems == ["Request body exceeds 130kB"]
        assert len(transport.calls) == 1
        assert [e["name"] for e in transport.bodies[0]["events"]] == ["small"] * 5
        assert len(store.events) == 30

    @pytest.mark.parametrize(
        "max_body_bytes, problem",
        [(100, "Request body exceeds 100 bytes"), (2048, "Request body exceeds 2kB")],
    )
    def test_custom_size_ceiling_is_reported_readably(
        self, store, transport, max_body_bytes, problem
    ):
        store.add_event(Event(name="big", params={"padding": "x" * 3000}))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport, max_body_bytes=max_body_bytes).submit()

        assert exc_info.value.problems == [problem]
        assert transport.calls == []

    def test_unexpected_status_is_reported(self, store, transport_factory, json_response):
        transport = transport_factory(default=json_response({}, status_code=500))
        store.add_event(Event(name="login"))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert exc_info.value.problems == ["Request received code 500"]

    def test_unexpected_204_like_status_still_reads_the_body(
        self, store, transport_factory
    ):
        transport = transport_factory(default=TransportResponse(202, b""))
        store.add_event(Event(name="login"))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert exc_info.value.problems == ["Request received code 202", "Received not body"]

    @pytest.mark.parametrize("content", [b"<html>", b"null", b"{\"a\": "])
    def test_unparsable_body_is_reported(self, store, transport_factory, content):
        transport = transport_factory(default=TransportResponse(200, content))
        store.add_event(Event(name="login"))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert exc_info.value.problems == ["Could not parse response"]

    def test_one_problem_per_validation_message(
        self, store, transport_factory, json_response
    ):
        transport = transport_factory(
            default=json_response(
                {
                    "validationMessages": [
                        {
                            "fieldPath": "events",
                            "description": "Event at index: [0] has invalid name.",
                            "validationCode": "NAME_INVALID",
                        },
                        {
                            "description": "Unable to parse Measurement Protocol JSON payload.",
                            "validationCode": "VALUE_INVALID",
                        },
                    ]
                }
            )
        )
        store.add_event(Event(name="_bad"))

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert exc_info.value.problems == [
            "Validation Message: NAME_INVALID[events]: Event at index: [0] has invalid name.",
            "Validation Message: VALUE_INVALID:Unable to parse Measurement Protocol JSON payload.",
        ]

    def test_problems_from_all_batches_are_collected(
        self, store, transport_factory, json_response, make_events
    ):
        transport = transport_factory(
            responses=[
                TransportResponse(500, b""),
                TransportResponse(204),
                json_response({"validationMessages": [{"validationCode": "C", "description": "d"}]}),
            ]
        )
        for event in make_events(60):
            store.add_event(event)

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert len(transport.calls) == 3
        assert exc_info.value.problems == [
            "Request received code 500",
            "Received not body",
            "Validation Message: C:d",
        ]
        assert len(store.events) == 60

    def test_transport_failures_are_recorded_and_submission_continues(
        self, store, transport_factory, make_events
    ):
        transport = transport_factory(
            responses=[RequestTimeoutError(), NetworkConnectionError(reason="refused")]
        )
        for event in make_events(60):
            store.add_event(event)

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            make_engine(store, transport).submit()

        assert len(transport.calls) == 3
        assert len(exc_info.value.problems) == 2
        assert exc_info.value.problems[0].startswith("Request failed: Request timed out")
        assert "refused" in exc_info.value.problems[1]
        assert len(store.events) == 60

    def test_undecodable_response_does_not_stop_later_batches(self, store, make_events):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(
                    200, headers={"Content-Encoding": "gzip"}, content=b"not gzip"
                )
            return httpx.Response(204)

        transport = HttpxTransport(
            http_client=httpx.Client(transport=httpx.MockTransport(handler))
        )
        for event in make_events(30):
            store.add_event(event)
        engine = make_engine(store, transport)

        with pytest.raises(AggregatedSubmissionError) as exc_info:
            engine.submit()

        assert len(calls) == 2
        assert len(exc_info.value.problems) == 1
        assert exc_info.value.problems[0].startswith("Request failed: ")
        assert len(store.events) == 30
        assert engine.state is SubmissionState.FAILED

    def test_failed_submission_can_be_retried(self, store, transport_factory, make_events):
        transport = transport_factory(responses=[TransportResponse(503, b"")])
        for event in make_events(5):
            store.add_event(event)
        engine = make_engine(store, transport)

        with pytest.raises(AggregatedSubmissionError):
            engine.submit()
        result = engine.submit()

        assert result.events == 5
        assert transport.bodies[0] == transport.bodies[1]
        assert store.events == ()


@pytest.mark.unit
class TestRequiredFields:
    def test_missing_identity_fails_before_dispatch(self, transport, make_events):
        store = EventStore()
        for event in make_events(3):
            store.add_event(event)
        engine = make_engine(store, transport)

        with pytest.raises(MissingRequiredFieldsError) as exc_info:
            engine.submit()

        assert exc_info.value.fields == ["client_id"]
        assert transport.calls == []
        assert len(store.events) == 3
        assert engine.state is SubmissionState.FAILED

    def test_user_id_alone_is_enough(self, transport):
        store = EventStore(Identity(user_id="user-1"))
        store.add_event(Event(name="login"))

        make_engine(store, transport).submit()

        assert "client_id" not in transport.bodies[0]
        assert transport.bodies[0]["user_id"] == "user-1"
