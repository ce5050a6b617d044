"""Tests for the single-consumer Socket Mode event loop."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
import sys

import pytest
from slack_sdk.socket_mode.request import SocketModeRequest
from structlog.contextvars import get_contextvars
from structlog.testing import capture_logs

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slack_redmine_bot.context import BotContext  # noqa: E402
from slack_redmine_bot.errors import (  # noqa: E402
    ReplyDeliveryError,
    TransportCastError,
    UnsupportedEventType,
)
from slack_redmine_bot.event_loop import EventLoop, LoopState, socket_mode_acknowledger  # noqa: E402
from slack_redmine_bot.redmine import BackendUser  # noqa: E402
from slack_redmine_bot.router import CommandRouter  # noqa: E402


def _request(request_type="slash_commands", envelope_id="E1", payload=None):
    return SocketModeRequest(type=request_type, envelope_id=envelope_id, payload=payload or {})


class RecordingSlack:
    def __init__(self, timeline):
        self.timeline = timeline

    def post_reply(self, payload):
        self.timeline.append(("post", payload.channel))
        return {"ok": True}

    def get_user_name(self, user_id):
        self.timeline.append(("users_info", user_id))
        return "alice"


class RecordingRedmine:
    base_url = "https://redmine.example.com"

    def __init__(self, timeline):
        self.timeline = timeline

    def list_users(self):
        self.timeline.append(("list_users",))
        return [BackendUser(id=7, login="alice")]

    def list_issues(self, assigned_to_id):
        self.timeline.append(("list_issues", assigned_to_id))
        return []


def _recording_loop(timeline):
    context = BotContext(
        slack=RecordingSlack(timeline),
        redmine=RecordingRedmine(timeline),
        clock=lambda: datetime(2024, 1, 1, tzinfo=UTC),
    )
    router = CommandRouter(context)
    return EventLoop(
        dispatch=router.handle_request,
        acknowledge=lambda request: timeline.append(("ack", request.envelope_id)),
    )


def test_slash_command_acknowledged_before_backend_calls():
    timeline = []
    loop = _recording_loop(timeline)
    loop.enqueue(
        _request(payload={"command": "/issues", "channel_id": "C1", "user_name": "alice"})
    )

    assert loop.run_once(timeout=0) is True

    assert timeline == [
        ("ack", "E1"),
        ("list_users",),
        ("list_issues", 7),
        ("post", "C1"),
    ]


def test_mention_event_acknowledged_before_handler():
    timeline = []
    loop = _recording_loop(timeline)
    loop.listener(
        object(),
        _request(
            "events_api",
            "E2",
            {
                "type": "event_callback",
                "event": {"type": "app_mention", "user": "U1", "text": "hello", "channel": "C2"},
            },
        ),
    )

    loop.run_once(timeout=0)

    assert timeline == [("ack", "E2"), ("users_info", "U1"), ("post", "C2")]


def test_requests_processed_in_arrival_order():
    handled = []
    loop = EventLoop(dispatch=lambda request: handled.append(request.envelope_id), acknowledge=lambda request: None)
    for envelope_id in ("A", "B", "C"):
        loop.enqueue(_request(envelope_id=envelope_id))

    while loop.run_once(timeout=0):
        pass

    assert handled == ["A", "B", "C"]
    assert loop.processed == 3
    assert loop.pending == 0


def test_run_once_returns_false_when_idle():
    loop = EventLoop(dispatch=lambda request: None, acknowledge=lambda request: None)

    assert loop.run_once(timeout=0.01) is False


@pytest.mark.parametrize(
    ("error", "event"),
    [
        (TransportCastError("bad shape"), "request_cast_failed"),
        (UnsupportedEventType("app_rate_limited"), "unsupported_event_type"),
        (ReplyDeliveryError("C1", "not_in_channel"), "reply_delivery_failed"),
        (RuntimeError("unexpected"), "request_handler_failed"),
    ],
)
def test_handler_failures_are_logged_and_loop_continues(error, event):
    handled = []

    def dispatch(request):
        if request.envelope_id == "bad":
            raise error
        handled.append(request.envelope_id)

    loop = EventLoop(dispatch=dispatch, acknowledge=lambda request: None)
    loop.enqueue(_request(envelope_id="bad"))
    loop.enqueue(_request(envelope_id="good"))

    with capture_logs() as logs:
        loop.run_once(timeout=0)
        loop.run_once(timeout=0)

    assert handled == ["good"]
    assert loop.failed == 1
    assert loop.processed == 1
    assert any(entry["event"] == event and entry["envelope_id"] == "bad" for entry in logs)


def test_failed_ack_skips_dispatch():
    handled = []

    def acknowledge(request):
        raise ConnectionError("socket closed")

    loop = EventLoop(dispatch=lambda request: handled.append(request), acknowledge=acknowledge)
    loop.enqueue(_request())

    with capture_logs() as logs:
        loop.run_once(timeout=0)

    assert handled == []
    assert loop.failed == 1
    assert any(entry["event"] == "request_ack_failed" for entry in logs)


def test_trace_id_bound_during_dispatch_only():
    seen = []
    loop = EventLoop(
        dispatch=lambda request: seen.append(get_contextvars().get("trace_id")),
        acknowledge=lambda request: None,
    )
    loop.enqueue(_request())

    loop.run_once(timeout=0)

    assert seen and seen[0]
    assert "trace_id" not in get_contextvars()


def test_stop_transitions_state_and_ends_run():
    def dispatch(request):
        loop.stop()

    loop = EventLoop(dispatch=dispatch, acknowledge=lambda request: None, poll_interval=0.01)
    loop.enqueue(_request(envelope_id="last"))
    loop.enqueue(_request(envelope_id="never"))

    assert loop.state is LoopState.RUNNING
    loop.run()

    assert loop.state is LoopState.SHUTTING_DOWN
    assert loop.processed == 1
    assert loop.pending == 1


def test_invalid_poll_interval_rejected():
    with pytest.raises(ValueError):
        EventLoop(dispatch=lambda request: None, acknowledge=lambda request: None, poll_interval=0)


def test_socket_mode_acknowledger_sends_envelope_id():
    class DummySocketClient:
        def __init__(self):
            self.responses = []

        def send_socket_mode_response(self, response):
            self.responses.append(response)

    socket_client = DummySocketClient()

    socket_mode_acknowledger(socket_client)(_request(envelope_id="env-1"))

    (response,) = socket_client.responses
    assert response.envelope_id == "env-1"
