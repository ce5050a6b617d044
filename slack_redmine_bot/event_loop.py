"""Single-consumer loop draining Socket Mode requests one at a time."""

from __future__ import annotations

import queue
import threading
from enum import Enum
from typing import Any, Callable
from uuid import uuid4

import structlog
from slack_sdk.socket_mode.response import SocketModeResponse
from structlog.contextvars import bind_contextvars, unbind_contextvars

from slack_redmine_bot.errors import ReplyDeliveryError, TransportCastError, UnsupportedEventType

DEFAULT_POLL_INTERVAL = 0.5


class LoopState(str, Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


def socket_mode_acknowledger(socket_client) -> Callable[[Any], None]:
    """Return a callable acknowledging a request's envelope on *socket_client*."""

    def acknowledge(request) -> None:
        socket_client.send_socket_mode_response(SocketModeResponse(envelope_id=request.envelope_id))

    return acknowledge


class EventLoop:
    """Acknowledge then dispatch each inbound request in arrival order.

    The transport pushes requests through :meth:`listener` (or :meth:`enqueue`)
    from its own threads; :meth:`run` is the only consumer. Cancellation via
    :meth:`stop` is observed between deliveries, so an in-flight handler always
    runs to completion.
    """

    def __init__(
        self,
        *,
        dispatch: Callable[[Any], None],
        acknowledge: Callable[[Any], None],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("Poll interval must be greater than zero seconds.")

        self._dispatch = dispatch
        self._acknowledge = acknowledge
        self._poll_interval = poll_interval
        self._queue: queue.Queue = queue.Queue()
        self._stop_requested = threading.Event()
        self.processed = 0
        self.failed = 0

    @property
    def state(self) -> LoopState:
        if self._stop_requested.is_set():
            return LoopState.SHUTTING_DOWN
        return LoopState.RUNNING

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, request: Any) -> None:
        self._queue.put(request)

    def listener(self, client: Any, request: Any) -> None:
        """Socket Mode request listener feeding the queue."""

        self.enqueue(request)

    def stop(self) -> None:
        self._stop_requested.set()

    def run(self) -> None:
        log = structlog.get_logger()
        log.info("event_loop_started")
        while not self._stop_requested.is_set():
            self.run_once(timeout=self._poll_interval)
        log.info("event_loop_stopped", processed=self.processed, failed=self.failed)

    def run_once(self, timeout: float | None = None) -> bool:
        """Process at most one request; return False when none arrived in time."""

        try:
            request = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False

        try:
            self._handle(request)
        finally:
            self._queue.task_done()
        return True

    def _handle(self, request: Any) -> None:
        trace_id = str(uuid4())
        bind_contextvars(trace_id=trace_id)
        log = structlog.get_logger().bind(
            request_type=getattr(request, "type", None),
            envelope_id=getattr(request, "envelope_id", None),
        )
        try:
            try:
                self._acknowledge(request)
            except Exception:
                self.failed += 1
                log.exception("request_ack_failed")
                return

            try:
                self._dispatch(request)
            except TransportCastError as exc:
                self.failed += 1
                log.warning("request_cast_failed", error=str(exc))
            except UnsupportedEventType as exc:
                self.failed += 1
                log.error("unsupported_event_type", event_type=exc.event_type)
            except ReplyDeliveryError as exc:
                self.failed += 1
                log.error("reply_delivery_failed", channel=exc.channel, error=exc.error)
            except Exception:
                self.failed += 1
                log.exception("request_handler_failed")
            else:
                self.processed += 1
        finally:
            unbind_contextvars("trace_id")
