"""Application entry point for the Slack Redmine bot."""

from __future__ import annotations

import signal
import threading
from pathlib import Path

import structlog
from dotenv import load_dotenv
from flask import Flask, jsonify
from slack_sdk import WebClient
from slack_sdk.socket_mode import SocketModeClient

from slack_redmine_bot.config import AppSettings, get_settings
from slack_redmine_bot.context import BotContext
from slack_redmine_bot.event_loop import EventLoop, LoopState, socket_mode_acknowledger
from slack_redmine_bot.logging_config import configure_logging
from slack_redmine_bot.redmine import RedmineClient
from slack_redmine_bot.router import CommandRouter
from slack_redmine_bot.slack_client import SlackClient


def _load_version() -> str:
    version_file = Path(__file__).resolve().parent / "VERSION"
    if version_file.exists():
        return version_file.read_text(encoding="utf-8").strip()
    return "unknown"


def create_app(event_loop: EventLoop | None = None) -> Flask:
    """Create the Flask application serving the health endpoint."""

    flask_app = Flask(__name__)
    flask_app.config["APP_VERSION"] = _load_version()

    @flask_app.route("/healthz", methods=["GET"])
    def healthz():
        health: dict[str, object] = {"ok": True}
        health["version"] = flask_app.config.get("APP_VERSION", "unknown")

        try:
            get_settings()
            health["config"] = "valid"
        except RuntimeError as exc:
            health["config"] = "invalid"
            health["config_error"] = str(exc)
            health["ok"] = False

        if event_loop is not None:
            health["event_loop"] = event_loop.state.value
            health["processed"] = event_loop.processed
            health["failed"] = event_loop.failed
            health["pending"] = event_loop.pending
            if event_loop.state is LoopState.SHUTTING_DOWN:
                health["ok"] = False

        status = 200 if health["ok"] else 503
        return jsonify(health), status

    return flask_app


def build_router(settings: AppSettings, web_client: WebClient) -> CommandRouter:
    redmine = RedmineClient(
        base_url=settings.redmine_url,
        api_key=settings.redmine_api_key,
        timeout=settings.redmine_timeout,
    )
    context = BotContext(slack=SlackClient(client=web_client), redmine=redmine)
    return CommandRouter(context)


def _serve_health(flask_app: Flask, port: int) -> threading.Thread:
    thread = threading.Thread(
        target=flask_app.run,
        kwargs={"host": "0.0.0.0", "port": port, "use_reloader": False},
        name="healthz",
        daemon=True,
    )
    thread.start()
    return thread


def main() -> None:
    load_dotenv(".env")
    settings = get_settings()
    configure_logging(debug=settings.debug)
    log = structlog.get_logger()

    web_client = WebClient(token=settings.bot_token)
    socket_client = SocketModeClient(
        app_token=settings.app_token,
        web_client=web_client,
        trace_enabled=settings.debug,
    )
    router = build_router(settings, web_client)
    event_loop = EventLoop(
        dispatch=router.handle_request,
        acknowledge=socket_mode_acknowledger(socket_client),
    )
    socket_client.socket_mode_request_listeners.append(event_loop.listener)

    def request_shutdown(signum, _frame):
        log.info("shutdown_requested", signal=signum)
        event_loop.stop()

    signal.signal(signal.SIGINT, request_shutdown)
    signal.signal(signal.SIGTERM, request_shutdown)

    _serve_health(create_app(event_loop), settings.health_port)

    socket_client.connect()
    log.info("socket_mode_connected", commands=list(router.commands))
    try:
        event_loop.run()
    finally:
        socket_client.close()


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    main()
