"""Thin wrapper utilities around the Slack WebClient."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.error import URLError

import structlog
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from slack_redmine_bot.errors import ReplyDeliveryError
from slack_redmine_bot.replies import ReplyPayload


def _error_code(exc: SlackApiError) -> str:
    response = getattr(exc, "response", None)
    if response is None:
        return str(exc)
    return response.get("error") or str(exc)


class SlackClient:
    """Encapsulate Slack WebClient interactions for easier testing."""

    def __init__(self, *, token: str | None = None, client: WebClient | None = None) -> None:
        if client is None and token is None:
            raise ValueError("Either an instantiated client or a bot token must be provided.")

        self._client = client or WebClient(token=token)

    @property
    def client(self) -> WebClient:
        """Expose the underlying WebClient for advanced use cases."""

        return self._client

    def post_reply(self, payload: ReplyPayload) -> Mapping[str, Any]:
        """Post *payload* as a single coloured attachment."""

        try:
            return self._client.chat_postMessage(
                channel=payload.channel,
                attachments=[payload.to_attachment()],
            )
        except SlackApiError as exc:
            raise ReplyDeliveryError(payload.channel, _error_code(exc)) from exc
        except (URLError, OSError) as exc:
            raise ReplyDeliveryError(payload.channel, str(exc)) from exc

    def get_user_name(self, user_id: str) -> str:
        """Return the Slack handle for *user_id*, falling back to the id itself."""

        try:
            response = self._client.users_info(user=user_id)
        except SlackApiError as exc:
            structlog.get_logger().warning("user_lookup_failed", user_id=user_id, error=_error_code(exc))
            return user_id

        user = response.get("user") or {}
        return user.get("name") or user_id
