"""Events API envelope parsing and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from slack_redmine_bot.context import BotContext
from slack_redmine_bot.errors import TransportCastError
from slack_redmine_bot.replies import NEUTRAL, POSITIVE

CALLBACK_EVENT = "event_callback"
APP_MENTION = "app_mention"


@dataclass(frozen=True)
class InboundEvent:
    """An Events API envelope and the inner event it carries."""

    envelope_type: str | None
    inner_type: str | None = None
    user: str = ""
    text: str = ""
    channel: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "InboundEvent":
        if not isinstance(payload, Mapping):
            raise TransportCastError("Events API payload is not an object.")

        inner = payload.get("event") or {}
        if not isinstance(inner, Mapping):
            raise TransportCastError("Events API inner event is not an object.")

        return cls(
            envelope_type=payload.get("type"),
            inner_type=inner.get("type"),
            user=inner.get("user") or "",
            text=inner.get("text") or "",
            channel=inner.get("channel") or "",
        )


EventHandler = Callable[[InboundEvent, BotContext], None]


def handle_app_mention(event: InboundEvent, context: BotContext) -> None:
    user_name = context.slack.get_user_name(event.user)

    if "hello" in event.text.lower():
        text, color = f"Hello {user_name}", POSITIVE
    else:
        text, color = f"How can I help you @{user_name}?", NEUTRAL

    context.reply(channel=event.channel, text=text, color=color, initiator=user_name)


EVENT_HANDLERS: Dict[str, EventHandler] = {
    APP_MENTION: handle_app_mention,
}
