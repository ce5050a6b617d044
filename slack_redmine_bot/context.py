"""Collaborators shared by every command and event handler."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable

from slack_redmine_bot.redmine import RedmineClient
from slack_redmine_bot.replies import ReplyPayload, build_reply
from slack_redmine_bot.slack_client import SlackClient


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class BotContext:
    slack: SlackClient
    redmine: RedmineClient
    clock: Callable[[], datetime] = field(default=_utcnow)

    def reply(self, *, channel: str, text: str, color: str, initiator: str) -> ReplyPayload:
        """Build a reply stamped with the current time and post it."""

        payload = build_reply(
            channel=channel,
            text=text,
            color=color,
            initiator=initiator,
            now=self.clock(),
        )
        self.slack.post_reply(payload)
        return payload
