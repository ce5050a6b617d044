"""Slash command parsing and handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

import structlog

from slack_redmine_bot.context import BotContext
from slack_redmine_bot.errors import BackendLookupError, TransportCastError
from slack_redmine_bot.redmine import IdentityResolver, fetch_assigned_issues, format_issue_list
from slack_redmine_bot.replies import FAILURE, NEUTRAL

HELP_TEXT = "Hello! {user_name}\nI can show you all your tickets with command /issues"
UNKNOWN_TEXT = "Hello! {user_name}\nSorry, but I can't do that"
BACKEND_DOWN_TEXT = "Sorry, I could not reach the tracker right now. Please try again later."


@dataclass(frozen=True)
class SlashCommand:
    command: str
    channel_id: str
    user_name: str
    text: str = ""

    @classmethod
    def from_payload(cls, payload: Any) -> "SlashCommand":
        if not isinstance(payload, Mapping):
            raise TransportCastError("Slash command payload is not an object.")

        command = payload.get("command")
        channel_id = payload.get("channel_id")
        if not isinstance(command, str) or not isinstance(channel_id, str):
            raise TransportCastError("Slash command payload is missing command or channel_id.")

        return cls(
            command=command,
            channel_id=channel_id,
            user_name=payload.get("user_name") or "",
            text=payload.get("text") or "",
        )


CommandHandler = Callable[[SlashCommand, BotContext], None]


def handle_help(command: SlashCommand, context: BotContext) -> None:
    context.reply(
        channel=command.channel_id,
        text=HELP_TEXT.format(user_name=command.user_name),
        color=NEUTRAL,
        initiator=command.user_name,
    )


def handle_issues(command: SlashCommand, context: BotContext) -> None:
    """Reply with the issues assigned to the Redmine user matching the sender."""

    log = structlog.get_logger().bind(user_name=command.user_name)
    try:
        user_id = IdentityResolver(context.redmine).resolve(command.user_name)
        issues = fetch_assigned_issues(context.redmine, user_id)
    except BackendLookupError as exc:
        log.error("issues_lookup_failed", error=str(exc))
        context.reply(
            channel=command.channel_id,
            text=BACKEND_DOWN_TEXT,
            color=FAILURE,
            initiator=command.user_name,
        )
        return

    log.info("issues_listed", redmine_user_id=user_id, issue_count=len(issues))
    context.reply(
        channel=command.channel_id,
        text=format_issue_list(command.user_name, issues, context.redmine.base_url),
        color=NEUTRAL,
        initiator=command.user_name,
    )


def handle_reserved(command: SlashCommand, context: BotContext) -> None:
    # Registered with Slack but without behaviour yet; succeed without replying.
    structlog.get_logger().info("command_reserved", command=command.command)


def handle_unknown(command: SlashCommand, context: BotContext) -> None:
    context.reply(
        channel=command.channel_id,
        text=UNKNOWN_TEXT.format(user_name=command.user_name),
        color=NEUTRAL,
        initiator=command.user_name,
    )


COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "/help": handle_help,
    "/issues": handle_issues,
    "/active-issues": handle_reserved,
    "/daily-report": handle_reserved,
}
