"""Route Socket Mode requests to slash command and event handlers."""

from __future__ import annotations

from typing import Any, Dict, Mapping

import structlog

from slack_redmine_bot.commands import COMMAND_HANDLERS, CommandHandler, SlashCommand, handle_unknown
from slack_redmine_bot.context import BotContext
from slack_redmine_bot.errors import UnsupportedEventType
from slack_redmine_bot.events import CALLBACK_EVENT, EVENT_HANDLERS, EventHandler, InboundEvent

EVENTS_API = "events_api"
SLASH_COMMANDS = "slash_commands"


class CommandRouter:
    """Select exactly one handler per inbound command or event."""

    def __init__(
        self,
        context: BotContext,
        *,
        command_handlers: Mapping[str, CommandHandler] | None = None,
        event_handlers: Mapping[str, EventHandler] | None = None,
        default_handler: CommandHandler = handle_unknown,
    ) -> None:
        self._context = context
        self._commands: Dict[str, CommandHandler] = dict(
            COMMAND_HANDLERS if command_handlers is None else command_handlers
        )
        self._events: Dict[str, EventHandler] = dict(
            EVENT_HANDLERS if event_handlers is None else event_handlers
        )
        self._default = default_handler

    @property
    def context(self) -> BotContext:
        return self._context

    @property
    def commands(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def register(self, name: str, handler: CommandHandler) -> None:
        self._commands[name] = handler

    def route_command(self, command: SlashCommand) -> CommandHandler:
        """Invoke the handler bound to the command name and return it."""

        handler = self._commands.get(command.command, self._default)
        structlog.get_logger().info(
            "slash_command_received",
            command=command.command,
            channel=command.channel_id,
            handler=handler.__name__,
        )
        handler(command, self._context)
        return handler

    def route_event(self, event: InboundEvent) -> EventHandler | None:
        """Invoke the handler bound to the inner event type, if any."""

        if event.envelope_type != CALLBACK_EVENT:
            raise UnsupportedEventType(event.envelope_type)

        handler = self._events.get(event.inner_type or "")
        if handler is None:
            structlog.get_logger().debug("event_ignored", event_type=event.inner_type)
            return None

        structlog.get_logger().info("event_received", event_type=event.inner_type, channel=event.channel)
        handler(event, self._context)
        return handler

    def handle_request(self, request: Any) -> None:
        """Dispatch a Socket Mode request on its type."""

        if request.type == EVENTS_API:
            self.route_event(InboundEvent.from_payload(request.payload))
        elif request.type == SLASH_COMMANDS:
            self.route_command(SlashCommand.from_payload(request.payload))
        else:
            structlog.get_logger().debug("request_ignored", request_type=request.type)
