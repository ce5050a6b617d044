"""Attachment-style reply payloads posted back to Slack."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, List, Tuple

# Accent colours are chosen by intent, never by callers spelling out hex codes.
POSITIVE = "#4af030"
NEUTRAL = "#3d3d3d"
FAILURE = "#d9534f"

DATE_FIELD = "Date"
INITIATOR_FIELD = "Initiator"


@dataclass(frozen=True)
class ReplyPayload:
    """A single reply destined for one Slack channel."""

    channel: str
    text: str
    color: str
    fields: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def field_value(self, title: str) -> str | None:
        for field_title, value in self.fields:
            if field_title == title:
                return value
        return None

    def to_attachment(self) -> Dict[str, Any]:
        """Render the payload as a Slack secondary attachment."""

        fields: List[Dict[str, Any]] = [
            {"title": title, "value": value, "short": False} for title, value in self.fields
        ]
        return {
            "fallback": self.text,
            "text": self.text,
            "color": self.color,
            "fields": fields,
        }


def build_reply(
    *,
    channel: str,
    text: str,
    color: str,
    initiator: str,
    now: datetime | None = None,
) -> ReplyPayload:
    """Build a reply carrying the Date and Initiator audit fields."""

    timestamp = (now or datetime.now(UTC)).isoformat(timespec="seconds")
    return ReplyPayload(
        channel=channel,
        text=text,
        color=color,
        fields=((DATE_FIELD, timestamp), (INITIATOR_FIELD, initiator)),
    )
