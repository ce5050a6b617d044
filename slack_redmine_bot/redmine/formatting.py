"""Render Redmine issues as Slack mrkdwn text."""

from __future__ import annotations

from typing import Iterable, Tuple

from .models import BackendIssue

ISSUE_LIST_HEADER = "Issues assigned to <@{user_name}> \n-----------\n"


def issue_link(base_url: str, issue_id: int) -> str:
    return f"{base_url}/issues/{issue_id}"


def format_issue(issue: BackendIssue, base_url: str) -> Tuple[str, str]:
    """Return the deep link and the one-line summary for *issue*."""

    link = issue_link(base_url, issue.id)
    line = (
        f"<{link}|#{issue.id}: {issue.subject}> "
        f"({issue.estimated_hours:.1f}h/{issue.spent_hours:.1f}h)"
    )
    return link, line


def format_issue_list(user_name: str, issues: Iterable[BackendIssue], base_url: str) -> str:
    """Build the reply body listing every issue under a fixed header."""

    lines = [f"{format_issue(issue, base_url)[1]} \n" for issue in issues]
    return ISSUE_LIST_HEADER.format(user_name=user_name) + "".join(lines)
