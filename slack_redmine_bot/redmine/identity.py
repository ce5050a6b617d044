"""Map Slack user names onto Redmine user ids."""

from __future__ import annotations

from typing import Iterable, List

import structlog

from .client import RedmineClient
from .models import BackendIssue, BackendUser

# Redmine never hands out id 0; it stands for "nobody", whose issue list is empty.
UNRESOLVED_USER_ID = 0


def find_user_id(users: Iterable[BackendUser], login: str) -> int | None:
    """Return the id of the first user whose login matches exactly."""

    for user in users:
        if user.login == login:
            return user.id
    return None


class IdentityResolver:
    """Resolve Slack display names using a fresh Redmine user listing."""

    def __init__(self, client: RedmineClient) -> None:
        self._client = client

    def resolve(self, display_name: str) -> int | None:
        users = self._client.list_users()
        user_id = find_user_id(users, display_name)
        structlog.get_logger().info(
            "identity_resolved" if user_id is not None else "identity_unresolved",
            login=display_name,
            user_count=len(users),
        )
        return user_id


def fetch_assigned_issues(client: RedmineClient, user_id: int | None) -> List[BackendIssue]:
    """Return issues for *user_id*; the unresolved sentinel yields an empty list."""

    if user_id is None or user_id == UNRESOLVED_USER_ID:
        return []
    return client.list_issues(user_id)
