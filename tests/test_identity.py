"""Tests for resolving Slack names to Redmine user ids."""

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slack_redmine_bot.redmine import (  # noqa: E402
    UNRESOLVED_USER_ID,
    BackendUser,
    IdentityResolver,
    fetch_assigned_issues,
    find_user_id,
)


class DummyRedmine:
    base_url = "https://redmine.example.com"

    def __init__(self, users):
        self.users = users
        self.calls = []

    def list_users(self):
        self.calls.append("list_users")
        return self.users

    def list_issues(self, assigned_to_id):
        self.calls.append(("list_issues", assigned_to_id))
        return ["issue"]


def test_find_user_id_is_case_sensitive():
    users = [BackendUser(id=1, login="Alice"), BackendUser(id=2, login="alice")]

    assert find_user_id(users, "alice") == 2
    assert find_user_id(users, "Alice") == 1
    assert find_user_id(users, "ALICE") is None


def test_find_user_id_prefers_first_duplicate():
    users = [
        BackendUser(id=5, login="bob"),
        BackendUser(id=9, login="bob"),
    ]

    assert find_user_id(users, "bob") == 5


def test_resolver_fetches_listing_once_per_call():
    redmine = DummyRedmine([BackendUser(id=7, login="alice")])
    resolver = IdentityResolver(redmine)

    assert resolver.resolve("alice") == 7
    assert resolver.resolve("carol") is None
    assert redmine.calls == ["list_users", "list_users"]


def test_unresolved_identity_yields_no_issues_without_backend_call():
    redmine = DummyRedmine([])

    assert fetch_assigned_issues(redmine, None) == []
    assert fetch_assigned_issues(redmine, UNRESOLVED_USER_ID) == []
    assert redmine.calls == []


def test_resolved_identity_queries_issues():
    redmine = DummyRedmine([])

    assert fetch_assigned_issues(redmine, 7) == ["issue"]
    assert redmine.calls == [("list_issues", 7)]
