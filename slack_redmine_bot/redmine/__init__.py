"""Redmine API models, client, identity resolution, and formatting."""

from .client import API_KEY_HEADER, RedmineClient
from .formatting import ISSUE_LIST_HEADER, format_issue, format_issue_list, issue_link
from .identity import UNRESOLVED_USER_ID, IdentityResolver, fetch_assigned_issues, find_user_id
from .models import BackendIssue, BackendUser, IssuesList, NamedRef, UsersList

__all__ = [
    "API_KEY_HEADER",
    "RedmineClient",
    "ISSUE_LIST_HEADER",
    "format_issue",
    "format_issue_list",
    "issue_link",
    "UNRESOLVED_USER_ID",
    "IdentityResolver",
    "fetch_assigned_issues",
    "find_user_id",
    "BackendIssue",
    "BackendUser",
    "IssuesList",
    "NamedRef",
    "UsersList",
]
