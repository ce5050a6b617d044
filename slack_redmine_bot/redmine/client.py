"""HTTP client for the subset of the Redmine REST API used by the bot."""

from __future__ import annotations

from typing import Any, List

import requests
import structlog
from pydantic import BaseModel, ValidationError

from slack_redmine_bot.errors import BackendLookupError

from .models import BackendIssue, BackendUser, IssuesList, UsersList

API_KEY_HEADER = "X-Redmine-API-Key"
DEFAULT_TIMEOUT = 10.0


class RedmineClient:
    """Issue synchronous, time-bounded requests against a Redmine instance."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers[API_KEY_HEADER] = api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    def list_users(self) -> List[BackendUser]:
        """Return the complete user listing (no pagination is requested)."""

        return self._get("users.json", UsersList).users

    def list_issues(self, assigned_to_id: int) -> List[BackendIssue]:
        """Return the issues assigned to the given Redmine user id."""

        return self._get("issues.json", IssuesList, params={"assigned_to_id": assigned_to_id}).issues

    def _get(self, resource: str, model: type[BaseModel], params: dict[str, Any] | None = None):
        url = f"{self._base_url}/{resource}"
        log = structlog.get_logger().bind(resource=resource)

        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            # requests' JSONDecodeError is also a RequestException.
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            log.error("redmine_request_failed", error=str(exc), status_code=status_code)
            raise BackendLookupError(f"Redmine request to {resource} failed: {exc}") from exc

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            log.error("redmine_payload_invalid", error_count=exc.error_count())
            raise BackendLookupError(f"Unexpected Redmine payload for {resource}") from exc
