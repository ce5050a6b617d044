"""Pydantic models describing the Redmine API payloads we consume."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator


class NamedRef(BaseModel):
    id: int
    name: str = ""


class BackendUser(BaseModel):
    id: int
    login: str
    mail: str = ""


class BackendIssue(BaseModel):
    id: int
    subject: str = ""
    project: NamedRef | None = None
    status: NamedRef | None = None
    estimated_hours: float = 0.0
    spent_hours: float = 0.0

    @field_validator("estimated_hours", "spent_hours", mode="before")
    @classmethod
    def _default_hours(cls, value):
        """Redmine sends null for issues without an estimate."""

        return 0.0 if value is None else value


class UsersList(BaseModel):
    users: List[BackendUser] = Field(default_factory=list)


class IssuesList(BaseModel):
    issues: List[BackendIssue] = Field(default_factory=list)
