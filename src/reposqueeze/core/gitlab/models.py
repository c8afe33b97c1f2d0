"""
GitLab data models for reposqueeze.

Defines Pydantic models for projects and the batched commit request
sent to the GitLab Commits API.
"""

from __future__ import annotations

import base64
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ActionKind = Literal["create", "delete", "move", "update", "chmod"]


class Project(BaseModel):
    """
    A GitLab project as returned by the projects API.

    Only ``id`` and ``name`` are required; other fields GitLab sends are
    ignored.

    Example:
        >>> Project.model_validate({"id": 42, "name": "demo", "star_count": 0})
        Project(id=42, name='demo', path_with_namespace=None, web_url=None, default_branch=None)
    """

    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Numeric project ID")
    name: str = Field(..., description="Human-readable project name")
    path_with_namespace: str | None = Field(default=None, description="e.g. group/demo")
    web_url: str | None = Field(default=None, description="Project page URL")
    default_branch: str | None = Field(default=None, description="Default branch, if any")


class CommitAction(BaseModel):
    """
    One file's worth of a batched remote commit.

    ``content`` holds the raw file bytes with encoding tag ``"text"``;
    ``to_wire`` re-encodes them to base64 for transmission.
    """

    action: ActionKind = Field(default="create")
    file_path: str
    content: bytes = Field(default=b"", repr=False)
    encoding: Literal["text", "base64"] = Field(default="text")

    def to_wire(self) -> dict[str, str]:
        """Render the action as sent to GitLab, with base64-encoded content."""
        if self.encoding == "base64":
            encoded = self.content.decode("ascii")
        else:
            encoded = base64.b64encode(self.content).decode("ascii")
        return {
            "action": self.action,
            "file_path": self.file_path,
            "content": encoded,
            "encoding": "base64",
        }


class CommitRequest(BaseModel):
    """A branch, a message and the actions that make up one remote commit."""

    branch: str
    commit_message: str
    actions: list[CommitAction] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for ``POST /projects/:id/repository/commits``."""
        return {
            "branch": self.branch,
            "commit_message": self.commit_message,
            "actions": [action.to_wire() for action in self.actions],
        }
