"""
Data models for the squeeze workflow.

Defines the request passed into a workflow run, the snapshot handed to
a synchronization strategy, and the result reported back to the caller.
"""

from __future__ import annotations

import os
import threading
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from reposqueeze.core.exceptions import SqueezeCancelledError
from reposqueeze.core.gitlab.models import Project


class WorkflowKind(str, Enum):
    """Which end-to-end workflow to run."""

    LOCAL = "create-from-local"
    GITLAB = "create-from-gitlab"


class SqueezeRequest(BaseModel):
    """
    Input for one workflow run.

    Example:
        >>> request = SqueezeRequest(repo_path=Path("/src/demo"), branch_name="squeeze")
        >>> request.project_name
        'demo'
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    repo_path: Path = Field(..., description="Repository working tree")
    branch_name: str = Field(..., min_length=1, description="Name of the orphan branch")
    source_branch: str | None = Field(
        default=None,
        description="Seed the orphan branch from this branch instead of the checkout",
    )
    exclude_dirs: list[str] = Field(
        default_factory=list,
        description="Directories removed before the snapshot is published",
    )
    cancel: threading.Event | None = Field(
        default=None,
        exclude=True,
        description="Checked at gateway call boundaries; set it to stop the run",
    )

    @property
    def project_name(self) -> str:
        """Remote project name derived from the repository path."""
        return derive_project_name(self.repo_path)

    def raise_if_cancelled(self) -> None:
        """Raise SqueezeCancelledError if the caller has set the cancel event."""
        if self.cancel is not None and self.cancel.is_set():
            raise SqueezeCancelledError("squeeze cancelled", repo_path=str(self.repo_path))


class Snapshot(BaseModel):
    """The orphan branch state a strategy works against."""

    repo_path: Path
    branch: str
    previous_branch: str
    commit_sha: str | None = None
    files: list[str] = Field(default_factory=list)


class SqueezeResult(BaseModel):
    """Outcome of a successful workflow run."""

    kind: WorkflowKind
    branch: str
    project: Project | None = None
    duration: float = Field(default=0.0, ge=0.0, description="Seconds spent in the commit call")
    files_count: int = Field(default=0, ge=0)
    commit_sha: str | None = None

    @classmethod
    def empty(cls, kind: WorkflowKind, branch: str) -> SqueezeResult:
        """Result for a run that had nothing to do."""
        return cls(kind=kind, branch=branch)


def derive_project_name(repo_path: Path | str) -> str:
    """
    Derive the remote project name from a repository path.

    Takes the final segment of the absolute path, without following
    symlinks, and strips a trailing ``.git`` suffix.

    Example:
        >>> derive_project_name("/src/demo.git")
        'demo'
        >>> derive_project_name("/src/demo/")
        'demo'
    """
    name = Path(os.path.abspath(repo_path)).name
    if name.endswith(".git") and len(name) > len(".git"):
        name = name[: -len(".git")]
    return name
