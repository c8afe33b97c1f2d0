"""
Content synchronization strategies.

Two interchangeable ways of populating the orphan branch:

- PushStrategy reads the local snapshot and creates one remote commit
  through the GitLab Commits API.
- PullStrategy downloads the remote project's archive, extracts it into
  the local orphan branch and commits it locally.

Both implement SyncStrategy so the orchestrator runs them through the
same shape: resolve project, open snapshot scope, sync.
"""

from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager
from io import BytesIO
from typing import Protocol

from reposqueeze.core.exceptions import NothingToCommitError, SnapshotReadError
from reposqueeze.core.git.gateway import GitGateway
from reposqueeze.core.gitlab.gateway import GitLabGateway
from reposqueeze.core.gitlab.models import CommitAction, Project
from reposqueeze.core.squeeze.archive import count_files, extract_archive, open_archive
from reposqueeze.core.squeeze.lifecycle import ProjectLifecycleManager
from reposqueeze.core.squeeze.models import Snapshot, SqueezeRequest, SqueezeResult, WorkflowKind
from reposqueeze.core.squeeze.snapshot import SnapshotBuilder

logger = logging.getLogger(__name__)


def commit_message(branch: str) -> str:
    """Message used for the single content commit on the orphan branch."""
    return f"Add project files to orphan branch {branch}"


class SyncStrategy(Protocol):
    """Protocol for the per-workflow steps the orchestrator delegates."""

    kind: WorkflowKind

    def resolve_project(
        self, lifecycle: ProjectLifecycleManager, request: SqueezeRequest
    ) -> Project | None:
        """Return the project to sync with, or None if there is nothing to do."""
        ...

    def snapshot(
        self, builder: SnapshotBuilder, request: SqueezeRequest
    ) -> AbstractContextManager[Snapshot]:
        """Open the local orphan-branch scope the sync runs inside."""
        ...

    def sync(
        self, project: Project, snapshot: Snapshot, request: SqueezeRequest
    ) -> SqueezeResult:
        """Populate the orphan branch and report duration and file count."""
        ...


class PushStrategy:
    """
    Publish the local snapshot as one commit created through the API.

    Example:
        >>> strategy = PushStrategy(gitlab)
        >>> result = strategy.sync(project, snapshot, request)
        >>> result.files_count
        2
    """

    kind = WorkflowKind.LOCAL

    def __init__(self, gitlab: GitLabGateway) -> None:
        self.gitlab = gitlab

    def resolve_project(
        self, lifecycle: ProjectLifecycleManager, request: SqueezeRequest
    ) -> Project:
        return lifecycle.recreate(request.project_name)

    def snapshot(
        self, builder: SnapshotBuilder, request: SqueezeRequest
    ) -> AbstractContextManager[Snapshot]:
        return builder.orphan_branch(request)

    def collect_actions(self, snapshot: Snapshot) -> list[CommitAction]:
        """
        Read every snapshot file into a "create" action.

        Raises:
            NothingToCommitError: If the snapshot has no files
            SnapshotReadError: If any file cannot be read; no batch is built
        """
        if not snapshot.files:
            raise NothingToCommitError(str(snapshot.repo_path))

        actions: list[CommitAction] = []
        for path in snapshot.files:
            try:
                content = (snapshot.repo_path / path).read_bytes()
            except OSError as e:
                raise SnapshotReadError(path, e.strerror or str(e)) from e
            actions.append(
                CommitAction(action="create", file_path=path, content=content, encoding="text")
            )
        return actions

    def sync(
        self, project: Project, snapshot: Snapshot, request: SqueezeRequest
    ) -> SqueezeResult:
        actions = self.collect_actions(snapshot)

        request.raise_if_cancelled()
        start = time.monotonic()
        self.gitlab.commit_files(
            project.id,
            snapshot.branch,
            commit_message(snapshot.branch),
            actions,
        )
        duration = time.monotonic() - start

        logger.info(
            "Committed %d files to %s on %s in %.2fs",
            len(actions),
            project.name,
            snapshot.branch,
            duration,
        )
        return SqueezeResult(
            kind=self.kind,
            branch=snapshot.branch,
            project=project,
            duration=duration,
            files_count=len(actions),
            commit_sha=snapshot.commit_sha,
        )


class PullStrategy:
    """
    Rebuild a remote project's default branch as a local orphan commit.

    No remote commit is made on this path; the result is the local branch.
    """

    kind = WorkflowKind.GITLAB

    def __init__(self, gitlab: GitLabGateway, git: GitGateway) -> None:
        self.gitlab = gitlab
        self.git = git

    def resolve_project(
        self, lifecycle: ProjectLifecycleManager, request: SqueezeRequest
    ) -> Project | None:
        return lifecycle.find(request.project_name)

    def snapshot(
        self, builder: SnapshotBuilder, request: SqueezeRequest
    ) -> AbstractContextManager[Snapshot]:
        return builder.empty_orphan_branch(request)

    def sync(
        self, project: Project, snapshot: Snapshot, request: SqueezeRequest
    ) -> SqueezeResult:
        request.raise_if_cancelled()
        buffer = BytesIO()
        self.gitlab.download_repo_archive(project.id, buffer)

        with open_archive(buffer.getvalue()) as archive:
            files_count = count_files(archive)
            extract_archive(archive, snapshot.repo_path)

        request.raise_if_cancelled()
        start = time.monotonic()
        commit_sha = self.git.commit(snapshot.repo_path, commit_message(snapshot.branch))
        duration = time.monotonic() - start

        logger.info(
            "Rebuilt %d files from %s on %s in %.2fs",
            files_count,
            project.name,
            snapshot.branch,
            duration,
        )
        return SqueezeResult(
            kind=self.kind,
            branch=snapshot.branch,
            project=project,
            duration=duration,
            files_count=files_count,
            commit_sha=commit_sha,
        )
