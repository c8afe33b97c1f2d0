"""
Squeeze workflow orchestration.

Composes the lifecycle manager, snapshot builder and a synchronization
strategy into the two supported workflows:

- create-from-local: recreate the remote project, commit the local tree
  to an orphan branch, push it through the API, restore the repository.
- create-from-gitlab: find the remote project, rebuild its archive as a
  local orphan commit.
"""

from __future__ import annotations

import logging

from reposqueeze.core.git.gateway import GitGateway
from reposqueeze.core.gitlab.gateway import GitLabGateway
from reposqueeze.core.squeeze.lifecycle import ProjectLifecycleManager
from reposqueeze.core.squeeze.models import SqueezeRequest, SqueezeResult, WorkflowKind
from reposqueeze.core.squeeze.snapshot import SnapshotBuilder
from reposqueeze.core.squeeze.strategies import PullStrategy, PushStrategy, SyncStrategy

logger = logging.getLogger(__name__)


class SqueezeService:
    """
    Runs squeeze workflows against injected git and GitLab gateways.

    Errors from any step propagate unchanged; cleanup failures are only
    logged.

    Example:
        >>> service = SqueezeService(GitCLIGateway(), GitLabClient(http, token))
        >>> result = service.create_from_local(
        ...     SqueezeRequest(repo_path=Path("~/src/demo"), branch_name="squeeze")
        ... )
        >>> print(f"Copied {result.files_count} files in {result.duration:.2f}s")
    """

    def __init__(self, git: GitGateway, gitlab: GitLabGateway) -> None:
        self.git = git
        self.gitlab = gitlab
        self.lifecycle = ProjectLifecycleManager(gitlab)
        self.builder = SnapshotBuilder(git)

    def strategy_for(self, kind: WorkflowKind) -> SyncStrategy:
        """Build the synchronization strategy for a workflow kind."""
        if kind is WorkflowKind.LOCAL:
            return PushStrategy(self.gitlab)
        if kind is WorkflowKind.GITLAB:
            return PullStrategy(self.gitlab, self.git)
        raise ValueError(f"Unknown workflow kind: {kind}")

    def run(self, kind: WorkflowKind, request: SqueezeRequest) -> SqueezeResult:
        """
        Run one workflow end to end.

        Args:
            kind: Which workflow to run
            request: Repository, branch and options

        Returns:
            SqueezeResult with the commit duration and file count

        Raises:
            SqueezeError: Any failure of lookup, snapshot or sync
        """
        strategy = self.strategy_for(kind)
        logger.info("Starting %s for repository: %s", kind.value, request.repo_path)

        request.raise_if_cancelled()
        project = strategy.resolve_project(self.lifecycle, request)
        if project is None:
            logger.info("Nothing to do for %s", request.project_name)
            return SqueezeResult.empty(kind, request.branch_name)

        request.raise_if_cancelled()
        with strategy.snapshot(self.builder, request) as snapshot:
            return strategy.sync(project, snapshot, request)

    def create_from_local(self, request: SqueezeRequest) -> SqueezeResult:
        """Replace the remote project with a one-commit snapshot of the local tree."""
        return self.run(WorkflowKind.LOCAL, request)

    def create_from_gitlab(self, request: SqueezeRequest) -> SqueezeResult:
        """Rebuild the remote project's current tree as a local orphan commit."""
        return self.run(WorkflowKind.GITLAB, request)
