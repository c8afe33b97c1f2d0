"""
Local snapshot builder.

Drives the git gateway to put a repository on a single-commit orphan
branch, and returns it to the branch it was on when the work is done.

The restore half runs on every exit path of ``orphan_branch``. Its
failures are logged as warnings and never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import PurePosixPath

from reposqueeze.core.exceptions import GitError
from reposqueeze.core.git.gateway import GitGateway
from reposqueeze.core.squeeze.models import Snapshot, SqueezeRequest

logger = logging.getLogger(__name__)


def is_excluded(path: str, exclude_dirs: list[str]) -> bool:
    """
    Check whether a repository-relative path lies under an excluded directory.

    Example:
        >>> is_excluded("vendor/lib/a.go", ["vendor"])
        True
        >>> is_excluded("vendored.txt", ["vendor"])
        False
    """
    parts = PurePosixPath(path).parts
    for directory in exclude_dirs:
        prefix = PurePosixPath(directory.strip("/")).parts
        if prefix and parts[: len(prefix)] == prefix:
            return True
    return False


class SnapshotBuilder:
    """
    Creates orphan branches and restores the repository afterward.

    Example:
        >>> builder = SnapshotBuilder(GitCLIGateway())
        >>> with builder.orphan_branch(request) as snapshot:
        ...     print(len(snapshot.files))
    """

    def __init__(self, git: GitGateway) -> None:
        self.git = git

    @contextmanager
    def orphan_branch(self, request: SqueezeRequest) -> Iterator[Snapshot]:
        """
        Commit the working tree to a new orphan branch for the duration of the block.

        Excluded directories are removed once the orphan checkout has
        succeeded, so their tracked files are staged as deletions and come
        back when the previous branch is checked out again. On exit the
        previous branch is checked out and the orphan branch deleted,
        whatever happened inside the block.

        Raises:
            GitError: If the orphan branch cannot be created
        """
        repo_path = request.repo_path
        branch = request.branch_name
        previous = self.git.current_branch(repo_path)

        try:
            commit_sha = self.git.create_orphan_branch(
                repo_path, branch, request.source_branch, request.exclude_dirs
            )
        except (GitError, OSError):
            # A failed stage/commit leaves us on the new branch; a failed
            # checkout leaves us where we were and must not touch the branch.
            if self._is_on_branch(request, branch):
                self.restore(request, previous)
            raise

        try:
            files = [
                path
                for path in self.git.list_files(repo_path)
                if not is_excluded(path, request.exclude_dirs)
            ]
            yield Snapshot(
                repo_path=repo_path,
                branch=branch,
                previous_branch=previous,
                commit_sha=commit_sha,
                files=files,
            )
        finally:
            self.restore(request, previous)

    @contextmanager
    def empty_orphan_branch(self, request: SqueezeRequest) -> Iterator[Snapshot]:
        """
        Switch to a new orphan branch with an empty index and a clean workdir.

        The branch is left checked out on exit: its only content is what the
        caller commits into it.
        """
        repo_path = request.repo_path
        previous = self.git.current_branch(repo_path)

        self.git.create_empty_orphan_branch(repo_path, request.branch_name, request.source_branch)
        self.git.clean_workdir(repo_path)

        yield Snapshot(
            repo_path=repo_path,
            branch=request.branch_name,
            previous_branch=previous,
        )
        logger.info(
            "Left %s checked out in %s (previously on %s)",
            request.branch_name,
            repo_path,
            previous,
        )

    def restore(self, request: SqueezeRequest, previous: str) -> None:
        """Check out ``previous`` and delete the orphan branch, logging failures."""
        repo_path = request.repo_path
        branch = request.branch_name

        try:
            self.git.checkout_branch(repo_path, previous)
        except (GitError, OSError) as e:
            logger.warning("Failed to checkout branch '%s': %s", previous, e)

        try:
            self.git.delete_local_branch(repo_path, branch)
        except (GitError, OSError) as e:
            logger.warning("Failed to delete local branch '%s': %s", branch, e)

    def _is_on_branch(self, request: SqueezeRequest, branch: str) -> bool:
        try:
            return self.git.current_branch(request.repo_path) == branch
        except GitError as e:
            logger.warning("Could not determine current branch: %s", e)
            return False
