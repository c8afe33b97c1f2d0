"""
GitPython-backed implementation of the git gateway.

Runs git commands through GitPython's command wrapper in the target
repository and converts failures into GitError with the command output.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from reposqueeze.core.exceptions import GitError

logger = logging.getLogger(__name__)


class GitCLIGateway:
    """
    Local git operations for the squeeze workflow.

    Example:
        >>> gateway = GitCLIGateway()
        >>> sha = gateway.create_orphan_branch(Path("."), "squeeze")
        >>> gateway.checkout_branch(Path("."), "main")
        >>> gateway.delete_local_branch(Path("."), "squeeze")
    """

    INITIAL_COMMIT_MESSAGE = "Initial commit on orphan branch"

    def _open(self, repo_path: Path) -> Repo:
        try:
            return Repo(repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitError(f"Not a git repository: {repo_path}") from e

    def _run_git(self, repo_path: Path, *args: str) -> str:
        """
        Run a git command in the repository and return its stdout.

        Args:
            repo_path: Repository working tree
            *args: Git command arguments (without "git" prefix)

        Returns:
            Command stdout

        Raises:
            GitError: If the repository is invalid or the command fails
        """
        repo = self._open(repo_path)
        cmd = ["git", *args]

        logger.debug("Running git command in %s: %s", repo_path, " ".join(cmd))

        try:
            output: str = repo.git.execute(cmd)
            return output
        except GitCommandError as e:
            output = "\n".join(
                part.strip() for part in (str(e.stdout or ""), str(e.stderr or "")) if part.strip()
            )
            raise GitError(
                f"Git command failed: {' '.join(cmd)}",
                command=cmd,
                output=output,
            ) from e

    def current_branch(self, repo_path: Path) -> str:
        repo = self._open(repo_path)
        try:
            if repo.head.is_detached:
                return repo.head.commit.hexsha
            return repo.active_branch.name
        except (TypeError, ValueError) as e:
            raise GitError(f"Could not determine current branch in {repo_path}") from e

    def create_orphan_branch(
        self,
        repo_path: Path,
        branch: str,
        source_branch: str | None = None,
        exclude_dirs: Sequence[str] = (),
    ) -> str:
        self._checkout_orphan(repo_path, branch, source_branch)
        for directory in exclude_dirs:
            self.remove_directory(repo_path, directory)
        self._run_git(repo_path, "add", "-A")
        # An empty tree still gets its commit so callers see an empty file list
        self._run_git(repo_path, "commit", "--allow-empty", "-m", self.INITIAL_COMMIT_MESSAGE)
        sha = self._run_git(repo_path, "rev-parse", "HEAD").strip()
        logger.info("Created orphan branch %s at %s", branch, sha[:8])
        return sha

    def create_empty_orphan_branch(
        self,
        repo_path: Path,
        branch: str,
        source_branch: str | None = None,
    ) -> None:
        self._checkout_orphan(repo_path, branch, source_branch)
        # Unstage the inherited tree so clean_workdir treats it as untracked
        self._run_git(repo_path, "rm", "-r", "-q", "--cached", "--ignore-unmatch", ".")
        logger.info("Created empty orphan branch %s", branch)

    def _checkout_orphan(self, repo_path: Path, branch: str, source_branch: str | None) -> None:
        args = ["checkout", "--orphan", branch]
        if source_branch:
            args.append(source_branch)
        self._run_git(repo_path, *args)

    def list_files(self, repo_path: Path) -> list[str]:
        output = self._run_git(repo_path, "ls-files", "-z")
        return [path for path in output.split("\0") if path]

    def remove_directory(self, repo_path: Path, name: str) -> None:
        dir_path = Path(repo_path) / name
        if not dir_path.exists():
            return
        if dir_path.is_dir() and not dir_path.is_symlink():
            shutil.rmtree(dir_path)
        else:
            dir_path.unlink()
        logger.info("Removed %s from %s", name, repo_path)

    def clean_workdir(self, repo_path: Path) -> None:
        self._run_git(repo_path, "clean", "-fdx")

    def checkout_branch(self, repo_path: Path, branch: str) -> None:
        self._run_git(repo_path, "checkout", branch)

    def delete_local_branch(self, repo_path: Path, branch: str) -> None:
        self._run_git(repo_path, "branch", "-D", branch)

    def commit(self, repo_path: Path, message: str) -> str:
        self._run_git(repo_path, "add", "-A")
        # Empty snapshots are valid (e.g. an empty remote project)
        self._run_git(repo_path, "commit", "--allow-empty", "-m", message)
        return self._run_git(repo_path, "rev-parse", "HEAD").strip()
