"""
Version-control gateway protocol.

Defines the capability surface the squeeze workflow needs from a local
git installation. The workflow only depends on this protocol, so tests can
substitute an in-memory fake.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class GitGateway(Protocol):
    """
    Protocol for local git operations.

    Every method addresses the repository by path and keeps no state
    between calls. Failures are raised as GitError.
    """

    def current_branch(self, repo_path: Path) -> str:
        """
        Get the branch checked out in the repository.

        Returns:
            Branch name, or the HEAD commit SHA when HEAD is detached
        """
        ...

    def create_orphan_branch(
        self,
        repo_path: Path,
        branch: str,
        source_branch: str | None = None,
        exclude_dirs: Sequence[str] = (),
    ) -> str:
        """
        Switch to a new branch with no ancestry and commit every file.

        Excluded directories are removed only after the checkout succeeds,
        so a failed checkout leaves the working tree untouched.

        Args:
            repo_path: Repository working tree
            branch: Name of the new orphan branch
            source_branch: Start from this branch's tree instead of the
                current checkout
            exclude_dirs: Directories deleted from the tree before staging

        Returns:
            SHA of the single commit on the new branch
        """
        ...

    def create_empty_orphan_branch(
        self,
        repo_path: Path,
        branch: str,
        source_branch: str | None = None,
    ) -> None:
        """Switch to a new branch with no ancestry, an empty index and no commit."""
        ...

    def list_files(self, repo_path: Path) -> list[str]:
        """List every file path tracked on the current branch."""
        ...

    def remove_directory(self, repo_path: Path, name: str) -> None:
        """Delete a directory relative to the repository root, if present."""
        ...

    def clean_workdir(self, repo_path: Path) -> None:
        """Remove all untracked and ignored files and directories."""
        ...

    def checkout_branch(self, repo_path: Path, branch: str) -> None:
        """Switch to an existing branch (or commit)."""
        ...

    def delete_local_branch(self, repo_path: Path, branch: str) -> None:
        """Force-delete a local branch."""
        ...

    def commit(self, repo_path: Path, message: str) -> str:
        """
        Stage everything in the working tree and commit it.

        Returns:
            SHA of the new commit
        """
        ...
