"""
Remote hosting gateway protocol.

The squeeze workflow talks to the hosting service only through this
interface; GitLabClient is the production implementation.
"""

from io import BytesIO
from typing import Protocol, runtime_checkable

from reposqueeze.core.gitlab.models import CommitAction, Project


@runtime_checkable
class GitLabGateway(Protocol):
    """Protocol for the project and repository calls the workflow makes."""

    def find_project_by_name(self, name: str) -> Project | None:
        """
        Find an owned project whose name matches exactly.

        Returns:
            The single match, or None if there is none

        Raises:
            AmbiguousProjectError: If more than one project matches
            GitLabAPIError: If the lookup fails
        """
        ...

    def delete_project(self, project_id: int) -> None:
        """Delete a project and its full history."""
        ...

    def create_project(self, name: str) -> Project:
        """Create an empty project and return it."""
        ...

    def commit_files(
        self,
        project_id: int,
        branch: str,
        message: str,
        actions: list[CommitAction],
    ) -> None:
        """Create one commit on ``branch`` from a batch of file actions."""
        ...

    def download_repo_archive(self, project_id: int, buffer: BytesIO) -> None:
        """Write the zip archive of the project's default branch into ``buffer``."""
        ...
