"""
Remote project lifecycle.

Puts the remote project into a known-clean state before content is
pushed: any existing project of the same name is deleted and a fresh one
is created. This replace semantics is irreversible: the prior project's
history is destroyed.
"""

from __future__ import annotations

import logging

from reposqueeze.core.gitlab.gateway import GitLabGateway
from reposqueeze.core.gitlab.models import Project

logger = logging.getLogger(__name__)


class ProjectLifecycleManager:
    """
    Find, delete and recreate remote projects by name.

    Example:
        >>> manager = ProjectLifecycleManager(gitlab)
        >>> project = manager.recreate("demo")
        >>> project.name
        'demo'
    """

    def __init__(self, gitlab: GitLabGateway) -> None:
        self.gitlab = gitlab

    def find(self, name: str) -> Project | None:
        """
        Look up a project by exact name without changing anything.

        Raises:
            AmbiguousProjectError: If several owned projects share the name
        """
        project = self.gitlab.find_project_by_name(name)
        if project is None:
            logger.info("Project %s not found", name)
        else:
            logger.debug("Found project %s (%s)", project.name, project.id)
        return project

    def recreate(self, name: str) -> Project:
        """
        Guarantee exactly one freshly created project named ``name``.

        Args:
            name: Project name derived from the repository path

        Returns:
            The newly created project

        Raises:
            AmbiguousProjectError: Before any mutation, if the name is ambiguous
            GitLabAPIError: If the lookup, delete or create call fails
        """
        existing = self.find(name)
        if existing is not None:
            logger.info("Deleting existing project %s (%s)", existing.name, existing.id)
            self.gitlab.delete_project(existing.id)

        project = self.gitlab.create_project(name)
        logger.info("Created project %s (%s)", project.name, project.id)
        return project
