"""
GitLab integration for reposqueeze.

Provides the hosting gateway used to replace projects, push batched
commits and download repository archives.
"""

from reposqueeze.core.exceptions import AmbiguousProjectError, GitLabAPIError, GitLabError
from reposqueeze.core.gitlab.client import DEFAULT_API_URL, GitLabClient
from reposqueeze.core.gitlab.gateway import GitLabGateway
from reposqueeze.core.gitlab.models import CommitAction, CommitRequest, Project

__all__ = [
    "AmbiguousProjectError",
    "CommitAction",
    "CommitRequest",
    "DEFAULT_API_URL",
    "GitLabAPIError",
    "GitLabClient",
    "GitLabError",
    "GitLabGateway",
    "Project",
]
