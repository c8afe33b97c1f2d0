"""
Orphan-branch squeeze workflow.

Collapses a repository's history into a single orphan commit and
publishes it to GitLab, or rebuilds such a commit from a GitLab archive.

Example:
    >>> from reposqueeze.core.squeeze import SqueezeService, SqueezeRequest
    >>> service = SqueezeService(git_gateway, gitlab_gateway)
    >>> result = service.create_from_local(
    ...     SqueezeRequest(repo_path=Path("."), branch_name="squeeze")
    ... )
    >>> result.files_count
"""

from reposqueeze.core.squeeze.lifecycle import ProjectLifecycleManager
from reposqueeze.core.squeeze.models import (
    Snapshot,
    SqueezeRequest,
    SqueezeResult,
    WorkflowKind,
    derive_project_name,
)
from reposqueeze.core.squeeze.service import SqueezeService
from reposqueeze.core.squeeze.snapshot import SnapshotBuilder
from reposqueeze.core.squeeze.strategies import PullStrategy, PushStrategy, SyncStrategy

__all__ = [
    "ProjectLifecycleManager",
    "PullStrategy",
    "PushStrategy",
    "Snapshot",
    "SnapshotBuilder",
    "SqueezeRequest",
    "SqueezeResult",
    "SqueezeService",
    "SyncStrategy",
    "WorkflowKind",
    "derive_project_name",
]
