"""
reposqueeze - collapse a repository's history into one orphan snapshot.

Publishes the snapshot to a GitLab project (replacing any project of the same
name), or rebuilds a local orphan snapshot from a hosted project's archive.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from reposqueeze.core.config.models import SqueezeConfig
from reposqueeze.core.squeeze.models import SqueezeRequest, SqueezeResult, WorkflowKind

__all__ = ["SqueezeConfig", "SqueezeRequest", "SqueezeResult", "WorkflowKind", "__version__"]
