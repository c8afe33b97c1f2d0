"""
Local git access for reposqueeze.

Example:
    >>> from reposqueeze.core.git import GitCLIGateway
    >>> gateway = GitCLIGateway()
    >>> gateway.list_files(Path("."))
"""

from reposqueeze.core.exceptions import GitError
from reposqueeze.core.git.client import GitCLIGateway
from reposqueeze.core.git.gateway import GitGateway

__all__ = ["GitCLIGateway", "GitError", "GitGateway"]
