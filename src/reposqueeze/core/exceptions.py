"""
Exceptions for reposqueeze.

This module defines the hierarchy of exceptions raised by the squeeze
workflow and its gateways, preserving structured context for reporting.

Exception Hierarchy:
    SqueezeError (base)
    ├── GitError (local git command failures)
    ├── GitLabError (remote hosting failures)
    │   ├── GitLabAPIError (unexpected status or transport failure)
    │   └── AmbiguousProjectError (several projects share the name)
    ├── SnapshotReadError (local file could not be read for the push batch)
    ├── ArchiveError (downloaded archive is corrupt or unsafe)
    ├── NothingToCommitError (push strategy found no files)
    └── SqueezeCancelledError (caller cancelled the workflow)

Example:
    >>> from reposqueeze.core.exceptions import GitLabAPIError
    >>> try:
    ...     raise GitLabAPIError("create project", status_code=409, body="taken")
    ... except GitLabAPIError as e:
    ...     print(e.status_code, e.body)
    409 taken
"""

from __future__ import annotations


class SqueezeError(Exception):
    """
    Base exception for all reposqueeze errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class GitError(SqueezeError):
    """
    Raised when a local git operation fails.

    Attributes:
        command: The git command that failed, if known
        output: Combined stdout/stderr of the failed command
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        output: str = "",
        **context: object,
    ) -> None:
        super().__init__(message, command=command, **context)
        self.command = command
        self.output = output

    def __str__(self) -> str:
        if self.output:
            return f"{self.message}, output: {self.output}"
        return self.message


class GitLabError(SqueezeError):
    """Base exception for remote hosting errors."""


class GitLabAPIError(GitLabError):
    """
    Raised when the GitLab API answers with an unexpected status.

    Transport failures (DNS, connection refused, timeouts) are reported with
    ``status_code=None`` and the underlying httpx error as ``__cause__``.

    Attributes:
        operation: Short name of the API call (e.g. "create project")
        status_code: HTTP status code, or None for transport errors
        reason: HTTP reason phrase
        body: Response body text
    """

    def __init__(
        self,
        operation: str,
        status_code: int | None = None,
        reason: str = "",
        body: str = "",
        **context: object,
    ) -> None:
        if status_code is None:
            message = f"gitlab api request failed for {operation}"
        else:
            message = (
                f"gitlab api returned unexpected status for {operation}: "
                f"{status_code} {reason}, body: {body}"
            ).rstrip()
        super().__init__(message, operation=operation, status_code=status_code, **context)
        self.operation = operation
        self.status_code = status_code
        self.reason = reason
        self.body = body


class AmbiguousProjectError(GitLabError):
    """
    Raised when more than one owned project matches a name exactly.

    The caller cannot safely pick a target, so nothing is mutated.
    """

    def __init__(self, name: str, matches: int) -> None:
        super().__init__(
            f"found {matches} projects with name {name}, please specify the full path",
            name=name,
            matches=matches,
        )
        self.name = name
        self.matches = matches


class SnapshotReadError(SqueezeError):
    """Raised when a tracked file cannot be read while building the commit batch."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"failed to read file {path}: {reason}", path=path)
        self.path = path


class ArchiveError(SqueezeError):
    """Raised when a downloaded archive cannot be opened or holds an unsafe entry."""


class NothingToCommitError(SqueezeError):
    """Raised by the push strategy when the snapshot contains no files."""

    def __init__(self, repo_path: str) -> None:
        super().__init__(
            "no files found in the repository to commit",
            repo_path=repo_path,
        )


class SqueezeCancelledError(SqueezeError):
    """Raised when the caller's cancellation event is observed between steps."""


__all__ = [
    "AmbiguousProjectError",
    "ArchiveError",
    "GitError",
    "GitLabAPIError",
    "GitLabError",
    "NothingToCommitError",
    "SnapshotReadError",
    "SqueezeCancelledError",
    "SqueezeError",
]
