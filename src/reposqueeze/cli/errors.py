"""
Error messages and exit codes for the reposqueeze CLI.

Maps workflow exceptions to a consistent message with actionable guidance.
"""

from enum import IntEnum

from rich.console import Console

from reposqueeze.core.exceptions import (
    AmbiguousProjectError,
    GitError,
    GitLabAPIError,
    NothingToCommitError,
    SqueezeError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for reposqueeze."""

    SUCCESS = 0
    """The workflow finished."""

    GENERAL_ERROR = 1
    """The workflow failed."""

    USER_ERROR = 2
    """Configuration or input error (actionable by user)."""

    SIGINT = 130
    """Interrupted with Ctrl+C."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print an error to stderr, optionally followed by its cause and a fix.

    Args:
        problem: One-line summary shown after "Error:"
        reason: Dimmed explanation line
        solution: Suggested command or action
    """
    console.print(f"[red]Error:[/red] {problem}", markup=True, highlight=False)

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_missing_token_error() -> None:
    """Print error when no GitLab token is configured."""
    print_error(
        "GITLAB_TOKEN environment variable not set",
        reason="reposqueeze needs a personal access token with the 'api' scope",
        solution="export GITLAB_TOKEN=glpat-...  # or add it to .env",
    )


def print_squeeze_error(error: SqueezeError) -> None:
    """Print a workflow failure with guidance for the common cases."""
    if isinstance(error, AmbiguousProjectError):
        print_error(
            str(error),
            reason="Several of your projects have this exact name; none was changed",
            solution="Rename or remove the duplicates on GitLab",
        )
    elif isinstance(error, NothingToCommitError):
        print_error(
            str(error),
            reason="The orphan branch has no tracked files after exclusions",
            solution="Check --from and --exclude",
        )
    elif isinstance(error, GitLabAPIError) and error.status_code in (401, 403):
        print_error(
            str(error),
            reason="The token was rejected by GitLab",
            solution="Check GITLAB_TOKEN and its 'api' scope",
        )
    elif isinstance(error, GitError):
        print_error(str(error), reason="A git command failed in the repository")
    else:
        print_error(str(error))
