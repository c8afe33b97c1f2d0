"""
reposqueeze CLI - squeeze commands.

Provides the create-from-local and create-from-gitlab commands on top of
SqueezeService. Gateways are built here once per invocation and passed in.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import httpx
import typer
from rich.console import Console

from reposqueeze.cli.errors import ExitCode, print_missing_token_error, print_squeeze_error
from reposqueeze.core.config import SqueezeConfig, load_config
from reposqueeze.core.exceptions import SqueezeError
from reposqueeze.core.git import GitCLIGateway
from reposqueeze.core.gitlab import GitLabClient
from reposqueeze.core.squeeze import SqueezeRequest, SqueezeResult, SqueezeService, WorkflowKind

console = Console()


@contextmanager
def build_service(config: SqueezeConfig) -> Iterator[SqueezeService]:
    """
    Construct the squeeze service with real gateways.

    The httpx client lives for the duration of the block.
    """
    if not config.gitlab.token:
        print_missing_token_error()
        raise typer.Exit(ExitCode.USER_ERROR)

    with httpx.Client(timeout=config.gitlab.timeout) as http:
        gitlab = GitLabClient(http, token=config.gitlab.token, base_url=config.gitlab.url)
        yield SqueezeService(GitCLIGateway(), gitlab)


def _run(kind: WorkflowKind, request: SqueezeRequest) -> SqueezeResult:
    config = load_config()
    console.print(f"Starting process for repository: [bold]{request.repo_path}[/bold]")

    try:
        with build_service(config) as service:
            return service.run(kind, request)
    except SqueezeError as e:
        print_squeeze_error(e)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except OSError as e:
        print_squeeze_error(SqueezeError(f"filesystem error: {e}"))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(ExitCode.SIGINT)


def _report(result: SqueezeResult, action: str) -> None:
    console.print(
        f"[green]✓[/green] Successfully {action} orphan branch '{result.branch}'."
    )
    console.print(f"Copied {result.files_count} files in {result.duration:.2f}s.")


def create_from_local(
    repo_path: Path = typer.Option(
        ...,
        "--repo-path",
        help="Path to the repository",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    branch_name: str = typer.Option(
        ...,
        "--branch-name",
        help="Name of the new orphan branch",
    ),
    source_branch: str | None = typer.Option(
        None,
        "--from",
        help="Source branch to create the orphan from (default: current checkout)",
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "--exclude",
        help="Directory to leave out of the snapshot (repeatable; default from config)",
    ),
) -> None:
    """
    Replace the GitLab project with a one-commit snapshot of the local tree.

    The project is named after the repository directory. Any existing
    project with that name is deleted first, with its full history.

    Examples:
        reposqueeze create-from-local --repo-path ~/src/demo --branch-name squeeze
        reposqueeze create-from-local --repo-path . --branch-name main --from release
    """
    config = load_config()
    request = SqueezeRequest(
        repo_path=repo_path,
        branch_name=branch_name,
        source_branch=source_branch or None,
        exclude_dirs=exclude if exclude else config.exclude_dirs,
    )

    result = _run(WorkflowKind.LOCAL, request)
    _report(result, "created and pushed")


def create_from_gitlab(
    repo_path: Path = typer.Option(
        ...,
        "--repo-path",
        help="Path to the repository",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    branch_name: str = typer.Option(
        ...,
        "--branch-name",
        help="Name of the new orphan branch",
    ),
) -> None:
    """
    Rebuild the GitLab project's current tree as a local orphan commit.

    The orphan branch is left checked out. A project that does not exist
    on GitLab is not an error.

    Examples:
        reposqueeze create-from-gitlab --repo-path ~/src/demo --branch-name squeeze
    """
    request = SqueezeRequest(repo_path=repo_path, branch_name=branch_name)

    result = _run(WorkflowKind.GITLAB, request)
    if result.project is None:
        console.print(
            f"[yellow]Project {request.project_name} not found on GitLab; nothing to do[/yellow]"
        )
        return
    _report(result, "created")
