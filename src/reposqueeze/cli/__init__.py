"""
reposqueeze CLI - Main application entry point.

Defines the Typer app, the global --debug option and the version command.
"""

import logging
import sys

import typer
from rich.console import Console

from reposqueeze import __version__
from reposqueeze.cli import squeeze
from reposqueeze.cli.argv import preprocess_argv
from reposqueeze.core.config.env import load_layered_env

app = typer.Typer(
    name="reposqueeze",
    help="Collapse a repository's history into one orphan commit and publish it to GitLab",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging (git commands, API calls)
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # httpx logs every request at INFO; keep it out of normal runs
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Log git commands and API calls to stderr",
    ),
) -> None:
    """
    reposqueeze - squeeze a repository into a single orphan commit.

    Workflows:
        # Replace the GitLab project with a snapshot of the local tree
        reposqueeze create-from-local --repo-path ~/src/demo --branch-name squeeze

        # Rebuild the GitLab project's tree as a local orphan commit
        reposqueeze create-from-gitlab --repo-path ~/src/demo --branch-name squeeze

    Configuration:
        GITLAB_TOKEN     Personal access token (required)
        GITLAB_URL       API base URL (default: https://gitlab.com/api/v4)
        .reposqueeze.json / ~/.config/reposqueeze/config.json
    """
    load_layered_env()
    setup_logging(debug)

    ctx.obj = {"debug": debug}


app.command(name="create-from-local")(squeeze.create_from_local)
app.command(name="create-from-gitlab")(squeeze.create_from_gitlab)


@app.command()
def version() -> None:
    """Show reposqueeze version and exit."""
    console.print(f"reposqueeze version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """
    Console script entry point.

    Arguments are passed through preprocess_argv first, so forms like
    ``reposqueeze --version`` and ``reposqueeze help create-from-local``
    work.
    """
    sys.argv[1:] = preprocess_argv(sys.argv[1:])
    app()


__all__ = ["app", "cli_main"]
