"""Environment loading helpers.

The GitLab token and URL normally come from the environment. They may be
filled in from .env files, which never override a variable that was
already exported in the shell:

  os.environ (pre-existing) > project .env / .env.local > user .env
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from dotenv import dotenv_values

TOKEN_ENV_VAR = "GITLAB_TOKEN"


def user_env_file() -> Path:
    """Path of the per-user env file (``$XDG_CONFIG_HOME/reposqueeze/.env``)."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return xdg_home / "reposqueeze" / ".env"


def project_env_files(project_dir: Path) -> list[Path]:
    """Env files looked up in the project directory, lowest priority first."""
    return [project_dir / ".env", project_dir / ".env.local"]


def _env_file_values(paths: Iterable[Path]) -> dict[str, str]:
    merged: dict[str, str] = {}
    for path in paths:
        if not path.is_file():
            continue
        merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    return merged


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """Fill os.environ from the user and project .env files.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        The variables that were set by this call
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [user_env_file()]
    if project_env_paths is None:
        project_env_paths = project_env_files(project_dir)

    layered = _env_file_values(user_env_paths)
    layered.update(_env_file_values(project_env_paths))

    applied = {k: v for k, v in layered.items() if k not in os.environ}
    os.environ.update(applied)
    return applied


def get_token() -> str | None:
    """GitLab token from the environment, or None if unset or blank."""
    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    return token or None
