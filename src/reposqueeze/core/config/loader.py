"""
Layered configuration loading.

Each layer overrides the one before it:
    built-in defaults -> user config.json -> project .reposqueeze.json -> env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from reposqueeze.core.gitlab.client import DEFAULT_API_URL

from .env import get_token
from .models import SqueezeConfig

logger = logging.getLogger(__name__)

# Loaded once per process; clear_cache() resets it
_config_cache: SqueezeConfig | None = None


def get_xdg_config_home() -> Path:
    """Base directory for user configuration (``$XDG_CONFIG_HOME`` or ``~/.config``)."""
    configured = os.environ.get("XDG_CONFIG_HOME")
    return Path(configured) if configured else Path.home() / ".config"


def get_user_config_path() -> Path:
    """Location of the per-user config file."""
    return get_xdg_config_home() / "reposqueeze" / "config.json"


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """Location of the project config file in ``project_dir`` (cwd by default)."""
    return (project_dir or Path.cwd()) / ".reposqueeze.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively overlay ``override`` onto a copy of ``base``.

    Nested dicts are merged key by key; any other value (lists included)
    replaces the base value outright.

    Example:
        >>> deep_merge({"gitlab": {"url": "a", "timeout": 5}}, {"gitlab": {"url": "b"}})
        {'gitlab': {'url': 'b', 'timeout': 5}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Read a JSON object from ``path``.

    A missing file, a parse error or a non-object top level all yield None;
    the latter two are logged as warnings.
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        logger.warning("Ignoring config at %s: top level is not an object", path)
        return None
    return data


def _env_timeout() -> float | None:
    raw = os.environ.get("REPOSQUEEZE_TIMEOUT")
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning("Invalid REPOSQUEEZE_TIMEOUT value '%s', ignoring", raw)
        return None
    if timeout <= 0:
        logger.warning("REPOSQUEEZE_TIMEOUT must be > 0, got %s, ignoring", raw)
        return None
    return timeout


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Overlay environment variables onto a config dict.

    Variables:
        GITLAB_TOKEN         gitlab.token
        GITLAB_URL           gitlab.url
        REPOSQUEEZE_TIMEOUT  gitlab.timeout, seconds > 0
        REPOSQUEEZE_EXCLUDE  exclude_dirs, comma-separated; empty clears the list
    """
    overrides: dict[str, Any] = {}
    gitlab: dict[str, Any] = {}

    if token := get_token():
        gitlab["token"] = token
    if url := os.environ.get("GITLAB_URL"):
        gitlab["url"] = url
    if (timeout := _env_timeout()) is not None:
        gitlab["timeout"] = timeout

    if gitlab:
        overrides["gitlab"] = gitlab
    if "REPOSQUEEZE_EXCLUDE" in os.environ:
        parts = os.environ["REPOSQUEEZE_EXCLUDE"].split(",")
        overrides["exclude_dirs"] = [part.strip() for part in parts if part.strip()]

    return deep_merge(config_dict, overrides)


def get_default_config() -> dict[str, Any]:
    """Built-in defaults, the lowest configuration layer."""
    return {
        "gitlab": {"url": DEFAULT_API_URL, "timeout": 60.0},
        "exclude_dirs": ["vendor"],
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> SqueezeConfig:
    """
    Build the effective configuration.

    Args:
        project_dir: Where to look for .reposqueeze.json (cwd by default)
        use_cache: Return the configuration from an earlier call if there is one

    Returns:
        Validated SqueezeConfig

    Raises:
        ValidationError: If a layer sets an invalid value
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    layers = [
        load_json_file(get_user_config_path()),
        load_json_file(get_project_config_path(project_dir)),
    ]
    merged = get_default_config()
    for layer in layers:
        if layer:
            merged = deep_merge(merged, layer)
    merged = apply_env_overrides(merged)

    _config_cache = SqueezeConfig.model_validate(merged)
    return _config_cache


def clear_cache() -> None:
    """Forget the cached configuration."""
    global _config_cache
    _config_cache = None
