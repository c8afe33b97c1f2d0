"""
Configuration models and loading.

Pydantic models for reposqueeze configuration with multi-layer merging:
defaults < user < project < env vars.
"""

from .env import get_token, load_layered_env
from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
)
from .models import GitLabConfig, SqueezeConfig

__all__ = [
    # Models
    "GitLabConfig",
    "SqueezeConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_token",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "load_layered_env",
]
