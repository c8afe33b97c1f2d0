"""
Configuration data models for reposqueeze.

These models define the structure of .reposqueeze.json and
~/.config/reposqueeze/config.json files, with validation via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reposqueeze.core.gitlab.client import DEFAULT_API_URL


class GitLabConfig(BaseModel):
    """
    Connection settings for the GitLab API.

    The token is normally supplied through GITLAB_TOKEN rather than a
    config file.
    """
    url: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the GitLab v4 API"
    )
    token: Optional[str] = Field(
        default=None,
        repr=False,
        description="Personal access token sent as PRIVATE-TOKEN"
    )
    timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="HTTP timeout in seconds for each API call"
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class SqueezeConfig(BaseModel):
    """
    Top-level reposqueeze configuration.

    Example:
        >>> config = SqueezeConfig(gitlab={"token": "glpat-x"})
        >>> config.exclude_dirs
        ['vendor']
    """
    model_config = ConfigDict(extra="ignore")

    gitlab: GitLabConfig = Field(default_factory=GitLabConfig)
    exclude_dirs: list[str] = Field(
        default_factory=lambda: ["vendor"],
        description="Directories removed from the snapshot before it is published"
    )
