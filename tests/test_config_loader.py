"""
Unit tests for configuration loading.

Tests multi-layer config merging, environment variable overrides,
.env layering, caching and XDG directory handling.
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from reposqueeze.core.config import (
    clear_cache,
    get_project_config_path,
    get_token,
    get_user_config_path,
    load_config,
    load_layered_env,
)
from reposqueeze.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_default_config,
    get_xdg_config_home,
    load_json_file,
)
from reposqueeze.core.config.models import GitLabConfig, SqueezeConfig

# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    def test_nested_merge(self):
        base = {"gitlab": {"url": "a", "timeout": 5}, "exclude_dirs": ["vendor"]}
        override = {"gitlab": {"url": "b"}}
        assert deep_merge(base, override) == {
            "gitlab": {"url": "b", "timeout": 5},
            "exclude_dirs": ["vendor"],
        }

    def test_lists_are_replaced(self):
        assert deep_merge({"exclude_dirs": ["vendor"]}, {"exclude_dirs": []}) == {
            "exclude_dirs": []
        }

    def test_base_not_mutated(self):
        base = {"gitlab": {"url": "a"}}
        deep_merge(base, {"gitlab": {"url": "b"}})
        assert base == {"gitlab": {"url": "a"}}


class TestLoadJsonFile:
    def test_missing_file(self, tmp_path: Path):
        assert load_json_file(tmp_path / "nope.json") is None

    def test_valid_file(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"exclude_dirs": ["x"]}))
        assert load_json_file(path) == {"exclude_dirs": ["x"]}

    def test_invalid_json_is_ignored(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        assert load_json_file(path) is None
        assert "Failed to parse config" in caplog.text

    def test_non_object_is_ignored(self, tmp_path: Path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        assert load_json_file(path) is None


class TestPaths:
    def test_xdg_config_home(self, tmp_path: Path):
        assert get_xdg_config_home() == tmp_path / "xdg"
        assert get_user_config_path() == tmp_path / "xdg" / "reposqueeze" / "config.json"

    def test_xdg_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("XDG_CONFIG_HOME")
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_project_config_path(self, tmp_path: Path):
        assert get_project_config_path(tmp_path) == tmp_path / ".reposqueeze.json"


# ==============================================================================
# Environment Overrides
# ==============================================================================


class TestApplyEnvOverrides:
    def test_no_env(self):
        assert apply_env_overrides(get_default_config()) == get_default_config()

    def test_token_and_url(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITLAB_TOKEN", "glpat-env")
        monkeypatch.setenv("GITLAB_URL", "https://git.example.com/api/v4")
        result = apply_env_overrides(get_default_config())
        assert result["gitlab"]["token"] == "glpat-env"
        assert result["gitlab"]["url"] == "https://git.example.com/api/v4"
        assert result["gitlab"]["timeout"] == 60.0

    def test_timeout(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REPOSQUEEZE_TIMEOUT", "5.5")
        assert apply_env_overrides({})["gitlab"]["timeout"] == 5.5

    @pytest.mark.parametrize("value", ["soon", "0", "-3"])
    def test_invalid_timeout_ignored(self, monkeypatch: pytest.MonkeyPatch, value: str):
        monkeypatch.setenv("REPOSQUEEZE_TIMEOUT", value)
        assert apply_env_overrides({"gitlab": {"timeout": 60.0}})["gitlab"]["timeout"] == 60.0

    def test_exclude_list(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REPOSQUEEZE_EXCLUDE", "vendor, third_party ,")
        assert apply_env_overrides({})["exclude_dirs"] == ["vendor", "third_party"]

    def test_empty_exclude_disables_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("REPOSQUEEZE_EXCLUDE", "")
        assert apply_env_overrides(get_default_config())["exclude_dirs"] == []

    def test_blank_token_ignored(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITLAB_TOKEN", "   ")
        assert get_token() is None
        assert "token" not in apply_env_overrides(get_default_config())["gitlab"]


# ==============================================================================
# load_config
# ==============================================================================


class TestLoadConfig:
    def test_defaults(self, tmp_path: Path):
        config = load_config(project_dir=tmp_path, use_cache=False)
        assert config.gitlab.url == "https://gitlab.com/api/v4"
        assert config.gitlab.token is None
        assert config.gitlab.timeout == 60.0
        assert config.exclude_dirs == ["vendor"]

    def test_precedence(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        user_path = get_user_config_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text(
            json.dumps({"gitlab": {"url": "https://user/api/v4", "timeout": 10}})
        )
        project = tmp_path / "project"
        project.mkdir()
        (project / ".reposqueeze.json").write_text(
            json.dumps({"gitlab": {"timeout": 20}, "exclude_dirs": ["node_modules"]})
        )
        monkeypatch.setenv("GITLAB_URL", "https://env/api/v4/")

        config = load_config(project_dir=project, use_cache=False)

        assert config.gitlab.url == "https://env/api/v4"
        assert config.gitlab.timeout == 20
        assert config.exclude_dirs == ["node_modules"]

    def test_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        first = load_config(project_dir=tmp_path)
        monkeypatch.setenv("GITLAB_TOKEN", "glpat-later")

        assert load_config(project_dir=tmp_path) is first
        clear_cache()
        assert load_config(project_dir=tmp_path).gitlab.token == "glpat-later"

    def test_invalid_value_raises(self, tmp_path: Path):
        (tmp_path / ".reposqueeze.json").write_text(json.dumps({"gitlab": {"timeout": -1}}))
        with pytest.raises(ValidationError):
            load_config(project_dir=tmp_path, use_cache=False)


class TestModels:
    def test_token_hidden_from_repr(self):
        config = GitLabConfig(token="glpat-secret")
        assert "glpat-secret" not in repr(config)

    def test_unknown_keys_ignored(self):
        config = SqueezeConfig.model_validate({"telemetry": True})
        assert config.exclude_dirs == ["vendor"]


# ==============================================================================
# .env layering
# ==============================================================================


class TestLoadLayeredEnv:
    def test_project_overrides_user(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        user_env = tmp_path / "user.env"
        user_env.write_text("GITLAB_TOKEN=from-user\nGITLAB_URL=https://user/api/v4\n")
        project_env = tmp_path / ".env"
        project_env.write_text("GITLAB_TOKEN=from-project\n")

        applied = load_layered_env(
            user_env_paths=[user_env], project_env_paths=[project_env]
        )

        assert applied == {"GITLAB_TOKEN": "from-project", "GITLAB_URL": "https://user/api/v4"}
        assert os.environ["GITLAB_TOKEN"] == "from-project"

    def test_os_env_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITLAB_TOKEN", "exported")
        project_env = tmp_path / ".env"
        project_env.write_text("GITLAB_TOKEN=from-file\n")

        applied = load_layered_env(user_env_paths=[], project_env_paths=[project_env])

        assert applied == {}
        assert get_token() == "exported"

    def test_default_project_files(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        (tmp_path / ".env").write_text("GITLAB_URL=https://base/api/v4\n")
        (tmp_path / ".env.local").write_text("GITLAB_URL=https://local/api/v4\n")

        load_layered_env(project_dir=tmp_path, user_env_paths=[])

        assert os.environ["GITLAB_URL"] == "https://local/api/v4"
