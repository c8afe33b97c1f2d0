"""
Pytest configuration and shared fixtures.

Provides temporary git repositories, in-memory fakes for the git and
GitLab gateways, and helpers for building GitLab-style zip archives.
"""

import io
import subprocess
import zipfile
from collections.abc import Sequence
from io import BytesIO
from pathlib import Path

import pytest

from reposqueeze.core.config import clear_cache
from reposqueeze.core.exceptions import AmbiguousProjectError, GitError
from reposqueeze.core.gitlab.models import CommitAction, Project

# ==============================================================================
# Git Repository Fixtures
# ==============================================================================


def run_git(repo: Path, *args: str) -> str:
    """Run a git command in ``repo`` and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository on branch ``main`` with no commits."""
    repo = tmp_path / "demo"
    repo.mkdir()

    subprocess.run(["git", "init"], cwd=repo, capture_output=True, check=True)
    run_git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    # Configure git user (required for commits)
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "user.name", "Test User")
    run_git(repo, "config", "commit.gpgsign", "false")

    return repo


@pytest.fixture
def git_repo_with_files(git_repo: Path) -> Path:
    """Git repo with ``a.txt`` and ``b/c.txt`` committed on ``main``."""
    (git_repo / "a.txt").write_text("alpha\n")
    (git_repo / "b").mkdir()
    (git_repo / "b" / "c.txt").write_text("charlie\n")
    run_git(git_repo, "add", "-A")
    run_git(git_repo, "commit", "-m", "Initial commit")
    return git_repo


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep user config, env vars and the config cache out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in ("GITLAB_TOKEN", "GITLAB_URL", "REPOSQUEEZE_TIMEOUT", "REPOSQUEEZE_EXCLUDE"):
        # setenv first so teardown also removes values written by load_layered_env
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Archive Helpers
# ==============================================================================


def make_archive(files: dict[str, bytes], root: str = "demo-main-1a2b3c") -> bytes:
    """
    Build a zip archive laid out like a GitLab repository archive.

    Every file sits under one synthetic ``root/`` directory, with directory
    entries written before their contents.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        directories = {f"{root}/"}
        for name in files:
            parts = name.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                directories.add(f"{root}/" + "/".join(parts[:i]) + "/")
        for directory in sorted(directories, key=len):
            info = zipfile.ZipInfo(directory)
            info.external_attr = (0o40755 << 16) | 0x10
            archive.writestr(info, b"")
        for name, content in files.items():
            info = zipfile.ZipInfo(f"{root}/{name}")
            info.external_attr = 0o100644 << 16
            archive.writestr(info, content)
    return buffer.getvalue()


# ==============================================================================
# Gateway Fakes
# ==============================================================================


class FakeGitGateway:
    """
    In-memory git gateway.

    Tracks the current branch and existing branches, records every call,
    and raises GitError for any method named in ``fail_on``.
    """

    def __init__(
        self,
        files: list[str] | None = None,
        current: str = "main",
        fail_on: set[str] | None = None,
    ) -> None:
        self.files = files if files is not None else ["a.txt", "b/c.txt"]
        self.current = current
        self.branches = {current}
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, tuple[object, ...]]] = []
        self.commits: list[str] = []

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, args))
        if name in self.fail_on:
            raise GitError(f"{name} failed", command=["git", name], output="boom")

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def current_branch(self, repo_path: Path) -> str:
        self.calls.append(("current_branch", (repo_path,)))
        return self.current

    def create_orphan_branch(
        self,
        repo_path: Path,
        branch: str,
        source_branch: str | None = None,
        exclude_dirs: Sequence[str] = (),
    ) -> str:
        self._record("create_orphan_branch", repo_path, branch, source_branch)
        self.current = branch
        self.branches.add(branch)
        for directory in exclude_dirs:
            self.remove_directory(repo_path, directory)
        return "f" * 40

    def create_empty_orphan_branch(
        self, repo_path: Path, branch: str, source_branch: str | None = None
    ) -> None:
        self._record("create_empty_orphan_branch", repo_path, branch, source_branch)
        self.current = branch
        self.branches.add(branch)

    def list_files(self, repo_path: Path) -> list[str]:
        self._record("list_files", repo_path)
        return list(self.files)

    def remove_directory(self, repo_path: Path, name: str) -> None:
        self._record("remove_directory", repo_path, name)

    def clean_workdir(self, repo_path: Path) -> None:
        self._record("clean_workdir", repo_path)

    def checkout_branch(self, repo_path: Path, branch: str) -> None:
        self._record("checkout_branch", repo_path, branch)
        self.current = branch

    def delete_local_branch(self, repo_path: Path, branch: str) -> None:
        self._record("delete_local_branch", repo_path, branch)
        self.branches.discard(branch)

    def commit(self, repo_path: Path, message: str) -> str:
        self._record("commit", repo_path, message)
        self.commits.append(message)
        return "c" * 40


class FakeGitLabGateway:
    """
    In-memory GitLab gateway.

    Projects live in a dict keyed by id. Commits and archives are stored per
    project, and any method named in ``fail_on`` raises ``error``.
    """

    def __init__(self, projects: list[Project] | None = None) -> None:
        self.projects: dict[int, Project] = {p.id: p for p in projects or []}
        self.next_id = max(self.projects, default=0) + 1
        self.commits: dict[int, list[dict[str, object]]] = {}
        self.archives: dict[int, bytes] = {}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.error: Exception = RuntimeError("gitlab failure")

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail_on:
            raise self.error

    def find_project_by_name(self, name: str) -> Project | None:
        self._record("find_project_by_name")
        matches = [p for p in self.projects.values() if p.name == name]
        if len(matches) > 1:
            raise AmbiguousProjectError(name, len(matches))
        return matches[0] if matches else None

    def delete_project(self, project_id: int) -> None:
        self._record("delete_project")
        del self.projects[project_id]
        self.commits.pop(project_id, None)
        self.archives.pop(project_id, None)

    def create_project(self, name: str) -> Project:
        self._record("create_project")
        project = Project(id=self.next_id, name=name)
        self.projects[project.id] = project
        self.next_id += 1
        return project

    def commit_files(
        self,
        project_id: int,
        branch: str,
        message: str,
        actions: list[CommitAction],
    ) -> None:
        self._record("commit_files")
        self.commits.setdefault(project_id, []).append(
            {"branch": branch, "message": message, "actions": list(actions)}
        )
        self.archives[project_id] = make_archive(
            {action.file_path: action.content for action in actions},
            root=f"{self.projects[project_id].name}-{branch}-0000",
        )

    def download_repo_archive(self, project_id: int, buffer: BytesIO) -> None:
        self._record("download_repo_archive")
        buffer.write(self.archives.get(project_id, make_archive({})))


@pytest.fixture
def fake_git() -> FakeGitGateway:
    return FakeGitGateway()


@pytest.fixture
def fake_gitlab() -> FakeGitLabGateway:
    return FakeGitLabGateway()


@pytest.fixture
def git_cmd():
    """The ``run_git`` helper, for tests that poke at a repository directly."""
    return run_git


@pytest.fixture
def zip_archive():
    """The ``make_archive`` helper."""
    return make_archive
