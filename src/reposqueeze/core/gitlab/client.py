"""
GitLab REST API client.

Implements the GitLabGateway protocol over the GitLab v4 API using an
injected httpx.Client. One attempt is made per call; unexpected statuses
and transport failures are raised as GitLabAPIError.

API Endpoints:
- Find:     GET    /projects?owned=true&search={name}&per_page=100 -> 200
- Delete:   DELETE /projects/{id}                               -> 202
- Create:   POST   /projects                                    -> 201
- Commit:   POST   /projects/{id}/repository/commits            -> 201
- Archive:  GET    /projects/{id}/repository/archive.zip        -> 200
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

import httpx
from pydantic import ValidationError

from reposqueeze.core.exceptions import AmbiguousProjectError, GitLabAPIError
from reposqueeze.core.gitlab.models import CommitAction, CommitRequest, Project

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://gitlab.com/api/v4"


class GitLabClient:
    """
    Client for the GitLab projects and repository APIs.

    The httpx client is passed in so that callers own its lifetime and
    tests can swap in a mock transport.

    Example:
        >>> with httpx.Client(timeout=60.0) as http:
        ...     client = GitLabClient(http, token="glpat-...")
        ...     project = client.find_project_by_name("demo")
    """

    def __init__(
        self,
        http: httpx.Client,
        token: str,
        base_url: str = DEFAULT_API_URL,
    ) -> None:
        self.http = http
        self.token = token
        self.base_url = base_url.rstrip("/")

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        expected: tuple[int, ...],
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send one request and check its status.

        Args:
            operation: Short name used in error messages
            method: HTTP method
            path: API path relative to the base URL
            expected: Acceptable status codes

        Returns:
            The response, when its status is one of ``expected``

        Raises:
            GitLabAPIError: On transport failure or unexpected status
        """
        url = f"{self.base_url}{path}"
        headers = {"PRIVATE-TOKEN": self.token}

        logger.debug("GitLab %s %s", method, url)

        try:
            response = self.http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Failed to send request to gitlab api (%s): %s", operation, e)
            raise GitLabAPIError(operation, url=url) from e

        if response.status_code not in expected:
            error = GitLabAPIError(
                operation,
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
                url=url,
            )
            logger.error("%s", error)
            raise error

        return response

    def find_project_by_name(self, name: str) -> Project | None:
        response = self._request(
            "find project",
            "GET",
            "/projects",
            (200,),
            params={"owned": "true", "search": name, "per_page": "100"},
        )

        try:
            projects = [Project.model_validate(item) for item in response.json()]
        except (ValueError, TypeError, ValidationError) as e:
            raise GitLabAPIError(
                "find project",
                status_code=response.status_code,
                reason="unparseable response",
                body=response.text,
            ) from e

        matches = [p for p in projects if p.name == name]
        if len(matches) > 1:
            raise AmbiguousProjectError(name, len(matches))
        if not matches:
            return None
        return matches[0]

    def delete_project(self, project_id: int) -> None:
        self._request("delete project", "DELETE", f"/projects/{project_id}", (202, 204))
        logger.info("Deleted project %s", project_id)

    def create_project(self, name: str) -> Project:
        response = self._request(
            "create project",
            "POST",
            "/projects",
            (201,),
            json={"name": name},
        )
        try:
            project = Project.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GitLabAPIError(
                "create project",
                status_code=response.status_code,
                reason="unparseable response",
                body=response.text,
            ) from e
        logger.info("Created project %s (%s)", project.name, project.id)
        return project

    def commit_files(
        self,
        project_id: int,
        branch: str,
        message: str,
        actions: list[CommitAction],
    ) -> None:
        request = CommitRequest(branch=branch, commit_message=message, actions=actions)
        self._request(
            "commit files",
            "POST",
            f"/projects/{project_id}/repository/commits",
            (201,),
            json=request.to_payload(),
        )

    def download_repo_archive(self, project_id: int, buffer: BytesIO) -> None:
        response = self._request(
            "download archive",
            "GET",
            f"/projects/{project_id}/repository/archive.zip",
            (200,),
        )
        buffer.write(response.content)
