"""
github_client.py

Responsibility: Isolate all direct GitHub REST API interaction.

This module must be the only place that:
- Constructs GitHub REST endpoints and request payloads
- Sends HTTP requests to the API
- Interprets GitHub API responses / error payloads

Nothing here retries; a failed call surfaces as a `GitHubError` subclass and the
caller decides whether it is fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from newrepo.errors import AuthenticationError, ConfigurationWarning, GitHubError, RemoteCreationError

logger = logging.getLogger("newrepo.http")

API_VERSION = "2022-11-28"
ACCEPT_JSON = "application/vnd.github+json"
ACCEPT_PROTECTION_PREVIEW = "application/vnd.github.luke-cage-preview+json"

DEFAULT_BRANCH = "master"


@dataclass(frozen=True)
class RepoInfo:
    owner: str
    name: str
    html_url: str
    clone_url: str
    default_branch: str


def creation_payload(name: str) -> dict[str, Any]:
    # Same shape for every input: public, no extras, empty history.
    return {
        "name": name,
        "private": False,
        "has_issues": False,
        "has_projects": False,
        "has_wiki": False,
        "auto_init": False,
        "default_branch": DEFAULT_BRANCH,
    }


def settings_payload() -> dict[str, Any]:
    return {
        "allow_squash_merge": True,
        "allow_merge_commit": False,
        "allow_rebase_merge": False,
        "allow_auto_merge": True,
        "delete_branch_on_merge": True,
        "default_workflow_permissions": "read",
        "default_branch": DEFAULT_BRANCH,
    }


def protection_payload(status_check: str) -> dict[str, Any]:
    return {
        "required_status_checks": {
            "strict": False,
            "contexts": [status_check],
        },
        "enforce_admins": False,
        "required_pull_request_reviews": {
            "required_approving_review_count": 1,
        },
        "restrictions": None,
    }


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class GitHubClient:
    def __init__(
        self,
        token: str,
        api_base: str = "https://api.github.com",
        *,
        timeout: float | None = None,
    ) -> None:
        if not token.strip():
            raise GitHubError("GitHub token is required.")
        self._token = token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    def _headers(self, accept: str = ACCEPT_JSON) -> dict[str, str]:
        return {
            "Accept": accept,
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "new-repo",
        }

    def _send(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        accept: str = ACCEPT_JSON,
    ) -> requests.Response:
        url = f"{self._api_base}{path}"
        try:
            r = requests.request(method, url, headers=self._headers(accept), json=json_body, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed {method} {path}: {e}") from e
        logger.debug("%s %s -> %s", method, path, r.status_code)
        return r

    @staticmethod
    def _json(r: requests.Response) -> dict[str, Any]:
        try:
            payload = r.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def get_authenticated_login(self) -> str:
        """
        Return the login of the user the token belongs to.

        A missing, empty or literal "null" login means the token is invalid or
        lacks scope; that is reported as AuthenticationError whatever the status.
        """
        try:
            r = self._send("GET", "/user")
        except GitHubError as e:
            raise AuthenticationError(f"Failed to determine authenticated user: {e}") from e
        login = self._json(r).get("login")
        if login is None or not str(login).strip() or str(login) == "null":
            raise AuthenticationError(
                f"Failed to determine authenticated user (HTTP {r.status_code}). Check github_token."
            )
        return str(login)

    def create_repo(self, *, owner: str, name: str, organization: str | None = None) -> RepoInfo:
        """
        Create a new repository under either:
        - the authenticated user (organization is None), OR
        - the given organization.

        This method uses the GitHub REST API only; git operations are handled elsewhere.
        """
        path = f"/orgs/{organization}/repos" if organization else "/user/repos"
        try:
            r = self._send("POST", path, json_body=creation_payload(name))
        except GitHubError as e:
            raise RemoteCreationError(str(e)) from e

        if not _is_success(r.status_code):
            raise RemoteCreationError(
                f"Failed to create repository (HTTP {r.status_code}): {r.text}",
                status=r.status_code,
                body=r.text,
            )

        data = self._json(r)
        return RepoInfo(
            owner=owner,
            name=name,
            html_url=data.get("html_url") or f"https://github.com/{owner}/{name}",
            clone_url=data.get("clone_url") or f"https://github.com/{owner}/{name}.git",
            default_branch=data.get("default_branch") or DEFAULT_BRANCH,
        )

    def update_repo_settings(self, *, owner: str, name: str) -> None:
        """Apply the merge policy. Raises ConfigurationWarning on failure."""
        self._configure("PATCH", f"/repos/{owner}/{name}", settings_payload(), "update repository settings")

    def protect_branch(self, *, owner: str, name: str, status_check: str) -> None:
        """Require `status_check` and one approving review on master. Raises ConfigurationWarning on failure."""
        self._configure(
            "PUT",
            f"/repos/{owner}/{name}/branches/{DEFAULT_BRANCH}/protection",
            protection_payload(status_check),
            "apply branch protection",
            accept=ACCEPT_PROTECTION_PREVIEW,
        )

    def _configure(self, method: str, path: str, body: dict[str, Any], what: str, *, accept: str = ACCEPT_JSON) -> None:
        try:
            r = self._send(method, path, json_body=body, accept=accept)
        except GitHubError as e:
            raise ConfigurationWarning(f"Failed to {what}: {e}") from e
        if not _is_success(r.status_code):
            raise ConfigurationWarning(
                f"Failed to {what} (HTTP {r.status_code})",
                status=r.status_code,
                body=r.text,
            )
