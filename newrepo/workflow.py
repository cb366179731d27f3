"""
workflow.py

Responsibility: Run the provisioning stages in order.

1) Resolve owner (organization, or the token's login)
2) Create the GitHub repository
3) Materialize the template and push the first commit
4) Apply merge policy and branch protection (best effort)

Stages 1-3 stop the run on failure. A repository created in stage 2 is not
deleted when a later stage fails. Stage 4 failures are collected as warnings.

The GitHub client and the publish function are parameters so the sequence can
be driven with fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from newrepo import git
from newrepo.config import Inputs, Settings
from newrepo.errors import ConfigurationWarning
from newrepo.github_client import DEFAULT_BRANCH, GitHubClient, RepoInfo
from newrepo.renderer import MaterializeResult, materialize

logger = logging.getLogger("newrepo")


class Client(Protocol):
    def get_authenticated_login(self) -> str: ...

    def create_repo(self, *, owner: str, name: str, organization: str | None = None) -> RepoInfo: ...

    def update_repo_settings(self, *, owner: str, name: str) -> None: ...

    def protect_branch(self, *, owner: str, name: str, status_check: str) -> None: ...


Publisher = Callable[..., None]


@dataclass
class ProvisionResult:
    owner: str
    repo: RepoInfo
    workspace: MaterializeResult | None = None
    warnings: list[ConfigurationWarning] = field(default_factory=list)


def resolve_owner(inputs: Inputs, client: Client) -> str:
    if inputs.organization:
        return inputs.organization
    logger.info("Fetching authenticated user...")
    return client.get_authenticated_login()


def remote_url_for(repo: RepoInfo, inputs: Inputs, settings: Settings) -> str:
    url = repo.clone_url or f"https://github.com/{repo.owner}/{repo.name}.git"
    if settings.embed_token:
        return git.tokenized_remote(url, inputs.token)
    return url


def apply_configuration(owner: str, name: str, client: Client, settings: Settings) -> list[ConfigurationWarning]:
    warnings: list[ConfigurationWarning] = []

    logger.info("Updating repository settings...")
    try:
        client.update_repo_settings(owner=owner, name=name)
        logger.info("Repository settings updated.")
    except ConfigurationWarning as w:
        logger.warning("%s", w)
        warnings.append(w)

    logger.info("Applying branch protection rule (require PR + status check)...")
    try:
        client.protect_branch(owner=owner, name=name, status_check=settings.status_check)
        logger.info("Branch protection applied.")
    except ConfigurationWarning as w:
        logger.warning("%s", w)
        warnings.append(w)

    return warnings


def provision(
    inputs: Inputs,
    settings: Settings | None = None,
    *,
    client: Client | None = None,
    publisher: Publisher = git.publish,
    configure: bool = True,
    git_env: dict[str, str] | None = None,
) -> ProvisionResult:
    settings = settings or Settings()
    if client is None:
        client = GitHubClient(inputs.token, settings.api_base, timeout=settings.timeout)

    owner = resolve_owner(inputs, client)

    logger.info("Creating repo '%s' under '%s'...", inputs.name, owner)
    repo = client.create_repo(owner=owner, name=inputs.name, organization=inputs.organization)
    logger.info("Repository created: %s", repo.html_url)

    workspace = materialize(
        template_dir=Path(settings.template_dir),
        name=inputs.name,
        version_tag=inputs.version_tag,
        tools_dir=settings.tools_dir,
    )

    logger.info("Initializing git repo and pushing to GitHub...")
    publisher(
        workdir=workspace.workdir,
        remote_url=remote_url_for(repo, inputs, settings),
        branch=DEFAULT_BRANCH,
        message=settings.commit_message,
        env=git_env,
    )

    result = ProvisionResult(owner=owner, repo=repo, workspace=workspace)
    if configure:
        result.warnings = apply_configuration(owner, inputs.name, client, settings)

    logger.info("Repository ready at: %s", repo.html_url)
    return result
