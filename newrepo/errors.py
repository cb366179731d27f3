"""
errors.py

Responsibility: Exception taxonomy for a provisioning run.

Everything fatal derives from `NewRepoError`; the CLI turns it into a
diagnostic on stderr and a non-zero exit. `ConfigurationWarning` shares the
base so callers can raise it the same way, but the workflow catches it and
only logs it.
"""

from __future__ import annotations


class NewRepoError(RuntimeError):
    pass


class ConfigurationError(NewRepoError):
    """A required input is missing or the config file is unusable."""


class AuthenticationError(NewRepoError):
    """The token does not resolve to a usable login."""


class GitHubError(NewRepoError):
    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class RemoteCreationError(GitHubError):
    pass


class ConfigurationWarning(GitHubError):
    """Post-creation settings could not be applied. Not fatal."""


class TemplateMissingError(NewRepoError):
    pass


class PublishError(NewRepoError):
    pass
