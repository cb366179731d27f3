"""
git.py

Responsibility: Turn a materialized workspace into a first commit and push it.

git is driven as an external command; nothing here reimplements it. Output is
captured and only shown (redacted) when a command fails or at DEBUG level.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from newrepo.errors import PublishError
from newrepo.log import redact_token

logger = logging.getLogger("newrepo.git")


class GitCommandError(PublishError):
    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.output = output


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> str:
    """
    Run a git command, raising a GitCommandError on failure.
    """
    shown = redact_token(" ".join(cmd))
    logger.debug("$ %s", shown)
    try:
        proc = subprocess.run(
            cmd, cwd=str(cwd), env=env, check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
        )
    except FileNotFoundError as e:
        raise GitCommandError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        output = redact_token(e.stdout or "")
        raise GitCommandError(f"Command failed: {shown}\n\n{output}", output=output) from e
    return proc.stdout or ""


def tokenized_remote(clone_url: str, token: str) -> str:
    """
    Convert https://github.com/owner/name.git into an HTTPS URL containing a token.

    The token ends up in `.git/config` of the scratch workspace.
    """
    # GitHub supports x-access-token in the username position.
    return clone_url.replace("https://", f"https://x-access-token:{token}@", 1)


def publish(
    *,
    workdir: Path,
    remote_url: str,
    branch: str = "master",
    message: str = "chore: init codebase",
    env: dict[str, str] | None = None,
) -> None:
    """
    git init, commit everything on `branch`, and push it to `remote_url` as upstream.

    A failed commit (nothing staged, empty template) is only logged; the push
    then decides. Every other failed step raises PublishError.
    """
    _run(["git", "init", "-q"], cwd=workdir, env=env)
    _run(["git", "checkout", "-q", "-B", branch], cwd=workdir, env=env)
    _run(["git", "add", "--all"], cwd=workdir, env=env)
    try:
        _run(["git", "commit", "-q", "-m", message], cwd=workdir, env=env)
    except GitCommandError as e:
        logger.info("No changes to commit")
        logger.debug("%s", e.output)
    _run(["git", "remote", "add", "origin", remote_url], cwd=workdir, env=env)

    try:
        _run(["git", "push", "-u", "origin", branch], cwd=workdir, env=env)
    except GitCommandError as e:
        raise PublishError(f"Failed to push to {redact_token(remote_url)}\n\n{e.output}") from e
