from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from tests.helpers import FakeGitHubAPI


@pytest.fixture
def github_api(monkeypatch: pytest.MonkeyPatch) -> FakeGitHubAPI:
    api = FakeGitHubAPI()
    monkeypatch.setattr("newrepo.github_client.requests.request", api)
    return api


@pytest.fixture
def git_identity(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the user's git config out of the tests and give commits an author."""
    empty = tmp_path / "gitconfig"
    empty.write_text("", encoding="utf-8")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(empty))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    monkeypatch.setenv("GIT_AUTHOR_NAME", "new-repo tests")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "tests@example.invalid")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "new-repo tests")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "tests@example.invalid")


@pytest.fixture
def bare_remote(tmp_path: Path, git_identity: None) -> Path:
    remote = tmp_path / "remote.git"
    subprocess.run(["git", "init", "-q", "--bare", str(remote)], check=True)
    return remote


@pytest.fixture
def template(tmp_path: Path) -> Path:
    """A small template: one file with both placeholders and an executable-to-be tool."""
    tpl = tmp_path / "go-repo"
    (tpl / "tools").mkdir(parents=True)
    (tpl / "go.mod").write_text("module {{ .name }}\ngo {{ .go_version }}\n", encoding="utf-8")
    (tpl / "README.md").write_text("plain text\n", encoding="utf-8")
    (tpl / ".gitignore").write_text("/bin/\n", encoding="utf-8")
    build = tpl / "tools" / "build.sh"
    build.write_text("#!/bin/sh\necho {{ .name }}\n", encoding="utf-8")
    build.chmod(0o644)
    (tpl / "README.md").chmod(0o644)
    return tpl
