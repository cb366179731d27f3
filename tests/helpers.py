"""
Test helpers: a fake GitHub API behind `requests.request` and git inspection shortcuts.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def make_response(status: int, body: Any = None) -> MagicMock:
    r = MagicMock(spec=requests.Response)
    r.status_code = status
    if body is None:
        r.text = ""
        r.json.side_effect = ValueError("no body")
    else:
        r.text = json.dumps(body)
        r.json.return_value = body
    return r


class FakeGitHubAPI:
    """Callable stand-in for `requests.request` that routes on (method, path)."""

    def __init__(self, api_base: str = "https://api.github.com") -> None:
        self.api_base = api_base
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.calls: list[dict[str, Any]] = []

    def route(self, method: str, path: str, status: int, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def paths(self) -> list[tuple[str, str]]:
        return [(c["method"], c["path"]) for c in self.calls]

    def call(self, method: str, path: str) -> dict[str, Any]:
        return next(c for c in self.calls if c["method"] == method and c["path"] == path)

    def __call__(self, method: str, url: str, **kwargs: Any) -> MagicMock:
        assert url.startswith(self.api_base), url
        path = url[len(self.api_base) :]
        self.calls.append({"method": method, "path": path, **kwargs})
        status, body = self.routes.get((method, path), (404, {"message": "Not Found"}))
        return make_response(status, body)


def git_show(remote: Path, spec: str) -> str:
    return subprocess.run(
        ["git", "--git-dir", str(remote), "show", spec], check=True, stdout=subprocess.PIPE, text=True
    ).stdout


def git_ls_tree(remote: Path, ref: str, path: str) -> str:
    return subprocess.run(
        ["git", "--git-dir", str(remote), "ls-tree", ref, path], check=True, stdout=subprocess.PIPE, text=True
    ).stdout
