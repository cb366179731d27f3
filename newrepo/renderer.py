"""
renderer.py

Responsibility: Materialize a template directory into a fresh scratch workspace.

Rules:
- Copy the whole template tree, hidden files included, into a new temp dir.
- Drop any `.git` carried over from the template.
- Replace `{{ .name }}` / `{{ .go_version }}` placeholders by plain byte
  substitution. There is no template engine here; anything that is not one of
  these placeholders is left alone, and binary files get the same treatment.
  A placeholder never spans lines: only spaces and tabs may pad the key.
- Make every regular file under the tools directory executable.

The scratch directory is not removed afterwards.

This module intentionally does NOT know about GitHub, git commands, or CLI parsing.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import stat
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from newrepo.errors import TemplateMissingError

logger = logging.getLogger("newrepo")

VCS_DIR = ".git"

NAME_PATTERN = re.compile(rb"\{\{[ \t]*\.name[ \t]*\}\}")
VERSION_PATTERN = re.compile(rb"\{\{[ \t]*\.go_version[ \t]*\}\}")
# Applied after VERSION_PATTERN: catches forms like `{{ .go_version -}}`
# whose closing braces are not directly after the key.
VERSION_PREFIX_PATTERN = re.compile(rb"\{\{[ \t]*\.go_version")

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


@dataclass(frozen=True)
class MaterializeResult:
    workdir: Path
    substituted_files: list[Path] = field(default_factory=list)
    executable_files: list[Path] = field(default_factory=list)


def _iter_files(root: Path, *, skip_dir: str | None = None) -> list[Path]:
    """
    Return all regular files under root (symlinks excluded), in deterministic
    lexicographic order (relative path ordering).
    """
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        if skip_dir is not None and Path(dirpath) == root and skip_dir in dirnames:
            dirnames.remove(skip_dir)
        dir_path = Path(dirpath)
        for name in filenames:
            p = dir_path / name
            if p.is_symlink() or not p.is_file():
                continue
            files.append(p)
    files.sort(key=lambda p: str(p.relative_to(root)).replace(os.sep, "/"))
    return files


def substitute_bytes(data: bytes, *, name: str, version_tag: str) -> bytes:
    # Callables keep backslashes in the values literal.
    name_b = name.encode("utf-8")
    version_b = version_tag.encode("utf-8")
    out = NAME_PATTERN.sub(lambda _m: name_b, data)
    out = VERSION_PATTERN.sub(lambda _m: version_b, out)
    return VERSION_PREFIX_PATTERN.sub(lambda _m: version_b, out)


def substitute_placeholders(root: str | Path, *, name: str, version_tag: str) -> list[Path]:
    """
    Rewrite placeholders in every file under root, skipping `.git`.

    Files without placeholders are not rewritten at all. Returns the files
    that changed, relative to root.
    """
    root_path = Path(root)
    changed: list[Path] = []
    for path in _iter_files(root_path, skip_dir=VCS_DIR):
        data = path.read_bytes()
        out = substitute_bytes(data, name=name, version_tag=version_tag)
        if out != data:
            path.write_bytes(out)
            changed.append(path.relative_to(root_path))
    return changed


def mark_executable(root: str | Path, tools_dir: str = "tools") -> list[Path]:
    """
    chmod +x every regular file under root/tools_dir. A missing tools dir is fine.
    """
    root_path = Path(root)
    tools = root_path / tools_dir
    if not tools.is_dir():
        return []

    logger.info("Setting execution permission on %s/*...", tools_dir)
    marked: list[Path] = []
    for path in _iter_files(tools):
        mode = path.stat().st_mode
        path.chmod(mode | _EXEC_BITS)
        marked.append(path.relative_to(root_path))
    return marked


def _strip_vcs(workdir: Path) -> None:
    vcs = workdir / VCS_DIR
    if vcs.is_dir() and not vcs.is_symlink():
        shutil.rmtree(vcs)
    elif vcs.exists() or vcs.is_symlink():
        # worktree/submodule checkouts keep a `.git` file instead of a directory
        vcs.unlink()


def materialize(
    *,
    template_dir: str | Path,
    name: str,
    version_tag: str,
    tools_dir: str = "tools",
    scratch_dir: str | Path | None = None,
) -> MaterializeResult:
    """
    Copy template_dir into a new scratch directory and customize it.

    scratch_dir is the parent for the new directory (system temp by default).
    """
    tpl_dir = Path(template_dir)
    if not tpl_dir.is_dir():
        raise TemplateMissingError(f"Directory '{tpl_dir}' not found.")

    workdir = Path(tempfile.mkdtemp(prefix=f"{name}-", dir=scratch_dir))
    shutil.copytree(tpl_dir, workdir, symlinks=True, dirs_exist_ok=True)
    logger.debug("Copied %s to %s", tpl_dir, workdir)

    _strip_vcs(workdir)

    logger.info("Replacing template variables...")
    substituted = substitute_placeholders(workdir, name=name, version_tag=version_tag)
    executable = mark_executable(workdir, tools_dir)

    return MaterializeResult(workdir=workdir, substituted_files=substituted, executable_files=executable)
