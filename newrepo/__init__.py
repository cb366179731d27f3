"""
newrepo package

Provision a new GitHub repository from a local template directory.

Key responsibilities are split across modules:
- `config.py`: environment inputs and layered settings
- `github_client.py`: isolated GitHub REST API interactions
- `renderer.py`: copy the template, substitute placeholders, mark tools executable
- `git.py`: initial commit and push
- `workflow.py`: the ordered provisioning stages
- `cli.py`: CLI entrypoint and exit codes
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
