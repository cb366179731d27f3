"""
cli.py

Responsibility: CLI entrypoint for new-repo.

Inputs come from the environment (name, go_version, github_token, github_org);
flags only tune how the run is done. High-level flow:
1) Resolve inputs and settings (`config.py`)
2) Hand off to `workflow.provision`
3) Map fatal errors to exit code 1 with a message on stderr
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Mapping

from newrepo import __version__
from newrepo.config import load_settings, resolve_inputs
from newrepo.errors import NewRepoError
from newrepo.log import configure_logging, redact_token
from newrepo.workflow import provision

logger = logging.getLogger("newrepo")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="new-repo",
        description="Create a GitHub repo from a local template, push it, and configure it.",
        epilog="Environment: name, go_version, github_token (required); github_org (optional).",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", default=None, help="YAML file with settings (see Settings fields)")
    p.add_argument("--template-dir", dest="template_dir", default=None, help="Template directory (default: go-repo)")
    p.add_argument("--api-base", dest="api_base", default=None, help="GitHub API base URL")
    p.add_argument("--status-check", dest="status_check", default=None, help="Required status check context")
    p.add_argument("--commit-message", dest="commit_message", default=None, help="Message of the initial commit")
    p.add_argument(
        "--embed-token",
        dest="embed_token",
        action="store_true",
        default=None,
        help="Push with the token embedded in the remote URL instead of git credentials",
    )
    p.add_argument(
        "--skip-configure",
        action="store_true",
        help="Do not apply merge settings or branch protection after pushing",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log HTTP calls and git commands")
    return p


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    env = os.environ if environ is None else environ
    token = env.get("github_token")
    try:
        inputs = resolve_inputs(env)
        settings = load_settings(
            args.config,
            template_dir=args.template_dir,
            api_base=args.api_base,
            status_check=args.status_check,
            commit_message=args.commit_message,
            embed_token=args.embed_token,
        )
        provision(inputs, settings, configure=not args.skip_configure)
    except NewRepoError as e:
        logger.error("%s", redact_token(str(e), token))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
