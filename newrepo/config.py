"""
config.py

Responsibility: Resolve invocation inputs and run settings into typed values.

Inputs come from the environment (the same variable names the shell tool used):
- name          (required) repository name
- go_version    (required) version substituted into the template
- github_token  (required) GitHub token with repo scope
- github_org    (optional) organization to create the repository in

Settings are layered: built-in defaults < optional YAML file < CLI flags.
Nothing here touches the network or the filesystem beyond reading the YAML file.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from newrepo.errors import ConfigurationError

ENV_NAME = "name"
ENV_VERSION = "go_version"
ENV_TOKEN = "github_token"
ENV_ORG = "github_org"

REQUIRED_ENV = (ENV_NAME, ENV_VERSION, ENV_TOKEN)


@dataclass(frozen=True)
class Inputs:
    """Per-run values resolved from the environment."""

    name: str
    version_tag: str
    token: str = field(repr=False)
    organization: str | None = None


@dataclass(frozen=True)
class Settings:
    """Knobs that stay the same between runs."""

    api_base: str = "https://api.github.com"
    template_dir: str = "go-repo"
    tools_dir: str = "tools"
    commit_message: str = "chore: init codebase"
    status_check: str = "build-and-release"
    embed_token: bool = False
    timeout: float | None = None


def resolve_inputs(environ: Mapping[str, str]) -> Inputs:
    """
    Read the required and optional inputs.

    Raises ConfigurationError naming the first missing (or blank) required key.
    """
    values: dict[str, str] = {}
    for key in REQUIRED_ENV:
        value = (environ.get(key) or "").strip()
        if not value:
            raise ConfigurationError(f"Environment variable '{key}' must be set")
        values[key] = value

    # blank means unset; anything else is used exactly as given
    org = environ.get(ENV_ORG) or None
    if org is not None and not org.strip():
        org = None

    return Inputs(
        name=values[ENV_NAME],
        version_tag=values[ENV_VERSION],
        token=values[ENV_TOKEN],
        organization=org,
    )


def _coerce(name: str, value: Any) -> Any:
    if name == "embed_token":
        if not isinstance(value, bool):
            raise ConfigurationError(f"`{name}` must be a boolean.")
        return value
    if name == "timeout":
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigurationError("`timeout` must be a positive number of seconds.")
        return float(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"`{name}` must be a non-empty string.")
    return value.strip()


def load_settings(config_path: str | Path | None = None, **overrides: Any) -> Settings:
    """
    Build Settings from defaults, an optional YAML mapping and keyword overrides.

    Overrides whose value is None are ignored, so argparse defaults can be
    passed straight through.
    """
    known = {f.name for f in dataclasses.fields(Settings)}
    data: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigurationError(f"Config file does not exist: {path}")
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file is not valid YAML: {path}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError("Config file must be a mapping/object at the top level.")
        unknown = sorted(str(k) for k in raw if k not in known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
        data.update(raw)

    for k, v in overrides.items():
        if k not in known:
            raise ConfigurationError(f"Unknown setting: {k}")
        if v is not None:
            data[k] = v

    settings = Settings(**{k: _coerce(k, v) for k, v in data.items()})
    return dataclasses.replace(settings, api_base=settings.api_base.rstrip("/"))
