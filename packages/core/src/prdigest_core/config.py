from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from prdigest_core.errors import ConfigError
from prdigest_core.prompts import DEFAULT_PROMPT

DEFAULT_CONFIG: dict = {
    "model": "openai",
    "prompt": None,  # None = built-in four-point checklist
    "prompt_file": None,  # path to a Markdown file holding the instruction template
    "mode": "commits",  # "commits" | "files"
    "stream": False,
    "max_changes": 1000,  # additions + deletions allowed per commit
    "max_files": 10,  # files considered in file mode; the rest are dropped silently
    "oversized_policy": "report",  # "report" | "comment"
    "summary_prompt": "custom",  # "custom" | "builtin"
    "request_timeout": None,  # seconds; None = SDK default
}

MODES = ("commits", "files")
PROVIDERS = ("openai", "anthropic")
OVERSIZED_POLICIES = ("report", "comment")
SUMMARY_PROMPTS = ("custom", "builtin")

# Environment variables understood when running as a GitHub Action step.
_ENV_OVERRIDES = {
    "CUSTOM_PROMPT": ("prompt", str),
    "MAX_CHANGES": ("max_changes", int),
    "MAX_FILES": ("max_files", int),
}


def _env_overrides() -> dict:
    overrides = {}
    for env_name, (key, cast) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if not raw:
            continue
        try:
            overrides[key] = cast(raw)
        except ValueError as e:
            raise ConfigError(f"{env_name} must be an integer, got {raw!r}.") from e
    return overrides


def load_config(config_path: str = ".prdigest.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prdigest.yml in the current directory
      3. CUSTOM_PROMPT / MAX_CHANGES / MAX_FILES environment variables
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping at the top level.")
        config.update(file_config)

    config.update(_env_overrides())

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")

    return config


def load_prompt(config: dict) -> str:
    """
    Resolve the instruction template.

    An inline ``prompt`` wins over ``prompt_file``; with neither set the
    built-in review checklist is used.
    """
    if config.get("prompt"):
        return config["prompt"]

    custom_path = config.get("prompt_file")
    if custom_path:
        p = Path(custom_path)
        if not p.exists():
            raise FileNotFoundError(f"Prompt file not found: {custom_path}")
        return p.read_text()

    return DEFAULT_PROMPT


def _choice(config: dict, key: str, allowed: tuple) -> str:
    value = config.get(key, DEFAULT_CONFIG[key])
    if value not in allowed:
        raise ConfigError(f"Invalid {key}: {value!r}. Choose one of: {', '.join(allowed)}.")
    return value


def _positive_int(config: dict, key: str) -> int:
    value = config.get(key, DEFAULT_CONFIG[key])
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{key} must be a positive integer, got {value!r}.")
    return value


def _bool(config: dict, key: str) -> bool:
    value = config.get(key, DEFAULT_CONFIG[key])
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}.")
    return value


@dataclass(frozen=True)
class ReviewConfig:
    """Validated, immutable settings shared by every pipeline stage."""

    model: str
    prompt: str
    mode: str
    stream: bool
    max_changes: int
    max_files: int
    oversized_policy: str
    summary_prompt: str
    request_timeout: float | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    @classmethod
    def from_dict(cls, config: dict) -> "ReviewConfig":
        timeout = config.get("request_timeout")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"request_timeout must be a number of seconds, got {timeout!r}.") from e
            if timeout <= 0:
                raise ConfigError("request_timeout must be greater than zero.")

        return cls(
            model=_choice(config, "model", PROVIDERS),
            prompt=load_prompt(config),
            mode=_choice(config, "mode", MODES),
            stream=_bool(config, "stream"),
            max_changes=_positive_int(config, "max_changes"),
            max_files=_positive_int(config, "max_files"),
            oversized_policy=_choice(config, "oversized_policy", OVERSIZED_POLICIES),
            summary_prompt=_choice(config, "summary_prompt", SUMMARY_PROMPTS),
            request_timeout=timeout,
            openai_api_key=config.get("openai_api_key"),
            anthropic_api_key=config.get("anthropic_api_key"),
        )
