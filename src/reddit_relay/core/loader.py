# reddit_relay/core/loader.py
"""
YAML config loading for the relay.

Values may reference the environment as ``${VAR}`` (required) or
``${VAR:-default}``. Substitution is applied by the caller to the section
it reads, so unrelated sections never fail on unset variables.
"""
from __future__ import annotations

import logging
import os
import re
from glob import glob
from pathlib import Path
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def _env_value(match: re.Match) -> str:
    name, default = match.group(1), match.group(2)
    value = os.environ.get(name, default)
    if value is None:
        raise ValueError(f"Environment variable '{name}' is not set and no default provided")
    return value


def substitute_env_vars(value: Any) -> Any:
    """
    Resolve ``${VAR}`` references in strings nested anywhere in ``value``.

    Raises:
        ValueError: If a referenced variable is unset and has no default
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_env_value, value)
    if isinstance(value, dict):
        return {key: substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def _expand(patterns: Iterable[str]) -> list[Path]:
    found = {Path(match).resolve() for pattern in patterns for match in glob(pattern)}
    return sorted(found)


def load_yaml_files(patterns: Iterable[str]) -> list[dict[str, Any]]:
    """
    Load every YAML file matching the glob patterns, in sorted path order.

    Later documents are meant to override earlier ones. An empty file
    loads as an empty mapping.

    Raises:
        ValueError: If a document is not a mapping
        yaml.YAMLError: If a file is not valid YAML
    """
    patterns = list(patterns)
    paths = _expand(patterns)
    if not paths:
        logger.debug("No config files match %s", patterns)
        return []

    documents: list[dict[str, Any]] = []
    for path in paths:
        logger.info("Loading config file %s", path)
        try:
            document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            logger.error("Invalid YAML in '%s': %s", path, exc)
            raise
        if not isinstance(document, dict):
            raise ValueError(f"Config file '{path}' must contain a mapping at top level")
        documents.append(document)

    return documents
