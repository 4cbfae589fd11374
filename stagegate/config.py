"""
stagegate configuration: built-in defaults overlaid with an optional YAML file.

The override file is looked up in this order:
- $STAGEGATE_CONFIG
- stagegate.yaml next to the pre-commit hook (.git/hooks/)
- stagegate.yaml at the repository top level

Keys missing from the override keep their default. Unknown keys are ignored.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

from .errors import ConfigError
from .yaml_safety import safe_yaml_load

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "stagegate.yaml"
CONFIG_ENV_VAR = "STAGEGATE_CONFIG"
MAX_CONFIG_SIZE = 1_000_000  # 1MB


@dataclass(frozen=True)
class HookConfig:
    """Resolved options for one hook run."""

    # PHP_CodeSniffer
    phpcs_active: bool = True
    phpcs_bin: str = "vendor/bin/phpcs"
    phpcs_standard: str = "PSR2"
    phpcs_ignore: str = ""
    phpcs_sniffs: str = ""
    phpcs_encoding: str = "utf-8"
    phpcs_ignore_warnings: bool = False

    # PHP Mess Detector
    phpmd_active: bool = True
    phpmd_bin: str = "vendor/bin/phpmd"
    phpmd_output: str = "text"
    phpmd_rulesets: str = "cleancode,codesize,controversial,design,naming,unusedcode"
    phpmd_suffixes: str = ""
    phpmd_exclude: str = ""

    # File selection
    file_pattern: str = r"\.(php|phtml)$"
    exclude_pattern: str = ""
    staging_dir: str = ""


DEFAULTS: dict = asdict(HookConfig())

_REGEX_KEYS = ("file_pattern", "exclude_pattern")


def is_enabled(value: object) -> bool:
    """Return True only for the enabled sentinel (YAML true or 1).

    Used for the active flags and every other on/off option.
    """
    if isinstance(value, bool):
        return value
    return value in (1, "1")


def _coerce(key: str, value: object) -> object:
    """Normalize one override value against its default's type."""
    if isinstance(DEFAULTS[key], bool):
        return is_enabled(value)
    if value is None:
        return ""
    if isinstance(value, list):
        # Lists are accepted for comma-separated options (rulesets, suffixes)
        return ",".join(str(v) for v in value)
    return str(value)


def config_from_mapping(data: dict | None) -> HookConfig:
    """Build a HookConfig from override data layered on the defaults."""
    merged = dict(DEFAULTS)
    known = {f.name for f in fields(HookConfig)}

    for key, value in (data or {}).items():
        if key not in known:
            logger.debug("Ignoring unknown config key: %s", key)
            continue
        merged[key] = _coerce(key, value)

    return HookConfig(**merged)


def find_config(repo_root: Path | None = None, git_dir: Path | None = None) -> Path | None:
    """Find the override file, or None when running on defaults."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    candidates = []
    if git_dir is not None:
        candidates.append(git_dir / "hooks" / CONFIG_FILENAME)
    if repo_root is not None:
        candidates.append(repo_root / CONFIG_FILENAME)

    for path in candidates:
        if path.is_file():
            return path

    return None


def read_override(config_path: Path) -> dict:
    """Read the YAML override file into a dict."""
    if not config_path.exists():
        raise ConfigError(f"Config not found: {config_path}")

    # YAML bomb protection - limit config file size
    if config_path.stat().st_size > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config file too large (max 1MB): {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = safe_yaml_load(f)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark:
            raise ConfigError(
                f"{config_path} is malformed (line {mark.line + 1}, column {mark.column + 1})"
            ) from e
        raise ConfigError(f"{config_path} is malformed: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping of options")
    return data


def load_config(
    config_path: Path | str | None = None,
    repo_root: Path | None = None,
    git_dir: Path | None = None,
) -> HookConfig:
    """Load the hook configuration.

    Args:
        config_path: Explicit override file. If None, searches default locations.
        repo_root: Repository top level, used for the fallback lookup.
        git_dir: Repository git directory; its hooks/ folder is searched first.
    """
    if config_path is None:
        config_path = find_config(repo_root, git_dir)

    if config_path is None:
        logger.debug("No %s found, using built-in defaults", CONFIG_FILENAME)
        return HookConfig()

    config_path = Path(config_path)
    logger.debug("Loading config from %s", config_path)
    return config_from_mapping(read_override(config_path))


def validate_config(config: HookConfig) -> list[str]:
    """Return a list of problems with the resolved config (empty when valid)."""
    errors = []

    if not config.file_pattern:
        errors.append("file_pattern: must not be empty")

    for key in _REGEX_KEYS:
        pattern = getattr(config, key)
        if not pattern:
            continue
        try:
            re.compile(pattern)
        except re.error as e:
            errors.append(f"{key}: invalid regex: {e}")

    if config.phpmd_active and not config.phpmd_rulesets:
        errors.append("phpmd_rulesets: required when phpmd is active")

    return errors


def dump_config(config: HookConfig) -> str:
    """Render a config as YAML, in the same shape the override file uses."""
    return yaml.safe_dump(asdict(config), sort_keys=False, default_flow_style=False)
