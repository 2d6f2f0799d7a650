"""
TOML-based config file loading for secretscan.

Searches for `.secretscan.toml`, `secretscan.toml`, or `pyproject.toml
[tool.secretscan]` walking up from the scan root. Config values are merged
with CLI flags using three-way precedence: explicit CLI flags > config file >
built-in defaults.

Rule tables::

    [include]            # replaces the built-in include lists it names
    names = [".env"]

    [extend-exclude]     # appends to the built-in exclude lists
    paths = ["fixtures/*"]

Each of `include`, `exclude`, `extend-include`, `extend-exclude` accepts
`names`, `extensions`, and `paths`. Top-level `exclude-dirs` replaces the
default pruned directory names, `extend-exclude-dirs` adds to them.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

from secretscan.scanner.defaults import (
    DEFAULT_EXCLUDE_DIR_NAMES,
    DEFAULT_EXCLUDE_EXTENSIONS,
    DEFAULT_EXCLUDE_NAMES,
    DEFAULT_EXCLUDE_PATHS,
    DEFAULT_INCLUDE_EXTENSIONS,
    DEFAULT_INCLUDE_NAMES,
    DEFAULT_INCLUDE_PATHS,
)
from secretscan.scanner.types import ClassificationRules, ExclusionSet

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """A config file could not be read, parsed, or has values of the wrong type."""


@dataclass
class SecretscanConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Output
    verbose: bool | None = None
    max_depth: int | None = None
    respect_ignore_file: bool | None = None
    # Traversal
    exclude_dirs: list[str] | None = None
    extend_exclude_dirs: list[str] | None = None
    # Classification (replace defaults)
    include_names: list[str] | None = None
    include_extensions: list[str] | None = None
    include_paths: list[str] | None = None
    exclude_names: list[str] | None = None
    exclude_extensions: list[str] | None = None
    exclude_paths: list[str] | None = None
    # Classification (extend defaults)
    extend_include_names: list[str] | None = None
    extend_include_extensions: list[str] | None = None
    extend_include_paths: list[str] | None = None
    extend_exclude_names: list[str] | None = None
    extend_exclude_extensions: list[str] | None = None
    extend_exclude_paths: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".secretscan.toml", "secretscan.toml", "pyproject.toml"]

# Tables whose keys are prefixed with the table name (`[extend-exclude] paths`
# becomes `extend_exclude_paths`)
_RULE_TABLES = {"include", "exclude", "extend-include", "extend-exclude"}

_FIELD_TYPES: dict[str, type] = {
    "verbose": bool,
    "max_depth": int,
    "respect_ignore_file": bool,
}

_VALID_FIELDS = {f.name for f in fields(SecretscanConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.secretscan.toml` >
    `secretscan.toml` > `pyproject.toml` (only if it has `[tool.secretscan]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_secretscan_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_secretscan_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.secretscan] section."""
    try:
        data = tomllib.loads(path.read_text())
        tool = data.get("tool", {})
        return isinstance(tool, dict) and "secretscan" in tool
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> SecretscanConfig:
    """
    Load a `SecretscanConfig` from a TOML file. Supports both standalone
    `secretscan.toml` / `.secretscan.toml` and `pyproject.toml` (extracts
    `[tool.secretscan]`). TOML kebab-case keys are mapped to Python snake_case.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        tool = data.get("tool", {})
        data = tool.get("secretscan", {}) if isinstance(tool, dict) else None
        if not isinstance(data, dict):
            raise ConfigError(f"[tool.secretscan] in {config_path} must be a table")

    logger.debug("Loaded config from %s", config_path)
    return _parse_config_data(data, config_path)


def _parse_config_data(data: dict[str, Any], source: Path | None = None) -> SecretscanConfig:
    """Parse a TOML dict (rule tables plus top-level keys) into SecretscanConfig."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key in _RULE_TABLES and isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[f"{key}-{sub_key}"] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            logger.warning("Ignoring unrecognized config key %r in %s", key, source or "config")
            continue
        _check_type(snake_key, value, source)
        mapped[snake_key] = value

    return SecretscanConfig(**mapped)


def _check_type(name: str, value: Any, source: Path | None) -> None:
    where = f" in {source}" if source else ""
    expected = _FIELD_TYPES.get(name)
    if expected is None:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"`{name}`{where} must be a list of strings")
    elif expected is int:
        # bool is a subclass of int
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ConfigError(f"`{name}`{where} must be a non-negative integer")
    elif not isinstance(value, expected):
        raise ConfigError(f"`{name}`{where} must be a {expected.__name__}")


def _merged(base: list[str], replace: list[str] | None, extend: list[str] | None) -> list[str]:
    result = list(replace) if replace is not None else list(base)
    return result + (extend or [])


def resolve_rules(config: SecretscanConfig | None) -> ClassificationRules:
    """Combine built-in patterns with config replacements and extensions."""
    cfg = config or SecretscanConfig()
    return ClassificationRules.build(
        exclude_names=_merged(DEFAULT_EXCLUDE_NAMES, cfg.exclude_names, cfg.extend_exclude_names),
        exclude_extensions=_merged(
            DEFAULT_EXCLUDE_EXTENSIONS, cfg.exclude_extensions, cfg.extend_exclude_extensions
        ),
        exclude_paths=_merged(DEFAULT_EXCLUDE_PATHS, cfg.exclude_paths, cfg.extend_exclude_paths),
        include_names=_merged(DEFAULT_INCLUDE_NAMES, cfg.include_names, cfg.extend_include_names),
        include_extensions=_merged(
            DEFAULT_INCLUDE_EXTENSIONS, cfg.include_extensions, cfg.extend_include_extensions
        ),
        include_paths=_merged(DEFAULT_INCLUDE_PATHS, cfg.include_paths, cfg.extend_include_paths),
    )


def resolve_exclusions(config: SecretscanConfig | None) -> ExclusionSet:
    """Default pruned directory names (or `exclude-dirs`) plus `extend-exclude-dirs`."""
    cfg = config or SecretscanConfig()
    base = cfg.exclude_dirs if cfg.exclude_dirs is not None else DEFAULT_EXCLUDE_DIR_NAMES
    return ExclusionSet.of(base).extended(cfg.extend_exclude_dirs or [])


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: SecretscanConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults. Only
    fields that exist on `cli_opts` are touched.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(SecretscanConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        # Skip if CLI explicitly set this flag
        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
