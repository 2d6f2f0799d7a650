"""Tests for config file loading and merging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pytest

from secretscan.config import (
    ConfigError,
    SecretscanConfig,
    find_config_file,
    load_config,
    merge_cli_with_config,
    resolve_exclusions,
    resolve_rules,
)
from secretscan.scanner.defaults import (
    DEFAULT_EXCLUDE_DIR_NAMES,
    DEFAULT_INCLUDE_EXTENSIONS,
    DEFAULT_INCLUDE_NAMES,
    DEFAULT_RULES,
)


def test_find_config_secretscan_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text("verbose = true\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_dot_secretscan_toml_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "secretscan.toml").write_text("verbose = true\n")
    dot_config = tmp_path / ".secretscan.toml"
    dot_config.write_text("verbose = false\n")
    assert find_config_file(tmp_path) == dot_config


def test_find_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text("[tool.secretscan]\nmax-depth = 2\n")
    assert find_config_file(tmp_path) == config_file


def test_find_config_pyproject_without_section_skipped(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
    assert find_config_file(tmp_path) is None


def test_find_config_walks_up(tmp_path: Path) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text("verbose = true\n")
    subdir = tmp_path / "sub" / "deep"
    subdir.mkdir(parents=True)
    assert find_config_file(subdir) == config_file


def test_find_config_none_when_missing(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None


def test_load_config_top_level_keys(tmp_path: Path) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text(
        "verbose = true\n"
        "max-depth = 3\n"
        "respect-ignore-file = false\n"
        'extend-exclude-dirs = ["fixtures"]\n'
    )
    config = load_config(config_file)
    assert config.verbose is True
    assert config.max_depth == 3
    assert config.respect_ignore_file is False
    assert config.extend_exclude_dirs == ["fixtures"]
    # Unset fields should be None (not set)
    assert config.exclude_dirs is None
    assert config.include_names is None


def test_load_config_rule_tables(tmp_path: Path) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text(
        "[include]\n"
        'names = [".env"]\n'
        "\n"
        "[extend-include]\n"
        'extensions = [".crt"]\n'
        "\n"
        "[exclude]\n"
        'paths = ["docs/*"]\n'
        "\n"
        "[extend-exclude]\n"
        'names = ["dummy"]\n'
    )
    config = load_config(config_file)
    assert config.include_names == [".env"]
    assert config.extend_include_extensions == [".crt"]
    assert config.exclude_paths == ["docs/*"]
    assert config.extend_exclude_names == ["dummy"]
    assert config.include_paths is None


def test_load_config_pyproject_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text(
        "[tool.secretscan]\nverbose = true\n\n[tool.secretscan.extend-include]\npaths = ['deploy/*']\n"
    )
    config = load_config(config_file)
    assert config.verbose is True
    assert config.extend_include_paths == ["deploy/*"]


def test_load_config_malformed_toml(tmp_path: Path) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text("this is not valid toml [[[")
    with pytest.raises(ConfigError) as exc:
        load_config(config_file)
    assert str(config_file) in str(exc.value)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.toml")


@pytest.mark.parametrize(
    "content",
    [
        'extend-exclude-dirs = "fixtures"\n',
        "[include]\nnames = [1, 2]\n",
        'verbose = "yes"\n',
        "max-depth = -1\n",
        "max-depth = true\n",
    ],
)
def test_load_config_wrong_types(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text(content)
    with pytest.raises(ConfigError):
        load_config(config_file)


def test_load_config_warns_unknown_keys(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_file = tmp_path / "secretscan.toml"
    config_file.write_text("unknown_key = true\nverbose = true\n")
    with caplog.at_level(logging.WARNING, logger="secretscan.config"):
        config = load_config(config_file)
    assert config.verbose is True
    assert "unrecognized config key" in caplog.text


def test_resolve_rules_defaults() -> None:
    assert resolve_rules(None) == DEFAULT_RULES


def test_resolve_rules_replace_and_extend() -> None:
    config = SecretscanConfig(
        include_names=["passwords"],
        extend_include_names=["vault"],
        extend_include_extensions=[".crt"],
        exclude_paths=["docs/*"],
    )
    rules = resolve_rules(config)
    assert rules.include_names == ("passwords", "vault")
    assert rules.include_extensions == (*DEFAULT_INCLUDE_EXTENSIONS, ".crt")
    assert rules.exclude_paths == ("docs/*",)
    # Untouched lists keep their defaults
    assert rules.exclude_names == DEFAULT_RULES.exclude_names
    assert "passwords" not in DEFAULT_INCLUDE_NAMES


def test_resolve_rules_replace_with_empty_list() -> None:
    rules = resolve_rules(SecretscanConfig(include_names=[], include_extensions=[]))
    assert rules.include_names == ()
    assert rules.include_extensions == ()


def test_resolve_exclusions() -> None:
    assert resolve_exclusions(None).names == tuple(DEFAULT_EXCLUDE_DIR_NAMES)

    extended = resolve_exclusions(SecretscanConfig(extend_exclude_dirs=["fixtures"]))
    assert extended.names == (*DEFAULT_EXCLUDE_DIR_NAMES, "fixtures")

    replaced = resolve_exclusions(
        SecretscanConfig(exclude_dirs=["only_this"], extend_exclude_dirs=["and_this"])
    )
    assert replaced.names == ("only_this", "and_this")


@dataclass
class _Opts:
    verbose: bool = False
    max_depth: int = 0
    respect_ignore_file: bool = True


def test_merge_no_config() -> None:
    result = merge_cli_with_config(_Opts(), config=None, explicit_flags=set())
    assert result == _Opts()


def test_merge_config_overrides_defaults() -> None:
    config = SecretscanConfig(verbose=True, max_depth=2, respect_ignore_file=False)
    result = merge_cli_with_config(_Opts(), config=config, explicit_flags=set())
    assert result.verbose is True
    assert result.max_depth == 2
    assert result.respect_ignore_file is False


def test_merge_explicit_cli_overrides_config() -> None:
    config = SecretscanConfig(max_depth=2)
    result = merge_cli_with_config(_Opts(max_depth=5), config=config, explicit_flags={"max_depth"})
    assert result.max_depth == 5


def test_merge_ignores_fields_missing_on_options() -> None:
    config = SecretscanConfig(include_names=[".env"])
    result = merge_cli_with_config(_Opts(), config=config, explicit_flags=set())
    assert not hasattr(result, "include_names")


@pytest.mark.parametrize(
    "content",
    ['[tool]\nsecretscan = "x"\n', 'tool = "x"\n', "[tool]\nsecretscan = [1]\n"],
)
def test_load_config_pyproject_section_not_a_table(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / "pyproject.toml"
    config_file.write_text(content)
    with pytest.raises(ConfigError) as exc:
        load_config(config_file)
    assert "must be a table" in str(exc.value)


def test_find_config_pyproject_tool_not_a_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('tool = "x"\n')
    assert find_config_file(tmp_path) is None
