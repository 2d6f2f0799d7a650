"""Tool-specific ignore file handling using pathspec."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".secretscanignore"


def _read_ignore_file(path: Path) -> pathspec.GitIgnoreSpec | None:
    """
    Read an ignore file in gitignore syntax and return a compiled spec, or
    `None` if the file is missing, unreadable, not UTF-8, or has no patterns.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
    lines = [
        line for line in text.splitlines() if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return pathspec.GitIgnoreSpec.from_lines(lines)


def load_ignore_file(
    root: str | Path, filename: str = IGNORE_FILENAME
) -> pathspec.GitIgnoreSpec | None:
    """Load `{root}/.secretscanignore`, or `None` if there isn't a usable one."""
    spec = _read_ignore_file(Path(root) / filename)
    if spec is not None:
        logger.debug("Loaded ignore file: %s", Path(root) / filename)
    return spec


def filter_ignored(
    matches: Sequence[str], spec: pathspec.GitIgnoreSpec | None, sep: str = os.sep
) -> list[str]:
    """
    Drop matches covered by the ignore spec, keeping order. Paths are relative
    to the scan root and use `sep`; pathspec expects `/`.
    """
    if spec is None:
        return list(matches)
    kept: list[str] = []
    for rel_path in matches:
        if spec.match_file(rel_path.replace(sep, "/")):
            logger.debug("Suppressed by ignore file: %s", rel_path)
            continue
        kept.append(rel_path)
    return kept
