"""
High-level scanning entry point: resolves configuration into rules and
exclusions, runs the walker, and applies the ignore file.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from secretscan.config import SecretscanConfig, resolve_exclusions, resolve_rules
from secretscan.scanner import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_RULES,
    ClassificationRules,
    ExclusionSet,
    NullProgress,
    ProgressSink,
    TreeWalker,
)
from secretscan.scanner.ignore import filter_ignored, load_ignore_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanSettings:
    """Everything a scan needs, resolved once before the walk starts."""

    rules: ClassificationRules = field(default_factory=lambda: DEFAULT_RULES)
    exclusions: ExclusionSet = field(default_factory=lambda: DEFAULT_EXCLUDE_DIRS)
    respect_ignore_file: bool = True

    @classmethod
    def from_config(cls, config: SecretscanConfig | None) -> ScanSettings:
        respect = True
        if config is not None and config.respect_ignore_file is not None:
            respect = config.respect_ignore_file
        return cls(
            rules=resolve_rules(config),
            exclusions=resolve_exclusions(config),
            respect_ignore_file=respect,
        )


class _DeferredSummary:
    """Forwards traversal events but holds back the summary until ignore filtering."""

    def __init__(self, inner: ProgressSink) -> None:
        self._inner: ProgressSink = inner

    def on_visit(self, path: str) -> None:
        self._inner.on_visit(path)

    def on_file_scanned(self) -> None:
        self._inner.on_file_scanned()

    def on_summary(self, matches: Sequence[str]) -> None:
        pass


def scan_directory(
    root: str | Path,
    settings: ScanSettings | None = None,
    progress: ProgressSink | None = None,
) -> list[str]:
    """
    Scan `root` for secret candidates and return their root-relative paths
    in traversal order, minus anything covered by `.secretscanignore`.

    Raises `TraversalError` if the tree cannot be read.
    """
    settings = settings or ScanSettings()
    sink = progress if progress is not None else NullProgress()
    logger.debug(
        "Scanning %s (%d pruned dir names, rules empty: %s)",
        root,
        len(settings.exclusions),
        settings.rules.is_empty(),
    )

    walker = TreeWalker(settings.exclusions, settings.rules, _DeferredSummary(sink))
    matches = walker.scan(root)
    if settings.respect_ignore_file:
        matches = filter_ignored(matches, load_ignore_file(root))

    sink.on_summary(matches)
    return matches
