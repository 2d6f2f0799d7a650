"""
TreeWalker: depth-first traversal that prunes excluded directories and
classifies every file it reaches.
"""

from __future__ import annotations

import errno
import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from secretscan.scanner.errors import TraversalError
from secretscan.scanner.matcher import is_secret_file
from secretscan.scanner.progress import NullProgress, ProgressSink
from secretscan.scanner.types import ClassificationRules, ExclusionSet

logger = logging.getLogger(__name__)


class TreeWalker:
    """
    Walks a directory tree in pre-order, entries sorted by name within each
    directory, and collects the root-relative paths of secret candidates.

    Directories whose base name is in the exclusion set are skipped along
    with everything below them. The root itself is never pruned. Symlinks
    are not followed; they are classified like files.

    One walker runs one scan at a time. Rules and exclusions are read-only
    and may be shared between walkers.
    """

    def __init__(
        self,
        exclusions: ExclusionSet,
        rules: ClassificationRules,
        progress: ProgressSink | None = None,
    ) -> None:
        self._exclusions: ExclusionSet = exclusions
        self._rules: ClassificationRules = rules
        self._progress: ProgressSink = progress if progress is not None else NullProgress()

    def scan(self, root: str | Path) -> list[str]:
        """
        Scan `root` and return matching relative paths in traversal order.

        Raises `TraversalError` on the first filesystem failure, including a
        missing or non-directory root. Nothing is returned in that case.
        """
        root_path = os.fspath(root)
        matches = [rel_path for rel_path in self._walk(root_path) if self._classify(rel_path)]
        self._progress.on_summary(matches)
        return matches

    def _classify(self, rel_path: str) -> bool:
        return is_secret_file(rel_path, self._rules)

    def _walk(self, root: str) -> Iterator[str]:
        """
        Yield the relative path of every file under `root`, reporting each
        visited entry to the progress sink.

        Uses an explicit stack: children are pushed in reverse name order so
        they pop in name order, and a directory is listed only when popped.
        """
        try:
            root_stat = os.stat(root)
        except OSError as e:
            raise TraversalError(root, e) from e
        if not stat.S_ISDIR(root_stat.st_mode):
            cause = NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), root)
            raise TraversalError(root, cause) from cause

        # (path as reported to the sink, path relative to root, is_dir)
        stack: list[tuple[str, str, bool]] = [(root, "", True)]
        while stack:
            path, rel_path, is_dir = stack.pop()
            if not is_dir:
                self._progress.on_file_scanned()
                self._progress.on_visit(path)
                yield rel_path
                continue

            self._progress.on_visit(path)
            children: list[tuple[str, str, bool]] = []
            for entry in self._list_dir(path):
                try:
                    child_is_dir = entry.is_dir(follow_symlinks=False)
                except OSError as e:
                    raise TraversalError(entry.path, e) from e
                if child_is_dir and self._exclusions.contains(entry.name):
                    logger.debug("Pruning excluded directory: %s", entry.path)
                    continue
                child_rel = os.path.join(rel_path, entry.name) if rel_path else entry.name
                children.append((entry.path, child_rel, child_is_dir))
            stack.extend(reversed(children))

    def _list_dir(self, path: str) -> list[os.DirEntry[str]]:
        try:
            with os.scandir(path) as it:
                return sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise TraversalError(path, e) from e


def scan(
    root: str | Path,
    exclusions: ExclusionSet,
    rules: ClassificationRules,
    progress: ProgressSink | None = None,
) -> list[str]:
    """Run a one-off scan with a fresh `TreeWalker`."""
    return TreeWalker(exclusions, rules, progress).scan(root)
