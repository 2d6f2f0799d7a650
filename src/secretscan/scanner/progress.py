"""
Progress sinks: observers notified by the walker as it traverses a tree.

The walker owns no output state. It calls `on_visit` for every directory and
file it enters, `on_file_scanned` once per file, and `on_summary` once after a
successful scan.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import Protocol, TextIO


class ProgressSink(Protocol):
    def on_visit(self, path: str) -> None: ...

    def on_file_scanned(self) -> None: ...

    def on_summary(self, matches: Sequence[str]) -> None: ...


class NullProgress:
    """Discards all events."""

    def on_visit(self, path: str) -> None:
        pass

    def on_file_scanned(self) -> None:
        pass

    def on_summary(self, matches: Sequence[str]) -> None:
        pass


class ConsoleProgress:
    """
    Writes progress to a text stream (stderr by default).

    With `verbose`, every visited path is printed, limited to entries at most
    `max_depth` levels below `root` (0 = no limit). The summary line is always
    printed.
    """

    def __init__(
        self,
        root: str,
        *,
        verbose: bool = False,
        max_depth: int = 0,
        stream: TextIO | None = None,
    ) -> None:
        self._root: str = os.path.normpath(root)
        self._verbose: bool = verbose
        self._max_depth: int = max_depth
        self._stream: TextIO = stream if stream is not None else sys.stderr
        self.scanned: int = 0

    def depth_of(self, path: str) -> int:
        """Number of levels `path` sits below the root (the root itself is 0)."""
        rel = os.path.relpath(os.path.normpath(path), self._root)
        if rel == os.curdir:
            return 0
        return rel.count(os.sep) + 1

    def on_visit(self, path: str) -> None:
        if not self._verbose:
            return
        if self._max_depth and self.depth_of(path) > self._max_depth:
            return
        print(f"Scanning: {path}", file=self._stream)

    def on_file_scanned(self) -> None:
        self.scanned += 1

    def on_summary(self, matches: Sequence[str]) -> None:
        print(
            f"Scanned {self.scanned} files, found {len(matches)} secret file(s)",
            file=self._stream,
        )
