"""Errors raised by the scanner."""

from __future__ import annotations


class TraversalError(Exception):
    """
    A filesystem failure while listing a directory or stating an entry.

    The first such failure aborts the scan. The offending path is kept on
    `path` and the original `OSError` is chained as `__cause__`.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        reason = cause.strerror or str(cause)
        super().__init__(f"{path}: {reason}")
        self.path: str = path
        self.cause: OSError = cause
