"""
Self-contained secret file detection: directory traversal with name-based
pruning, and filename/extension/path classification.

No imports from `secretscan` outside this package.

Usage::

    from secretscan.scanner import DEFAULT_EXCLUDE_DIRS, DEFAULT_RULES, TreeWalker

    walker = TreeWalker(DEFAULT_EXCLUDE_DIRS, DEFAULT_RULES)
    matches = walker.scan("path/to/project")
"""

from secretscan.scanner.defaults import DEFAULT_EXCLUDE_DIRS, DEFAULT_RULES
from secretscan.scanner.errors import TraversalError
from secretscan.scanner.matcher import is_secret_file, match_path_pattern
from secretscan.scanner.progress import ConsoleProgress, NullProgress, ProgressSink
from secretscan.scanner.types import ClassificationRules, ExclusionSet
from secretscan.scanner.walker import TreeWalker, scan

__all__ = [
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_RULES",
    "ClassificationRules",
    "ConsoleProgress",
    "ExclusionSet",
    "NullProgress",
    "ProgressSink",
    "TraversalError",
    "TreeWalker",
    "is_secret_file",
    "match_path_pattern",
    "scan",
]
