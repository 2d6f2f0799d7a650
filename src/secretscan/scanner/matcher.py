"""
Classification of a single relative path against `ClassificationRules`.

All functions here are pure and never touch the filesystem.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache

from secretscan.scanner.types import ClassificationRules


def file_extension(filename: str) -> str:
    """
    Extension of `filename` including the leading dot, or `""` if it has none.

    The extension starts at the last dot, so dotfiles count as extensions
    (`.env` -> `.env`, `app.env.local` -> `.local`).
    """
    i = filename.rfind(".")
    if i < 0:
        return ""
    return filename[i:]


def _class_char(pattern: str, i: int, sep: str) -> tuple[str | None, int]:
    """Read one (possibly escaped) character inside a `[...]` class."""
    if i >= len(pattern) or pattern[i] in "-]":
        return None, i
    if pattern[i] == "\\" and sep != "\\":
        i += 1
        if i >= len(pattern):
            return None, i
    return pattern[i], i + 1


def _translate_class(pattern: str, i: int, sep: str) -> tuple[str | None, int]:
    """Translate the class starting just after `[`. Returns `(None, i)` if malformed."""
    n = len(pattern)
    negate = False
    if i < n and pattern[i] in "^!":
        negate = True
        i += 1
    items: list[str] = []
    nrange = 0
    while True:
        if i >= n:
            return None, i
        if pattern[i] == "]" and nrange:
            i += 1
            break
        lo, i = _class_char(pattern, i, sep)
        if lo is None:
            return None, i
        if i < n and pattern[i] == "-":
            hi, i = _class_char(pattern, i + 1, sep)
            if hi is None:
                return None, i
            # An inverted range is empty: legal, but it matches nothing.
            if lo <= hi:
                items.append(f"{re.escape(lo)}-{re.escape(hi)}")
        else:
            items.append(re.escape(lo))
        nrange += 1
    body = "".join(items)
    if not body:
        return (".", i) if negate else ("(?!)", i)
    return (f"[^{body}]" if negate else f"[{body}]"), i


@lru_cache(maxsize=1024)
def compile_glob(pattern: str, sep: str = os.sep) -> re.Pattern[str] | None:
    """
    Compile a shell filename glob into a regex for full matching, or `None`
    if the pattern is malformed.

    `*` matches any run of non-separator characters, `?` one non-separator
    character, `[...]` a character class (`^` or `!` negates, `a-z` ranges)
    and a backslash escapes the next character (except where the separator
    itself is a backslash).
    """
    not_sep = f"[^{re.escape(sep)}]"
    parts: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == "*":
            # Consecutive stars are equivalent to one.
            if not parts or parts[-1] != not_sep + "*":
                parts.append(not_sep + "*")
        elif c == "?":
            parts.append(not_sep)
        elif c == "[":
            translated, i = _translate_class(pattern, i, sep)
            if translated is None:
                return None
            parts.append(translated)
        elif c == "\\" and sep != "\\":
            if i >= n:
                return None
            parts.append(re.escape(pattern[i]))
            i += 1
        else:
            parts.append(re.escape(c))
    return re.compile("".join(parts), re.DOTALL)


def match_path_pattern(pattern: str, path: str, sep: str = os.sep) -> bool:
    """
    Match a glob against `path` and every suffix of it that starts after a
    separator, so `.kamal/*` matches `.kamal/secrets` as well as
    `app/nested/.kamal/secrets`.

    Matching is case-sensitive; callers fold case beforehand. Malformed
    patterns never match.
    """
    regex = compile_glob(pattern, sep)
    if regex is None:
        return False
    while True:
        if regex.fullmatch(path):
            return True
        i = path.find(sep)
        if i < 0:
            return False
        path = path[i + 1 :]


def _contains_any(lower_filename: str, patterns: tuple[str, ...]) -> bool:
    return any(pattern.lower() in lower_filename for pattern in patterns)


def _extension_in(ext: str, patterns: tuple[str, ...]) -> bool:
    if not ext:
        return False
    lower_ext = ext.lower()
    return any(lower_ext == pattern.lower() for pattern in patterns)


def _path_matches_any(lower_path: str, patterns: tuple[str, ...], sep: str) -> bool:
    return any(match_path_pattern(pattern.lower(), lower_path, sep) for pattern in patterns)


def is_secret_file(rel_path: str, rules: ClassificationRules, sep: str = os.sep) -> bool:
    """
    Decide whether `rel_path` (relative to the scan root) is a secret candidate.

    Exclude rules are checked first (names, extensions, paths), then include
    rules in the same order. The first list that matches decides; no match
    means not secret. Everything is case-insensitive.
    """
    filename = rel_path.rsplit(sep, 1)[-1]
    ext = file_extension(filename)
    lower_filename = filename.lower()
    lower_path = rel_path.lower()

    if _contains_any(lower_filename, rules.exclude_names):
        return False
    if _extension_in(ext, rules.exclude_extensions):
        return False
    if _path_matches_any(lower_path, rules.exclude_paths, sep):
        return False

    if _contains_any(lower_filename, rules.include_names):
        return True
    if _extension_in(ext, rules.include_extensions):
        return True
    if _path_matches_any(lower_path, rules.include_paths, sep):
        return True

    return False
