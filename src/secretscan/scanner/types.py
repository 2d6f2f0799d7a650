"""Immutable rule and exclusion types consumed by the walker and matcher."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


def _as_tuple(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(values)


@dataclass(frozen=True)
class ExclusionSet:
    """
    Ordered directory base names pruned during traversal.

    Matching is exact name equality: `node_modules` prunes `node_modules`
    but not `node_modules_backup`.
    """

    names: tuple[str, ...] = ()

    @classmethod
    def of(cls, names: Iterable[str]) -> ExclusionSet:
        return cls(_as_tuple(names))

    def contains(self, dirname: str) -> bool:
        return dirname in self.names

    def extended(self, names: Iterable[str]) -> ExclusionSet:
        """New set with `names` appended (duplicates dropped, order kept)."""
        merged = list(self.names)
        for name in names:
            if name not in merged:
                merged.append(name)
        return ExclusionSet(tuple(merged))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class ClassificationRules:
    """
    Six ordered pattern lists. The exclude family is always checked before
    the include family, and the first hit in either decides.

    `*_names` match as case-insensitive substrings of the file name,
    `*_extensions` as case-insensitive equality with the extension
    (leading dot included), `*_paths` as globs against any suffix of the
    relative path.
    """

    exclude_names: tuple[str, ...] = ()
    exclude_extensions: tuple[str, ...] = ()
    exclude_paths: tuple[str, ...] = ()
    include_names: tuple[str, ...] = ()
    include_extensions: tuple[str, ...] = ()
    include_paths: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        exclude_names: Iterable[str] = (),
        exclude_extensions: Iterable[str] = (),
        exclude_paths: Iterable[str] = (),
        include_names: Iterable[str] = (),
        include_extensions: Iterable[str] = (),
        include_paths: Iterable[str] = (),
    ) -> ClassificationRules:
        """Build rules from any iterables (lists from config files, etc.)."""
        return cls(
            exclude_names=_as_tuple(exclude_names),
            exclude_extensions=_as_tuple(exclude_extensions),
            exclude_paths=_as_tuple(exclude_paths),
            include_names=_as_tuple(include_names),
            include_extensions=_as_tuple(include_extensions),
            include_paths=_as_tuple(include_paths),
        )

    def is_empty(self) -> bool:
        return not any(
            (
                self.exclude_names,
                self.exclude_extensions,
                self.exclude_paths,
                self.include_names,
                self.include_extensions,
                self.include_paths,
            )
        )

