"""Glob and ignore-list matching shared by the render walker."""

from __future__ import annotations

import fnmatch
import os
import re
from collections.abc import Iterable

from ..config import IgnoreMatch


class PatternSet:
    """A set of ``copy_without_render`` globs compiled once up front.

    Patterns use :mod:`fnmatch` syntax and are matched case-sensitively
    against the whole output-relative POSIX path.  ``*`` also crosses ``/``,
    so ``*.png`` matches ``assets/logo.png``.
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns: tuple[str, ...] = tuple(patterns)
        self._compiled: tuple[re.Pattern[str], ...] = tuple(
            re.compile(fnmatch.translate(p)) for p in self.patterns
        )

    def matches(self, path: str) -> bool:
        """Return ``True`` if *path* matches any of the patterns."""
        return any(regex.match(path) for regex in self._compiled)

    def __len__(self) -> int:
        return len(self._compiled)

    def __repr__(self) -> str:
        return f"PatternSet({list(self.patterns)!r})"


def is_ignored(
    rel_path: str,
    ignore: Iterable[str],
    mode: IgnoreMatch = IgnoreMatch.COMPONENT,
) -> bool:
    """Return ``True`` if *rel_path* is covered by an entry of *ignore*.

    An entry covers a path it equals.  With ``IgnoreMatch.PREFIX`` it also
    covers any path it is a raw string prefix of (``src`` covers
    ``src-extra/a.txt``); with ``IgnoreMatch.COMPONENT`` the prefix must end
    on a path separator (``src`` covers ``src/a.txt`` only).

    Surrounding slashes are dropped in component mode only; a raw prefix such
    as ``docs/`` covers what is beneath ``docs`` but not ``docs`` itself.
    """
    for entry in ignore:
        if mode is IgnoreMatch.COMPONENT:
            entry = entry.strip("/")
        if not entry:
            continue
        if rel_path == entry:
            return True
        if mode is IgnoreMatch.PREFIX:
            if rel_path.startswith(entry):
                return True
        elif rel_path.startswith(entry + "/"):
            return True
    return False


def is_vcs_dir(name: str, vcs_dirs: Iterable[str]) -> bool:
    """Return ``True`` if the directory *name* holds version-control metadata."""
    return name in vcs_dirs


def stays_inside(rel: str) -> bool:
    """Return ``True`` if the relative path *rel* cannot escape its root."""
    if os.path.isabs(rel):
        return False
    normalized = os.path.normpath(rel)
    return normalized != ".." and not normalized.startswith(".." + os.sep)
