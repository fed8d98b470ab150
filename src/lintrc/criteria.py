# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Compiled ``files``/``excludedFiles`` matchers for override blocks."""

from __future__ import annotations

import os
import posixpath
import re
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath

from .errors import ConfigSchemaError

PatternInput = str | Sequence[str] | None


@dataclass(frozen=True, slots=True)
class GlobMatcher:
    """Single shell-glob pattern compiled to a regular expression.

    Patterns without a ``/`` are matched against the basename only, and
    wildcards match leading dots.
    """

    pattern: str
    regex: re.Pattern[str]
    match_base: bool
    negated: bool = False

    @classmethod
    def compile(cls, pattern: str) -> GlobMatcher:
        """Compile ``pattern``; leading ``!`` characters toggle negation.

        Args:
            pattern: Glob pattern as written in the config.

        Returns:
            GlobMatcher: Matcher for ``pattern``.

        Raises:
            re.error: If the translated pattern is not a valid expression.
        """

        negated = False
        body = pattern
        while body.startswith("!"):
            negated = not negated
            body = body[1:]
        if body.startswith("./"):
            body = body[2:]
        return cls(
            pattern=pattern,
            regex=re.compile(translate_glob(body), re.DOTALL),
            match_base="/" not in body,
            negated=negated,
        )

    def match(self, relative_path: str) -> bool:
        """Return ``True`` when ``relative_path`` (``/`` separated) matches."""

        subject = posixpath.basename(relative_path) if self.match_base else relative_path
        return (self.regex.fullmatch(subject) is not None) != self.negated


@dataclass(frozen=True, slots=True)
class PatternGroup:
    """Include/exclude pair coming from one ``overrides`` entry."""

    includes: tuple[GlobMatcher, ...]
    excludes: tuple[GlobMatcher, ...]

    def test(self, relative_path: str) -> bool:
        """Return ``True`` when ``relative_path`` matches an include and no exclude."""

        if self.includes and not any(matcher.match(relative_path) for matcher in self.includes):
            return False
        return not any(matcher.match(relative_path) for matcher in self.excludes)


@dataclass(frozen=True, slots=True)
class OverrideCriteria:
    """File matcher scoping a config fragment to specific files.

    A criteria holds one :class:`PatternGroup` per override level it was
    composed from; a path matches only when every group accepts it.
    Patterns are evaluated relative to ``base_path``.
    """

    patterns: tuple[PatternGroup, ...]
    base_path: Path

    @classmethod
    def create(
        cls,
        files: PatternInput,
        excluded_files: PatternInput,
        base_path: Path,
        *,
        source: str = "",
    ) -> OverrideCriteria | None:
        """Compile ``files``/``excludedFiles`` into a criteria.

        Args:
            files: Glob pattern or patterns a target must match.
            excluded_files: Glob pattern or patterns a target must not match.
            base_path: Directory the patterns are relative to.
            source: Config name used in error messages.

        Returns:
            OverrideCriteria | None: ``None`` when no pattern was given.

        Raises:
            ConfigSchemaError: If a pattern is absolute, contains ``..`` or does
                not compile.
        """

        includes = _normalize_patterns(files, source)
        excludes = _normalize_patterns(excluded_files, source)
        if not includes and not excludes:
            return None
        group = PatternGroup(
            includes=tuple(_compile(pattern, source) for pattern in includes),
            excludes=tuple(_compile(pattern, source) for pattern in excludes),
        )
        return cls(patterns=(group,), base_path=base_path)

    @staticmethod
    def and_(first: OverrideCriteria | None, second: OverrideCriteria | None) -> OverrideCriteria | None:
        """Return a criteria requiring both operands; ``None`` operands are ignored."""

        if first is None:
            return second
        if second is None:
            return first
        return OverrideCriteria(patterns=first.patterns + second.patterns, base_path=first.base_path)

    def with_base_path(self, base_path: Path) -> OverrideCriteria:
        """Return a copy evaluating patterns relative to ``base_path``.

        Args:
            base_path: Directory the patterns become relative to.

        Returns:
            OverrideCriteria: Criteria with the same pattern groups.
        """

        return replace(self, base_path=base_path)

    def test(self, file_path: Path | str) -> bool:
        """Return ``True`` when the absolute ``file_path`` satisfies every pattern group.

        Raises:
            ValueError: If ``file_path`` is not absolute.
        """

        target = Path(file_path)
        if not target.is_absolute():
            raise ValueError(f"'file_path' should be an absolute path: {file_path}")
        try:
            relative = os.path.relpath(target, self.base_path)
        except ValueError:
            return False
        relative_path = relative.replace(os.sep, "/")
        return all(group.test(relative_path) for group in self.patterns)

    def to_json(self) -> dict[str, object]:
        """Return a serialisable description of the pattern groups and base path."""

        return {
            "AND": [
                {
                    "includes": [matcher.pattern for matcher in group.includes],
                    "excludes": [matcher.pattern for matcher in group.excludes],
                }
                for group in self.patterns
            ],
            "basePath": str(self.base_path),
        }


def translate_glob(pattern: str) -> str:
    """Translate a shell glob into a regular expression body.

    Supports ``*``, ``?``, ``**`` path segments, ``[...]`` classes and
    ``{a,b}`` alternation. ``*`` and ``?`` never cross a ``/``.

    Args:
        pattern: Glob pattern using ``/`` separators.

    Returns:
        str: Regular expression suitable for :func:`re.fullmatch`.
    """

    out: list[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "*":
            end = index
            while end < length and pattern[end] == "*":
                end += 1
            starts_segment = index == 0 or pattern[index - 1] == "/"
            ends_segment = end == length or pattern[end] == "/"
            if end - index > 1 and starts_segment and ends_segment:
                if end < length:
                    out.append("(?:[^/]*/)*")
                    index = end + 1
                else:
                    out.append(".*")
                    index = end
                continue
            out.append("[^/]*")
            index = end
            continue
        if char == "?":
            out.append("[^/]")
        elif char == "[":
            close = pattern.find("]", index + 2)
            if close == -1:
                out.append(re.escape(char))
            else:
                body = pattern[index + 1 : close]
                if body[0] in "!^":
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                index = close + 1
                continue
        elif char == "{":
            close = _matching_brace(pattern, index)
            alternatives = _split_alternatives(pattern[index + 1 : close]) if close != -1 else []
            if len(alternatives) > 1:
                out.append("(?:" + "|".join(translate_glob(option) for option in alternatives) + ")")
                index = close + 1
                continue
            out.append(re.escape(char))
        elif char == "\\" and index + 1 < length:
            out.append(re.escape(pattern[index + 1]))
            index += 2
            continue
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out)


def _matching_brace(pattern: str, start: int) -> int:
    depth = 0
    for position in range(start, len(pattern)):
        if pattern[position] == "{":
            depth += 1
        elif pattern[position] == "}":
            depth -= 1
            if depth == 0:
                return position
    return -1


def _split_alternatives(body: str) -> list[str]:
    options: list[str] = []
    depth = 0
    current: list[str] = []
    for char in body:
        if char == "," and depth == 0:
            options.append("".join(current))
            current = []
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current.append(char)
    options.append("".join(current))
    return options


def _compile(pattern: str, source: str) -> GlobMatcher:
    try:
        return GlobMatcher.compile(pattern)
    except re.error as exc:
        raise ConfigSchemaError(source, [f"Invalid override pattern ({exc}): {pattern}"]) from exc


def _normalize_patterns(patterns: PatternInput, source: str) -> list[str]:
    if patterns is None:
        return []
    values = [patterns] if isinstance(patterns, str) else list(patterns)
    for pattern in values:
        if PurePosixPath(pattern).is_absolute() or ".." in pattern.split("/"):
            raise ConfigSchemaError(
                source,
                [f"Invalid override pattern (expected relative path not containing '..'): {pattern}"],
            )
    return values


__all__ = ["GlobMatcher", "OverrideCriteria", "PatternGroup", "translate_glob"]
