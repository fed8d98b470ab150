# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Bundled fallback parser used when ``parser: espree`` cannot be resolved.

It only tokenizes source text; the lint engine treats the result as an
opaque ``Program`` node.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

PARSER_NAME: Final[str] = "espree"

_TOKEN_RE = re.compile(
    r"""
    (?P<Comment>//[^\n]*|/\*.*?\*/)
    |(?P<String>"(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)
    |(?P<Numeric>\b\d+(?:\.\d+)?(?:[eE][+-]?\d+)?\b)
    |(?P<Identifier>[A-Za-z_$][\w$]*)
    |(?P<Punctuator>=>|\.\.\.|[=!]==?|[<>]=?|&&|\|\||\?\?|[-+*/%&|^~!?:;,.(){}\[\]=])
    """,
    re.VERBOSE | re.DOTALL,
)


def tokenize(text: str) -> list[dict[str, Any]]:
    """Split ``text`` into tokens carrying ``type``, ``value`` and ``range``."""

    tokens: list[dict[str, Any]] = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup or "Punctuator"
        tokens.append({"type": kind, "value": match.group(), "range": [match.start(), match.end()]})
    return tokens


def parse(text: str, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return a ``Program`` node holding the tokens of ``text``."""

    settings = dict(options or {})
    tokens = tokenize(text)
    return {
        "type": "Program",
        "sourceType": settings.get("sourceType", "script"),
        "range": [0, len(text)],
        "body": [],
        "tokens": [token for token in tokens if token["type"] != "Comment"],
        "comments": [token for token in tokens if token["type"] == "Comment"],
    }


__all__ = ["PARSER_NAME", "parse", "tokenize"]
