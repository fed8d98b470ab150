# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for configuration resolution."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
ConfigData: TypeAlias = Mapping[str, Any]

CONFIG_KEYS: Final[frozenset[str]] = frozenset(
    {
        "env",
        "extends",
        "globals",
        "overrides",
        "parser",
        "parserOptions",
        "plugins",
        "processor",
        "root",
        "rules",
        "settings",
    },
)
OVERRIDE_KEYS: Final[frozenset[str]] = CONFIG_KEYS | {"files", "excludedFiles"}

CONFIG_FILENAMES: Final[tuple[str, ...]] = (
    ".eslintrc.py",
    ".eslintrc.yaml",
    ".eslintrc.yml",
    ".eslintrc.json",
    ".eslintrc",
    "package.json",
)
PACKAGE_MANIFEST: Final[str] = "package.json"
MANIFEST_CONFIG_FIELD: Final[str] = "eslintConfig"
IMPLICIT_CONFIG_NAME: Final[str] = ".eslintrc"

BUILTIN_PREFIX: Final[str] = "eslint:"
PLUGIN_PREFIX: Final[str] = "plugin:"
PLUGIN_PACKAGE_PREFIX: Final[str] = "eslint-plugin"
CONFIG_PACKAGE_PREFIX: Final[str] = "eslint-config"
DEFAULT_PARSER_ID: Final[str] = "espree"

__all__ = [
    "BUILTIN_PREFIX",
    "CONFIG_FILENAMES",
    "CONFIG_KEYS",
    "CONFIG_PACKAGE_PREFIX",
    "ConfigData",
    "DEFAULT_PARSER_ID",
    "IMPLICIT_CONFIG_NAME",
    "JSONPrimitive",
    "JSONValue",
    "MANIFEST_CONFIG_FIELD",
    "OVERRIDE_KEYS",
    "PACKAGE_MANIFEST",
    "PLUGIN_PACKAGE_PREFIX",
    "PLUGIN_PREFIX",
]
