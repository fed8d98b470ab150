# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Readers that turn a single config source into plain data.

Every reader re-reads the file from disk; nothing here is cached.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

import yaml

from .errors import ConfigFieldNotFoundError, SourceReadError
from .modules import FreshModuleEvaluator, ModuleEvaluator
from .types import MANIFEST_CONFIG_FIELD, PACKAGE_MANIFEST

LOGGER = logging.getLogger(__name__)

BOM: Final[str] = "\ufeff"
CONFIG_MODULE_ATTRIBUTE: Final[str] = "config"


def read_text(path: Path) -> str:
    """Return the UTF-8 contents of ``path`` without a leading byte-order mark."""

    text = path.read_text(encoding="utf-8")
    return text[len(BOM) :] if text.startswith(BOM) else text


def strip_json_comments(text: str) -> str:
    """Blank out ``//`` and ``/* */`` comments outside of JSON strings.

    Comment characters are replaced with spaces (newlines are kept) so that
    parser error positions still point at the original text.

    Args:
        text: JSON document that may contain comments.

    Returns:
        str: Document with comments removed.
    """

    result: list[str] = []
    index = 0
    length = len(text)
    in_string = False
    while index < length:
        char = text[index]
        if in_string:
            result.append(char)
            if char == "\\" and index + 1 < length:
                result.append(text[index + 1])
                index += 2
                continue
            if char == '"':
                in_string = False
            index += 1
            continue
        if char == '"':
            in_string = True
            result.append(char)
            index += 1
            continue
        pair = text[index : index + 2]
        if pair == "//":
            end = text.find("\n", index)
            end = length if end == -1 else end
            result.append(" " * (end - index))
            index = end
            continue
        if pair == "/*":
            end = text.find("*/", index + 2)
            end = length if end == -1 else end + 2
            result.append("".join(ch if ch in "\r\n" else " " for ch in text[index:end]))
            index = end
            continue
        result.append(char)
        index += 1
    return "".join(result)


def load_json_config(path: Path) -> Any:
    """Parse a JSON config file that may contain comments."""

    LOGGER.debug("Loading JSON config file: %s", path)
    try:
        return json.loads(strip_json_comments(read_text(path)))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SourceReadError(path, str(exc)) from exc


def load_yaml_config(path: Path) -> Any:
    """Parse a YAML config file; an empty document yields ``{}``."""

    LOGGER.debug("Loading YAML config file: %s", path)
    try:
        return yaml.safe_load(read_text(path)) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise SourceReadError(path, str(exc)) from exc


def load_legacy_config(path: Path) -> Any:
    """Parse an extension-less ``.eslintrc`` holding JSON (with comments) or YAML."""

    LOGGER.debug("Loading legacy config file: %s", path)
    try:
        return yaml.safe_load(strip_json_comments(read_text(path))) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise SourceReadError(path, str(exc)) from exc


def load_python_config(path: Path, evaluator: ModuleEvaluator | None = None) -> Any:
    """Execute a Python config file and return its module-level ``config`` value.

    Args:
        path: Python config source.
        evaluator: Module evaluator; defaults to a fresh, uncached evaluator.

    Returns:
        Any: Value bound to ``config`` in the executed module.

    Raises:
        SourceReadError: If the module fails to execute or exports no ``config``.
    """

    LOGGER.debug("Loading Python config file: %s", path)
    if not path.is_file():
        raise FileNotFoundError(path)
    runner = evaluator or FreshModuleEvaluator()
    try:
        module = runner.evaluate(path)
    except Exception as exc:  # arbitrary code may raise anything
        raise SourceReadError(path, f"{type(exc).__name__}: {exc}") from exc
    if not hasattr(module, CONFIG_MODULE_ATTRIBUTE):
        raise SourceReadError(path, f"module does not define '{CONFIG_MODULE_ATTRIBUTE}'")
    return getattr(module, CONFIG_MODULE_ATTRIBUTE)


def load_package_json_config(path: Path) -> Any:
    """Return the nested ``eslintConfig`` field of a ``package.json`` manifest.

    Raises:
        ConfigFieldNotFoundError: If the manifest has no ``eslintConfig`` field.
    """

    LOGGER.debug("Loading package.json config file: %s", path)
    package_data = load_json_config(path)
    if not isinstance(package_data, Mapping) or MANIFEST_CONFIG_FIELD not in package_data:
        raise ConfigFieldNotFoundError(path, f"{PACKAGE_MANIFEST} file doesn't have '{MANIFEST_CONFIG_FIELD}' field.")
    return package_data[MANIFEST_CONFIG_FIELD]


def load_config_source(path: Path, *, evaluator: ModuleEvaluator | None = None) -> Any:
    """Read ``path`` with the reader matching its file extension.

    Args:
        path: Config source to read.
        evaluator: Module evaluator used for Python sources.

    Returns:
        Any: Parsed config data.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        SourceReadError: If the source cannot be parsed.
    """

    if not path.is_file():
        raise FileNotFoundError(path)
    suffix = path.suffix
    if suffix == ".py":
        return load_python_config(path, evaluator)
    if suffix == ".json":
        if path.name == PACKAGE_MANIFEST:
            return load_package_json_config(path)
        return load_json_config(path)
    if suffix in {".yaml", ".yml"}:
        return load_yaml_config(path)
    return load_legacy_config(path)


__all__ = [
    "load_config_source",
    "load_json_config",
    "load_legacy_config",
    "load_package_json_config",
    "load_python_config",
    "load_yaml_config",
    "read_text",
    "strip_json_comments",
]
