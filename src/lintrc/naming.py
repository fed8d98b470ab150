# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for conventional plugin and shareable-config package names."""

from __future__ import annotations

import re
from pathlib import PurePosixPath, PureWindowsPath

_RELATIVE_PATH_RE = re.compile(r"^\.{1,2}[/\\]")


def is_file_path(name_or_path: str) -> bool:
    """Return ``True`` when ``name_or_path`` is a relative or absolute file path.

    Args:
        name_or_path: Module name or file path taken from config data.

    Returns:
        bool: ``True`` for ``./x``, ``../x`` and absolute paths.
    """

    return bool(
        _RELATIVE_PATH_RE.match(name_or_path)
        or PurePosixPath(name_or_path).is_absolute()
        or PureWindowsPath(name_or_path).is_absolute()
    )


def normalize_package_name(name: str, prefix: str) -> str:
    """Expand a short plugin/config name into its conventional package name.

    ``foo`` becomes ``<prefix>-foo``, ``@scope`` becomes ``@scope/<prefix>``
    and ``@scope/foo`` becomes ``@scope/<prefix>-foo``. Names that already
    carry the prefix are returned unchanged.

    Args:
        name: Name as written in the config.
        prefix: Package prefix such as ``eslint-plugin``.

    Returns:
        str: Fully qualified package name.
    """

    normalized = name.replace("\\", "/")
    if normalized.startswith("@"):
        shortcut = re.compile(rf"^(@[^/]+)(?:/(?:{re.escape(prefix)})?)?$")
        if shortcut.match(normalized):
            return shortcut.sub(rf"\1/{prefix}", normalized)
        package = normalized.split("/", 1)[1]
        if not re.match(rf"^{re.escape(prefix)}(-|$)", package):
            return re.sub(r"^@([^/]+)/(?!eslint-)(.*)$", rf"@\1/{prefix}-\2", normalized)
        return normalized
    if not normalized.startswith(f"{prefix}-"):
        return f"{prefix}-{normalized}"
    return normalized


def get_shorthand_name(fullname: str, prefix: str) -> str:
    """Return the short id for a conventional package name.

    Args:
        fullname: Package name produced by :func:`normalize_package_name`.
        prefix: Package prefix such as ``eslint-plugin``.

    Returns:
        str: ``foo`` for ``<prefix>-foo``, ``@scope`` for ``@scope/<prefix>``
        and ``@scope/foo`` for ``@scope/<prefix>-foo``.
    """

    if fullname.startswith("@"):
        if match := re.match(rf"^(@[^/]+)/{re.escape(prefix)}$", fullname):
            return match.group(1)
        if match := re.match(rf"^(@[^/]+)/{re.escape(prefix)}-(.+)$", fullname):
            return f"{match.group(1)}/{match.group(2)}"
    elif fullname.startswith(f"{prefix}-"):
        return fullname[len(prefix) + 1 :]
    return fullname


__all__ = ["get_shorthand_name", "is_file_path", "normalize_package_name"]
