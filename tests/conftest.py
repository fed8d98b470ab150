# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from lintrc.factory import ConfigFragmentFactory
from lintrc.modules import ModuleResolver


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Return an empty project root inside the temporary directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def resolver() -> ModuleResolver:
    """Return a resolver that never looks at ``sys.path``."""
    return ModuleResolver(search_path=[])


@pytest.fixture
def factory(project: Path, resolver: ModuleResolver) -> ConfigFragmentFactory:
    return ConfigFragmentFactory(cwd=project, resolver=resolver)


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    """Return a helper writing dedented text to a path, creating parent directories."""
    return _write
