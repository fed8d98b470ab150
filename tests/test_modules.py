# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for module resolution and uncached evaluation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from lintrc.modules import FreshModuleEvaluator, ModuleEvaluator, ModuleResolver


def test_resolves_relative_file_requests_with_suffix_probing(tmp_path: Path, resolver: ModuleResolver) -> None:
    parser = tmp_path / "tools" / "my_parser.py"
    parser.parent.mkdir()
    parser.write_text("", encoding="utf-8")

    resolved = resolver.resolve("./tools/my_parser", tmp_path / ".eslintrc.json")

    assert resolved == parser.resolve()


def test_resolves_package_names_from_ancestor_directories(tmp_path: Path, resolver: ModuleResolver) -> None:
    plugin = tmp_path / "eslint-plugin-demo.py"
    plugin.write_text("", encoding="utf-8")
    importer = tmp_path / "a" / "b" / ".eslintrc.json"

    assert resolver.resolve("eslint-plugin-demo", importer) == plugin.resolve()


def test_resolves_scoped_names_to_importable_packages(tmp_path: Path, resolver: ModuleResolver) -> None:
    package_init = tmp_path / "scope" / "eslint_config" / "__init__.py"
    package_init.parent.mkdir(parents=True)
    package_init.write_text("config = {}\n", encoding="utf-8")

    resolved = resolver.resolve("@scope/eslint-config", tmp_path / ".eslintrc")

    assert resolved == package_init.resolve()


def test_search_path_is_probed_after_ancestors(tmp_path: Path) -> None:
    site = tmp_path / "site"
    (site / "eslint-config-shared.json").parent.mkdir()
    (site / "eslint-config-shared.json").write_text("{}", encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()

    resolved = ModuleResolver(search_path=[site]).resolve("eslint-config-shared", project / ".eslintrc")

    assert resolved == (site / "eslint-config-shared.json").resolve()


def test_missing_module_raises_module_not_found(tmp_path: Path, resolver: ModuleResolver) -> None:
    with pytest.raises(ModuleNotFoundError) as excinfo:
        resolver.resolve("eslint-plugin-absent", tmp_path / ".eslintrc")

    assert excinfo.value.name == "eslint-plugin-absent"


def test_fresh_evaluator_reads_current_source(tmp_path: Path) -> None:
    source = tmp_path / "plugin.py"
    source.write_text("VALUE = 1\n", encoding="utf-8")
    evaluator = FreshModuleEvaluator()

    first = evaluator.evaluate(source)
    source.write_text("VALUE = 2\n", encoding="utf-8")
    second = evaluator.evaluate(source)

    assert isinstance(evaluator, ModuleEvaluator)
    assert (first.VALUE, second.VALUE) == (1, 2)
    assert first.__name__ not in sys.modules
    assert second.__name__ not in sys.modules


def test_fresh_evaluator_supports_package_relative_imports(tmp_path: Path) -> None:
    package = tmp_path / "eslint_plugin_pkg"
    package.mkdir()
    (package / "rules.py").write_text("RULES = {'r': 1}\n", encoding="utf-8")
    (package / "__init__.py").write_text("from .rules import RULES as rules\n", encoding="utf-8")

    module = FreshModuleEvaluator().evaluate(package / "__init__.py")

    assert module.rules == {"r": 1}


def test_fresh_evaluator_forgets_relatively_imported_submodules(tmp_path: Path) -> None:
    package = tmp_path / "eslint_plugin_nested"
    package.mkdir()
    (package / "helpers.py").write_text("NAME = 'helper'\n", encoding="utf-8")
    (package / "__init__.py").write_text("from . import helpers\n", encoding="utf-8")

    module = FreshModuleEvaluator().evaluate(package / "__init__.py")

    assert module.helpers.NAME == "helper"
    assert not [name for name in sys.modules if name.startswith(module.__name__)]
