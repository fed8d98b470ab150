# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for config source readers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from lintrc.errors import ConfigFieldNotFoundError, SourceReadError
from lintrc.io import load_config_source, strip_json_comments


def test_strip_json_comments_keeps_strings_and_line_numbers() -> None:
    text = '{\n  // leading\n  "url": "http://example.com", /* block\n comment */ "a": 1\n}'

    stripped = strip_json_comments(text)

    assert json.loads(stripped) == {"url": "http://example.com", "a": 1}
    assert stripped.count("\n") == text.count("\n")


def test_json_source_with_bom_and_comments(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.json"
    path.write_text('\ufeff{\n  // comment\n  "rules": {"semi": "error"}\n}\n', encoding="utf-8")

    assert load_config_source(path) == {"rules": {"semi": "error"}}


def test_yaml_source_and_empty_yaml(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.yaml"
    path.write_text("rules:\n  semi: [error, always]\n", encoding="utf-8")
    empty = tmp_path / ".eslintrc.yml"
    empty.write_text("", encoding="utf-8")

    assert load_config_source(path) == {"rules": {"semi": ["error", "always"]}}
    assert load_config_source(empty) == {}


def test_legacy_source_accepts_json_and_yaml(tmp_path: Path) -> None:
    json_style = tmp_path / "json" / ".eslintrc"
    json_style.parent.mkdir()
    json_style.write_text('{\n  // old style\n  "root": true\n}\n', encoding="utf-8")
    yaml_style = tmp_path / "yaml" / ".eslintrc"
    yaml_style.parent.mkdir()
    yaml_style.write_text("root: true\nenv:\n  node: true\n", encoding="utf-8")

    assert load_config_source(json_style) == {"root": True}
    assert load_config_source(yaml_style) == {"root": True, "env": {"node": True}}


def test_python_source_exports_config(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.py"
    path.write_text('SEVERITY = "warn"\nconfig = {"rules": {"semi": SEVERITY}}\n', encoding="utf-8")

    assert load_config_source(path) == {"rules": {"semi": "warn"}}


def test_python_source_is_reevaluated_after_edit(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.py"
    path.write_text('config = {"root": True}\n', encoding="utf-8")
    first = load_config_source(path)
    path.write_text('config = {"root": False}\n', encoding="utf-8")

    assert first == {"root": True}
    assert load_config_source(path) == {"root": False}


def test_python_source_without_config_attribute(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.py"
    path.write_text("rules = {}\n", encoding="utf-8")

    with pytest.raises(SourceReadError, match="does not define 'config'"):
        load_config_source(path)


def test_python_source_errors_are_wrapped(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.py"
    path.write_text("import lintrc_module_that_does_not_exist\nconfig = {}\n", encoding="utf-8")

    with pytest.raises(SourceReadError) as excinfo:
        load_config_source(path)

    assert str(excinfo.value).startswith(f"Cannot read config file: {path}\nError: ModuleNotFoundError")
    assert isinstance(excinfo.value.__cause__, ModuleNotFoundError)


def test_invalid_json_raises_source_read_error(tmp_path: Path) -> None:
    path = tmp_path / ".eslintrc.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(SourceReadError, match="Cannot read config file"):
        load_config_source(path)


def test_package_json_nested_field(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "demo", "eslintConfig": {"env": {"browser": True}}}), encoding="utf-8")

    assert load_config_source(path) == {"env": {"browser": True}}


def test_package_json_without_field(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "demo"}), encoding="utf-8")

    with pytest.raises(ConfigFieldNotFoundError, match="doesn't have 'eslintConfig' field"):
        load_config_source(path)


def test_missing_source_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config_source(tmp_path / ".eslintrc.json")
