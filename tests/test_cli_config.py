# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for configuration commands."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from typer.testing import CliRunner

from lintrc.cli import app

WriteFile = Callable[[Path, str], Path]


def test_config_show_outputs_effective_config(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(
        project / ".eslintrc.json",
        """
        {
          "env": {"node": true},
          "rules": {"semi": "error"},
          "overrides": [{"files": "*.ts", "rules": {"semi": ["warn", "always"]}}]
        }
        """,
    )

    result = runner.invoke(app, ["config", "show", "a.ts", "--cwd", str(project)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["env"] == {"node": True}
    assert payload["rules"] == {"semi": ["warn", "always"]}
    assert payload["parserOptions"] == {}


def test_config_show_with_explicit_config(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / ".eslintrc.json", '{"rules": {"ignored": "error"}}')
    write_file(project / "ci.yaml", "rules:\n  quotes: [error, single]")

    result = runner.invoke(app, ["config", "show", "src/a.js", "--cwd", str(project), "--config", "ci.yaml"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["rules"] == {"quotes": ["error", "single"]}


def test_config_show_fragments(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / ".eslintrc.json", '{"overrides": [{"files": "*.ts", "rules": {"semi": "off"}}]}')

    result = runner.invoke(app, ["config", "show", "a.ts", "--cwd", str(project), "--fragments"])

    assert result.exit_code == 0
    fragments = json.loads(result.stdout)
    assert [fragment["name"] for fragment in fragments] == [".eslintrc.json", ".eslintrc.json#overrides[0]"]
    assert fragments[1]["criteria"]["AND"] == [{"includes": ["*.ts"], "excludes": []}]


def test_config_show_reports_errors(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / ".eslintrc.json", '{"extends": "does-not-exist"}')

    result = runner.invoke(app, ["config", "show", "a.js", "--cwd", str(project)])

    assert result.exit_code == 1
    assert 'Failed to load config "does-not-exist" to extend from.' in result.stdout


def test_config_validate_success(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / "lint.json", '{"extends": "eslint:recommended"}')

    result = runner.invoke(app, ["config", "validate", "lint.json", "--cwd", str(project)])

    assert result.exit_code == 0
    assert "is valid (2 fragments)" in result.stdout


def test_config_validate_failure(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / "lint.json", '{"severity_rules": 42}')

    result = runner.invoke(app, ["config", "validate", "lint.json", "--cwd", str(project)])

    assert result.exit_code == 1
    assert "invalid" in result.stdout.lower()


def test_config_validate_reports_missing_plugins(project: Path, write_file: WriteFile) -> None:
    runner = CliRunner()
    write_file(project / "lint.json", '{"plugins": ["absent"]}')

    result = runner.invoke(app, ["config", "validate", "lint.json", "--cwd", str(project)])

    assert result.exit_code == 1
    assert "Failed to load plugin eslint-plugin-absent" in result.stdout


def test_config_schema_outputs_json() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["config", "schema"])

    assert result.exit_code == 0
    schema = json.loads(result.stdout)
    assert "overrides" in schema["properties"]
