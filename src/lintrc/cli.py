# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command line interface for inspecting resolved configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from .errors import ConfigError
from .factory import ConfigFragmentFactory
from .fragments import ConfigFragment, FragmentSequence
from .schema import load_config_schema

app = typer.Typer(help="Resolve and inspect lint configuration files.", no_args_is_help=True)
config_app = typer.Typer(help="Inspect, validate, and describe config files.", no_args_is_help=True)
app.add_typer(config_app, name="config")


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Render status lines through a rich console honouring emoji settings."""

    console: Console
    use_emoji: bool = True

    def fail(self, message: str) -> None:
        """Print a failure line.

        Args:
            message: Text describing the failure state.
        """

        self._print("❌ ", message, "bold red")

    def ok(self, message: str) -> None:
        """Print a success line.

        Args:
            message: Text describing the successful state.
        """

        self._print("✅ ", message, "bold green")

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout without styling."""

        typer.echo(message)

    def _print(self, symbol: str, message: str, style: str) -> None:
        text = Text(symbol if self.use_emoji else "")
        text.append(message, style=style)
        self.console.print(text, soft_wrap=True)


def build_cli_logger(*, emoji: bool = True, debug: bool = False) -> CLILogger:
    """Return a ``CLILogger`` and route library debug records to rich when requested.

    Args:
        emoji: Whether status lines may include emoji glyphs.
        debug: Whether ``lintrc`` debug records should be rendered.

    Returns:
        CLILogger: Logger writing to standard output.
    """

    console = Console(highlight=False)
    if debug:
        package_logger = logging.getLogger("lintrc")
        if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
            package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
        package_logger.setLevel(logging.DEBUG)
    return CLILogger(console=console, use_emoji=emoji)


@config_app.command("show", help="Print the effective configuration for a file as JSON.")
def config_show(
    target: Annotated[Path, typer.Argument(help="File whose configuration is printed.")],
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Use this config file instead of searching the target's directory."),
    ] = None,
    cwd: Annotated[Path, typer.Option("--cwd", help="Project root used for plugin resolution.")] = Path(),
    fragments: Annotated[
        bool,
        typer.Option("--fragments", help="Print the flattened fragment list instead of the merged result."),
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log config resolution details.")] = False,
) -> None:
    """Print the configuration that applies to ``target``."""

    logger = build_cli_logger(debug=debug)
    try:
        factory = ConfigFragmentFactory(cwd=cwd.resolve())
        target_path = (factory.cwd / target).resolve()
        sequence = _load_sequence(factory, target_path, config_file)
        if fragments:
            payload: Any = [_fragment_payload(fragment) for fragment in sequence.matching(target_path)]
        else:
            payload = sequence.extract(target_path).to_config_file_content().model_dump(by_alias=True)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    logger.echo(json.dumps(payload, indent=2, sort_keys=True))


@config_app.command("validate", help="Load a config file and report whether it is valid.")
def config_validate(
    config_file: Annotated[Path, typer.Argument(help="Config file to validate.")],
    cwd: Annotated[Path, typer.Option("--cwd", help="Project root used for plugin resolution.")] = Path(),
    debug: Annotated[bool, typer.Option("--debug", help="Log config resolution details.")] = False,
) -> None:
    """Validate ``config_file`` including everything it extends."""

    logger = build_cli_logger(debug=debug)
    try:
        factory = ConfigFragmentFactory(cwd=cwd.resolve())
        sequence = factory.load_file(config_file)
        _raise_dependency_failures(sequence)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    logger.ok(f"{config_file} is valid ({len(sequence)} fragments)")


@config_app.command("schema", help="Print the JSON schema used to validate config data.")
def config_schema() -> None:
    """Print the bundled config schema as JSON."""

    build_cli_logger().echo(json.dumps(load_config_schema(), indent=2))


def _load_sequence(factory: ConfigFragmentFactory, target: Path, config_file: Path | None) -> FragmentSequence:
    if config_file is not None:
        return factory.load_file(config_file)
    return factory.load_on_directory(target.parent)


def _raise_dependency_failures(sequence: FragmentSequence) -> None:
    failures = [
        str(dependency.error)
        for fragment in sequence
        for dependency in (fragment.parser, *(fragment.plugins or {}).values())
        if dependency is not None and not dependency.ok
    ]
    if failures:
        raise CLIError("\n".join(failures))


def _fragment_payload(fragment: ConfigFragment) -> dict[str, Any]:
    return {
        "name": fragment.name,
        "filePath": fragment.file_path,
        "criteria": fragment.criteria.to_json() if fragment.criteria is not None else None,
        "parser": fragment.parser.to_json() if fragment.parser is not None else None,
        "plugins": {plugin_id: plugin.to_json() for plugin_id, plugin in (fragment.plugins or {}).items()},
        "root": fragment.root,
        "rules": dict(fragment.rules or {}),
    }


def main() -> None:
    """Run the ``lintrc`` command line application."""

    app()


__all__ = ["CLIError", "CLILogger", "app", "build_cli_logger", "config_app", "main"]
